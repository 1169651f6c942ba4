"""
Data models for the short links service.

This module imports and exports all SQLModel models used in the application.
"""

from shortlinks.models.link import Link, LinkBase, LinkCreate, LinkRead

__all__ = [
    "Link",
    "LinkBase",
    "LinkCreate",
    "LinkRead",
]
