"""Core module for the short links service."""

from shortlinks.core.config import settings

__all__ = ["settings"]
