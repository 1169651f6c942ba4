"""Service layer for the short links service.

This package contains service classes implementing the business logic of the application.
Services orchestrate interactions between repositories and provide domain-specific operations.
"""

from shortlinks.services.registry import LinkRegistry
from shortlinks.services.resolver import RedirectResolver

__all__ = ["LinkRegistry", "RedirectResolver"]
