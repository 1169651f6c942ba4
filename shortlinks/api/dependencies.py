"""API dependencies for FastAPI.

This module provides dependency injection functions for FastAPI endpoints
to access service instances.
"""

from fastapi import Depends

from shortlinks.core.config import settings
from shortlinks.repositories.link_repository import LinkRepository
from shortlinks.services.registry import LinkRegistry
from shortlinks.services.resolver import RedirectResolver


async def get_link_repository() -> LinkRepository:
    """Get an instance of the link repository."""
    return LinkRepository()


async def get_link_registry(
    link_repo: LinkRepository = Depends(get_link_repository),
) -> LinkRegistry:
    """Get an instance of the link registry service."""
    return LinkRegistry(link_repository=link_repo)


async def get_redirect_resolver(
    link_repo: LinkRepository = Depends(get_link_repository),
) -> RedirectResolver:
    """Get an instance of the redirect resolver service."""
    return RedirectResolver(link_repository=link_repo)


def get_base_url() -> str:
    """Get the base URL for short links."""
    return settings.BASE_URL.rstrip("/")
