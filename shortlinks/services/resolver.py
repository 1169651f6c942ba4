"""Redirect resolver service for the short links service.

This module contains the RedirectResolver class which resolves a code to
its target URL and records the visit.
"""

import logging
from datetime import datetime
from typing import Optional, Tuple

from sqlalchemy.ext.asyncio import AsyncSession

from shortlinks.repositories.base import RepositoryError
from shortlinks.repositories.link_repository import LinkRepository
from shortlinks.services.exceptions import LinkNotFoundError, StoreError

logger = logging.getLogger(__name__)


class RedirectResolver:
    """
    Service for resolving short codes.

    A redirect always wins over the click counter: if recording the visit
    fails, the failure is logged and the target URL is still returned.
    """

    def __init__(self, link_repository: LinkRepository):
        """
        Initialize the resolver.

        Args:
            link_repository: Repository for link data access
        """
        self.link_repository = link_repository

    async def resolve(self, db: AsyncSession, code: str) -> str:
        """
        Resolve a code to its target URL and record the visit.

        Args:
            db: Database session
            code: The short code being visited

        Returns:
            str: The URL to redirect to

        Raises:
            LinkNotFoundError: If no link with this code exists
            StoreError: If the lookup itself fails
        """
        try:
            link = await self.link_repository.get_by_code(db, code)
        except RepositoryError as e:
            logger.error(f"Error resolving code '{code}': {e}")
            raise StoreError("Failed to resolve link") from e

        if link is None:
            raise LinkNotFoundError(f"Link with code '{code}' not found")

        await self.record_visit(db, code)
        return link.target_url

    async def record_visit(
        self,
        db: AsyncSession,
        code: str
    ) -> Optional[Tuple[int, datetime]]:
        """
        Atomically increment the click counter and commit it.

        Errors are swallowed so the caller can still redirect.

        Returns:
            Tuple of (new click count, visit timestamp), or None if the
            visit could not be recorded
        """
        try:
            visit = await self.link_repository.increment_visit(db, code)
            await db.commit()
        except Exception as e:
            logger.error(f"Error recording visit for '{code}': {e}")
            try:
                await db.rollback()
            except Exception as rollback_error:
                logger.error(f"Rollback after failed visit recording failed: {rollback_error}")
            return None

        if visit is None:
            # Link was deleted between lookup and increment
            logger.warning(f"Visit for '{code}' not recorded, link no longer exists")
            return None

        clicks, visited_at = visit
        logger.debug(f"Recorded visit {clicks} for '{code}' at {visited_at}")
        return visit
