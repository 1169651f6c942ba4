"""Link registry service for the short links service.

This module contains the LinkRegistry class which implements business logic
for creating, retrieving, listing and deleting short links.
"""

import logging
from typing import List, Optional

from sqlalchemy.ext.asyncio import AsyncSession

from shortlinks.core.config import settings
from shortlinks.db.session import db_transaction
from shortlinks.models.link import Link, LinkCreate
from shortlinks.repositories.base import RepositoryError, DuplicateEntityError
from shortlinks.repositories.link_repository import LinkRepository
from shortlinks.services.codes import generate_unique_code, is_valid_code, is_valid_url
from shortlinks.services.exceptions import (
    InvalidUrlError,
    InvalidCodeError,
    CodeConflictError,
    LinkNotFoundError,
    StoreError,
)

logger = logging.getLogger(__name__)


class LinkRegistry:
    """
    Service for short link management.

    The repository is injected so a different store (or a fake in tests)
    can be substituted without touching this class.
    """

    def __init__(self, link_repository: LinkRepository):
        """
        Initialize the registry.

        Args:
            link_repository: Repository for link data access
        """
        self.link_repository = link_repository

    @db_transaction(db_param_name="db")
    async def create_link(
        self,
        db: AsyncSession,
        target_url: Optional[str],
        code: Optional[str] = None
    ) -> Link:
        """
        Create a short link with an optional custom code.

        Args:
            db: Database session
            target_url: The URL the code should redirect to
            code: Optional custom code; generated when empty

        Returns:
            Link: The created link

        Raises:
            InvalidUrlError: If the URL is missing or not http(s)
            InvalidCodeError: If the custom code format is invalid
            CodeConflictError: If the code is already in use
            CodeGenerationExhaustedError: If no free code could be generated
            StoreError: If the database operation fails
        """
        if not target_url:
            raise InvalidUrlError("target_url is required")
        if not is_valid_url(target_url):
            raise InvalidUrlError("Invalid URL format. URL must start with http:// or https://")

        if code is not None and code != "":
            if not is_valid_code(code):
                raise InvalidCodeError(
                    "Invalid code format. Code must be 6-8 alphanumeric characters (A-Z, a-z, 0-9)"
                )
        else:
            try:
                code = await generate_unique_code(
                    lambda candidate: self.link_repository.check_code_exists(db, candidate),
                    attempts=settings.CODE_GENERATION_ATTEMPTS,
                    length=settings.CODE_LENGTH,
                    alphabet=settings.CODE_CHARS,
                )
            except RepositoryError as e:
                logger.error(f"Error checking code availability: {e}")
                raise StoreError("Failed to create link") from e

        try:
            link = await self.link_repository.create_link(
                db, LinkCreate(code=code, target_url=target_url)
            )
        except DuplicateEntityError as e:
            logger.info(f"Code '{code}' is already in use")
            raise CodeConflictError("Code already exists. Please choose a different code.") from e
        except RepositoryError as e:
            logger.error(f"Error creating link: {e}")
            raise StoreError("Failed to create link") from e

        logger.info(f"Created link {link.code} -> {link.target_url}")
        return link

    async def get_link(self, db: AsyncSession, code: str) -> Link:
        """
        Retrieve a link by its code.

        Raises:
            LinkNotFoundError: If no link with this code exists
            StoreError: If the database operation fails
        """
        try:
            link = await self.link_repository.get_by_code(db, code)
        except RepositoryError as e:
            logger.error(f"Error retrieving link by code: {e}")
            raise StoreError("Failed to fetch link") from e

        if link is None:
            raise LinkNotFoundError(f"Link with code '{code}' not found")
        return link

    async def list_links(
        self,
        db: AsyncSession,
        skip: int = 0,
        limit: Optional[int] = None
    ) -> List[Link]:
        """
        List links, newest first.

        Args:
            db: Database session
            skip: Number of records to skip
            limit: Maximum number of records to return

        Returns:
            List[Link]: Links ordered by creation date (descending)

        Raises:
            StoreError: If the database operation fails
        """
        if limit is None or limit > settings.LIST_LIMIT_MAX:
            limit = settings.LIST_LIMIT_MAX
        try:
            return await self.link_repository.list_links(db, skip=skip, limit=limit)
        except RepositoryError as e:
            logger.error(f"Error retrieving links list: {e}")
            raise StoreError("Failed to fetch links") from e

    @db_transaction(db_param_name="db")
    async def delete_link(self, db: AsyncSession, code: str) -> None:
        """
        Delete a link by its code.

        Raises:
            LinkNotFoundError: If no link with this code exists
            StoreError: If the database operation fails
        """
        try:
            deleted = await self.link_repository.delete_by_code(db, code)
        except RepositoryError as e:
            logger.error(f"Error deleting link: {e}")
            raise StoreError("Failed to delete link") from e

        if not deleted:
            raise LinkNotFoundError(f"Link with code '{code}' not found")
        logger.info(f"Deleted link {code}")
