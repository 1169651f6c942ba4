"""Link Repository for the short links service.

This module provides the LinkRepository class for database operations related to Link models.
Following the Repository pattern, it abstracts database interactions for the link registry
and the redirect resolver.
"""

from datetime import datetime
from typing import List, Optional, Union, Dict, Any, Tuple

from sqlalchemy import select, update, desc, case, literal
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.exc import IntegrityError, SQLAlchemyError

from shortlinks.models.link import Link, LinkCreate, utcnow
from shortlinks.repositories.base import BaseRepository, RepositoryError, DuplicateEntityError

# SQLSTATE for unique_violation
UNIQUE_VIOLATION = "23505"


def _is_unique_violation(error: IntegrityError) -> bool:
    orig = getattr(error, "orig", None)
    sqlstate = getattr(orig, "sqlstate", None) or getattr(orig, "pgcode", None)
    if sqlstate == UNIQUE_VIOLATION:
        return True
    message = str(error).lower()
    return "unique constraint" in message or "duplicate key" in message


class LinkRepository(BaseRepository[Link, LinkCreate]):
    """
    Repository for Link model database operations.

    Besides plain create/read/delete it exposes the atomic visit increment
    used by the redirect path.
    """

    def __init__(self):
        """Initialize the repository with the Link model type."""
        super().__init__(Link)

    async def create_link(
        self,
        db: AsyncSession,
        data: Union[LinkCreate, Dict[str, Any]]
    ) -> Link:
        """
        Insert a new link.

        Uniqueness of the code is left to the database constraint, so two
        concurrent inserts of the same code cannot both succeed.

        Args:
            db: Database session
            data: Link data (either as a LinkCreate model or dictionary)

        Returns:
            The created Link entity

        Raises:
            DuplicateEntityError: If the code already exists
            RepositoryError: On other database errors
        """
        code = data.code if isinstance(data, LinkCreate) else data.get("code")
        try:
            return await self.create(db, data)
        except IntegrityError as e:
            await db.rollback()
            if _is_unique_violation(e):
                raise DuplicateEntityError(self.model_type, "code", code) from e
            raise RepositoryError(f"Database error creating link: {e}") from e
        except SQLAlchemyError as e:
            await db.rollback()
            raise RepositoryError(f"Database error creating link: {e}") from e

    async def get_by_code(self, db: AsyncSession, code: str) -> Optional[Link]:
        """
        Find a link by its code.

        Args:
            db: Database session
            code: The unique short code to look up

        Returns:
            The Link if found, None otherwise

        Raises:
            RepositoryError: On database errors
        """
        try:
            query = (
                select(self.model_type)
                .where(self.model_type.code == code)
                .execution_options(populate_existing=True)
            )
            result = await db.execute(query)
            return result.scalar_one_or_none()
        except SQLAlchemyError as e:
            raise RepositoryError(f"Error retrieving link by code: {e}") from e

    async def check_code_exists(self, db: AsyncSession, code: str) -> bool:
        """Check whether a code is already taken."""
        return await self.exists(db, code=code)

    async def list_links(
        self,
        db: AsyncSession,
        skip: int = 0,
        limit: Optional[int] = None
    ) -> List[Link]:
        """
        Get links ordered by creation date, newest first.

        Raises:
            RepositoryError: On database errors
        """
        return await self.get_all(
            db,
            skip=skip,
            limit=limit,
            order_by=desc(self.model_type.created_at),
        )

    async def delete_by_code(self, db: AsyncSession, code: str) -> bool:
        """
        Delete the link with the given code.

        Returns:
            True if a row was deleted, False if no link matched

        Raises:
            RepositoryError: On database errors
        """
        deleted = await self.bulk_delete(db, code=code)
        return deleted > 0

    async def increment_visit(
        self,
        db: AsyncSession,
        code: str
    ) -> Optional[Tuple[int, datetime]]:
        """
        Record one visit for a link.

        The counter is incremented by a single UPDATE evaluated in the
        database (``clicks = clicks + 1``), so concurrent visits to the
        same code never lose updates. ``last_clicked`` never moves
        backwards when visits commit out of order.

        Args:
            db: Database session
            code: The code that was visited

        Returns:
            Tuple of (new click count, visit timestamp), or None if no link matched

        Raises:
            RepositoryError: On database errors
        """
        visited_at = utcnow()
        last_clicked = self.model_type.last_clicked
        try:
            stmt = (
                update(self.model_type)
                .where(self.model_type.code == code)
                .values(
                    clicks=self.model_type.clicks + 1,
                    last_clicked=case(
                        (last_clicked > visited_at, last_clicked),
                        else_=literal(visited_at, last_clicked.type),
                    ),
                )
                .execution_options(synchronize_session=False)
                .returning(self.model_type.clicks, self.model_type.last_clicked)
            )
            result = await db.execute(stmt)
            row = result.one_or_none()
        except SQLAlchemyError as e:
            raise RepositoryError(f"Error recording visit: {e}") from e

        if row is None:
            return None
        return row[0], row[1]
