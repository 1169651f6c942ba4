"""Generic async repository over SQLModel tables.

Concrete repositories subclass ``BaseRepository`` and add the queries
specific to their model; everything here works for any table model.
"""

from typing import Any, Dict, Generic, List, Optional, Type, TypeVar, Union
import logging

from pydantic import BaseModel
from sqlalchemy import select, func, delete
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.exc import SQLAlchemyError
from sqlmodel import SQLModel

ModelT = TypeVar("ModelT", bound=SQLModel)
CreateT = TypeVar("CreateT", bound=BaseModel)

logger = logging.getLogger(__name__)


class RepositoryError(Exception):
    """Raised when the database layer fails."""


class DuplicateEntityError(RepositoryError):
    """A row with the same unique value is already stored."""

    def __init__(self, model_type: Type[SQLModel], field_name: str, value: Any):
        self.model_type = model_type
        self.field_name = field_name
        self.value = value
        name = getattr(model_type, "__name__", "Entity")
        super().__init__(f"{name} with {field_name}={value} already exists")


class BaseRepository(Generic[ModelT, CreateT]):
    """
    Shared persistence operations for one table model.

    Nothing in here commits. Callers own the transaction and decide when
    to commit or roll back.
    """

    def __init__(self, model_type: Type[ModelT]):
        self.model_type = model_type

    @property
    def model_name(self) -> str:
        return self.model_type.__name__

    def _conditions(self, filters: Dict[str, Any]) -> list:
        if not filters:
            raise ValueError(f"At least one filter is required for {self.model_name}")
        return [getattr(self.model_type, field) == value for field, value in filters.items()]

    async def get_all(
        self,
        db: AsyncSession,
        skip: int = 0,
        limit: Optional[int] = None,
        order_by: Optional[Any] = None
    ) -> List[ModelT]:
        """
        Fetch rows, optionally ordered and paginated.

        Args:
            db: Database session
            skip: Rows to skip from the start of the ordering
            limit: Maximum number of rows, or None for all of them
            order_by: Column expression used for ordering

        Raises:
            RepositoryError: On database errors
        """
        query = select(self.model_type)
        if order_by is not None:
            query = query.order_by(order_by)
        if skip:
            query = query.offset(skip)
        if limit is not None:
            query = query.limit(limit)

        try:
            result = await db.execute(query)
        except SQLAlchemyError as e:
            logger.error(f"Listing {self.model_name} rows failed: {e}")
            raise RepositoryError(f"Database error listing {self.model_name}: {e}") from e
        return list(result.scalars().all())

    async def create(self, db: AsyncSession, data: Union[CreateT, Dict[str, Any]]) -> ModelT:
        """
        Add a row and flush it so defaults are populated.

        SQLAlchemy errors are not wrapped here; subclasses inspect them to
        tell constraint violations apart from other failures.
        """
        values = data.model_dump(exclude_unset=True) if isinstance(data, BaseModel) else data
        entity = self.model_type(**values)
        db.add(entity)
        await db.flush()
        await db.refresh(entity)
        return entity

    async def count(self, db: AsyncSession, **filters) -> int:
        """Number of rows, restricted to ``filters`` when any are given."""
        query = select(func.count()).select_from(self.model_type)
        if filters:
            query = query.where(*self._conditions(filters))
        try:
            result = await db.execute(query)
        except SQLAlchemyError as e:
            logger.error(f"Counting {self.model_name} rows failed: {e}")
            raise RepositoryError(f"Database error counting {self.model_name}: {e}") from e
        return result.scalar_one()

    async def exists(self, db: AsyncSession, **filters) -> bool:
        """True if at least one row matches every field=value filter."""
        self._conditions(filters)
        return await self.count(db, **filters) > 0

    async def bulk_delete(self, db: AsyncSession, **filters) -> int:
        """
        Delete every row matching the field=value filters.

        Returns:
            Number of rows deleted
        """
        stmt = delete(self.model_type).where(*self._conditions(filters))
        try:
            result = await db.execute(stmt)
        except SQLAlchemyError as e:
            logger.error(f"Deleting {self.model_name} rows failed: {e}", exc_info=True)
            raise RepositoryError(f"Database error deleting {self.model_name}: {e}") from e
        return result.rowcount
