"""Request-scoped sessions and transaction handling.

``get_db`` hands each request its own ``AsyncSession``; ``db_transaction``
turns a service method into a single commit-or-rollback unit of work.
"""

from typing import AsyncGenerator, Callable, Optional, TypeVar
import logging
import inspect
from functools import wraps

from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.exc import SQLAlchemyError

from shortlinks.db.base import get_session

logger = logging.getLogger(__name__)

R = TypeVar("R")


async def get_db() -> AsyncGenerator[AsyncSession, None]:
    """FastAPI dependency yielding one session per request.

    Anything the handler leaves uncommitted when it raises is rolled back.
    """
    async with get_session() as session:
        try:
            yield session
        except SQLAlchemyError:
            logger.exception("Database error while handling request")
            await session.rollback()
            raise
        except Exception:
            await session.rollback()
            raise


def _session_parameter(func: Callable, db_param_name: Optional[str]) -> Optional[str]:
    """Name of the parameter carrying the session, by name or by annotation."""
    parameters = inspect.signature(func).parameters
    if db_param_name is not None:
        param = parameters.get(db_param_name)
        if param is None:
            return None
        if param.annotation is not AsyncSession:
            logger.warning(
                f"'{db_param_name}' of '{func.__qualname__}' is not annotated as AsyncSession"
            )
        return db_param_name
    for name, param in parameters.items():
        if param.annotation is AsyncSession:
            return name
    return None


def db_transaction(db_param_name: Optional[str] = None) -> Callable:
    """Commit the session after the wrapped coroutine returns, roll back if it raises.

    Args:
        db_param_name: Name of the session parameter. When omitted the first
            parameter annotated as ``AsyncSession`` is used.

    Example:
        ```python
        @db_transaction(db_param_name="db")
        async def delete_link(self, db: AsyncSession, code: str) -> None:
            ...
        ```

    Raises:
        ValueError: If the call does not supply a session
    """
    def decorator(func: Callable[..., R]) -> Callable[..., R]:
        signature = inspect.signature(func)
        param = _session_parameter(func, db_param_name)
        if param is None:
            logger.warning(f"No session parameter found on '{func.__qualname__}'")

        @wraps(func)
        async def wrapper(*args, **kwargs):
            db = None
            if param is not None:
                db = signature.bind_partial(*args, **kwargs).arguments.get(param)
            if db is None:
                raise ValueError(f"'{func.__qualname__}' was called without a database session")

            try:
                result = await func(*args, **kwargs)
                await db.commit()
                return result
            except Exception as e:
                await db.rollback()
                logger.debug(f"Rolled back '{func.__qualname__}': {e!r}")
                raise

        return wrapper
    return decorator
