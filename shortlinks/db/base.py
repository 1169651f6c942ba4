"""Async engine, session factory and schema bootstrap.

The engine is built once at import time from ``settings``. Postgres gets a
sized connection pool; SQLite (local runs and tests) gets plain defaults.
"""

from typing import Any, AsyncGenerator, Dict, Optional
import logging
import time
from contextlib import asynccontextmanager

from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)
from sqlalchemy.pool import NullPool
from sqlalchemy.sql import text
from sqlmodel import SQLModel

from shortlinks.core.config import EnvironmentType, settings

logger = logging.getLogger(__name__)


def get_engine_config(database_url: Optional[str] = None) -> Dict[str, Any]:
    """Keyword arguments for ``create_async_engine`` in the current environment."""
    url = database_url or settings.SQLALCHEMY_DATABASE_URI
    environment = settings.ENVIRONMENT

    if environment == EnvironmentType.TESTING:
        return {"echo": False, "poolclass": NullPool}
    if url.startswith("sqlite"):
        return {"echo": settings.DB_ECHO}

    return {
        "echo": settings.DB_ECHO and environment != EnvironmentType.PRODUCTION,
        "pool_size": settings.POSTGRES_POOL_SIZE,
        "max_overflow": settings.POSTGRES_POOL_MAX_OVERFLOW,
        "pool_timeout": settings.POSTGRES_POOL_TIMEOUT,
        "pool_recycle": settings.POSTGRES_POOL_RECYCLE,
        "pool_pre_ping": True,
    }


def get_engine() -> AsyncEngine:
    """Build the application engine from settings."""
    url = settings.SQLALCHEMY_DATABASE_URI
    logger.info(f"Creating database engine ({settings.ENVIRONMENT.value}, {url.split(':', 1)[0]})")
    return create_async_engine(url, **get_engine_config(url))


engine = get_engine()

async_session_factory = async_sessionmaker(
    bind=engine,
    class_=AsyncSession,
    expire_on_commit=False,
    autoflush=False,
)


@asynccontextmanager
async def get_session() -> AsyncGenerator[AsyncSession, None]:
    """Open a session and always close it."""
    session = async_session_factory()
    try:
        yield session
    finally:
        await session.close()


async def create_tables(bind: Optional[AsyncEngine] = None) -> None:
    """Create any missing tables registered on the SQLModel metadata."""
    # Importing the package registers the table models
    from shortlinks import models  # noqa: F401

    async with (bind or engine).begin() as conn:
        await conn.run_sync(SQLModel.metadata.create_all)
    logger.info("Database tables are in place")


class DatabaseHealthCheck:
    """Database reachability probe used by the readiness endpoint."""

    @staticmethod
    async def check_connection(db: AsyncSession) -> Dict[str, Any]:
        """Run ``SELECT 1`` on ``db`` and report status, latency and error."""
        started = time.perf_counter()
        try:
            await db.execute(text("SELECT 1"))
        except Exception as e:
            logger.error(f"Database health check failed: {e}")
            return {"status": "unhealthy", "latency_ms": None, "error": str(e)}

        return {
            "status": "healthy",
            "latency_ms": round((time.perf_counter() - started) * 1000, 2),
            "error": None,
        }
