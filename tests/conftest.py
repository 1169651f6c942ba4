"""Test fixtures for the short links service."""

import os
import tempfile

# Settings are read at import time, so the test environment must be set first
os.environ["ENVIRONMENT"] = "testing"
os.environ["DEBUG"] = "false"
os.environ["DATABASE_URL"] = "sqlite+aiosqlite:///:memory:"
os.environ["DB_CREATE_TABLES"] = "false"
os.environ["VISIT_LOGGING_ENABLED"] = "false"
os.environ["BASE_URL"] = "http://testserver"
os.environ["LOG_DIR"] = tempfile.mkdtemp(prefix="shortlinks-logs-")

import pytest
import pytest_asyncio
from typing import AsyncGenerator
from fastapi import FastAPI
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine

from shortlinks.db.base import create_tables
from shortlinks.db.session import get_db
from shortlinks.main import app as main_app
from shortlinks.repositories.link_repository import LinkRepository
from shortlinks.services.registry import LinkRegistry
from shortlinks.services.resolver import RedirectResolver


@pytest_asyncio.fixture
async def test_engine(tmp_path):
    """Create a test engine on a fresh SQLite file.

    A file database (rather than :memory:) lets every session use its own
    connection, the way requests do in production.
    """
    engine = create_async_engine(
        f"sqlite+aiosqlite:///{tmp_path / 'links.db'}",
        echo=False
    )
    await create_tables(bind=engine)

    yield engine

    await engine.dispose()


@pytest.fixture
def session_factory(test_engine):
    """Session factory bound to the test engine."""
    return async_sessionmaker(
        bind=test_engine,
        class_=AsyncSession,
        expire_on_commit=False
    )


@pytest_asyncio.fixture
async def test_db(session_factory) -> AsyncGenerator[AsyncSession, None]:
    """Session for direct repository and service calls."""
    async with session_factory() as session:
        yield session


@pytest.fixture
def override_get_db(session_factory):
    """Override the get_db dependency with a per-request test session."""
    async def _override_get_db():
        async with session_factory() as session:
            try:
                yield session
            except Exception:
                await session.rollback()
                raise

    return _override_get_db


@pytest.fixture
def test_app(override_get_db) -> FastAPI:
    """FastAPI app with the database dependency overridden."""
    app = main_app
    app.dependency_overrides[get_db] = override_get_db
    yield app
    app.dependency_overrides.clear()


@pytest_asyncio.fixture
async def client(test_app):
    """Async HTTP client talking to the app in-process."""
    async with AsyncClient(
        transport=ASGITransport(app=test_app),
        base_url="http://testserver"
    ) as ac:
        yield ac


@pytest.fixture
def link_repository():
    """Return a link repository instance."""
    return LinkRepository()


@pytest.fixture
def registry(link_repository):
    """Return a link registry bound to the repository."""
    return LinkRegistry(link_repository=link_repository)


@pytest.fixture
def resolver(link_repository):
    """Return a redirect resolver bound to the repository."""
    return RedirectResolver(link_repository=link_repository)
