"""Basic tests to verify test DB setup."""

import pytest
from datetime import timedelta, timezone
from sqlalchemy import select, text
from sqlalchemy.exc import IntegrityError

from shortlinks.models.link import Link, utcnow


@pytest.mark.asyncio
async def test_create_tables(test_db):
    """Verify the links table is created and usable."""
    result = await test_db.execute(text("SELECT name FROM sqlite_master WHERE type='table' AND name='links'"))
    tables = [row[0] for row in result.fetchall()]
    assert "links" in tables

    link = Link(
        target_url="https://example.com",
        code="test123",
        created_at=utcnow(),
    )
    test_db.add(link)
    await test_db.commit()

    result = await test_db.execute(select(Link).where(Link.code == "test123"))
    retrieved = result.scalars().first()

    assert retrieved is not None
    assert retrieved.target_url == "https://example.com"
    assert retrieved.clicks == 0
    assert retrieved.last_clicked is None
    assert len(retrieved.id) == 32


@pytest.mark.asyncio
async def test_timestamps_round_trip_as_utc(test_db):
    """Timestamps are stored and read back as aware UTC datetimes."""
    before = utcnow()
    test_db.add(Link(target_url="https://example.com", code="utc1234"))
    await test_db.commit()

    result = await test_db.execute(
        select(Link).where(Link.code == "utc1234").execution_options(populate_existing=True)
    )
    link = result.scalar_one()

    assert link.created_at.utcoffset() == timedelta(0)
    assert link.created_at >= before
    assert link.created_at.tzinfo is not None
    assert link.created_at.astimezone(timezone.utc) == link.created_at


@pytest.mark.asyncio
async def test_code_unique_constraint(test_db):
    """The database itself rejects a second row with the same code."""
    test_db.add(Link(target_url="https://example.com/a", code="same123"))
    await test_db.commit()

    test_db.add(Link(target_url="https://example.com/b", code="same123"))
    with pytest.raises(IntegrityError):
        await test_db.commit()
    await test_db.rollback()
