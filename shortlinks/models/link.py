"""Short link data models.

This module defines the Link model for storing short codes and the
URLs they redirect to.
"""
import uuid
from datetime import datetime, timezone
from typing import Optional

from sqlalchemy import Index
from sqlmodel import Field, SQLModel


def _new_link_id() -> str:
    return uuid.uuid4().hex


def utcnow() -> datetime:
    """Current time as an aware UTC datetime."""
    return datetime.now(timezone.utc)


class LinkBase(SQLModel):
    """Base model for short link data."""

    code: str = Field(
        description="Unique short code used in the redirect path",
        unique=True,
        max_length=8,
    )
    target_url: str = Field(
        description="The original (long) URL to redirect to"
    )


class Link(LinkBase, table=True):
    """
    Short link model.

    Maps a short code to its target URL together with visit statistics.
    ``clicks`` and ``last_clicked`` are only ever written by the atomic
    visit increment in the repository. Timestamps are aware UTC datetimes
    on the way in and on the way out, SQLite included.
    """

    __tablename__ = "links"

    id: str = Field(default_factory=_new_link_id, primary_key=True, max_length=32)
    clicks: int = Field(
        default=0,
        description="Number of recorded visits"
    )
    last_clicked: Optional[datetime] = Field(
        default=None,
        description="Timestamp of the most recent visit (null until first visit)"
    )
    created_at: datetime = Field(
        default_factory=utcnow,
        description="Timestamp when this link was created"
    )

    __table_args__ = (
        # Listing is always newest first
        Index("ix_links_created_at", "created_at"),
    )


class LinkCreate(LinkBase):
    """Schema for inserting a new link."""
    pass


class LinkRead(LinkBase):
    """Schema for reading a link."""
    id: str
    clicks: int
    last_clicked: Optional[datetime] = None
    created_at: datetime
