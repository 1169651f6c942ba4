"""Query parameters shared by list endpoints."""

from typing import Optional

from fastapi import Query


def LimitParam(default: Optional[int] = None) -> Optional[int]:
    """Page size; omitted means the server-side maximum."""
    return Query(default, ge=1, description="Maximum number of links to return")


def SkipParam(default: int = 0) -> int:
    """Offset into the newest-first ordering."""
    return Query(default, ge=0, description="Number of links to skip")
