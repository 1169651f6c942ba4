"""API request and response schemas.

This module contains Pydantic models for API request validation
and response serialization.
"""

from typing import Any, Dict

from pydantic import BaseModel

from shortlinks.models.link import LinkRead


class LinkCreateRequest(BaseModel):
    """Request schema for creating a short link.

    Both fields are left untyped and validated by the registry, so a
    missing, malformed or non-string value is reported as a 400 rather
    than a schema error.
    """
    target_url: Any = None
    code: Any = None


class LinkResponse(LinkRead):
    """Response schema for a short link."""
    short_url: str  # Full URL including base domain


class HealthResponse(BaseModel):
    """Response schema for the liveness check."""
    ok: bool
    version: str


class ReadinessResponse(BaseModel):
    """Response schema for the readiness probe."""
    ready: bool
    components: Dict[str, bool]


class ErrorResponse(BaseModel):
    """Response schema for errors."""
    detail: str
