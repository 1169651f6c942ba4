"""Health check endpoints for monitoring application status."""

from fastapi import APIRouter, Depends, status
from sqlalchemy.ext.asyncio import AsyncSession

from shortlinks.api import schemas
from shortlinks.core.config import settings
from shortlinks.db.base import DatabaseHealthCheck
from shortlinks.db.session import get_db

router = APIRouter(tags=["health"])


@router.get(
    "/healthz",
    response_model=schemas.HealthResponse,
    status_code=status.HTTP_200_OK,
    summary="Liveness check",
)
async def healthz():
    """Simple check that the application is running."""
    return {"ok": True, "version": settings.APP_VERSION}


@router.get(
    "/health/ready",
    response_model=schemas.ReadinessResponse,
    status_code=status.HTTP_200_OK,
    summary="Readiness probe",
)
async def readiness_probe(db: AsyncSession = Depends(get_db)):
    """Check if the application can reach its database."""
    database = await DatabaseHealthCheck.check_connection(db)
    components_status = {"api": True, "database": database["status"] == "healthy"}
    return {
        "ready": all(components_status.values()),
        "components": components_status,
    }
