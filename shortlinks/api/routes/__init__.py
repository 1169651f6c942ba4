"""HTTP routes.

Management and health endpoints live under ``API_PREFIX``. The redirect
route is mounted last and without a prefix so ``/{code}`` cannot shadow
anything under ``/api``.
"""

from fastapi import APIRouter

from shortlinks.api.routes import health, links, redirect
from shortlinks.core.config import settings

api_router = APIRouter()
api_router.include_router(links.router, prefix=settings.API_PREFIX)
api_router.include_router(health.router, prefix=settings.API_PREFIX)
api_router.include_router(redirect.router)

__all__ = ["api_router"]
