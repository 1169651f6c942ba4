"""ASGI entry point.

Run with ``uvicorn shortlinks.main:app``.
"""

import uuid

from fastapi import FastAPI, HTTPException, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.encoders import jsonable_encoder
from fastapi.responses import JSONResponse
from fastapi.exceptions import RequestValidationError

from shortlinks.api import api_router
from shortlinks.core.config import settings
from shortlinks.core.logging import setup_logging
from shortlinks.core.url_logger import setup_visit_logging
from shortlinks.db.base import create_tables, engine
from shortlinks.middleware.logging import LoggingMiddleware

logger = setup_logging()

app = FastAPI(
    title=settings.APP_NAME,
    description=settings.APP_DESCRIPTION,
    version=settings.APP_VERSION,
    docs_url="/docs" if settings.DEBUG else None,
    redoc_url="/redoc" if settings.DEBUG else None,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.CORS_ORIGINS,
    allow_methods=["*"],
    allow_headers=["*"],
)
if settings.REQUEST_LOGGING_ENABLED:
    app.add_middleware(LoggingMiddleware)

app.include_router(api_router)


@app.exception_handler(HTTPException)
async def http_exception_handler(request: Request, exc: HTTPException):
    return JSONResponse(status_code=exc.status_code, content={"detail": exc.detail})


LINK_CREATE_PATH = f"{settings.API_PREFIX}/links"


@app.exception_handler(RequestValidationError)
async def validation_exception_handler(request: Request, exc: RequestValidationError):
    """Reject malformed input; a bad link creation body is a 400 like any invalid link."""
    errors = jsonable_encoder(exc.errors())
    logger.warning(f"Rejected {request.method} {request.url.path}: {errors}")
    if request.method == "POST" and request.url.path.rstrip("/") == LINK_CREATE_PATH:
        return JSONResponse(
            status_code=400,
            content={"detail": "Invalid request body", "errors": errors}
        )
    return JSONResponse(
        status_code=422,
        content={"detail": "Validation error", "errors": errors}
    )


@app.exception_handler(Exception)
async def unhandled_exception_handler(request: Request, exc: Exception):
    """Log anything no route handled and answer with an opaque 500."""
    error_id = uuid.uuid4().hex
    logger.bind(
        error_id=error_id,
        url=str(request.url),
        client_host=request.client.host if request.client else None,
    ).opt(exception=exc).error(f"Unhandled exception in {request.method} {request.url.path}")

    return JSONResponse(
        status_code=500,
        content={
            "detail": str(exc) if settings.DEBUG else "Internal server error",
            "error_id": error_id,
        }
    )


@app.on_event("startup")
async def on_startup():
    logger.info(
        f"Starting {settings.APP_NAME} v{settings.APP_VERSION} "
        f"({settings.ENVIRONMENT.value}, debug={settings.DEBUG})"
    )
    if settings.VISIT_LOGGING_ENABLED:
        setup_visit_logging()
    if settings.DB_CREATE_TABLES:
        await create_tables()


@app.on_event("shutdown")
async def on_shutdown():
    logger.info(f"Shutting down {settings.APP_NAME}")
    await engine.dispose()
