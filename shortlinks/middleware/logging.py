"""
Request logging middleware.

Writes one loguru record per request at the custom ``REQUEST`` level and
echoes the request id back in ``X-Request-ID``.
"""

import time
import uuid

from fastapi import Request, Response
from loguru import logger
from starlette.middleware.base import BaseHTTPMiddleware

from shortlinks.core.logging import REQUEST_LEVEL

REQUEST_ID_HEADER = "X-Request-ID"


def client_ip(request: Request) -> str:
    """Client address, preferring the first hop of ``X-Forwarded-For``."""
    forwarded = request.headers.get("X-Forwarded-For", "")
    first_hop = forwarded.split(",")[0].strip()
    if first_hop:
        return first_hop
    return request.client.host if request.client else "unknown"


class LoggingMiddleware(BaseHTTPMiddleware):
    """Log method, path, status and latency of every request."""

    async def dispatch(self, request: Request, call_next) -> Response:
        request_id = request.headers.get(REQUEST_ID_HEADER) or uuid.uuid4().hex

        started = time.perf_counter()
        response = await call_next(request)
        elapsed_ms = round((time.perf_counter() - started) * 1000, 2)

        response.headers[REQUEST_ID_HEADER] = request_id
        logger.bind(request_id=request_id, client_ip=client_ip(request)).log(
            REQUEST_LEVEL,
            "{method} {path} {status_code} {process_time_ms}ms",
            method=request.method,
            path=request.url.path,
            status_code=response.status_code,
            process_time_ms=elapsed_ms,
        )
        return response
