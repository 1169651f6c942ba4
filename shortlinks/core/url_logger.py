"""Access log of redirects.

Each redirect produces one loguru record tagged ``event_type="visit"``.
Those records go to ``visits.log`` and ``visits.json`` in ``LOG_DIR``
through queued sinks, so writing them never blocks the event loop, and
are filtered out of the application log.
"""

import os
from datetime import datetime, timezone

from loguru import logger

from shortlinks.core.config import settings

VISIT_FORMAT = "{time:YYYY-MM-DD HH:mm:ss.SSS} | {level} | IP:{extra[ip]} | Code:{extra[code]} | {message}"

visit_logger = None


def _is_visit(record) -> bool:
    return record["extra"].get("event_type") == "visit"


def setup_visit_logging():
    """Add the visit sinks once and return the bound visit logger."""
    global visit_logger
    if visit_logger is not None:
        return visit_logger

    os.makedirs(settings.LOG_DIR, exist_ok=True)
    logger.add(
        os.path.join(settings.LOG_DIR, "visits.log"),
        format=VISIT_FORMAT,
        level="INFO",
        rotation=settings.LOG_ROTATION,
        retention=settings.LOG_RETENTION,
        enqueue=True,
        backtrace=False,
        diagnose=False,
        filter=_is_visit,
    )
    logger.add(
        os.path.join(settings.LOG_DIR, "visits.json"),
        level="INFO",
        serialize=True,
        enqueue=True,
        filter=_is_visit,
    )

    visit_logger = logger.bind(event_type="visit")
    return visit_logger


def log_visit(code: str, ip_address: str, user_agent: str = "") -> None:
    """Record that ``code`` was followed from ``ip_address``."""
    if not settings.VISIT_LOGGING_ENABLED:
        return

    setup_visit_logging().bind(
        ip=ip_address,
        code=code,
        user_agent=user_agent,
        visited_at=datetime.now(timezone.utc).isoformat(),
    ).info(f"Redirected {code}")
