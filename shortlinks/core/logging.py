"""
Loguru configuration.

All output goes through loguru. Standard library loggers, including the
ones the service modules create with ``logging.getLogger(__name__)`` and
uvicorn's, are forwarded to it by ``InterceptHandler``.
"""

import logging
import os
import sys

from loguru import logger

from shortlinks.core.config import settings

REQUEST_LEVEL = "REQUEST"


class InterceptHandler(logging.Handler):
    """Forward standard library log records to loguru."""

    def emit(self, record: logging.LogRecord) -> None:
        try:
            level = logger.level(record.levelname).name
        except ValueError:
            level = record.levelno

        # Skip logging's own frames so loguru reports the real caller
        frame, depth = logging.currentframe(), 2
        while frame and frame.f_code.co_filename == logging.__file__:
            frame = frame.f_back
            depth += 1

        logger.opt(depth=depth, exception=record.exc_info).log(level, record.getMessage())


def _not_a_visit(record) -> bool:
    return record["extra"].get("event_type") != "visit"


def _register_request_level() -> None:
    try:
        logger.level(REQUEST_LEVEL)
    except ValueError:
        logger.level(REQUEST_LEVEL, no=25, color="<green>")


def setup_logging():
    """
    Install the application sinks and route stdlib logging into loguru.

    Visit records have their own sinks (see ``url_logger``) and are kept
    out of the application log. Safe to call more than once.
    """
    os.makedirs(settings.LOG_DIR, exist_ok=True)
    level = settings.LOG_LEVEL.upper()

    logger.remove()

    if settings.DEBUG:
        logger.add(sys.stderr, level=level, format=settings.LOG_FORMAT, backtrace=True, diagnose=True)

    file_sink = {
        "level": level,
        "rotation": settings.LOG_ROTATION,
        "retention": settings.LOG_RETENTION,
        "compression": "gz",
        "filter": _not_a_visit,
    }
    if settings.LOG_JSON:
        file_sink["serialize"] = True
    else:
        file_sink["format"] = settings.LOG_FORMAT
    logger.add(os.path.join(settings.LOG_DIR, settings.LOG_FILENAME), **file_sink)

    _register_request_level()

    logging.basicConfig(handlers=[InterceptHandler()], level=0, force=True)
    for name in list(logging.root.manager.loggerDict):
        existing = logging.getLogger(name)
        existing.handlers = []
        existing.propagate = True

    for name in ("uvicorn", "uvicorn.access", "uvicorn.error", "fastapi"):
        server_logger = logging.getLogger(name)
        server_logger.handlers = [InterceptHandler()]
        server_logger.propagate = False

    return logger
