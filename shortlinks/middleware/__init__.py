"""HTTP middleware for the short links service."""

from shortlinks.middleware.logging import LoggingMiddleware

__all__ = ["LoggingMiddleware"]
