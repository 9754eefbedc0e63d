"""HTTP middleware for the URL shortener service."""

from shortener.middleware.logging import RequestLoggingMiddleware

__all__ = ["RequestLoggingMiddleware"]
