"""
Request logging middleware for FastAPI using Loguru.

Every request gets an id, exposed in the X-Request-ID response header and
bound to every log record emitted while the request is handled.
"""

import time
import uuid

from fastapi import Request, Response
from loguru import logger
from starlette.middleware.base import BaseHTTPMiddleware

from shortener.core.logging import REQUEST_LEVEL, register_request_level

register_request_level()


def get_client_ip(request: Request) -> str:
    """Client address, honouring the first X-Forwarded-For entry."""
    forwarded = request.headers.get("X-Forwarded-For")
    if forwarded:
        first = forwarded.split(",")[0].strip()
        if first:
            return first
    return request.client.host if request.client else "unknown"


class RequestLoggingMiddleware(BaseHTTPMiddleware):
    """Log method, path, status and duration of each request."""

    async def dispatch(self, request: Request, call_next) -> Response:
        request_id = request.headers.get("X-Request-ID") or str(uuid.uuid4())
        start_time = time.perf_counter()

        # Records logged while handling the request carry its id
        with logger.contextualize(request_id=request_id):
            response = await call_next(request)

        response.headers["X-Request-ID"] = request_id
        process_time_ms = round((time.perf_counter() - start_time) * 1000, 2)

        logger.bind(
            request_id=request_id,
            client_ip=get_client_ip(request),
        ).log(
            REQUEST_LEVEL,
            "{method} {path} {status_code} {process_time_ms}ms",
            method=request.method,
            path=request.url.path,
            status_code=response.status_code,
            process_time_ms=process_time_ms,
        )
        return response
