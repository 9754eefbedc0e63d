"""Main application module.

This module builds the FastAPI application: it wires routes, middleware
and exception handlers, and manages the database engine over the
application lifespan.
"""

import time
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.responses import PlainTextResponse
from loguru import logger
from starlette.exceptions import HTTPException as StarletteHTTPException

from shortener.api import api_router
from shortener.api.routes.web import http_exception_handler
from shortener.core.config import settings
from shortener.core.logging import setup_logging
from shortener.db.base import create_engine, create_session_factory, create_tables
from shortener.db.resilience import initialize_database_connection
from shortener.middleware.logging import RequestLoggingMiddleware
from shortener.services.exceptions import StoreUnavailableError


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Connect to the store on startup and release it on shutdown.

    Failing to reach the store at startup is the only fatal error: the
    exception aborts server startup. Store failures after that are handled
    per request.
    """
    setup_logging()
    logger.info(f"Starting {settings.APP_NAME} v{settings.APP_VERSION}")
    logger.info(f"Environment: {settings.ENVIRONMENT.value}")
    logger.info(f"Debug mode: {settings.DEBUG}")

    engine = create_engine()
    if not await initialize_database_connection(engine):
        await engine.dispose()
        logger.critical("Failed to connect to database after multiple attempts")
        raise StoreUnavailableError("Could not connect to the database during startup")

    if settings.DB_CREATE_TABLES:
        await create_tables(engine)
        logger.info(f"Ensured table '{settings.PAIRS_TABLE_NAME}' exists")

    app.state.engine = engine
    app.state.session_factory = create_session_factory(engine)

    try:
        yield
    finally:
        logger.info(f"Shutting down {settings.APP_NAME}")
        await engine.dispose()


async def global_exception_handler(request: Request, exc: Exception):
    """Catch and log unhandled exceptions, answering with a plain 500."""
    error_id = f"error-{time.time()}"

    logger.opt(exception=exc).error(
        f"Unhandled exception in {request.method} {request.url.path}",
        error_id=error_id,
        client_host=request.client.host if request.client else None,
    )

    message = str(exc) if settings.DEBUG else "Internal server error"
    return PlainTextResponse(f"{message} ({error_id})", status_code=500)


def create_app() -> FastAPI:
    """Create the FastAPI application."""
    app = FastAPI(
        title=settings.APP_NAME,
        version=settings.APP_VERSION,
        docs_url="/_docs" if settings.DEBUG else None,
        redoc_url=None,
        openapi_url="/_openapi.json" if settings.DEBUG else None,
        lifespan=lifespan,
    )

    if settings.REQUEST_LOGGING_ENABLED:
        app.add_middleware(RequestLoggingMiddleware)

    app.include_router(api_router)
    app.add_exception_handler(StarletteHTTPException, http_exception_handler)
    app.add_exception_handler(Exception, global_exception_handler)

    return app


app = create_app()
