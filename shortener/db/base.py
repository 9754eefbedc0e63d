"""Database base configuration for SQLAlchemy with SQLModel.

This module provides the async engine and session factory builders and a
health check. The engine is created once during application startup and
kept on the application state; nothing here holds a process-wide handle.
"""

from typing import Dict, Optional
import asyncio
import logging

from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)
from sqlalchemy.pool import NullPool
from sqlalchemy.sql import text
from sqlmodel import SQLModel

from shortener.core.config import settings

logger = logging.getLogger(__name__)

# Mapping of environment to SQLAlchemy engine configurations
ENGINE_CONFIGS: Dict[str, Dict] = {
    "development": {
        "pool_size": settings.POSTGRES_POOL_SIZE,
        "max_overflow": settings.POSTGRES_POOL_MAX_OVERFLOW,
        "pool_timeout": settings.POSTGRES_POOL_TIMEOUT,
        "pool_recycle": settings.POSTGRES_POOL_RECYCLE,
        "pool_pre_ping": True,
    },
    "production": {
        "pool_size": settings.POSTGRES_POOL_SIZE,
        "max_overflow": settings.POSTGRES_POOL_MAX_OVERFLOW,
        "pool_timeout": settings.POSTGRES_POOL_TIMEOUT,
        "pool_recycle": settings.POSTGRES_POOL_RECYCLE,
        "pool_pre_ping": True,
    },
    "testing": {
        "poolclass": NullPool,  # Use NullPool for tests to avoid connection issues
    },
}


def get_engine_config(engine_url: str) -> Dict:
    """Get the engine configuration for the current environment.

    SQLite drivers do not accept queue pool arguments, so they always get
    the testing configuration.
    """
    if engine_url.startswith("sqlite"):
        return ENGINE_CONFIGS["testing"]
    env = settings.ENVIRONMENT.value
    return ENGINE_CONFIGS.get(env, ENGINE_CONFIGS["development"])


def create_engine(engine_url: Optional[str] = None) -> AsyncEngine:
    """Create and configure an async SQLAlchemy engine.

    Args:
        engine_url: Database URL, defaults to the configured one

    Returns:
        AsyncEngine: Configured SQLAlchemy async engine instance.
    """
    engine_url = engine_url or str(settings.SQLALCHEMY_DATABASE_URI)
    engine_config = get_engine_config(engine_url)

    # Keep credentials out of the log
    logger.info(f"Creating database engine for {engine_url.rsplit('@', 1)[-1]}")

    return create_async_engine(
        engine_url,
        echo=settings.DB_ECHO,
        **engine_config,
    )


def create_session_factory(engine: AsyncEngine) -> async_sessionmaker:
    """Build the async session factory bound to ``engine``."""
    return async_sessionmaker(
        bind=engine,
        class_=AsyncSession,
        expire_on_commit=False,
        autoflush=False,
    )


async def create_tables(engine: AsyncEngine) -> None:
    """Create the pair table if it does not exist yet."""
    # Import models so they are registered with the metadata
    import shortener.models  # noqa: F401

    async with engine.begin() as conn:
        await conn.run_sync(SQLModel.metadata.create_all)


class DatabaseHealthCheck:
    """Health check functionality for the database connection."""

    @staticmethod
    async def check_connection(session: AsyncSession) -> Dict:
        """Check database connectivity and return status.

        Returns:
            Dict: Health check result containing status and latency information
        """
        loop = asyncio.get_running_loop()
        start_time = loop.time()
        status = "healthy"
        error_message = None
        latency_ms = 0

        try:
            await asyncio.wait_for(
                session.execute(text("SELECT 1")),
                timeout=settings.STORE_TIMEOUT_SECONDS,
            )
            latency_ms = int((loop.time() - start_time) * 1000)
        except Exception as e:
            status = "unhealthy"
            error_message = str(e) or e.__class__.__name__
            logger.error(f"Database health check failed: {error_message}")

        return {
            "status": status,
            "latency_ms": latency_ms,
            "error": error_message,
        }
