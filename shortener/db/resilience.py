"""Database resilience patterns.

This module implements the two resilience measures the service relies on:
1. Connection retry with exponential backoff during startup
2. A bounded timeout around every store operation
"""

import asyncio
import logging
import random
from typing import Awaitable, Optional, TypeVar

from sqlalchemy.ext.asyncio import AsyncEngine
from sqlalchemy.sql import text

from shortener.core.config import settings

logger = logging.getLogger(__name__)

T = TypeVar("T")


class StoreTimeoutError(Exception):
    """A store operation did not complete within the configured timeout."""

    def __init__(self, operation: str, timeout: float):
        self.operation = operation
        self.timeout = timeout
        super().__init__(f"Store operation '{operation}' timed out after {timeout:.2f}s")


# ----------------------- #
# Connection Retry Logic  #
# ----------------------- #

def backoff_delay(attempt: int) -> float:
    """Delay before the next connection attempt, with jitter."""
    delay = min(
        settings.DB_CONNECT_RETRY_INITIAL_DELAY * (2 ** (attempt - 1)),
        settings.DB_CONNECT_RETRY_MAX_DELAY,
    )
    jitter = delay * settings.DB_CONNECT_RETRY_JITTER
    if jitter > 0:
        return max(0.0, delay + random.uniform(-jitter, jitter))
    return delay


async def initialize_database_connection(
    engine: AsyncEngine,
    max_attempts: Optional[int] = None,
) -> bool:
    """Initialize database connection with retry and exponential backoff.

    Attempts to establish a database connection during application startup.
    If the connection fails, retries with exponential backoff.

    Args:
        engine: Engine to probe
        max_attempts: Override for DB_CONNECT_RETRY_ATTEMPTS

    Returns:
        bool: True if connection was successful, False otherwise
    """
    max_attempts = max_attempts or settings.DB_CONNECT_RETRY_ATTEMPTS

    logger.info(f"Initializing database connection (max attempts: {max_attempts})")

    for attempt in range(1, max_attempts + 1):
        try:
            async with engine.connect() as conn:
                await asyncio.wait_for(
                    conn.execute(text("SELECT 1")),
                    timeout=settings.STORE_TIMEOUT_SECONDS,
                )

            logger.info(f"Database connection established successfully on attempt {attempt}")
            return True

        except Exception as e:
            if attempt < max_attempts:
                backoff_time = backoff_delay(attempt)
                logger.warning(
                    f"Database connection attempt {attempt}/{max_attempts} failed: {e!r}. "
                    f"Retrying in {backoff_time:.2f} seconds..."
                )
                await asyncio.sleep(backoff_time)
            else:
                logger.error(
                    f"Failed to connect to database after {max_attempts} attempts. "
                    f"Last error: {e!r}"
                )

    return False


# ----------------------- #
# Operation Timeouts      #
# ----------------------- #

async def with_store_timeout(
    awaitable: Awaitable[T],
    operation: str,
    timeout: Optional[float] = None,
) -> T:
    """Await a store operation, giving up after ``timeout`` seconds.

    Raises:
        StoreTimeoutError: If the operation did not finish in time
    """
    timeout = timeout or settings.STORE_TIMEOUT_SECONDS
    try:
        return await asyncio.wait_for(awaitable, timeout=timeout)
    except asyncio.TimeoutError as e:
        logger.error(f"Store operation '{operation}' timed out after {timeout}s")
        raise StoreTimeoutError(operation, timeout) from e
