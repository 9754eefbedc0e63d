"""Session management for database operations.

This module provides the request-scoped session dependency and a
transaction decorator for service methods.
"""

from typing import AsyncGenerator, Callable, Optional, TypeVar
import inspect
import logging
from functools import wraps

from fastapi import Request
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.exc import SQLAlchemyError

logger = logging.getLogger(__name__)

# Generic return type for function decorators
T = TypeVar("T")


async def get_db(request: Request) -> AsyncGenerator[AsyncSession, None]:
    """FastAPI dependency for database sessions.

    The session factory is created at startup and stored on the application
    state, so every request receives its own session bound to the shared
    engine.

    Yields:
        AsyncSession: A SQLAlchemy async session object.
    """
    session_factory = request.app.state.session_factory
    async with session_factory() as session:
        try:
            yield session
        except SQLAlchemyError:
            logger.exception("Database error occurred")
            await session.rollback()
            raise
        except Exception:
            await session.rollback()
            raise


def db_transaction(db_param_name: Optional[str] = None) -> Callable:
    """Decorator to wrap coroutines in a database transaction.

    Finds the database session parameter, commits on success or rolls back
    on error.

    Args:
        db_param_name: Name of the session parameter. When omitted the first
            parameter annotated as AsyncSession is used.

    Example:
        ```python
        @db_transaction(db_param_name="db")
        async def create_pair(self, db: AsyncSession, original_url: str) -> ShortPair:
            ...
        ```
    """
    def decorator(func: Callable[..., T]) -> Callable[..., T]:
        parameters = inspect.signature(func).parameters
        db_param_pos = None
        db_param_key = None

        for i, (param_name, param) in enumerate(parameters.items()):
            if db_param_name is not None and param_name == db_param_name:
                db_param_pos, db_param_key = i, param_name
                break
            if db_param_name is None and param.annotation is AsyncSession:
                db_param_pos, db_param_key = i, param_name
                break

        if db_param_key is None:
            raise ValueError(
                f"Unable to find database session parameter in function '{func.__name__}'"
            )

        @wraps(func)
        async def wrapper(*args, **kwargs):
            if db_param_key in kwargs:
                db = kwargs[db_param_key]
            elif len(args) > db_param_pos:
                db = args[db_param_pos]
            else:
                raise ValueError(
                    f"Database session not found in arguments for '{func.__name__}'"
                )

            try:
                result = await func(*args, **kwargs)
                await db.commit()
                return result
            except Exception as e:
                await db.rollback()
                logger.warning(f"Transaction rolled back in '{func.__name__}': {e!r}")
                raise

        return wrapper
    return decorator
