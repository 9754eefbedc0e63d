"""Base repository implementation for the URL shortener service.

This module provides a generic BaseRepository class that follows the
Repository pattern for database operations, serving as a foundation for
the pair repository.
"""

from typing import Any, Awaitable, Dict, Generic, Optional, Type, TypeVar, Union
import logging

from pydantic import BaseModel
from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.exc import (
    DisconnectionError,
    IntegrityError,
    InterfaceError,
    OperationalError,
    SQLAlchemyError,
)
from sqlmodel import SQLModel

from shortener.db.resilience import StoreTimeoutError, with_store_timeout

# Type variable for model types
T = TypeVar("T", bound=SQLModel)
CreateSchemaType = TypeVar("CreateSchemaType", bound=BaseModel)
R = TypeVar("R")

logger = logging.getLogger(__name__)

# SQLAlchemy errors meaning the store could not be reached at all
CONNECTION_ERRORS = (OperationalError, InterfaceError, DisconnectionError)


class RepositoryError(Exception):
    """Base exception for repository errors."""
    pass


class RepositoryUnavailableError(RepositoryError):
    """The store could not be reached or did not answer in time."""
    pass


class DuplicateEntityError(RepositoryError):
    """Exception raised when a unique constraint is violated."""

    def __init__(self, model_type: Type[SQLModel], field_name: str, value: Any):
        self.model_type = model_type
        self.field_name = field_name
        self.value = value
        model_name = getattr(model_type, "__name__", "Entity")
        super().__init__(f"{model_name} with {field_name}={value} already exists")


class BaseRepository(Generic[T, CreateSchemaType]):
    """
    Base repository implementing the common operations for SQLModel entities.

    Every statement goes through ``_execute`` which applies the store
    timeout and translates driver errors into repository errors.

    Type parameters:
        T: The SQLModel type this repository manages
        CreateSchemaType: The Pydantic model type for creation operations
    """

    def __init__(self, model_type: Type[T], timeout: Optional[float] = None):
        """
        Initialize the repository with a specific model type.

        Args:
            model_type: The SQLModel class this repository will work with
            timeout: Per-operation timeout in seconds, defaults to settings
        """
        self.model_type = model_type
        self.timeout = timeout

    async def _execute(self, awaitable: Awaitable[R], operation: str) -> R:
        """Run a store call with timeout and error translation."""
        try:
            return await with_store_timeout(awaitable, operation, self.timeout)
        except StoreTimeoutError as e:
            raise RepositoryUnavailableError(str(e)) from e
        except IntegrityError:
            # Constraint violations are interpreted by the concrete repository
            raise
        except CONNECTION_ERRORS as e:
            logger.error(f"Store unreachable during {operation}: {e}")
            raise RepositoryUnavailableError(f"Store unavailable during {operation}: {e}") from e
        except SQLAlchemyError as e:
            logger.error(f"Database error during {operation}: {e}")
            raise RepositoryError(f"Database error during {operation}: {e}") from e

    async def get_by_id(self, db: AsyncSession, id: Any) -> Optional[T]:
        """
        Get an entity by its ID.

        Returns:
            The entity if found, None otherwise
        """
        return await self._execute(
            db.get(self.model_type, id),
            f"get {self.model_type.__name__}",
        )

    async def count(self, db: AsyncSession) -> int:
        """Count the total number of entities."""
        query = select(func.count()).select_from(self.model_type)
        result = await self._execute(db.execute(query), f"count {self.model_type.__name__}")
        return result.scalar_one()

    async def exists(self, db: AsyncSession, **kwargs) -> bool:
        """
        Check if an entity exists with the given filters.

        Args:
            db: Database session
            **kwargs: Field=value pairs to filter by

        Returns:
            True if entity exists, False otherwise
        """
        if not kwargs:
            raise ValueError("No conditions provided for exists check")

        conditions = [getattr(self.model_type, field) == value for field, value in kwargs.items()]
        query = select(func.count()).select_from(self.model_type).where(*conditions)
        result = await self._execute(db.execute(query), f"check {self.model_type.__name__}")
        return result.scalar_one() > 0

    async def create(self, db: AsyncSession, data: Union[CreateSchemaType, Dict[str, Any]]) -> T:
        """
        Create a new entity.

        The entity is flushed so the store assigns its ID; committing is left
        to the caller's transaction. On failure the session is rolled back.

        Returns:
            The created entity
        """
        if isinstance(data, BaseModel):
            data_dict = data.model_dump(exclude_unset=True)
        else:
            data_dict = data

        entity = self.model_type(**data_dict)
        db.add(entity)
        try:
            await self._execute(db.flush(), f"create {self.model_type.__name__}")
        except (IntegrityError, RepositoryError):
            await db.rollback()
            raise
        return entity
