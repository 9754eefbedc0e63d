"""Repository layer for the URL shortener service.

This module provides repository classes that abstract database operations
and implement the Repository pattern for clean separation of concerns.
"""

from shortener.repositories.base import (
    BaseRepository,
    DuplicateEntityError,
    RepositoryError,
    RepositoryUnavailableError,
)
from shortener.repositories.pair_repository import PairRepository

__all__ = [
    # Base classes and exceptions
    "BaseRepository",
    "DuplicateEntityError",
    "RepositoryError",
    "RepositoryUnavailableError",

    # Concrete repositories
    "PairRepository",
]
