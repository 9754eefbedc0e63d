"""Pair Repository for the URL shortener service.

This module provides the PairRepository class, the store abstraction the
alias generator, the creation flow and the redirect resolver work against.
"""

from typing import Optional

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.exc import IntegrityError

from shortener.models.pair import ShortPair, ShortPairCreate
from shortener.repositories.base import BaseRepository, DuplicateEntityError, RepositoryError


class PairRepository(BaseRepository[ShortPair, ShortPairCreate]):
    """
    Repository for ShortPair database operations.

    Pairs are only ever inserted and looked up by alias. The alias column
    carries a unique constraint, so a lost check-then-insert race surfaces
    here as a DuplicateEntityError instead of a silent duplicate.
    """

    def __init__(self, timeout: Optional[float] = None):
        """Initialize the repository with the ShortPair model type."""
        super().__init__(ShortPair, timeout=timeout)

    async def find_by_alias(self, db: AsyncSession, alias: str) -> Optional[ShortPair]:
        """
        Find a pair by its alias.

        Args:
            db: Database session
            alias: The alias to look up

        Returns:
            The ShortPair if found, None otherwise

        Raises:
            RepositoryUnavailableError: If the store cannot be reached in time
            RepositoryError: On other database errors
        """
        query = select(ShortPair).where(ShortPair.alias == alias)
        result = await self._execute(db.execute(query), "find pair by alias")
        return result.scalar_one_or_none()

    async def alias_exists(self, db: AsyncSession, alias: str) -> bool:
        """Check whether a pair with this alias is already stored."""
        return await self.exists(db, alias=alias)

    async def insert(self, db: AsyncSession, original_url: str, alias: str) -> ShortPair:
        """
        Insert a new pair.

        Args:
            db: Database session
            original_url: URL as submitted by the client
            alias: Alias chosen by the generator

        Returns:
            The created ShortPair, with its store-assigned id

        Raises:
            DuplicateEntityError: If the alias is already taken
            RepositoryError: On other database errors
        """
        data = ShortPairCreate(original_url=original_url, alias=alias)
        try:
            return await self.create(db, data)
        except IntegrityError as e:
            message = str(e).lower()
            if "unique constraint" in message or "duplicate key" in message:
                raise DuplicateEntityError(self.model_type, "alias", alias) from e
            raise RepositoryError(f"Database error creating pair: {e}") from e
