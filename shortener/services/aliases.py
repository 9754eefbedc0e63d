"""Alias generation for the URL shortener service.

This module contains the AliasGenerator which draws random fixed-length
aliases and checks them against the store until a free one is found.
"""

import logging
import random
from typing import Optional

from sqlalchemy.ext.asyncio import AsyncSession

from shortener.core.config import settings
from shortener.repositories.base import RepositoryError, RepositoryUnavailableError
from shortener.repositories.pair_repository import PairRepository
from shortener.services.exceptions import (
    GenerationExhaustedError,
    StoreError,
    StoreUnavailableError,
)

logger = logging.getLogger(__name__)


class AliasGenerator:
    """
    Generator of unique random aliases.

    Each character of an alias is drawn independently and uniformly from
    the alphabet. With the default 62 characters and length 6 that is
    62**6 (about 5.7e10) possible aliases, so collisions are rare and the
    attempt bound only matters when the alias space is close to full.
    """

    def __init__(
        self,
        pair_repository: PairRepository,
        alphabet: Optional[str] = None,
        length: Optional[int] = None,
        max_attempts: Optional[int] = None,
        rng: Optional[random.Random] = None,
    ):
        """
        Initialize the generator.

        Args:
            pair_repository: Store used for the existence check
            alphabet: Characters aliases are drawn from
            length: Number of characters per alias
            max_attempts: Candidates tried before giving up
            rng: Random source, a random.SystemRandom by default
        """
        self.pair_repository = pair_repository
        self.alphabet = alphabet if alphabet is not None else settings.ALIAS_ALPHABET
        self.length = length if length is not None else settings.ALIAS_LENGTH
        self.max_attempts = max_attempts if max_attempts is not None else settings.ALIAS_MAX_ATTEMPTS
        self.rng = rng or random.SystemRandom()

        if not self.alphabet:
            raise ValueError("Alias alphabet must not be empty")
        if self.length < 1:
            raise ValueError("Alias length must be at least 1")
        if self.max_attempts < 1:
            raise ValueError("max_attempts must be at least 1")

    def generate_candidate(self) -> str:
        """Draw a random alias without consulting the store."""
        return "".join(self.rng.choice(self.alphabet) for _ in range(self.length))

    async def generate_unique_alias(self, db: AsyncSession) -> str:
        """
        Generate an alias that is not used by any stored pair.

        The check is not atomic with the later insert; the unique constraint
        on the alias column catches the remaining race.

        Args:
            db: Database session

        Returns:
            str: A currently free alias

        Raises:
            GenerationExhaustedError: If every attempt hit a used alias
            StoreUnavailableError: If the store cannot be reached
            StoreError: On other store failures
        """
        for attempt in range(1, self.max_attempts + 1):
            candidate = self.generate_candidate()
            try:
                taken = await self.pair_repository.alias_exists(db, candidate)
            except RepositoryUnavailableError as e:
                raise StoreUnavailableError(str(e)) from e
            except RepositoryError as e:
                raise StoreError(str(e)) from e

            if not taken:
                return candidate
            logger.info(f"Alias collision on attempt {attempt}/{self.max_attempts}: '{candidate}'")

        logger.error(f"Alias generation exhausted after {self.max_attempts} attempts")
        raise GenerationExhaustedError(self.max_attempts)
