"""URL shortening service for the URL shortener service.

This module contains the ShortenerService class which implements the
creation flow: validate the submitted URL, pick a free alias, store the
pair and build the short URL shown to the client.
"""

import logging
from typing import Optional
from urllib.parse import urlsplit

from sqlalchemy.ext.asyncio import AsyncSession

from shortener.core.config import settings
from shortener.db.session import db_transaction
from shortener.models.pair import ShortPair
from shortener.repositories.base import (
    DuplicateEntityError,
    RepositoryError,
    RepositoryUnavailableError,
)
from shortener.repositories.pair_repository import PairRepository
from shortener.services.aliases import AliasGenerator
from shortener.services.exceptions import (
    GenerationExhaustedError,
    InvalidURLError,
    StoreError,
    StoreUnavailableError,
)

logger = logging.getLogger(__name__)


def validate_source_url(
    url: Optional[str],
    max_length: Optional[int] = None,
    strict: Optional[bool] = None,
) -> str:
    """
    Apply the submitted URL policy and return the value to store.

    Surrounding whitespace is stripped. Empty values, values longer than
    ``max_length`` and values with embedded whitespace or control characters
    are rejected. In strict mode the URL, with ``http://`` assumed when no
    scheme is given, must be an http(s) URL with a host.

    Raises:
        InvalidURLError: If the URL is rejected
    """
    max_length = max_length if max_length is not None else settings.URL_MAX_LENGTH
    strict = strict if strict is not None else settings.URL_STRICT_VALIDATION

    url = (url or "").strip()
    if not url:
        raise InvalidURLError("URL must not be empty")
    if len(url) > max_length:
        raise InvalidURLError(f"URL must be at most {max_length} characters long")
    if any(ch.isspace() or ord(ch) < 32 or ord(ch) == 127 for ch in url):
        raise InvalidURLError("URL must not contain whitespace or control characters")

    if strict:
        candidate = url if "://" in url else f"http://{url}"
        try:
            parts = urlsplit(candidate)
        except ValueError as e:
            raise InvalidURLError(f"Invalid URL format: {url}") from e
        if parts.scheme.lower() not in ("http", "https") or not parts.hostname:
            raise InvalidURLError(f"Invalid URL format: {url}")

    return url


class ShortenerService:
    """
    Service for the pair creation flow.

    The store and the alias generator are injected so tests can substitute
    either of them.
    """

    def __init__(
        self,
        pair_repository: PairRepository,
        alias_generator: Optional[AliasGenerator] = None,
        max_attempts: Optional[int] = None,
        short_url_prefix: Optional[str] = None,
    ):
        """
        Initialize the shortening service.

        Args:
            pair_repository: Store for pairs
            alias_generator: Generator of free aliases
            max_attempts: Bound on inserts lost to a concurrent duplicate
            short_url_prefix: Host and port (or base URL) put in front of aliases
        """
        self.pair_repository = pair_repository
        self.alias_generator = alias_generator or AliasGenerator(pair_repository)
        self.max_attempts = max_attempts if max_attempts is not None else settings.ALIAS_MAX_ATTEMPTS
        self.short_url_prefix = short_url_prefix or settings.SHORT_URL_PREFIX

    @db_transaction(db_param_name="db")
    async def create_pair(self, db: AsyncSession, original_url: str) -> ShortPair:
        """
        Create and store a pair for ``original_url``.

        Args:
            db: Database session
            original_url: URL as submitted by the client

        Returns:
            ShortPair: The stored pair

        Raises:
            InvalidURLError: If the URL is rejected by the validation policy
            GenerationExhaustedError: If no free alias could be stored
            StoreUnavailableError: If the store cannot be reached
            StoreError: On other store failures
        """
        original_url = validate_source_url(original_url)

        for attempt in range(1, self.max_attempts + 1):
            alias = await self.alias_generator.generate_unique_alias(db)
            try:
                pair = await self.pair_repository.insert(db, original_url, alias)
            except DuplicateEntityError:
                # Another request stored the same alias between check and insert
                logger.warning(
                    f"Alias '{alias}' taken concurrently, retrying ({attempt}/{self.max_attempts})"
                )
                continue
            except RepositoryUnavailableError as e:
                raise StoreUnavailableError(str(e)) from e
            except RepositoryError as e:
                raise StoreError(str(e)) from e

            logger.info(f"Created pair '{pair.alias}' -> {pair.original_url}")
            return pair

        raise GenerationExhaustedError(self.max_attempts)

    def build_short_url(self, alias: str) -> str:
        """Build the fully qualified short URL for an alias."""
        return f"{self.short_url_prefix}/{alias}"
