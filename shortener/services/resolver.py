"""Redirect resolution for the URL shortener service."""

import logging

from sqlalchemy.ext.asyncio import AsyncSession

from shortener.models.pair import ShortPair
from shortener.repositories.base import RepositoryError, RepositoryUnavailableError
from shortener.repositories.pair_repository import PairRepository
from shortener.services.exceptions import PairNotFoundError, StoreError, StoreUnavailableError

logger = logging.getLogger(__name__)

SCHEME_PREFIXES = ("http://", "https://")


def normalize_redirect_target(url: str) -> str:
    """Prefix ``http://`` unless the URL already starts with http:// or https://."""
    if url.lower().startswith(SCHEME_PREFIXES):
        return url
    return f"http://{url}"


class RedirectResolver:
    """Turns an alias into the URL a visitor is redirected to."""

    def __init__(self, pair_repository: PairRepository):
        self.pair_repository = pair_repository

    async def lookup(self, db: AsyncSession, alias: str) -> ShortPair:
        """
        Find the pair stored under ``alias``.

        Raises:
            PairNotFoundError: If no pair uses the alias
            StoreUnavailableError: If the store cannot be reached
            StoreError: On other store failures
        """
        try:
            pair = await self.pair_repository.find_by_alias(db, alias)
        except RepositoryUnavailableError as e:
            raise StoreUnavailableError(str(e)) from e
        except RepositoryError as e:
            raise StoreError(str(e)) from e

        if pair is None:
            raise PairNotFoundError(alias)
        return pair

    async def resolve(self, db: AsyncSession, alias: str) -> str:
        """
        Return the redirect target for ``alias``.

        The stored URL is left as submitted; the scheme prefix is only added
        to the returned target.
        """
        pair = await self.lookup(db, alias)
        target = normalize_redirect_target(pair.original_url)
        logger.debug(f"Resolved alias '{alias}' to {target}")
        return target
