"""API dependencies for FastAPI.

This module provides dependency injection functions for FastAPI endpoints
to access the repository, service instances and page templates.
"""

from fastapi import Depends
from fastapi.templating import Jinja2Templates

from shortener.core.config import settings
from shortener.repositories.pair_repository import PairRepository
from shortener.services.aliases import AliasGenerator
from shortener.services.resolver import RedirectResolver
from shortener.services.shortener import ShortenerService

templates = Jinja2Templates(directory=settings.TEMPLATES_DIR)


async def get_pair_repository() -> PairRepository:
    """Get an instance of the pair repository."""
    return PairRepository()


async def get_alias_generator(
    pair_repo: PairRepository = Depends(get_pair_repository),
) -> AliasGenerator:
    """Get an alias generator backed by the pair repository."""
    return AliasGenerator(pair_repository=pair_repo)


async def get_shortener_service(
    pair_repo: PairRepository = Depends(get_pair_repository),
    alias_generator: AliasGenerator = Depends(get_alias_generator),
) -> ShortenerService:
    """Get an instance of the URL shortening service."""
    return ShortenerService(pair_repository=pair_repo, alias_generator=alias_generator)


async def get_redirect_resolver(
    pair_repo: PairRepository = Depends(get_pair_repository),
) -> RedirectResolver:
    """Get an instance of the redirect resolver."""
    return RedirectResolver(pair_repository=pair_repo)


def get_templates() -> Jinja2Templates:
    """Get the Jinja2 environment used for rendered pages."""
    return templates
