"""Service layer for the URL shortener service.

Services orchestrate interactions with the pair repository and provide the
alias generation, creation and redirect resolution operations.
"""

from shortener.services.aliases import AliasGenerator
from shortener.services.resolver import RedirectResolver, normalize_redirect_target
from shortener.services.shortener import ShortenerService, validate_source_url

__all__ = [
    "AliasGenerator",
    "RedirectResolver",
    "ShortenerService",
    "normalize_redirect_target",
    "validate_source_url",
]
