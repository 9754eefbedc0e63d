"""API package for the URL shortener service.

This package contains the HTTP layer components: routes and dependency
providers.
"""

from shortener.api.routes import api_router

__all__ = ["api_router"]
