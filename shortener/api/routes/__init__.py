"""Routes package initialization.

This module exports the route collection for the service.
"""

from fastapi import APIRouter

from shortener.api.routes import health, web

# Create root router
api_router = APIRouter()

# Health comes first so /_health is not captured by the /{alias} route
api_router.include_router(health.router)

# Landing page, creation form and alias redirects live at the root path
api_router.include_router(web.router)

__all__ = ["api_router"]
