"""Health check endpoint for monitoring service status.

The path starts with an underscore, which is outside the alias alphabet,
so it can never shadow a stored alias.
"""

import time

from fastapi import APIRouter, Depends, status
from fastapi.responses import JSONResponse
from sqlalchemy.ext.asyncio import AsyncSession

from shortener.core.config import settings
from shortener.db.base import DatabaseHealthCheck
from shortener.db.session import get_db

router = APIRouter(tags=["health"])


@router.get(
    "/_health",
    summary="Get service health status",
    response_description="Health status of the service and its store",
)
async def health_check(db: AsyncSession = Depends(get_db)):
    """Check health of the service and its database."""
    database = await DatabaseHealthCheck.check_connection(db)
    healthy = database["status"] == "healthy"

    return JSONResponse(
        status_code=status.HTTP_200_OK if healthy else status.HTTP_503_SERVICE_UNAVAILABLE,
        content={
            "status": "healthy" if healthy else "degraded",
            "version": settings.APP_VERSION,
            "environment": settings.ENVIRONMENT.value,
            "timestamp": time.time(),
            "components": {"database": database},
        },
    )
