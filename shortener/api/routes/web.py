"""Web interface routes: landing page, pair creation and alias redirects."""

import os

from fastapi import APIRouter, Depends, Form, Request, status
from fastapi.exception_handlers import http_exception_handler as default_http_exception_handler
from fastapi.responses import FileResponse, HTMLResponse, PlainTextResponse, RedirectResponse
from fastapi.templating import Jinja2Templates
from jinja2 import TemplateError
from loguru import logger
from sqlalchemy.ext.asyncio import AsyncSession
from starlette.exceptions import HTTPException as StarletteHTTPException

from shortener.api.dependencies import get_redirect_resolver, get_shortener_service, get_templates
from shortener.core.config import settings
from shortener.db.session import get_db
from shortener.models.pair import ShortPair
from shortener.services.exceptions import (
    GenerationExhaustedError,
    InvalidURLError,
    PairNotFoundError,
    StoreError,
    StoreUnavailableError,
    TemplateRenderError,
)
from shortener.services.resolver import RedirectResolver
from shortener.services.shortener import ShortenerService

router = APIRouter(tags=["web"])

UNSUPPORTED_METHOD_MESSAGE = "Sorry, only GET/POST methods are supported."


def _page_path(name: str) -> str:
    return os.path.join(settings.TEMPLATES_DIR, name)


def client_message(exc: Exception, fallback: str) -> str:
    """Underlying error text in debug mode, a generic message otherwise."""
    return str(exc) if settings.DEBUG else fallback


def store_failure_response(exc: Exception) -> PlainTextResponse:
    """Per-request response for a store failure; the process keeps serving."""
    if isinstance(exc, (StoreUnavailableError, GenerationExhaustedError)):
        return PlainTextResponse(
            client_message(exc, "Service temporarily unavailable, please try again later."),
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
        )
    return PlainTextResponse(
        client_message(exc, "Internal server error"),
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
    )


async def http_exception_handler(request: Request, exc: StarletteHTTPException):
    """Plain-text reply for methods no route accepts, default handling otherwise."""
    if exc.status_code != status.HTTP_405_METHOD_NOT_ALLOWED:
        return await default_http_exception_handler(request, exc)

    allow = "GET, POST" if request.url.path == "/" else "GET"
    logger.info("Unsupported method", method=request.method, path=request.url.path)
    return PlainTextResponse(
        UNSUPPORTED_METHOD_MESSAGE,
        status_code=status.HTTP_405_METHOD_NOT_ALLOWED,
        headers={"Allow": allow},
    )


def render_pair_page(
    templates: Jinja2Templates,
    request: Request,
    pair: ShortPair,
    short_url: str,
) -> HTMLResponse:
    """Render the confirmation page for a freshly created pair.

    Raises:
        TemplateRenderError: If the template is missing or fails to render
    """
    try:
        return templates.TemplateResponse(
            request,
            "pair.html",
            {"url": pair.original_url, "shortened": short_url, "alias": pair.alias},
        )
    except TemplateError as e:
        raise TemplateRenderError(f"Failed to render confirmation page: {e}") from e


@router.get("/", include_in_schema=False)
async def landing_page():
    """Serve the static landing page with the submission form."""
    return FileResponse(_page_path("index.html"), media_type="text/html")


@router.post("/", response_class=HTMLResponse)
async def create_pair(
    request: Request,
    source_url: str = Form(""),
    db: AsyncSession = Depends(get_db),
    shortener_service: ShortenerService = Depends(get_shortener_service),
    templates: Jinja2Templates = Depends(get_templates),
):
    """Shorten the submitted URL and show the resulting short URL."""
    try:
        pair = await shortener_service.create_pair(db, source_url)
    except InvalidURLError as e:
        return PlainTextResponse(str(e), status_code=status.HTTP_400_BAD_REQUEST)
    except (StoreError, GenerationExhaustedError) as e:
        logger.error("Pair creation failed", error=str(e), error_type=type(e).__name__)
        return store_failure_response(e)

    short_url = shortener_service.build_short_url(pair.alias)
    try:
        return render_pair_page(templates, request, pair, short_url)
    except TemplateRenderError as e:
        logger.error("Template rendering failed", alias=pair.alias, error=str(e))
        return PlainTextResponse(
            client_message(e, "Internal server error"),
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        )


@router.get("/{alias:path}", include_in_schema=False)
async def redirect_to_original_url(
    alias: str,
    db: AsyncSession = Depends(get_db),
    resolver: RedirectResolver = Depends(get_redirect_resolver),
):
    """Redirect to the original URL of ``alias`` or serve the error page."""
    try:
        target = await resolver.resolve(db, alias)
    except PairNotFoundError:
        logger.info("Unknown alias requested", alias=alias)
        return FileResponse(
            _page_path("error.html"),
            status_code=status.HTTP_404_NOT_FOUND,
            media_type="text/html",
        )
    except StoreError as e:
        logger.error("Redirect lookup failed", alias=alias, error=str(e))
        return store_failure_response(e)

    return RedirectResponse(url=target, status_code=status.HTTP_303_SEE_OTHER)
