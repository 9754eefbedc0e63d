"""Tests for the web routes."""

import re

import pytest
from unittest.mock import AsyncMock
from fastapi.templating import Jinja2Templates
from loguru import logger

from shortener.api.dependencies import get_redirect_resolver, get_shortener_service, get_templates
from shortener.api.routes.web import UNSUPPORTED_METHOD_MESSAGE
from shortener.core.config import settings
from shortener.repositories.base import RepositoryError, RepositoryUnavailableError
from shortener.repositories.pair_repository import PairRepository
from shortener.services.aliases import AliasGenerator
from shortener.services.resolver import RedirectResolver
from shortener.services.shortener import ShortenerService
from tests.utils import create_test_pair


def extract_alias(html: str) -> str:
    match = re.search(re.escape(settings.SHORT_URL_PREFIX) + r"/([A-Za-z0-9]+)", html)
    assert match is not None, html
    return match.group(1)


@pytest.mark.api
class TestLandingPage:

    @pytest.mark.asyncio
    async def test_get_landing_page(self, client):
        response = await client.get("/")

        assert response.status_code == 200
        assert response.headers["content-type"].startswith("text/html")
        assert 'name="source_url"' in response.text

    @pytest.mark.asyncio
    @pytest.mark.parametrize("method", ["PUT", "PATCH", "DELETE", "OPTIONS", "TRACE"])
    async def test_unsupported_method(self, client, method):
        response = await client.request(method, "/")

        assert response.status_code == 405
        assert response.headers["content-type"].startswith("text/plain")
        assert response.headers["allow"] == "GET, POST"
        assert response.text == UNSUPPORTED_METHOD_MESSAGE

    @pytest.mark.asyncio
    async def test_unsupported_method_on_alias(self, client):
        response = await client.delete("/abc123")

        assert response.status_code == 405
        assert response.headers["allow"] == "GET"
        assert response.text == UNSUPPORTED_METHOD_MESSAGE

    @pytest.mark.asyncio
    async def test_request_id_header(self, client):
        response = await client.get("/")

        assert response.headers.get("X-Request-ID")


@pytest.mark.api
class TestCreatePair:

    @pytest.mark.asyncio
    async def test_create_and_follow(self, client):
        response = await client.post("/", data={"source_url": "example.com"})

        assert response.status_code == 200
        assert "example.com" in response.text
        alias = extract_alias(response.text)
        assert len(alias) == settings.ALIAS_LENGTH

        redirect = await client.get(f"/{alias}")
        assert redirect.status_code == 303
        assert redirect.headers["location"] == "http://example.com"

    @pytest.mark.asyncio
    async def test_create_keeps_https_scheme(self, client):
        response = await client.post("/", data={"source_url": "https://example.com/docs"})
        alias = extract_alias(response.text)

        redirect = await client.get(f"/{alias}")
        assert redirect.status_code == 303
        assert redirect.headers["location"] == "https://example.com/docs"

    @pytest.mark.asyncio
    async def test_page_escapes_submitted_url(self, client):
        response = await client.post("/", data={"source_url": "example.com/<script>"})

        assert response.status_code == 200
        assert "<script>" not in response.text
        assert "&lt;script&gt;" in response.text

    @pytest.mark.asyncio
    async def test_empty_url_rejected(self, client):
        response = await client.post("/", data={"source_url": "  "})

        assert response.status_code == 400
        assert response.headers["content-type"].startswith("text/plain")

    @pytest.mark.asyncio
    async def test_missing_field_rejected(self, client):
        response = await client.post("/", data={})

        assert response.status_code == 400

    @pytest.mark.asyncio
    async def test_store_unavailable_returns_503(self, client, test_app):
        repository = PairRepository()
        repository.alias_exists = AsyncMock(side_effect=RepositoryUnavailableError("down"))
        test_app.dependency_overrides[get_shortener_service] = lambda: ShortenerService(repository)

        response = await client.post("/", data={"source_url": "example.com"})

        assert response.status_code == 503
        assert "down" not in response.text

        # The service keeps serving other requests
        assert (await client.get("/")).status_code == 200

    @pytest.mark.asyncio
    async def test_exhausted_generation_returns_503(self, client, test_app, test_db):
        await create_test_pair(test_db, alias="aaaaaa")
        repository = PairRepository()
        test_app.dependency_overrides[get_shortener_service] = lambda: ShortenerService(
            repository,
            alias_generator=AliasGenerator(repository, alphabet="a", max_attempts=2),
        )

        response = await client.post("/", data={"source_url": "example.com"})

        assert response.status_code == 503

    @pytest.mark.asyncio
    async def test_template_error_returns_500(self, client, test_app, tmp_path, monkeypatch):
        test_app.dependency_overrides[get_templates] = lambda: Jinja2Templates(directory=str(tmp_path))

        response = await client.post("/", data={"source_url": "example.com"})
        assert response.status_code == 500
        assert "pair.html" not in response.text

        monkeypatch.setattr(settings, "DEBUG", True)
        response = await client.post("/", data={"source_url": "example.com"})
        assert response.status_code == 500
        assert "pair.html" in response.text


@pytest.mark.api
class TestRedirect:

    @pytest.mark.asyncio
    async def test_redirect_existing_pair(self, client, test_db):
        await create_test_pair(test_db, original_url="https://example.com", alias="abc123")

        response = await client.get("/abc123")

        assert response.status_code == 303
        assert response.headers["location"] == "https://example.com"

    @pytest.mark.asyncio
    async def test_unknown_alias_serves_error_page(self, client):
        response = await client.get("/nope00")

        assert response.status_code == 404
        assert response.headers["content-type"].startswith("text/html")
        assert "Link not found" in response.text

    @pytest.mark.asyncio
    async def test_store_unavailable_returns_503(self, client, test_app):
        repository = PairRepository()
        repository.find_by_alias = AsyncMock(side_effect=RepositoryUnavailableError("down"))
        test_app.dependency_overrides[get_redirect_resolver] = lambda: RedirectResolver(repository)

        response = await client.get("/abc123")

        assert response.status_code == 503

    @pytest.mark.asyncio
    async def test_store_error_returns_500(self, client, test_app):
        repository = PairRepository()
        repository.find_by_alias = AsyncMock(side_effect=RepositoryError("broken"))
        test_app.dependency_overrides[get_redirect_resolver] = lambda: RedirectResolver(repository)

        response = await client.get("/abc123")

        assert response.status_code == 500

    @pytest.mark.asyncio
    @pytest.mark.parametrize("path", ["/abc/def", "/abc123/", "/a/b/c/"])
    async def test_paths_with_slash_serve_error_page(self, client, path):
        response = await client.get(path)

        assert response.status_code == 404
        assert response.headers["content-type"].startswith("text/html")
        assert "Link not found" in response.text

    @pytest.mark.asyncio
    async def test_trailing_slash_is_not_stripped(self, client, test_db):
        await create_test_pair(test_db, original_url="https://example.com", alias="abc123")

        response = await client.get("/abc123/")

        assert response.status_code == 404

    @pytest.mark.asyncio
    async def test_route_logs_carry_request_id(self, client):
        records = []
        handler_id = logger.add(lambda message: records.append(message.record), level="INFO")
        try:
            response = await client.get("/nope00", headers={"X-Request-ID": "req-42"})
        finally:
            logger.remove(handler_id)

        assert response.headers["X-Request-ID"] == "req-42"
        lookups = [r for r in records if r["message"] == "Unknown alias requested"]
        assert lookups
        assert lookups[0]["extra"]["request_id"] == "req-42"
