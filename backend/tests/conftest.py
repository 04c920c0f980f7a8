"""
Pytest configuration and fixtures for the site backend tests.
"""

from collections.abc import AsyncGenerator, Callable
from typing import Any

import httpx
import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient

from lawsite.api.deps import get_app_settings
from lawsite.api.main import app
from lawsite.core.config import Settings
from lawsite.services.page_content import PageContentService
from lawsite.services.supabase import SupabaseRestClient

SUPABASE_URL = "https://cms.example.supabase.co"


class FakeSupabase:
    """In-memory stand-in for the Supabase REST, auth and storage APIs."""

    def __init__(self) -> None:
        self.pages: list[dict[str, Any]] = []
        self.site_settings: dict[str, Any] | None = None
        self.requests: list[httpx.Request] = []
        self.fail_status: int | None = None
        self.uploads: dict[str, bytes] = {}

    def handler(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        path = request.url.path
        params = request.url.params

        if self.fail_status is not None:
            return httpx.Response(self.fail_status, text="upstream failure")

        if path == "/rest/v1/":
            return httpx.Response(200, json={"swagger": "2.0"})

        if path == "/rest/v1/pages":
            rows = [p for p in self.pages if p.get("status", "published") == "published"]
            url_filter = params.get("url_path")
            if url_filter:
                rows = [p for p in rows if f"eq.{p['url_path']}" == url_filter]
            return httpx.Response(200, json=rows)

        if path == "/rest/v1/site_settings":
            return httpx.Response(200, json=[self.site_settings] if self.site_settings else [])

        if path == "/auth/v1/token":
            return httpx.Response(200, json={"access_token": "user-token"})

        if path.startswith("/storage/v1/object/"):
            self.uploads[path] = request.content
            return httpx.Response(200, json={"Key": path.removeprefix("/storage/v1/object/")})

        return httpx.Response(404, json={"message": "not found"})


@pytest.fixture
def fake_supabase() -> FakeSupabase:
    return FakeSupabase()


@pytest_asyncio.fixture
async def supabase_client(fake_supabase: FakeSupabase) -> AsyncGenerator[SupabaseRestClient, None]:
    """Supabase client wired to the in-memory fake."""
    http = httpx.AsyncClient(transport=httpx.MockTransport(fake_supabase.handler))
    client = SupabaseRestClient(SUPABASE_URL, "anon-key", http=http)
    yield client
    await http.aclose()


@pytest.fixture
def test_settings() -> Settings:
    return Settings(
        supabase_url=SUPABASE_URL,
        supabase_anon_key="anon-key",
        supabase_service_role_key="service-key",
        site_url="https://libertylawfirm.net",
    )


@pytest.fixture
def make_client() -> Callable[..., Any]:
    """Factory for an API client with chosen settings and Supabase client."""

    async def _make(config: Settings, supabase: SupabaseRestClient | None) -> AsyncClient:
        app.state.supabase = supabase
        app.state.page_service = PageContentService(supabase) if supabase else None
        app.dependency_overrides[get_app_settings] = lambda: config
        return AsyncClient(transport=ASGITransport(app=app), base_url="http://test")

    yield _make

    app.dependency_overrides.clear()
    app.state.supabase = None
    app.state.page_service = None


@pytest_asyncio.fixture
async def client(
    make_client: Callable[..., Any],
    test_settings: Settings,
    supabase_client: SupabaseRestClient,
) -> AsyncGenerator[AsyncClient, None]:
    """API client backed by the fake Supabase."""
    async with await make_client(test_settings, supabase_client) as ac:
        yield ac
