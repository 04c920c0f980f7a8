"""
Supabase Module - REST Client.

Async client for the hosted database's auto-generated REST API
(PostgREST), its auth token endpoint and its storage API. Only the
handful of calls the site needs are implemented.
"""

from typing import Any
from urllib.parse import quote

import httpx
import structlog

from lawsite.core.config import Settings, settings as default_settings
from lawsite.core.exceptions import ConfigurationError, ExternalServiceError

logger = structlog.get_logger()

# Columns the simple content pages need
SIMPLE_PAGE_COLUMNS = (
    "content,meta_title,meta_description,canonical_url,"
    "og_title,og_description,og_image,noindex"
)


class SupabaseRestClient:
    """
    Async client for Supabase REST, auth and storage endpoints.

    Pass an existing httpx.AsyncClient to share a connection pool (and to
    inject a MockTransport in tests); otherwise one is created and owned.
    """

    def __init__(
        self,
        base_url: str,
        api_key: str,
        http: httpx.AsyncClient | None = None,
        timeout: float = 15.0,
    ):
        if not base_url or not api_key:
            raise ConfigurationError(
                "Supabase URL and API key are required",
                details={"has_url": bool(base_url), "has_key": bool(api_key)},
            )
        self.base_url = base_url.rstrip("/")
        self.api_key = api_key
        self._owns_http = http is None
        self.http = http or httpx.AsyncClient(timeout=timeout)
        self.log = logger.bind(component="SupabaseRestClient")

    @classmethod
    def from_settings(
        cls,
        config: Settings | None = None,
        http: httpx.AsyncClient | None = None,
    ) -> "SupabaseRestClient":
        config = config or default_settings
        return cls(config.supabase_url, config.server_key, http=http, timeout=config.request_timeout)

    async def aclose(self) -> None:
        if self._owns_http:
            await self.http.aclose()

    async def __aenter__(self) -> "SupabaseRestClient":
        return self

    async def __aexit__(self, *exc_info: Any) -> None:
        await self.aclose()

    # -------------------------------------------------------------------------
    # Helpers
    # -------------------------------------------------------------------------

    def _headers(self, bearer: str | None = None) -> dict[str, str]:
        return {
            "apikey": self.api_key,
            "Authorization": f"Bearer {bearer or self.api_key}",
        }

    async def _get_rows(self, table: str, query: str) -> list[dict[str, Any]]:
        url = f"{self.base_url}/rest/v1/{table}?{query}"
        try:
            response = await self.http.get(url, headers=self._headers())
        except httpx.RequestError as e:
            raise ExternalServiceError(f"Supabase request failed: {e}", details={"table": table}) from e

        if response.is_error:
            raise ExternalServiceError(
                f"HTTP error: {response.status_code}",
                status_code=response.status_code,
                details={"table": table},
            )

        try:
            data = response.json()
        except ValueError as e:
            raise ExternalServiceError("Supabase returned invalid JSON", details={"table": table}) from e

        if not isinstance(data, list):
            return []
        return [row for row in data if isinstance(row, dict)]

    # -------------------------------------------------------------------------
    # REST (PostgREST)
    # -------------------------------------------------------------------------

    async def fetch_published_page(
        self,
        url_path: str,
        columns: str = "*",
    ) -> dict[str, Any] | None:
        """Fetch one published row of `pages` by URL path, or None."""
        query = (
            f"url_path=eq.{quote(url_path, safe='')}"
            f"&status=eq.published&select={columns}"
        )
        rows = await self._get_rows("pages", query)
        self.log.debug("Fetched page", url_path=url_path, found=bool(rows))
        return rows[0] if rows else None

    async def list_published_pages(
        self,
        columns: str = "url_path,updated_at",
        order: str | None = "url_path",
    ) -> list[dict[str, Any]]:
        query = f"status=eq.published&select={columns}"
        if order:
            query += f"&order={order}"
        return await self._get_rows("pages", query)

    async def fetch_site_settings(self, columns: str = "*") -> dict[str, Any] | None:
        """The global site_settings row (nav, footer, phone, address)."""
        rows = await self._get_rows("site_settings", f"settings_key=eq.global&select={columns}")
        return rows[0] if rows else None

    async def ping(self) -> tuple[bool, int | None, str]:
        """Probe the REST root. Returns (ok, status_code, body_or_error)."""
        try:
            response = await self.http.get(
                f"{self.base_url}/rest/v1/",
                params={"apikey": self.api_key},
                headers=self._headers(),
            )
        except httpx.RequestError as e:
            return False, None, str(e)

        if response.is_success:
            return True, response.status_code, ""
        return False, response.status_code, response.text[:500]

    # -------------------------------------------------------------------------
    # Auth + storage
    # -------------------------------------------------------------------------

    async def sign_in_with_password(self, email: str, password: str) -> str:
        """Password grant; returns the access token."""
        try:
            response = await self.http.post(
                f"{self.base_url}/auth/v1/token",
                params={"grant_type": "password"},
                headers={"apikey": self.api_key},
                json={"email": email, "password": password},
            )
        except httpx.RequestError as e:
            raise ExternalServiceError(f"Supabase auth request failed: {e}") from e

        if response.is_error:
            raise ExternalServiceError("Supabase sign-in failed", status_code=response.status_code)

        token = response.json().get("access_token")
        if not token:
            raise ExternalServiceError("Supabase sign-in returned no access token")
        return token

    async def upload_object(
        self,
        bucket: str,
        path: str,
        data: bytes,
        content_type: str,
        access_token: str,
    ) -> dict[str, Any]:
        """Upload (upsert) an object into a storage bucket."""
        try:
            response = await self.http.post(
                f"{self.base_url}/storage/v1/object/{bucket}/{path}",
                headers={
                    "apikey": self.api_key,
                    "Authorization": f"Bearer {access_token}",
                    "Content-Type": content_type,
                    "x-upsert": "true",
                },
                content=data,
            )
        except httpx.RequestError as e:
            raise ExternalServiceError(f"Storage upload failed: {e}") from e

        if response.is_error:
            raise ExternalServiceError(
                "Storage upload failed",
                status_code=response.status_code,
                details={"bucket": bucket, "path": path},
            )
        return response.json()

    def public_object_url(self, bucket: str, path: str) -> str:
        return f"{self.base_url}/storage/v1/object/public/{bucket}/{path}"
