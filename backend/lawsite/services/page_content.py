"""
Page Content Service

Loads CMS page rows through the Supabase REST client and keeps them in a
per-path in-memory cache owned by the service instance.

Usage:
    from lawsite.services.page_content import PageContentService

    async with SupabaseRestClient.from_settings() as client:
        service = PageContentService(client)
        result = await service.load_simple_page("/privacy-policy", DEFAULT_PRIVACY_POLICY)
        print(result.content.title, result.seo_meta.noindex)
"""

from dataclasses import dataclass
from typing import Any, Generic, TypeVar

import structlog
from pydantic import ValidationError

from lawsite.core.exceptions import ExternalServiceError, LawSiteException, ResourceNotFoundError
from lawsite.core.models import PageRecord, PageSeoMeta, SimplePageContent, SiteInfo
from lawsite.services.supabase import SIMPLE_PAGE_COLUMNS, SupabaseRestClient

logger = structlog.get_logger()

T = TypeVar("T")


class PageContentCache(Generic[T]):
    """In-memory cache keyed by URL path.

    Lives as long as its owner; there is no expiry, callers clear it after
    CMS edits.
    """

    def __init__(self) -> None:
        self._entries: dict[str, T] = {}

    def get(self, url_path: str) -> T | None:
        return self._entries.get(url_path)

    def set(self, url_path: str, value: T) -> None:
        self._entries[url_path] = value

    def clear(self, url_path: str | None = None) -> None:
        """Drop one path, or everything when no path is given."""
        if url_path is None:
            self._entries.clear()
        else:
            self._entries.pop(url_path, None)

    def __contains__(self, url_path: object) -> bool:
        return url_path in self._entries

    def __len__(self) -> int:
        return len(self._entries)


@dataclass
class SimplePageResult:
    """Outcome of loading a simple content page."""
    content: SimplePageContent
    seo_meta: PageSeoMeta
    error: Exception | None = None
    from_cache: bool = False


@dataclass
class _SimplePageEntry:
    content: SimplePageContent
    seo_meta: PageSeoMeta


class PageContentService:
    """
    Fetch-and-cache access to published CMS pages.

    Simple pages never fail: network and parse errors are logged and the
    caller's default content is returned instead.
    """

    def __init__(
        self,
        client: SupabaseRestClient,
        simple_cache: PageContentCache[_SimplePageEntry] | None = None,
        page_cache: PageContentCache[PageRecord] | None = None,
    ):
        self.client = client
        self.simple_cache = simple_cache if simple_cache is not None else PageContentCache()
        self.page_cache = page_cache if page_cache is not None else PageContentCache()
        self.log = logger.bind(component="PageContentService")

    async def load_simple_page(
        self,
        url_path: str,
        default: SimplePageContent,
    ) -> SimplePageResult:
        """Load a title/body page, merging CMS values over the defaults."""
        cached = self.simple_cache.get(url_path)
        if cached is not None:
            return SimplePageResult(cached.content, cached.seo_meta, from_cache=True)

        try:
            row = await self.client.fetch_published_page(url_path, SIMPLE_PAGE_COLUMNS)

            if row is None:
                # Unpublished or not created yet - defaults, not cached
                return SimplePageResult(default, PageSeoMeta())

            cms_content = row.get("content")
            if not isinstance(cms_content, dict):
                cms_content = {}

            content = SimplePageContent(
                title=cms_content.get("title") or default.title,
                body=cms_content.get("body") or default.body,
            )
            seo_meta = PageSeoMeta.from_row(row)
        except (LawSiteException, ValidationError, ValueError) as e:
            self.log.error("Failed to load page content", url_path=url_path, error=str(e))
            return SimplePageResult(default, PageSeoMeta(), error=e)

        self.simple_cache.set(url_path, _SimplePageEntry(content, seo_meta))
        return SimplePageResult(content, seo_meta)

    async def load_page(self, url_path: str) -> PageRecord:
        """Full published row for a path.

        Raises:
            ResourceNotFoundError: no published page at that path
            ExternalServiceError: the REST call failed
        """
        cached = self.page_cache.get(url_path)
        if cached is not None:
            return cached

        row = await self.client.fetch_published_page(url_path, "*")
        if row is None:
            raise ResourceNotFoundError(f"Page not found: {url_path}", details={"url_path": url_path})

        try:
            page = PageRecord.model_validate(row)
        except ValidationError as e:
            raise ExternalServiceError(
                "Malformed page row", details={"url_path": url_path, "errors": e.errors()}
            ) from e

        self.page_cache.set(url_path, page)
        return page

    async def prefetch(self, url_path: str) -> bool:
        """Warm the cache for a path. Returns whether the page is now cached."""
        if url_path in self.page_cache:
            return True
        try:
            await self.load_page(url_path)
        except LawSiteException as e:
            self.log.debug("Prefetch skipped", url_path=url_path, error=e.message)
            return False
        return True

    def clear_cache(self, url_path: str | None = None) -> None:
        """Forget cached pages (one path or all), e.g. after an admin edit."""
        self.simple_cache.clear(url_path)
        self.page_cache.clear(url_path)
        self.log.info("Page cache cleared", url_path=url_path or "*")


async def load_site_info(client: SupabaseRestClient) -> SiteInfo:
    """Business identity from site_settings, defaults when unavailable."""
    try:
        row: dict[str, Any] | None = await client.fetch_site_settings(
            "site_name,phone_number,phone_display,logo_url,address_line1,address_line2"
        )
        return SiteInfo.from_settings_row(row)
    except LawSiteException as e:
        logger.warning("Falling back to default site info", error=e.message)
    except ValidationError as e:
        logger.warning("Malformed site settings, using defaults", error=str(e))
    return SiteInfo()
