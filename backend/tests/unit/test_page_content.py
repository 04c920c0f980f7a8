"""
Unit tests for the page content service and its cache.
"""

import pytest

from lawsite.core.exceptions import ResourceNotFoundError
from lawsite.core.models import DEFAULT_PRIVACY_POLICY, SimplePageContent
from lawsite.services.page_content import PageContentCache, PageContentService, load_site_info


DEFAULT = SimplePageContent(title="Default title", body="<p>Default body</p>")


class TestPageContentCache:
    def test_set_get_contains(self):
        cache = PageContentCache()
        cache.set("/about", "row")
        assert cache.get("/about") == "row"
        assert "/about" in cache
        assert len(cache) == 1

    def test_missing(self):
        cache = PageContentCache()
        assert cache.get("/nope") is None
        assert "/nope" not in cache

    def test_clear_one_path(self):
        cache = PageContentCache()
        cache.set("/a", 1)
        cache.set("/b", 2)
        cache.clear("/a")
        assert "/a" not in cache
        assert cache.get("/b") == 2

    def test_clear_all(self):
        cache = PageContentCache()
        cache.set("/a", 1)
        cache.set("/b", 2)
        cache.clear()
        assert len(cache) == 0

    def test_clear_unknown_path_is_noop(self):
        cache = PageContentCache()
        cache.clear("/never-cached")
        assert len(cache) == 0


@pytest.mark.asyncio
class TestLoadSimplePage:
    async def test_merges_cms_content_and_seo(self, fake_supabase, supabase_client):
        fake_supabase.pages.append({
            "url_path": "/privacy-policy",
            "content": {"title": "Privacy", "body": ""},
            "meta_title": "Privacy | Liberty Law",
            "meta_description": "",
            "noindex": None,
        })
        service = PageContentService(supabase_client)

        result = await service.load_simple_page("/privacy-policy", DEFAULT)

        assert result.error is None
        assert result.content.title == "Privacy"
        assert result.content.body == DEFAULT.body
        assert result.seo_meta.meta_title == "Privacy | Liberty Law"
        assert result.seo_meta.meta_description is None
        assert result.seo_meta.noindex is False

    async def test_second_load_served_from_cache(self, fake_supabase, supabase_client):
        fake_supabase.pages.append({"url_path": "/terms", "content": {"title": "T", "body": "B"}})
        service = PageContentService(supabase_client)

        await service.load_simple_page("/terms", DEFAULT)
        result = await service.load_simple_page("/terms", DEFAULT)

        assert result.from_cache is True
        assert result.content.title == "T"
        assert len(fake_supabase.requests) == 1

    async def test_missing_row_returns_defaults_uncached(self, fake_supabase, supabase_client):
        service = PageContentService(supabase_client)

        result = await service.load_simple_page("/privacy-policy", DEFAULT_PRIVACY_POLICY)

        assert result.content == DEFAULT_PRIVACY_POLICY
        assert result.error is None
        assert "/privacy-policy" not in service.simple_cache

    async def test_http_failure_falls_back_to_default(self, fake_supabase, supabase_client):
        fake_supabase.fail_status = 500
        service = PageContentService(supabase_client)

        result = await service.load_simple_page("/terms", DEFAULT)

        assert result.content == DEFAULT
        assert result.error is not None
        assert "/terms" not in service.simple_cache

    async def test_non_dict_content_uses_defaults(self, fake_supabase, supabase_client):
        fake_supabase.pages.append({"url_path": "/complaints", "content": "oops"})
        service = PageContentService(supabase_client)

        result = await service.load_simple_page("/complaints", DEFAULT)

        assert result.content == DEFAULT

    async def test_request_filters_path_and_status(self, fake_supabase, supabase_client):
        service = PageContentService(supabase_client)
        await service.load_simple_page("/privacy-policy", DEFAULT)

        request = fake_supabase.requests[0]
        assert request.url.params["url_path"] == "eq./privacy-policy"
        assert request.url.params["status"] == "eq.published"
        assert "meta_title" in request.url.params["select"]
        assert request.headers["apikey"] == "anon-key"
        assert request.headers["authorization"] == "Bearer anon-key"


@pytest.mark.asyncio
class TestLoadPage:
    async def test_loads_and_caches(self, fake_supabase, supabase_client):
        fake_supabase.pages.append({
            "url_path": "/about",
            "title": "About",
            "content": {"hero": {"title": "About"}},
            "schema_type": '["AboutPage"]',
        })
        service = PageContentService(supabase_client)

        page = await service.load_page("/about")
        again = await service.load_page("/about")

        assert page.title == "About"
        assert again is page
        assert len(fake_supabase.requests) == 1

    async def test_unpublished_page_not_found(self, fake_supabase, supabase_client):
        fake_supabase.pages.append({"url_path": "/draft", "status": "draft"})
        service = PageContentService(supabase_client)

        with pytest.raises(ResourceNotFoundError):
            await service.load_page("/draft")

    async def test_prefetch(self, fake_supabase, supabase_client):
        fake_supabase.pages.append({"url_path": "/about", "title": "About"})
        service = PageContentService(supabase_client)

        assert await service.prefetch("/about") is True
        assert "/about" in service.page_cache
        assert await service.prefetch("/missing") is False

    async def test_clear_cache_forces_refetch(self, fake_supabase, supabase_client):
        fake_supabase.pages.append({"url_path": "/about", "title": "About"})
        service = PageContentService(supabase_client)

        await service.load_page("/about")
        service.clear_cache("/about")
        await service.load_page("/about")

        assert len(fake_supabase.requests) == 2

    async def test_separate_services_do_not_share_cache(self, fake_supabase, supabase_client):
        fake_supabase.pages.append({"url_path": "/about", "title": "About"})
        first = PageContentService(supabase_client)
        second = PageContentService(supabase_client)

        await first.load_page("/about")

        assert "/about" not in second.page_cache


@pytest.mark.asyncio
class TestLoadSiteInfo:
    async def test_maps_row(self, fake_supabase, supabase_client):
        fake_supabase.site_settings = {
            "site_name": "Liberty Law",
            "phone_display": "630-449-4800",
            "address_line2": "Naperville, IL 60563",
        }
        site = await load_site_info(supabase_client)
        assert site.site_name == "Liberty Law"
        assert site.phone_display == "630-449-4800"
        assert site.address_line2 == "Naperville, IL 60563"

    async def test_failure_gives_defaults(self, fake_supabase, supabase_client):
        fake_supabase.fail_status = 503
        site = await load_site_info(supabase_client)
        assert site.site_name == "Liberty Law, P.C."

    async def test_numeric_columns_are_stringified(self, fake_supabase, supabase_client):
        fake_supabase.site_settings = {"phone_number": 6304494800, "site_name": ["Liberty"]}
        site = await load_site_info(supabase_client)
        assert site.phone_number == "6304494800"
        assert site.site_name == "Liberty Law, P.C."

    async def test_non_text_columns_keep_defaults(self, fake_supabase, supabase_client):
        fake_supabase.site_settings = {"address_line1": {"street": "1 Main St"}, "logo_url": True}
        site = await load_site_info(supabase_client)
        assert site.address_line1 == ""
        assert site.logo_url == ""


@pytest.mark.asyncio
class TestPageSchemaData:
    async def test_json_string_is_decoded(self, fake_supabase, supabase_client):
        fake_supabase.pages.append({"url_path": "/about", "schema_data": '{"areaServed": "DuPage County"}'})
        page = await PageContentService(supabase_client).load_page("/about")
        assert page.schema_data == {"areaServed": "DuPage County"}

    @pytest.mark.parametrize("raw", ["not json", '["a", "b"]', [1, 2], 42])
    async def test_non_object_is_dropped(self, fake_supabase, supabase_client, raw):
        fake_supabase.pages.append({"url_path": "/about", "title": "About", "schema_data": raw})
        page = await PageContentService(supabase_client).load_page("/about")
        assert page.schema_data is None
        assert page.title == "About"
