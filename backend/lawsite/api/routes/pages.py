"""
Published page content with its SEO metadata and JSON-LD.
"""

from fastapi import APIRouter, Depends

from lawsite.api.deps import get_app_settings, get_page_service
from lawsite.api.middleware import add_page_to_wide_event
from lawsite.core.config import Settings
from lawsite.core.exceptions import ConfigurationError
from lawsite.core.logging import enrich_event
from lawsite.core.models import DEFAULT_SIMPLE_PAGES, PageResponse, PageSeoMeta
from lawsite.services.page_content import PageContentService, load_site_info
from lawsite.services.schema import build_page_schemas, parse_schema_types
from lawsite.services.url_utils import with_trailing_slash

router = APIRouter()


def _require_service(service: PageContentService | None) -> PageContentService:
    if service is None:
        raise ConfigurationError("Supabase is not configured")
    return service


async def _simple_page_response(
    path: str,
    service: PageContentService | None,
) -> PageResponse:
    """Title/body pages always render: CMS values over the built-in defaults."""
    default = DEFAULT_SIMPLE_PAGES[path]
    if service is None:
        add_page_to_wide_event(url_path=path, cache_hit=False)
        return PageResponse(
            url_path=path, title=default.title, content=default.model_dump(), seo=PageSeoMeta()
        )

    result = await service.load_simple_page(path, default)
    add_page_to_wide_event(url_path=path, cache_hit=result.from_cache)
    if result.error is not None:
        enrich_event(page_fallback=True, **{"supabase.error": str(result.error)})

    return PageResponse(
        url_path=path,
        title=result.content.title,
        content=result.content.model_dump(),
        seo=result.seo_meta,
    )


@router.post("/cache/clear")
async def clear_page_cache(
    url_path: str | None = None,
    service: PageContentService | None = Depends(get_page_service),
) -> dict:
    """Drop cached pages after a CMS edit."""
    service = _require_service(service)
    service.clear_cache(url_path)
    return {"cleared": url_path or "all"}


@router.get("/{url_path:path}", response_model=PageResponse)
async def get_page(
    url_path: str,
    config: Settings = Depends(get_app_settings),
    service: PageContentService | None = Depends(get_page_service),
) -> PageResponse:
    """Page row for a URL path ("about" -> "/about")."""
    path = "/" + url_path.strip("/")
    if path in DEFAULT_SIMPLE_PAGES:
        return await _simple_page_response(path, service)

    service = _require_service(service)

    cache_hit = path in service.page_cache
    page = await service.load_page(path)
    seo = PageSeoMeta.from_row(page.model_dump())

    site = await load_site_info(service.client)
    page_url = seo.canonical_url or f"{config.site_url}{with_trailing_slash(path)}"
    json_ld = build_page_schemas(
        schema_type=page.schema_type,
        site=site,
        page_url=page_url,
        page_title=seo.meta_title or page.title or "",
        page_description=seo.meta_description or "",
        schema_data=page.schema_data,
        page_content=page.content,
    )

    add_page_to_wide_event(
        url_path=path,
        cache_hit=cache_hit,
        schema_types=parse_schema_types(page.schema_type),
    )

    return PageResponse(
        url_path=page.url_path or path,
        title=page.title,
        content=page.content,
        seo=seo,
        json_ld=json_ld,
    )
