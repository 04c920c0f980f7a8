"""
Sitemap endpoint.

Static routes are always present; published CMS pages are added when
Supabase is reachable. A failed page fetch still returns the static
sitemap.
"""

import structlog
from fastapi import APIRouter, Depends
from fastapi.responses import Response

from lawsite.api.deps import get_app_settings, get_supabase_client
from lawsite.core.config import Settings
from lawsite.core.exceptions import LawSiteException
from lawsite.core.logging import enrich_event
from lawsite.services.sitemap import build_sitemap_xml, collect_sitemap_entries
from lawsite.services.supabase import SupabaseRestClient

router = APIRouter()
logger = structlog.get_logger()


@router.get("/sitemap.xml", response_class=Response)
async def sitemap(
    config: Settings = Depends(get_app_settings),
    client: SupabaseRestClient | None = Depends(get_supabase_client),
) -> Response:
    pages = []
    if client is not None:
        try:
            pages = await client.list_published_pages("url_path,updated_at", order="url_path")
        except LawSiteException as e:
            logger.error("Sitemap: failed to fetch pages from Supabase", error=e.message)
            enrich_event(**{"supabase.error": e.message})

    entries = collect_sitemap_entries(config.site_url, pages)
    enrich_event(sitemap={"entries": len(entries), "cms_pages": len(pages)})

    return Response(
        content=build_sitemap_xml(entries),
        media_type="application/xml; charset=utf-8",
        headers={"Cache-Control": "public, max-age=3600"},
    )
