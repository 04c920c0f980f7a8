#!/usr/bin/env python3
"""
Post-build step: inject a <noscript> navigation block into every
prerendered HTML file so crawlers that skip JavaScript still find all
site links.

Links come from the static seed list plus, when Supabase credentials are
available, the CMS navigation/footer settings and all published pages.

Usage:
    python scripts/inject_seo_links.py [--dist-dir dist/spa] [--site-url URL]
"""

import argparse
import asyncio
import sys
from pathlib import Path

# Add parent directory to path for imports
sys.path.insert(0, str(Path(__file__).parent.parent))

import structlog

from lawsite.core.config import settings
from lawsite.core.exceptions import LawSiteException
from lawsite.core.logging import configure_script_logging
from lawsite.services.seo_links import build_noscript_block, collect_links, inject_links_into_dir
from lawsite.services.supabase import SupabaseRestClient

configure_script_logging()
logger = structlog.get_logger()

SETTINGS_COLUMNS = (
    "navigation_items,footer_about_links,footer_practice_links,social_links,header_cta_url"
)


async def fetch_cms_sources() -> tuple[dict | None, list[dict]]:
    """Site settings row and published pages; empty when Supabase is unavailable."""
    if not settings.has_supabase:
        logger.info("No Supabase credentials, injecting static links only")
        return None, []

    try:
        async with SupabaseRestClient.from_settings(settings) as client:
            settings_row = await client.fetch_site_settings(SETTINGS_COLUMNS)
            pages = await client.list_published_pages("url_path,title", order=None)
    except LawSiteException as e:
        logger.warning("Supabase unavailable, using static links only", error=e.message)
        return None, []

    return settings_row, pages


async def main(dist_dir: Path, site_url: str) -> int:
    settings_row, pages = await fetch_cms_sources()
    links = collect_links(settings_row, pages)
    block = build_noscript_block(links, site_url)

    written = inject_links_into_dir(dist_dir, block)
    logger.info("Done", links=len(links), files=written)
    return written


if __name__ == "__main__":
    parser = argparse.ArgumentParser(description="Inject SEO links into prerendered HTML")
    parser.add_argument("--dist-dir", type=Path, default=Path(settings.dist_dir),
                        help="Directory with generated HTML files")
    parser.add_argument("--site-url", default=settings.site_url,
                        help="Absolute site URL used for link hrefs")
    args = parser.parse_args()

    try:
        asyncio.run(main(args.dist_dir, args.site_url))
    except Exception as e:
        logger.error("inject_seo_links failed", error=str(e))
        sys.exit(1)
