"""
Sitemap generation and post-build patching.

Generation: static routes plus every published CMS page.
Patching: the SSG step writes its own sitemap.xml; every <loc> in it is
rewritten to the canonical trailing-slash form with query and fragment
removed.
"""

import re
from collections.abc import Iterable
from datetime import UTC, datetime
from pathlib import Path
from typing import Any
from xml.sax.saxutils import escape

import structlog

from lawsite.core.constants import CMS_PAGE_CHANGEFREQ, CMS_PAGE_PRIORITY, STATIC_ROUTES
from lawsite.core.models import SitemapEntry
from lawsite.services.url_utils import normalize_loc_url

logger = structlog.get_logger()

SITEMAP_NS = "http://www.sitemaps.org/schemas/sitemap/0.9"

_LOC_RE = re.compile(r"<loc>(.*?)</loc>")

_XML_ESCAPES = {'"': "&quot;", "'": "&apos;"}


def lastmod_date(updated_at: Any) -> str | None:
    """UTC calendar date of an updated_at timestamp ("2024-03-05")."""
    if not updated_at:
        return None
    text = str(updated_at)
    try:
        parsed = datetime.fromisoformat(text.replace("Z", "+00:00"))
    except ValueError:
        return text[:10]
    if parsed.tzinfo is not None:
        parsed = parsed.astimezone(UTC)
    return parsed.date().isoformat()


def collect_sitemap_entries(
    site_url: str,
    pages: Iterable[dict[str, Any]] = (),
) -> list[SitemapEntry]:
    """Static routes first, then published pages not already listed."""
    site_url = site_url.rstrip("/")
    seen_paths = {path for path, _, _ in STATIC_ROUTES}

    entries = [
        SitemapEntry(loc=f"{site_url}{path}", changefreq=changefreq, priority=priority)
        for path, changefreq, priority in STATIC_ROUTES
    ]

    for page in pages:
        url_path = page.get("url_path")
        if not url_path or url_path in seen_paths:
            continue
        seen_paths.add(url_path)

        entries.append(SitemapEntry(
            loc=f"{site_url}{url_path}",
            lastmod=lastmod_date(page.get("updated_at")),
            changefreq=CMS_PAGE_CHANGEFREQ,
            priority=CMS_PAGE_PRIORITY,
        ))

    return entries


def build_sitemap_xml(entries: Iterable[SitemapEntry]) -> str:
    """Render a <urlset> document; empty optional fields are omitted."""
    blocks = []
    for entry in entries:
        lines = [f"    <loc>{escape(entry.loc, _XML_ESCAPES)}</loc>"]
        if entry.lastmod:
            lines.append(f"    <lastmod>{entry.lastmod}</lastmod>")
        if entry.changefreq:
            lines.append(f"    <changefreq>{entry.changefreq}</changefreq>")
        if entry.priority:
            lines.append(f"    <priority>{entry.priority}</priority>")
        blocks.append("  <url>\n" + "\n".join(lines) + "\n  </url>")

    return (
        '<?xml version="1.0" encoding="UTF-8"?>\n'
        f'<urlset xmlns="{SITEMAP_NS}">\n'
        + "\n".join(blocks)
        + "\n</urlset>"
    )


def patch_sitemap(xml: str) -> tuple[str, int]:
    """Canonicalize every <loc> URL. Returns (patched_xml, loc_count)."""
    patched = _LOC_RE.sub(lambda m: f"<loc>{normalize_loc_url(m.group(1).strip())}</loc>", xml)
    return patched, len(_LOC_RE.findall(patched))


def patch_sitemap_file(path: Path) -> int | None:
    """Patch a sitemap file in place.

    Returns the number of rewritten <loc> entries, 0 when the file was
    already canonical, or None when there is no sitemap to patch.
    """
    log = logger.bind(component="SitemapPatcher", path=str(path))

    if not path.exists():
        log.info("Sitemap not found, skipping")
        return None

    original = path.read_text(encoding="utf-8")
    patched, count = patch_sitemap(original)

    if patched == original:
        log.info("Sitemap already has trailing slashes, no changes needed")
        return 0

    path.write_text(patched, encoding="utf-8")
    log.info("Rewrote sitemap locations", count=count)
    return count
