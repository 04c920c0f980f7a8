"""
SEO Link Injection

Post-build step: every prerendered HTML file gets a <noscript> block
listing the site's navigation and page links, so crawlers that do not run
JavaScript (or do not wait for CMS fetches) can still discover them.

Usage:
    from lawsite.services.seo_links import build_noscript_block, collect_links, inject_links_into_dir

    links = collect_links(settings_row, pages)
    block = build_noscript_block(links, "https://libertylawfirm.net")
    written = inject_links_into_dir(Path("dist/spa"), block)
"""

import html
from collections.abc import Iterable
from pathlib import Path
from typing import Any

import structlog

from lawsite.core.constants import SEO_LINKS_MARKER, STATIC_SEO_LINKS
from lawsite.core.models import SeoLink
from lawsite.services.url_utils import normalize_href, to_absolute

logger = structlog.get_logger()


class LinkCollector:
    """Ordered link list, deduplicated by normalized href."""

    def __init__(self, seed: Iterable[tuple[str, str]] = STATIC_SEO_LINKS):
        self.links: list[SeoLink] = []
        self._seen: set[str] = set()
        for href, label in seed:
            self.add(href, label)

    def add(self, href: Any, label: Any = "") -> None:
        if not href or not isinstance(href, str):
            return
        key = normalize_href(href)
        if key in self._seen:
            return
        self._seen.add(key)
        self.links.append(SeoLink(href=href, label=label if isinstance(label, str) else ""))

    def add_many(self, items: Any) -> None:
        if not isinstance(items, list):
            return
        for item in items:
            if isinstance(item, dict):
                self.add(item.get("href"), item.get("label"))


def collect_links(
    settings_row: dict[str, Any] | None = None,
    pages: Iterable[dict[str, Any]] = (),
) -> list[SeoLink]:
    """Static seed links, then CMS navigation/footer/social links, then pages."""
    collector = LinkCollector()

    if settings_row:
        nav_items = settings_row.get("navigation_items")
        if isinstance(nav_items, list):
            for item in nav_items:
                if not isinstance(item, dict):
                    continue
                collector.add(item.get("href"), item.get("label"))
                collector.add_many(item.get("children"))

        collector.add_many(settings_row.get("footer_about_links"))
        collector.add_many(settings_row.get("footer_practice_links"))

        social_links = settings_row.get("social_links")
        if isinstance(social_links, list):
            for social in social_links:
                if isinstance(social, dict) and social.get("enabled") and social.get("url"):
                    collector.add(social["url"], social.get("platform") or "Social")

        if settings_row.get("header_cta_url"):
            collector.add(settings_row["header_cta_url"], "Contact")

    for page in pages:
        collector.add(page.get("url_path"), page.get("title") or "")

    return collector.links


def build_noscript_block(links: Iterable[SeoLink], site_url: str) -> str:
    anchors = "\n".join(
        f'    <a href="{html.escape(to_absolute(link.href, site_url))}">{html.escape(link.label)}</a>'
        for link in links
        if link.href
    )
    return f"<noscript>\n  <nav {SEO_LINKS_MARKER}>\n{anchors}\n  </nav>\n</noscript>"


def inject_into_html(document: str, block: str) -> str:
    """Insert the block before </body>. Already-injected files are unchanged."""
    if SEO_LINKS_MARKER in document:
        return document
    return document.replace("</body>", f"{block}\n</body>", 1)


def find_html_files(root: Path) -> list[Path]:
    if not root.exists():
        return []
    return sorted(p for p in root.rglob("*.html") if p.is_file())


def inject_links_into_dir(root: Path, block: str) -> int:
    """Inject the block into every HTML file under root; returns files written."""
    log = logger.bind(component="SeoLinkInjector", root=str(root))
    files = find_html_files(root)
    log.info("Found HTML files to process", count=len(files))

    written = 0
    for path in files:
        original = path.read_text(encoding="utf-8")
        updated = inject_into_html(original, block)
        if updated == original:
            continue
        path.write_text(updated, encoding="utf-8")
        written += 1

    log.info("Injected SEO links", files=written)
    return written
