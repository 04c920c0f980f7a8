"""
URL Utilities for the site.

Provides:
- with_trailing_slash: canonical internal link form ("/about" -> "/about/")
- normalize_href / to_absolute: link normalization for the build scripts
- normalize_loc_url: sitemap <loc> canonicalization

Every internal page is served with a trailing slash, so links, sitemap
entries and canonical URLs all have to agree on that form.
"""

from urllib.parse import urlsplit, urlunsplit

from lawsite.core.constants import PASSTHROUGH_PREFIXES


def _is_passthrough(url: str) -> bool:
    return url.startswith(PASSTHROUGH_PREFIXES)


def with_trailing_slash(url: str) -> str:
    """Ensure an internal URL's path segment ends with "/".

    - External URLs (http://, https://, //)  -> unchanged
    - Special schemes (mailto:, tel:, sms:)   -> unchanged
    - Hash-only links (#section)              -> unchanged
    - "/about"        -> "/about/"
    - "/about/"       -> "/about/"
    - "/contact?x=1"  -> "/contact/?x=1"
    - "/contact#faq"  -> "/contact/#faq"
    """
    if not url or _is_passthrough(url):
        return url

    if url == "/":
        return url

    # Only the path segment before the first "?" or "#" is touched
    cut = len(url)
    for marker in ("?", "#"):
        index = url.find(marker)
        if index != -1:
            cut = min(cut, index)

    path, suffix = url[:cut], url[cut:]
    if not path.endswith("/"):
        path += "/"
    return path + suffix


def normalize_href(href: str) -> str:
    """Trailing-slash form of a CMS href, adding a leading "/" when missing."""
    if not href or _is_passthrough(href):
        return href

    if not href.startswith("/"):
        href = "/" + href
    return with_trailing_slash(href)


def to_absolute(href: str, site_url: str) -> str:
    """Absolute URL for an internal href; external hrefs are returned as-is."""
    normalized = normalize_href(href)
    if not normalized or normalized.startswith(("http", "//", "mailto:", "tel:", "sms:", "#")):
        return normalized
    return f"{site_url.rstrip('/')}{normalized}"


def normalize_loc_url(raw: str) -> str:
    """Canonical sitemap <loc>: trailing slash, no query string or fragment.

    Only http(s) URLs are rewritten; anything else, including URLs that
    fail to parse, is returned unchanged.
    """
    if not raw.startswith(("http://", "https://")):
        return raw

    try:
        parsed = urlsplit(raw)
    except ValueError:
        return raw

    if not parsed.netloc:
        return raw

    path = parsed.path or "/"
    if not path.endswith("/"):
        path += "/"

    return urlunsplit((parsed.scheme, parsed.netloc, path, "", ""))
