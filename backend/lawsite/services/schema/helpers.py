"""
Schema.org JSON-LD helpers.

Builds structured data objects from CMS-authored schema types and
auto-detects FAQ items in page content. None of these functions raise on
malformed CMS input; bad values degrade to empty results.
"""

import json
import re
from collections.abc import Iterable, Mapping
from typing import Any

import structlog

from lawsite.core.constants import ADDRESS_LINE_PATTERN, SCHEMA_CONTEXT
from lawsite.core.models import FaqItem, PostalAddressParts, SiteInfo

logger = structlog.get_logger()

_ADDRESS_RE = re.compile(ADDRESS_LINE_PATTERN)


# =============================================================================
# Schema type parsing
# =============================================================================


def _unique_strings(values: Iterable[Any]) -> list[str]:
    seen: set[str] = set()
    result = []
    for value in values:
        if isinstance(value, str) and value not in seen:
            seen.add(value)
            result.append(value)
    return result


def parse_schema_types(raw: Any) -> list[str]:
    """Normalize a `schema_type` column value to a list of type tags.

    The column may hold a single tag ("LocalBusiness"), a JSON-encoded
    array ('["WebPage", "FAQPage"]') or a native list. Non-string entries
    are dropped and duplicates removed, keeping first-seen order.
    """
    if not raw:
        return []

    if isinstance(raw, (list, tuple)):
        return _unique_strings(raw)

    if isinstance(raw, str):
        trimmed = raw.strip()
        if trimmed.startswith("["):
            try:
                parsed = json.loads(trimmed)
            except ValueError:
                parsed = None
            if isinstance(parsed, list):
                return _unique_strings(parsed)
        if trimmed:
            return [trimmed]

    return []


# =============================================================================
# FAQ auto-detection
# =============================================================================


def _is_faq_shaped(item: Any) -> bool:
    return (
        isinstance(item, Mapping)
        and isinstance(item.get("question"), str)
        and isinstance(item.get("answer"), str)
    )


def extract_faq_items(content: Any) -> list[FaqItem]:
    """Depth-first search for the first list of question/answer objects.

    Lists: FAQ-shaped elements are returned directly, otherwise each
    element is searched in turn. Mappings: `faq.items` is tried first,
    then a direct `items` list, then every value in insertion order.
    """
    if isinstance(content, list):
        items = [item for item in content if _is_faq_shaped(item)]
        if items:
            return [FaqItem(question=i["question"], answer=i["answer"]) for i in items]

        for element in content:
            found = extract_faq_items(element)
            if found:
                return found
        return []

    if not isinstance(content, Mapping):
        return []

    faq = content.get("faq")
    if isinstance(faq, Mapping) and isinstance(faq.get("items"), list):
        found = extract_faq_items(faq["items"])
        if found:
            return found

    if isinstance(content.get("items"), list):
        found = extract_faq_items(content["items"])
        if found:
            return found

    for value in content.values():
        if isinstance(value, (Mapping, list)):
            found = extract_faq_items(value)
            if found:
                return found

    return []


# =============================================================================
# Address parsing
# =============================================================================


def parse_address_line(line: str | None) -> PostalAddressParts:
    """Split "Naperville, IL 60563" into city, state and ZIP.

    Lines that do not follow that shape yield empty parts.
    """
    if not line:
        return PostalAddressParts()
    match = _ADDRESS_RE.match(line)
    if not match:
        return PostalAddressParts()
    return PostalAddressParts(city=match.group(1), state=match.group(2), zip=match.group(3))


# =============================================================================
# Schema builders
# =============================================================================


def build_faq_schema(items: Iterable[FaqItem]) -> dict[str, Any]:
    return {
        "@context": SCHEMA_CONTEXT,
        "@type": "FAQPage",
        "mainEntity": [
            {
                "@type": "Question",
                "name": item.question,
                "acceptedAnswer": {
                    "@type": "Answer",
                    "text": item.answer,
                },
            }
            for item in items
        ],
    }


def build_local_business_schema(
    site: SiteInfo,
    custom_data: Mapping[str, Any] | None = None,
    schema_type: str = "LocalBusiness",
) -> dict[str, Any]:
    """LocalBusiness (or Attorney / LegalService) for the firm.

    Keys in `custom_data` (the CMS `schema_data` column) override the
    generated ones.
    """
    schema: dict[str, Any] = {
        "@context": SCHEMA_CONTEXT,
        "@type": schema_type,
        "name": site.site_name,
        "telephone": site.phone_display,
        "image": site.logo_url,
    }

    if site.address_line1:
        parts = parse_address_line(site.address_line2)
        schema["address"] = {
            "@type": "PostalAddress",
            "streetAddress": site.address_line1,
            "addressLocality": parts.city,
            "addressRegion": parts.state,
            "postalCode": parts.zip,
        }

    if custom_data:
        schema.update(custom_data)
    return schema


def build_web_page_schema(
    title: str,
    description: str,
    url: str,
    schema_type: str = "WebPage",
) -> dict[str, Any]:
    return {
        "@context": SCHEMA_CONTEXT,
        "@type": schema_type,
        "name": title,
        "description": description,
        "url": url,
    }
