"""
JSON-LD assembly for a page.

Turns the page's raw `schema_type` into the list of structured-data
objects to embed, and renders them as <script type="application/ld+json">
blocks.
"""

import json
from collections.abc import Iterable, Mapping
from typing import Any

import structlog

from lawsite.core.constants import BUSINESS_TYPES, FAQ_TYPE, WEBPAGE_TYPES
from lawsite.core.models import SiteInfo
from lawsite.services.schema.helpers import (
    build_faq_schema,
    build_local_business_schema,
    build_web_page_schema,
    extract_faq_items,
    parse_schema_types,
)

logger = structlog.get_logger()


def build_page_schemas(
    schema_type: Any,
    site: SiteInfo,
    page_url: str,
    page_title: str,
    page_description: str,
    schema_data: Mapping[str, Any] | None = None,
    page_content: Any = None,
) -> list[dict[str, Any]]:
    """Build every structured-data object a page asks for.

    Unknown types are skipped. FAQPage is only emitted when the page
    content actually contains question/answer items.
    """
    schemas: list[dict[str, Any]] = []

    for tag in parse_schema_types(schema_type):
        if tag in BUSINESS_TYPES:
            schemas.append(build_local_business_schema(site, schema_data, tag))
        elif tag in WEBPAGE_TYPES:
            schemas.append(build_web_page_schema(page_title, page_description, page_url, tag))
        elif tag == FAQ_TYPE:
            faq_items = extract_faq_items(page_content)
            if faq_items:
                schemas.append(build_faq_schema(faq_items))
        else:
            logger.debug("Skipping unsupported schema type", schema_type=tag, page_url=page_url)

    return schemas


def render_json_ld(schemas: Iterable[Mapping[str, Any]]) -> str:
    """Render schema objects as JSON-LD script blocks."""
    blocks = []
    for schema in schemas:
        # "</script>" inside a string value must not end the block
        payload = json.dumps(schema, ensure_ascii=False).replace("<", "\\u003c")
        blocks.append(f'<script type="application/ld+json">{payload}</script>')
    return "\n".join(blocks)
