"""
Structured data (Schema.org JSON-LD) for site pages.

Usage:
    from lawsite.services.schema import build_page_schemas, render_json_ld

    schemas = build_page_schemas(
        schema_type='["Attorney", "FAQPage"]',
        site=site_info,
        page_url="https://libertylawfirm.net/about/",
        page_title="About",
        page_description="About the firm",
        page_content=page.content,
    )
    html = render_json_ld(schemas)
"""

from lawsite.services.schema.helpers import (
    build_faq_schema,
    build_local_business_schema,
    build_web_page_schema,
    extract_faq_items,
    parse_address_line,
    parse_schema_types,
)
from lawsite.services.schema.json_ld import build_page_schemas, render_json_ld

__all__ = [
    "parse_schema_types",
    "extract_faq_items",
    "parse_address_line",
    "build_faq_schema",
    "build_local_business_schema",
    "build_web_page_schema",
    "build_page_schemas",
    "render_json_ld",
]
