"""
Core models and types for the site backend.

Everything here is transient: built per request from CMS-delivered JSON.
"""

import json
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator


# =============================================================================
# Base Models
# =============================================================================


class BaseSchema(BaseModel):
    """Base schema with common configuration."""
    model_config = ConfigDict(from_attributes=True, extra="ignore")


# =============================================================================
# Structured data
# =============================================================================


class FaqItem(BaseSchema):
    question: str
    answer: str


class PostalAddressParts(BaseSchema):
    """City / state / ZIP parsed from a "City, ST 12345" line."""
    city: str = ""
    state: str = ""
    zip: str = ""


class SiteInfo(BaseSchema):
    """Business identity used to populate structured data."""
    site_name: str = "Liberty Law, P.C."
    phone_number: str = "6304494800"
    phone_display: str = "(630) 449-4800"
    logo_url: str = ""
    address_line1: str = ""
    address_line2: str = ""

    @classmethod
    def from_settings_row(cls, row: dict[str, Any] | None) -> "SiteInfo":
        """Map a site_settings row, keeping defaults for empty columns."""
        defaults = cls()
        if not row:
            return defaults
        return cls(
            site_name=_column_text(row, "site_name", defaults.site_name),
            phone_number=_column_text(row, "phone_number", defaults.phone_number),
            phone_display=_column_text(row, "phone_display", defaults.phone_display),
            logo_url=_column_text(row, "logo_url", defaults.logo_url),
            address_line1=_column_text(row, "address_line1", defaults.address_line1),
            address_line2=_column_text(row, "address_line2", defaults.address_line2),
        )


def _column_text(row: dict[str, Any], column: str, default: str) -> str:
    """Text value of a settings column; numbers are stringified, anything else is the default."""
    value = row.get(column)
    if isinstance(value, bool):
        return default
    if isinstance(value, (int, float)):
        return str(value)
    if isinstance(value, str) and value:
        return value
    return default


# =============================================================================
# Pages
# =============================================================================


class PageSeoMeta(BaseSchema):
    meta_title: str | None = None
    meta_description: str | None = None
    canonical_url: str | None = None
    og_title: str | None = None
    og_description: str | None = None
    og_image: str | None = None
    noindex: bool = False

    @classmethod
    def from_row(cls, row: dict[str, Any]) -> "PageSeoMeta":
        return cls(
            meta_title=row.get("meta_title") or None,
            meta_description=row.get("meta_description") or None,
            canonical_url=row.get("canonical_url") or None,
            og_title=row.get("og_title") or None,
            og_description=row.get("og_description") or None,
            og_image=row.get("og_image") or None,
            noindex=bool(row.get("noindex") or False),
        )


class SimplePageContent(BaseSchema):
    """Title + rich-text body pages (privacy, terms, complaints)."""
    title: str
    body: str


class PageRecord(BaseSchema):
    """One published row of the CMS `pages` table."""
    url_path: str = ""
    title: str | None = None
    content: Any = None
    meta_title: str | None = None
    meta_description: str | None = None
    canonical_url: str | None = None
    og_title: str | None = None
    og_description: str | None = None
    og_image: str | None = None
    noindex: bool | None = False
    schema_type: Any = None
    schema_data: dict[str, Any] | None = None
    updated_at: str | None = None

    @field_validator("schema_data", mode="before")
    @classmethod
    def coerce_schema_data(cls, v: Any) -> dict[str, Any] | None:
        """Structured-data overrides must be an object; a JSON object string is decoded."""
        if isinstance(v, str):
            try:
                v = json.loads(v)
            except ValueError:
                return None
        return v if isinstance(v, dict) else None


class PageResponse(BaseModel):
    """API payload for a published page."""
    url_path: str
    title: str | None = None
    content: Any = None
    seo: PageSeoMeta
    json_ld: list[dict[str, Any]] = Field(default_factory=list)


# =============================================================================
# Sitemap / links
# =============================================================================


class SitemapEntry(BaseSchema):
    loc: str
    lastmod: str | None = None
    changefreq: str | None = None
    priority: str | None = None


class SeoLink(BaseSchema):
    href: str
    label: str = ""


# =============================================================================
# Default content
# =============================================================================

DEFAULT_PRIVACY_POLICY = SimplePageContent(
    title="Privacy Policy",
    body=(
        "<p>At Liberty Law, P.C., we are committed to protecting your privacy. "
        "This policy outlines how we collect, use, and safeguard your personal information.</p>\n"
        "<h3>Information Collection</h3>\n"
        "<p>We collect information that you voluntarily provide to us via contact forms, "
        "email, or telephone.</p>\n"
        "<h3>Use of Information</h3>\n"
        "<p>We use the information you provide to contact you regarding your inquiry. "
        "We do not sell, rent, or lease your personal data to third parties.</p>"
    ),
)

DEFAULT_TERMS = SimplePageContent(
    title="Terms and Conditions",
    body=(
        "<h3>1. Acceptance of Terms</h3>\n"
        "<p>By accessing and using the Liberty Law, P.C. website, you agree to be bound "
        "by these Terms and Conditions.</p>\n"
        "<h3>2. No Legal Advice</h3>\n"
        "<p>The materials on this website are for informational purposes only and are "
        "not legal advice.</p>\n"
        "<h3>3. Governing Law</h3>\n"
        "<p>These terms and conditions are governed by the laws of the State of Illinois.</p>"
    ),
)

DEFAULT_COMPLAINTS = SimplePageContent(
    title="Complaints Process",
    body=(
        "<p>If you are dissatisfied with any aspect of our service, we want to address it "
        "immediately.</p>\n"
        "<h3>How to Report a Concern</h3>\n"
        '<p>Please contact our office directly at <a href="tel:6304494800">(630) 449-4800</a> '
        'or via email at <a href="mailto:info@libertylawfirm.net">info@libertylawfirm.net</a>.</p>'
    ),
)

DEFAULT_SIMPLE_PAGES: dict[str, SimplePageContent] = {
    "/privacy-policy": DEFAULT_PRIVACY_POLICY,
    "/terms-and-conditions": DEFAULT_TERMS,
    "/complaints-process": DEFAULT_COMPLAINTS,
}
