"""
Core package initialization.
"""

from lawsite.core.config import Settings, get_settings, settings
from lawsite.core.exceptions import (
    ConfigurationError,
    ExternalServiceError,
    LawSiteException,
    ResourceNotFoundError,
)
from lawsite.core.models import (
    FaqItem,
    PageRecord,
    PageSeoMeta,
    PostalAddressParts,
    SeoLink,
    SimplePageContent,
    SiteInfo,
    SitemapEntry,
)

__all__ = [
    # Config
    "Settings",
    "get_settings",
    "settings",
    # Errors
    "LawSiteException",
    "ConfigurationError",
    "ExternalServiceError",
    "ResourceNotFoundError",
    # Models
    "FaqItem",
    "PageRecord",
    "PageSeoMeta",
    "PostalAddressParts",
    "SeoLink",
    "SimplePageContent",
    "SiteInfo",
    "SitemapEntry",
]
