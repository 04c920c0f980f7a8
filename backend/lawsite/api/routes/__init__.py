"""
API route modules.
"""

from lawsite.api.routes import health, pages, sitemap

__all__ = ["health", "pages", "sitemap"]
