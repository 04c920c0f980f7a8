"""
Law-firm website backend: CMS page content, structured data, sitemap and
build-time SEO tooling.
"""

__version__ = "0.1.0"
