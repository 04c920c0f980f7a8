"""
HTTP API: health check, sitemap and page content endpoints.
"""
