"""
Services layer for the site backend.

MODULES:
- supabase/: REST, auth and storage access to the hosted CMS database
- schema/: Schema.org JSON-LD builders and FAQ auto-detection
- dni/: WhatConverts phone-number sync and re-scan triggers

STANDALONE SERVICES:
- page_content: fetch-and-cache loading of published CMS pages
- url_utils: trailing-slash and sitemap URL normalization
- sitemap: sitemap.xml generation and post-build patching
- seo_links: <noscript> link injection into prerendered HTML
- media: remote image upload into CMS storage
"""
