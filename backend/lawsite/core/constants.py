"""
Shared constants: routes, schema.org type groups, DNI selectors.
"""

SCHEMA_CONTEXT = "https://schema.org"

# schema_type tags rendered with the local-business builder
BUSINESS_TYPES = frozenset({"LocalBusiness", "Attorney", "LegalService"})

# schema_type tags rendered with the web-page builder
WEBPAGE_TYPES = frozenset({"WebPage", "AboutPage", "ContactPage"})

FAQ_TYPE = "FAQPage"

# "Naperville, IL 60563"
ADDRESS_LINE_PATTERN = r"^(.+),\s*([A-Z]{2})\s+(\d{5})"

# Static routes always included in the sitemap: (path, changefreq, priority)
STATIC_ROUTES: tuple[tuple[str, str, str], ...] = (
    ("/", "weekly", "1.0"),
    ("/about", "monthly", "0.8"),
    ("/practice-areas", "monthly", "0.9"),
    ("/contact", "monthly", "0.7"),
)

CMS_PAGE_CHANGEFREQ = "monthly"
CMS_PAGE_PRIORITY = "0.6"

# Seed links for the <noscript> navigation block
STATIC_SEO_LINKS: tuple[tuple[str, str], ...] = (
    ("/", "Home"),
    ("/about/", "About Us"),
    ("/practice-areas/", "Practice Areas"),
    ("/contact/", "Contact Us"),
    ("/privacy-policy/", "Privacy Policy"),
    ("/terms-and-conditions/", "Terms and Conditions"),
    ("/complaints-process/", "Complaints Process"),
)

SEO_LINKS_MARKER = "data-seo-links"

# Hrefs that are never rewritten by the trailing-slash rules
PASSTHROUGH_PREFIXES = ("http://", "https://", "//", "mailto:", "tel:", "sms:", "#")

# DNI (WhatConverts dynamic number insertion)
DNI_PRIMARY_SELECTOR = 'a[data-dni-phone="primary"][href^="tel:"]'
DNI_FOOTER_SELECTOR = 'a[data-dni-phone="footer"]'
WC_COPY_ATTR = "data-wc"
WC_SCRIPT_PATTERNS = ("ksrndkehqnwntyxlhgto", "whatconverts")
