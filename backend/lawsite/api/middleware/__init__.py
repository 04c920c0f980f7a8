"""
API Middleware package.

- Wide Events: canonical log line pattern for request logging
"""

from lawsite.api.middleware.wide_events import WideEventMiddleware, add_page_to_wide_event

__all__ = [
    "WideEventMiddleware",
    "add_page_to_wide_event",
]
