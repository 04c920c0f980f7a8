"""
Wide Events Middleware for FastAPI.

Canonical log line per request:
- Initializes a wide event at request start
- Handlers enrich it (page path, cache hits, upstream status)
- Finalizes and emits on request completion

Usage:
    app.add_middleware(WideEventMiddleware)

Then in handlers:
    from lawsite.api.middleware import add_page_to_wide_event

    add_page_to_wide_event(url_path="/about/", cache_hit=True)
"""

from typing import Callable

from starlette.middleware.base import BaseHTTPMiddleware
from starlette.requests import Request
from starlette.responses import Response

from lawsite.core.logging import (
    emit_wide_event,
    enrich_event,
    finalize_request_event,
    init_request_event,
)


class WideEventMiddleware(BaseHTTPMiddleware):
    """One comprehensive log entry per request."""

    # Health probes run every few seconds on the hosting platform
    SKIP_PATHS = {"/health", "/api/health", "/favicon.ico"}

    async def dispatch(
        self,
        request: Request,
        call_next: Callable,
    ) -> Response:
        if request.url.path in self.SKIP_PATHS:
            return await call_next(request)

        init_request_event(
            request_id=request.headers.get("x-request-id"),
            method=request.method,
            path=request.url.path,
            client_ip=self._get_client_ip(request),
            user_agent=request.headers.get("user-agent", ""),
        )

        if request.query_params:
            enrich_event(**{"http.query_params": dict(request.query_params)})

        error: Exception | None = None
        status_code = 500

        try:
            response = await call_next(request)
            status_code = response.status_code
            return response

        except Exception as e:
            error = e
            status_code = getattr(e, "status_code", 500)
            raise

        finally:
            event = finalize_request_event(status_code, error)
            emit_wide_event(event)

    def _get_client_ip(self, request: Request) -> str:
        """Extract client IP, respecting proxy headers."""
        forwarded = request.headers.get("x-forwarded-for")
        if forwarded:
            return forwarded.split(",")[0].strip()

        real_ip = request.headers.get("x-real-ip")
        if real_ip:
            return real_ip

        if request.client:
            return request.client.host

        return "unknown"


def add_page_to_wide_event(
    url_path: str | None = None,
    cache_hit: bool | None = None,
    schema_types: list[str] | None = None,
) -> None:
    """Add CMS page context to the wide event."""
    enrich_event(
        page={
            "url_path": url_path,
            "cache_hit": cache_hit,
            "schema_types": schema_types or [],
        }
    )
