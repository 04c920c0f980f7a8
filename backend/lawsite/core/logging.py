"""
Logging configuration with Wide Events / Canonical Log Lines pattern.

One comprehensive event is built per request and emitted once when the
request finishes:
- Middleware initializes the event with request context
- Handlers add business context through enrich_event()
- Tail sampling keeps errors, slow requests and content requests

References:
- https://charity.wtf/2019/02/05/logs-vs-structured-events/
- Stripe's "canonical log lines" pattern
"""

import logging
import os
import random
import sys
import time
import uuid
from contextvars import ContextVar
from typing import Any

import structlog
from structlog.types import Processor

# Context variables for request-scoped wide event
_request_event: ContextVar[dict[str, Any]] = ContextVar("request_event")
_request_start: ContextVar[float] = ContextVar("request_start", default=0.0)

# Requests slower than this are always logged
SLOW_REQUEST_MS = 2000

# Fraction of successful fast requests that are logged
SAMPLE_RATE = 0.10

# Paths that are always logged (content delivery is what we debug most)
ALWAYS_KEEP_PATHS = ("/sitemap.xml", "/api/v1/pages")


def get_request_event() -> dict[str, Any]:
    """Get the current request's wide event for enrichment."""
    return _request_event.get({})


def enrich_event(**kwargs: Any) -> None:
    """
    Add fields to the current request's wide event.

    Route handlers add page and upstream context:

        from lawsite.core.logging import enrich_event

        enrich_event(page={"url_path": "/about", "cache_hit": True})
        enrich_event(**{"supabase.error": "HTTP error: 503"})
    """
    event = _request_event.get({})
    for key, value in kwargs.items():
        # Support nested objects with dot notation
        if "." in key:
            parts = key.split(".")
            target = event
            for part in parts[:-1]:
                if part not in target:
                    target[part] = {}
                target = target[part]
            target[parts[-1]] = value
        else:
            event[key] = value


def init_request_event(
    request_id: str | None = None,
    method: str = "",
    path: str = "",
    client_ip: str = "",
    user_agent: str = "",
) -> dict[str, Any]:
    """Initialize a new wide event for the request."""
    event = {
        "request_id": request_id or str(uuid.uuid4())[:8],
        "timestamp": time.strftime("%Y-%m-%dT%H:%M:%S.000Z", time.gmtime()),
        # Request context
        "http": {
            "method": method,
            "path": path,
            "client_ip": client_ip,
            "user_agent": user_agent[:200] if user_agent else None,
        },
        # Service context
        "service": {
            "name": "lawsite-api",
            "version": os.environ.get("APP_VERSION", "dev"),
            "environment": os.environ.get("ENVIRONMENT", "development"),
        },
    }

    _request_event.set(event)
    _request_start.set(time.time())
    return event


def finalize_request_event(
    status_code: int,
    error: Exception | None = None,
) -> dict[str, Any]:
    """Finalize and return the wide event for emission."""
    event = _request_event.get({})
    start_time = _request_start.get()

    # Add response context
    event.setdefault("http", {})["status_code"] = status_code
    event["duration_ms"] = int((time.time() - start_time) * 1000)
    event["outcome"] = "success" if status_code < 400 else "error"

    # Add error context if present
    if error:
        event["error"] = {
            "type": type(error).__name__,
            "message": str(error)[:500],  # Truncate long messages
        }
        if hasattr(error, "details"):
            event["error"]["details"] = error.details

    return event


def should_sample(event: dict[str, Any]) -> bool:
    """
    Tail sampling decision for wide events.

    Rules:
    1. Always keep errors (4xx and 5xx)
    2. Always keep slow requests
    3. Always keep requests that served fallback content after a CMS failure
    4. Always keep sitemap and page content requests
    5. Sample the rest
    """
    # Always keep errors
    status_code = event.get("http", {}).get("status_code", 200)
    if status_code >= 400:
        return True

    # Always keep slow requests
    if event.get("duration_ms", 0) > SLOW_REQUEST_MS:
        return True

    # A 200 can still hide a Supabase outage (sitemap, simple pages)
    if event.get("supabase", {}).get("error") or event.get("page_fallback"):
        return True

    path = event.get("http", {}).get("path", "")
    if path.startswith(ALWAYS_KEEP_PATHS):
        return True

    # Sample the rest
    return random.random() < SAMPLE_RATE


def add_request_id(logger: Any, method_name: str, event_dict: dict) -> dict:
    """Processor to add request_id to all log entries."""
    current_event = _request_event.get({})
    if current_event and "request_id" in current_event:
        event_dict["request_id"] = current_event["request_id"]
    return event_dict


def configure_logging(json_logs: bool = True, log_level: str = "INFO") -> None:
    """
    Configure structlog for wide events logging.

    Args:
        json_logs: If True, output JSON format (for production).
                   If False, output colored console format (for development).
        log_level: Minimum log level (DEBUG, INFO, WARNING, ERROR).
    """
    shared_processors: list[Processor] = [
        structlog.contextvars.merge_contextvars,
        structlog.stdlib.add_log_level,
        add_request_id,
        structlog.stdlib.PositionalArgumentsFormatter(),
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.processors.StackInfoRenderer(),
        structlog.processors.UnicodeDecoder(),
    ]

    if json_logs:
        # Production: JSON output
        shared_processors.append(structlog.processors.format_exc_info)
        renderer = structlog.processors.JSONRenderer()
    else:
        # Development: Colored console output
        renderer = structlog.dev.ConsoleRenderer(colors=True)

    structlog.configure(
        processors=[*shared_processors, renderer],
        wrapper_class=structlog.stdlib.BoundLogger,
        context_class=dict,
        logger_factory=structlog.PrintLoggerFactory(file=sys.stdout),
        cache_logger_on_first_use=True,
    )

    # Set log level for standard library logging
    logging.basicConfig(
        format="%(message)s",
        stream=sys.stdout,
        level=getattr(logging, log_level.upper(), logging.INFO),
    )


def configure_script_logging() -> None:
    """Console logging for the build scripts."""
    structlog.configure(
        processors=[
            structlog.processors.add_log_level,
            structlog.processors.TimeStamper(fmt="iso"),
            structlog.dev.ConsoleRenderer(colors=True),
        ]
    )


def emit_wide_event(event: dict[str, Any]) -> None:
    """
    Emit the canonical log line for a request.

    This is the single, comprehensive record of what happened.
    """
    logger = structlog.get_logger("wide_event")

    # Apply sampling
    if not should_sample(event):
        return

    # Log level follows the outcome
    status_code = event.get("http", {}).get("status_code", 200)

    if status_code >= 500:
        logger.error("request_completed", **event)
    elif status_code >= 400:
        logger.warning("request_completed", **event)
    else:
        logger.info("request_completed", **event)
