"""
Application exception hierarchy.

Handlers in lawsite.api.main translate these into JSON error responses.
"""

from typing import Any


class LawSiteException(Exception):
    """Base class for application errors."""

    def __init__(self, message: str, details: dict[str, Any] | None = None):
        self.message = message
        self.details = details or {}
        super().__init__(message)


class ConfigurationError(LawSiteException):
    """Required configuration (env vars, credentials) is missing."""


class ExternalServiceError(LawSiteException):
    """An upstream service (Supabase REST, storage, CDN) failed."""

    def __init__(
        self,
        message: str,
        status_code: int | None = None,
        details: dict[str, Any] | None = None,
    ):
        self.status_code = status_code
        details = dict(details or {})
        if status_code is not None:
            details.setdefault("status_code", status_code)
        super().__init__(message, details)


class ResourceNotFoundError(LawSiteException):
    """Requested content does not exist or is not published."""
