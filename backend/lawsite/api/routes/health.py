"""
Health check endpoints.
"""

from datetime import UTC, datetime
from typing import Any, Literal

from fastapi import APIRouter, Depends
from fastapi.responses import JSONResponse
from pydantic import BaseModel, Field

from lawsite.api.deps import get_app_settings, get_supabase_client
from lawsite.core.config import Settings
from lawsite.core.logging import enrich_event
from lawsite.services.supabase import SupabaseRestClient

router = APIRouter()

CheckStatus = Literal["ok", "error"]


class EnvironmentCheck(BaseModel):
    status: CheckStatus = "ok"
    details: dict[str, bool]
    missing: list[str] | None = None


class SupabaseCheck(BaseModel):
    status: CheckStatus
    message: str
    details: Any = None


class HealthChecks(BaseModel):
    environment: EnvironmentCheck
    supabase: SupabaseCheck | None = None


class HealthCheckResponse(BaseModel):
    status: Literal["ok", "degraded", "error"] = "ok"
    timestamp: str = Field(default_factory=lambda: datetime.now(UTC).isoformat())
    checks: HealthChecks


async def run_health_check(
    config: Settings,
    client: SupabaseRestClient | None,
) -> HealthCheckResponse:
    """Environment check first; Supabase is only probed when env is complete.

    Missing env vars -> "error". Unreachable Supabase -> "degraded".
    """
    environment = EnvironmentCheck(
        details={
            "supabaseUrl": bool(config.supabase_url),
            "supabaseAnonKey": bool(config.supabase_anon_key),
            "supabaseServiceRoleKey": bool(config.supabase_service_role_key),
        },
    )
    response = HealthCheckResponse(checks=HealthChecks(environment=environment))

    missing = config.missing_supabase_env
    if missing:
        environment.status = "error"
        environment.missing = missing
        response.status = "error"
        return response

    if client is None:
        client = SupabaseRestClient.from_settings(config)
        owns_client = True
    else:
        owns_client = False

    try:
        ok, status_code, body = await client.ping()
    finally:
        if owns_client:
            await client.aclose()

    if ok:
        response.checks.supabase = SupabaseCheck(
            status="ok", message="Successfully connected to Supabase"
        )
    elif status_code is None:
        response.checks.supabase = SupabaseCheck(
            status="error", message="Failed to connect to Supabase", details=body
        )
        response.status = "degraded"
    else:
        response.checks.supabase = SupabaseCheck(
            status="error",
            message=f"Supabase connection failed with HTTP {status_code}",
            details=body or "Unable to read error",
        )
        response.status = "degraded"

    return response


@router.get("/api/health", response_model=HealthCheckResponse)
async def health_check(
    config: Settings = Depends(get_app_settings),
    client: SupabaseRestClient | None = Depends(get_supabase_client),
) -> JSONResponse:
    """Environment + Supabase connectivity check."""
    result = await run_health_check(config, client)
    enrich_event(health_status=result.status)
    status_code = 503 if result.status == "error" else 200
    return JSONResponse(status_code=status_code, content=result.model_dump(exclude_none=True))
