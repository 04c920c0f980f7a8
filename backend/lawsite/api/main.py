"""
FastAPI application factory and main entry point.
"""

from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager

import structlog
from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from lawsite.api.middleware import WideEventMiddleware
from lawsite.api.routes import health, pages, sitemap
from lawsite.core.config import settings
from lawsite.core.exceptions import (
    ConfigurationError,
    ExternalServiceError,
    LawSiteException,
    ResourceNotFoundError,
)
from lawsite.core.logging import configure_logging
from lawsite.services.page_content import PageContentService
from lawsite.services.supabase import SupabaseRestClient

# Configure structured logging with wide events support
configure_logging(
    json_logs=not settings.debug,  # JSON in production, console in dev
    log_level="DEBUG" if settings.debug else "INFO",
)

logger = structlog.get_logger()


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """Application lifespan handler."""
    logger.info("Starting site API", version=settings.app_version)

    app.state.supabase = None
    app.state.page_service = None

    if settings.has_supabase:
        client = SupabaseRestClient.from_settings(settings)
        app.state.supabase = client
        app.state.page_service = PageContentService(client)
        logger.info("Supabase client initialized")
    else:
        logger.warning(
            "Supabase not configured, serving static content only",
            missing=settings.missing_supabase_env,
        )

    yield

    logger.info("Shutting down site API")
    if app.state.supabase is not None:
        await app.state.supabase.aclose()


def _error_response(status_code: int, exc: LawSiteException, error_type: str) -> JSONResponse:
    return JSONResponse(
        status_code=status_code,
        content={
            "error": {
                "message": exc.message,
                "type": error_type,
                "details": exc.details,
            }
        },
    )


def create_app() -> FastAPI:
    """Create and configure the FastAPI application."""
    app = FastAPI(
        title=settings.app_name,
        version=settings.app_version,
        description="Content, sitemap and structured data for the firm website",
        docs_url="/docs" if settings.debug else None,
        redoc_url="/redoc" if settings.debug else None,
        lifespan=lifespan,
    )

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    # Wide Events middleware - canonical log line per request
    app.add_middleware(WideEventMiddleware)

    app.include_router(health.router, tags=["Health"])
    app.include_router(sitemap.router, tags=["Sitemap"])
    app.include_router(pages.router, prefix="/api/v1/pages", tags=["Pages"])

    # Exception Handlers
    @app.exception_handler(RequestValidationError)
    async def validation_exception_handler(request: Request, exc: RequestValidationError):
        """Handle FastAPI validation errors"""
        logger.warning("Validation error", url=str(request.url), errors=exc.errors())
        return JSONResponse(
            status_code=422,
            content={
                "error": {
                    "message": "Validation failed",
                    "type": "validation_error",
                    "details": exc.errors(),
                }
            },
        )

    @app.exception_handler(ResourceNotFoundError)
    async def not_found_exception_handler(request: Request, exc: ResourceNotFoundError):
        """Handle not found errors"""
        logger.info("Resource not found", url=str(request.url), message=exc.message)
        return _error_response(404, exc, "not_found_error")

    @app.exception_handler(ConfigurationError)
    async def configuration_exception_handler(request: Request, exc: ConfigurationError):
        """Handle missing configuration"""
        logger.error("Configuration error", url=str(request.url), message=exc.message)
        return _error_response(503, exc, "configuration_error")

    @app.exception_handler(ExternalServiceError)
    async def external_service_exception_handler(request: Request, exc: ExternalServiceError):
        """Handle upstream (Supabase) errors"""
        logger.error("External service error", url=str(request.url), message=exc.message)
        return _error_response(502, exc, "external_service_error")

    @app.exception_handler(LawSiteException)
    async def app_exception_handler(request: Request, exc: LawSiteException):
        """Handle custom app exceptions"""
        logger.error("App error", url=str(request.url), message=exc.message)
        return _error_response(500, exc, "application_error")

    @app.exception_handler(Exception)
    async def global_exception_handler(request: Request, exc: Exception):
        """Handle unexpected exceptions"""
        logger.error("Unexpected error", url=str(request.url), error=str(exc), exc_info=True)

        # Don't expose internal details in production
        message = str(exc) if settings.debug else "An unexpected error occurred"

        return JSONResponse(
            status_code=500,
            content={
                "error": {
                    "message": message,
                    "type": "internal_server_error",
                }
            },
        )

    return app


app = create_app()


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(
        "lawsite.api.main:app",
        host=settings.host,
        port=settings.port,
        reload=settings.debug,
    )
