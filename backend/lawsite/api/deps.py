"""
FastAPI dependencies.

The Supabase client and page service are created in the app lifespan and
stored on app.state; they are None when Supabase is not configured.
"""

from fastapi import Request

from lawsite.core.config import Settings, get_settings
from lawsite.services.page_content import PageContentService
from lawsite.services.supabase import SupabaseRestClient


def get_app_settings() -> Settings:
    return get_settings()


def get_supabase_client(request: Request) -> SupabaseRestClient | None:
    return getattr(request.app.state, "supabase", None)


def get_page_service(request: Request) -> PageContentService | None:
    return getattr(request.app.state, "page_service", None)
