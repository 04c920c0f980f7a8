"""
Supabase Module.

Thin async access to the hosted CMS database, auth and storage.
"""

from lawsite.services.supabase.client import SIMPLE_PAGE_COLUMNS, SupabaseRestClient

__all__ = [
    "SIMPLE_PAGE_COLUMNS",
    "SupabaseRestClient",
]
