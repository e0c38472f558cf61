"""Database connection and utilities"""
from functools import lru_cache
from supabase import create_client, Client
from chatwidget.config import get_settings


@lru_cache()
def get_supabase_admin() -> Client:
    """
    Get the service role Supabase client used by the session storage backend

    Created lazily so that the default in-memory backend never needs
    Supabase credentials.

    Returns:
        Supabase client configured with the service role key
    """
    settings = get_settings()
    if not settings.supabase_url or not settings.supabase_service_role_key:
        raise RuntimeError("Supabase storage backend selected but SUPABASE_URL / SUPABASE_SERVICE_ROLE_KEY are not set")

    return create_client(
        settings.supabase_url,
        settings.supabase_service_role_key
    )
