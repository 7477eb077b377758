"""Supabase client singleton for database operations."""

from functools import lru_cache
from typing import Any

from supabase import Client, create_client

from src.core.config import get_settings


@lru_cache
def get_supabase_client() -> Client:
    """Get cached Supabase client singleton for database operations.

    Uses the secret key, which bypasses RLS at the PostgREST level. The sync
    handler writes the public user table on behalf of the system, never on
    behalf of an end user, so this is the only client the service needs.

    Returns:
        Client: Supabase client instance.
    """
    settings = get_settings()
    return create_client(
        settings.supabase_url,
        settings.supabase_secret_key,
    )


async def check_database_connection() -> dict[str, Any]:
    """Check if database connection is healthy.

    Reads a single key from the public user table.

    Returns:
        dict: Connection status with 'healthy' boolean and optional 'error' message.
    """
    settings = get_settings()
    try:
        client = get_supabase_client()
        client.table(settings.public_users_table).select(settings.user_key_column).limit(1).execute()
        return {"healthy": True}
    except Exception as e:
        return {"healthy": False, "error": str(e)}
