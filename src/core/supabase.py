"""Supabase client singleton for record store access."""

import asyncio
from functools import lru_cache
from typing import Any

from supabase import Client, create_client

from src.core.config import get_settings


@lru_cache
def get_supabase_client() -> Client:
    """Get cached Supabase client singleton for database operations.

    Uses the secret key, so the client bypasses RLS. The dashboard has no
    end-user authentication of its own; access control is expected in front
    of the service.

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

    Returns:
        dict: Connection status with 'healthy' boolean and optional 'error' message.
    """
    try:
        client = get_supabase_client()
        query = client.table("cohorts").select("id").limit(1)
        await asyncio.to_thread(query.execute)
        return {"healthy": True}
    except Exception as e:
        return {"healthy": False, "error": str(e)}
