"""
Supabase client factory.

Provides singleton access to the async Supabase client used by the live
service implementation.

Environment variables used:
- SUPABASE_URL: Project URL
- SUPABASE_KEY: Anon or service-role key
"""

from supabase import AsyncClient, acreate_client

from collections_ui import config

_CLIENT: AsyncClient | None = None


async def supabase() -> AsyncClient:
    """
    Return the shared async Supabase client, creating it on first use.

    Raises:
        RuntimeError: If SUPABASE_URL or SUPABASE_KEY is not set.
    """
    global _CLIENT
    if _CLIENT is None:
        if not config.SUPABASE_URL or not config.SUPABASE_KEY:
            raise RuntimeError("SUPABASE_URL and SUPABASE_KEY must be set")
        _CLIENT = await acreate_client(config.SUPABASE_URL, config.SUPABASE_KEY)
    return _CLIENT


def reset() -> None:
    """Drop the cached client so the next call reconnects."""
    global _CLIENT
    _CLIENT = None
