"""Supabase client factories."""

from __future__ import annotations

from supabase import AsyncClient, AsyncClientOptions, create_async_client

from vdfy.core.config import Settings
from vdfy.core.errors import ConfigurationError


def _normalize_supabase_url(url: str) -> str:
    """Ensure the Supabase URL has a trailing slash (required by storage client)."""
    return url.rstrip("/") + "/"


async def create_supabase_admin_client(settings: Settings) -> AsyncClient:
    """Create the process-wide Supabase client with service-role credentials."""
    missing: list[str] = []
    if not settings.supabase_url:
        missing.append("SUPABASE_URL")
    if not settings.supabase_secret_key:
        missing.append("SUPABASE_SECRET_KEY")
    if missing:
        missing_str = ", ".join(missing)
        raise ConfigurationError(f"Supabase admin client is not configured. Missing {missing_str}.")

    options = AsyncClientOptions(persist_session=False, auto_refresh_token=False)
    supabase_url = _normalize_supabase_url(settings.supabase_url)
    return await create_async_client(supabase_url, settings.supabase_secret_key, options)
