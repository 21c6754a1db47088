"""Supabase short-link CRUD."""

from __future__ import annotations

import logging
from collections.abc import Callable
from datetime import UTC, datetime
from typing import Any

from supabase import AsyncClient

from vdfy.core.constants import SHORT_ID_MAX_ATTEMPTS, SHORT_LINKS_TABLE
from vdfy.core.errors import StorageError
from vdfy.services.shortener import generate_short_id
from vdfy.services.supabase.helpers import (
    POSTGREST_FAILURES,
    first_row,
    is_unique_violation,
    raise_for_postgrest_error,
)

logger = logging.getLogger(__name__)

SHORT_LINK_COLUMNS = "id,url,storage_key,owner_email,kind,transcription,created_at"


async def create_short_link(
    client: AsyncClient,
    *,
    url: str,
    kind: str,
    storage_key: str | None = None,
    owner_email: str | None = None,
    transcription: str | None = None,
    id_factory: Callable[[], str] = generate_short_id,
    max_attempts: int = SHORT_ID_MAX_ATTEMPTS,
) -> dict[str, Any]:
    """Insert a short-link row under a fresh id, retrying when the id is taken."""
    payload: dict[str, Any] = {
        "url": url,
        "kind": kind,
        "storage_key": storage_key,
        "owner_email": owner_email,
        "transcription": transcription,
        "created_at": datetime.now(UTC).isoformat(),
    }

    for attempt in range(1, max_attempts + 1):
        short_id = id_factory()
        try:
            response = await client.table(SHORT_LINKS_TABLE).insert({"id": short_id, **payload}).execute()
        except POSTGREST_FAILURES as exc:
            if is_unique_violation(exc):
                logger.info("short id collision", extra={"short_id": short_id, "attempt": attempt})
                continue
            raise_for_postgrest_error(exc, "Failed to create short link.")
        return first_row(response.data, error_message="Failed to create short link.")

    raise StorageError("Failed to allocate a unique short link id.")


async def fetch_short_link(client: AsyncClient, short_id: str) -> dict[str, Any] | None:
    try:
        response = await (
            client.table(SHORT_LINKS_TABLE).select(SHORT_LINK_COLUMNS).eq("id", short_id).limit(1).execute()
        )
    except POSTGREST_FAILURES as exc:
        raise_for_postgrest_error(exc, "Failed to fetch short link.")

    data = response.data or []
    if not data:
        return None

    return first_row(data, error_message="Supabase returned an unexpected short_links shape.")


async def delete_short_links_by_storage_key(client: AsyncClient, storage_key: str) -> int:
    try:
        response = await client.table(SHORT_LINKS_TABLE).delete().eq("storage_key", storage_key).execute()
    except POSTGREST_FAILURES as exc:
        raise_for_postgrest_error(exc, "Failed to delete short links.")
    return len(response.data or [])


async def delete_short_links_by_url(client: AsyncClient, url: str) -> int:
    """Legacy rows predate `storage_key` and can only be matched by target URL."""
    try:
        response = await client.table(SHORT_LINKS_TABLE).delete().eq("url", url).execute()
    except POSTGREST_FAILURES as exc:
        raise_for_postgrest_error(exc, "Failed to delete short links.")
    return len(response.data or [])
