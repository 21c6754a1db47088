"""Supabase storage object helpers."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import UTC, datetime
from typing import Any

from supabase import AsyncClient

from vdfy.core.constants import STORAGE_LIST_PAGE_SIZE
from vdfy.core.errors import ConfigurationError, StorageError
from vdfy.services.supabase.helpers import STORAGE_FAILURES, raise_for_storage_error


@dataclass(frozen=True)
class StoredObject:
    key: str
    created_at: datetime | None


def _require(bucket: str, object_key: str) -> None:
    if not bucket:
        raise ConfigurationError("Supabase bucket is not configured.")
    if not object_key:
        raise StorageError("Storage object key is missing.")


def _parse_timestamp(value: Any) -> datetime | None:
    if not isinstance(value, str) or not value:
        return None
    try:
        parsed = datetime.fromisoformat(value.replace("Z", "+00:00"))
    except ValueError:
        return None
    return parsed if parsed.tzinfo else parsed.replace(tzinfo=UTC)


async def upload_object(
    client: AsyncClient,
    *,
    bucket: str,
    object_key: str,
    data: bytes,
    content_type: str,
) -> None:
    _require(bucket, object_key)
    try:
        await client.storage.from_(bucket).upload(
            object_key,
            data,
            {"content-type": content_type, "upsert": "true"},
        )
    except STORAGE_FAILURES as exc:
        raise_for_storage_error(exc, "Failed to upload storage object.")


async def delete_object(
    client: AsyncClient,
    *,
    bucket: str,
    object_key: str,
) -> None:
    _require(bucket, object_key)
    try:
        await client.storage.from_(bucket).remove([object_key])
    except STORAGE_FAILURES as exc:
        raise_for_storage_error(exc, "Failed to delete storage object.")


async def download_text(
    client: AsyncClient,
    *,
    bucket: str,
    object_key: str,
) -> str:
    _require(bucket, object_key)
    try:
        data = await client.storage.from_(bucket).download(object_key)
    except STORAGE_FAILURES as exc:
        raise_for_storage_error(exc, "Failed to download storage object.", missing_is_not_found=True)
    return data.decode("utf-8", errors="replace")


async def _list_folder(client: AsyncClient, bucket: str, folder: str) -> list[dict[str, Any]]:
    entries: list[dict[str, Any]] = []
    offset = 0
    while True:
        try:
            page = await client.storage.from_(bucket).list(
                folder,
                {
                    "limit": STORAGE_LIST_PAGE_SIZE,
                    "offset": offset,
                    "sortBy": {"column": "name", "order": "asc"},
                },
            )
        except STORAGE_FAILURES as exc:
            raise_for_storage_error(exc, "Failed to list storage objects.")
        entries.extend(page or [])
        if not page or len(page) < STORAGE_LIST_PAGE_SIZE:
            return entries
        offset += STORAGE_LIST_PAGE_SIZE


async def list_objects(
    client: AsyncClient,
    *,
    bucket: str,
    prefix: str,
) -> list[StoredObject]:
    """
    Return every object below `prefix`, walking nested folders.

    Supabase lists one folder level per call; folder placeholders come back
    without an `id`.
    """
    if not bucket:
        raise ConfigurationError("Supabase bucket is not configured.")

    objects: list[StoredObject] = []
    pending = [prefix.strip("/")]
    while pending:
        folder = pending.pop()
        for entry in await _list_folder(client, bucket, folder):
            name = entry.get("name")
            if not isinstance(name, str) or not name:
                continue
            key = f"{folder}/{name}" if folder else name
            if entry.get("id") is None:
                pending.append(key)
                continue
            objects.append(
                StoredObject(
                    key=key,
                    created_at=_parse_timestamp(entry.get("created_at") or entry.get("updated_at")),
                )
            )
    return objects
