from __future__ import annotations

import logging
from datetime import UTC, datetime

from vdfy.api.deps.auth import AuthContext
from vdfy.core.cleanup import run_cleanup
from vdfy.core.errors import ForbiddenError
from vdfy.core.logging import log_context
from vdfy.crud.supabase.short_links import delete_short_links_by_storage_key, delete_short_links_by_url
from vdfy.crud.supabase.storage_objects import StoredObject, delete_object, list_objects
from vdfy.schemas.videos import DeleteVideoResponse, VideoEntry, VideoListResponse
from vdfy.services.container import ServiceContainer
from vdfy.services.keyspace import (
    is_media_key,
    owner_prefix,
    owns_key,
    parse_category,
    public_url,
    text_key_for,
)

logger = logging.getLogger(__name__)

_EPOCH = datetime.min.replace(tzinfo=UTC)


def _uploaded_at(obj: StoredObject) -> datetime | None:
    if obj.created_at is not None:
        return obj.created_at
    # Fall back to the millisecond stamp in `rec_<ms>.<ext>`.
    stem = obj.key.rsplit("/", 1)[-1].split(".", 1)[0]
    if stem.startswith("rec_") and stem[4:].isdigit():
        return datetime.fromtimestamp(int(stem[4:]) / 1000, tz=UTC)
    return None


def build_video_entries(objects: list[StoredObject], base_url: str) -> list[VideoEntry]:
    keys = {obj.key for obj in objects}
    entries: list[VideoEntry] = []
    for obj in objects:
        if not is_media_key(obj.key):
            continue
        text_key = text_key_for(obj.key)
        entries.append(
            VideoEntry(
                key=obj.key,
                url=public_url(base_url, obj.key),
                text_url=public_url(base_url, text_key) if text_key in keys else None,
                uploaded_at=_uploaded_at(obj),
                category=parse_category(obj.key),
            )
        )
    entries.sort(key=lambda entry: entry.uploaded_at or _EPOCH, reverse=True)
    return entries


async def list_videos(auth: AuthContext, services: ServiceContainer) -> VideoListResponse:
    if not auth.owner_email:
        return VideoListResponse(videos=[])

    settings = services.settings
    with log_context(user_id=auth.user_id, owner=auth.owner_bucket):
        try:
            objects = await list_objects(
                services.supabase,
                bucket=settings.supabase_bucket,
                prefix=owner_prefix(auth.owner_email),
            )
        except Exception:
            # Listing degrades to an empty result instead of failing the dashboard.
            logger.warning("listing storage failed", exc_info=True)
            return VideoListResponse(videos=[])

        videos = build_video_entries(objects, settings.storage_public_base_url)
        logger.info("videos listed", extra={"count": len(videos)})
    return VideoListResponse(videos=videos)


async def delete_video(video_key: str, auth: AuthContext, services: ServiceContainer) -> DeleteVideoResponse:
    settings = services.settings
    client = services.supabase
    bucket = settings.supabase_bucket

    with log_context(user_id=auth.user_id, owner=auth.owner_bucket, storage_key=video_key):
        if not owns_key(auth.owner_email, video_key):
            logger.warning("delete denied: key outside owner prefix", extra={"error_code": "forbidden"})
            raise ForbiddenError("Access Denied")

        await delete_object(client, bucket=bucket, object_key=video_key)
        logger.info("video deleted")

        if is_media_key(video_key):
            text_key = text_key_for(video_key)
            await run_cleanup(text_key, lambda: delete_object(client, bucket=bucket, object_key=text_key))

        await run_cleanup("short_links", lambda: _delete_links(video_key, services))

    return DeleteVideoResponse(success=True)


async def _delete_links(video_key: str, services: ServiceContainer) -> None:
    client = services.supabase
    deleted = await delete_short_links_by_storage_key(client, video_key)
    if not deleted:
        long_url = public_url(services.settings.storage_public_base_url, video_key)
        deleted = await delete_short_links_by_url(client, long_url)
    logger.info("short links deleted", extra={"deleted": deleted})
