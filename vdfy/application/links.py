from __future__ import annotations

import logging
from typing import Any

from vdfy.api.deps.auth import AuthContext
from vdfy.application.guards import validate_short_id
from vdfy.core.constants import LINK_KIND_REDIRECT, LINK_KIND_VIDEO
from vdfy.core.errors import AuthenticationError, ForbiddenError, NotFoundError
from vdfy.core.logging import log_context
from vdfy.crud.supabase.short_links import create_short_link, fetch_short_link
from vdfy.crud.supabase.storage_objects import download_text
from vdfy.schemas.links import SecureVideoResponse, ShortenRequest, ShortenResponse
from vdfy.services.container import ServiceContainer
from vdfy.services.keyspace import owner_bucket, text_key_for
from vdfy.services.shortener import build_short_url

logger = logging.getLogger(__name__)


def link_kind(record: dict[str, Any]) -> str:
    # Rows written before `kind` existed are plain redirects.
    return record.get("kind") or LINK_KIND_REDIRECT


async def shorten_url(
    request: ShortenRequest,
    auth: AuthContext | None,
    base_url: str,
    services: ServiceContainer,
) -> ShortenResponse:
    owner_email = auth.owner_email if auth else None
    if request.type == LINK_KIND_VIDEO and not owner_email:
        raise AuthenticationError("Unauthorized")

    record = await create_short_link(
        services.supabase,
        url=str(request.long_url),
        kind=request.type,
        owner_email=owner_email,
    )
    logger.info("short link created", extra={"short_id": record["id"], "kind": request.type})
    short_url = build_short_url(services.settings.public_app_url or base_url, record["id"], request.type)
    return ShortenResponse(short_url=short_url)


async def resolve_short_link(short_id: str, services: ServiceContainer) -> dict[str, Any]:
    validate_short_id(short_id)
    record = await fetch_short_link(services.supabase, short_id)
    if record is None or not record.get("url"):
        raise NotFoundError("Link not found")
    return record


async def _transcript_for(record: dict[str, Any], services: ServiceContainer) -> str:
    cached = record.get("transcription")
    if isinstance(cached, str):
        return cached
    storage_key = record.get("storage_key")
    if not storage_key:
        return ""
    try:
        return await download_text(
            services.supabase,
            bucket=services.settings.supabase_bucket,
            object_key=text_key_for(storage_key),
        )
    except Exception:
        logger.warning("transcript download failed", extra={"storage_key": storage_key}, exc_info=True)
        return ""


async def get_secure_video(short_id: str, auth: AuthContext, services: ServiceContainer) -> SecureVideoResponse:
    with log_context(user_id=auth.user_id, short_id=short_id):
        record = await resolve_short_link(short_id, services)
        if link_kind(record) != LINK_KIND_VIDEO:
            raise NotFoundError("Link not found")

        record_owner = record.get("owner_email")
        if not auth.owner_email or owner_bucket(record_owner) != auth.owner_bucket:
            logger.warning("secure video denied: owner mismatch", extra={"error_code": "forbidden"})
            raise ForbiddenError("Access Denied")

        transcription = await _transcript_for(record, services)
        logger.info("secure video served")
    return SecureVideoResponse(url=record["url"], transcription=transcription)
