"""Upload pipeline: transcode, transcribe, store, link.

The run moves through ``received -> transcoded -> transcribed -> stored ->
linked -> done`` or drops to ``failed``. Each step depends on the previous one;
nothing is retried. Temp files are removed on every exit path, and blobs written
before a failure are handed to a best-effort compensation step.
"""

from __future__ import annotations

import asyncio
import logging
import pathlib
import time
from dataclasses import dataclass, field
from enum import StrEnum

from vdfy.core.cleanup import CleanupResult, remove_local_file, run_cleanup
from vdfy.core.constants import (
    COMPRESSED_SUFFIX,
    LINK_KIND_REDIRECT,
    LINK_KIND_VIDEO,
    MEDIA_CONTENT_TYPE,
    TEXT_CONTENT_TYPE,
    UPLOAD_EXTENSION,
)
from vdfy.core.logging import log_context
from vdfy.crud.supabase.short_links import create_short_link
from vdfy.crud.supabase.storage_objects import delete_object, upload_object
from vdfy.services.container import ServiceContainer
from vdfy.services.keyspace import build_media_key, key_prefix, owner_bucket, public_url, text_key_for
from vdfy.services.shortener import build_short_url

logger = logging.getLogger(__name__)


class PipelineStage(StrEnum):
    RECEIVED = "received"
    TRANSCODED = "transcoded"
    TRANSCRIBED = "transcribed"
    STORED = "stored"
    LINKED = "linked"
    DONE = "done"
    FAILED = "failed"


@dataclass(frozen=True)
class UploadRequest:
    source_path: pathlib.Path
    owner_email: str | None
    category: str | None
    base_url: str


@dataclass(frozen=True)
class UploadResult:
    short_id: str
    short_url: str
    storage_key: str
    transcription: str


@dataclass
class PipelineRun:
    stage: PipelineStage = PipelineStage.RECEIVED
    stored_keys: list[str] = field(default_factory=list)
    cleanup: list[CleanupResult] = field(default_factory=list)
    _step_start: float = field(default_factory=time.perf_counter)

    def advance(self, stage: PipelineStage, **fields: object) -> None:
        now = time.perf_counter()
        logger.info(
            "upload %s -> %s %.2fms",
            self.stage,
            stage,
            (now - self._step_start) * 1000,
            extra={"stage": str(stage), **fields},
        )
        self.stage = stage
        self._step_start = now


def compressed_path_for(source_path: pathlib.Path) -> pathlib.Path:
    return source_path.with_name(source_path.name + COMPRESSED_SUFFIX)


def _owner_email(value: str | None) -> str | None:
    if not value or "@" not in value:
        return None
    return value.strip()


async def _compensate(run: PipelineRun, services: ServiceContainer) -> None:
    client = services.supabase
    bucket = services.settings.supabase_bucket
    for key in run.stored_keys:
        result = await run_cleanup(key, lambda key=key: delete_object(client, bucket=bucket, object_key=key))
        run.cleanup.append(result)
        if not result.ok:
            logger.warning("orphaned storage object left behind", extra={"storage_key": key})


async def run_upload_pipeline(
    request: UploadRequest,
    services: ServiceContainer,
    *,
    run: PipelineRun | None = None,
) -> UploadResult:
    """
    Process one uploaded recording. The pipeline owns `request.source_path` and
    deletes it, together with the transcoded copy, before returning or raising.
    """
    run = run or PipelineRun()
    settings = services.settings
    client = services.supabase
    compressed_path = compressed_path_for(request.source_path)
    owner_email = _owner_email(request.owner_email)

    with log_context(owner=owner_bucket(owner_email)):
        try:
            prefix = key_prefix(owner_email, request.category)

            await services.transcode(request.source_path, compressed_path)
            run.advance(PipelineStage.TRANSCODED)

            transcription = await services.transcribe(compressed_path)
            run.advance(PipelineStage.TRANSCRIBED, chars=len(transcription))

            storage_key = build_media_key(prefix, UPLOAD_EXTENSION)
            text_key = text_key_for(storage_key)
            media_bytes = await asyncio.to_thread(compressed_path.read_bytes)
            await upload_object(
                client,
                bucket=settings.supabase_bucket,
                object_key=storage_key,
                data=media_bytes,
                content_type=MEDIA_CONTENT_TYPE,
            )
            run.stored_keys.append(storage_key)
            await upload_object(
                client,
                bucket=settings.supabase_bucket,
                object_key=text_key,
                data=transcription.encode("utf-8"),
                content_type=TEXT_CONTENT_TYPE,
            )
            run.stored_keys.append(text_key)
            run.advance(PipelineStage.STORED, storage_key=storage_key, bytes=len(media_bytes))

            kind = LINK_KIND_VIDEO if owner_email else LINK_KIND_REDIRECT
            record = await create_short_link(
                client,
                url=public_url(settings.storage_public_base_url, storage_key),
                kind=kind,
                storage_key=storage_key,
                owner_email=owner_email,
                transcription=transcription,
            )
            short_id = record["id"]
            run.advance(PipelineStage.LINKED, short_id=short_id, kind=kind)

            result = UploadResult(
                short_id=short_id,
                short_url=build_short_url(request.base_url, short_id, kind),
                storage_key=storage_key,
                transcription=transcription,
            )
            run.advance(PipelineStage.DONE)
            return result
        except Exception as exc:
            failed_at = run.stage
            run.advance(PipelineStage.FAILED, failed_after=str(failed_at), error_type=type(exc).__name__)
            if run.stored_keys:
                await _compensate(run, services)
            raise
        except BaseException:
            # Cancelled (request timeout): no awaiting here, just record what is orphaned.
            if run.stored_keys:
                logger.warning("upload cancelled after storage writes", extra={"orphaned": run.stored_keys})
            run.stage = PipelineStage.FAILED
            raise
        finally:
            run.cleanup.append(remove_local_file(request.source_path))
            run.cleanup.append(remove_local_file(compressed_path))
