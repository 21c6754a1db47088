from __future__ import annotations

import asyncio
import logging
import os
import pathlib
import tempfile

from fastapi import UploadFile

from vdfy.core.cleanup import remove_local_file
from vdfy.core.constants import UPLOAD_CHUNK_BYTES
from vdfy.core.errors import AppError, InvalidRequestError, RequestTooLargeError, UploadTimeoutError
from vdfy.orchestration.pipeline import UploadRequest, run_upload_pipeline
from vdfy.schemas.uploads import UploadResponse
from vdfy.services.container import ServiceContainer

logger = logging.getLogger(__name__)


async def save_upload(upload: UploadFile, upload_dir: str, *, max_bytes: int = 0) -> pathlib.Path:
    """Stream the multipart body to a temp file the pipeline will own.

    Chunked bodies carry no Content-Length, so `max_bytes` is enforced here on
    what was actually received. 0 disables the cap.
    """
    directory = pathlib.Path(upload_dir)
    directory.mkdir(parents=True, exist_ok=True)
    fd, raw_path = tempfile.mkstemp(prefix="upload_", dir=directory)
    path = pathlib.Path(raw_path)
    try:
        written = 0
        with os.fdopen(fd, "wb") as out:
            while chunk := await upload.read(UPLOAD_CHUNK_BYTES):
                written += len(chunk)
                if max_bytes > 0 and written > max_bytes:
                    raise RequestTooLargeError("Request body too large.")
                await asyncio.to_thread(out.write, chunk)
    except BaseException:
        remove_local_file(path)
        raise
    return path


async def process_upload(
    upload: UploadFile | None,
    *,
    folder: str | None,
    subfolder: str | None,
    base_url: str,
    services: ServiceContainer,
) -> UploadResponse:
    if upload is None or not upload.filename:
        raise InvalidRequestError("No file")

    settings = services.settings
    source_path = await save_upload(upload, settings.upload_dir, max_bytes=settings.max_request_bytes)
    logger.info("upload received", extra={"upload_name": upload.filename, "category": subfolder})

    request = UploadRequest(
        source_path=source_path,
        owner_email=folder,
        category=subfolder,
        base_url=settings.public_app_url or base_url,
    )
    try:
        async with asyncio.timeout(settings.upload_timeout_seconds):
            result = await run_upload_pipeline(request, services)
    except TimeoutError as exc:
        raise UploadTimeoutError("Upload processing timed out.") from exc
    except AppError:
        raise
    except Exception as exc:
        logger.exception("upload failed unexpectedly")
        raise AppError(str(exc) or "Upload failed.") from exc

    return UploadResponse(public_url=result.short_url, transcription=result.transcription)
