"""Tests for the upload entry point around the pipeline."""

import asyncio
import io
import pathlib

import pytest
from fastapi import UploadFile

from vdfy.application.uploads import process_upload, save_upload
from vdfy.core.errors import AppError, InvalidRequestError, RequestTooLargeError, UploadTimeoutError


def _upload(data: bytes = b"webm bytes", filename: str | None = "screen.webm") -> UploadFile:
    return UploadFile(file=io.BytesIO(data), filename=filename)


async def _process(upload, services, folder="user@example.com", subfolder="Intro"):
    return await process_upload(
        upload, folder=folder, subfolder=subfolder, base_url="http://testserver", services=services
    )


async def test_save_upload_streams_to_upload_dir(tmp_path):
    path = await save_upload(_upload(b"abc" * 1000), str(tmp_path / "incoming"))

    assert path.parent == tmp_path / "incoming"
    assert path.name.startswith("upload_")
    assert path.read_bytes() == b"abc" * 1000


async def test_save_upload_enforces_the_size_cap(tmp_path):
    incoming = tmp_path / "incoming"

    with pytest.raises(RequestTooLargeError):
        await save_upload(_upload(b"x" * 100), str(incoming), max_bytes=10)

    assert list(incoming.iterdir()) == []


async def test_body_without_declared_length_is_capped(services, settings, transcoder):
    settings.max_request_bytes = 10

    with pytest.raises(RequestTooLargeError):
        await _process(_upload(b"x" * 100), services)

    assert list(pathlib.Path(settings.upload_dir).iterdir()) == []
    assert transcoder.calls == []


@pytest.mark.parametrize("upload", [None, _upload(filename="")])
async def test_missing_file_is_rejected(services, upload):
    with pytest.raises(InvalidRequestError, match="No file"):
        await _process(upload, services)


async def test_returns_short_url_and_transcript(services, transcriber):
    response = await _process(_upload(), services)

    assert response.public_url.startswith("https://vdfy.test/v/")
    assert response.transcription == transcriber.text
    assert response.model_dump(by_alias=True).keys() == {"publicUrl", "transcription"}


async def test_timeout_fails_and_cleans_up(services, settings, transcoder):
    settings.upload_timeout_seconds = 1.0

    async def stuck(input_path, output_path):
        output_path.write_bytes(b"partial")
        await asyncio.sleep(30)

    services.transcode = stuck

    with pytest.raises(UploadTimeoutError):
        await _process(_upload(), services)

    assert list(pathlib.Path(settings.upload_dir).iterdir()) == []


async def test_unexpected_error_keeps_its_message(services, transcriber):
    transcriber.error = RuntimeError("disk quota exceeded")

    with pytest.raises(AppError) as excinfo:
        await _process(_upload(), services)

    assert excinfo.value.status_code == 500
    assert excinfo.value.detail == "disk quota exceeded"
