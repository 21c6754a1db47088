from __future__ import annotations

import asyncio
import logging
import pathlib

from vdfy.core.constants import TRANSCODE_OUTPUT_OPTIONS, TRANSCODE_STDERR_TAIL_CHARS
from vdfy.core.errors import ExternalServiceError

logger = logging.getLogger(__name__)


class TranscodeError(ExternalServiceError):
    code = "transcode_error"


def build_transcode_command(ffmpeg_path: str, input_path: pathlib.Path, output_path: pathlib.Path) -> list[str]:
    return [
        ffmpeg_path,
        "-hide_banner",
        "-nostdin",
        "-y",
        "-i",
        str(input_path),
        *TRANSCODE_OUTPUT_OPTIONS,
        str(output_path),
    ]


def _stderr_tail(stderr: bytes | None) -> str:
    text = (stderr or b"").decode("utf-8", errors="replace").strip()
    return text[-TRANSCODE_STDERR_TAIL_CHARS:]


async def transcode_video(
    input_path: pathlib.Path,
    output_path: pathlib.Path,
    *,
    ffmpeg_path: str = "ffmpeg",
) -> pathlib.Path:
    """Compress `input_path` to the H.264/AAC delivery profile at `output_path`."""
    cmd = build_transcode_command(ffmpeg_path, input_path, output_path)
    try:
        proc = await asyncio.create_subprocess_exec(
            *cmd,
            stdin=asyncio.subprocess.DEVNULL,
            stdout=asyncio.subprocess.DEVNULL,
            stderr=asyncio.subprocess.PIPE,
        )
    except OSError as exc:
        raise TranscodeError(f"Failed to start ffmpeg: {exc}") from exc

    try:
        _, stderr = await proc.communicate()
    except asyncio.CancelledError:
        if proc.returncode is None:
            proc.kill()
            await proc.wait()
        raise

    if proc.returncode != 0:
        tail = _stderr_tail(stderr)
        logger.warning("ffmpeg failed", extra={"returncode": proc.returncode})
        raise TranscodeError(tail or f"ffmpeg exited with status {proc.returncode}.")

    if not output_path.exists():
        raise TranscodeError("ffmpeg finished without writing an output file.")

    return output_path
