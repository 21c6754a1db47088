from __future__ import annotations

import pathlib
from dataclasses import dataclass
from typing import Any

from groq import APIError, Groq

from vdfy.core.errors import ExternalServiceError


class TranscriptionError(ExternalServiceError):
    code = "transcription_error"


@dataclass(frozen=True)
class TranscriptionHint:
    """Optional accuracy hint; it never changes control flow."""

    prompt: str | None = None
    language: str | None = None

    def as_request_kwargs(self) -> dict[str, str]:
        kwargs: dict[str, str] = {}
        if self.prompt:
            kwargs["prompt"] = self.prompt
        if self.language:
            kwargs["language"] = self.language
        return kwargs


def _extract_groq_text(response: Any) -> str:
    text = getattr(response, "text", None)
    if not isinstance(text, str):
        raise TranscriptionError("Groq response missing text.")
    return text


def transcribe_file(
    media_path: pathlib.Path,
    *,
    api_key: str,
    model: str,
    hint: TranscriptionHint | None = None,
) -> str:
    if not api_key:
        raise TranscriptionError("Missing GROQ_API_KEY.")

    client = Groq(api_key=api_key)
    kwargs = hint.as_request_kwargs() if hint else {}
    try:
        with media_path.open("rb") as media:
            response = client.audio.transcriptions.create(
                file=(media_path.name, media.read()),
                model=model,
                response_format="json",
                temperature=0.0,
                **kwargs,
            )
    except APIError as exc:
        raise TranscriptionError(f"Transcription failed: {exc.message}") from exc
    except OSError as exc:
        raise TranscriptionError(f"Could not read media for transcription: {exc}") from exc

    return _extract_groq_text(response)
