from __future__ import annotations

from vdfy.schemas.base import CamelModel


class UploadResponse(CamelModel):
    public_url: str
    transcription: str
