from __future__ import annotations

from typing import Literal

from pydantic import HttpUrl

from vdfy.schemas.base import CamelModel

LinkKind = Literal["redirect", "video"]


class ShortenRequest(CamelModel):
    long_url: HttpUrl
    type: LinkKind = "redirect"


class ShortenResponse(CamelModel):
    short_url: str


class SecureVideoResponse(CamelModel):
    url: str
    transcription: str
