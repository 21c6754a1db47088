from __future__ import annotations

from pydantic import Field

from vdfy.schemas.base import CamelModel


class AnalyzeTextRequest(CamelModel):
    text_url: str = Field(min_length=1)


class AnalyzeTextResponse(CamelModel):
    analysis: str
