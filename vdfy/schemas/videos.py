from __future__ import annotations

from datetime import datetime

from pydantic import Field

from vdfy.schemas.base import CamelModel


class VideoEntry(CamelModel):
    key: str
    url: str
    text_url: str | None
    uploaded_at: datetime | None
    category: str


class VideoListResponse(CamelModel):
    videos: list[VideoEntry]


class DeleteVideoRequest(CamelModel):
    video_key: str = Field(min_length=1)


class DeleteVideoResponse(CamelModel):
    success: bool
