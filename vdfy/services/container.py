"""Process-wide service handles.

Built once at startup by the lifespan and handed to request handlers through
FastAPI dependencies. Tests build their own container with fakes.
"""

from __future__ import annotations

import asyncio
import functools
import pathlib
from collections.abc import Awaitable, Callable
from dataclasses import dataclass

import httpx
from supabase import AsyncClient

from vdfy.core.config import Settings
from vdfy.core.constants import HTTP_TIMEOUT_SECONDS
from vdfy.services.summarizer import create_openrouter_client, summarize_text
from vdfy.services.supabase import create_supabase_admin_client
from vdfy.services.transcoder import transcode_video
from vdfy.services.transcriber import TranscriptionHint, transcribe_file

Transcoder = Callable[[pathlib.Path, pathlib.Path], Awaitable[pathlib.Path]]
Transcriber = Callable[[pathlib.Path], Awaitable[str]]
Summarizer = Callable[[str], Awaitable[str]]


@dataclass
class ServiceContainer:
    settings: Settings
    supabase: AsyncClient
    http: httpx.AsyncClient
    transcode: Transcoder
    transcribe: Transcriber
    summarize: Summarizer

    async def aclose(self) -> None:
        await self.http.aclose()


def make_transcriber(settings: Settings) -> Transcriber:
    hint = TranscriptionHint(prompt=settings.transcription_prompt, language=settings.transcription_language)

    async def transcribe(media_path: pathlib.Path) -> str:
        # The Groq SDK call is blocking.
        return await asyncio.to_thread(
            transcribe_file,
            media_path,
            api_key=settings.groq_api_key,
            model=settings.groq_model,
            hint=hint,
        )

    return transcribe


def make_summarizer(settings: Settings) -> Summarizer:
    async def summarize(text: str) -> str:
        client = create_openrouter_client(settings.openrouter_api_key)
        return await summarize_text(text, client=client, model=settings.openrouter_model)

    return summarize


async def build_services(settings: Settings) -> ServiceContainer:
    supabase = await create_supabase_admin_client(settings)
    return ServiceContainer(
        settings=settings,
        supabase=supabase,
        http=httpx.AsyncClient(timeout=HTTP_TIMEOUT_SECONDS, follow_redirects=True),
        transcode=functools.partial(transcode_video, ffmpeg_path=settings.ffmpeg_path),
        transcribe=make_transcriber(settings),
        summarize=make_summarizer(settings),
    )
