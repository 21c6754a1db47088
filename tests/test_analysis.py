"""Tests for transcript summarization."""

import pytest

from tests.conftest import STORAGE_BASE
from vdfy.api.deps.auth import AuthContext
from vdfy.application.analysis import analyze_transcript
from vdfy.core.errors import InvalidRequestError
from vdfy.services.summarizer import AIError

OWNER = AuthContext(access_token="t", user_id="user-1", email="user@example.com")
TEXT_URL = f"{STORAGE_BASE}/users/user_example_com/Intro/rec_1.txt"


async def test_summarizes_the_fetched_transcript(services, web, summarizer):
    web.add_text(TEXT_URL, "we discussed the quarterly roadmap")

    response = await analyze_transcript(TEXT_URL, OWNER, services)

    assert response.analysis == summarizer.summary
    assert summarizer.calls == ["we discussed the quarterly roadmap"]


@pytest.mark.parametrize(
    "text_url",
    [
        "https://evil.test/transcript.txt",
        "file:///etc/passwd",
        f"{STORAGE_BASE}evil/x.txt",
        "not a url",
    ],
)
async def test_urls_outside_recording_storage_are_rejected(services, web, text_url):
    with pytest.raises(InvalidRequestError):
        await analyze_transcript(text_url, OWNER, services)
    assert web.requests == []


async def test_fetch_failure_is_an_ai_error(services, web, summarizer):
    web.add_text(TEXT_URL, "gone", status_code=404)

    with pytest.raises(AIError, match="AI Error"):
        await analyze_transcript(TEXT_URL, OWNER, services)
    assert summarizer.calls == []


async def test_model_failure_is_an_ai_error(services, web, summarizer):
    web.add_text(TEXT_URL, "transcript")
    summarizer.error = AIError("Failed to call OpenRouter.")

    with pytest.raises(AIError) as excinfo:
        await analyze_transcript(TEXT_URL, OWNER, services)
    assert excinfo.value.detail == "AI Error"
