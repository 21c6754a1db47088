from __future__ import annotations

from typing import Any

from openai import APIError, AsyncOpenAI

from vdfy.core.constants import OPENROUTER_APP_NAME, OPENROUTER_BASE_URL, SUMMARY_SYSTEM_PROMPT
from vdfy.core.errors import ExternalServiceError


class AIError(ExternalServiceError):
    code = "ai_error"


def create_openrouter_client(api_key: str) -> AsyncOpenAI:
    if not api_key:
        raise AIError("Missing OPENROUTER_API_KEY.")
    return AsyncOpenAI(
        api_key=api_key,
        base_url=OPENROUTER_BASE_URL,
        default_headers={"X-Title": OPENROUTER_APP_NAME},
    )


async def summarize_text(text: str, *, client: AsyncOpenAI, model: str) -> str:
    try:
        response = await client.chat.completions.create(
            model=model,
            messages=[
                {"role": "system", "content": SUMMARY_SYSTEM_PROMPT},
                {"role": "user", "content": text},
            ],
            temperature=0.2,
        )
    except APIError as exc:
        raise AIError("Failed to call OpenRouter.") from exc

    content: Any = response.choices[0].message.content if response.choices else None
    if not isinstance(content, str) or not content.strip():
        raise AIError("Empty summary response.")

    return content.strip()
