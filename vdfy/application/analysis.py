from __future__ import annotations

import logging

import httpx

from vdfy.api.deps.auth import AuthContext
from vdfy.application.guards import validate_transcript_url
from vdfy.core.errors import AppError
from vdfy.core.logging import log_context
from vdfy.schemas.analysis import AnalyzeTextResponse
from vdfy.services.container import ServiceContainer
from vdfy.services.summarizer import AIError

logger = logging.getLogger(__name__)


async def analyze_transcript(text_url: str, auth: AuthContext, services: ServiceContainer) -> AnalyzeTextResponse:
    validate_transcript_url(text_url, services.settings)

    with log_context(user_id=auth.user_id):
        try:
            # Redirects would bypass the transcript URL check above.
            response = await services.http.get(text_url, follow_redirects=False)
            if response.is_redirect:
                raise AIError(f"Transcript fetch redirected to {response.headers.get('location')}")
            response.raise_for_status()
            analysis = await services.summarize(response.text)
        except (httpx.HTTPError, AppError) as exc:
            # The caller only ever sees a generic AI failure.
            logger.warning("analysis failed", extra={"error_type": type(exc).__name__}, exc_info=True)
            raise AIError("AI Error") from exc

        logger.info("analysis complete", extra={"chars": len(analysis)})
    return AnalyzeTextResponse(analysis=analysis)
