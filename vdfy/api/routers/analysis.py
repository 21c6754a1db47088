from typing import Annotated

from fastapi import APIRouter, Depends

from vdfy.api.deps.auth import AuthContext, get_auth_context
from vdfy.api.deps.services import get_services
from vdfy.application.analysis import analyze_transcript
from vdfy.schemas.analysis import AnalyzeTextRequest, AnalyzeTextResponse
from vdfy.schemas.errors import ErrorResponse
from vdfy.services.container import ServiceContainer

router = APIRouter(prefix="/api", tags=["analysis"])


@router.post(
    "/analyze-text",
    response_model=AnalyzeTextResponse,
    responses={
        400: {"model": ErrorResponse, "description": "Transcript URL is not from recording storage."},
        401: {"model": ErrorResponse, "description": "Missing auth token."},
        403: {"model": ErrorResponse, "description": "Invalid or expired auth token."},
        500: {"model": ErrorResponse, "description": "Fetching or summarizing the transcript failed."},
    },
)
async def analyze_text(
    body: AnalyzeTextRequest,
    auth: Annotated[AuthContext, Depends(get_auth_context)],
    services: Annotated[ServiceContainer, Depends(get_services)],
) -> AnalyzeTextResponse:
    return await analyze_transcript(body.text_url, auth, services)
