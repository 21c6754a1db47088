from typing import Annotated

from fastapi import APIRouter, Depends, Request
from fastapi.responses import HTMLResponse, RedirectResponse
from starlette.responses import Response

from vdfy.api.deps.auth import AuthContext, get_auth_context, get_optional_auth_context
from vdfy.api.deps.services import get_services
from vdfy.application.links import get_secure_video, link_kind, resolve_short_link, shorten_url
from vdfy.core.constants import LINK_KIND_VIDEO
from vdfy.schemas.errors import ErrorResponse
from vdfy.schemas.links import SecureVideoResponse, ShortenRequest, ShortenResponse
from vdfy.services.container import ServiceContainer
from vdfy.services.gate_page import render_gate_page

router = APIRouter(tags=["links"])


@router.post(
    "/api/shorten",
    response_model=ShortenResponse,
    responses={
        400: {"model": ErrorResponse, "description": "Invalid long URL or link type."},
        401: {"model": ErrorResponse, "description": "Gated links require a signed-in owner."},
        403: {"model": ErrorResponse, "description": "Invalid or expired auth token."},
    },
)
async def shorten(
    body: ShortenRequest,
    request: Request,
    auth: Annotated[AuthContext | None, Depends(get_optional_auth_context)],
    services: Annotated[ServiceContainer, Depends(get_services)],
) -> ShortenResponse:
    return await shorten_url(body, auth, str(request.base_url).rstrip("/"), services)


async def _resolve(short_id: str, services: ServiceContainer) -> Response:
    record = await resolve_short_link(short_id, services)
    if link_kind(record) == LINK_KIND_VIDEO:
        return HTMLResponse(render_gate_page(short_id))
    return RedirectResponse(record["url"], status_code=302)


@router.get("/s/{short_id}", include_in_schema=False)
async def resolve_s(short_id: str, services: Annotated[ServiceContainer, Depends(get_services)]) -> Response:
    return await _resolve(short_id, services)


@router.get("/v/{short_id}", include_in_schema=False)
async def resolve_v(short_id: str, services: Annotated[ServiceContainer, Depends(get_services)]) -> Response:
    return await _resolve(short_id, services)


@router.get(
    "/api/get-secure-video/{short_id}",
    response_model=SecureVideoResponse,
    responses={
        401: {"model": ErrorResponse, "description": "Missing auth token."},
        403: {"model": ErrorResponse, "description": "Token rejected or caller is not the owner."},
        404: {"model": ErrorResponse, "description": "Link not found."},
    },
)
async def secure_video(
    short_id: str,
    auth: Annotated[AuthContext, Depends(get_auth_context)],
    services: Annotated[ServiceContainer, Depends(get_services)],
) -> SecureVideoResponse:
    return await get_secure_video(short_id, auth, services)
