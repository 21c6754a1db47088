from typing import Annotated

from fastapi import APIRouter, Depends

from vdfy.api.deps.auth import AuthContext, get_auth_context
from vdfy.api.deps.services import get_services
from vdfy.application.videos import delete_video, list_videos
from vdfy.schemas.errors import ErrorResponse
from vdfy.schemas.videos import DeleteVideoRequest, DeleteVideoResponse, VideoListResponse
from vdfy.services.container import ServiceContainer

router = APIRouter(prefix="/api", tags=["videos"])


@router.get(
    "/my-videos",
    response_model=VideoListResponse,
    responses={
        401: {"model": ErrorResponse, "description": "Missing auth token."},
        403: {"model": ErrorResponse, "description": "Invalid or expired auth token."},
    },
)
async def my_videos(
    auth: Annotated[AuthContext, Depends(get_auth_context)],
    services: Annotated[ServiceContainer, Depends(get_services)],
) -> VideoListResponse:
    return await list_videos(auth, services)


@router.delete(
    "/delete-video",
    response_model=DeleteVideoResponse,
    responses={
        401: {"model": ErrorResponse, "description": "Missing auth token."},
        403: {"model": ErrorResponse, "description": "Token rejected or key belongs to another owner."},
        500: {"model": ErrorResponse, "description": "Storage failed."},
    },
)
async def remove_video(
    body: DeleteVideoRequest,
    auth: Annotated[AuthContext, Depends(get_auth_context)],
    services: Annotated[ServiceContainer, Depends(get_services)],
) -> DeleteVideoResponse:
    return await delete_video(body.video_key, auth, services)
