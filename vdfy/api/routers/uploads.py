from typing import Annotated

from fastapi import APIRouter, Depends, File, Form, Request, UploadFile

from vdfy.api.deps.services import get_services
from vdfy.application.uploads import process_upload
from vdfy.schemas.errors import ErrorResponse
from vdfy.schemas.uploads import UploadResponse
from vdfy.services.container import ServiceContainer

router = APIRouter(prefix="/api", tags=["uploads"])


@router.post(
    "/upload-with-ai",
    response_model=UploadResponse,
    responses={
        400: {"model": ErrorResponse, "description": "No file was provided."},
        500: {"model": ErrorResponse, "description": "Transcoding, transcription or storage failed."},
    },
)
async def upload_with_ai(
    request: Request,
    services: Annotated[ServiceContainer, Depends(get_services)],
    file: Annotated[UploadFile | None, File()] = None,
    folder: Annotated[str | None, Form()] = None,
    subfolder: Annotated[str | None, Form()] = None,
) -> UploadResponse:
    return await process_upload(
        file,
        folder=folder,
        subfolder=subfolder,
        base_url=str(request.base_url).rstrip("/"),
        services=services,
    )
