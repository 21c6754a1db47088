from __future__ import annotations

from typing import Annotated

from fastapi import APIRouter, Depends
from fastapi.responses import PlainTextResponse

from vdfy.api.deps.services import get_services
from vdfy.application.meta import health_status, readiness_status, status_snapshot
from vdfy.schemas.meta import HealthResponse, ReadyResponse, StatusResponse
from vdfy.services.container import ServiceContainer

router = APIRouter()


@router.get("/", response_class=PlainTextResponse, include_in_schema=False)
async def root() -> str:
    return "VDFY Server Ready"


@router.get("/meta/health", response_model=HealthResponse)
async def health() -> HealthResponse:
    return await health_status()


@router.get("/meta/ready", response_model=ReadyResponse)
async def ready(services: Annotated[ServiceContainer, Depends(get_services)]) -> ReadyResponse:
    return await readiness_status(services)


@router.get("/meta/status", response_model=StatusResponse)
async def status() -> StatusResponse:
    return await status_snapshot()
