from __future__ import annotations

import logging
import time

from vdfy import __version__
from vdfy.core.constants import SHORT_LINKS_TABLE
from vdfy.core.errors import NotReadyError
from vdfy.schemas.meta import HealthResponse, ReadyResponse, StatusResponse
from vdfy.services.container import ServiceContainer
from vdfy.services.supabase.helpers import POSTGREST_FAILURES

_START_TIME = time.monotonic()

logger = logging.getLogger(__name__)


async def health_status() -> HealthResponse:
    return HealthResponse(status="ok")


async def readiness_status(services: ServiceContainer) -> ReadyResponse:
    settings = services.settings
    if not settings.supabase_bucket or not settings.storage_public_base_url:
        logger.warning("readiness check failed: storage not configured")
        raise NotReadyError("Storage is not configured.")

    # Lightweight query to ensure PostgREST is reachable.
    try:
        await services.supabase.table(SHORT_LINKS_TABLE).select("id").limit(1).execute()
    except POSTGREST_FAILURES as exc:
        logger.warning(
            "readiness check failed: supabase not reachable",
            extra={"error_type": type(exc).__name__},
        )
        raise NotReadyError("Supabase is not reachable.") from exc

    return ReadyResponse(status="ok")


async def status_snapshot() -> StatusResponse:
    return StatusResponse(
        status="ok",
        version=__version__,
        uptime_seconds=time.monotonic() - _START_TIME,
    )
