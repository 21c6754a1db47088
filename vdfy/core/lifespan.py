from __future__ import annotations

import logging
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

from fastapi import FastAPI

from vdfy.services.container import build_services

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncIterator[None]:
    """
    Build the service container on startup unless one was injected.

    Injected containers belong to the caller and are left open on shutdown.
    """
    owned = False
    if getattr(app.state, "services", None) is None:
        app.state.services = await build_services(app.state.settings)
        owned = True
        logger.info("services initialized", extra={"bucket": app.state.settings.supabase_bucket})

    try:
        yield
    finally:
        if owned:
            logger.info("closing services")
            await app.state.services.aclose()
            app.state.services = None
