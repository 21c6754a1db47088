from __future__ import annotations

from fastapi import Request

from vdfy.core.errors import NotReadyError
from vdfy.services.container import ServiceContainer


def get_services(request: Request) -> ServiceContainer:
    services: ServiceContainer | None = getattr(request.app.state, "services", None)
    if services is None:
        raise NotReadyError("Services are not initialized.")
    return services
