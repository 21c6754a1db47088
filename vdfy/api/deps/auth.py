from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Annotated

from fastapi import Depends, Request
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer

from vdfy.api.deps.services import get_services
from vdfy.core.errors import AuthenticationError, ForbiddenError
from vdfy.core.logging import log_context
from vdfy.services.container import ServiceContainer
from vdfy.services.identity import resolve_identity
from vdfy.services.keyspace import owner_bucket

security = HTTPBearer(auto_error=False)

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class AuthContext:
    access_token: str
    user_id: str
    email: str | None

    @property
    def owner_email(self) -> str | None:
        """The email this caller owns storage under; None for identities without one."""
        if self.email and "@" in self.email:
            return self.email
        return None

    @property
    def owner_bucket(self) -> str:
        return owner_bucket(self.owner_email)


async def _authenticate(
    request: Request,
    credentials: HTTPAuthorizationCredentials,
    services: ServiceContainer,
) -> AuthContext:
    access_token = credentials.credentials
    identity = await resolve_identity(
        access_token,
        settings=services.settings,
        supabase=services.supabase,
        http=services.http,
    )
    if identity is None:
        with log_context(request_id=getattr(request.state, "request_id", None), path=request.url.path):
            logger.warning("Bearer token rejected.", extra={"error_code": "forbidden"})
        raise ForbiddenError("Forbidden")

    return AuthContext(access_token=access_token, user_id=identity.user_id, email=identity.email)


def _has_bearer(credentials: HTTPAuthorizationCredentials) -> bool:
    return credentials.scheme.lower() == "bearer" and bool(credentials.credentials)


async def get_auth_context(
    request: Request,
    credentials: Annotated[HTTPAuthorizationCredentials | None, Depends(security)],
    services: Annotated[ServiceContainer, Depends(get_services)],
) -> AuthContext:
    if credentials is None or not _has_bearer(credentials):
        logger.warning("Missing or invalid Authorization header.", extra={"error_code": "unauthorized"})
        raise AuthenticationError("Unauthorized")
    return await _authenticate(request, credentials, services)


async def get_optional_auth_context(
    request: Request,
    credentials: Annotated[HTTPAuthorizationCredentials | None, Depends(security)],
    services: Annotated[ServiceContainer, Depends(get_services)],
) -> AuthContext | None:
    """Anonymous callers get None; a presented but bad token is still rejected."""
    if credentials is None or not _has_bearer(credentials):
        return None
    return await _authenticate(request, credentials, services)
