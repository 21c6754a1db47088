"""Bearer-token verification.

Tokens are tried as first-party Supabase tokens first, then as third-party
OAuth access tokens against a userinfo endpoint. Callers only learn whether
an identity was found, never which stage rejected the token.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any

import httpx
from jwt import InvalidTokenError
from jwt import decode as jwt_decode
from supabase import AsyncClient
from supabase_auth.errors import AuthError

from vdfy.core.config import Settings
from vdfy.core.constants import USERINFO_TIMEOUT_SECONDS
from vdfy.core.errors import ConfigurationError

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Identity:
    user_id: str
    email: str | None


class TokenRejected(Exception):
    """A single verification stage did not accept the token."""


def _extract_user(user: Any) -> tuple[str | None, str | None]:
    """
    Pull (id, email) out of a Supabase auth response.

    Depending on the SDK version `get_user` returns either a User or a
    UserResponse wrapper; both shapes are handled.
    """
    if hasattr(user, "user") and user.user is not None:
        user = user.user
    user_id = getattr(user, "id", None)
    email = getattr(user, "email", None)
    return (str(user_id) if user_id else None, email or None)


def decode_local_jwt(access_token: str, settings: Settings) -> Identity:
    if not settings.supabase_jwt_secret:
        raise ConfigurationError("SUPABASE_JWT_SECRET is required when SUPABASE_AUTH_MODE=local.")

    decode_kwargs: dict[str, Any] = {
        "key": settings.supabase_jwt_secret,
        "algorithms": ["HS256"],
        "options": {"verify_aud": bool(settings.supabase_jwt_audience)},
    }
    if settings.supabase_jwt_audience:
        decode_kwargs["audience"] = settings.supabase_jwt_audience
    try:
        claims = jwt_decode(access_token, **decode_kwargs)
    except InvalidTokenError as exc:
        raise TokenRejected(f"jwt rejected: {type(exc).__name__}") from exc

    user_id = claims.get("sub") or claims.get("user_id")
    if not user_id:
        raise TokenRejected("jwt has no subject")
    return Identity(user_id=str(user_id), email=claims.get("email") or None)


async def verify_supabase_token(access_token: str, settings: Settings, supabase: AsyncClient) -> Identity:
    if (settings.supabase_auth_mode or "remote").lower() == "local":
        return decode_local_jwt(access_token, settings)

    try:
        response = await supabase.auth.get_user(jwt=access_token)
    except AuthError as exc:
        raise TokenRejected(f"supabase rejected token: {getattr(exc, 'code', None) or 'unknown'}") from exc

    user_id, email = _extract_user(response)
    if not user_id:
        raise TokenRejected("supabase returned no user id")
    return Identity(user_id=user_id, email=email)


async def fetch_userinfo_identity(access_token: str, userinfo_url: str, http: httpx.AsyncClient) -> Identity:
    try:
        response = await http.get(
            userinfo_url,
            headers={"Authorization": f"Bearer {access_token}"},
            timeout=USERINFO_TIMEOUT_SECONDS,
        )
    except httpx.HTTPError as exc:
        raise TokenRejected(f"userinfo request failed: {type(exc).__name__}") from exc

    if response.status_code != 200:
        raise TokenRejected(f"userinfo returned {response.status_code}")
    try:
        claims = response.json()
    except ValueError as exc:
        raise TokenRejected("userinfo returned invalid json") from exc
    if not isinstance(claims, dict):
        raise TokenRejected("userinfo returned a non-object")

    user_id = claims.get("sub") or claims.get("id")
    if not user_id:
        raise TokenRejected("userinfo has no subject")
    return Identity(user_id=str(user_id), email=claims.get("email") or None)


async def resolve_identity(
    access_token: str,
    *,
    settings: Settings,
    supabase: AsyncClient,
    http: httpx.AsyncClient,
) -> Identity | None:
    """Return the verified identity, or None when every stage rejected the token."""
    try:
        return await verify_supabase_token(access_token, settings, supabase)
    except TokenRejected as exc:
        logger.warning("first-party token verification failed", extra={"reason": str(exc)})

    if not settings.oauth_userinfo_url:
        return None

    try:
        return await fetch_userinfo_identity(access_token, settings.oauth_userinfo_url, http)
    except TokenRejected as exc:
        logger.warning("third-party token verification failed", extra={"reason": str(exc)})
    return None
