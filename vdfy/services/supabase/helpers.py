"""Helpers for Supabase error handling and response parsing."""

from __future__ import annotations

from collections.abc import Mapping, Sequence
from typing import Any, NoReturn

import httpx
from postgrest import APIError
from storage3.exceptions import StorageApiError

from vdfy.core.errors import NotFoundError, StorageError

# ---------------------------------------------------------------------------
# Storage error codes
# https://supabase.com/docs/guides/storage/debugging/error-codes
# ---------------------------------------------------------------------------
STORAGE_NOT_FOUND_CODES = frozenset({"NoSuchBucket", "NoSuchKey", "NoSuchUpload", "not_found"})

# ---------------------------------------------------------------------------
# PostgreSQL error codes surfaced through PostgREST
# ---------------------------------------------------------------------------
UNIQUE_VIOLATION_CODE = "23505"

# Both SDKs talk to Supabase over httpx; connection failures surface as these.
STORAGE_FAILURES = (StorageApiError, httpx.HTTPError)
POSTGREST_FAILURES = (APIError, httpx.HTTPError)


def _provider_message(exc: Exception) -> str:
    return getattr(exc, "message", None) or str(exc) or type(exc).__name__


def raise_for_storage_error(
    exc: StorageApiError | httpx.HTTPError,
    fallback_message: str,
    *,
    missing_is_not_found: bool = False,
) -> NoReturn:
    """
    Convert a storage failure into a StorageError that keeps the provider's message.

    Only reads may answer "missing" with NotFoundError; a failed write or delete
    is always a StorageError, whatever code the provider attached.
    """
    code = str(getattr(exc, "code", None) or "")
    if missing_is_not_found and code in STORAGE_NOT_FOUND_CODES:
        raise NotFoundError("Storage object not found.") from exc

    raise StorageError(f"{fallback_message} {_provider_message(exc)}".strip()) from exc


def raise_for_postgrest_error(exc: APIError | httpx.HTTPError, fallback_message: str) -> NoReturn:
    raise StorageError(f"{fallback_message} {_provider_message(exc)}".strip()) from exc


def is_unique_violation(exc: Exception) -> bool:
    return isinstance(exc, APIError) and str(getattr(exc, "code", None) or "") == UNIQUE_VIOLATION_CODE


def first_row(value: Any, *, error_message: str) -> dict[str, Any]:
    """
    Extract the first row from a Supabase response.

    Raises:
        StorageError: If the response is empty or malformed.
    """
    if not isinstance(value, Sequence) or isinstance(value, (str, bytes)) or not value:
        raise StorageError(error_message)

    row = value[0]
    if not isinstance(row, Mapping):
        raise StorageError(error_message)

    return dict(row)
