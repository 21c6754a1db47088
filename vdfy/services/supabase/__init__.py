"""Supabase service utilities."""

from vdfy.services.supabase.helpers import (
    first_row,
    is_unique_violation,
    raise_for_postgrest_error,
    raise_for_storage_error,
)
from vdfy.services.supabase.supabase import create_supabase_admin_client

__all__ = [
    "create_supabase_admin_client",
    "first_row",
    "is_unique_violation",
    "raise_for_postgrest_error",
    "raise_for_storage_error",
]
