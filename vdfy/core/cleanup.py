"""Best-effort cleanup steps.

Every helper here returns a `CleanupResult` instead of raising: a failed cleanup
is logged at WARNING and the caller carries on.
"""

from __future__ import annotations

import logging
import pathlib
from collections.abc import Awaitable, Callable
from dataclasses import dataclass
from typing import Any

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class CleanupResult:
    target: str
    ok: bool
    error: str | None = None


def remove_local_file(path: pathlib.Path | None) -> CleanupResult:
    if path is None:
        return CleanupResult(target="<none>", ok=True)
    try:
        path.unlink(missing_ok=True)
    except OSError as exc:
        logger.warning("failed to remove temp file", extra={"target": str(path)}, exc_info=True)
        return CleanupResult(target=str(path), ok=False, error=str(exc))
    return CleanupResult(target=str(path), ok=True)


async def run_cleanup(target: str, step: Callable[[], Awaitable[Any]]) -> CleanupResult:
    try:
        await step()
    except Exception as exc:
        logger.warning("cleanup step failed", extra={"target": target}, exc_info=True)
        return CleanupResult(target=target, ok=False, error=str(exc) or type(exc).__name__)
    return CleanupResult(target=target, ok=True)
