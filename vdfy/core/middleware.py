from __future__ import annotations

import logging
import time
import uuid
from collections import OrderedDict, deque

from fastapi import Request
from starlette.middleware.base import RequestResponseEndpoint
from starlette.responses import Response

from vdfy.core.errors import AppError, RateLimitError, RequestTooLargeError
from vdfy.core.handlers import app_error_response
from vdfy.core.logging import log_context

logger = logging.getLogger(__name__)


class RateLimiter:
    """Per-client sliding window over the last `window_seconds`.

    Clients are kept in least-recently-seen order so idle ones can be dropped
    from the front once the table grows past `max_clients`.
    """

    def __init__(self, limit: int, *, window_seconds: float = 60.0, max_clients: int = 10_000) -> None:
        self.limit = limit
        self.window_seconds = window_seconds
        self.max_clients = max_clients
        self._hits: OrderedDict[str, deque[float]] = OrderedDict()

    def hit(self, client: str, now: float | None = None) -> bool:
        """Record one request; False when `client` is over its limit."""
        now = time.monotonic() if now is None else now
        hits = self._hits.pop(client, None) or deque()
        while hits and now - hits[0] > self.window_seconds:
            hits.popleft()
        allowed = len(hits) < self.limit
        if allowed:
            hits.append(now)
        self._hits[client] = hits
        while len(self._hits) > self.max_clients:
            self._hits.popitem(last=False)
        return allowed

    def __len__(self) -> int:
        return len(self._hits)


def client_address(request: Request, *, trust_forwarded: bool = False) -> str:
    if trust_forwarded:
        forwarded = (request.headers.get("x-forwarded-for") or "").split(",")[0].strip()
        if forwarded:
            return forwarded
    return request.client.host if request.client else "unknown"


def _check_declared_size(request: Request, max_bytes: int) -> None:
    # Uploads are large; only the declared length is checked so bodies are never buffered here.
    if max_bytes <= 0:
        return
    try:
        declared = int(request.headers.get("content-length") or 0)
    except ValueError:
        return
    if declared > max_bytes:
        raise RequestTooLargeError("Request body too large.")


async def log_requests(request: Request, call_next: RequestResponseEndpoint) -> Response:
    start = time.perf_counter()
    request_id = request.headers.get("X-Request-Id") or uuid.uuid4().hex
    request.state.request_id = request_id
    settings = request.app.state.settings
    limiter: RateLimiter | None = getattr(request.app.state, "rate_limiter", None)

    with log_context(request_id=request_id, method=request.method, path=request.url.path):
        try:
            _check_declared_size(request, settings.max_request_bytes)
            client = client_address(request, trust_forwarded=settings.trust_proxy_headers)
            if limiter is not None and not limiter.hit(client):
                raise RateLimitError("Too many requests.")
        except AppError as exc:
            # Raised outside the router, so the app exception handlers never see it.
            logger.warning("request rejected", extra={"error_code": exc.code})
            response = app_error_response(exc)
        else:
            response = await call_next(request)

        response.headers["X-Request-Id"] = request_id
        logger.info(
            "%s %s %s %.2fms",
            request.method,
            request.url.path,
            response.status_code,
            (time.perf_counter() - start) * 1000,
        )
        return response
