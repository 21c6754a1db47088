from __future__ import annotations

import logging

from fastapi import Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from vdfy.core.errors import AppError
from vdfy.core.logging import log_context

logger = logging.getLogger(__name__)


def app_error_response(exc: AppError) -> JSONResponse:
    return JSONResponse(status_code=exc.status_code, content={"error": exc.detail})


async def handle_app_error(request: Request, exc: AppError) -> JSONResponse:
    request_id = getattr(request.state, "request_id", None)
    request.state.error_code = exc.code
    # Log only server-side failures here. Client errors should be logged at the source.
    if exc.status_code >= 500:
        with log_context(request_id=request_id, method=request.method, path=request.url.path):
            logger.error(
                "%s",
                exc.detail,
                extra={
                    "error_code": exc.code,
                    "status_code": exc.status_code,
                    "error_type": type(exc).__name__,
                },
            )
    return app_error_response(exc)


async def handle_validation_error(request: Request, _exc: RequestValidationError) -> JSONResponse:
    request_id = getattr(request.state, "request_id", None)
    with log_context(request_id=request_id, method=request.method, path=request.url.path):
        logger.warning("Invalid request", extra={"error_code": "invalid_request", "status_code": 400})
    return JSONResponse(status_code=400, content={"error": "Invalid request"})


async def handle_unexpected_error(request: Request, exc: Exception) -> JSONResponse:
    """Anything that escaped the AppError translation still answers in the JSON error shape."""
    request_id = getattr(request.state, "request_id", None)
    with log_context(request_id=request_id, method=request.method, path=request.url.path):
        logger.exception("Unhandled error", extra={"error_type": type(exc).__name__, "status_code": 500})
    return app_error_response(AppError("Internal Server Error"))
