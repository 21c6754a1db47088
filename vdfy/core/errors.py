class AppError(Exception):
    """Base class for all application errors."""

    status_code = 500
    code = "internal_error"

    def __init__(self, detail: str) -> None:
        super().__init__(detail)
        self.detail = detail


class InvalidRequestError(AppError):
    """Client sent a malformed or incomplete request (400)."""

    status_code = 400
    code = "invalid_request"


class AuthenticationError(AppError):
    """No usable bearer token was presented (401)."""

    status_code = 401
    code = "unauthorized"


class ForbiddenError(AppError):
    """Token rejected, or the caller does not own the resource (403)."""

    status_code = 403
    code = "forbidden"


class NotFoundError(AppError):
    """Requested resource does not exist (404)."""

    status_code = 404
    code = "not_found"


class RequestTooLargeError(AppError):
    """Request body exceeds the configured limit (413)."""

    status_code = 413
    code = "request_too_large"


class RateLimitError(AppError):
    """Client has exceeded rate limits (429)."""

    status_code = 429
    code = "rate_limit_exceeded"


class ConfigurationError(AppError):
    """Server misconfiguration (500)."""

    status_code = 500
    code = "configuration_error"


class ExternalServiceError(AppError):
    """A collaborator (ffmpeg, speech-to-text, storage, LLM) failed (500)."""

    status_code = 500
    code = "external_service_error"


class StorageError(ExternalServiceError):
    """Object storage or the short-link table rejected an operation."""

    code = "storage_error"


class UploadTimeoutError(AppError):
    """Upload processing exceeded the request budget (500)."""

    status_code = 500
    code = "upload_timeout"


class NotReadyError(AppError):
    """Service is temporarily unavailable (503)."""

    status_code = 503
    code = "not_ready"
