"""Error taxonomy for Zoho CRM API failures."""

from typing import Any


class CrmApiError(Exception):
    """
    Base error raised for any failed CRM operation.

    Every error carries a ``code`` tag and a ``retryable`` flag so callers
    can decide on their own retry policy.
    """

    def __init__(
        self,
        message: str,
        status_code: int | None = None,
        code: str | None = None,
        retryable: bool = False,
    ):
        super().__init__(message)
        self.message = message
        self.status_code = status_code
        self.code = code or "CRM_ERROR"
        self.retryable = retryable


class RateLimitError(CrmApiError):
    """Raised on HTTP 429. Carries the server-advised wait in seconds."""

    def __init__(self, message: str, retry_after_seconds: int):
        super().__init__(message, 429, "RATE_LIMIT_EXCEEDED", True)
        self.retry_after_seconds = retry_after_seconds


class AuthenticationError(CrmApiError):
    """Raised for missing credentials, failed token refresh, or 401/403."""

    def __init__(self, message: str):
        super().__init__(message, 401, "AUTHENTICATION_FAILED", False)


class NotFoundError(CrmApiError):
    """Raised when a single-record lookup returns no data."""

    def __init__(self, message: str):
        super().__init__(message, 404, "NOT_FOUND", False)


class ValidationError(CrmApiError):
    """Raised when caller input is rejected before reaching Zoho."""

    def __init__(self, message: str, details: dict[str, list[str]] | None = None):
        super().__init__(message, 400, "VALIDATION_ERROR", False)
        self.details = details or {}


def is_retryable_error(error: BaseException) -> bool:
    """
    Check whether an error is worth retrying.

    Args:
        error: Any exception raised by a CRM call

    Returns:
        True for retryable CrmApiErrors and for network-looking failures
    """
    if isinstance(error, CrmApiError):
        return error.retryable

    text = str(error).lower()
    return "network" in text or "timeout" in text or "econnreset" in text


def format_error_for_logging(error: BaseException) -> dict[str, Any]:
    """
    Flatten an error into a dict suitable for structured logging.

    Args:
        error: The exception to describe

    Returns:
        Dictionary with name, message and CRM-specific attributes
    """
    if isinstance(error, CrmApiError):
        details: dict[str, Any] = {
            "name": error.__class__.__name__,
            "message": error.message,
            "code": error.code,
            "status_code": error.status_code,
            "retryable": error.retryable,
        }
        if isinstance(error, RateLimitError):
            details["retry_after_seconds"] = error.retry_after_seconds
        if isinstance(error, ValidationError):
            details["details"] = error.details
        return details

    return {"name": error.__class__.__name__, "message": str(error)}
