"""Exception hierarchy for the Pxshot SDK."""

from __future__ import annotations

from typing import Any, Mapping

from pxshot.models import RateLimitInfo


class PxshotError(Exception):
    """Base exception for all Pxshot SDK errors."""

    def __init__(
        self,
        message: str,
        status_code: int | None = None,
        rate_limit_info: RateLimitInfo | None = None,
    ) -> None:
        self.message = message
        self.status_code = status_code
        self.rate_limit_info = rate_limit_info
        if status_code is None:
            super().__init__(message)
        else:
            super().__init__(f"{status_code}: {message}")


class ConfigurationError(PxshotError):
    """Raised when a client is constructed with unusable settings."""


class ValidationError(PxshotError):
    """Raised on invalid request input, locally or on 422 responses."""

    def __init__(
        self,
        message: str,
        errors: Mapping[str, list[str]] | None = None,
        status_code: int | None = None,
        rate_limit_info: RateLimitInfo | None = None,
    ) -> None:
        super().__init__(message, status_code, rate_limit_info)
        self.errors: dict[str, list[str]] = dict(errors or {})


class AuthenticationError(PxshotError):
    """Raised on 401 responses."""


class RateLimitError(PxshotError):
    """Raised on 429 responses."""

    @property
    def retry_after(self) -> int | None:
        """Seconds to wait before retrying, from ``Retry-After``."""
        if self.rate_limit_info is None:
            return None
        return self.rate_limit_info.retry_after


class ApiError(PxshotError):
    """Raised on any other non-2xx response."""


class TransportError(PxshotError):
    """Raised when the request never produced a usable response."""

    def __init__(self, message: str, cause: BaseException | None = None) -> None:
        super().__init__(message)
        self.cause = cause


# Maps HTTP status codes to exception classes.
_STATUS_MAP: dict[int, type[PxshotError]] = {
    401: AuthenticationError,
    422: ValidationError,
    429: RateLimitError,
}


def build_exception(
    status_code: int,
    body: Mapping[str, Any] | None,
    headers: Mapping[str, Any],
    fallback: str = "",
) -> PxshotError:
    """Construct the appropriate exception for an error response.

    The message is the first non-null of the body's ``message`` and
    ``error`` fields, then *fallback* (the transport's own error text).
    An empty string still counts as a message.
    """
    if not isinstance(body, Mapping):
        body = {}
    rate_limit_info = RateLimitInfo.from_headers(headers)
    message = next(
        (body[key] for key in ("message", "error") if body.get(key) is not None),
        fallback,
    )
    if not isinstance(message, str):
        message = str(message)

    exc_cls = _STATUS_MAP.get(status_code, ApiError)
    if exc_cls is ValidationError:
        errors = body.get("errors")
        return ValidationError(
            message,
            errors if isinstance(errors, Mapping) else {},
            status_code,
            rate_limit_info,
        )
    return exc_cls(message, status_code, rate_limit_info)
