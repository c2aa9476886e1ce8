"""Custom exceptions for Spotify Bridge.

This module provides structured error handling with specific exception types
for different failure scenarios. All exceptions inherit from SpotifyBridgeError,
and every remote-call failure is an ApiError carrying an ErrorKind.
"""
from enum import Enum
from typing import Any, Iterable, Optional


class ErrorKind(str, Enum):
    """Classification of a failed remote call."""

    RATE_LIMITED = "rate_limited"
    UNAUTHORIZED = "unauthorized"
    NOT_FOUND = "not_found"
    BAD_REQUEST = "bad_request"
    FORBIDDEN = "forbidden"
    TRANSIENT = "transient"
    FATAL = "fatal"


class SpotifyBridgeError(Exception):
    """Base exception for all spotify-bridge errors.

    Attributes:
        message: Human-readable error description.
    """

    def __init__(self, message: str) -> None:
        self.message = message
        super().__init__(self.format_message())

    def format_message(self) -> str:
        """Format the error message."""
        return self.message


class ApiError(SpotifyBridgeError):
    """Uniform wrapper for every failed remote call.

    Attributes:
        kind: The ErrorKind classification.
        status_code: HTTP status of the failing response, if there was one.
        path: The request path, for context.
    """

    kind: ErrorKind = ErrorKind.FATAL

    def __init__(
        self,
        message: str,
        status_code: Optional[int] = None,
        path: Optional[str] = None,
        kind: Optional[ErrorKind] = None,
    ) -> None:
        if kind is not None:
            self.kind = kind
        self.status_code = status_code
        self.path = path
        super().__init__(message)

    def format_message(self) -> str:
        parts = [self.message]
        if self.status_code is not None:
            parts.append(f"HTTP {self.status_code}")
        if self.path:
            parts.append(f"path: {self.path}")
        if len(parts) == 1:
            return self.message
        return f"{self.message} ({', '.join(parts[1:])})"


class RateLimitedError(ApiError):
    """Raised on HTTP 429. The server tells us how long to wait."""

    kind = ErrorKind.RATE_LIMITED

    def __init__(
        self,
        message: str,
        retry_after: int = 1,
        status_code: Optional[int] = 429,
        path: Optional[str] = None,
    ) -> None:
        self.retry_after = retry_after
        super().__init__(message, status_code, path)


class UnauthorizedError(ApiError):
    """Raised when the bearer token is rejected."""

    kind = ErrorKind.UNAUTHORIZED


class NotFoundError(ApiError):
    """Raised when the requested resource doesn't exist."""

    kind = ErrorKind.NOT_FOUND


class BadRequestError(ApiError):
    """Raised when the remote rejects the request shape."""

    kind = ErrorKind.BAD_REQUEST


class ForbiddenError(ApiError):
    """Raised when the token lacks access to a resource."""

    kind = ErrorKind.FORBIDDEN


class TransientError(ApiError):
    """Raised for network, parse and server-side failures worth retrying."""

    kind = ErrorKind.TRANSIENT


class RetriesExhaustedError(ApiError):
    """Raised when every attempt of a request failed.

    Attributes:
        attempts: Number of attempts issued.
        last_error: The error of the final attempt (also the __cause__).
    """

    def __init__(self, last_error: ApiError, attempts: int) -> None:
        self.attempts = attempts
        self.last_error = last_error
        super().__init__(
            f"Request failed after {attempts} attempts: {last_error.message}",
            status_code=last_error.status_code,
            path=last_error.path,
            kind=last_error.kind,
        )


class ScopeInsufficientError(SpotifyBridgeError):
    """Raised when a token grant is missing required scopes.

    Attributes:
        missing: The required scopes that were not granted.
    """

    def __init__(self, missing: Iterable[str]) -> None:
        self.missing = sorted(missing)
        super().__init__(
            f"Granted scopes are missing: {', '.join(self.missing)}. A re-login is required"
        )


class LoginTimeoutError(SpotifyBridgeError):
    """Raised when the interactive login callback never arrived."""

    def __init__(self, timeout: float) -> None:
        self.timeout = timeout
        super().__init__(f"No login callback received within {timeout:g} seconds")


class UnsupportedCursorError(SpotifyBridgeError, TypeError):
    """Raised when a cursor-paged response carries a non-string cursor."""

    def __init__(self, cursor: Any) -> None:
        self.cursor = cursor
        super().__init__(
            "Cursor-based paging is only supported for string cursors, "
            f"got {type(cursor).__name__}"
        )


class CredentialError(SpotifyBridgeError):
    """Raised when the client identity cannot be loaded."""
    pass


_STATUS_ERRORS = {
    400: (BadRequestError, "Bad request. The remote rejected the request parameters."),
    401: (UnauthorizedError, "Access token rejected or expired."),
    403: (ForbiddenError, "Access denied. The token lacks permission for this resource."),
    404: (NotFoundError, "Resource not found."),
}


def _parse_retry_after(value: Any) -> int:
    try:
        return max(int(float(value)), 0)
    except (TypeError, ValueError):
        return 1


def handle_http_error(response: Any, path: Optional[str] = None) -> ApiError:
    """Convert a failed HTTP response to a specific exception.

    Args:
        response: The requests.Response (anything with status_code/headers).
        path: Optional request path for context.

    Returns:
        An appropriate ApiError subclass.
    """
    try:
        status = response.status_code
    except AttributeError:
        return TransientError(f"API error: {response}", path=path)

    if status == 429:
        retry_after = _parse_retry_after(response.headers.get("Retry-After"))
        return RateLimitedError(
            f"Rate limited. Retry after {retry_after}s.",
            retry_after=retry_after,
            path=path,
        )

    if status in _STATUS_ERRORS:
        error_class, message = _STATUS_ERRORS[status]
        return error_class(message, status_code=status, path=path)

    return TransientError(f"API error: {_response_text(response)}", status_code=status, path=path)


def _response_text(response: Any) -> str:
    text = getattr(response, "text", "") or ""
    return text[:200] if isinstance(text, str) else str(text)[:200]


def format_error(action: str, error: Exception) -> str:
    """Format an error message consistently.

    Args:
        action: The action that failed (e.g., "Fetch playlist").
        error: The exception that occurred.

    Returns:
        Formatted error string.
    """
    if isinstance(error, SpotifyBridgeError):
        return f"{action} failed: {error.message}"
    return f"{action} failed: {str(error)}"
