"""
Resilient call executor for Spotify Bridge.

Every remote call goes through CallExecutor.execute(), which retries a request
up to a fixed number of attempts:

- 429 responses wait ``retry_after * attempt + 1`` seconds (the extra second
  covers occasional inaccuracies in the server's value)
- 401 responses refresh the access token and rewrite the Authorization header
- 400, 403 and 404 responses are raised immediately
- anything else waits a fixed 10 seconds

Retries make every call at-least-once; callers must not rely on idempotence.
"""

import logging
import time
from typing import Any, Callable, Optional, Protocol

from .request import RequestDescriptor
from ..auth.credential_store import Credential
from ..utils.constants import MAX_ATTEMPTS, RATE_LIMIT_MARGIN_SECONDS, TRANSIENT_RETRY_SECONDS
from ..utils.errors import (
    ApiError,
    BadRequestError,
    ForbiddenError,
    NotFoundError,
    RateLimitedError,
    RetriesExhaustedError,
    TransientError,
    UnauthorizedError,
)

logger = logging.getLogger(__name__)

NON_RETRYABLE_ERRORS = (NotFoundError, BadRequestError, ForbiddenError)


class Transport(Protocol):
    def send(self, request: RequestDescriptor) -> Any: ...


class TokenRefresher(Protocol):
    def refresh(self) -> str: ...


class CallExecutor:
    """Executes single requests with bounded retries."""

    def __init__(
        self,
        transport: Transport,
        credential: Credential,
        auth: Optional[TokenRefresher] = None,
        max_attempts: int = MAX_ATTEMPTS,
        sleep: Callable[[float], None] = time.sleep,
    ) -> None:
        if max_attempts < 1:
            raise ValueError("max_attempts must be at least 1")
        self.transport = transport
        self.credential = credential
        self.auth = auth
        self.max_attempts = max_attempts
        self.sleep = sleep

    def execute(
        self,
        request: RequestDescriptor,
        parse: Optional[Callable[[Any], Any]] = None,
    ) -> Any:
        """
        Execute a request, retrying until it succeeds or the budget is spent.

        Args:
            request: The request to send. Its Authorization header is filled
                from the credential if missing and rewritten after a refresh.
            parse: Optional function turning the JSON payload into a result.

        Returns:
            The (parsed) payload.

        Raises:
            NotFoundError, BadRequestError, ForbiddenError: Immediately.
            UnauthorizedError: If no token refresher is configured.
            RetriesExhaustedError: If every attempt failed.
        """
        if not request.is_authorized:
            request.authorize(self.credential.access_token)

        last_error: Optional[ApiError] = None
        for attempt in range(1, self.max_attempts + 1):
            try:
                payload = self.transport.send(request)
                return parse(payload) if parse else payload
            except NON_RETRYABLE_ERRORS:
                raise
            except RateLimitedError as e:
                last_error = e
                delay = e.retry_after * attempt + RATE_LIMIT_MARGIN_SECONDS
                logger.warning(
                    f"Rate limited on {request.path} (attempt {attempt}/{self.max_attempts}), "
                    f"waiting {delay}s"
                )
                self._backoff(attempt, delay)
            except UnauthorizedError as e:
                last_error = e
                if self.auth is None:
                    raise
                # No refresh after the final attempt
                if attempt < self.max_attempts:
                    logger.info(f"Access token rejected on {request.path}, refreshing")
                    request.authorize(self.auth.refresh())
            except Exception as e:
                if isinstance(e, ApiError):
                    last_error = e
                else:
                    last_error = TransientError(f"{type(e).__name__}: {e}", path=request.path)
                    last_error.__cause__ = e
                logger.warning(
                    f"Request to {request.path} failed (attempt {attempt}/{self.max_attempts}): "
                    f"{last_error.message}"
                )
                self._backoff(attempt, TRANSIENT_RETRY_SECONDS)

        logger.error(f"Giving up on {request.path} after {self.max_attempts} attempts")
        raise RetriesExhaustedError(last_error, self.max_attempts) from last_error

    def _backoff(self, attempt: int, delay: float) -> None:
        if attempt < self.max_attempts:
            self.sleep(delay)
