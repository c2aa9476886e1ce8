"""HTTP transport issuing bearer-authenticated requests against the REST API."""
import logging
from typing import Any, Optional

import requests

from .request import RequestDescriptor
from ..core.config import get_config
from ..utils.constants import REQUEST_TIMEOUT_SECONDS
from ..utils.errors import TransientError, handle_http_error

logger = logging.getLogger(__name__)


class RestTransport:
    """Sends one RequestDescriptor and returns the decoded JSON payload.

    Failed responses are raised as classified ApiError subclasses; network
    and decoding failures are raised unchanged for the executor to classify.
    """

    def __init__(
        self,
        base_url: Optional[str] = None,
        session: Optional[requests.Session] = None,
        timeout: float = REQUEST_TIMEOUT_SECONDS,
    ) -> None:
        self.base_url = (base_url or get_config().api_base_url).rstrip("/")
        self.session = session or requests.Session()
        self.timeout = timeout

    def url_for(self, path: str) -> str:
        if path.startswith("http://") or path.startswith("https://"):
            return path
        return f"{self.base_url}/{path.lstrip('/')}"

    def send(self, request: RequestDescriptor) -> Any:
        response = self.session.request(
            request.method,
            self.url_for(request.path),
            params=request.params or None,
            json=request.json,
            headers=request.headers,
            timeout=self.timeout,
        )

        if response.status_code >= 400:
            raise handle_http_error(response, request.path)

        # 201/204 responses for writes may carry no body
        if not response.content:
            return None

        try:
            return response.json()
        except ValueError as e:
            raise TransientError(
                f"Could not decode response body: {e}",
                status_code=response.status_code,
                path=request.path,
            ) from e
