"""
OAuth Callback Server for Spotify Bridge.

Starts a minimal HTTP server that receives the authorization redirect and
hands the code to the lifecycle manager. It runs in a background thread so
the thread blocked on the login permit can be released from here.
"""

import logging
import threading
import time
from typing import Optional, Tuple
from urllib.parse import urlparse

import uvicorn
from fastapi import FastAPI, Request
from fastapi.responses import PlainTextResponse

from .auth_manager import AuthLifecycleManager
from ..utils.constants import LOGIN_CALLBACK_PATH, LOGIN_SUCCESS_MESSAGE
from ..utils.errors import ScopeInsufficientError

logger = logging.getLogger(__name__)


def create_callback_app(
    manager: AuthLifecycleManager, callback_path: str = LOGIN_CALLBACK_PATH
) -> FastAPI:
    """Build the FastAPI app exposing the single redirect endpoint."""
    app = FastAPI()

    @app.get(callback_path, response_class=PlainTextResponse)
    def login_callback(request: Request) -> PlainTextResponse:
        """Handle the authorization redirect."""
        code = request.query_params.get("code")
        state = request.query_params.get("state")
        error = request.query_params.get("error")

        if error:
            logger.error(f"Authorization server returned an error: {error}")
            return PlainTextResponse(f"Login failed: {error}", status_code=400)

        if not code:
            logger.error("No authorization code received")
            return PlainTextResponse("Login failed: missing code", status_code=400)

        try:
            manager.handle_callback(code, state=state)
        except ScopeInsufficientError as e:
            logger.error(f"Login rejected: {e}")
            return PlainTextResponse(f"Login failed: {e.message}", status_code=403)
        except ValueError as e:
            logger.error(f"Login rejected: {e}")
            return PlainTextResponse(f"Login failed: {e}", status_code=400)
        except Exception as e:
            logger.error(f"Error processing login callback: {e}", exc_info=True)
            return PlainTextResponse("Login failed: token exchange error", status_code=500)

        logger.info("Login callback processed")
        return PlainTextResponse(LOGIN_SUCCESS_MESSAGE)

    return app


class CallbackServer:
    """Serves the redirect endpoint from a uvicorn daemon thread.

    Host, port and path are taken from the redirect URI so the provider's
    redirect always lands on this server.
    """

    def __init__(
        self,
        manager: AuthLifecycleManager,
        redirect_uri: str,
        startup_timeout: float = 3.0,
    ) -> None:
        parsed = urlparse(redirect_uri)
        self.host = parsed.hostname or "127.0.0.1"
        self.port = parsed.port or 80
        self.callback_path = parsed.path or LOGIN_CALLBACK_PATH
        self.startup_timeout = startup_timeout
        self.app = create_callback_app(manager, self.callback_path)
        self.server: Optional[uvicorn.Server] = None
        self._thread: Optional[threading.Thread] = None

    @property
    def is_running(self) -> bool:
        return bool(
            self.server is not None
            and self.server.started
            and self._thread is not None
            and self._thread.is_alive()
        )

    def start(self) -> Tuple[bool, str]:
        """
        Start serving and wait until uvicorn reports it is listening.

        Returns:
            Tuple of (success: bool, error_message: str)
        """
        if self.is_running:
            return True, ""

        config = uvicorn.Config(
            self.app, host=self.host, port=self.port, log_level="warning", access_log=False
        )
        self.server = uvicorn.Server(config)
        # uvicorn exits its serving thread when the port cannot be bound
        self._thread = threading.Thread(target=self.server.run, name="login-callback", daemon=True)
        self._thread.start()

        deadline = time.monotonic() + self.startup_timeout
        while time.monotonic() < deadline and self._thread.is_alive():
            if self.server.started:
                logger.info(
                    f"Login callback listening on http://{self.host}:{self.port}{self.callback_path}"
                )
                return True, ""
            time.sleep(0.05)

        self.stop()
        error_msg = f"Could not serve login callback on {self.host}:{self.port}"
        logger.error(error_msg)
        return False, error_msg

    def stop(self) -> None:
        """Ask uvicorn to shut down and wait for its thread."""
        if self.server is None:
            return

        self.server.should_exit = True
        if self._thread is not None and self._thread.is_alive():
            self._thread.join(timeout=self.startup_timeout)
        self.server = None
        self._thread = None
        logger.info("Login callback server stopped")
