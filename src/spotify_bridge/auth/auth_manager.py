"""
Credential lifecycle for Spotify Bridge.

This module decides between a silent token refresh and a full interactive
login. The interactive login opens the authorization URL in a browser and
blocks until the callback server delivers the authorization code, or until
the login timeout elapses, in which case the process is terminated.
"""

import logging
import os
import secrets
import threading
import time
import webbrowser
from enum import Enum
from typing import Callable, List, Optional

from google_auth_oauthlib.flow import Flow

from .credential_store import Credential, CredentialStore, TokenGrant, get_credential_store
from .oauth_flow import OAuthProvider
from .scopes import get_required_scopes, missing_scopes
from ..core.config import get_config
from ..utils.constants import LOGIN_TIMEOUT_EXIT_CODE
from ..utils.errors import LoginTimeoutError, ScopeInsufficientError

logger = logging.getLogger(__name__)


def terminate_process(code: int) -> None:
    """Flush the log handlers and end the whole process, whichever thread calls."""
    logging.shutdown()
    os._exit(code)


class AuthState(str, Enum):
    """States of the credential lifecycle."""

    UNAUTHENTICATED = "unauthenticated"
    REFRESHING = "refreshing"
    AUTHENTICATED = "authenticated"
    AWAITING_INTERACTIVE_LOGIN = "awaiting_interactive_login"
    FATAL = "fatal"


class LoginSession:
    """
    One pending interactive login.

    Owns a single-slot permit that the callback handler releases exactly once,
    plus the deadline after which waiting gives up.
    """

    def __init__(self, flow: Flow, state: str, timeout: float) -> None:
        self.flow = flow
        self.state = state
        self.timeout = timeout
        self.deadline = time.monotonic() + timeout
        self._permit = threading.Semaphore(0)
        self._released = False
        self._lock = threading.Lock()

    def release(self) -> bool:
        """Signal the waiting caller. Only the first call has an effect."""
        with self._lock:
            if self._released:
                return False
            self._released = True
        self._permit.release()
        return True

    def wait(self) -> bool:
        """Block until released or the deadline passes. True if released."""
        remaining = max(self.deadline - time.monotonic(), 0.0)
        return self._permit.acquire(timeout=remaining)


class AuthLifecycleManager:
    """
    Supplies and renews the bearer token.

    refresh() is intentionally not locked: concurrent callers hitting a 401 may
    each refresh, which costs a redundant token call but never leaves the
    credential half-updated. Interactive logins are serialized.
    """

    def __init__(
        self,
        credential: Credential,
        credential_store: Optional[CredentialStore] = None,
        provider: Optional[OAuthProvider] = None,
        required_scopes: Optional[List[str]] = None,
        login_timeout: Optional[float] = None,
        open_browser: Callable[[str], bool] = webbrowser.open,
        exit_process: Callable[[int], None] = terminate_process,
    ) -> None:
        self.credential = credential
        self.store = credential_store or get_credential_store()
        self.required_scopes = (
            list(required_scopes) if required_scopes is not None else get_required_scopes()
        )
        self.provider = provider or OAuthProvider(credential, self.required_scopes)
        self.login_timeout = (
            login_timeout if login_timeout is not None else get_config().login_timeout
        )
        self._open_browser = open_browser
        self._exit_process = exit_process
        self._login_listeners: List[Callable[["AuthLifecycleManager"], None]] = []

        self.state = AuthState.UNAUTHENTICATED
        self._session: Optional[LoginSession] = None
        self._login_lock = threading.Lock()
        self._logins_completed = 0

    @property
    def access_token(self) -> Optional[str]:
        return self.credential.access_token

    @property
    def login_pending(self) -> bool:
        return self._session is not None

    def add_login_listener(self, listener: Callable[["AuthLifecycleManager"], None]) -> None:
        """Register a callable notified once the initial login succeeded."""
        self._login_listeners.append(listener)

    def initial_login(self) -> str:
        """Make sure a usable token exists at startup, then notify listeners."""
        token = self.refresh()
        logger.info("Logged in to the Spotify Web API")
        for listener in self._login_listeners:
            listener(self)
        return token

    def refresh(self) -> str:
        """
        Refresh the access token, falling back to an interactive login.

        Returns:
            The new access token
        """
        # Taken before the token call so a login finishing meanwhile is reused
        seen = self._logins_completed
        try:
            return self._refresh_tokens()
        except Exception as e:
            logger.error(f"Failed to automatically login ({e}). A manual (re-)login is required.")
            self._authenticate(seen)
            return self.credential.access_token

    def _refresh_tokens(self) -> str:
        self.state = AuthState.REFRESHING
        if not self.credential.refresh_token:
            raise ValueError("Refresh token missing")

        grant = self.provider.refresh(self.credential.refresh_token)
        self._check_scopes(grant)
        self._apply(grant)
        self.state = AuthState.AUTHENTICATED
        logger.info("Refreshed access token")
        return self.credential.access_token

    def _check_scopes(self, grant: TokenGrant) -> None:
        granted = grant.scopes if grant.scopes is not None else self.credential.granted_scopes
        missing = missing_scopes(granted, self.required_scopes)
        if missing:
            raise ScopeInsufficientError(missing)

    def _apply(self, grant: TokenGrant) -> None:
        self.credential.apply_grant(grant)
        self.store.save(self.credential)

    def authenticate(self) -> None:
        """
        Run the interactive login and block until it completes.

        A caller that had to wait for another caller's login returns as soon
        as that login finished instead of starting a second one.
        """
        self._authenticate(self._logins_completed)

    def _authenticate(self, seen: int) -> None:
        with self._login_lock:
            if self._logins_completed != seen:
                logger.info("Login completed while waiting, reusing the new token")
                return
            self._run_interactive_login()

    def _run_interactive_login(self) -> None:
        self.state = AuthState.AWAITING_INTERACTIVE_LOGIN
        flow = self.provider.create_flow(state=secrets.token_urlsafe(16))
        auth_url, state = self.provider.authorization_url(flow)
        session = LoginSession(flow, state, self.login_timeout)
        self._session = session

        logger.info("Spotify authorization URL:")
        logger.info(auth_url)
        logger.info("Trying to open authorization URL in browser...")
        self._launch_browser(auth_url)

        try:
            released = session.wait()
        finally:
            self._session = None

        if not released:
            self.state = AuthState.FATAL
            logger.error("Login timeout! Shutting down application in case of a Spotify Web API anomaly!")
            self._exit_process(LOGIN_TIMEOUT_EXIT_CODE)
            raise LoginTimeoutError(self.login_timeout)

        self.state = AuthState.AUTHENTICATED

    def _launch_browser(self, url: str) -> None:
        try:
            opened = self._open_browser(url)
        except Exception as e:
            logger.debug(f"Browser launch failed: {e}")
            opened = False
        if not opened:
            logger.warning(
                "Couldn't open browser window! Please copy-paste the authorization URL "
                "manually into your browser and follow the login steps"
            )

    def handle_callback(self, code: str, state: Optional[str] = None) -> None:
        """
        Complete a login with the code delivered to the redirect endpoint.

        Args:
            code: The authorization code
            state: The state echoed by the provider, if any

        Raises:
            ValueError: If the state doesn't match the pending login
            ScopeInsufficientError: If the user didn't grant every required scope
        """
        session = self._session
        if session and state and state != session.state:
            raise ValueError("OAuth state mismatch")

        grant = self.provider.exchange_code(code, flow=session.flow if session else None)
        self._check_scopes(grant)
        self._apply(grant)
        self._logins_completed += 1

        if session:
            session.release()
        else:
            logger.info("Stored tokens from a callback without a pending login")
