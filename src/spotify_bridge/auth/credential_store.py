"""
Credential Store for Spotify Bridge.

This module holds the client identity and token pair in memory and provides a
standardized interface for persisting them as key/value pairs.
"""

import os
import logging
import threading
from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import Any, Dict, FrozenSet, Optional, Set

from dotenv import dotenv_values, set_key

from .scopes import normalize_scopes
from ..core.config import get_config
from ..utils.constants import (
    ACCESS_TOKEN_KEY,
    CLIENT_ID_KEY,
    CLIENT_SECRET_KEY,
    REFRESH_TOKEN_KEY,
)
from ..utils.errors import CredentialError

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class TokenGrant:
    """Token pair (and scopes) returned by a code exchange or refresh.

    Any field may be None when the provider omitted it.
    """

    access_token: Optional[str] = None
    refresh_token: Optional[str] = None
    scopes: Optional[FrozenSet[str]] = None

    @classmethod
    def from_token_response(cls, data: Dict[str, Any]) -> "TokenGrant":
        scope = data.get("scope")
        return cls(
            access_token=data.get("access_token") or None,
            refresh_token=data.get("refresh_token") or None,
            scopes=normalize_scopes(scope) if scope else None,
        )


@dataclass
class Credential:
    """Client identity plus the current access/refresh token pair."""

    client_id: str
    client_secret: str = field(repr=False)
    access_token: Optional[str] = field(default=None, repr=False)
    refresh_token: Optional[str] = field(default=None, repr=False)
    granted_scopes: Set[str] = field(default_factory=set)
    _lock: threading.Lock = field(
        default_factory=threading.Lock, init=False, repr=False, compare=False
    )

    def apply_grant(self, grant: TokenGrant) -> None:
        """
        Overwrite the token fields from a grant.

        Fields the provider omitted keep their previous value. Nothing is
        changed unless the resulting pair is complete.

        Raises:
            ValueError: If the grant would leave a token missing.
        """
        with self._lock:
            access_token = grant.access_token or self.access_token
            refresh_token = grant.refresh_token or self.refresh_token
            if not access_token or not refresh_token:
                raise ValueError("Token grant is missing the access and/or refresh token")
            self.access_token = access_token
            self.refresh_token = refresh_token
            if grant.scopes is not None:
                self.granted_scopes = set(grant.scopes)


class CredentialStore(ABC):
    """Abstract base class for credential storage."""

    @abstractmethod
    def load(self) -> Credential:
        """Load the credential, raising CredentialError if it is unusable."""
        pass

    @abstractmethod
    def save(self, credential: Credential) -> bool:
        """Persist the credential's tokens. Returns True on success."""
        pass


class DotenvCredentialStore(CredentialStore):
    """Credential store backed by a dotenv-style key/value file.

    If the file doesn't exist yet, the client identity is read from the
    SPOTIFY_CLIENT_ID / SPOTIFY_CLIENT_SECRET environment variables and the
    file is created on the first save.
    """

    def __init__(self, path: Optional[str] = None) -> None:
        """
        Initialize the credential store.

        Args:
            path: Path to the credential file. If None, uses the configured
                  credentials path.
        """
        self.path = path or get_config().credentials_path
        logger.info(f"DotenvCredentialStore initialized: {self.path}")

    def load(self) -> Credential:
        if os.path.exists(self.path):
            values = dotenv_values(self.path)
            source = self.path
        else:
            values = {
                CLIENT_ID_KEY: os.getenv("SPOTIFY_CLIENT_ID") or os.getenv(CLIENT_ID_KEY),
                CLIENT_SECRET_KEY: os.getenv("SPOTIFY_CLIENT_SECRET")
                or os.getenv(CLIENT_SECRET_KEY),
            }
            source = "environment"
            if not values[CLIENT_ID_KEY] or not values[CLIENT_SECRET_KEY]:
                raise CredentialError(
                    f"Failed to read {self.path} and didn't find environment variables "
                    f"SPOTIFY_CLIENT_ID and SPOTIFY_CLIENT_SECRET as backup"
                )

        credential = Credential(
            client_id=self._get_not_blank(values, CLIENT_ID_KEY),
            client_secret=self._get_not_blank(values, CLIENT_SECRET_KEY),
            access_token=values.get(ACCESS_TOKEN_KEY) or None,
            refresh_token=values.get(REFRESH_TOKEN_KEY) or None,
        )
        logger.debug(f"Loaded credential from {source}")
        return credential

    def _get_not_blank(self, values: Dict[str, Optional[str]], key: str) -> str:
        value = values.get(key)
        if value and value.strip():
            return value.strip()
        raise CredentialError(f"Missing required field in {self.path}: {key}")

    def save(self, credential: Credential) -> bool:
        """Rewrite the token keys in place, keeping every other line."""
        try:
            directory = os.path.dirname(self.path)
            if directory and not os.path.exists(directory):
                os.makedirs(directory, exist_ok=True)

            if not os.path.exists(self.path):
                open(self.path, "a").close()
            existing = dotenv_values(self.path)
            pairs = {
                CLIENT_ID_KEY: credential.client_id,
                CLIENT_SECRET_KEY: credential.client_secret,
                ACCESS_TOKEN_KEY: credential.access_token,
                REFRESH_TOKEN_KEY: credential.refresh_token,
            }
            for key, value in pairs.items():
                if value is None or existing.get(key) == value:
                    continue
                set_key(self.path, key, value, quote_mode="never")

            logger.info(f"Stored tokens in {self.path}")
            return True
        except OSError as e:
            logger.error(
                f"Failed to update tokens in {self.path}: {e}. "
                "These will get lost during a restart."
            )
            return False


# Global credential store instance
_credential_store: Optional[CredentialStore] = None


def get_credential_store() -> CredentialStore:
    """Get the global credential store instance."""
    global _credential_store

    if _credential_store is None:
        _credential_store = DotenvCredentialStore()
        logger.info(f"Initialized credential store: {type(_credential_store).__name__}")

    return _credential_store

