"""
Shared configuration for Spotify Bridge.

This module centralizes configuration values to avoid hardcoded values
scattered throughout the codebase. Values come from environment variables,
optionally seeded from a .env file.
"""

import os
import re
from typing import Any, Dict, List, Optional

from dotenv import load_dotenv

from ..utils.constants import (
    DEFAULT_API_BASE_URL,
    DEFAULT_AUTH_URL,
    DEFAULT_CREDENTIALS_FILE,
    DEFAULT_TOKEN_URL,
    LOGIN_CALLBACK_PATH,
    LOGIN_TIMEOUT_SECONDS,
    MAX_ATTEMPTS,
)

# A custom redirect URI may be supplied the same way the bot always did it
CUSTOM_REDIRECT_URI_ENV = "redirect_uri"


def parse_scopes(raw: Optional[str]) -> List[str]:
    """Split a comma or whitespace separated scope list, dropping duplicates."""
    if not raw:
        return []
    scopes = [s for s in re.split(r"[,\s]+", raw) if s]
    return list(dict.fromkeys(scopes))


class BridgeConfig:
    """
    Centralized configuration management.

    Provides a single source of truth for server, provider and retry settings.
    """

    def __init__(self) -> None:
        # Callback server
        self.host = os.getenv("SPOTIFY_BRIDGE_HOST", "127.0.0.1")
        self.port = int(os.getenv("SPOTIFY_BRIDGE_PORT", "8080"))
        self.base_url = f"http://{self.host}:{self.port}"

        # Credential persistence
        self.config_dir = os.path.expanduser(os.getenv("SPOTIFY_BRIDGE_CONFIG_DIR", "."))
        self.credentials_file = os.getenv(
            "SPOTIFY_BRIDGE_CREDENTIALS_FILE", DEFAULT_CREDENTIALS_FILE
        )
        self.credentials_path = os.path.join(self.config_dir, self.credentials_file)

        # Provider
        self.api_base_url = os.getenv("SPOTIFY_API_BASE_URL", DEFAULT_API_BASE_URL).rstrip("/")
        self.auth_url = os.getenv("SPOTIFY_AUTH_URL", DEFAULT_AUTH_URL)
        self.token_url = os.getenv("SPOTIFY_TOKEN_URL", DEFAULT_TOKEN_URL)
        self.required_scopes = parse_scopes(os.getenv("SPOTIFY_BRIDGE_SCOPES"))

        # Resilience
        self.max_attempts = int(os.getenv("SPOTIFY_BRIDGE_MAX_ATTEMPTS", str(MAX_ATTEMPTS)))
        self.login_timeout = float(
            os.getenv("SPOTIFY_BRIDGE_LOGIN_TIMEOUT", str(LOGIN_TIMEOUT_SECONDS))
        )

        self.log_level = os.getenv("SPOTIFY_BRIDGE_LOG_LEVEL", "INFO").upper()

        self.redirect_uri = self._get_redirect_uri()

    def _get_redirect_uri(self) -> str:
        """Get the OAuth redirect URI. It must point at the callback endpoint."""
        explicit_uri = os.getenv(CUSTOM_REDIRECT_URI_ENV) or os.getenv(
            "SPOTIFY_BRIDGE_REDIRECT_URI"
        )
        if explicit_uri:
            if not explicit_uri.endswith(LOGIN_CALLBACK_PATH):
                raise ValueError(
                    f"'{CUSTOM_REDIRECT_URI_ENV}' must end with {LOGIN_CALLBACK_PATH}"
                )
            return explicit_uri
        return f"{self.base_url}{LOGIN_CALLBACK_PATH}"

    def get_environment_summary(self) -> Dict[str, Any]:
        """Get a summary of the current configuration (excluding secrets)."""
        return {
            "base_url": self.base_url,
            "redirect_uri": self.redirect_uri,
            "credentials_path": self.credentials_path,
            "api_base_url": self.api_base_url,
            "required_scopes": self.required_scopes,
            "max_attempts": self.max_attempts,
            "login_timeout": self.login_timeout,
        }


# Global configuration instance
_config: Optional[BridgeConfig] = None


def get_config() -> BridgeConfig:
    """Get the global configuration instance."""
    global _config
    if _config is None:
        load_dotenv()
        _config = BridgeConfig()
    return _config

