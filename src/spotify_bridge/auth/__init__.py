"""
OAuth2 Authentication Package for Spotify Bridge.

This package provides the credential lifecycle:
- Credential store persisting the token pair as key/value pairs
- Silent refresh with scope validation
- Interactive login that blocks on a callback-delivered permit
- Callback server receiving the authorization redirect
"""

from .scopes import build_scopes, get_required_scopes, missing_scopes
from .credential_store import (
    Credential,
    CredentialStore,
    DotenvCredentialStore,
    TokenGrant,
    get_credential_store,
)
from .oauth_flow import OAuthProvider
from .auth_manager import AuthLifecycleManager, AuthState, LoginSession

__all__ = [
    # Scopes
    "build_scopes",
    "get_required_scopes",
    "missing_scopes",
    # Credential Store
    "Credential",
    "CredentialStore",
    "DotenvCredentialStore",
    "TokenGrant",
    "get_credential_store",
    # Lifecycle
    "OAuthProvider",
    "AuthLifecycleManager",
    "AuthState",
    "LoginSession",
]
