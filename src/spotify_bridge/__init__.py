"""Spotify Bridge - resilient Spotify Web API access.

This package wraps the Spotify Web API with retrying calls, exhaustive
pagination and a self-healing OAuth2 credential lifecycle.
"""
from .client import SpotifyClient, CallExecutor, PagingExhauster, RequestDescriptor
from .auth import AuthLifecycleManager, Credential

__version__ = "0.1.0"
__all__ = [
    "SpotifyClient",
    "CallExecutor",
    "PagingExhauster",
    "RequestDescriptor",
    "AuthLifecycleManager",
    "Credential",
]
