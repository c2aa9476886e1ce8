"""
Core module for Spotify Bridge.

Contains shared configuration used across the package.
"""

from .config import BridgeConfig, get_config, parse_scopes

__all__ = [
    "BridgeConfig",
    "get_config",
    "parse_scopes",
]
