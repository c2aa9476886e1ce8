"""
OAuth scope handling for Spotify Bridge.

Required scopes are configured per application; a token grant is only accepted
when it covers all of them.
"""

import logging
from typing import FrozenSet, Iterable, List, Optional, Union

from ..core.config import get_config

logger = logging.getLogger(__name__)


def get_required_scopes() -> List[str]:
    """
    Get the list of OAuth scopes this application requires.

    Returns:
        List of unique scopes, in configured order.
    """
    return list(dict.fromkeys(get_config().required_scopes))


def build_scopes(scopes: Iterable[str]) -> str:
    """Join scopes into the space-delimited form used in authorization URLs."""
    return " ".join(s.strip() for s in scopes if s and s.strip())


def normalize_scopes(scopes: Optional[Union[str, Iterable[str]]]) -> FrozenSet[str]:
    """Turn a scope string ("a b") or iterable into a set."""
    if not scopes:
        return frozenset()
    if isinstance(scopes, str):
        return frozenset(scopes.split())
    return frozenset(s for s in scopes if s)


def missing_scopes(granted: Iterable[str], required: Iterable[str]) -> FrozenSet[str]:
    """Return the required scopes that are not part of the granted set."""
    return frozenset(required) - frozenset(granted)
