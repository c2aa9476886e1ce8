"""Spotify Web API Client - modular implementation.

This module provides a facade that combines all client mixins into
a single SpotifyClient class, plus the call machinery underneath it.
"""
from .base import SpotifyClientBase
from .artists import ArtistsMixin
from .albums import AlbumsMixin
from .playlists import PlaylistsMixin
from .tracks import AlbumTrackPair, TracksMixin
from .users import UsersMixin
from .executor import CallExecutor
from .paging import Page, PagingExhauster
from .request import RequestDescriptor
from .transport import RestTransport


class SpotifyClient(
    SpotifyClientBase,
    UsersMixin,
    ArtistsMixin,
    AlbumsMixin,
    PlaylistsMixin,
    TracksMixin,
):
    """Resilient Spotify Web API client.

    Combines all mixins to provide user, artist, album, playlist and track
    functionality on top of the retrying executor.
    """
    pass


__all__ = [
    'SpotifyClient',
    'AlbumTrackPair',
    'CallExecutor',
    'PagingExhauster',
    'Page',
    'RequestDescriptor',
    'RestTransport',
]
