"""Track operations mixin for SpotifyClient."""
from dataclasses import dataclass, field
from typing import Any, Optional

from .request import RequestDescriptor
from ..utils import partition
from ..utils.constants import (
    MAX_ALBUM_TRACK_FETCH_LIMIT,
    MAX_TRACK_FETCH_LIMIT,
    TRACK_SEARCH_LIMIT,
)


@dataclass
class AlbumTrackPair:
    """An album together with all of its tracks."""

    album: dict[str, Any]
    tracks: list[dict[str, Any]] = field(default_factory=list)


class TracksMixin:
    """Mixin providing track-related operations."""

    def get_tracks(self, ids: list[str]) -> list[dict[str, Any]]:
        """Get several tracks by ID.

        Args:
            ids: Track IDs.

        Returns:
            Track objects; IDs the API doesn't know are left out.
        """
        tracks: list[dict[str, Any]] = []
        for batch in partition(ids, MAX_TRACK_FETCH_LIMIT):
            response = self.executor.execute(
                RequestDescriptor.get("/tracks", ids=",".join(batch))
            )
            tracks.extend(t for t in (response or {}).get("tracks", []) if t)
        return tracks

    def get_album_tracks(self, album: dict[str, Any]) -> AlbumTrackPair:
        """Get every track of a single album."""
        tracks = self.pager.execute_paging(
            RequestDescriptor.get(
                f"/albums/{album['id']}/tracks", limit=MAX_ALBUM_TRACK_FETCH_LIMIT
            )
        )
        return AlbumTrackPair(album, tracks)

    def get_tracks_of_albums(self, albums: list[dict[str, Any]]) -> list[AlbumTrackPair]:
        """Get the tracks of several albums, one paged request chain per album."""
        return [self.get_album_tracks(album) for album in albums]

    def search_track(self, track_name: str, artist_name: str) -> Optional[dict[str, Any]]:
        """Search for a single track.

        An exact (case-insensitive) name match among the first results wins,
        otherwise the top result is returned.

        Returns:
            The best matching track, or None if the search came up empty.
        """
        response = self.executor.execute(
            RequestDescriptor.get(
                "/search", q=f"{artist_name} {track_name}", type="track", limit=TRACK_SEARCH_LIMIT
            )
        )
        results = ((response or {}).get("tracks") or {}).get("items") or []
        if not results:
            return None
        wanted = track_name.casefold()
        return next((t for t in results if (t.get("name") or "").casefold() == wanted), results[0])
