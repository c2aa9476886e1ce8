"""Artist operations mixin for SpotifyClient."""
from typing import Any

from .request import RequestDescriptor
from ..utils import partition
from ..utils.constants import MAX_ARTIST_FETCH_LIMIT


class ArtistsMixin:
    """Mixin providing artist-related operations."""

    def get_artists(self, ids: list[str]) -> list[dict[str, Any]]:
        """Get several artists, batching the IDs as the API requires.

        Args:
            ids: Artist IDs.

        Returns:
            Artist objects in the order of ``ids``.
        """
        artists: list[dict[str, Any]] = []
        for batch in partition(ids, MAX_ARTIST_FETCH_LIMIT):
            response = self.executor.execute(
                RequestDescriptor.get("/artists", ids=",".join(batch))
            )
            artists.extend(a for a in (response or {}).get("artists", []) if a)
        return artists

    def get_followed_artists(self) -> list[dict[str, Any]]:
        """Get every artist the current user follows."""
        return self.pager.execute_cursor_paging(
            RequestDescriptor.get("/me/following", type="artist", limit=MAX_ARTIST_FETCH_LIMIT),
            key="artists",
        )
