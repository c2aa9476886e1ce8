"""Album operations mixin for SpotifyClient."""
from typing import Any, Iterable, Optional

from .request import RequestDescriptor
from ..utils import partition
from ..utils.constants import MAX_ALBUM_FETCH_LIMIT, MAX_SEVERAL_ALBUMS_LIMIT


class AlbumsMixin:
    """Mixin providing album-related operations."""

    def get_artist_albums(
        self,
        artist_id: str,
        album_groups: Optional[Iterable[str]] = None,
        market: Optional[str] = None,
    ) -> list[dict[str, Any]]:
        """Fetch all albums of a single artist.

        This fires at least one request per artist; there is no endpoint
        returning the albums of several artists at once.

        Args:
            artist_id: The artist ID.
            album_groups: Groups to include, e.g. ['album', 'single'].
            market: Optional ISO country code.

        Returns:
            List of simplified album objects.
        """
        include_groups = ",".join(album_groups) if album_groups else None
        return self.pager.execute_paging(
            RequestDescriptor.get(
                f"/artists/{artist_id}/albums",
                include_groups=include_groups,
                market=market,
                limit=MAX_ALBUM_FETCH_LIMIT,
            )
        )

    def get_albums(self, ids: list[str]) -> list[dict[str, Any]]:
        """Get several full album objects."""
        albums: list[dict[str, Any]] = []
        for batch in partition(ids, MAX_SEVERAL_ALBUMS_LIMIT):
            response = self.executor.execute(
                RequestDescriptor.get("/albums", ids=",".join(batch))
            )
            albums.extend(a for a in (response or {}).get("albums", []) if a)
        return albums
