"""Playlist operations mixin for SpotifyClient."""
from typing import Any, Optional

from .request import RequestDescriptor
from ..utils import partition
from ..utils.constants import PLAYLIST_INTERACTION_LIMIT, TRACK_URI_PREFIX


class PlaylistsMixin:
    """Mixin providing playlist operations."""

    def get_playlist(self, playlist_id: str) -> dict[str, Any]:
        """Get a playlist.

        Args:
            playlist_id: The playlist ID.

        Returns:
            The full playlist object.
        """
        return self.executor.execute(RequestDescriptor.get(f"/playlists/{playlist_id}"))

    def get_playlist_tracks(self, playlist_id: str, offset: int = 0) -> list[dict[str, Any]]:
        """Get all items of a playlist.

        Args:
            playlist_id: The playlist ID.
            offset: Position within the playlist to start at.

        Returns:
            Playlist track objects.
        """
        return self.pager.execute_paging(
            RequestDescriptor.get(
                f"/playlists/{playlist_id}/tracks",
                offset=offset,
                limit=PLAYLIST_INTERACTION_LIMIT,
            )
        )

    def get_current_users_playlists(self) -> list[dict[str, Any]]:
        """Get all playlists of the current user."""
        return self.pager.execute_paging(RequestDescriptor.get("/me/playlists", limit=50))

    def add_tracks(
        self,
        playlist_id: str,
        track_ids: list[str],
        position: Optional[int] = None,
    ) -> None:
        """Add tracks to a playlist.

        Args:
            playlist_id: The playlist ID.
            track_ids: Track IDs to add.
            position: Where to insert the tracks (end of the playlist if None).
        """
        for i, batch in enumerate(partition(track_ids, PLAYLIST_INTERACTION_LIMIT)):
            body: dict[str, Any] = {"uris": [TRACK_URI_PREFIX + t for t in batch]}
            if position is not None:
                # Keep the batches in order when inserting mid-playlist
                body["position"] = position + i * PLAYLIST_INTERACTION_LIMIT
            self.executor.execute(
                RequestDescriptor.post(f"/playlists/{playlist_id}/tracks", json=body)
            )

    def create_playlist(
        self,
        user_id: str,
        name: str,
        description: str = "",
        public: bool = False,
    ) -> dict[str, Any]:
        """Create a playlist for the given user and return it."""
        return self.executor.execute(
            RequestDescriptor.post(
                f"/users/{user_id}/playlists",
                json={"name": name, "description": description, "public": public},
            )
        )

    def update_playlist_details(self, playlist_id: str, **details: Any) -> None:
        """Change selected playlist attributes (name, description, public, ...).

        Attributes passed as None are left untouched.
        """
        body = {k: v for k, v in details.items() if v is not None}
        self.executor.execute(RequestDescriptor.put(f"/playlists/{playlist_id}", json=body))

    def remove_items(self, playlist_id: str, uris: list[str]) -> None:
        """Remove every occurrence of the given item URIs from a playlist.

        More than 100 URIs take one request per batch.
        """
        for batch in partition(uris, PLAYLIST_INTERACTION_LIMIT):
            self.executor.execute(
                RequestDescriptor.delete(
                    f"/playlists/{playlist_id}/tracks",
                    json={"tracks": [{"uri": uri} for uri in batch]},
                )
            )

    def clear_playlist(self, playlist_id: str) -> None:
        """Remove every single item from a playlist."""
        uris = [
            item["track"]["uri"]
            for item in self.get_playlist_tracks(playlist_id)
            if item.get("track") and item["track"].get("uri")
        ]
        self.remove_items(playlist_id, uris)
