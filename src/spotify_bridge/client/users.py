"""User operations mixin for SpotifyClient."""
from typing import Any, Optional

from .request import RequestDescriptor


class UsersMixin:
    """Mixin providing user-related operations."""

    def get_current_user(self) -> dict[str, Any]:
        """Get the profile of the logged-in user.

        Returns:
            The user object.
        """
        return self.executor.execute(RequestDescriptor.get("/me"))

    def get_market_of_current_user(self) -> Optional[str]:
        """Get the ISO country code (market) of the logged-in user."""
        return self.get_current_user().get("country")
