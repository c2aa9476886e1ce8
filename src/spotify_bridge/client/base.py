"""Base client wiring the executor and the pagination exhauster."""
from .executor import CallExecutor
from .paging import PagingExhauster


class SpotifyClientBase:
    """Base class giving resource mixins access to the call machinery."""

    def __init__(self, executor: CallExecutor) -> None:
        """Initialize the client with a configured executor.

        Args:
            executor: The executor all requests go through.
        """
        self.executor = executor
        self.pager = PagingExhauster(executor)
