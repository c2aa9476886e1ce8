"""
Pagination exhauster for Spotify Bridge.

Drives the call executor page by page until the remote stops reporting a
continuation. Pages are fetched strictly in sequence since each page's
continuation depends on the previous response. A failing page fails the whole
call; partial results are never returned.
"""

import logging
from dataclasses import dataclass, field
from typing import Any, Callable, Dict, List, Optional

from .executor import CallExecutor
from .request import RequestDescriptor
from ..utils.errors import ApiError, UnsupportedCursorError

logger = logging.getLogger(__name__)


@dataclass
class Page:
    """One page of a paged response."""

    items: List[Any] = field(default_factory=list)
    next: Optional[str] = None
    offset: int = 0
    limit: int = 0
    after: Any = None

    @property
    def has_next(self) -> bool:
        return self.next is not None

    @classmethod
    def from_payload(cls, payload: Optional[Dict[str, Any]], key: Optional[str] = None) -> "Page":
        """Read a paging object, optionally nested under ``key``."""
        data = payload or {}
        if key is not None:
            data = data.get(key) or {}
        cursors = data.get("cursors") or {}
        return cls(
            items=list(data.get("items") or []),
            next=data.get("next"),
            offset=data.get("offset") or 0,
            limit=data.get("limit") or 0,
            after=cursors.get("after"),
        )


class PagingExhauster:
    """Collects every item of an offset- or cursor-paged endpoint."""

    def __init__(self, executor: CallExecutor) -> None:
        self.executor = executor

    def execute_paging(
        self,
        template: RequestDescriptor,
        key: Optional[str] = None,
        parse_item: Optional[Callable[[Any], Any]] = None,
    ) -> List[Any]:
        """
        Exhaust an offset-paged request.

        Args:
            template: The first-page request. It is copied, never mutated.
            key: Name of the object wrapping the paging block, if any.
            parse_item: Optional function applied to every item.

        Returns:
            All items in remote order.
        """
        request = template.copy()
        results: List[Any] = []
        page_count = 0
        while True:
            page = Page.from_payload(self.executor.execute(request), key)
            page_count += 1
            results.extend(page.items)
            if not page.has_next:
                break
            limit = page.limit or request.params.get("limit") or len(page.items)
            if not limit:
                raise ApiError(
                    "Paged response reports a continuation but no page size",
                    path=template.path,
                )
            offset = page.offset or request.params.get("offset") or 0
            request.set_offset(offset + limit)

        logger.debug(f"Fetched {len(results)} items from {template.path} in {page_count} pages")
        return [parse_item(item) for item in results] if parse_item else results

    def execute_cursor_paging(
        self,
        template: RequestDescriptor,
        key: Optional[str] = None,
        parse_item: Optional[Callable[[Any], Any]] = None,
    ) -> List[Any]:
        """
        Exhaust a cursor-paged request, following the ``after`` cursor.

        Raises:
            UnsupportedCursorError: If a page carries a non-string cursor.
        """
        request = template.copy()
        results: List[Any] = []
        while True:
            page = Page.from_payload(self.executor.execute(request), key)
            results.extend(page.items)
            if not page.has_next:
                break
            if not isinstance(page.after, str):
                raise UnsupportedCursorError(page.after)
            request.set_after(page.after)

        logger.debug(f"Fetched {len(results)} items from {template.path}")
        return [parse_item(item) for item in results] if parse_item else results
