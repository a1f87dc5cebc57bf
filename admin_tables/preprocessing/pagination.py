"""Pagination controllers for locally sliced and externally paged tables."""

import logging
import math
from abc import ABC, abstractmethod
from dataclasses import dataclass, replace
from typing import Any, Callable, List, Optional, Sequence, Tuple

from ..core.state import ClientPageState, PageState, ServerPageState

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class PageInfo:
    """Pagination affordances of the current view."""

    page_index: int
    page_size: int
    total_pages: int
    total_rows: int
    can_previous_page: bool
    can_next_page: bool


class PaginationController(ABC):
    """
    Slices the filtered and sorted rows for display.

    A table is built with exactly one controller; switching between client
    and server pagination at runtime is not possible.

    Attributes:
        page_size: Number of rows per page
        delegates_search: True when search text is forwarded to the data
            source instead of filtering locally
    """

    mode: str = ""
    delegates_search: bool = False

    def __init__(self, page_size: int = 10):
        if page_size < 1:
            raise ValueError(f"page_size must be >= 1, got {page_size}")
        self.page_size = page_size

    @abstractmethod
    def initial_state(self) -> PageState:
        pass

    @abstractmethod
    def paginate(self, rows: Sequence[Any], state: PageState) -> Tuple[List[Any], PageInfo]:
        """
        Return the visible slice and pagination info for `rows`.

        Args:
            rows: Filtered and sorted rows known locally
            state: Current pagination state

        Returns:
            Tuple of (visible rows, PageInfo)
        """
        pass

    @abstractmethod
    def next_page(self, state: PageState, total_pages: int) -> PageState:
        pass

    @abstractmethod
    def previous_page(self, state: PageState) -> PageState:
        pass

    @abstractmethod
    def search(self, state: PageState, text: str) -> PageState:
        """Handle a change of search text."""
        pass

    def reset(self, state: PageState) -> PageState:
        """Return to the first page after the rows, sort or filter changed."""
        return state

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}(page_size={self.page_size})"


class ClientPaginationController(PaginationController):
    """Pages computed locally from the fully materialized row set."""

    mode = "client"

    def initial_state(self) -> ClientPageState:
        return ClientPageState(page_index=1, page_size=self.page_size)

    def total_pages(self, row_count: int) -> int:
        return math.ceil(row_count / self.page_size)

    def paginate(
        self, rows: Sequence[Any], state: PageState
    ) -> Tuple[List[Any], PageInfo]:
        total_pages = self.total_pages(len(rows))
        # A page index past the end (rows shrank) shows the last page
        page_index = min(max(1, state.page_index), max(1, total_pages))
        start = (page_index - 1) * self.page_size
        visible = list(rows[start : start + self.page_size])
        info = PageInfo(
            page_index=page_index,
            page_size=self.page_size,
            total_pages=total_pages,
            total_rows=len(rows),
            can_previous_page=page_index > 1,
            can_next_page=page_index < total_pages,
        )
        return visible, info

    def next_page(self, state: PageState, total_pages: int) -> ClientPageState:
        last = max(1, total_pages)
        return replace(state, page_index=min(last, state.page_index + 1))

    def previous_page(self, state: PageState) -> ClientPageState:
        return replace(state, page_index=max(1, state.page_index - 1))

    def search(self, state: PageState, text: str) -> ClientPageState:
        return self.reset(state)

    def reset(self, state: PageState) -> ClientPageState:
        return replace(state, page_index=1)


class ServerPaginationController(PaginationController):
    """
    Pages owned by an external data source.

    The rows handed to the table are already the current page. The page
    index and total are supplied through sync(); navigation and search are
    forwarded to the callbacks, which are expected to fetch the requested
    page and sync it back.

    Sorting or filtering applied by the table in this mode only reorders or
    reduces the delivered page; it never reaches across pages.
    """

    mode = "server"
    delegates_search = True

    def __init__(
        self,
        page_size: int = 10,
        on_page_change: Optional[Callable[[int], None]] = None,
        on_search_change: Optional[Callable[[str], None]] = None,
    ):
        """
        Initialize the controller.

        Args:
            page_size: Rows per page as served by the data source
            on_page_change: Called with the requested 1-based page index
            on_search_change: Called with the new search text
        """
        super().__init__(page_size)
        self._on_page_change = on_page_change
        self._on_search_change = on_search_change

    def initial_state(self) -> ServerPageState:
        return ServerPageState(page_index=1, page_size=self.page_size, total_pages=1)

    def sync(self, state: PageState, page_index: int, total_pages: Optional[int]) -> ServerPageState:
        """
        Install the page index and total reported by the data source.

        A missing or zero total counts as one page; the index is clamped
        into [1, total_pages].
        """
        total = max(1, int(total_pages or 1))
        page = min(max(1, int(page_index)), total)
        return ServerPageState(page_index=page, page_size=self.page_size, total_pages=total)

    def paginate(
        self, rows: Sequence[Any], state: PageState
    ) -> Tuple[List[Any], PageInfo]:
        info = PageInfo(
            page_index=state.page_index,
            page_size=self.page_size,
            total_pages=state.total_pages,
            total_rows=len(rows),
            can_previous_page=state.page_index > 1,
            can_next_page=state.page_index < state.total_pages,
        )
        return list(rows), info

    def _request_page(self, page: int) -> None:
        logger.debug("Requesting page %d", page)
        if self._on_page_change is not None:
            self._on_page_change(page)

    def next_page(self, state: PageState, total_pages: int) -> ServerPageState:
        self._request_page(min(state.total_pages, state.page_index + 1))
        return state

    def previous_page(self, state: PageState) -> ServerPageState:
        self._request_page(max(1, state.page_index - 1))
        return state

    def search(self, state: PageState, text: str) -> ServerPageState:
        if self._on_search_change is not None:
            self._on_search_change(text)
        self._request_page(1)
        return state
