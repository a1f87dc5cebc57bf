"""Tests for client and server pagination controllers."""

from unittest.mock import Mock

import pytest

from admin_tables.core.state import ClientPageState, ServerPageState
from admin_tables.preprocessing.pagination import (
    ClientPaginationController,
    ServerPaginationController,
)


class TestClientPagination:
    """Tests for locally sliced pages."""

    def test_page_size_must_be_positive(self):
        with pytest.raises(ValueError, match="page_size must be >= 1"):
            ClientPaginationController(page_size=0)

    def test_slices_pages(self):
        """25 rows at 10 per page: pages of 10, 10 and 5."""
        controller = ClientPaginationController(page_size=10)
        rows = list(range(25))

        visible, info = controller.paginate(rows, ClientPageState(1, 10))
        assert visible == list(range(10))
        assert info.total_pages == 3
        assert info.total_rows == 25
        assert not info.can_previous_page
        assert info.can_next_page

        visible, info = controller.paginate(rows, ClientPageState(3, 10))
        assert visible == list(range(20, 25))
        assert info.can_previous_page
        assert not info.can_next_page

    def test_pages_cover_rows_exactly_once(self):
        controller = ClientPaginationController(page_size=7)
        rows = list(range(30))
        total = controller.total_pages(len(rows))
        seen = []
        for page in range(1, total + 1):
            visible, _ = controller.paginate(rows, ClientPageState(page, 7))
            seen.extend(visible)
        assert seen == rows

    def test_empty_rows(self):
        controller = ClientPaginationController(page_size=10)
        visible, info = controller.paginate([], controller.initial_state())
        assert visible == []
        assert info.total_pages == 0
        assert info.page_index == 1
        assert not info.can_previous_page
        assert not info.can_next_page

    def test_index_past_end_shows_last_page(self):
        controller = ClientPaginationController(page_size=10)
        visible, info = controller.paginate(list(range(12)), ClientPageState(5, 10))
        assert info.page_index == 2
        assert visible == [10, 11]

    def test_navigation_is_clamped(self):
        controller = ClientPaginationController(page_size=10)
        state = ClientPageState(3, 10)
        assert controller.next_page(state, total_pages=3) == state
        assert controller.previous_page(ClientPageState(1, 10)).page_index == 1
        assert controller.next_page(ClientPageState(1, 10), total_pages=3).page_index == 2

    def test_search_and_reset_return_to_first_page(self):
        controller = ClientPaginationController(page_size=10)
        state = ClientPageState(3, 10)
        assert controller.search(state, "ada").page_index == 1
        assert controller.reset(state).page_index == 1


class TestServerPagination:
    """Tests for externally paged data."""

    def test_paginate_passes_rows_through(self):
        controller = ServerPaginationController(page_size=10)
        state = ServerPageState(page_index=2, page_size=10, total_pages=3)
        visible, info = controller.paginate(["a", "b"], state)
        assert visible == ["a", "b"]
        assert info.page_index == 2
        assert info.total_pages == 3
        assert info.can_previous_page
        assert info.can_next_page

    @pytest.mark.parametrize(
        "page_index,total_pages,expected",
        [
            (1, 0, ServerPageState(1, 10, 1)),
            (1, None, ServerPageState(1, 10, 1)),
            (5, 3, ServerPageState(3, 10, 3)),
            (0, 3, ServerPageState(1, 10, 3)),
        ],
    )
    def test_sync_clamps(self, page_index, total_pages, expected):
        controller = ServerPaginationController(page_size=10)
        state = controller.initial_state()
        assert controller.sync(state, page_index, total_pages) == expected

    def test_next_requests_clamped_page(self):
        on_page_change = Mock()
        controller = ServerPaginationController(page_size=10, on_page_change=on_page_change)
        state = ServerPageState(page_index=3, page_size=10, total_pages=3)

        assert controller.next_page(state, total_pages=3) is state
        on_page_change.assert_called_once_with(3)

    def test_previous_requests_clamped_page(self):
        on_page_change = Mock()
        controller = ServerPaginationController(page_size=10, on_page_change=on_page_change)

        controller.previous_page(ServerPageState(page_index=1, page_size=10, total_pages=3))
        controller.previous_page(ServerPageState(page_index=3, page_size=10, total_pages=3))

        assert [c.args for c in on_page_change.call_args_list] == [(1,), (2,)]

    def test_search_forwards_text_then_requests_first_page(self):
        events = []
        controller = ServerPaginationController(
            page_size=10,
            on_page_change=lambda page: events.append(("page", page)),
            on_search_change=lambda text: events.append(("search", text)),
        )
        controller.search(ServerPageState(2, 10, 4), "adm")
        assert events == [("search", "adm"), ("page", 1)]

    def test_reset_keeps_state(self):
        controller = ServerPaginationController(page_size=10)
        state = ServerPageState(2, 10, 4)
        assert controller.reset(state) is state
