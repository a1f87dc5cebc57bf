"""Tests for the DataTable engine: filter, sort, paginate and body states."""

from unittest.mock import Mock

import pandas as pd
import pytest

from admin_tables.components.table import (
    BODY_EMPTY,
    BODY_ERROR,
    BODY_LOADING,
    BODY_ROWS,
    NO_RESULTS,
    DataTable,
)
from admin_tables.core.columns import ActionColumn, TextColumn
from admin_tables.core.errors import FetchError
from admin_tables.core.state import ASC, DESC, SortKey
from admin_tables.preprocessing.filtering import GlobalTextFilter, PerColumnFilter
from admin_tables.preprocessing.pagination import ServerPaginationController


def name_columns():
    return [
        TextColumn("name", accessor=lambda row: row["name"], header="Name"),
        ActionColumn(actions=[("Delete", lambda row: None)]),
    ]


@pytest.fixture
def numbered_rows():
    return [{"id": i, "name": f"row {i:02d}"} for i in range(1, 26)]


@pytest.fixture
def client_table(numbered_rows) -> DataTable:
    table = DataTable(name_columns(), filter_policy=GlobalTextFilter(), page_size=10)
    table.set_rows(numbered_rows)
    return table


def visible_ids(view):
    return [row["id"] for row in view.rows]


class TestClientPaging:
    """Tests for client pagination through the table."""

    def test_pages_through_rows(self, client_table):
        """25 rows, page size 10: 10, 10, then 5 rows."""
        view = client_table.view
        assert view.page.total_pages == 3
        assert visible_ids(view) == list(range(1, 11))

        view = client_table.next_page()
        assert visible_ids(view) == list(range(11, 21))

        view = client_table.next_page()
        assert visible_ids(view) == list(range(21, 26))
        assert not view.can_next_page
        assert view.can_previous_page

    def test_next_on_last_page_is_noop(self, client_table):
        client_table.next_page()
        client_table.next_page()
        version = client_table._store.version
        view = client_table.next_page()
        assert view.page.page_index == 3
        assert client_table._store.version == version

    def test_previous_page(self, client_table):
        client_table.next_page()
        view = client_table.previous_page()
        assert view.page.page_index == 1
        assert not view.can_previous_page

    def test_filter_resets_to_first_page(self, client_table):
        client_table.next_page()
        view = client_table.set_filter_text("row 2")
        assert view.page.page_index == 1
        assert visible_ids(view) == [20, 21, 22, 23, 24, 25]
        assert view.filter_text == "row 2"

    def test_sort_resets_to_first_page(self, client_table):
        client_table.next_page()
        view = client_table.toggle_sort("name")
        view = client_table.toggle_sort("name")
        assert view.sort == SortKey("name", DESC)
        assert view.page.page_index == 1
        assert visible_ids(view)[0] == 25

    def test_new_rows_reset_to_first_page(self, client_table, numbered_rows):
        client_table.next_page()
        view = client_table.set_rows(numbered_rows[:15])
        assert view.page.page_index == 1
        assert view.page.total_pages == 2

    def test_same_rows_do_not_recompute(self, client_table, numbered_rows):
        version = client_table._store.version
        client_table.set_rows(list(numbered_rows))
        assert client_table._store.version == version


class TestFiltering:
    def test_global_filter(self):
        """Query "ali" keeps Alice; an empty query restores both rows in order."""
        table = DataTable(
            [TextColumn("name", accessor=lambda row: row["name"])],
            filter_policy=GlobalTextFilter(),
        )
        rows = [{"name": "Alice"}, {"name": "Bob"}]
        table.set_rows(rows)

        assert list(table.set_filter_text("ali").rows) == [{"name": "Alice"}]
        assert list(table.set_filter_text("").rows) == rows

    def test_per_column_filter_only_checks_listed_columns(self):
        table = DataTable(
            [
                TextColumn("name", accessor=lambda row: row["name"]),
                TextColumn("role", accessor=lambda row: row["role"]),
            ],
            filter_policy=PerColumnFilter(["name"]),
        )
        table.set_rows([{"name": "Ada", "role": "Bob"}, {"name": "Bob", "role": "Ada"}])
        view = table.set_filter_text("ada")
        assert list(view.rows) == [{"name": "Ada", "role": "Bob"}]

    def test_no_policy_keeps_rows(self):
        table = DataTable([TextColumn("name", accessor=lambda row: row["name"])])
        table.set_rows([{"name": "Ada"}, {"name": "Bob"}])
        view = table.set_filter_text("zzz")
        assert len(view.rows) == 2
        assert view.filter_text == "zzz"


class TestSorting:
    def test_header_state(self, client_table):
        view = client_table.toggle_sort("name")
        name_header, action_header = view.headers
        assert name_header.label == "Name"
        assert name_header.indicator == ASC
        assert name_header.sortable
        assert not action_header.sortable
        assert action_header.indicator is None

    def test_tri_state_restores_source_order(self, numbered_rows):
        table = DataTable(name_columns(), page_size=100)
        shuffled = list(reversed(numbered_rows))
        table.set_rows(shuffled)
        for _ in range(3):
            view = table.toggle_sort("name")
        assert view.sort is None
        assert list(view.rows) == shuffled

    def test_unsortable_and_unknown_columns_ignored(self, client_table):
        version = client_table._store.version
        client_table.toggle_sort("actions")
        client_table.toggle_sort("missing")
        assert client_table.state.sort is None
        assert client_table._store.version == version


class TestBodyStates:
    """Tests for the mutually exclusive body states."""

    def test_rows_body(self, client_table):
        body = client_table.view.body
        assert body.kind == BODY_ROWS
        assert len(body.rows) == 10

    def test_empty_body(self, client_table):
        body = client_table.set_filter_text("nothing matches").body
        assert body.kind == BODY_EMPTY
        assert body.message == NO_RESULTS
        assert body.column_span == 2

    def test_loading_body_has_page_size_placeholders(self, client_table):
        body = client_table.set_loading(True).body
        assert body.kind == BODY_LOADING
        assert body.placeholder_rows == 10
        assert body.rows == ()

    def test_error_takes_precedence_over_loading(self, client_table):
        client_table.set_loading(True)
        view = client_table.set_error(FetchError("Failed to fetch users"))
        assert view.body.kind == BODY_ERROR
        assert view.body.message == "Failed to fetch users"
        assert view.body.rows == ()

    def test_clearing_status_restores_rows(self, client_table):
        client_table.set_status(True, FetchError("boom"))
        assert client_table.set_status(False, None).body.kind == BODY_ROWS

    def test_unchanged_status_does_not_recompute(self, client_table):
        version = client_table._store.version
        client_table.set_status(False, None)
        assert client_table._store.version == version


class TestServerMode:
    """Tests for a table whose pages come from the data source."""

    @pytest.fixture
    def callbacks(self):
        return Mock(), Mock()

    @pytest.fixture
    def server_table(self, callbacks) -> DataTable:
        on_page_change, on_search_change = callbacks
        table = DataTable(
            name_columns(),
            pagination=ServerPaginationController(
                page_size=10,
                on_page_change=on_page_change,
                on_search_change=on_search_change,
            ),
        )
        table.set_rows([{"id": 1, "name": "b"}, {"id": 2, "name": "a"}])
        table.sync_page(2, 3)
        return table

    def test_rows_are_not_sliced(self, server_table):
        view = server_table.view
        assert len(view.rows) == 2
        assert view.page.page_index == 2
        assert view.page.total_pages == 3
        assert server_table.mode == "server"

    def test_navigation_is_forwarded(self, server_table, callbacks):
        on_page_change, _ = callbacks
        view = server_table.next_page()
        on_page_change.assert_called_once_with(3)
        # The page index only moves once the data source syncs it back
        assert view.page.page_index == 2

    def test_search_is_forwarded(self, server_table, callbacks):
        on_page_change, on_search_change = callbacks
        view = server_table.set_filter_text("adm")
        on_search_change.assert_called_once_with("adm")
        on_page_change.assert_called_once_with(1)
        assert view.filter_text == "adm"
        assert len(view.rows) == 2

    def test_sort_only_reorders_current_page(self, server_table):
        view = server_table.toggle_sort("name")
        assert visible_ids(view) == [2, 1]
        assert view.page.page_index == 2

    def test_sync_unchanged_does_not_recompute(self, server_table):
        version = server_table._store.version
        server_table.sync_page(2, 3)
        assert server_table._store.version == version

    def test_sync_page_requires_server_mode(self, client_table):
        with pytest.raises(TypeError, match="ServerPaginationController"):
            client_table.sync_page(1, 1)


class TestSubscribeAndExport:
    def test_subscribers_receive_views(self, client_table):
        seen = []
        unsubscribe = client_table.subscribe(seen.append)
        client_table.next_page()
        unsubscribe()
        client_table.next_page()
        assert len(seen) == 1
        assert seen[0].page.page_index == 2

    def test_export_frame(self, client_table):
        client_table.set_filter_text("row 0")
        client_table.toggle_sort("name")
        client_table.toggle_sort("name")

        frame = client_table.export_frame()

        assert isinstance(frame, pd.DataFrame)
        assert list(frame.columns) == ["Name"]
        assert frame["Name"].tolist() == [f"row {i:02d}" for i in range(9, 0, -1)]

    def test_export_empty(self):
        table = DataTable(name_columns())
        frame = table.export_frame()
        assert frame.empty
        assert list(frame.columns) == ["Name"]
