"""Table engine deriving the visible rows from source rows and view state."""

import logging
from dataclasses import dataclass
from typing import Any, Callable, List, Optional, Sequence, Tuple, Union

import pandas as pd

from ..core.columns import ActionColumn, ColumnDefinition, ColumnSet
from ..core.state import GlobalTextState, SortKey, ViewState, ViewStateStore
from ..preprocessing.filtering import FilterPolicy
from ..preprocessing.pagination import (
    ClientPaginationController,
    PageInfo,
    PaginationController,
    ServerPaginationController,
)
from ..preprocessing.sorting import next_sort, sort_indicator, sort_rows

logger = logging.getLogger(__name__)

NO_RESULTS = "No results."

BODY_ERROR = "error"
BODY_LOADING = "loading"
BODY_EMPTY = "empty"
BODY_ROWS = "rows"


@dataclass(frozen=True)
class HeaderState:
    column_id: str
    label: str
    sortable: bool
    indicator: Optional[str] = None


@dataclass(frozen=True)
class TableBody:
    """
    What the renderer must draw in the table body.

    - error: an error panel with `message`; no rows at all
    - loading: exactly `placeholder_rows` placeholder rows
    - empty: one row reading "No results." spanning `column_span` columns
    - rows: the visible rows
    """

    kind: str
    rows: Tuple[Any, ...] = ()
    placeholder_rows: int = 0
    message: Optional[str] = None
    column_span: int = 0


@dataclass(frozen=True)
class TableView:
    """Snapshot of a table published after every state change."""

    rows: Tuple[Any, ...]
    headers: Tuple[HeaderState, ...]
    page: PageInfo
    body: TableBody
    is_loading: bool = False
    error: Optional[Exception] = None
    filter_text: str = ""
    sort: Optional[SortKey] = None

    @property
    def can_previous_page(self) -> bool:
        return self.page.can_previous_page

    @property
    def can_next_page(self) -> bool:
        return self.page.can_next_page


def error_message(error: Exception) -> str:
    return getattr(error, "message", None) or str(error)


class DataTable:
    """
    Sortable, filterable, paginated view over a list of rows.

    The table owns a ViewStateStore; every operation is a synchronous
    state transition that recomputes the full pipeline before returning:

    - Client pagination: Filter -> Sort -> Paginate over all rows
    - Server pagination: the rows are the page delivered by the data
      source; search text and page navigation are forwarded to it, and
      any local sort or filter only acts on that page

    Example:
        table = DataTable(
            columns=[
                TextColumn("name", accessor=lambda row: row["name"], header="Name"),
            ],
            filter_policy=GlobalTextFilter(),
            page_size=10,
        )
        table.set_rows(rows)
        table.set_filter_text("ali")
        view = table.view
    """

    def __init__(
        self,
        columns: Union[ColumnSet, Sequence[ColumnDefinition]],
        filter_policy: Optional[FilterPolicy] = None,
        pagination: Optional[PaginationController] = None,
        page_size: int = 10,
    ):
        """
        Initialize the table.

        Args:
            columns: Column definitions, ids unique within the table.
            filter_policy: GlobalTextFilter or PerColumnFilter. None disables
                local filtering (search text is still recorded, and
                forwarded in server mode).
            pagination: Pagination controller. Defaults to client-side
                pagination with `page_size` rows per page.
            page_size: Page size for the default client controller.
        """
        self._columns = columns if isinstance(columns, ColumnSet) else ColumnSet(columns)
        self._filter_policy = filter_policy
        self._pagination = pagination or ClientPaginationController(page_size)
        self._source: List[Any] = []
        self._is_loading = False
        self._error: Optional[Exception] = None

        filter_state = (
            filter_policy.initial_state() if filter_policy is not None else GlobalTextState("")
        )
        initial = ViewState(pagination=self._pagination.initial_state(), filter=filter_state)
        self._store: ViewStateStore[TableView] = ViewStateStore(initial, self._derive)

    @property
    def columns(self) -> ColumnSet:
        return self._columns

    @property
    def mode(self) -> str:
        return self._pagination.mode

    @property
    def page_size(self) -> int:
        return self._pagination.page_size

    @property
    def state(self) -> ViewState:
        return self._store.get_state()

    @property
    def view(self) -> TableView:
        return self._store.snapshot

    def subscribe(self, listener: Callable[[TableView], None]) -> Callable[[], None]:
        """Register a listener called with every new TableView."""
        return self._store.subscribe(listener)

    # ------------------------------------------------------------------
    # Derivation
    # ------------------------------------------------------------------

    def _ordered_rows(self, state: ViewState) -> List[Any]:
        rows = self._source
        if self._filter_policy is not None:
            rows = self._filter_policy.apply(rows, state.filter, self._columns)
        return sort_rows(rows, state.sort, self._columns)

    def _derive(self, state: ViewState) -> TableView:
        ordered = self._ordered_rows(state)
        visible, page = self._pagination.paginate(ordered, state.pagination)

        headers = tuple(
            HeaderState(
                column_id=column.id,
                label=column.header_label(),
                sortable=column.sortable,
                indicator=sort_indicator(state.sort, column),
            )
            for column in self._columns
        )

        if self._error is not None:
            body = TableBody(BODY_ERROR, message=error_message(self._error))
        elif self._is_loading:
            body = TableBody(BODY_LOADING, placeholder_rows=self.page_size)
        elif not visible:
            body = TableBody(BODY_EMPTY, message=NO_RESULTS, column_span=len(self._columns))
        else:
            body = TableBody(BODY_ROWS, rows=tuple(visible))

        logger.debug(
            "Derived %d of %d rows (page %d/%d)",
            len(visible),
            len(self._source),
            page.page_index,
            page.total_pages,
        )
        return TableView(
            rows=tuple(visible),
            headers=headers,
            page=page,
            body=body,
            is_loading=self._is_loading,
            error=self._error,
            filter_text=state.filter.text,
            sort=state.sort,
        )

    # ------------------------------------------------------------------
    # Source data and status
    # ------------------------------------------------------------------

    def set_rows(self, rows: Sequence[Any]) -> TableView:
        """
        Replace the source rows and recompute the view.

        In client mode the page index returns to 1 when the rows change.
        """
        rows = list(rows)
        if rows == self._source:
            return self.view
        self._source = rows
        return self._store.mutate(
            lambda state: state.with_pagination(self._pagination.reset(state.pagination))
        )

    def set_status(self, is_loading: bool, error: Optional[Exception] = None) -> TableView:
        """Set the loading flag and error value reported by the data source."""
        if is_loading == self._is_loading and error is self._error:
            return self.view
        self._is_loading = is_loading
        self._error = error
        return self._store.refresh()

    def set_loading(self, is_loading: bool) -> TableView:
        return self.set_status(is_loading, self._error)

    def set_error(self, error: Optional[Exception]) -> TableView:
        return self.set_status(self._is_loading, error)

    # ------------------------------------------------------------------
    # View state transitions
    # ------------------------------------------------------------------

    def toggle_sort(self, column_id: str) -> TableView:
        """
        Handle a header interaction on `column_id`.

        Unknown and non-sortable columns leave the state untouched.
        """
        column = self._columns.get(column_id)
        if column is None or not column.sortable:
            return self.view

        def transition(state: ViewState) -> ViewState:
            return state.with_sort(next_sort(state.sort, column)).with_pagination(
                self._pagination.reset(state.pagination)
            )

        return self._store.mutate(transition)

    def set_filter_text(self, text: str) -> TableView:
        """
        Handle a change of the search input.

        Client mode installs the filter and returns to page 1. Server mode
        records the text and forwards it to the data source, which is
        asked for page 1.
        """
        filter_state = (
            self._filter_policy.install(text)
            if self._filter_policy is not None
            else GlobalTextState(text)
        )
        if not self._pagination.delegates_search:
            return self._store.mutate(
                lambda state: state.with_filter(filter_state).with_pagination(
                    self._pagination.search(state.pagination, text)
                )
            )

        self._store.mutate(lambda state: state.with_filter(filter_state))
        self._pagination.search(self.state.pagination, text)
        return self.view

    def next_page(self) -> TableView:
        state = self.state
        requested = self._pagination.next_page(state.pagination, self.view.page.total_pages)
        return self._apply_page(state, requested)

    def previous_page(self) -> TableView:
        state = self.state
        requested = self._pagination.previous_page(state.pagination)
        return self._apply_page(state, requested)

    def _apply_page(self, before: ViewState, requested: Any) -> TableView:
        # Server controllers return the state unchanged; the data source
        # syncs the new page back through sync_page()
        if requested == before.pagination:
            return self.view
        return self._store.mutate(lambda state: state.with_pagination(requested))

    def sync_page(self, page_index: int, total_pages: Optional[int]) -> TableView:
        """
        Install the page index and total pages reported by the data source.

        Raises:
            TypeError: If the table does not use server pagination
        """
        if not isinstance(self._pagination, ServerPaginationController):
            raise TypeError("sync_page() requires a ServerPaginationController")
        state = self.state
        synced = self._pagination.sync(state.pagination, page_index, total_pages)
        if synced == state.pagination:
            return self.view
        return self._store.mutate(lambda current: current.with_pagination(synced))

    # ------------------------------------------------------------------
    # Export and rendering
    # ------------------------------------------------------------------

    def export_frame(self) -> pd.DataFrame:
        """
        Get the filtered and sorted rows known locally as a DataFrame.

        Action columns are left out; cells hold the rendered text.

        Returns:
            pandas DataFrame with one column per header label
        """
        columns = [column for column in self._columns if not isinstance(column, ActionColumn)]
        records = [
            {column.header_label() or column.id: column.render(row) for column in columns}
            for row in self._ordered_rows(self.state)
        ]
        return pd.DataFrame(
            records, columns=[column.header_label() or column.id for column in columns]
        )

    def __call__(self, key: str, search_placeholder: str = "Search...") -> TableView:
        """
        Render the table in Streamlit.

        Args:
            key: Unique key for the Streamlit widgets of this table
            search_placeholder: Placeholder text of the search input

        Returns:
            The TableView after handling this run's interactions
        """
        from ..rendering.bridge import render_table

        return render_table(self, key=key, search_placeholder=search_placeholder)

    def __repr__(self) -> str:
        return (
            f"{self.__class__.__name__}("
            f"columns={self._columns.ids}, "
            f"filter_policy={self._filter_policy}, "
            f"pagination={self._pagination})"
        )
