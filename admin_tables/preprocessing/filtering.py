"""Row filtering utilities for text search over table columns."""

import logging
from abc import ABC, abstractmethod
from typing import Any, Iterable, List, Sequence

import polars as pl

from ..core.columns import ColumnDefinition, ColumnSet
from ..core.state import (
    ColumnFilterValue,
    FilterState,
    GlobalTextState,
    PerColumnState,
)

logger = logging.getLogger(__name__)


def global_text_mask(
    rows: Sequence[Any],
    columns: Iterable[ColumnDefinition],
    query: str,
) -> List[bool]:
    """
    Compute which rows contain the query in at least one cell.

    Cell values are stringified through each column's search_text() and
    compared case-insensitively. Cells without a value never match.

    Args:
        rows: Rows to test
        columns: Columns whose cells are searched
        query: Substring to look for

    Returns:
        One boolean per row, in row order
    """
    texts = {
        f"cell_{position}": [column.search_text(row) for row in rows]
        for position, column in enumerate(columns)
    }
    if not texts:
        return [False] * len(rows)

    frame = pl.DataFrame(texts, schema={name: pl.Utf8 for name in texts})
    needle = query.lower()
    # Null cells yield null in the horizontal any; fill_null turns those into no-match
    mask = frame.select(
        pl.any_horizontal(
            [
                pl.col(name).str.to_lowercase().str.contains(needle, literal=True)
                for name in texts
            ]
        )
        .fill_null(False)
        .alias("match")
    )["match"]
    return mask.to_list()


def filter_global_text(
    rows: Sequence[Any],
    columns: Iterable[ColumnDefinition],
    query: str,
) -> List[Any]:
    """Keep rows where any cell contains the query. Empty query keeps all rows."""
    if not query:
        return list(rows)
    mask = global_text_mask(rows, columns, query)
    return [row for row, keep in zip(rows, mask) if keep]


def filter_per_column(
    rows: Sequence[Any],
    columns: ColumnSet,
    entries: Sequence[ColumnFilterValue],
) -> List[Any]:
    """
    Keep rows matching every installed column filter.

    Entries with an empty value match every row. Entries naming a column
    that does not exist in the table are skipped.

    Args:
        rows: Rows to filter
        columns: Columns of the table
        entries: Installed (column id, value) filters

    Returns:
        Matching rows in their original order
    """
    active = []
    for entry in entries:
        column = columns.get(entry.column_id)
        if column is None:
            logger.warning(
                "Skipping filter for unknown column '%s' (available: %s)",
                entry.column_id,
                columns.ids,
            )
            continue
        if entry.value:
            active.append((column, entry.value))

    if not active:
        return list(rows)
    return [
        row for row in rows if all(column.matches(row, value) for column, value in active)
    ]


def apply_filter(
    rows: Sequence[Any],
    state: FilterState,
    columns: ColumnSet,
) -> List[Any]:
    """Filter rows according to the installed filter state."""
    if isinstance(state, GlobalTextState):
        return filter_global_text(rows, columns, state.value)
    if isinstance(state, PerColumnState):
        return filter_per_column(rows, columns, state.entries)
    raise TypeError(f"Unsupported filter state: {type(state).__name__}")


class FilterPolicy(ABC):
    """
    How a table turns the search input into filter state.

    Chosen once at table construction and never switched afterwards.
    """

    @abstractmethod
    def initial_state(self) -> FilterState:
        pass

    @abstractmethod
    def install(self, query: str) -> FilterState:
        """Return the filter state for a new search input value."""
        pass

    def apply(self, rows: Sequence[Any], state: FilterState, columns: ColumnSet) -> List[Any]:
        return apply_filter(rows, state, columns)


class GlobalTextFilter(FilterPolicy):
    """A single query tested against every visible cell of a row."""

    def initial_state(self) -> GlobalTextState:
        return GlobalTextState("")

    def install(self, query: str) -> GlobalTextState:
        return GlobalTextState(query)

    def __repr__(self) -> str:
        return "GlobalTextFilter()"


class PerColumnFilter(FilterPolicy):
    """
    The same query broadcast to a fixed list of filterable columns.

    Every listed column receives the identical value; a row must match all
    of them.
    """

    def __init__(self, column_ids: Sequence[str]):
        self.column_ids = tuple(column_ids)

    def initial_state(self) -> PerColumnState:
        return PerColumnState(())

    def install(self, query: str) -> PerColumnState:
        return PerColumnState(
            tuple(ColumnFilterValue(column_id, query) for column_id in self.column_ids)
        )

    def __repr__(self) -> str:
        return f"PerColumnFilter(column_ids={list(self.column_ids)})"
