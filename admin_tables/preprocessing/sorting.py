"""Single-key sorting with tri-state header cycling."""

from functools import cmp_to_key
from typing import Any, List, Optional, Sequence

from ..core.columns import ColumnDefinition, ColumnSet
from ..core.state import ASC, DESC, SortKey


def next_sort(current: Optional[SortKey], column: ColumnDefinition) -> Optional[SortKey]:
    """
    Compute the sort key after a header interaction on `column`.

    Each column cycles unsorted -> asc -> desc -> unsorted. Activating a
    column other than the active one starts that column at asc and drops
    the previous key. Non-sortable columns leave the sort unchanged.

    Args:
        current: Active sort key, or None when unsorted
        column: The column whose header was activated

    Returns:
        The next sort key, or None when the column returns to unsorted
    """
    if not column.sortable:
        return current
    if current is None or current.column_id != column.id:
        return SortKey(column.id, ASC)
    if current.direction == ASC:
        return SortKey(column.id, DESC)
    return None


def sort_rows(
    rows: Sequence[Any],
    sort: Optional[SortKey],
    columns: ColumnSet,
) -> List[Any]:
    """
    Order rows by the active sort key.

    Sorting is stable: rows comparing equal keep their input order in both
    directions. Descending negates the comparator instead of reversing the
    result so that ties are not flipped.

    Args:
        rows: Rows to order (post-filter order)
        sort: Active sort key, or None
        columns: Columns of the table

    Returns:
        New list of rows; the input is never modified
    """
    if sort is None:
        return list(rows)
    column = columns.get(sort.column_id)
    if column is None or not column.sortable:
        return list(rows)

    sign = -1 if sort.direction == DESC else 1

    def _compare(a: Any, b: Any) -> int:
        return sign * column.compare(a, b)

    return sorted(rows, key=cmp_to_key(_compare))


def sort_indicator(sort: Optional[SortKey], column: ColumnDefinition) -> Optional[str]:
    """Return 'asc' or 'desc' for the sorted column, None otherwise."""
    if not column.sortable or sort is None or sort.column_id != column.id:
        return None
    return sort.direction
