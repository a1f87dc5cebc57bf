"""Column definitions and the default orderings used by the sort engine."""

from abc import ABC
from datetime import datetime
from types import MappingProxyType
from typing import (
    Any,
    Callable,
    Dict,
    Iterator,
    List,
    Optional,
    Sequence,
    Tuple,
    Union,
)

Accessor = Callable[[Any], Any]
Comparator = Callable[[Any, Any], int]
Predicate = Callable[[Any, str], bool]
Renderer = Callable[[Any], str]
Header = Union[str, Callable[[], str]]
RowAction = Tuple[str, Callable[[Any], None]]


def _sign(value: float) -> int:
    return (value > 0) - (value < 0)


def _compare_missing(a: Any, b: Any) -> Optional[int]:
    """Order missing values after present ones. Returns None if both present."""
    if a is None and b is None:
        return 0
    if a is None:
        return 1
    if b is None:
        return -1
    return None


def compare_values(a: Any, b: Any) -> int:
    """Generic relational ordering."""
    missing = _compare_missing(a, b)
    if missing is not None:
        return missing
    if a < b:
        return -1
    if a > b:
        return 1
    return 0


def compare_text(a: Any, b: Any) -> int:
    """
    Order text case-insensitively, breaking ties by code point.

    Non-string values are stringified before comparison.
    """
    missing = _compare_missing(a, b)
    if missing is not None:
        return missing
    a, b = str(a), str(b)
    folded = compare_values(a.casefold(), b.casefold())
    if folded:
        return folded
    return compare_values(a, b)


def compare_dates(a: Optional[datetime], b: Optional[datetime]) -> int:
    """Order timestamps by the difference of their epoch values."""
    missing = _compare_missing(a, b)
    if missing is not None:
        return missing
    return _sign(a.timestamp() - b.timestamp())


def format_date(value: Optional[datetime]) -> str:
    """Format a timestamp as e.g. 'Jan 5, 2024'."""
    if value is None:
        return ""
    return f"{value:%b} {value.day}, {value.year}"


class ColumnDefinition(ABC):
    """
    Declared behavior for one table column.

    A column exposes a small capability interface used by the table engine:
    - render: display text for a row
    - compare: ordering of two rows (three-way, -1/0/1)
    - matches: whether a row matches a filter query
    - search_text: the stringified cell value seen by the global filter

    Subclasses pick the default ordering for their value type. A declared
    `sort_fn` or `filter_fn` always takes precedence over the defaults.

    Attributes:
        id: Column identifier, unique within a table
        sortable: Whether header interactions may sort by this column
        kind: Name of the column kind (one of COLUMN_KINDS)
    """

    kind: str = ""

    def __init__(
        self,
        column_id: str,
        accessor: Optional[Accessor] = None,
        header: Header = "",
        sort_fn: Optional[Comparator] = None,
        filter_fn: Optional[Predicate] = None,
        sortable: bool = True,
        renderer: Optional[Renderer] = None,
    ):
        """
        Initialize the column.

        Args:
            column_id: Identifier, unique within a table.
            accessor: Function returning the cell value for a row.
            header: Header label, or a callable returning the label.
            sort_fn: Optional comparator taking two rows.
            filter_fn: Optional predicate taking a row and the query string.
            sortable: Whether the column participates in sorting.
            renderer: Optional function returning the display text for a row.
        """
        if not column_id:
            raise ValueError("Column id must not be empty")
        self.id = column_id
        self._accessor = accessor
        self._header = header
        self._sort_fn = sort_fn
        self._filter_fn = filter_fn
        self._renderer = renderer
        self.sortable = sortable

    def value(self, row: Any) -> Any:
        """Return the raw cell value for a row."""
        if self._accessor is None:
            return None
        return self._accessor(row)

    def header_label(self) -> str:
        if callable(self._header):
            return self._header()
        return self._header

    def search_text(self, row: Any) -> Optional[str]:
        """Return the stringified cell value, or None when there is no value."""
        value = self.value(row)
        if value is None:
            return None
        return str(value)

    def render(self, row: Any) -> str:
        if self._renderer is not None:
            return self._renderer(row)
        return self.search_text(row) or ""

    def compare(self, a: Any, b: Any) -> int:
        if self._sort_fn is not None:
            return _sign(self._sort_fn(a, b))
        return self._default_compare(self.value(a), self.value(b))

    def matches(self, row: Any, query: str) -> bool:
        if self._filter_fn is not None:
            return bool(self._filter_fn(row, query))
        text = self.search_text(row)
        if text is None:
            return False
        return query.lower() in text.lower()

    def _default_compare(self, a: Any, b: Any) -> int:
        return compare_values(a, b)

    def __repr__(self) -> str:
        return (
            f"{self.__class__.__name__}("
            f"id='{self.id}', "
            f"header='{self.header_label()}', "
            f"sortable={self.sortable})"
        )


class TextColumn(ColumnDefinition):
    """Plain text column ordered case-insensitively."""

    kind = "text"

    def _default_compare(self, a: Any, b: Any) -> int:
        return compare_text(a, b)


class DateColumn(ColumnDefinition):
    """Timestamp column, ordered by epoch value and rendered as a short date."""

    kind = "date"

    def search_text(self, row: Any) -> Optional[str]:
        value = self.value(row)
        if value is None:
            return None
        return format_date(value)

    def _default_compare(self, a: Any, b: Any) -> int:
        return compare_dates(a, b)


class CompositeColumn(ColumnDefinition):
    """
    Column whose value joins several fields of a row.

    The joined text drives the default ordering and matching, e.g. a user
    column joining first and last name so "ada lov" matches "Ada Lovelace".
    """

    kind = "composite"

    def __init__(
        self,
        column_id: str,
        fields: Sequence[Accessor] = (),
        separator: str = " ",
        header: Header = "",
        sort_fn: Optional[Comparator] = None,
        filter_fn: Optional[Predicate] = None,
        sortable: bool = True,
        renderer: Optional[Renderer] = None,
    ):
        if not fields:
            raise ValueError(f"Composite column '{column_id}' needs at least one field")
        self._fields = list(fields)
        self._separator = separator
        super().__init__(
            column_id,
            accessor=self._join,
            header=header,
            sort_fn=sort_fn,
            filter_fn=filter_fn,
            sortable=sortable,
            renderer=renderer,
        )

    def _join(self, row: Any) -> Optional[str]:
        parts = [field(row) for field in self._fields]
        parts = [str(part) for part in parts if part not in (None, "")]
        if not parts:
            return None
        return self._separator.join(parts)

    def _default_compare(self, a: Any, b: Any) -> int:
        return compare_text(a, b)


class ActionColumn(ColumnDefinition):
    """
    Column of row actions (e.g. rename, delete).

    Action columns carry no value, never sort and never match a filter.
    """

    kind = "action"

    def __init__(
        self,
        column_id: str = "actions",
        actions: Sequence[RowAction] = (),
        header: Header = "",
        **kwargs: Any,
    ):
        # An action column is never sortable, whatever the caller asks for
        kwargs.pop("sortable", None)
        super().__init__(column_id, accessor=None, header=header, sortable=False, **kwargs)
        self._actions: Dict[str, Callable[[Any], None]] = dict(actions)

    @property
    def action_labels(self) -> List[str]:
        return list(self._actions.keys())

    def render(self, row: Any) -> str:
        return " | ".join(self._actions.keys())

    def matches(self, row: Any, query: str) -> bool:
        return False

    def run(self, label: str, row: Any) -> None:
        """
        Invoke the action registered under `label` for a row.

        Raises:
            KeyError: If no action has that label
        """
        if label not in self._actions:
            raise KeyError(
                f"Column '{self.id}' has no action '{label}'. "
                f"Available actions: {self.action_labels}"
            )
        self._actions[label](row)


# The fixed set of column kinds; read-only so no kind can be added at runtime
COLUMN_KINDS = MappingProxyType(
    {
        column_class.kind: column_class
        for column_class in (TextColumn, DateColumn, CompositeColumn, ActionColumn)
    }
)


def make_column(kind: str, **options: Any) -> ColumnDefinition:
    """
    Create a column of one of the COLUMN_KINDS.

    Args:
        kind: 'text', 'date', 'composite' or 'action'
        **options: Keyword arguments for the column class

    Raises:
        KeyError: If `kind` is not one of COLUMN_KINDS
    """
    if kind not in COLUMN_KINDS:
        raise KeyError(f"Unknown column kind '{kind}'. Expected one of {list(COLUMN_KINDS)}")
    return COLUMN_KINDS[kind](**options)


class ColumnSet:
    """Ordered columns of one table, with unique ids."""

    def __init__(self, columns: Sequence[ColumnDefinition]):
        seen = set()
        for column in columns:
            if column.id in seen:
                raise ValueError(f"Duplicate column id '{column.id}'")
            seen.add(column.id)
        self._columns = list(columns)
        self._by_id = {column.id: column for column in self._columns}

    def __iter__(self) -> Iterator[ColumnDefinition]:
        return iter(self._columns)

    def __len__(self) -> int:
        return len(self._columns)

    def __contains__(self, column_id: object) -> bool:
        return column_id in self._by_id

    @property
    def ids(self) -> List[str]:
        return [column.id for column in self._columns]

    def get(self, column_id: str) -> Optional[ColumnDefinition]:
        return self._by_id.get(column_id)

    def is_sortable(self, column_id: str) -> bool:
        column = self._by_id.get(column_id)
        return column is not None and column.sortable

    def __repr__(self) -> str:
        return f"ColumnSet(ids={self.ids})"
