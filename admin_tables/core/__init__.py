"""Core infrastructure for admin_tables."""

from .columns import (
    COLUMN_KINDS,
    ActionColumn,
    ColumnDefinition,
    ColumnSet,
    CompositeColumn,
    DateColumn,
    TextColumn,
    make_column,
)
from .errors import AdminTablesError, BackendError, FetchError, MutationError, ValidationError
from .state import ViewState, ViewStateStore

__all__ = [
    "ColumnDefinition",
    "ColumnSet",
    "TextColumn",
    "DateColumn",
    "CompositeColumn",
    "ActionColumn",
    "ViewState",
    "ViewStateStore",
    "COLUMN_KINDS",
    "make_column",
    "AdminTablesError",
    "BackendError",
    "FetchError",
    "MutationError",
    "ValidationError",
]
