"""
Admin Tables - Sortable, filterable, paginated admin tables for Streamlit.

This package provides a reusable table engine (columns, filtering, sorting,
client and server pagination over a single view state store) and the
accounts and roles screens built on it.
"""

from .components.accounts import AccountsScreen
from .components.roles import RolesScreen
from .components.table import DataTable, TableView
from .config import Settings, configure_logging
from .core.columns import COLUMN_KINDS, ColumnDefinition, ColumnSet, make_column
from .core.errors import (
    AdminTablesError,
    BackendError,
    FetchError,
    MutationError,
    ValidationError,
)
from .core.state import ViewState, ViewStateStore
from .data.backend import AdminBackend, InMemoryBackend
from .data.queries import QueryClient
from .preprocessing.filtering import GlobalTextFilter, PerColumnFilter
from .preprocessing.pagination import (
    ClientPaginationController,
    ServerPaginationController,
)

__version__ = "0.1.0"

__all__ = [
    # Core
    "ColumnDefinition",
    "ColumnSet",
    "ViewState",
    "ViewStateStore",
    "COLUMN_KINDS",
    "make_column",
    # Errors
    "AdminTablesError",
    "BackendError",
    "FetchError",
    "MutationError",
    "ValidationError",
    # Table engine
    "DataTable",
    "TableView",
    "GlobalTextFilter",
    "PerColumnFilter",
    "ClientPaginationController",
    "ServerPaginationController",
    # Data
    "AdminBackend",
    "InMemoryBackend",
    "QueryClient",
    # Screens
    "AccountsScreen",
    "RolesScreen",
    # Utilities
    "Settings",
    "configure_logging",
]
