"""Row building, filtering, sorting and pagination."""

from .filtering import (
    GlobalTextFilter,
    PerColumnFilter,
    apply_filter,
    filter_global_text,
    filter_per_column,
)
from .pagination import ClientPaginationController, ServerPaginationController
from .rows import build_account_rows, build_role_rows, normalize_timestamps
from .sorting import next_sort, sort_rows

__all__ = [
    "apply_filter",
    "filter_global_text",
    "filter_per_column",
    "GlobalTextFilter",
    "PerColumnFilter",
    "next_sort",
    "sort_rows",
    "ClientPaginationController",
    "ServerPaginationController",
    "build_account_rows",
    "build_role_rows",
    "normalize_timestamps",
]
