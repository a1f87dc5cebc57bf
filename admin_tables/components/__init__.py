"""Table engine and the admin screens built on it."""

from .accounts import AccountsScreen
from .roles import RolesScreen
from .table import DataTable

__all__ = [
    "DataTable",
    "AccountsScreen",
    "RolesScreen",
]
