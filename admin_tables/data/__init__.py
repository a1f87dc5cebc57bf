"""Entities, data backends and the query cache."""

from .backend import AdminBackend, InMemoryBackend
from .models import Account, PagedData, Role
from .queries import QueryClient, query_key

__all__ = [
    "Account",
    "Role",
    "PagedData",
    "AdminBackend",
    "InMemoryBackend",
    "QueryClient",
    "query_key",
]
