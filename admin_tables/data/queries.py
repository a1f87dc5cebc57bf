"""Query cache keyed by query identity, with per-identity deduplication."""

import logging
import threading
from dataclasses import dataclass
from typing import Any, Callable, Dict, Generic, Optional, Set, Tuple, TypeVar

from ..core.errors import BackendError, FetchError

logger = logging.getLogger(__name__)

T = TypeVar("T")
QueryKey = Tuple[Any, ...]

LOADING = "loading"
SUCCESS = "success"
ERROR = "error"


def query_key(kind: str, page: Optional[int] = None, search: str = "") -> QueryKey:
    """Build the identity of a query: (entity kind, page, search text)."""
    return (kind, page, search)


@dataclass(frozen=True)
class QueryResult(Generic[T]):
    """Loading, success or error state of one query."""

    status: str
    data: Optional[T] = None
    error: Optional[FetchError] = None

    @property
    def is_loading(self) -> bool:
        return self.status == LOADING

    @property
    def is_success(self) -> bool:
        return self.status == SUCCESS

    @property
    def is_error(self) -> bool:
        return self.status == ERROR


_LOADING_RESULT: QueryResult = QueryResult(LOADING)


@dataclass
class _Entry:
    result: QueryResult
    stale: bool = False


class QueryClient:
    """
    Caches fetched collections by query identity.

    Each identity has at most one cached entry and at most one request in
    flight. Invalidating an entity kind marks its entries stale; the next
    fetch for a stale identity calls the fetcher again.

    Backend failures are stored as error results carrying a FetchError;
    they are never raised to the caller. An error result is stored stale,
    so the next fetch for that identity tries again.

    Every access to the cache and the in-flight set holds the lock; the
    fetcher itself runs outside it.
    """

    def __init__(self):
        self._entries: Dict[QueryKey, _Entry] = {}
        self._in_flight: Set[QueryKey] = set()
        self._lock = threading.Lock()

    def get(self, key: QueryKey) -> QueryResult:
        """Return the cached result for `key`, or a loading result."""
        with self._lock:
            entry = self._entries.get(key)
        if entry is None:
            return _LOADING_RESULT
        return entry.result

    def is_stale(self, key: QueryKey) -> bool:
        with self._lock:
            entry = self._entries.get(key)
            return entry is None or entry.stale

    def fetch(self, key: QueryKey, fetcher: Callable[[], T]) -> QueryResult:
        """
        Return the result for `key`, calling `fetcher` if needed.

        Args:
            key: Query identity from query_key()
            fetcher: Zero-argument callable performing the request

        Returns:
            QueryResult with data or a FetchError
        """
        with self._lock:
            entry = self._entries.get(key)
            if entry is not None and not entry.stale:
                return entry.result
            if key in self._in_flight:
                return entry.result if entry is not None else _LOADING_RESULT
            self._in_flight.add(key)

        try:
            data = fetcher()
        except BackendError as exc:
            message = exc.message or f"Failed to fetch {key[0]}"
            logger.warning("Query %s failed: %s", key, message)
            result: QueryResult = QueryResult(ERROR, error=FetchError(message))
        else:
            result = QueryResult(SUCCESS, data=data)
        finally:
            with self._lock:
                self._in_flight.discard(key)

        with self._lock:
            self._entries[key] = _Entry(result, stale=result.is_error)
        return result

    def invalidate(self, kind: str) -> int:
        """
        Mark every cached query of an entity kind as stale.

        Returns:
            Number of entries marked stale
        """
        count = 0
        with self._lock:
            for key, entry in self._entries.items():
                if key and key[0] == kind:
                    entry.stale = True
                    count += 1
        logger.debug("Invalidated %d '%s' queries", count, kind)
        return count

    def clear(self) -> None:
        with self._lock:
            self._entries.clear()

    def __repr__(self) -> str:
        with self._lock:
            keys = list(self._entries.keys())
        return f"QueryClient(entries={keys})"
