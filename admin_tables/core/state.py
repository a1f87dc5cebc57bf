"""View state for a table instance and the store that owns it."""

import logging
from dataclasses import dataclass, field, replace
from typing import Any, Callable, Generic, List, Optional, Tuple, TypeVar, Union

logger = logging.getLogger(__name__)

ASC = "asc"
DESC = "desc"


@dataclass(frozen=True)
class SortKey:
    """The single active sort: a column id and a direction."""

    column_id: str
    direction: str = ASC

    def __post_init__(self) -> None:
        if self.direction not in (ASC, DESC):
            raise ValueError(f"Sort direction must be 'asc' or 'desc', got '{self.direction}'")


@dataclass(frozen=True)
class ColumnFilterValue:
    column_id: str
    value: str


@dataclass(frozen=True)
class GlobalTextState:
    """One free-text query tested against every cell of a row."""

    value: str = ""

    @property
    def text(self) -> str:
        return self.value


@dataclass(frozen=True)
class PerColumnState:
    """The same query installed on each designated column."""

    entries: Tuple[ColumnFilterValue, ...] = ()

    @property
    def text(self) -> str:
        return self.entries[0].value if self.entries else ""


FilterState = Union[GlobalTextState, PerColumnState]


@dataclass(frozen=True)
class ClientPageState:
    page_index: int = 1
    page_size: int = 10


@dataclass(frozen=True)
class ServerPageState:
    page_index: int = 1
    page_size: int = 10
    total_pages: int = 1


PageState = Union[ClientPageState, ServerPageState]


@dataclass(frozen=True)
class ViewState:
    """
    Current sort, filter and pagination state of a table.

    Instances are immutable; transitions return a new ViewState.
    """

    pagination: PageState = field(default_factory=ClientPageState)
    sort: Optional[SortKey] = None
    filter: FilterState = field(default_factory=GlobalTextState)

    def with_sort(self, sort: Optional[SortKey]) -> "ViewState":
        return replace(self, sort=sort)

    def with_filter(self, filter_state: FilterState) -> "ViewState":
        return replace(self, filter=filter_state)

    def with_pagination(self, pagination: PageState) -> "ViewState":
        return replace(self, pagination=pagination)


Transition = Callable[[ViewState], ViewState]
S = TypeVar("S")
Listener = Callable[[Any], None]


class ViewStateStore(Generic[S]):
    """
    Single authority for a table's view state.

    Features:
        - Pure transitions: mutate() takes a function ViewState -> ViewState
        - Synchronous derivation: every change recomputes the full snapshot
          before listeners are notified and before mutate() returns
        - Version counter incremented on every change

    The `derive` callable turns a ViewState into the published snapshot
    (for tables, the filtered, sorted and paginated view).
    """

    def __init__(self, initial: ViewState, derive: Callable[[ViewState], S]):
        """
        Initialize the store and compute the first snapshot.

        Args:
            initial: Starting view state
            derive: Pure function computing the snapshot from a ViewState
        """
        self._state = initial
        self._derive = derive
        self._listeners: List[Listener] = []
        self._version = 0
        self._snapshot: S = derive(initial)

    @property
    def version(self) -> int:
        """Number of changes applied since creation."""
        return self._version

    @property
    def snapshot(self) -> S:
        """The most recently derived snapshot."""
        return self._snapshot

    def get_state(self) -> ViewState:
        return self._state

    def mutate(self, transition: Transition) -> S:
        """
        Apply a transition and recompute the snapshot.

        Args:
            transition: Function returning the next ViewState

        Returns:
            The newly derived snapshot
        """
        next_state = transition(self._state)
        if not isinstance(next_state, ViewState):
            raise TypeError(
                f"Transition must return a ViewState, got {type(next_state).__name__}"
            )
        self._state = next_state
        return self.refresh()

    def refresh(self) -> S:
        """
        Recompute the snapshot from the current state.

        Call this when the source data changed but the view state did not.
        """
        self._snapshot = self._derive(self._state)
        self._version += 1
        logger.debug("View state v%d: %s", self._version, self._state)
        for listener in list(self._listeners):
            listener(self._snapshot)
        return self._snapshot

    def subscribe(self, listener: Listener) -> Callable[[], None]:
        """
        Register a listener called with each new snapshot.

        Returns:
            A function that removes the listener
        """
        self._listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    def __repr__(self) -> str:
        return (
            f"ViewStateStore(version={self._version}, "
            f"state={self._state}, "
            f"listeners={len(self._listeners)})"
        )
