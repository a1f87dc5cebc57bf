"""Base class for admin screens built around one DataTable."""

import logging
from abc import ABC, abstractmethod
from typing import Any, Callable, Optional

from ..config import Settings
from ..core.errors import BackendError, MutationError
from ..data.backend import AdminBackend
from ..data.queries import QueryClient
from .table import DataTable, TableView

logger = logging.getLogger(__name__)


class BaseScreen(ABC):
    """
    Abstract base class for the accounts and roles screens.

    A screen connects a DataTable to the data backend: it fetches through a
    shared QueryClient, rebuilds rows when the fetched collection changes,
    and runs mutations started from row actions.

    Mutation outcome handling is the same for every screen:
    - success: the entity kind is invalidated and refetched, the dialog
      closes, the selection and alert clear, and a notice is published
    - failure: the alert carries the server message, the dialog closes and
      the selection clears so the user starts over deliberately

    Attributes:
        selected: Entity the open dialog acts on, if any
        dialog_open: Whether the action dialog is shown
        alert: Last MutationError, shown inline until the next success
        notice: One-shot success message
        kind: Entity kind used in query identities
    """

    kind: str = ""

    def __init__(
        self,
        backend: AdminBackend,
        queries: Optional[QueryClient] = None,
        settings: Optional[Settings] = None,
    ):
        self._backend = backend
        self._queries = queries if queries is not None else QueryClient()
        self._settings = settings if settings is not None else Settings()
        self.selected: Any = None
        self.dialog_open = False
        self.alert: Optional[MutationError] = None
        self.notice: Optional[str] = None

    @property
    @abstractmethod
    def table(self) -> DataTable:
        pass

    @abstractmethod
    def refresh(self) -> TableView:
        """Fetch (or reuse cached) data and update the table."""
        pass

    @property
    def alert_message(self) -> Optional[str]:
        return self.alert.message if self.alert is not None else None

    def open_dialog(self, item: Any) -> None:
        self.selected = item
        self.dialog_open = True

    def close_dialog(self) -> None:
        self.dialog_open = False
        self.selected = None

    def pop_notice(self) -> Optional[str]:
        """Return the queued success notice once, then forget it."""
        notice, self.notice = self.notice, None
        return notice

    def _run_mutation(
        self,
        operation: Callable[[], Any],
        action: str,
        fallback_message: str,
        success_notice: str,
    ) -> bool:
        """
        Run a mutation and apply the shared outcome handling.

        Args:
            operation: Zero-argument callable performing the request
            action: Short description for logging (e.g. 'rename role')
            fallback_message: Alert text when the backend gives no message
            success_notice: Notice published on success

        Returns:
            True if the mutation succeeded
        """
        try:
            operation()
        except BackendError as exc:
            self.alert = MutationError(exc.message or fallback_message)
            logger.info("Failed to %s: %s", action, self.alert.message)
            self.close_dialog()
            return False

        logger.info("Completed %s", action)
        self._queries.invalidate(self.kind)
        self.close_dialog()
        self.alert = None
        self.notice = success_notice
        self.refresh()
        return True

    def __repr__(self) -> str:
        return (
            f"{self.__class__.__name__}("
            f"dialog_open={self.dialog_open}, "
            f"selected={self.selected!r}, "
            f"alert={self.alert_message!r})"
        )
