"""Accounts screen: client-paged table of accounts with their roles."""

from typing import Callable, List, Optional

from ..config import Settings
from ..core.columns import ColumnDefinition, make_column
from ..data.backend import AdminBackend
from ..data.models import Account, PagedData, Role
from ..data.queries import QueryClient, query_key
from ..preprocessing.filtering import PerColumnFilter
from ..preprocessing.rows import AccountRow, build_account_rows
from .screen import BaseScreen
from .table import DataTable, TableView

ACCOUNTS = "users"
ROLES = "roles"


def render_user(row: AccountRow) -> str:
    account = row.account
    initial = account.first[:1].upper() or "?"
    return f"({initial}) {account.full_name}"


def account_columns(on_delete: Callable[[AccountRow], None]) -> List[ColumnDefinition]:
    """
    Columns of the accounts table.

    Args:
        on_delete: Called with the row whose "Delete user" action was chosen
    """
    return [
        make_column(
            "composite",
            column_id="user",
            fields=[lambda row: row.account.first, lambda row: row.account.last],
            header="User",
            renderer=render_user,
        ),
        make_column("text", column_id="role", accessor=lambda row: row.role, header="Role"),
        make_column("date", column_id="joined", accessor=lambda row: row.joined, header="Joined"),
        make_column("action", column_id="actions", actions=[("Delete user", on_delete)]),
    ]


class AccountsScreen(BaseScreen):
    """
    Accounts listed locally with client pagination.

    Search text filters the "user" column (full name). The role column
    resolves each account's role id against every known role.

    Example:
        screen = AccountsScreen(backend)
        view = screen.refresh()
        screen.table.set_filter_text("ada")
    """

    kind = ACCOUNTS

    def __init__(
        self,
        backend: AdminBackend,
        queries: Optional[QueryClient] = None,
        settings: Optional[Settings] = None,
    ):
        super().__init__(backend, queries, settings)
        self._table = DataTable(
            account_columns(on_delete=self.request_delete),
            filter_policy=PerColumnFilter(["user"]),
            page_size=self._settings.page_size,
        )
        self._accounts: Optional[PagedData[Account]] = None
        self._roles: Optional[PagedData[Role]] = None

    @property
    def table(self) -> DataTable:
        return self._table

    def refresh(self) -> TableView:
        accounts = self._queries.fetch(query_key(ACCOUNTS), self._backend.fetch_accounts)
        roles = self._queries.fetch(
            query_key(ROLES), lambda: self._backend.fetch_roles(page=None)
        )

        if accounts.is_success and roles.is_success:
            # Rebuild rows only when a fetched collection actually changed
            if accounts.data is not self._accounts or roles.data is not self._roles:
                self._accounts, self._roles = accounts.data, roles.data
                self._table.set_rows(
                    build_account_rows(
                        accounts.data.data,
                        roles.data.data,
                        self._settings.unknown_role_label,
                    )
                )

        return self._table.set_status(
            is_loading=accounts.is_loading or roles.is_loading,
            error=accounts.error or roles.error,
        )

    def request_delete(self, row: AccountRow) -> None:
        self.open_dialog(row.account)

    def confirm_delete(self) -> bool:
        """
        Delete the selected account.

        Returns:
            True if the account was deleted
        """
        account = self.selected
        if account is None:
            return False
        return self._run_mutation(
            lambda: self._backend.delete_account(account.id),
            action=f"delete user {account.id}",
            fallback_message="Failed to delete user",
            success_notice="User deleted successfully",
        )
