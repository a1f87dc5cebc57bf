"""Roles screen: server-paged, server-searched table of roles."""

from dataclasses import dataclass
from typing import Any, Callable, Dict, List, Optional

from ..config import Settings
from ..core.columns import ColumnDefinition, compare_text, make_column
from ..core.errors import ValidationError
from ..data.backend import AdminBackend
from ..data.models import PagedData, Role
from ..data.queries import QueryClient, QueryKey, query_key
from ..preprocessing.pagination import ServerPaginationController
from ..preprocessing.rows import RoleRow, build_role_rows
from .screen import BaseScreen
from .table import DataTable, TableView

ROLES = "roles"


def render_role(row: RoleRow) -> str:
    role = row.role
    text = f"{role.name} [Default]" if role.is_default else role.name
    if role.description:
        text = f"{text}: {role.description}"
    return text


def role_columns(on_rename: Callable[[RoleRow], None]) -> List[ColumnDefinition]:
    """
    Columns of the roles table.

    The role column matches on "name description" but sorts by name only.

    Args:
        on_rename: Called with the row whose "Rename role" action was chosen
    """
    return [
        make_column(
            "composite",
            column_id="role",
            fields=[lambda row: row.role.name, lambda row: row.role.description],
            header="Role",
            sort_fn=lambda a, b: compare_text(a.role.name, b.role.name),
            renderer=render_role,
        ),
        make_column("date", column_id="created", accessor=lambda row: row.created, header="Created"),
        make_column("action", column_id="actions", actions=[("Rename role", on_rename)]),
    ]


@dataclass
class RenameRoleForm:
    """Rename dialog fields, prefilled from the selected role."""

    role: Role
    name: str = ""
    description: str = ""
    error: Optional[str] = None

    @classmethod
    def for_role(cls, role: Role) -> "RenameRoleForm":
        return cls(role=role, name=role.name, description=role.description or "")

    def to_patch(self) -> Dict[str, Any]:
        """
        Validate the fields and build the update payload.

        Raises:
            ValidationError: If the name is empty after trimming
        """
        name = self.name.strip()
        if not name:
            raise ValidationError("Name is required")
        return {"name": name, "description": self.description.strip() or None}


class RolesScreen(BaseScreen):
    """
    Roles paged and searched by the backend.

    The query identity is ("roles", page, search). Changing the search text
    always returns to page 1. Sorting only reorders the current page.
    """

    kind = ROLES

    def __init__(
        self,
        backend: AdminBackend,
        queries: Optional[QueryClient] = None,
        settings: Optional[Settings] = None,
    ):
        super().__init__(backend, queries, settings)
        self.current_page = 1
        self.search_query = ""
        self.form: Optional[RenameRoleForm] = None
        self._roles: Optional[PagedData[Role]] = None
        self._table = DataTable(
            role_columns(on_rename=self.request_rename),
            pagination=ServerPaginationController(
                page_size=self._settings.roles_page_size,
                on_page_change=self.set_page,
                on_search_change=self.set_search,
            ),
        )

    @property
    def table(self) -> DataTable:
        return self._table

    @property
    def current_query(self) -> QueryKey:
        return query_key(ROLES, self.current_page, self.search_query)

    def refresh(self) -> TableView:
        page, search = self.current_page, self.search_query
        result = self._queries.fetch(
            self.current_query,
            lambda: self._backend.fetch_roles(page=page, search=search),
        )

        if result.is_success:
            total_pages = max(1, result.data.pages)
            if self.current_page > total_pages:
                # The collection shrank below the current page
                self.current_page = total_pages
                return self.refresh()
            if result.data is not self._roles:
                self._roles = result.data
                self._table.set_rows(build_role_rows(result.data.data))
            self._table.sync_page(self.current_page, total_pages)

        return self._table.set_status(result.is_loading, result.error)

    def set_page(self, page: int) -> TableView:
        self.current_page = max(1, page)
        return self.refresh()

    def set_search(self, text: str) -> TableView:
        self.search_query = text
        self.current_page = 1
        return self.refresh()

    def request_rename(self, row: RoleRow) -> None:
        self.form = RenameRoleForm.for_role(row.role)
        self.open_dialog(row.role)

    def close_dialog(self) -> None:
        super().close_dialog()
        self.form = None

    def submit_rename(self, name: str, description: str = "") -> bool:
        """
        Validate the rename form and send the update.

        An empty name keeps the dialog open with a validation message and
        sends nothing.

        Returns:
            True if the role was renamed
        """
        role = self.selected
        if role is None or self.form is None:
            return False
        self.form.name = name
        self.form.description = description
        try:
            patch = self.form.to_patch()
        except ValidationError as exc:
            self.form.error = exc.message
            return False

        return self._run_mutation(
            lambda: self._backend.update_role(role.id, patch),
            action=f"rename role {role.id}",
            fallback_message="Failed to rename role",
            success_notice="Role renamed successfully",
        )
