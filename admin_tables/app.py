"""Streamlit entry point: `streamlit run admin_tables/app.py`."""

import streamlit as st

from admin_tables.components.accounts import AccountsScreen
from admin_tables.components.roles import RolesScreen
from admin_tables.config import Settings, configure_logging
from admin_tables.data.backend import InMemoryBackend
from admin_tables.data.queries import QueryClient
from admin_tables.rendering.bridge import (
    get_session_object,
    render_delete_dialog,
    render_feedback,
    render_rename_dialog,
)


def make_backend(settings: Settings) -> InMemoryBackend:
    if settings.seed_path:
        return InMemoryBackend.from_json(
            settings.seed_path, roles_page_size=settings.roles_page_size
        )
    return InMemoryBackend(roles_page_size=settings.roles_page_size)


def main() -> None:
    settings = Settings.from_env()
    configure_logging(settings.log_level)

    backend = get_session_object("backend", lambda: make_backend(settings))
    queries = get_session_object("queries", QueryClient)
    accounts = get_session_object(
        "accounts", lambda: AccountsScreen(backend, queries, settings)
    )
    roles = get_session_object("roles", lambda: RolesScreen(backend, queries, settings))

    users_tab, roles_tab = st.tabs(["Users", "Roles"])

    with users_tab:
        render_feedback(accounts)
        accounts.refresh()
        accounts.table(key="users", search_placeholder="Search by name...")
        render_delete_dialog(accounts, key="users")

    with roles_tab:
        render_feedback(roles)
        roles.refresh()
        roles.table(key="roles", search_placeholder="Search roles...")
        render_rename_dialog(roles, key="roles")


if __name__ == "__main__":
    main()
