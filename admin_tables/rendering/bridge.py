"""Bridge between tables/screens and the Streamlit page."""

from typing import TYPE_CHECKING, Any, Callable, Dict, TypeVar

import streamlit as st

from ..components.table import BODY_EMPTY, BODY_ERROR, BODY_LOADING, TableView
from ..core.columns import ActionColumn

if TYPE_CHECKING:
    from ..components.accounts import AccountsScreen
    from ..components.roles import RolesScreen
    from ..components.screen import BaseScreen
    from ..components.table import DataTable

T = TypeVar("T")

# Session state key for per-session objects (backend, query cache, screens)
# Screens hold view state, so they must survive Streamlit reruns
_SESSION_OBJECTS_KEY = "_admin_tables_objects"

_SORT_ARROWS = {"asc": " ▲", "desc": " ▼"}
_PLACEHOLDER_CELL = "░░░░░░"


def _get_session_objects() -> Dict[str, Any]:
    """Get the per-session object store from session state."""
    if _SESSION_OBJECTS_KEY not in st.session_state:
        st.session_state[_SESSION_OBJECTS_KEY] = {}
    return st.session_state[_SESSION_OBJECTS_KEY]


def get_session_object(key: str, factory: Callable[[], T]) -> T:
    """
    Get an object stored for this browser session, creating it on first use.

    Args:
        key: Name of the object within the session
        factory: Zero-argument callable creating the object

    Returns:
        The stored object
    """
    objects = _get_session_objects()
    if key not in objects:
        objects[key] = factory()
    return objects[key]


def clear_session_objects() -> None:
    """
    Forget every per-session object.

    The next run recreates screens with fresh view state.
    """
    if _SESSION_OBJECTS_KEY in st.session_state:
        st.session_state[_SESSION_OBJECTS_KEY].clear()


def _render_headers(table: "DataTable", view: TableView, key: str) -> None:
    cells = st.columns(len(view.headers))
    for cell, header in zip(cells, view.headers):
        if not header.sortable:
            cell.markdown(f"**{header.label}**")
            continue
        label = f"{header.label}{_SORT_ARROWS.get(header.indicator, '')}"
        if cell.button(label, key=f"{key}_sort_{header.column_id}"):
            table.toggle_sort(header.column_id)
            st.rerun()


def _render_rows(table: "DataTable", view: TableView, key: str) -> None:
    for position, row in enumerate(view.body.rows):
        cells = st.columns(len(view.headers))
        for cell, column in zip(cells, table.columns):
            if not isinstance(column, ActionColumn):
                cell.write(column.render(row))
                continue
            for label in column.action_labels:
                button_key = f"{key}_{column.id}_{label}_{view.page.page_index}_{position}"
                if cell.button(label, key=button_key):
                    column.run(label, row)
                    st.rerun()


def _render_pagination(table: "DataTable", view: TableView, key: str) -> None:
    info, previous_cell, next_cell = st.columns([6, 1, 1])
    info.caption(f"Page {view.page.page_index} of {max(1, view.page.total_pages)}")
    if previous_cell.button(
        "Previous", key=f"{key}_previous", disabled=not view.can_previous_page
    ):
        table.previous_page()
        st.rerun()
    if next_cell.button("Next", key=f"{key}_next", disabled=not view.can_next_page):
        table.next_page()
        st.rerun()


def render_table(
    table: "DataTable",
    key: str,
    search_placeholder: str = "Search...",
) -> TableView:
    """
    Render a table in Streamlit.

    This function:
    1. Shows only an error panel when the data source failed
    2. Applies the search input to the table's filter state
    3. Draws sortable headers with their sort indicator
    4. Draws placeholder rows while loading, "No results." when empty,
       otherwise the visible rows with their row actions
    5. Draws Previous/Next buttons and a CSV download

    Args:
        table: The table to render
        key: Unique widget key prefix for this table
        search_placeholder: Placeholder of the search input

    Returns:
        The TableView after applying this run's search input
    """
    view = table.view
    if view.body.kind == BODY_ERROR:
        st.error("Error loading data")
        st.caption(view.body.message)
        return view

    search = st.text_input(
        "Search",
        value=view.filter_text,
        placeholder=search_placeholder,
        key=f"{key}_search",
        label_visibility="collapsed",
    )
    if search != view.filter_text:
        view = table.set_filter_text(search)

    _render_headers(table, view, key)

    if view.body.kind == BODY_LOADING:
        for _ in range(view.body.placeholder_rows):
            for cell in st.columns(len(view.headers)):
                cell.markdown(_PLACEHOLDER_CELL)
    elif view.body.kind == BODY_EMPTY:
        st.markdown(view.body.message)
    else:
        _render_rows(table, view, key)

    _render_pagination(table, view, key)

    st.download_button(
        "Download CSV",
        data=table.export_frame().to_csv(index=False),
        file_name=f"{key}.csv",
        mime="text/csv",
        key=f"{key}_download",
    )
    return view


def render_feedback(screen: "BaseScreen") -> None:
    """Show the inline mutation alert and any one-shot success notice."""
    if screen.alert_message:
        st.error(f"Error: {screen.alert_message}")
    notice = screen.pop_notice()
    if notice:
        st.toast(notice)


def render_delete_dialog(screen: "AccountsScreen", key: str) -> None:
    """Confirmation panel for deleting the selected account."""
    account = screen.selected
    if not screen.dialog_open or account is None:
        return
    st.subheader("Delete user")
    st.write(
        f"Are you sure? The user **{account.full_name}** will be permanently deleted."
    )
    cancel_cell, confirm_cell = st.columns(2)
    if cancel_cell.button("Cancel", key=f"{key}_delete_cancel"):
        screen.close_dialog()
        st.rerun()
    if confirm_cell.button("Delete user", key=f"{key}_delete_confirm", type="primary"):
        screen.confirm_delete()
        st.rerun()


def render_rename_dialog(screen: "RolesScreen", key: str) -> None:
    """Form for renaming the selected role."""
    form = screen.form
    if not screen.dialog_open or form is None:
        return
    st.subheader("Rename role")
    st.write(f"Update the name and description for the role **{form.role.name}**.")
    with st.form(key=f"{key}_rename_form"):
        name = st.text_input("Name", value=form.name, placeholder="Enter role name")
        description = st.text_input(
            "Description", value=form.description, placeholder="Enter role description"
        )
        if form.error:
            st.warning(form.error)
        submitted = st.form_submit_button("Save changes")
        cancelled = st.form_submit_button("Cancel")
    if cancelled:
        screen.close_dialog()
        st.rerun()
    elif submitted:
        screen.submit_rename(name, description)
        st.rerun()
