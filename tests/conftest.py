"""Pytest configuration and shared fixtures for admin-tables tests."""

from typing import Any, Dict, List
from unittest.mock import patch

import pytest

from admin_tables.data.backend import InMemoryBackend
from admin_tables.data.models import Account, Role


class MockSessionState(dict):
    """Mock Streamlit session_state that behaves like a dict."""
    pass


@pytest.fixture
def mock_streamlit():
    """
    Mock Streamlit's session_state for testing the rendering bridge.

    This fixture patches st.session_state to allow testing session objects
    without running a full Streamlit server.
    """
    mock_session_state = MockSessionState()

    with patch('streamlit.session_state', mock_session_state):
        yield mock_session_state


@pytest.fixture
def sample_roles() -> List[Role]:
    """Three roles, one of them the default."""
    return [
        Role(
            id="r1",
            name="Admin",
            description="Full access",
            created_at="2024-01-05T10:00:00Z",
        ),
        Role(
            id="r2",
            name="Editor",
            description=None,
            is_default=True,
            created_at="2023-06-01T08:30:00Z",
        ),
        Role(
            id="r3",
            name="Viewer",
            description="Read only",
            created_at="2024-03-20T00:00:00+02:00",
        ),
    ]


@pytest.fixture
def sample_accounts() -> List[Account]:
    """Accounts referencing known roles, plus one with a dangling role id."""
    return [
        Account(id="u1", first="Ada", last="Lovelace", role_id="r1", created_at="2024-01-05T00:00:00Z"),
        Account(id="u2", first="Bob", last="Smith", role_id="r2", created_at="2023-11-12T09:15:00Z"),
        Account(id="u3", first="Carol", last="Jones", role_id="r9", created_at=None),
        Account(id="u4", first="alice", last="Wong", role_id="r2", created_at="2024-02-29T12:00:00Z"),
    ]


@pytest.fixture
def backend(sample_accounts, sample_roles) -> InMemoryBackend:
    return InMemoryBackend(sample_accounts, sample_roles, roles_page_size=10)


@pytest.fixture
def many_roles_payload() -> Dict[str, Any]:
    """Wire payload with 25 roles named role-00 .. role-24."""
    return {
        "users": [],
        "roles": [
            {
                "id": f"r{i}",
                "name": f"role-{i:02d}",
                "description": None,
                "isDefault": i == 0,
                "createdAt": f"2024-01-{(i % 28) + 1:02d}T00:00:00Z",
            }
            for i in range(25)
        ],
    }
