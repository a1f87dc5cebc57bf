"""Data collaborator contract and an in-memory implementation."""

import json
import logging
import math
from dataclasses import replace
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Dict, List, Optional, Protocol, Sequence, Union

from ..core.errors import BackendError
from .models import Account, PagedData, Role

logger = logging.getLogger(__name__)


class AdminBackend(Protocol):
    """
    Operations the admin screens need from their data source.

    Every operation either returns its payload or raises BackendError with
    a message that is shown to the user verbatim.
    """

    def fetch_accounts(self) -> PagedData[Account]:
        ...

    def fetch_roles(self, page: Optional[int] = 1, search: str = "") -> PagedData[Role]:
        """Fetch one page of roles matching `search`; page=None fetches all."""
        ...

    def update_role(self, role_id: str, patch: Dict[str, Any]) -> Role:
        ...

    def delete_account(self, account_id: str) -> Account:
        ...


class InMemoryBackend:
    """
    Backend holding accounts and roles in memory.

    Roles are paged and searched on the "server" side, role names are
    unique (case-insensitive), and every failure raises BackendError.

    Example:
        backend = InMemoryBackend.from_json("seed.json", roles_page_size=10)
        page = backend.fetch_roles(page=2, search="admin")
    """

    def __init__(
        self,
        accounts: Sequence[Account] = (),
        roles: Sequence[Role] = (),
        roles_page_size: int = 10,
    ):
        if roles_page_size < 1:
            raise ValueError(f"roles_page_size must be >= 1, got {roles_page_size}")
        self._accounts: List[Account] = list(accounts)
        self._roles: List[Role] = list(roles)
        self.roles_page_size = roles_page_size

    @classmethod
    def from_dict(cls, payload: Dict[str, Any], roles_page_size: int = 10) -> "InMemoryBackend":
        """Build a backend from {'users': [...], 'roles': [...]} wire payloads."""
        return cls(
            accounts=[Account.from_dict(item) for item in payload.get("users", [])],
            roles=[Role.from_dict(item) for item in payload.get("roles", [])],
            roles_page_size=roles_page_size,
        )

    @classmethod
    def from_json(cls, path: Union[str, Path], roles_page_size: int = 10) -> "InMemoryBackend":
        with open(path, encoding="utf-8") as f:
            payload = json.load(f)
        logger.info("Loaded seed data from %s", path)
        return cls.from_dict(payload, roles_page_size=roles_page_size)

    def fetch_accounts(self) -> PagedData[Account]:
        return PagedData(data=list(self._accounts), pages=1)

    def fetch_roles(self, page: Optional[int] = 1, search: str = "") -> PagedData[Role]:
        needle = search.strip().lower()
        matches = [role for role in self._roles if needle in role.name.lower()]
        if page is None:
            return PagedData(data=matches, pages=1)
        if page < 1:
            raise BackendError(f"Invalid page {page}")
        pages = max(1, math.ceil(len(matches) / self.roles_page_size))
        start = (page - 1) * self.roles_page_size
        return PagedData(data=matches[start : start + self.roles_page_size], pages=pages)

    def update_role(self, role_id: str, patch: Dict[str, Any]) -> Role:
        position = self._find(self._roles, role_id)
        if position is None:
            raise BackendError("Role not found")
        current = self._roles[position]

        name = str(patch.get("name", current.name)).strip()
        if not name:
            raise BackendError("Name is required")
        for other in self._roles:
            if other.id != role_id and other.name.lower() == name.lower():
                raise BackendError("Name already exists")

        updated = replace(
            current,
            name=name,
            description=patch.get("description", current.description),
            updated_at=datetime.now(timezone.utc).isoformat(),
        )
        self._roles[position] = updated
        return updated

    def delete_account(self, account_id: str) -> Account:
        position = self._find(self._accounts, account_id)
        if position is None:
            raise BackendError("User not found")
        return self._accounts.pop(position)

    @staticmethod
    def _find(items: Sequence[Union[Account, Role]], item_id: str) -> Optional[int]:
        for position, item in enumerate(items):
            if item.id == item_id:
                return position
        return None

    def __repr__(self) -> str:
        return (
            f"InMemoryBackend(accounts={len(self._accounts)}, "
            f"roles={len(self._roles)}, "
            f"roles_page_size={self.roles_page_size})"
        )
