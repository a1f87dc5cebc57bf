"""Row model builders joining entities into display rows."""

from dataclasses import dataclass
from datetime import datetime
from typing import Iterable, List, Optional, Sequence

import pandas as pd
import polars as pl

from ..data.models import Account, Role

UNKNOWN_ROLE = "Unknown Role"


@dataclass(frozen=True)
class AccountRow:
    """An account with its resolved role name and normalized join date."""

    account: Account
    role: str
    joined: Optional[datetime]


@dataclass(frozen=True)
class RoleRow:
    role: Role
    created: Optional[datetime]


def normalize_timestamps(values: Iterable[Optional[str]]) -> List[Optional[datetime]]:
    """
    Parse ISO 8601 timestamps into UTC datetimes.

    Unparseable or missing values become None.

    Args:
        values: Timestamp strings (or None)

    Returns:
        List of timezone-aware datetimes (or None), in input order
    """
    values = list(values)
    if not values:
        return []
    parsed = pd.to_datetime(
        pd.Series(values, dtype="object"), utc=True, errors="coerce", format="ISO8601"
    )
    return [None if pd.isna(value) else value.to_pydatetime() for value in parsed]


def resolve_role_names(
    accounts: Sequence[Account],
    roles: Sequence[Role],
    unknown_label: str = UNKNOWN_ROLE,
) -> List[str]:
    """
    Resolve each account's role id to a role name.

    Uses a left join so every account keeps its position. When role ids
    repeat, the first role wins. Accounts whose role is missing get
    `unknown_label`.

    Args:
        accounts: Accounts in display order
        roles: Known roles
        unknown_label: Label used when no role matches

    Returns:
        Role names aligned with `accounts`
    """
    account_frame = pl.DataFrame(
        {"role_id": [account.role_id for account in accounts]},
        schema={"role_id": pl.Utf8},
    ).with_row_index("position")
    role_frame = pl.DataFrame(
        {
            "id": [role.id for role in roles],
            "role_name": [role.name for role in roles],
        },
        schema={"id": pl.Utf8, "role_name": pl.Utf8},
    ).unique(subset="id", keep="first", maintain_order=True)

    joined = account_frame.join(
        role_frame, left_on="role_id", right_on="id", how="left"
    ).sort("position")
    return joined["role_name"].fill_null(unknown_label).to_list()


def build_account_rows(
    accounts: Sequence[Account],
    roles: Sequence[Role],
    unknown_label: str = UNKNOWN_ROLE,
) -> List[AccountRow]:
    """
    Build display rows for accounts, preserving source order.

    A role id that matches no known role is shown as `unknown_label`
    rather than failing row construction.
    """
    names = resolve_role_names(accounts, roles, unknown_label)
    joined = normalize_timestamps(account.created_at for account in accounts)
    return [
        AccountRow(account=account, role=name, joined=date)
        for account, name, date in zip(accounts, names, joined)
    ]


def build_role_rows(roles: Sequence[Role]) -> List[RoleRow]:
    """Build display rows for roles, preserving source order."""
    created = normalize_timestamps(role.created_at for role in roles)
    return [RoleRow(role=role, created=date) for role, date in zip(roles, created)]
