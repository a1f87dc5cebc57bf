"""Settings read from environment variables."""

import logging
import os
from dataclasses import dataclass
from typing import Mapping, Optional

from .preprocessing.rows import UNKNOWN_ROLE

_LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"


@dataclass(frozen=True)
class Settings:
    """
    Runtime settings for the admin screens.

    Attributes:
        page_size: Rows per page of the accounts table
        roles_page_size: Rows per page served for roles
        unknown_role_label: Label for accounts whose role cannot be resolved
        seed_path: Optional JSON file with {'users': [...], 'roles': [...]}
        log_level: Name of the logging level
    """

    page_size: int = 10
    roles_page_size: int = 10
    unknown_role_label: str = UNKNOWN_ROLE
    seed_path: Optional[str] = None
    log_level: str = "INFO"

    @classmethod
    def from_env(cls, environ: Optional[Mapping[str, str]] = None) -> "Settings":
        """
        Build settings from ADMIN_TABLES_* environment variables.

        Args:
            environ: Mapping to read from. Defaults to os.environ.

        Raises:
            ValueError: If a value is malformed or out of range
        """
        env = os.environ if environ is None else environ
        settings = cls(
            page_size=int(env.get("ADMIN_TABLES_PAGE_SIZE", "10")),
            roles_page_size=int(env.get("ADMIN_TABLES_ROLES_PAGE_SIZE", "10")),
            unknown_role_label=env.get("ADMIN_TABLES_UNKNOWN_ROLE", UNKNOWN_ROLE),
            seed_path=env.get("ADMIN_TABLES_SEED") or None,
            log_level=env.get("ADMIN_TABLES_LOG_LEVEL", "INFO").upper(),
        )
        settings.validate()
        return settings

    def validate(self) -> None:
        if self.page_size < 1:
            raise ValueError(f"ADMIN_TABLES_PAGE_SIZE must be >= 1, got {self.page_size}")
        if self.roles_page_size < 1:
            raise ValueError(
                f"ADMIN_TABLES_ROLES_PAGE_SIZE must be >= 1, got {self.roles_page_size}"
            )
        if not self.unknown_role_label.strip():
            raise ValueError("ADMIN_TABLES_UNKNOWN_ROLE must not be empty")
        if not isinstance(logging.getLevelName(self.log_level), int):
            raise ValueError(f"Unknown ADMIN_TABLES_LOG_LEVEL '{self.log_level}'")


def configure_logging(level: str = "INFO") -> logging.Logger:
    """Attach a stream handler to the package logger once and set its level."""
    logger = logging.getLogger("admin_tables")
    if not logger.handlers:
        handler = logging.StreamHandler()
        handler.setFormatter(logging.Formatter(_LOG_FORMAT))
        logger.addHandler(handler)
    logger.setLevel(level)
    return logger
