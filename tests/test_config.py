"""Tests for settings and logging configuration."""

import logging

import pytest

from admin_tables.config import Settings, configure_logging


class TestSettings:
    def test_defaults(self):
        settings = Settings.from_env({})
        assert settings.page_size == 10
        assert settings.roles_page_size == 10
        assert settings.unknown_role_label == "Unknown Role"
        assert settings.seed_path is None
        assert settings.log_level == "INFO"

    def test_reads_environment(self):
        settings = Settings.from_env(
            {
                "ADMIN_TABLES_PAGE_SIZE": "25",
                "ADMIN_TABLES_ROLES_PAGE_SIZE": "5",
                "ADMIN_TABLES_UNKNOWN_ROLE": "No role",
                "ADMIN_TABLES_SEED": "/tmp/seed.json",
                "ADMIN_TABLES_LOG_LEVEL": "debug",
            }
        )
        assert settings.page_size == 25
        assert settings.roles_page_size == 5
        assert settings.unknown_role_label == "No role"
        assert settings.seed_path == "/tmp/seed.json"
        assert settings.log_level == "DEBUG"

    def test_empty_seed_is_none(self):
        assert Settings.from_env({"ADMIN_TABLES_SEED": ""}).seed_path is None

    @pytest.mark.parametrize(
        "environ,match",
        [
            ({"ADMIN_TABLES_PAGE_SIZE": "0"}, "ADMIN_TABLES_PAGE_SIZE"),
            ({"ADMIN_TABLES_ROLES_PAGE_SIZE": "-1"}, "ADMIN_TABLES_ROLES_PAGE_SIZE"),
            ({"ADMIN_TABLES_UNKNOWN_ROLE": " "}, "ADMIN_TABLES_UNKNOWN_ROLE"),
            ({"ADMIN_TABLES_LOG_LEVEL": "loud"}, "ADMIN_TABLES_LOG_LEVEL"),
        ],
    )
    def test_invalid_values(self, environ, match):
        with pytest.raises(ValueError, match=match):
            Settings.from_env(environ)

    def test_non_numeric_page_size(self):
        with pytest.raises(ValueError):
            Settings.from_env({"ADMIN_TABLES_PAGE_SIZE": "ten"})


def test_configure_logging_adds_single_handler():
    logger = configure_logging("DEBUG")
    handlers = len(logger.handlers)
    configure_logging("WARNING")

    assert logger.name == "admin_tables"
    assert len(logger.handlers) == handlers
    assert logger.level == logging.WARNING
