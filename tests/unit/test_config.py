"""
Unit tests for configuration and logging setup.
"""

import json
import logging

from branded_schema.config import Settings, setup_logging
from branded_schema.versioning import MigrationRegistry


class TestSettings:
    """Tests for Settings."""

    def test_defaults(self, monkeypatch):
        """Defaults apply without environment variables."""
        for name in ("LOG_LEVEL", "LOG_FORMAT", "STRICT_MIGRATIONS"):
            monkeypatch.delenv(f"BRANDED_SCHEMA_{name}", raising=False)

        settings = Settings()

        assert settings.log_level == "INFO"
        assert settings.log_format == "text"
        assert settings.strict_migrations is False

    def test_env_override(self, monkeypatch):
        """Environment variables use the BRANDED_SCHEMA_ prefix."""
        monkeypatch.setenv("BRANDED_SCHEMA_STRICT_MIGRATIONS", "true")
        monkeypatch.setenv("BRANDED_SCHEMA_LOG_LEVEL", "DEBUG")

        settings = Settings()

        assert settings.strict_migrations is True
        assert settings.log_level == "DEBUG"

    def test_migration_registry_reads_env(self, monkeypatch, registry):
        """MigrationRegistry loads settings from the environment by default."""
        monkeypatch.setenv("BRANDED_SCHEMA_STRICT_MIGRATIONS", "1")

        assert MigrationRegistry(registry).settings.strict_migrations is True


class TestSetupLogging:
    """Tests for setup_logging."""

    def test_text_format(self):
        """Configures the root logger level and a single handler."""
        root = logging.getLogger()
        saved_level, saved_handlers = root.level, list(root.handlers)
        try:
            setup_logging(Settings(log_level="warning", log_format="text"))

            assert root.level == logging.WARNING
            assert len(root.handlers) == 1
        finally:
            root.setLevel(saved_level)
            root.handlers = saved_handlers

    def test_json_format(self):
        """The json format renders records as JSON objects."""
        root = logging.getLogger()
        saved_level, saved_handlers = root.level, list(root.handlers)
        try:
            setup_logging(Settings(log_format="json"))

            record = logging.LogRecord("branded_schema", logging.INFO, "", 0, "hi", None, None)
            line = root.handlers[0].formatter.format(record)
            assert json.loads(line)["message"] == "hi"
        finally:
            root.setLevel(saved_level)
            root.handlers = saved_handlers
