"""
Configuration for branded-schema.

Uses pydantic-settings for environment variable loading. Nothing here is
read implicitly: components that honor a setting take a Settings instance
in their constructor, falling back to Settings() (environment) when none
is given.

Invariants:
    - All settings have defaults matching the documented behavior
    - strict_migrations defaults to off (best-effort schema synthesis)
"""

from __future__ import annotations

import logging

import json_log_formatter
from pydantic import Field
from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    """branded-schema configuration loaded from environment."""

    # Logging
    log_level: str = Field(default="INFO", description="Root log level")
    log_format: str = Field(default="text", description="Log format: text or json")

    # Versioning
    strict_migrations: bool = Field(
        default=False,
        description="Require a registered target-version definition instead of "
        "synthesizing one from migrated data",
    )

    model_config = {"env_prefix": "BRANDED_SCHEMA_"}


def setup_logging(settings: Settings | None = None) -> None:
    """Configure logging based on configuration.

    Args:
        settings: Settings to apply (loaded from env if not provided)
    """
    settings = settings or Settings()
    level = getattr(logging, settings.log_level.upper(), logging.INFO)

    if settings.log_format == "json":
        formatter = json_log_formatter.JSONFormatter()
    else:
        formatter = logging.Formatter("%(asctime)s - %(name)s - %(levelname)s - %(message)s")

    handler = logging.StreamHandler()
    handler.setFormatter(formatter)

    root_logger = logging.getLogger()
    root_logger.setLevel(level)
    root_logger.handlers = [handler]
