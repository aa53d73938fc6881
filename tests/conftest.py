"""Shared fixtures for branded-schema tests."""

import pytest

from branded_schema.config import Settings
from branded_schema.registry import TypeRegistry
from branded_schema.versioning import MigrationRegistry


@pytest.fixture
def registry():
    """A fresh, empty type registry."""
    return TypeRegistry().init()


@pytest.fixture
def migrations(registry):
    """A migration registry with schema synthesis enabled."""
    return MigrationRegistry(registry, Settings(strict_migrations=False))
