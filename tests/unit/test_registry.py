"""
Unit tests for the type registry.

Tests cover:
- Entry registration and lookup
- Idempotent re-registration
- Cross-kind collision detection
- Fingerprint generation
"""

import pytest

from branded_schema.errors import RegistryCollisionError
from branded_schema.factory import create_interface_definition, create_primitive_definition
from branded_schema.registry import TypeRegistry
from branded_schema.types import RegistryEntry, RegistryKind, field


class TestTypeRegistry:
    """Tests for TypeRegistry."""

    def test_register_and_lookup(self):
        """Can register an entry and look it up by id."""
        registry = TypeRegistry()
        entry = RegistryEntry(id="Token", kind=RegistryKind.OPAQUE, definition=object())

        registry.register(entry)

        assert registry.get_by_id("Token") is entry
        assert "Token" in registry
        assert len(registry) == 1

    def test_lookup_missing_returns_none(self):
        """Unknown ids resolve to None."""
        registry = TypeRegistry()
        assert registry.get_by_id("Nope") is None
        assert registry.get_interface("Nope") is None
        assert registry.get_primitive("Nope") is None

    def test_same_kind_is_noop(self):
        """Registering an id twice with the same kind keeps the first entry."""
        registry = TypeRegistry()
        first = RegistryEntry(id="Token", kind=RegistryKind.OPAQUE, definition="a")
        second = RegistryEntry(id="Token", kind=RegistryKind.OPAQUE, definition="b")

        assert registry.register(first) is first
        assert registry.register(second) is first

        assert registry.get_by_id("Token") is first

    def test_different_kind_raises(self):
        """Registering an id under another kind raises a collision."""
        registry = TypeRegistry()
        create_interface_definition(registry, "User", {"name": field("string")})

        with pytest.raises(
            RegistryCollisionError,
            match="'User' is already registered as kind 'interface' but attempted "
            "to register as kind 'primitive'",
        ):
            create_primitive_definition(registry, "User", "string")

    def test_collision_error_details(self):
        """The collision error carries both kinds."""
        registry = TypeRegistry()
        create_primitive_definition(registry, "Email", "string")

        with pytest.raises(RegistryCollisionError) as exc_info:
            create_interface_definition(registry, "Email", {"x": field("string")})

        assert exc_info.value.code == "REGISTRY_COLLISION"
        assert exc_info.value.existing_kind == "primitive"
        assert exc_info.value.attempted_kind == "interface"

    def test_kind_filtered_lookup(self):
        """get_interface/get_primitive only return their own kind."""
        registry = TypeRegistry()
        User = create_interface_definition(registry, "User", {"name": field("string")})
        Email = create_primitive_definition(registry, "Email", "string")

        assert registry.get_interface("User") is User
        assert registry.get_primitive("User") is None
        assert registry.get_primitive("Email") is Email
        assert registry.get_interface("Email") is None

    def test_get_all_ids_in_registration_order(self):
        """get_all_ids spans every kind."""
        registry = TypeRegistry()
        create_primitive_definition(registry, "Email", "string")
        create_interface_definition(registry, "User", {"name": field("string")})

        assert registry.get_all_ids() == ["Email", "User"]

    def test_reset(self):
        """reset removes every entry."""
        registry = TypeRegistry()
        create_interface_definition(registry, "User", {"name": field("string")})

        registry.reset()

        assert registry.get_all_ids() == []
        assert registry.get_by_id("User") is None

    def test_init_returns_empty_registry(self):
        """init() empties the registry and returns it."""
        registry = TypeRegistry()
        create_interface_definition(registry, "User", {"name": field("string")})

        assert registry.init() is registry
        assert len(registry) == 0

    def test_registries_are_independent(self):
        """Two registries share no state."""
        first = TypeRegistry()
        second = TypeRegistry()
        create_interface_definition(first, "User", {"name": field("string")})

        assert "User" in first
        assert "User" not in second


class TestFingerprint:
    """Tests for registry fingerprints."""

    def test_fingerprint_format(self):
        """Fingerprints are sha256-prefixed."""
        registry = TypeRegistry()
        create_interface_definition(registry, "User", {"name": field("string")})

        assert registry.fingerprint().startswith("sha256:")

    def test_fingerprint_deterministic(self):
        """Same definitions in a different order produce the same fingerprint."""
        first = TypeRegistry()
        create_interface_definition(first, "User", {"name": field("string")})
        create_primitive_definition(first, "Email", "string")

        second = TypeRegistry()
        create_primitive_definition(second, "Email", "string")
        create_interface_definition(second, "User", {"name": field("string")})

        assert first.fingerprint() == second.fingerprint()

    def test_fingerprint_changes_with_schema(self):
        """A different schema produces a different fingerprint."""
        first = TypeRegistry()
        create_interface_definition(first, "User", {"name": field("string")})

        second = TypeRegistry()
        create_interface_definition(second, "User", {"name": field("number")})

        assert first.fingerprint() != second.fingerprint()

    def test_to_dict(self):
        """to_dict lists interfaces and primitives sorted by id."""
        registry = TypeRegistry()
        create_interface_definition(registry, "User", {"name": field("string")}, version=2)
        create_primitive_definition(registry, "Email", "string")

        assert registry.to_dict() == {
            "interfaces": [
                {"id": "User", "version": 2, "schema": {"name": {"type": "string"}}}
            ],
            "primitives": [{"id": "Email", "base_type": "string"}],
        }
