"""
Unit tests for the fluent interface builder.
"""

import pytest

from branded_schema.builder import create_builder
from branded_schema.errors import SchemaDefinitionError
from branded_schema.types import field


class TestInterfaceBuilder:
    """Tests for InterfaceBuilder."""

    def test_build(self, registry):
        """Fields accumulate in order."""
        User = (
            create_builder(registry, "User")
            .field("name", field("string"))
            .optional("nickname", field("string"))
            .build()
        )

        assert User.field_names == ["name", "nickname"]
        assert User.schema["nickname"].optional is True
        assert User.required_fields() == ["name"]
        assert registry.get_interface("User") is User

    def test_dict_descriptors(self, registry):
        """Descriptors may be given as dicts."""
        User = create_builder(registry, "User").field("age", {"type": "number"}).build()

        assert User.schema["age"] == field("number")

    def test_builders_are_immutable(self, registry):
        """Adding a field returns a new builder."""
        base = create_builder(registry, "User").field("name", field("string"))
        extended = base.field("age", field("number"))

        assert list(base.schema) == ["name"]
        assert list(extended.schema) == ["name", "age"]

    def test_version(self, registry):
        """version() sets the built definition's version."""
        User = create_builder(registry, "User").field("name", field("string")).version(3).build()

        assert User.version == 3

    def test_empty_build_raises(self, registry):
        """Building with no fields fails."""
        with pytest.raises(SchemaDefinitionError, match="has no fields defined"):
            create_builder(registry, "Empty").build()
        assert "Empty" not in registry
