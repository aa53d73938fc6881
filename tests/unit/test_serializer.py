"""
Unit tests for JSON serialization.
"""

import json

import pytest

from branded_schema.errors import BrandedSchemaError
from branded_schema.factory import create_interface_definition
from branded_schema.serializer import INVALID_JSON, VALIDATION_FAILED, InterfaceSerializer
from branded_schema.types import field


@pytest.fixture
def user(registry):
    return create_interface_definition(
        registry, "User", {"name": field("string"), "tags": field("array", optional=True)}
    )


class TestInterfaceSerializer:
    """Tests for InterfaceSerializer."""

    def test_serialize_data_only(self, user):
        """Only data is written."""
        text = InterfaceSerializer(user).serialize(user.create({"name": "Alice"}))

        assert json.loads(text) == {"name": "Alice"}

    def test_serialize_nested_instance(self, registry, user):
        """Nested instances are written as their data."""
        task = create_interface_definition(
            registry, "Task", {"owner": field("interface-ref", ref="User")}
        )
        instance = task.create({"owner": user.create({"name": "Alice"})})

        text = InterfaceSerializer(task).serialize(instance)

        assert json.loads(text) == {"owner": {"name": "Alice"}}

    def test_deserialize(self, user):
        """Valid JSON yields an instance."""
        result = InterfaceSerializer(user).deserialize('{"name": "Alice", "tags": ["a"]}')

        assert result.success is True
        assert result.value.definition_id == "User"
        assert result.value["tags"] == ["a"]

    def test_deserialize_invalid_json(self, user):
        """Malformed JSON is reported with INVALID_JSON."""
        result = InterfaceSerializer(user).deserialize("{name:")

        assert result.success is False
        assert result.code == INVALID_JSON

    def test_deserialize_validation_failure(self, user):
        """Data failing the definition is reported with VALIDATION_FAILED."""
        result = InterfaceSerializer(user).deserialize('{"name": 1}')

        assert result.code == VALIDATION_FAILED
        assert "Field 'name'" in result.message

    def test_deserialize_non_object(self, user):
        """A JSON array is not an instance."""
        result = InterfaceSerializer(user).deserialize("[1, 2]")

        assert result.code == VALIDATION_FAILED

    def test_deserialize_or_raise(self, user):
        """deserialize_or_raise raises with the failure code."""
        serializer = InterfaceSerializer(user)

        assert serializer.deserialize_or_raise('{"name": "Alice"}')["name"] == "Alice"
        with pytest.raises(BrandedSchemaError) as exc_info:
            serializer.deserialize_or_raise("not json")
        assert exc_info.value.code == INVALID_JSON
