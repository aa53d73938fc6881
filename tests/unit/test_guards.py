"""
Unit tests for guards and accessors.
"""

import pytest

from branded_schema.errors import TypeMismatchError
from branded_schema.factory import create_interface_definition, create_primitive_definition
from branded_schema.guards import (
    FIELD_VALIDATION_FAILED,
    INVALID_DEFINITION,
    INVALID_VALUE_TYPE,
    assert_of_interface,
    get_interface_fields,
    get_interface_id,
    get_interface_schema,
    interface_field_count,
    is_of_interface,
    is_of_primitive,
    safe_parse_interface,
)
from branded_schema.types import field


@pytest.fixture
def user(registry):
    return create_interface_definition(
        registry, "User", {"name": field("string"), "age": field("number")}
    )


class TestGuards:
    """Tests for is_of_interface, assert_of_interface and is_of_primitive."""

    def test_is_of_interface(self, user):
        """Valid data passes, invalid data and non-definitions fail."""
        assert is_of_interface({"name": "A", "age": 1}, user) is True
        assert is_of_interface({"name": "A"}, user) is False
        assert is_of_interface({"name": "A", "age": 1}, "User") is False

    def test_assert_of_interface(self, user):
        """assert_of_interface raises on invalid data."""
        assert_of_interface({"name": "A", "age": 1}, user)

        with pytest.raises(TypeMismatchError, match="not a valid instance of interface 'User'"):
            assert_of_interface([], user)

    def test_is_of_primitive(self, registry, user):
        """Primitive guard checks base type and predicate."""
        email = create_primitive_definition(registry, "Email", "string", lambda s: "@" in s)

        assert is_of_primitive("a@b.co", email) is True
        assert is_of_primitive("nope", email) is False
        assert is_of_primitive("a@b.co", user) is False


class TestSafeParse:
    """Tests for safe_parse_interface."""

    def test_success(self, user):
        """Valid data yields an instance."""
        result = safe_parse_interface({"name": "A", "age": 1}, user)

        assert result.success is True
        assert result.value["name"] == "A"
        assert result.code is None

    def test_invalid_definition(self):
        """A non-definition is reported, not raised."""
        result = safe_parse_interface({}, object())

        assert result.success is False
        assert result.code == INVALID_DEFINITION

    def test_invalid_value_type(self, user):
        """A non-mapping value is reported."""
        result = safe_parse_interface("Alice", user)

        assert result.code == INVALID_VALUE_TYPE
        assert "got 'string'" in result.message

    def test_field_errors(self, user):
        """Every failing field is listed by name."""
        result = safe_parse_interface({"name": 1}, user)

        assert result.success is False
        assert result.code == FIELD_VALIDATION_FAILED
        assert set(result.field_errors) == {"name", "age"}
        assert "required but missing" in result.field_errors["age"]

    def test_raising_predicate(self, registry):
        """A predicate that raises becomes a field error, not an exception."""

        def strict_len(value):
            raise TypeError("bad predicate input")

        account = create_interface_definition(
            registry, "Account", {"name": field("string", validate=strict_len)}
        )

        result = safe_parse_interface({"name": "Alice"}, account)

        assert result.success is False
        assert result.code == FIELD_VALIDATION_FAILED
        assert "bad predicate input" in result.field_errors["name"]


class TestAccessors:
    """Tests for definition/instance accessors."""

    def test_definition(self, user):
        """Accessors read a definition."""
        assert get_interface_id(user) == "User"
        assert get_interface_schema(user) is user.schema
        assert get_interface_fields(user) == ["name", "age"]
        assert interface_field_count(user) == 2

    def test_instance(self, user):
        """Accessors read an instance's metadata."""
        alice = user.create({"name": "A", "age": 1})

        assert get_interface_id(alice) == "User"
        assert get_interface_fields(alice) == ["name", "age"]
        assert interface_field_count(alice) == 2

    def test_other_values(self):
        """Accessors return None for anything else."""
        for value in ({"name": "A"}, None, "User", 3):
            assert get_interface_id(value) is None
            assert get_interface_schema(value) is None
            assert get_interface_fields(value) is None
            assert interface_field_count(value) is None
