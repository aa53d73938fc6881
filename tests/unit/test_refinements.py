"""
Unit tests for the common refinements.
"""

import pytest

from branded_schema.errors import CustomPredicateFailedError, TypeMismatchError
from branded_schema.factory import create_interface_definition
from branded_schema.refinements import (
    is_email,
    is_non_negative_int,
    is_positive_int,
    is_url,
    is_uuid,
    register_refinements,
)
from branded_schema.types import field


class TestPredicates:
    """Tests for the refinement predicates."""

    @pytest.mark.parametrize("value", ["a@b.co", "first.last@example.org"])
    def test_valid_emails(self, value):
        assert is_email(value)

    @pytest.mark.parametrize("value", ["", "a@b", "a b@c.d", "@b.co"])
    def test_invalid_emails(self, value):
        assert not is_email(value)

    def test_integers(self):
        """Integral floats count; fractions do not."""
        assert is_positive_int(1)
        assert is_positive_int(2.0)
        assert not is_positive_int(0)
        assert not is_positive_int(1.5)
        assert is_non_negative_int(0)
        assert not is_non_negative_int(-1)

    def test_url(self):
        """URLs need a scheme and a host."""
        assert is_url("https://example.com/path")
        assert not is_url("example.com")
        assert not is_url("not a url")

    def test_uuid(self):
        """Only version 4 UUIDs match, in any case."""
        assert is_uuid("123e4567-e89b-42d3-a456-426614174000")
        assert is_uuid("123E4567-E89B-42D3-A456-426614174000")
        assert not is_uuid("123e4567-e89b-12d3-a456-426614174000")
        assert not is_uuid("not-a-uuid")


class TestRegisterRefinements:
    """Tests for register_refinements."""

    def test_registers_all(self, registry):
        """Every refinement is registered as a primitive."""
        register_refinements(registry)

        for primitive_id in ("Email", "NonEmptyString", "PositiveInt", "NonNegativeInt", "Url", "Uuid"):
            assert registry.get_primitive(primitive_id) is not None

    def test_idempotent(self, registry):
        """Registering twice returns the same definitions."""
        first = register_refinements(registry)
        second = register_refinements(registry)

        assert first.email is second.email

    def test_create(self, registry):
        """Refinements reject values naming their predicate."""
        refinements = register_refinements(registry)

        assert refinements.non_empty_string.create("x") == "x"
        with pytest.raises(CustomPredicateFailedError, match="predicate 'is_non_empty_string'"):
            refinements.non_empty_string.create("   ")
        with pytest.raises(TypeMismatchError):
            refinements.positive_int.create("1")
        with pytest.raises(TypeMismatchError):
            refinements.positive_int.create(True)

    def test_used_as_field_ref(self, registry):
        """Refinements can be referenced from interface fields."""
        register_refinements(registry)
        user = create_interface_definition(
            registry, "User", {"email": field("primitive-ref", ref="Email")}
        )

        assert user.validate({"email": "a@b.co"}) is True
        assert user.validate({"email": "nope"}) is False
