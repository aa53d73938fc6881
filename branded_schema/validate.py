"""
Schema validation for branded-schema.

This module provides validation utilities:
- Field-level validation with cross-reference resolution
- Fail-fast schema validation (first error raises)
- Accumulating schema checks (every failing field reported)

Invariants:
    - Validation errors are deterministic
    - Error messages name the field, the owning id and any referenced id
    - No coercion: a value either has the declared runtime type or fails
    - interface-ref fields accept only instances already tagged with the ref
"""

from __future__ import annotations

from collections.abc import Mapping
from typing import TYPE_CHECKING, Any, List, Tuple

from .errors import (
    CustomPredicateFailedError,
    MissingFieldError,
    RefNotRegisteredError,
    SchemaValidationError,
    TypeMismatchError,
)
from .types import MISSING, FieldDescriptor, FieldType, Instance, Schema

if TYPE_CHECKING:
    from .registry import TypeRegistry


def describe_type(value: Any) -> str:
    """Name a value's runtime type using schema vocabulary.

    Checks bool before int since bool is a subclass of int.
    """
    if value is MISSING:
        return "missing"
    if value is None:
        return "null"
    if isinstance(value, bool):
        return "boolean"
    if isinstance(value, (int, float)):
        return "number"
    if isinstance(value, str):
        return "string"
    if isinstance(value, (list, tuple)):
        return "array"
    if isinstance(value, Mapping):
        return "object"
    return type(value).__name__


def matches_base_type(value: Any, field_type: FieldType) -> bool:
    """Whether value carries the runtime tag of a primitive field type."""
    if field_type is FieldType.STRING:
        return isinstance(value, str)
    if field_type is FieldType.NUMBER:
        return isinstance(value, (int, float)) and not isinstance(value, bool)
    if field_type is FieldType.BOOLEAN:
        return isinstance(value, bool)
    raise ValueError(f"'{field_type.value}' is not a primitive base type")


def validate_field(
    name: str,
    value: Any,
    descriptor: FieldDescriptor,
    owner_id: str,
    registry: TypeRegistry,
) -> None:
    """Validate a single field value against its descriptor.

    Args:
        name: Field name (``name[i]`` for array elements)
        value: The value, or MISSING when the field is absent
        descriptor: The field descriptor
        owner_id: Id of the definition that owns the schema
        registry: Registry used to resolve references

    Raises:
        MissingFieldError: Required field absent
        TypeMismatchError: Wrong runtime type, disallowed null, or a
            reference target that rejects the value
        RefNotRegisteredError: Reference missing or not registered
        CustomPredicateFailedError: Custom predicate rejected the value
    """
    if value is MISSING:
        if descriptor.optional:
            return
        raise MissingFieldError(
            f"Field '{name}' is required but missing in interface '{owner_id}'",
            field_name=name,
            interface_id=owner_id,
        )

    if value is None:
        if descriptor.nullable:
            return
        raise TypeMismatchError(
            f"Field '{name}' expected type '{descriptor.type.value}' but got 'null' "
            f"in interface '{owner_id}'",
            field_name=name,
            interface_id=owner_id,
        )

    field_type = descriptor.type
    if field_type.is_primitive:
        if not matches_base_type(value, field_type):
            _raise_mismatch(name, field_type.value, value, owner_id)

    elif field_type is FieldType.OBJECT:
        if not isinstance(value, Mapping):
            _raise_mismatch(name, "object", value, owner_id)

    elif field_type is FieldType.ARRAY:
        if not isinstance(value, (list, tuple)):
            _raise_mismatch(name, "array", value, owner_id)
        if descriptor.items is not None:
            for i, item in enumerate(value):
                validate_field(f"{name}[{i}]", item, descriptor.items, owner_id, registry)

    elif field_type.is_ref:
        _validate_ref(name, value, descriptor, owner_id, registry)

    else:
        raise ValueError(f"Unhandled field type '{field_type.value}' for field '{name}'")

    if descriptor.validate is None:
        return
    try:
        accepted = descriptor.validate(value)
    except Exception as e:
        raise CustomPredicateFailedError(
            f"Field '{name}' custom validation raised {type(e).__name__} "
            f"in interface '{owner_id}': {e}",
            field_name=name,
            interface_id=owner_id,
        ) from e
    if not accepted:
        raise CustomPredicateFailedError(
            f"Field '{name}' failed custom validation in interface '{owner_id}'",
            field_name=name,
            interface_id=owner_id,
        )


def _raise_mismatch(name: str, expected: str, value: Any, owner_id: str) -> None:
    raise TypeMismatchError(
        f"Field '{name}' expected type '{expected}' but got '{describe_type(value)}' "
        f"in interface '{owner_id}'",
        field_name=name,
        interface_id=owner_id,
    )


def _validate_ref(
    name: str,
    value: Any,
    descriptor: FieldDescriptor,
    owner_id: str,
    registry: TypeRegistry,
) -> None:
    """Resolve descriptor.ref and check value against the referenced type."""
    field_type = descriptor.type
    ref_id = descriptor.ref
    if not ref_id:
        raise RefNotRegisteredError(
            f"Field '{name}' has type '{field_type.value}' but no ref specified "
            f"in interface '{owner_id}'",
            field_name=name,
            interface_id=owner_id,
        )

    if field_type is FieldType.ENUM_REF:
        value_set = registry.enums.lookup_enum_by_id(ref_id)
        if value_set is None:
            _raise_unregistered(name, "enum", ref_id, owner_id)
        accepted = value_set.contains(value)

    elif field_type is FieldType.INTERFACE_REF:
        if registry.get_interface(ref_id) is None:
            _raise_unregistered(name, "interface", ref_id, owner_id)
        accepted = isinstance(value, Instance) and value.definition_id == ref_id

    elif field_type is FieldType.PRIMITIVE_REF:
        primitive = registry.get_primitive(ref_id)
        if primitive is None:
            _raise_unregistered(name, "primitive", ref_id, owner_id)
        accepted = primitive.validate(value)

    else:
        raise ValueError(f"'{field_type.value}' is not a reference type")

    if not accepted:
        raise TypeMismatchError(
            f"Field '{name}' failed validation against referenced type '{ref_id}' "
            f"in interface '{owner_id}'",
            field_name=name,
            interface_id=owner_id,
            details={"ref_id": ref_id},
        )


def _raise_unregistered(name: str, kind: str, ref_id: str, owner_id: str) -> None:
    raise RefNotRegisteredError(
        f"Field '{name}' references {kind} '{ref_id}' which is not registered, "
        f"in interface '{owner_id}'",
        field_name=name,
        interface_id=owner_id,
        ref_id=ref_id,
    )


def validate_schema(
    data: Mapping[str, Any],
    schema: Schema,
    owner_id: str,
    registry: TypeRegistry,
) -> None:
    """Validate every field of data against schema, failing fast.

    Fields in data that the schema does not name are ignored.

    Raises:
        SchemaValidationError: The first violation found
    """
    for name, descriptor in schema.items():
        validate_field(name, data.get(name, MISSING), descriptor, owner_id, registry)


def check_schema(
    data: Mapping[str, Any],
    schema: Schema,
    owner_id: str,
    registry: TypeRegistry,
) -> Tuple[bool, List[str]]:
    """Validate data against schema, collecting one error per failing field.

    Returns:
        Tuple of (is_valid, list_of_errors)
    """
    errors: List[str] = []
    for name, descriptor in schema.items():
        try:
            validate_field(name, data.get(name, MISSING), descriptor, owner_id, registry)
        except SchemaValidationError as e:
            errors.append(e.message)
    return len(errors) == 0, errors
