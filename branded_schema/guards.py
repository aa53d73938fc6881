"""
Runtime guards and accessors for definitions and instances.

Guards answer "is this value a valid instance of that definition?" without
raising (is_of_interface, safe_parse_interface) or by raising
(assert_of_interface). Accessors read ids and schemas off either a
Definition or an Instance and return None for anything else.
"""

from __future__ import annotations

import logging
import re
from collections.abc import Mapping
from dataclasses import dataclass
from dataclasses import field as dataclass_field
from typing import Any, Dict, List, Optional

from .errors import TypeMismatchError
from .types import Definition, Instance, PrimitiveDefinition, Schema
from .validate import describe_type

logger = logging.getLogger(__name__)

INVALID_DEFINITION = "INVALID_DEFINITION"
INVALID_VALUE_TYPE = "INVALID_VALUE_TYPE"
FIELD_VALIDATION_FAILED = "FIELD_VALIDATION_FAILED"

_FIELD_IN_MESSAGE = re.compile(r"Field '([^']+)'")


@dataclass(frozen=True)
class SafeParseResult:
    """Outcome of safe_parse_interface.

    Attributes:
        success: Whether the value validated
        value: The created Instance on success
        code: Failure code on failure
        message: Failure message on failure
        field_errors: Failure messages keyed by field name
    """

    success: bool
    value: Optional[Instance] = None
    code: Optional[str] = None
    message: str = ""
    field_errors: Dict[str, str] = dataclass_field(default_factory=dict)


def is_of_interface(value: Any, definition: Definition) -> bool:
    """Whether value validates against definition. Never raises."""
    if not isinstance(definition, Definition):
        return False
    return definition.validate(value)


def assert_of_interface(value: Any, definition: Definition) -> None:
    """Raise unless value validates against definition.

    Raises:
        TypeMismatchError: If value does not validate
    """
    if not is_of_interface(value, definition):
        interface_id = getattr(definition, "id", None)
        raise TypeMismatchError(
            f"Value of type '{describe_type(value)}' is not a valid instance of "
            f"interface '{interface_id}'",
            interface_id=interface_id,
        )


def safe_parse_interface(value: Any, definition: Definition) -> SafeParseResult:
    """Create an instance, reporting failure as a result instead of raising."""
    if not isinstance(definition, Definition):
        return SafeParseResult(
            success=False,
            code=INVALID_DEFINITION,
            message=f"Expected a Definition, got '{type(definition).__name__}'",
        )
    if not isinstance(value, Mapping):
        return SafeParseResult(
            success=False,
            code=INVALID_VALUE_TYPE,
            message=f"Expected a mapping for interface '{definition.id}' "
            f"but got '{describe_type(value)}'",
        )

    is_valid, errors = definition.check(value)
    if not is_valid:
        return SafeParseResult(
            success=False,
            code=FIELD_VALIDATION_FAILED,
            message="; ".join(errors),
            field_errors=_extract_field_errors(errors),
        )
    return SafeParseResult(success=True, value=definition.create(value))


def _extract_field_errors(errors: List[str]) -> Dict[str, str]:
    field_errors: Dict[str, str] = {}
    for message in errors:
        match = _FIELD_IN_MESSAGE.search(message)
        if match:
            field_errors.setdefault(match.group(1), message)
    return field_errors


def is_of_primitive(value: Any, definition: PrimitiveDefinition) -> bool:
    """Whether value validates against a primitive definition. Never raises."""
    if not isinstance(definition, PrimitiveDefinition):
        return False
    return definition.validate(value)


def get_interface_id(value: Any) -> Optional[str]:
    """Id of a Definition, or of the definition that created an Instance."""
    if isinstance(value, Definition):
        return value.id
    if isinstance(value, Instance):
        return value.definition_id
    return None


def get_interface_schema(value: Any) -> Optional[Schema]:
    """Schema of a Definition, or the schema snapshot of an Instance."""
    if isinstance(value, Definition):
        return value.schema
    if isinstance(value, Instance):
        return value.meta.schema_snapshot
    return None


def get_interface_fields(value: Any) -> Optional[List[str]]:
    schema = get_interface_schema(value)
    return list(schema.keys()) if schema is not None else None


def interface_field_count(value: Any) -> Optional[int]:
    schema = get_interface_schema(value)
    return len(schema) if schema is not None else None
