"""
Definition factory for branded interfaces and branded primitives.

The factory builds a definition (schema + create + validate), registers it
in the given TypeRegistry and returns it. Building is idempotent per id:
asking again for a registered id returns the registered definition.

Invariants:
    - A definition is registered exactly once per registry
    - Repeat calls with a different schema return the first definition
    - create() raises the first validation error; validate() never raises

Example:
    >>> registry = TypeRegistry()
    >>> User = create_interface_definition(registry, "User", {"name": field("string")})
    >>> user = User.create({"name": "Alice"})
    >>> User.validate({"name": 42})
    False
"""

from __future__ import annotations

import logging
from collections.abc import Mapping
from typing import Any, Callable, List, Optional, Tuple, Union

from .errors import (
    CustomPredicateFailedError,
    RegistryCollisionError,
    SchemaDefinitionError,
    TypeMismatchError,
)
from .registry import TypeRegistry
from .types import (
    Definition,
    FieldType,
    Instance,
    InstanceMeta,
    PrimitiveDefinition,
    RegistryEntry,
    RegistryKind,
    SchemaInput,
    normalize_schema,
)
from .validate import check_schema, describe_type, matches_base_type, validate_schema
from .watch import CREATE, VALIDATE

logger = logging.getLogger(__name__)


def _existing(registry: TypeRegistry, type_id: str, kind: RegistryKind) -> Optional[Any]:
    """Return the registered definition for type_id if it has this kind."""
    entry = registry.get_by_id(type_id)
    if entry is None:
        return None
    if entry.kind is not kind:
        raise RegistryCollisionError(type_id, entry.kind.value, kind.value)
    return entry.definition


def create_interface_definition(
    registry: TypeRegistry,
    interface_id: str,
    schema: SchemaInput,
    *,
    version: int = 1,
    family: Optional[str] = None,
) -> Definition:
    """Create (or fetch) a branded interface definition.

    Args:
        registry: Registry to register the definition in
        interface_id: Unique id for the interface
        schema: Mapping of field name to FieldDescriptor (or descriptor dict)
        version: Schema version
        family: Id migration edges are keyed under (defaults to interface_id)

    Returns:
        The registered Definition

    Raises:
        RegistryCollisionError: If interface_id is registered as another kind
        SchemaDefinitionError: If the schema cannot be normalized
    """
    existing = _existing(registry, interface_id, RegistryKind.INTERFACE)
    if existing is not None:
        if existing.schema != _try_normalize(schema):
            logger.warning(
                f"Interface '{interface_id}' already registered; ignoring differing schema"
            )
        return existing

    try:
        frozen_schema = normalize_schema(schema)
    except (TypeError, ValueError, KeyError) as e:
        raise SchemaDefinitionError(
            f"Invalid schema for interface '{interface_id}': {e}", interface_id=interface_id
        ) from e

    meta = InstanceMeta(definition_id=interface_id, schema_snapshot=frozen_schema, version=version)

    def create(data: Any) -> Instance:
        if not isinstance(data, Mapping):
            raise TypeMismatchError(
                f"Expected a mapping for interface '{interface_id}' but got "
                f"'{describe_type(data)}'",
                interface_id=interface_id,
            )
        validate_schema(data, frozen_schema, interface_id, registry)
        instance = Instance(data=data, meta=meta)
        registry.watchers.notify(interface_id, CREATE, instance)
        return instance

    def validate(data: Any) -> bool:
        if not isinstance(data, Mapping):
            return False
        try:
            validate_schema(data, frozen_schema, interface_id, registry)
            registry.watchers.notify(interface_id, VALIDATE, data)
        except Exception as e:
            logger.debug(f"Validation against '{interface_id}' failed: {e}")
            return False
        return True

    def check(data: Any) -> Tuple[bool, List[str]]:
        if not isinstance(data, Mapping):
            return False, [
                f"Expected a mapping for interface '{interface_id}' but got '{describe_type(data)}'"
            ]
        return check_schema(data, frozen_schema, interface_id, registry)

    definition = Definition(
        id=interface_id,
        schema=frozen_schema,
        version=version,
        family=family or interface_id,
        create=create,
        validate=validate,
        check=check,
    )

    entry = registry.register(
        RegistryEntry(id=interface_id, kind=RegistryKind.INTERFACE, definition=definition)
    )
    return entry.definition


def _try_normalize(schema: SchemaInput) -> Any:
    try:
        return normalize_schema(schema)
    except (TypeError, ValueError, KeyError):
        return None


def create_primitive_definition(
    registry: TypeRegistry,
    primitive_id: str,
    base_type: Union[str, FieldType],
    predicate: Optional[Callable[[Any], bool]] = None,
) -> PrimitiveDefinition:
    """Create (or fetch) a branded primitive definition.

    Args:
        registry: Registry to register the definition in
        primitive_id: Unique id for the primitive
        base_type: "string", "number" or "boolean"
        predicate: Optional refinement predicate

    Returns:
        The registered PrimitiveDefinition

    Raises:
        RegistryCollisionError: If primitive_id is registered as another kind
        SchemaDefinitionError: If base_type is not a primitive type

    Example:
        >>> def is_positive(n):
        ...     return n > 0
        >>> Positive = create_primitive_definition(registry, "Positive", "number", is_positive)
        >>> Positive.create(-1)
        Traceback (most recent call last):
        CustomPredicateFailedError: Primitive 'Positive' failed validation predicate 'is_positive'
    """
    existing = _existing(registry, primitive_id, RegistryKind.PRIMITIVE)
    if existing is not None:
        return existing

    try:
        field_type = FieldType.from_str(base_type) if isinstance(base_type, str) else base_type
    except ValueError as e:
        raise SchemaDefinitionError(str(e), interface_id=primitive_id) from e
    if not field_type.is_primitive:
        raise SchemaDefinitionError(
            f"Primitive '{primitive_id}' base type must be string, number or boolean, "
            f"got '{field_type.value}'",
            interface_id=primitive_id,
        )

    predicate_name = getattr(predicate, "__name__", "") or "anonymous"
    if predicate_name == "<lambda>":
        predicate_name = "anonymous"

    def create(value: Any) -> Any:
        if not matches_base_type(value, field_type):
            raise TypeMismatchError(
                f"Primitive '{primitive_id}' expected type '{field_type.value}' "
                f"but got '{describe_type(value)}'",
                interface_id=primitive_id,
            )
        if predicate is not None and not predicate(value):
            raise CustomPredicateFailedError(
                f"Primitive '{primitive_id}' failed validation predicate '{predicate_name}'",
                interface_id=primitive_id,
                details={"predicate": predicate_name},
            )
        return value

    def validate(value: Any) -> bool:
        if not matches_base_type(value, field_type):
            return False
        try:
            return bool(predicate(value)) if predicate is not None else True
        except Exception as e:
            logger.debug(f"Predicate of primitive '{primitive_id}' raised: {e}")
            return False

    definition = PrimitiveDefinition(
        id=primitive_id,
        base_type=field_type,
        predicate=predicate,
        create=create,
        validate=validate,
    )

    entry = registry.register(
        RegistryEntry(id=primitive_id, kind=RegistryKind.PRIMITIVE, definition=definition)
    )
    return entry.definition
