"""
Composition and projection of branded interface definitions.

Every function here builds a fresh schema mapping and passes it to
create_interface_definition under a new id, so derived shapes are
registered definitions like any hand-written one.

Invariants:
    - Source definitions and their schemas are never modified
    - Field collisions are fatal; nothing is registered on failure
    - Field order follows the source definitions
"""

from __future__ import annotations

import logging
from difflib import get_close_matches
from typing import Dict, Iterable, List

from .errors import (
    DuplicateFieldError,
    FieldConflictError,
    SchemaDefinitionError,
    UnknownFieldError,
)
from .factory import create_interface_definition
from .registry import TypeRegistry
from .types import Definition, FieldDescriptor, SchemaInput, normalize_schema

logger = logging.getLogger(__name__)


def compose_interfaces(
    registry: TypeRegistry,
    new_id: str,
    *definitions: Definition,
) -> Definition:
    """Merge several definitions into one.

    Args:
        registry: Registry to register the result in
        new_id: Id of the composed definition
        definitions: Source definitions

    Returns:
        Definition whose schema is the union of the sources

    Raises:
        DuplicateFieldError: If a field name occurs in more than one source
    """
    merged: Dict[str, FieldDescriptor] = {}
    sources: Dict[str, str] = {}

    for definition in definitions:
        for name, descriptor in definition.schema.items():
            if name in merged:
                raise DuplicateFieldError(name, sources[name], definition.id, new_id)
            merged[name] = descriptor
            sources[name] = definition.id

    logger.debug(
        f"Composing '{new_id}' from {[d.id for d in definitions]} ({len(merged)} fields)"
    )
    return create_interface_definition(registry, new_id, merged)


def extend_interface(
    registry: TypeRegistry,
    base: Definition,
    new_id: str,
    extra_fields: SchemaInput,
) -> Definition:
    """Add fields to a base definition.

    Raises:
        FieldConflictError: If an extra field already exists in base
        SchemaDefinitionError: If extra_fields cannot be normalized
    """
    try:
        extra = normalize_schema(extra_fields)
    except (TypeError, ValueError, KeyError) as e:
        raise SchemaDefinitionError(
            f"Invalid extra fields for interface '{new_id}': {e}", interface_id=new_id
        ) from e
    for name in extra:
        if name in base.schema:
            raise FieldConflictError(name, base.id, new_id)

    merged: Dict[str, FieldDescriptor] = dict(base.schema)
    merged.update(extra)
    return create_interface_definition(registry, new_id, merged)


def partial_interface(
    registry: TypeRegistry,
    definition: Definition,
    new_id: str,
) -> Definition:
    """Copy of a definition with every field optional."""
    partial = {
        name: descriptor.replace(optional=True)
        for name, descriptor in definition.schema.items()
    }
    return create_interface_definition(registry, new_id, partial)


def _check_known(
    definition: Definition,
    names: Iterable[str],
    operation: str,
    new_id: str,
) -> List[str]:
    names = list(names)
    known = list(definition.schema.keys())
    for name in names:
        if name not in definition.schema:
            suggestions = get_close_matches(name, known, n=3)
            raise UnknownFieldError(name, definition.id, operation, new_id, suggestions)
    return names


def pick_fields(
    registry: TypeRegistry,
    definition: Definition,
    new_id: str,
    names: Iterable[str],
) -> Definition:
    """Definition with only the named fields.

    Raises:
        UnknownFieldError: If a name is not a field of definition
    """
    names = _check_known(definition, names, "pick", new_id)
    picked = {name: definition.schema[name] for name in names}
    return create_interface_definition(registry, new_id, picked)


def omit_fields(
    registry: TypeRegistry,
    definition: Definition,
    new_id: str,
    names: Iterable[str],
) -> Definition:
    """Definition with every field except the named ones.

    Raises:
        UnknownFieldError: If a name is not a field of definition
    """
    omitted = set(_check_known(definition, names, "omit", new_id))
    kept = {
        name: descriptor
        for name, descriptor in definition.schema.items()
        if name not in omitted
    }
    return create_interface_definition(registry, new_id, kept)
