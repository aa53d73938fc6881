"""
Structural comparison of branded interface definitions.

This module answers how two definitions relate:
- interface_diff: partition field names into only-first / only-second / shared
- interface_intersect: definition of the shared, type-compatible fields
- is_subtype: width subtyping (candidate has every supertype field, same type)
- check_compatibility: classified changes between two versions of a shape

Compatible field types means the same type tag and, for reference types,
the same ref. Optional/nullable modifiers do not take part.

Invariants:
    - is_subtype is reflexive and never raises
    - Adding fields never breaks an existing subtype relation
    - Removing a field or changing its type is a breaking change

Example:
    >>> is_subtype(Employee, Person)
    True
    >>> changes = check_compatibility(UserV1, UserV2)
    >>> breaking = [c for c in changes if c.is_breaking]
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from enum import Enum, auto
from typing import Any, List, Optional

from .factory import create_interface_definition
from .registry import TypeRegistry
from .types import Definition, FieldDescriptor

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class FieldEntry:
    """A field present in only one of two definitions."""

    field: str
    descriptor: FieldDescriptor


@dataclass(frozen=True)
class SharedField:
    """A field present in both definitions."""

    field: str
    first: FieldDescriptor
    second: FieldDescriptor

    @property
    def same_type(self) -> bool:
        """Whether both descriptors have compatible types."""
        return self.first.same_type(self.second)


@dataclass(frozen=True)
class InterfaceDiff:
    """Result of interface_diff.

    Attributes:
        only_in_first: Fields only in the first definition
        only_in_second: Fields only in the second definition
        in_both: Fields in both definitions
    """

    only_in_first: List[FieldEntry]
    only_in_second: List[FieldEntry]
    in_both: List[SharedField]

    @property
    def same_type(self) -> List[SharedField]:
        """Shared fields whose types are compatible."""
        return [s for s in self.in_both if s.same_type]

    @property
    def changed_type(self) -> List[SharedField]:
        """Shared fields whose types differ."""
        return [s for s in self.in_both if not s.same_type]

    @property
    def is_empty(self) -> bool:
        """Whether both definitions have the same fields with compatible types."""
        return not self.only_in_first and not self.only_in_second and not self.changed_type


@dataclass(frozen=True)
class InterfaceIntersection:
    """Result of interface_intersect.

    Attributes:
        definition: Definition built from the compatible shared fields
        conflicts: Shared fields left out because their types differ
    """

    definition: Definition
    conflicts: List[SharedField]


def interface_diff(first: Definition, second: Definition) -> InterfaceDiff:
    """Partition the fields of two definitions."""
    only_in_first: List[FieldEntry] = []
    only_in_second: List[FieldEntry] = []
    in_both: List[SharedField] = []

    for name, descriptor in first.schema.items():
        other = second.schema.get(name)
        if other is None:
            only_in_first.append(FieldEntry(name, descriptor))
        else:
            in_both.append(SharedField(name, descriptor, other))

    for name, descriptor in second.schema.items():
        if name not in first.schema:
            only_in_second.append(FieldEntry(name, descriptor))

    return InterfaceDiff(only_in_first, only_in_second, in_both)


def interface_intersect(
    registry: TypeRegistry,
    first: Definition,
    second: Definition,
    new_id: str,
) -> InterfaceIntersection:
    """Build a definition from the fields both definitions share compatibly.

    Shared fields with mismatched types are reported in ``conflicts`` instead
    of failing the call. The first definition's descriptors are used.
    """
    compatible = {}
    conflicts: List[SharedField] = []

    for shared in interface_diff(first, second).in_both:
        if shared.same_type:
            compatible[shared.field] = shared.first
        else:
            conflicts.append(shared)

    if conflicts:
        logger.debug(
            f"Intersection '{new_id}' of '{first.id}' and '{second.id}' excluded "
            f"conflicting fields {[c.field for c in conflicts]}"
        )

    definition = create_interface_definition(registry, new_id, compatible)
    return InterfaceIntersection(definition=definition, conflicts=conflicts)


def is_subtype(candidate: Any, supertype: Any) -> bool:
    """Whether candidate is a structural (width) subtype of supertype.

    Every supertype field must exist in candidate with a matching type, and a
    matching ref for reference types. Extra candidate fields are irrelevant.
    Returns False instead of raising for anything that is not a definition.
    """
    candidate_schema = getattr(candidate, "schema", None)
    supertype_schema = getattr(supertype, "schema", None)
    if candidate_schema is None or supertype_schema is None:
        return False

    try:
        for name, expected in supertype_schema.items():
            actual = candidate_schema.get(name)
            if actual is None:
                return False
            if actual.type is not expected.type:
                return False
            if expected.type.is_ref and actual.ref != expected.ref:
                return False
    except (AttributeError, TypeError):
        return False
    return True


class ChangeKind(Enum):
    """Types of changes between two versions of a definition."""

    # Non-breaking changes
    FIELD_ADDED = auto()
    FIELD_MADE_OPTIONAL = auto()
    FIELD_MADE_NULLABLE = auto()
    VERSION_CHANGED = auto()

    # Breaking changes
    REQUIRED_FIELD_ADDED = auto()
    FIELD_REMOVED = auto()
    FIELD_TYPE_CHANGED = auto()
    FIELD_REF_CHANGED = auto()
    FIELD_MADE_REQUIRED = auto()
    FIELD_MADE_NON_NULLABLE = auto()

    @property
    def is_breaking(self) -> bool:
        """Whether data valid under the old version may be invalid under the new one."""
        breaking_kinds = {
            ChangeKind.REQUIRED_FIELD_ADDED,
            ChangeKind.FIELD_REMOVED,
            ChangeKind.FIELD_TYPE_CHANGED,
            ChangeKind.FIELD_REF_CHANGED,
            ChangeKind.FIELD_MADE_REQUIRED,
            ChangeKind.FIELD_MADE_NON_NULLABLE,
        }
        return self in breaking_kinds


@dataclass
class SchemaChange:
    """Represents a single change between two versions of a definition.

    Attributes:
        kind: The type of change
        path: Path to the changed element (e.g., "User.email")
        old_value: Previous value (if applicable)
        new_value: New value (if applicable)
        message: Human-readable description of the change
    """

    kind: ChangeKind
    path: str
    old_value: Optional[Any] = None
    new_value: Optional[Any] = None
    message: str = ""

    @property
    def is_breaking(self) -> bool:
        """Whether this is a breaking change."""
        return self.kind.is_breaking

    def __str__(self) -> str:
        status = "BREAKING" if self.is_breaking else "OK"
        return f"[{status}] {self.kind.name}: {self.path} - {self.message}"


def check_compatibility(old: Definition, new: Definition) -> List[SchemaChange]:
    """List the changes from one version of a shape to another.

    Removing a field counts as breaking here even though width subtyping
    ignores extra fields: readers of the old shape expect it.

    Args:
        old: The baseline definition
        new: The candidate definition

    Returns:
        List of SchemaChange objects describing all differences
    """
    changes: List[SchemaChange] = []
    prefix = old.family

    if old.version != new.version:
        changes.append(SchemaChange(
            kind=ChangeKind.VERSION_CHANGED,
            path=prefix,
            old_value=old.version,
            new_value=new.version,
            message=f"Version changed from {old.version} to {new.version}",
        ))

    diff = interface_diff(old, new)

    for entry in diff.only_in_first:
        changes.append(SchemaChange(
            kind=ChangeKind.FIELD_REMOVED,
            path=f"{prefix}.{entry.field}",
            old_value=entry.descriptor.type.value,
            message=f"Field '{entry.field}' was removed",
        ))

    for entry in diff.only_in_second:
        kind = ChangeKind.FIELD_ADDED if entry.descriptor.optional else ChangeKind.REQUIRED_FIELD_ADDED
        changes.append(SchemaChange(
            kind=kind,
            path=f"{prefix}.{entry.field}",
            new_value=entry.descriptor.type.value,
            message=f"Field '{entry.field}' added"
            + ("" if entry.descriptor.optional else " as required"),
        ))

    for shared in diff.in_both:
        changes.extend(_check_field_diff(shared, f"{prefix}.{shared.field}"))

    return changes


def _check_field_diff(shared: SharedField, path: str) -> List[SchemaChange]:
    """Check differences between two versions of a field."""
    changes: List[SchemaChange] = []
    old, new = shared.first, shared.second

    if old.type is not new.type:
        changes.append(SchemaChange(
            kind=ChangeKind.FIELD_TYPE_CHANGED,
            path=path,
            old_value=old.type.value,
            new_value=new.type.value,
            message=f"Field type changed from '{old.type.value}' to '{new.type.value}'",
        ))
    elif old.ref != new.ref:
        changes.append(SchemaChange(
            kind=ChangeKind.FIELD_REF_CHANGED,
            path=path,
            old_value=old.ref,
            new_value=new.ref,
            message=f"Field ref changed from '{old.ref}' to '{new.ref}'",
        ))

    if old.optional and not new.optional:
        changes.append(SchemaChange(
            kind=ChangeKind.FIELD_MADE_REQUIRED,
            path=path,
            message=f"Field '{shared.field}' changed from optional to required",
        ))
    elif not old.optional and new.optional:
        changes.append(SchemaChange(
            kind=ChangeKind.FIELD_MADE_OPTIONAL,
            path=path,
            message=f"Field '{shared.field}' changed from required to optional",
        ))

    if old.nullable and not new.nullable:
        changes.append(SchemaChange(
            kind=ChangeKind.FIELD_MADE_NON_NULLABLE,
            path=path,
            message=f"Field '{shared.field}' no longer accepts null",
        ))
    elif not old.nullable and new.nullable:
        changes.append(SchemaChange(
            kind=ChangeKind.FIELD_MADE_NULLABLE,
            path=path,
            message=f"Field '{shared.field}' now accepts null",
        ))

    return changes
