"""
Core type definitions for the branded-schema system.

This module defines the foundational types for branded records:
- FieldType: Tag of a field descriptor (primitive, container, or reference)
- FieldDescriptor: Individual field within a schema
- Definition: Registered interface definition (schema + create + validate)
- PrimitiveDefinition: Registered refinement of a primitive base type
- Instance: Validated, read-only data envelope tagged with its definition
- RegistryEntry / MigrationEdge: Records held by the registries

Invariants:
    - Definitions are immutable once built; deriving a shape makes a new id
    - A descriptor's payload (ref, items) is only valid for its tag
    - Instance metadata never appears among the instance's keys

How to change safely:
    - Add new field types to FieldType and to every dispatch in validate.py
    - Never mutate a schema mapping after a definition is registered

Example:
    >>> from branded_schema.types import field
    >>> schema = {
    ...     "name": field("string"),
    ...     "tags": field("array", items=field("string"), optional=True),
    ... }
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass
from dataclasses import field as dataclass_field
from enum import Enum
from types import MappingProxyType
from typing import Any, Callable, Iterator, Optional, Union


class _Missing:
    """Sentinel type for a field that is absent from the input."""

    _instance: Optional[_Missing] = None

    def __new__(cls) -> _Missing:
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __repr__(self) -> str:
        return "MISSING"

    def __bool__(self) -> bool:
        return False


MISSING = _Missing()


class FieldType(Enum):
    """Supported field types in a schema.

    The three ``*-ref`` types resolve a referenced definition by id at
    validation time.
    """

    STRING = "string"
    NUMBER = "number"
    BOOLEAN = "boolean"
    OBJECT = "object"
    ARRAY = "array"
    ENUM_REF = "enum-ref"
    INTERFACE_REF = "interface-ref"
    PRIMITIVE_REF = "primitive-ref"

    @property
    def is_ref(self) -> bool:
        """Whether this type resolves a referenced definition."""
        return self in (FieldType.ENUM_REF, FieldType.INTERFACE_REF, FieldType.PRIMITIVE_REF)

    @property
    def is_primitive(self) -> bool:
        """Whether this type is a primitive base type."""
        return self in (FieldType.STRING, FieldType.NUMBER, FieldType.BOOLEAN)

    @classmethod
    def from_str(cls, value: str) -> FieldType:
        """Convert string representation to FieldType.

        Args:
            value: String name of the field type

        Returns:
            Corresponding FieldType enum value

        Raises:
            ValueError: If value is not a valid field type
        """
        for kind in cls:
            if kind.value == value:
                return kind
        valid = [k.value for k in cls]
        raise ValueError(f"Invalid field type '{value}'. Valid types: {valid}")


class RegistryKind(Enum):
    """Kinds of entries held in a TypeRegistry."""

    INTERFACE = "interface"
    PRIMITIVE = "primitive"
    OPAQUE = "opaque"


@dataclass(frozen=True)
class FieldDescriptor:
    """Definition of a single field within a schema.

    Attributes:
        type: The field type tag
        optional: Whether the field may be absent
        nullable: Whether the field may be None
        ref: Referenced definition id (ref types only)
        items: Element descriptor (array type only)
        validate: Extra predicate run after the type check
        description: Human-readable description

    Invariants:
        - items is only set when type is ARRAY
        - ref is only set when type is a ref type
        - a ref type without ref is allowed here but never validates

    Example:
        >>> FieldDescriptor(type=FieldType.STRING, optional=True)
    """

    type: FieldType
    optional: bool = False
    nullable: bool = False
    ref: Optional[str] = None
    items: Optional[FieldDescriptor] = None
    validate: Optional[Callable[[Any], bool]] = dataclass_field(default=None, compare=False)
    description: str = dataclass_field(default="", compare=False)

    def __post_init__(self) -> None:
        """Validate that the payload matches the tag."""
        if isinstance(self.type, str):
            object.__setattr__(self, "type", FieldType.from_str(self.type))
        if self.items is not None and self.type is not FieldType.ARRAY:
            raise ValueError(f"items is only valid for array fields, not '{self.type.value}'")
        if self.ref is not None and not self.type.is_ref:
            raise ValueError(f"ref is only valid for reference fields, not '{self.type.value}'")

    def same_type(self, other: FieldDescriptor) -> bool:
        """Whether two descriptors carry the same type tag and reference."""
        if self.type is not other.type:
            return False
        if self.ref is not None or other.ref is not None:
            return self.ref == other.ref
        return True

    def replace(self, **changes: Any) -> FieldDescriptor:
        """Return a copy with the given attributes changed."""
        values = {
            "type": self.type,
            "optional": self.optional,
            "nullable": self.nullable,
            "ref": self.ref,
            "items": self.items,
            "validate": self.validate,
            "description": self.description,
        }
        values.update(changes)
        return FieldDescriptor(**values)

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary representation (predicates are dropped)."""
        result: dict[str, Any] = {"type": self.type.value}
        if self.optional:
            result["optional"] = True
        if self.nullable:
            result["nullable"] = True
        if self.ref is not None:
            result["ref"] = self.ref
        if self.items is not None:
            result["items"] = self.items.to_dict()
        if self.description:
            result["description"] = self.description
        return result

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> FieldDescriptor:
        """Create from dictionary representation."""
        items = data.get("items")
        if items is not None and not isinstance(items, FieldDescriptor):
            items = cls.from_dict(items)
        return cls(
            type=FieldType.from_str(data["type"]) if isinstance(data["type"], str) else data["type"],
            optional=data.get("optional", False),
            nullable=data.get("nullable", False),
            ref=data.get("ref"),
            items=items,
            validate=data.get("validate"),
            description=data.get("description", ""),
        )


def field(
    type: Union[str, FieldType],
    *,
    optional: bool = False,
    nullable: bool = False,
    ref: Optional[str] = None,
    items: Optional[FieldDescriptor] = None,
    validate: Optional[Callable[[Any], bool]] = None,
    description: str = "",
) -> FieldDescriptor:
    """Convenience function to create a FieldDescriptor.

    Args:
        type: Field type (string or FieldType enum)
        optional: Whether the field may be absent
        nullable: Whether the field may be None
        ref: Referenced definition id for ref types
        items: Element descriptor for arrays
        validate: Extra predicate
        description: Human-readable description

    Returns:
        FieldDescriptor instance

    Example:
        >>> email = field("primitive-ref", ref="Email")
        >>> scores = field("array", items=field("number"))
    """
    if isinstance(type, str):
        type = FieldType.from_str(type)
    return FieldDescriptor(
        type=type,
        optional=optional,
        nullable=nullable,
        ref=ref,
        items=items,
        validate=validate,
        description=description,
    )


Schema = Mapping[str, FieldDescriptor]
SchemaInput = Mapping[str, Union[FieldDescriptor, Mapping[str, Any]]]


def normalize_schema(schema: SchemaInput) -> Mapping[str, FieldDescriptor]:
    """Copy a schema into a read-only mapping of FieldDescriptors.

    Dict-form descriptors are converted with FieldDescriptor.from_dict.

    Raises:
        TypeError: If an entry is neither a descriptor nor a mapping
    """
    normalized: dict[str, FieldDescriptor] = {}
    for name, descriptor in schema.items():
        if isinstance(descriptor, FieldDescriptor):
            normalized[name] = descriptor
        elif isinstance(descriptor, Mapping):
            normalized[name] = FieldDescriptor.from_dict(descriptor)
        else:
            raise TypeError(
                f"Schema entry '{name}' must be a FieldDescriptor or mapping, "
                f"got {type(descriptor).__name__}"
            )
    return MappingProxyType(normalized)


def schema_to_dict(schema: Schema) -> dict[str, dict[str, Any]]:
    """Convert a schema to its plain-dict form."""
    return {name: descriptor.to_dict() for name, descriptor in schema.items()}


@dataclass(frozen=True)
class InstanceMeta:
    """Out-of-band tags of an Instance.

    Attributes:
        definition_id: Id of the definition that created the instance
        schema_snapshot: The schema the data was validated against
        version: Version of that definition
    """

    definition_id: str
    schema_snapshot: Schema
    version: int = 1


@dataclass(frozen=True, eq=False)
class Instance(Mapping):
    """A validated, read-only record tagged with the definition that made it.

    The instance reads like a mapping over its data only: ``keys()``,
    iteration and ``len()`` never expose the metadata, which lives on
    ``meta``. ``to_dict()`` unwraps a plain copy for serialization.

    Example:
        >>> user = User.create({"name": "Alice"})
        >>> user["name"]
        'Alice'
        >>> user.meta.definition_id
        'User'
    """

    data: Mapping[str, Any]
    meta: InstanceMeta

    def __post_init__(self) -> None:
        object.__setattr__(self, "data", MappingProxyType(dict(self.data)))

    @property
    def definition_id(self) -> str:
        """Id of the definition that created this instance."""
        return self.meta.definition_id

    def __getitem__(self, key: str) -> Any:
        return self.data[key]

    def __iter__(self) -> Iterator[str]:
        return iter(self.data)

    def __len__(self) -> int:
        return len(self.data)

    def to_dict(self) -> dict[str, Any]:
        """Plain copy of the data, without metadata."""
        return dict(self.data)

    def __repr__(self) -> str:
        return f"Instance({self.meta.definition_id}, {dict(self.data)!r})"


@dataclass(frozen=True)
class Definition:
    """Registered definition of a branded interface.

    Attributes:
        id: Unique identifier in the registry
        schema: Read-only field schema
        version: Schema version (defaults to 1)
        family: Id under which migration edges are registered
        create: Validates a mapping and returns an Instance (raises on failure)
        validate: Same checks as create, returns bool
        check: Accumulating check returning (is_valid, errors)

    Invariants:
        - id is unique across all registry kinds
        - schema is never mutated after registration
    """

    id: str
    schema: Schema
    version: int
    family: str
    create: Callable[[Any], Instance] = dataclass_field(repr=False, compare=False)
    validate: Callable[[Any], bool] = dataclass_field(repr=False, compare=False)
    check: Callable[[Any], "tuple[bool, list[str]]"] = dataclass_field(repr=False, compare=False)

    @property
    def field_names(self) -> list[str]:
        """Names of all fields in the schema."""
        return list(self.schema.keys())

    def required_fields(self) -> list[str]:
        """Names of the fields that are not optional."""
        return [name for name, d in self.schema.items() if not d.optional]

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary representation."""
        return {
            "id": self.id,
            "version": self.version,
            "schema": schema_to_dict(self.schema),
        }

    def __hash__(self) -> int:
        """Hash based on id (stable identifier)."""
        return hash(self.id)


@dataclass(frozen=True)
class PrimitiveDefinition:
    """Registered refinement of a primitive base type.

    Attributes:
        id: Unique identifier in the registry
        base_type: STRING, NUMBER, or BOOLEAN
        predicate: Optional refinement predicate
        create: Returns the value unchanged if it is valid (raises otherwise)
        validate: Same checks as create, returns bool
    """

    id: str
    base_type: FieldType
    predicate: Optional[Callable[[Any], bool]] = dataclass_field(repr=False, compare=False)
    create: Callable[[Any], Any] = dataclass_field(repr=False, compare=False)
    validate: Callable[[Any], bool] = dataclass_field(repr=False, compare=False)

    def __hash__(self) -> int:
        return hash(self.id)


@dataclass(frozen=True)
class RegistryEntry:
    """A single entry in a TypeRegistry.

    Attributes:
        id: Registered id
        kind: Entry kind (interface, primitive, opaque)
        definition: The registered definition object
    """

    id: str
    kind: RegistryKind
    definition: Any


MigrationFn = Callable[[dict[str, Any]], dict[str, Any]]


@dataclass(frozen=True)
class MigrationEdge:
    """A registered transform between two versions of one family."""

    from_version: int
    to_version: int
    transform: MigrationFn = dataclass_field(repr=False, compare=False)
