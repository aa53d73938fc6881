"""
branded-schema: branded interface definitions for Python.

This package provides runtime-checked record types, including:
- Definitions built from field schemas (create / validate / check)
- Branded primitives refined by predicates
- A registry resolving enum, interface and primitive references
- Composition, projection and structural comparison of definitions
- Versioned migrations with shortest-path search
- Codec pipelines, guards, JSON serialization and event watchers

Invariants:
    - Every definition lives in exactly one explicitly passed TypeRegistry
    - Instances are immutable and carry their definition out of band
    - Derived definitions never alias a source schema

How to change safely:
    - Add new shapes with new ids; never re-register an id with a new schema
    - Bump version and register a migration when a shape changes
    - Run check_compatibility between versions before shipping
"""

from .builder import InterfaceBuilder, create_builder
from .codec import CodecFailure, CodecPipeline, CodecSuccess, create_codec
from .compat import (
    ChangeKind,
    InterfaceDiff,
    InterfaceIntersection,
    SchemaChange,
    check_compatibility,
    interface_diff,
    interface_intersect,
    is_subtype,
)
from .compose import (
    compose_interfaces,
    extend_interface,
    omit_fields,
    partial_interface,
    pick_fields,
)
from .config import Settings, setup_logging
from .enums import EnumRegistry, EnumValueSet
from .errors import (
    BrandedSchemaError,
    CodecStepFailedError,
    CompositionError,
    CustomPredicateFailedError,
    DuplicateFieldError,
    FieldConflictError,
    MigrationError,
    MissingFieldError,
    NoMigrationPathError,
    RefNotRegisteredError,
    RegistryCollisionError,
    SchemaDefinitionError,
    SchemaValidationError,
    TypeMismatchError,
    UnknownFieldError,
)
from .factory import create_interface_definition, create_primitive_definition
from .guards import (
    SafeParseResult,
    assert_of_interface,
    get_interface_fields,
    get_interface_id,
    get_interface_schema,
    interface_field_count,
    is_of_interface,
    is_of_primitive,
    safe_parse_interface,
)
from .refinements import Refinements, register_refinements
from .registry import TypeRegistry
from .serializer import DeserializeResult, InterfaceSerializer
from .types import (
    Definition,
    FieldDescriptor,
    FieldType,
    Instance,
    InstanceMeta,
    MigrationEdge,
    PrimitiveDefinition,
    RegistryEntry,
    RegistryKind,
    field,
)
from .versioning import MigrationRegistry
from .watch import InterfaceEvent, WatcherRegistry

__all__ = [
    # Types
    "FieldType",
    "FieldDescriptor",
    "field",
    "Definition",
    "PrimitiveDefinition",
    "Instance",
    "InstanceMeta",
    "RegistryEntry",
    "RegistryKind",
    "MigrationEdge",
    # Registry
    "TypeRegistry",
    "EnumRegistry",
    "EnumValueSet",
    "WatcherRegistry",
    "InterfaceEvent",
    # Factory
    "create_interface_definition",
    "create_primitive_definition",
    "create_builder",
    "InterfaceBuilder",
    "register_refinements",
    "Refinements",
    # Composition
    "compose_interfaces",
    "extend_interface",
    "partial_interface",
    "pick_fields",
    "omit_fields",
    "interface_diff",
    "interface_intersect",
    "InterfaceDiff",
    "InterfaceIntersection",
    "is_subtype",
    "ChangeKind",
    "SchemaChange",
    "check_compatibility",
    # Versioning
    "MigrationRegistry",
    # Codec, guards, serialization
    "create_codec",
    "CodecPipeline",
    "CodecSuccess",
    "CodecFailure",
    "is_of_interface",
    "assert_of_interface",
    "safe_parse_interface",
    "SafeParseResult",
    "is_of_primitive",
    "get_interface_id",
    "get_interface_schema",
    "get_interface_fields",
    "interface_field_count",
    "InterfaceSerializer",
    "DeserializeResult",
    # Config
    "Settings",
    "setup_logging",
    # Errors
    "BrandedSchemaError",
    "RegistryCollisionError",
    "SchemaDefinitionError",
    "SchemaValidationError",
    "MissingFieldError",
    "TypeMismatchError",
    "RefNotRegisteredError",
    "CustomPredicateFailedError",
    "CompositionError",
    "DuplicateFieldError",
    "FieldConflictError",
    "UnknownFieldError",
    "MigrationError",
    "NoMigrationPathError",
    "CodecStepFailedError",
]
