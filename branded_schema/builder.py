"""
Fluent builder for branded interface definitions.

Each call returns a new builder with the accumulated schema; builders are
never mutated, so a partially-built builder can be shared and branched.

Example:
    >>> User = (
    ...     create_builder(registry, "User")
    ...     .field("name", field("string"))
    ...     .optional("nickname", field("string"))
    ...     .build()
    ... )
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass
from dataclasses import field as dataclass_field
from types import MappingProxyType
from typing import Any, Optional, Union

from .errors import SchemaDefinitionError
from .factory import create_interface_definition
from .registry import TypeRegistry
from .types import Definition, FieldDescriptor


@dataclass(frozen=True)
class InterfaceBuilder:
    """Immutable, incremental schema builder.

    Attributes:
        registry: Registry the built definition is registered in
        interface_id: Id of the definition to build
        schema: Fields accumulated so far
        schema_version: Version passed to the factory
    """

    registry: TypeRegistry = dataclass_field(repr=False, compare=False)
    interface_id: str
    schema: Mapping[str, FieldDescriptor] = dataclass_field(
        default_factory=lambda: MappingProxyType({})
    )
    schema_version: Optional[int] = None

    def field(
        self, name: str, descriptor: Union[FieldDescriptor, Mapping[str, Any]]
    ) -> InterfaceBuilder:
        """Return a builder with one more field."""
        if not isinstance(descriptor, FieldDescriptor):
            descriptor = FieldDescriptor.from_dict(descriptor)
        return self._with_field(name, descriptor)

    def optional(
        self, name: str, descriptor: Union[FieldDescriptor, Mapping[str, Any]]
    ) -> InterfaceBuilder:
        """Return a builder with one more field, forced optional."""
        if not isinstance(descriptor, FieldDescriptor):
            descriptor = FieldDescriptor.from_dict(descriptor)
        return self._with_field(name, descriptor.replace(optional=True))

    def version(self, version: int) -> InterfaceBuilder:
        """Return a builder that builds at the given version."""
        return InterfaceBuilder(
            registry=self.registry,
            interface_id=self.interface_id,
            schema=self.schema,
            schema_version=version,
        )

    def _with_field(self, name: str, descriptor: FieldDescriptor) -> InterfaceBuilder:
        schema = dict(self.schema)
        schema[name] = descriptor
        return InterfaceBuilder(
            registry=self.registry,
            interface_id=self.interface_id,
            schema=MappingProxyType(schema),
            schema_version=self.schema_version,
        )

    def build(self) -> Definition:
        """Create the definition.

        Raises:
            SchemaDefinitionError: If no fields were added
        """
        if not self.schema:
            raise SchemaDefinitionError(
                f"Builder for '{self.interface_id}' has no fields defined. "
                "Add at least one field before calling build().",
                interface_id=self.interface_id,
            )
        return create_interface_definition(
            self.registry,
            self.interface_id,
            self.schema,
            version=self.schema_version if self.schema_version is not None else 1,
        )


def create_builder(registry: TypeRegistry, interface_id: str) -> InterfaceBuilder:
    """Start an empty builder for interface_id."""
    return InterfaceBuilder(registry=registry, interface_id=interface_id)
