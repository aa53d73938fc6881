"""
Versioning and migration of branded instances.

Migration edges are registered per definition family (the definition id,
unless the definition was created with an explicit family). migrate()
searches the edges breadth-first for the shortest chain from the instance's
version to the target version, applies the transforms in order to the
instance's plain data and brands the result at the target version.

Invariants:
    - Path search terminates on cyclic edge graphs
    - The path found uses the fewest transforms
    - Transforms receive and return plain dicts; no validation between steps
    - The result is validated once, by the target definition's create()

How to change safely:
    - Register a definition at the target version (same family) to control
      the migrated shape; otherwise a schema is inferred from the data
    - Enable strict_migrations to forbid inference

Example:
    >>> migrations = MigrationRegistry(registry)
    >>> migrations.add_migration(User, 1, 2, lambda d: {**d, "updated": True})
    >>> migrations.migrate(User.create({"name": "Alice"}), 2).to_dict()
    {'name': 'Alice', 'updated': True}
"""

from __future__ import annotations

import logging
import threading
from collections import deque
from collections.abc import Mapping
from typing import Any, Dict, List, Optional

from .config import Settings
from .errors import MigrationError, NoMigrationPathError
from .factory import create_interface_definition
from .registry import TypeRegistry
from .types import Definition, FieldDescriptor, FieldType, Instance, MigrationEdge, MigrationFn

logger = logging.getLogger(__name__)


def versioned_id(family: str, version: int) -> str:
    """Id under which a family's definition at version is registered."""
    return f"{family}__v{version}"


def infer_field_descriptor(name: str, value: Any) -> FieldDescriptor:
    """Map a Python value to a FieldDescriptor.

    Checks bool before int since bool is a subclass of int. None infers a
    nullable object field.

    Raises:
        MigrationError: If no field type describes the value
    """
    if value is None:
        return FieldDescriptor(type=FieldType.OBJECT, nullable=True)
    if isinstance(value, bool):
        return FieldDescriptor(type=FieldType.BOOLEAN)
    if isinstance(value, (int, float)):
        return FieldDescriptor(type=FieldType.NUMBER)
    if isinstance(value, str):
        return FieldDescriptor(type=FieldType.STRING)
    if isinstance(value, (list, tuple)):
        return FieldDescriptor(type=FieldType.ARRAY)
    if isinstance(value, Mapping):
        return FieldDescriptor(type=FieldType.OBJECT)
    raise MigrationError(
        f"Cannot infer a field type for '{name}' from value of type {type(value).__name__}"
    )


def infer_schema(data: Mapping[str, Any]) -> Dict[str, FieldDescriptor]:
    """Infer a schema from the runtime shape of data.

    The inferred schema marks every field required and never nests: arrays
    and objects become untyped containers.
    """
    return {name: infer_field_descriptor(name, value) for name, value in data.items()}


def find_migration_path(
    edges: List[MigrationEdge],
    from_version: int,
    to_version: int,
) -> Optional[List[MigrationEdge]]:
    """Find the shortest chain of edges from one version to another.

    Breadth-first search; edges are tried in registration order so the
    earliest registered of several equally short paths wins.

    Returns:
        The edges to apply in order, or None if no path exists
    """
    if from_version == to_version:
        return []

    queue: deque[tuple[int, List[MigrationEdge]]] = deque([(from_version, [])])
    visited = {from_version}

    while queue:
        current, path = queue.popleft()
        for edge in edges:
            if edge.from_version != current or edge.to_version in visited:
                continue
            next_path = path + [edge]
            if edge.to_version == to_version:
                return next_path
            visited.add(edge.to_version)
            queue.append((edge.to_version, next_path))

    return None


class MigrationRegistry:
    """Registry of migration edges plus the migrate() operation.

    Thread-safety:
        - Edge registration and reset are guarded by an internal lock
        - migrate() reads a snapshot of the family's edge list

    Attributes:
        registry: Registry used to resolve and register definitions
        settings: Configuration (strict_migrations)
    """

    def __init__(self, registry: TypeRegistry, settings: Optional[Settings] = None) -> None:
        """Initialize with no edges.

        Args:
            registry: Registry the migrated definitions live in
            settings: Configuration (loaded from env if not provided)
        """
        self.registry = registry
        self.settings = settings or Settings()
        self._edges: Dict[str, List[MigrationEdge]] = {}
        self._lock = threading.Lock()

    def add_migration(
        self,
        definition: Definition,
        from_version: int,
        to_version: int,
        transform: MigrationFn,
    ) -> MigrationEdge:
        """Register a transform between two versions of definition's family.

        Reachability from the definition's own version is not checked here;
        migrate() finds out when it searches for a path.
        """
        edge = MigrationEdge(from_version=from_version, to_version=to_version, transform=transform)
        with self._lock:
            self._edges.setdefault(definition.family, []).append(edge)
        logger.debug(
            f"Registered migration for '{definition.family}': v{from_version} -> v{to_version}"
        )
        return edge

    def get_migrations(self, family: str) -> List[MigrationEdge]:
        """Edges registered for a family, in registration order."""
        with self._lock:
            return list(self._edges.get(family, ()))

    def find_path(
        self,
        family: str,
        from_version: int,
        to_version: int,
    ) -> Optional[List[MigrationEdge]]:
        """Shortest edge chain for a family, or None."""
        return find_migration_path(self.get_migrations(family), from_version, to_version)

    def migrate(self, instance: Instance, target_version: int) -> Instance:
        """Migrate an instance to target_version.

        Args:
            instance: Instance created by a registered definition
            target_version: Desired version

        Returns:
            The same instance if already at target_version, otherwise a new
            instance of the target-version definition

        Raises:
            MigrationError: If the instance cannot be traced to a registered
                definition, a transform returns a non-mapping, or no target
                definition exists while strict_migrations is on
            NoMigrationPathError: If no edge chain connects the versions
            SchemaValidationError: If migrated data fails a registered target
                definition
        """
        if not isinstance(instance, Instance):
            raise MigrationError(
                f"Cannot migrate: expected an Instance, got {type(instance).__name__}"
            )

        definition = self.registry.get_interface(instance.definition_id)
        if definition is None:
            raise MigrationError(
                f"Cannot migrate: interface '{instance.definition_id}' is not registered",
                interface_id=instance.definition_id,
            )

        current_version = definition.version
        if current_version == target_version:
            return instance

        path = self.find_path(definition.family, current_version, target_version)
        if path is None:
            raise NoMigrationPathError(definition.id, current_version, target_version)

        data: Dict[str, Any] = instance.to_dict()
        for edge in path:
            result = edge.transform(data)
            if not isinstance(result, Mapping):
                raise MigrationError(
                    f"Migration v{edge.from_version} -> v{edge.to_version} for "
                    f"'{definition.family}' returned {type(result).__name__}, expected a mapping",
                    interface_id=definition.id,
                )
            data = dict(result)

        logger.debug(
            f"Migrated '{definition.id}' v{current_version} -> v{target_version} "
            f"in {len(path)} step(s)"
        )
        target = self._target_definition(definition.family, target_version, data)
        return target.create(data)

    def _target_definition(
        self,
        family: str,
        target_version: int,
        data: Dict[str, Any],
    ) -> Definition:
        """Resolve (or synthesize) the family's definition at target_version."""
        own = self.registry.get_interface(family)
        if own is not None and own.version == target_version:
            return own

        target_id = versioned_id(family, target_version)
        registered = self.registry.get_interface(target_id)
        if registered is not None:
            return registered

        if self.settings.strict_migrations:
            raise MigrationError(
                f"No definition registered for '{family}' at version {target_version} "
                f"(expected '{target_id}')",
                interface_id=family,
                details={"target_version": target_version},
            )

        logger.debug(f"Synthesizing '{target_id}' from migrated data")
        return create_interface_definition(
            self.registry,
            target_id,
            infer_schema(data),
            version=target_version,
            family=family,
        )

    def reset(self) -> None:
        """Remove all migration edges (for testing only)."""
        with self._lock:
            self._edges.clear()
        logger.info("Migration registry reset")
