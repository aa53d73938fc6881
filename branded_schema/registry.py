"""
Type Registry for branded-schema.

The TypeRegistry is the central authority for all definitions.
It provides:
- Registration of interface, primitive and opaque entries
- Lookup by id, kind-filtered lookups
- The enum facility and watcher hub consulted during validation
- Schema fingerprinting for consistency checks

Invariants:
    - ids form one flat namespace shared by every kind
    - Re-registering an id with the same kind is a no-op
    - Re-registering an id with a different kind is an error
    - The registry exclusively owns the canonical definition per id

How to change safely:
    - Create one registry per process (or per test) and pass it explicitly
    - Call reset() only from test teardown

Example:
    >>> from branded_schema import TypeRegistry, create_interface_definition, field
    >>> registry = TypeRegistry()
    >>> User = create_interface_definition(registry, "User", {"name": field("string")})
    >>> registry.get_by_id("User").definition is User
    True
"""

from __future__ import annotations

import hashlib
import json
import logging
import threading
from typing import Dict, Iterator, Optional

from .enums import EnumRegistry
from .errors import RegistryCollisionError
from .types import Definition, PrimitiveDefinition, RegistryEntry, RegistryKind
from .watch import WatcherRegistry

logger = logging.getLogger(__name__)


class TypeRegistry:
    """Registry of named definitions keyed by id and tagged by kind.

    Thread-safety:
        - Registration and reset are guarded by an internal lock
        - Lookups are plain dict reads

    Attributes:
        enums: Enum facility used to resolve enum-ref fields
        watchers: Callbacks notified on create/validate events

    Example:
        >>> registry = TypeRegistry()
        >>> registry.register(RegistryEntry("Email", RegistryKind.PRIMITIVE, email_def))
        >>> registry.get_all_ids()
        ['Email']
    """

    def __init__(
        self,
        enums: Optional[EnumRegistry] = None,
        watchers: Optional[WatcherRegistry] = None,
    ) -> None:
        """Initialize an empty registry.

        Args:
            enums: Enum facility (a fresh EnumRegistry if not provided)
            watchers: Watcher hub (a fresh WatcherRegistry if not provided)
        """
        self.enums = enums if enums is not None else EnumRegistry()
        self.watchers = watchers if watchers is not None else WatcherRegistry()
        self._lock = threading.Lock()
        self._entries: Dict[str, RegistryEntry] = {}

    def init(self) -> TypeRegistry:
        """(Re)initialize empty state and return the registry."""
        with self._lock:
            self._entries = {}
        return self

    def register(self, entry: RegistryEntry) -> RegistryEntry:
        """Register an entry.

        Args:
            entry: The entry to register

        Returns:
            The stored entry; on a repeat registration, the one registered first

        Raises:
            RegistryCollisionError: If entry.id is registered under another kind
        """
        with self._lock:
            existing = self._entries.get(entry.id)
            if existing is not None:
                if existing.kind is not entry.kind:
                    raise RegistryCollisionError(
                        entry.id, existing.kind.value, entry.kind.value
                    )
                logger.debug(f"Ignoring repeat registration of {entry.kind.value} '{entry.id}'")
                return existing

            self._entries[entry.id] = entry
            logger.debug(f"Registered {entry.kind.value}: {entry.id}")
            return entry

    def get_by_id(self, type_id: str) -> Optional[RegistryEntry]:
        """Get an entry by id.

        Returns:
            RegistryEntry if found, None otherwise
        """
        return self._entries.get(type_id)

    def get_interface(self, type_id: str) -> Optional[Definition]:
        """Get an interface definition by id, or None if absent or another kind."""
        entry = self._entries.get(type_id)
        if entry is None or entry.kind is not RegistryKind.INTERFACE:
            return None
        return entry.definition

    def get_primitive(self, type_id: str) -> Optional[PrimitiveDefinition]:
        """Get a primitive definition by id, or None if absent or another kind."""
        entry = self._entries.get(type_id)
        if entry is None or entry.kind is not RegistryKind.PRIMITIVE:
            return None
        return entry.definition

    def get_all_ids(self) -> list[str]:
        """All registered ids, regardless of kind, in registration order."""
        return list(self._entries.keys())

    def entries(self) -> Iterator[RegistryEntry]:
        """Iterate over all registered entries."""
        yield from list(self._entries.values())

    def __contains__(self, type_id: object) -> bool:
        return type_id in self._entries

    def __len__(self) -> int:
        return len(self._entries)

    def reset(self) -> None:
        """Remove all entries (for testing only).

        Warning: Definitions created before the reset keep working, but
        references to them can no longer be resolved.
        """
        with self._lock:
            count = len(self._entries)
            self._entries.clear()
        logger.info(f"Type registry reset ({count} entries removed)")

    def to_dict(self) -> dict:
        """Convert registered interfaces and primitives to a dictionary.

        Returns:
            Dictionary with 'interfaces' and 'primitives' lists, sorted by id
            for determinism. Opaque entries carry no schema and are omitted.
        """
        interfaces = []
        primitives = []
        for type_id in sorted(self._entries.keys()):
            entry = self._entries[type_id]
            if entry.kind is RegistryKind.INTERFACE:
                interfaces.append(entry.definition.to_dict())
            elif entry.kind is RegistryKind.PRIMITIVE:
                primitives.append(
                    {"id": entry.id, "base_type": entry.definition.base_type.value}
                )
        return {"interfaces": interfaces, "primitives": primitives}

    def fingerprint(self) -> str:
        """Compute SHA-256 fingerprint of the registered schemas.

        Returns:
            Fingerprint string in format 'sha256:<hash>'
        """
        canonical = json.dumps(self.to_dict(), sort_keys=True, separators=(",", ":"))
        hash_bytes = hashlib.sha256(canonical.encode("utf-8")).hexdigest()
        return f"sha256:{hash_bytes}"
