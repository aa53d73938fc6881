"""
Enum value-set registry consumed by enum-ref validation.

An ``enum-ref`` field resolves its ``ref`` through ``lookup_enum_by_id``.
Value sets can be registered from any iterable of values or from a Python
``enum.Enum`` class (member values form the set).

Example:
    >>> enums = EnumRegistry()
    >>> enums.register("Status", ["active", "inactive"])
    >>> enums.lookup_enum_by_id("Status").contains("active")
    True
"""

from __future__ import annotations

import enum
import logging
import threading
from dataclasses import dataclass
from typing import Any, Dict, Iterable, Optional, Union

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class EnumValueSet:
    """A registered, immutable set of allowed values."""

    id: str
    values: frozenset

    def contains(self, value: Any) -> bool:
        """Whether value is a member of the set.

        Members of a registered ``enum.Enum`` match by their value.
        """
        if isinstance(value, enum.Enum):
            value = value.value
        try:
            return value in self.values
        except TypeError:
            # unhashable values are never members
            return False


class EnumRegistry:
    """Registry of enum value sets, keyed by id.

    Registration is idempotent for an identical value set; a differing value
    set under an existing id is rejected.
    """

    def __init__(self) -> None:
        self._enums: Dict[str, EnumValueSet] = {}
        self._lock = threading.Lock()

    def register(
        self,
        enum_id: str,
        values: Union[Iterable[Any], type[enum.Enum]],
    ) -> EnumValueSet:
        """Register a value set.

        Args:
            enum_id: Id referenced by enum-ref fields
            values: Iterable of values, or an Enum class

        Returns:
            The registered EnumValueSet

        Raises:
            ValueError: If enum_id is registered with different values
        """
        if isinstance(values, type) and issubclass(values, enum.Enum):
            value_set = frozenset(member.value for member in values)
        else:
            value_set = frozenset(values)

        with self._lock:
            existing = self._enums.get(enum_id)
            if existing is not None:
                if existing.values != value_set:
                    raise ValueError(
                        f"Enum '{enum_id}' already registered with values {sorted(map(str, existing.values))}"
                    )
                return existing
            entry = EnumValueSet(id=enum_id, values=value_set)
            self._enums[enum_id] = entry
            logger.debug(f"Registered enum: {enum_id} ({len(value_set)} values)")
            return entry

    def lookup_enum_by_id(self, enum_id: str) -> Optional[EnumValueSet]:
        """Get a value set by id, or None if not registered."""
        return self._enums.get(enum_id)

    def get_all_ids(self) -> list[str]:
        """All registered enum ids."""
        return list(self._enums.keys())

    def reset(self) -> None:
        """Remove all registered value sets (for testing only)."""
        with self._lock:
            self._enums.clear()
