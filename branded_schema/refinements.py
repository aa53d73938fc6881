"""
Common branded primitive refinements.

register_refinements() registers Email, NonEmptyString, PositiveInt,
NonNegativeInt, Url and Uuid in a registry. The predicates are plain
functions so failure messages carry their names.

Example:
    >>> refinements = register_refinements(registry)
    >>> refinements.email.create("a@b.co")
    'a@b.co'
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Any
from urllib.parse import urlparse

from .factory import create_primitive_definition
from .registry import TypeRegistry
from .types import PrimitiveDefinition

_EMAIL_RE = re.compile(r"^[^\s@]+@[^\s@]+\.[^\s@]+$")
_UUID_RE = re.compile(
    r"^[0-9a-f]{8}-[0-9a-f]{4}-4[0-9a-f]{3}-[89ab][0-9a-f]{3}-[0-9a-f]{12}$",
    re.IGNORECASE,
)


def is_email(value: str) -> bool:
    return bool(_EMAIL_RE.match(value))


def is_non_empty_string(value: str) -> bool:
    return len(value.strip()) > 0


def _is_integral(value: Any) -> bool:
    return isinstance(value, int) or (isinstance(value, float) and value.is_integer())


def is_positive_int(value: Any) -> bool:
    return _is_integral(value) and value > 0


def is_non_negative_int(value: Any) -> bool:
    return _is_integral(value) and value >= 0


def is_url(value: str) -> bool:
    """Absolute URL with a scheme and a network location."""
    try:
        parsed = urlparse(value)
    except ValueError:
        return False
    return bool(parsed.scheme) and bool(parsed.netloc)


def is_uuid(value: str) -> bool:
    """Version 4 UUID in canonical hyphenated form, any case."""
    return bool(_UUID_RE.match(value))


@dataclass(frozen=True)
class Refinements:
    """The registered refinement definitions."""

    email: PrimitiveDefinition
    non_empty_string: PrimitiveDefinition
    positive_int: PrimitiveDefinition
    non_negative_int: PrimitiveDefinition
    url: PrimitiveDefinition
    uuid: PrimitiveDefinition


def register_refinements(registry: TypeRegistry) -> Refinements:
    """Register the common refinements in registry (idempotent)."""
    return Refinements(
        email=create_primitive_definition(registry, "Email", "string", is_email),
        non_empty_string=create_primitive_definition(
            registry, "NonEmptyString", "string", is_non_empty_string
        ),
        positive_int=create_primitive_definition(
            registry, "PositiveInt", "number", is_positive_int
        ),
        non_negative_int=create_primitive_definition(
            registry, "NonNegativeInt", "number", is_non_negative_int
        ),
        url=create_primitive_definition(registry, "Url", "string", is_url),
        uuid=create_primitive_definition(registry, "Uuid", "string", is_uuid),
    )
