"""
JSON serialization of branded instances.

serialize() writes only the instance's data; deserialize() parses JSON and
re-validates through the definition, so a deserialized value is always a
freshly created Instance.

Example:
    >>> serializer = InterfaceSerializer(User)
    >>> text = serializer.serialize(User.create({"name": "Alice"}))
    >>> serializer.deserialize_or_raise(text)["name"]
    'Alice'
"""

from __future__ import annotations

import json
import logging
from dataclasses import dataclass
from typing import Any, Optional, Union

from .errors import BrandedSchemaError
from .types import Definition, Instance

logger = logging.getLogger(__name__)

INVALID_JSON = "INVALID_JSON"
VALIDATION_FAILED = "VALIDATION_FAILED"


@dataclass(frozen=True)
class DeserializeResult:
    """Outcome of InterfaceSerializer.deserialize."""

    success: bool
    value: Optional[Instance] = None
    code: Optional[str] = None
    message: str = ""


class InterfaceSerializer:
    """Serializes instances of one definition to and from JSON."""

    def __init__(self, definition: Definition) -> None:
        self.definition = definition

    def serialize(self, instance: Instance) -> str:
        """JSON text of the instance's data (metadata is not written)."""
        return json.dumps(instance.to_dict(), default=_encode_nested)

    def deserialize(self, text: Union[str, bytes]) -> DeserializeResult:
        """Parse and validate, reporting failure as a result."""
        try:
            data = json.loads(text)
        except (json.JSONDecodeError, UnicodeDecodeError, TypeError) as e:
            return DeserializeResult(
                success=False,
                code=INVALID_JSON,
                message=f"Invalid JSON for interface '{self.definition.id}': {e}",
            )

        try:
            instance = self.definition.create(data)
        except BrandedSchemaError as e:
            logger.debug(f"Deserialized data rejected by '{self.definition.id}': {e}")
            return DeserializeResult(success=False, code=VALIDATION_FAILED, message=e.message)
        return DeserializeResult(success=True, value=instance)

    def deserialize_or_raise(self, text: Union[str, bytes]) -> Instance:
        """Parse and validate.

        Raises:
            BrandedSchemaError: With code INVALID_JSON or VALIDATION_FAILED
        """
        result = self.deserialize(text)
        if not result.success:
            raise BrandedSchemaError(
                result.message,
                code=result.code,
                details={"interface_id": self.definition.id},
            )
        return result.value


def _encode_nested(value: Any) -> Any:
    # Nested instances (interface-ref fields) serialize as their data.
    if isinstance(value, Instance):
        return value.to_dict()
    raise TypeError(f"Object of type {type(value).__name__} is not JSON serializable")
