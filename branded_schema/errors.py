"""
Error types for branded-schema.

This module defines all exception types raised by the engine:
- BrandedSchemaError: Base exception
- RegistryCollisionError: Same id registered under two kinds
- SchemaValidationError and subclasses: Field-level validation failures
- CompositionError and subclasses: Schema algebra failures
- MigrationError / NoMigrationPathError: Versioning failures
- CodecStepFailedError: Codec pipeline failures

Invariants:
    - All errors inherit from BrandedSchemaError
    - Errors include context for debugging (field, owning id, referenced id)
    - Error messages are actionable
"""

from __future__ import annotations

from typing import Any, Dict, List, Optional


class BrandedSchemaError(Exception):
    """Base exception for all branded-schema errors.

    Attributes:
        message: Error message
        code: Error code for programmatic handling
        details: Additional error context
    """

    def __init__(
        self,
        message: str,
        code: Optional[str] = None,
        details: Optional[Dict[str, Any]] = None,
    ) -> None:
        super().__init__(message)
        self.message = message
        self.code = code or "BRANDED_SCHEMA_ERROR"
        self.details = details or {}


class SchemaDefinitionError(BrandedSchemaError):
    """A definition could not be built from the given input.

    Raised when:
    - A builder is asked to build with no fields
    - A schema entry is neither a FieldDescriptor nor a descriptor dict
    """

    def __init__(self, message: str, interface_id: Optional[str] = None) -> None:
        super().__init__(
            message,
            code="SCHEMA_DEFINITION_ERROR",
            details={"interface_id": interface_id},
        )
        self.interface_id = interface_id


class RegistryCollisionError(BrandedSchemaError):
    """An id is already registered under a different kind.

    Attributes:
        type_id: The colliding id
        existing_kind: Kind already registered for the id
        attempted_kind: Kind of the rejected registration
    """

    def __init__(self, type_id: str, existing_kind: str, attempted_kind: str) -> None:
        super().__init__(
            f"Registry id collision: '{type_id}' is already registered as kind "
            f"'{existing_kind}' but attempted to register as kind '{attempted_kind}'",
            code="REGISTRY_COLLISION",
            details={
                "type_id": type_id,
                "existing_kind": existing_kind,
                "attempted_kind": attempted_kind,
            },
        )
        self.type_id = type_id
        self.existing_kind = existing_kind
        self.attempted_kind = attempted_kind


class SchemaValidationError(BrandedSchemaError):
    """Data failed validation against a schema.

    Attributes:
        field_name: The field that failed (indexed as ``name[i]`` for arrays)
        interface_id: The definition that owns the schema
    """

    default_code = "VALIDATION_ERROR"

    def __init__(
        self,
        message: str,
        field_name: Optional[str] = None,
        interface_id: Optional[str] = None,
        details: Optional[Dict[str, Any]] = None,
    ) -> None:
        merged = {"field": field_name, "interface_id": interface_id}
        merged.update(details or {})
        super().__init__(message, code=self.default_code, details=merged)
        self.field_name = field_name
        self.interface_id = interface_id


class MissingFieldError(SchemaValidationError):
    """A required field is absent."""

    default_code = "MISSING_FIELD"


class TypeMismatchError(SchemaValidationError):
    """A value has the wrong runtime type, or is null where null is not allowed."""

    default_code = "TYPE_MISMATCH"


class RefNotRegisteredError(SchemaValidationError):
    """A reference field points at an id that is not registered.

    Also raised for ref-typed descriptors that carry no ref at all.
    """

    default_code = "REF_NOT_REGISTERED"

    def __init__(
        self,
        message: str,
        field_name: Optional[str] = None,
        interface_id: Optional[str] = None,
        ref_id: Optional[str] = None,
    ) -> None:
        super().__init__(
            message,
            field_name=field_name,
            interface_id=interface_id,
            details={"ref_id": ref_id},
        )
        self.ref_id = ref_id


class CustomPredicateFailedError(SchemaValidationError):
    """A descriptor's custom validate predicate rejected the value."""

    default_code = "CUSTOM_PREDICATE_FAILED"


class CompositionError(BrandedSchemaError):
    """Base class for schema algebra failures."""

    def __init__(
        self,
        message: str,
        code: str = "COMPOSITION_ERROR",
        details: Optional[Dict[str, Any]] = None,
    ) -> None:
        super().__init__(message, code=code, details=details)


class DuplicateFieldError(CompositionError):
    """A field occurs in more than one source during composition.

    Attributes:
        field_name: The duplicated field
        first_source: Id of the definition that contributed the field first
        second_source: Id of the definition that contributed it again
    """

    def __init__(
        self,
        field_name: str,
        first_source: str,
        second_source: str,
        new_id: str,
    ) -> None:
        super().__init__(
            f"Duplicate field '{field_name}' found in definitions '{first_source}' "
            f"and '{second_source}' during composition of '{new_id}'",
            code="DUPLICATE_FIELD",
            details={
                "field_name": field_name,
                "first_source": first_source,
                "second_source": second_source,
                "new_id": new_id,
            },
        )
        self.field_name = field_name
        self.first_source = first_source
        self.second_source = second_source
        self.new_id = new_id


class FieldConflictError(CompositionError):
    """An extension field collides with a field of the base definition."""

    def __init__(self, field_name: str, base_id: str, new_id: str) -> None:
        super().__init__(
            f"Field '{field_name}' conflicts with existing field in base definition "
            f"'{base_id}' during extension to '{new_id}'",
            code="FIELD_CONFLICT",
            details={"field_name": field_name, "base_id": base_id, "new_id": new_id},
        )
        self.field_name = field_name
        self.base_id = base_id
        self.new_id = new_id


class UnknownFieldError(CompositionError):
    """A projection names a field the source definition does not have.

    Includes suggestions for similar field names.

    Attributes:
        field_name: The unknown field
        interface_id: The source definition
        suggestions: Similar field names
    """

    def __init__(
        self,
        field_name: str,
        interface_id: str,
        operation: str,
        new_id: str,
        suggestions: Optional[List[str]] = None,
    ) -> None:
        suggestions = suggestions or []
        msg = (
            f"Unknown field '{field_name}' in definition '{interface_id}' "
            f"during {operation} for '{new_id}'"
        )
        if suggestions:
            msg += f". Did you mean: {', '.join(suggestions)}?"

        super().__init__(
            msg,
            code="UNKNOWN_FIELD",
            details={
                "field_name": field_name,
                "interface_id": interface_id,
                "operation": operation,
                "new_id": new_id,
                "suggestions": suggestions,
            },
        )
        self.field_name = field_name
        self.interface_id = interface_id
        self.suggestions = suggestions


class MigrationError(BrandedSchemaError):
    """An instance could not be migrated.

    Raised when:
    - The instance's owning definition is not registered
    - Strict migrations are enabled and no target definition exists
    """

    def __init__(
        self,
        message: str,
        interface_id: Optional[str] = None,
        code: str = "MIGRATION_ERROR",
        details: Optional[Dict[str, Any]] = None,
    ) -> None:
        merged = {"interface_id": interface_id}
        merged.update(details or {})
        super().__init__(message, code=code, details=merged)
        self.interface_id = interface_id


class NoMigrationPathError(MigrationError):
    """No chain of registered migrations connects the two versions."""

    def __init__(self, interface_id: str, from_version: int, to_version: int) -> None:
        super().__init__(
            f"No migration path from version {from_version} to version {to_version} "
            f"for interface '{interface_id}'",
            interface_id=interface_id,
            code="NO_MIGRATION_PATH",
            details={"from_version": from_version, "to_version": to_version},
        )
        self.from_version = from_version
        self.to_version = to_version


class CodecStepFailedError(BrandedSchemaError):
    """A codec pipeline step raised.

    Attributes:
        step: Zero-based index of the failing step
    """

    def __init__(self, message: str, step: int) -> None:
        super().__init__(
            f"Codec step {step} failed: {message}",
            code="CODEC_STEP_FAILED",
            details={"step": step},
        )
        self.step = step
