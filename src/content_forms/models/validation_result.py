"""
Validation result models for submitted form values.

Every violated field is reported at once; a result is never
short-circuited on the first error.
"""

from enum import Enum
from typing import Any

from pydantic import BaseModel, Field


class ErrorKind(str, Enum):
    """Kinds of field-scoped validation errors."""

    MISSING_REQUIRED = "missing_required"
    OUT_OF_RANGE = "out_of_range"
    PATTERN_MISMATCH = "pattern_mismatch"
    INVALID_ENUM_VALUE = "invalid_enum_value"
    INVALID_DATE = "invalid_date"
    ARRAY_EMPTY = "array_empty"
    INVALID_TYPE = "invalid_type"
    DUPLICATE_HANDLE = "duplicate_handle"


class FieldValidationError(BaseModel):
    """One problem with one field value (or one element of a list field)."""

    field_name: str = Field(..., description="Storage key of the field with error")
    label: str | None = Field(default=None, description="Human label of the field")
    error_type: ErrorKind = Field(..., description="Type of validation error")
    message: str = Field(..., description="Message shown next to the field")
    index: int | None = Field(default=None, description="Element index for array fields")
    minimum: float | None = Field(default=None, description="Lower bound for out_of_range errors")
    maximum: float | None = Field(default=None, description="Upper bound for out_of_range errors")
    expected: Any | None = Field(default=None, description="Allowed options, format or type")
    received: Any | None = Field(default=None, description="Offending input")


class ValidationResult(BaseModel):
    """Outcome of validating a set of form values against a compiled schema."""

    is_valid: bool = Field(..., description="True when no field reported an error")
    errors: list[FieldValidationError] = Field(
        default_factory=list, description="Every error found, in field order"
    )
    validated_data: dict[str, Any] | None = Field(
        default=None, description="Parsed values keyed by storage key, set only when valid"
    )
    warnings: list[str] = Field(
        default_factory=list, description="Notes that do not block submission, e.g. undeclared keys"
    )

    @property
    def error_count(self) -> int:
        return len(self.errors)

    def get_field_errors(self, field_name: str) -> list[FieldValidationError]:
        """Errors reported for one storage key (``_form`` for form-level errors)."""
        return [error for error in self.errors if error.field_name == field_name]

    def error_kinds(self, field_name: str) -> list[ErrorKind]:
        """Error kinds reported for one storage key, in order."""
        return [e.error_type for e in self.get_field_errors(field_name)]

    def to_error_dict(self) -> dict[str, list[str]]:
        """Messages grouped by storage key, the shape a form renders under each input."""
        messages: dict[str, list[str]] = {}
        for error in self.errors:
            messages.setdefault(error.field_name, []).append(error.message)
        return messages
