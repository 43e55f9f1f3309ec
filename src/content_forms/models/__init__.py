"""
Data models for content-forms.

This module contains Pydantic models for:
- Field definitions and formats
- Records and submissions
- Validation results
"""

from content_forms.models.field_definitions import (
    FIELD_KINDS,
    BaseField,
    BooleanField,
    ChoiceField,
    DateField,
    FieldDefinition,
    FieldKind,
    Format,
    MediaField,
    NumberField,
    TextField,
    field_from_cms,
    parse_field,
)
from content_forms.models.record import (
    Record,
    Submission,
)
from content_forms.models.validation_result import (
    ErrorKind,
    FieldValidationError,
    ValidationResult,
)

__all__ = [
    # Field definitions
    "FIELD_KINDS",
    "BaseField",
    "BooleanField",
    "ChoiceField",
    "DateField",
    "FieldDefinition",
    "FieldKind",
    "Format",
    "MediaField",
    "NumberField",
    "TextField",
    "field_from_cms",
    "parse_field",
    # Records
    "Record",
    "Submission",
    # Validation
    "ErrorKind",
    "FieldValidationError",
    "ValidationResult",
]
