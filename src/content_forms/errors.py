"""
Exceptions raised by content-forms.

Validation problems are never raised: they are collected into a
ValidationResult. Exceptions are reserved for a format that cannot be
compiled, a rejected submission, and errors coming back from storage.
"""

from content_forms.constants import (
    DUPLICATE_HANDLE_PREFIX,
    FORM_ERROR_KEY,
    HANDLE_KEY,
    QUOTED_VALUE,
)
from content_forms.models.validation_result import (
    ErrorKind,
    FieldValidationError,
    ValidationResult,
)


class ContentFormsError(Exception):
    """Base class for content-forms errors."""


class FormatError(ContentFormsError):
    """A format definition that cannot be compiled."""

    def __init__(self, message: str, key: str | None = None, label: str | None = None):
        super().__init__(message)
        self.key = key
        self.label = label


class SubmissionInvalid(ContentFormsError):
    """Submitted values failed validation."""

    def __init__(self, result: ValidationResult):
        super().__init__(f"Submission has {result.error_count} validation error(s)")
        self.result = result


class DuplicateHandleError(ContentFormsError):
    """The storage layer rejected a record because its handle is taken."""

    def __init__(self, handle: str | None, message: str | None = None):
        super().__init__(message or f"{DUPLICATE_HANDLE_PREFIX} handle '{handle}' already exists")
        self.handle = handle

    @classmethod
    def from_message(cls, message: str) -> "DuplicateHandleError | None":
        """
        Recognise the storage layer's duplicate-handle message.

        The CMS reports ``DUPLICATE_HANDLE_ERROR: ... '<handle>' ...``.
        Returns None for any other message.
        """
        if not message.startswith(DUPLICATE_HANDLE_PREFIX):
            return None
        match = QUOTED_VALUE.search(message)
        return cls(match.group(1) if match else None, message)


def map_storage_error(error: Exception, submitted_handle: str) -> ValidationResult:
    """
    Map a storage error onto the form's error slots.

    A duplicate of the submitted handle lands on the ``handle`` field; a
    duplicate naming some other handle is reported at form level. Any
    other error is re-raised unchanged.

    Args:
        error: Exception raised by the storage layer.
        submitted_handle: Handle that was sent with the payload.

    Returns:
        ValidationResult carrying the duplicate-handle error.
    """
    duplicate = error if isinstance(error, DuplicateHandleError) else DuplicateHandleError.from_message(str(error))
    if duplicate is None:
        raise error

    if duplicate.handle is None or duplicate.handle == submitted_handle:
        field_error = FieldValidationError(
            field_name=HANDLE_KEY,
            label="Handle",
            error_type=ErrorKind.DUPLICATE_HANDLE,
            message="This handle is already taken. Please choose a different one.",
            received=submitted_handle,
        )
    else:
        field_error = FieldValidationError(
            field_name=FORM_ERROR_KEY,
            error_type=ErrorKind.DUPLICATE_HANDLE,
            message="A similar entry already exists. Please check your inputs.",
            received=duplicate.handle,
        )
    return ValidationResult(is_valid=False, errors=[field_error])
