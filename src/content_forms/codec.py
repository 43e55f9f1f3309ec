"""
Format codec.

The main entry point for editing records of one Format: it compiles the
format once, seeds create/edit forms, validates submissions and builds
the outgoing payload.

Usage:
    codec = FormatCodec(Format.from_cms(meta_format))

    # Create form
    values = codec.initial_values()

    # Edit form
    values = codec.initial_values(Record.from_cms(entry))

    # Submit
    try:
        submission = codec.submit(values)
    except SubmissionInvalid as e:
        show(e.result.to_error_dict())
    else:
        try:
            storage.save(submission.to_payload())
        except Exception as e:
            show(codec.map_storage_error(e, submission).to_error_dict())
"""

import logging
from typing import Any, Mapping, MutableMapping

from content_forms.compiler import CompiledSchema, compile_format
from content_forms.config import get_config
from content_forms.encoder import encode, ensure_handle
from content_forms.errors import ContentFormsError, SubmissionInvalid, map_storage_error
from content_forms.hydrator import hydrate
from content_forms.models.field_definitions import Format
from content_forms.models.record import Record, Submission
from content_forms.models.validation_result import ValidationResult

logger = logging.getLogger("content-forms")


class FormatCodec:
    """
    Compile/hydrate/validate/encode for a single Format.

    Loading a new format discards the previous compiled schema; there is
    nothing in flight to cancel because compilation is synchronous.
    """

    def __init__(self, format: Format | None = None, handle_length: int | None = None):
        """
        Initialize the codec.

        Args:
            format: Format to compile right away. Can be loaded later.
            handle_length: Length of generated fallback handles.
                If None, uses config.handle_length.
        """
        self.handle_length = handle_length or get_config().handle_length
        self._format: Format | None = None
        self._schema: CompiledSchema | None = None
        if format is not None:
            self.load(format)

    def load(self, format: Format) -> CompiledSchema:
        """Replace the current format and compile it."""
        schema = compile_format(format)
        self._format = format
        self._schema = schema
        logger.info(f"Loaded format '{format.name or format.id}' with {len(schema.rules)} field(s)")
        return schema

    @property
    def format(self) -> Format:
        if self._format is None:
            raise ContentFormsError("No format loaded")
        return self._format

    @property
    def schema(self) -> CompiledSchema:
        if self._schema is None:
            raise ContentFormsError("No format loaded")
        return self._schema

    def initial_values(self, record: Record | None = None) -> dict[str, Any]:
        """Default values for a create form, or hydrated values for an edit form."""
        if record is None:
            return self.schema.defaults
        return hydrate(record, self.schema)

    def validate(self, values: Mapping[str, Any]) -> ValidationResult:
        return self.schema.validate(values)

    def submit(self, form_state: MutableMapping[str, Any]) -> Submission:
        """
        Validate the live form state and build the submission.

        A blank handle is generated and written back into ``form_state``
        before validation, so the form and the payload agree on it.

        Raises:
            SubmissionInvalid: If any field fails validation. The
                exception carries the full ValidationResult.
        """
        handle, generated = ensure_handle(form_state, self.handle_length)

        result = self.validate(form_state)
        if not result.is_valid:
            raise SubmissionInvalid(result)

        return Submission(
            handle=handle,
            data=encode(form_state, self.schema),
            handle_generated=generated,
        )

    def map_storage_error(self, error: Exception, submission: Submission | str) -> ValidationResult:
        """Map a storage error for a submission onto form error slots (see errors.map_storage_error)."""
        handle = submission.handle if isinstance(submission, Submission) else submission
        return map_storage_error(error, handle)
