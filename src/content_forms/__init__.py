"""
content-forms: schema and value compiler for extra-content records.

An administrator defines a record shape (a Format of typed fields); from
that shape alone this package builds a validator, default values, and
the two-way transform between stored JSON and edit-form values.

Simple Usage:
    from content_forms import Format, Record, compile_format, hydrate, encode

    fmt = Format.from_cms(meta_format)        # CMS "from_formate" entry
    schema = compile_format(fmt)

    # Seed a create form
    values = schema.defaults

    # Seed an edit form from a stored record
    values = hydrate(Record.from_cms(entry), schema)

    # Validate and encode on submit
    result = schema.validate(values)
    if result.is_valid:
        meta_data = encode(values, schema)

Advanced Usage:
    from content_forms import FormatCodec, SubmissionInvalid

    codec = FormatCodec(fmt)
    try:
        submission = codec.submit(values)   # fills a blank handle in place
    except SubmissionInvalid as e:
        errors = e.result.to_error_dict()

Logging:
    from content_forms.tracing import setup_tracing

    setup_tracing(console=True, verbose=True)
    setup_tracing(file_path="content-forms.jsonl")
"""

from content_forms.codec import FormatCodec
from content_forms.coercion import (
    MISSING,
    coerce_media_id,
    normalize_empty_input,
    parse_temporal,
)
from content_forms.compiler import (
    CompiledSchema,
    FieldRule,
    compile_format,
    default_for,
)
from content_forms.encoder import encode, prepare_submission
from content_forms.errors import (
    ContentFormsError,
    DuplicateHandleError,
    FormatError,
    SubmissionInvalid,
    map_storage_error,
)
from content_forms.handles import generate_handle, is_valid_handle
from content_forms.hydrator import hydrate
from content_forms.models import (
    BooleanField,
    ChoiceField,
    DateField,
    ErrorKind,
    FieldDefinition,
    FieldValidationError,
    Format,
    MediaField,
    NumberField,
    Record,
    Submission,
    TextField,
    ValidationResult,
)
from content_forms.naming import derive_key, slugify
from content_forms.tracing import (
    disable_tracing,
    enable_tracing,
    setup_tracing,
)

__all__ = [
    # Main interface
    "FormatCodec",
    "compile_format",
    "hydrate",
    "encode",
    "prepare_submission",
    # Compiled schema
    "CompiledSchema",
    "FieldRule",
    "default_for",
    # Field definitions
    "FieldDefinition",
    "TextField",
    "NumberField",
    "ChoiceField",
    "DateField",
    "BooleanField",
    "MediaField",
    "Format",
    # Records
    "Record",
    "Submission",
    # Validation
    "ErrorKind",
    "FieldValidationError",
    "ValidationResult",
    # Naming and identity
    "derive_key",
    "slugify",
    "generate_handle",
    "is_valid_handle",
    # Normalization
    "MISSING",
    "normalize_empty_input",
    "parse_temporal",
    "coerce_media_id",
    # Errors
    "ContentFormsError",
    "FormatError",
    "DuplicateHandleError",
    "SubmissionInvalid",
    "map_storage_error",
    # Logging
    "setup_tracing",
    "disable_tracing",
    "enable_tracing",
]

__version__ = "0.1.0"
