"""
Schema compiler for extra-content formats.

Compiles an ordered list of field definitions into a CompiledSchema:

- one FieldRule per field (storage key, leaf check, default value),
- a validator over ``{handle} ∪ data`` that collects every error,
- an ordered default-value map (``handle`` first, then declared order).

Leaf checks lean on pydantic TypeAdapters for type and constraint
checking; pydantic error types are translated into ErrorKind so callers
see one error taxonomy regardless of the field kind.
"""

import copy
import logging
import math
from dataclasses import dataclass
from typing import Annotated, Any, Callable, Iterable, Literal, Mapping, NamedTuple, assert_never

from pydantic import Field, StrictBool, StrictInt, StrictStr, StringConstraints, TypeAdapter, ValidationError
from pydantic_core import to_jsonable_python

from content_forms.coercion import MISSING, coerce_number, is_absent, normalize_empty_input, parse_temporal
from content_forms.constants import EMAIL_PATTERN, HANDLE_KEY, HANDLE_PATTERN, JSON_SCHEMA_VERSION
from content_forms.errors import FormatError
from content_forms.handles import is_blank_handle
from content_forms.models.field_definitions import (
    BooleanField,
    ChoiceField,
    DateField,
    FieldDefinition,
    Format,
    MediaField,
    NumberField,
    TextField,
    parse_field,
)
from content_forms.models.validation_result import (
    ErrorKind,
    FieldValidationError,
    ValidationResult,
)
from content_forms.naming import derive_key
from content_forms.tracing import trace_operation

logger = logging.getLogger("content-forms")


class Issue(NamedTuple):
    """A field-agnostic problem found by a leaf check."""

    kind: ErrorKind
    message: str
    received: Any = None
    expected: Any = None
    minimum: float | None = None
    maximum: float | None = None


LeafCheck = Callable[[Any], tuple[Any, list[Issue]]]

_LOWER_BOUND_ERRORS = {"string_too_short", "greater_than", "greater_than_equal", "too_short"}
_UPPER_BOUND_ERRORS = {"string_too_long", "less_than", "less_than_equal", "too_long"}
_PATTERN_ERRORS = {"string_pattern_mismatch"}
_ENUM_ERRORS = {"literal_error", "enum"}

_handle_adapter = TypeAdapter(
    Annotated[str, StringConstraints(strict=True, min_length=1, pattern=HANDLE_PATTERN)]
)


def _fmt(number: float | None) -> str:
    if isinstance(number, float) and number.is_integer():
        return str(int(number))
    return str(number)


def _name(field: FieldDefinition) -> str:
    return field.label or "Field"


def _text_min_length(field: TextField) -> int | None:
    # A required text field always needs at least one character
    if field.required:
        return max(field.min or 0, 1)
    return field.min or None


def _bounds(field: FieldDefinition) -> tuple[float | None, float | None]:
    if isinstance(field, TextField):
        return _text_min_length(field), field.max
    if isinstance(field, NumberField):
        return field.min, field.max
    if isinstance(field, MediaField):
        return 1, None
    return None, None


def _missing_issue(field: FieldDefinition) -> Issue:
    return Issue(ErrorKind.MISSING_REQUIRED, f"{_name(field)} is required.")


def _type_label(field: FieldDefinition) -> str:
    if isinstance(field, NumberField):
        return "whole number" if field.sub_type == "integer" else "valid number"
    if isinstance(field, MediaField):
        return "media ID (number)"
    if isinstance(field, BooleanField):
        return "boolean"
    if isinstance(field, ChoiceField):
        return "list of options" if field.is_multiple else "string"
    return "string"


def _issue_from_pydantic(error: dict[str, Any], field: FieldDefinition, value: Any) -> Issue:
    """Translate one pydantic error dict into an Issue."""
    error_type = error["type"]
    name = _name(field)

    if error_type in _LOWER_BOUND_ERRORS or error_type in _UPPER_BOUND_ERRORS:
        minimum, maximum = _bounds(field)
        lower = error_type in _LOWER_BOUND_ERRORS
        if isinstance(field, MediaField):
            message = f"{name} ID must be positive."
        elif isinstance(field, TextField):
            if lower:
                unit = "character" if minimum == 1 else "characters"
                message = f"{name} must be at least {_fmt(minimum)} {unit}."
            else:
                message = f"{name} must be at most {_fmt(maximum)} characters."
        elif lower:
            message = f"{name} must be at least {_fmt(minimum)}."
        else:
            message = f"{name} must be at most {_fmt(maximum)}."
        return Issue(ErrorKind.OUT_OF_RANGE, message, received=value, minimum=minimum, maximum=maximum)

    if error_type in _PATTERN_ERRORS:
        if isinstance(field, TextField) and field.sub_type == "email":
            return Issue(ErrorKind.PATTERN_MISMATCH, "Invalid email address.", received=value, expected="email")
        return Issue(ErrorKind.PATTERN_MISMATCH, f"{name} has an invalid format.", received=value)

    if error_type in _ENUM_ERRORS:
        options = field.options if isinstance(field, ChoiceField) else None
        return Issue(
            ErrorKind.INVALID_ENUM_VALUE,
            f"{name}: '{value}' is not one of the allowed options.",
            received=value,
            expected=options,
        )

    return Issue(
        ErrorKind.INVALID_TYPE,
        f"{name} must be a {_type_label(field)}.",
        received=value,
        expected=_type_label(field),
    )


def _run(adapter: TypeAdapter, value: Any, field: FieldDefinition) -> tuple[Any, list[Issue]]:
    try:
        return adapter.validate_python(value), []
    except ValidationError as e:
        return value, [_issue_from_pydantic(err, field, value) for err in e.errors()]


def _text_check(field: TextField) -> LeafCheck:
    adapter = TypeAdapter(
        Annotated[
            str,
            StringConstraints(
                strict=True,
                min_length=_text_min_length(field),
                max_length=field.max,
                pattern=EMAIL_PATTERN if field.sub_type == "email" else None,
            ),
        ]
    )

    def check(value: Any) -> tuple[Any, list[Issue]]:
        if is_absent(value):
            if field.required:
                return MISSING, [_missing_issue(field)]
            # Optional text has no length floor
            return (None if value is MISSING else value), []
        return _run(adapter, value, field)

    return check


def _number_check(field: NumberField) -> LeafCheck:
    if field.sub_type == "integer":
        constraints: dict[str, Any] = {
            "ge": math.ceil(field.min) if field.min is not None else None,
            "le": math.floor(field.max) if field.max is not None else None,
        }
        adapter = TypeAdapter(Annotated[int, Field(**constraints)])
    else:
        adapter = TypeAdapter(Annotated[float, Field(ge=field.min, le=field.max, allow_inf_nan=False)])

    def check(value: Any) -> tuple[Any, list[Issue]]:
        value = normalize_empty_input(value, field.required)
        if value is MISSING:
            return MISSING, [_missing_issue(field)]
        if value is None:
            return None, []
        value = coerce_number(value)
        if isinstance(value, bool):
            return value, [_issue_from_pydantic({"type": "float_type"}, field, value)]
        if isinstance(value, float) and value.is_integer() and field.sub_type == "integer":
            value = int(value)
        return _run(adapter, value, field)

    return check


def _choice_check(field: ChoiceField) -> LeafCheck:
    if field.options:
        element_adapter = TypeAdapter(Literal[tuple(field.options)])
    else:
        element_adapter = TypeAdapter(StrictStr)

    if not field.is_multiple:

        def check_single(value: Any) -> tuple[Any, list[Issue]]:
            if is_absent(value):
                if field.required:
                    return MISSING, [_missing_issue(field)]
                return None, []
            return _run(element_adapter, value, field)

        return check_single

    def check_multiple(value: Any) -> tuple[Any, list[Issue]]:
        if value is MISSING or value is None:
            if field.required:
                return MISSING, [_missing_issue(field)]
            return [], []
        if not isinstance(value, (list, tuple)):
            return value, [_issue_from_pydantic({"type": "list_type"}, field, value)]
        if field.required and not value:
            return [], [Issue(ErrorKind.ARRAY_EMPTY, f"{_name(field)} requires at least one selection.")]
        selected: list[Any] = []
        issues: list[Issue] = []
        for item in value:
            item_value, item_issues = _run(element_adapter, item, field)
            selected.append(item_value)
            issues.extend(item_issues)
        return selected, issues

    return check_multiple


def _date_check(field: DateField) -> LeafCheck:
    def check(value: Any) -> tuple[Any, list[Issue]]:
        normalized = normalize_empty_input(value.strip() if isinstance(value, str) else value, field.required)
        if normalized is MISSING:
            return MISSING, [_missing_issue(field)]
        if normalized is None:
            return None, []
        parsed = parse_temporal(normalized, field.sub_type)
        if parsed is None:
            return value, [
                Issue(
                    ErrorKind.INVALID_DATE,
                    f"{field.label or 'Date'} must be a valid {field.sub_type}.",
                    received=value,
                    expected=field.sub_type,
                )
            ]
        return parsed, []

    return check


def _boolean_check(field: BooleanField) -> LeafCheck:
    adapter = TypeAdapter(StrictBool)

    def check(value: Any) -> tuple[Any, list[Issue]]:
        if value is MISSING or value is None:
            # A required switch that was never touched is off
            return (False if field.required else None), []
        return _run(adapter, value, field)

    return check


def _media_check(field: MediaField) -> LeafCheck:
    adapter = TypeAdapter(Annotated[StrictInt, Field(gt=0)])

    def check(value: Any) -> tuple[Any, list[Issue]]:
        if value is MISSING or value is None:
            if field.required:
                return MISSING, [_missing_issue(field)]
            return None, []
        return _run(adapter, value, field)

    return check


def leaf_check(field: FieldDefinition) -> LeafCheck:
    """Build the check for a single (non-array) value of a field."""
    if isinstance(field, TextField):
        return _text_check(field)
    elif isinstance(field, NumberField):
        return _number_check(field)
    elif isinstance(field, ChoiceField):
        return _choice_check(field)
    elif isinstance(field, DateField):
        return _date_check(field)
    elif isinstance(field, BooleanField):
        return _boolean_check(field)
    elif isinstance(field, MediaField):
        return _media_check(field)
    else:
        assert_never(field)


def _declared_default(field: FieldDefinition, check: LeafCheck) -> Any:
    """Leaf default of a field; raises FormatError when a declared default is unusable."""
    raw = getattr(field, "default", None)

    if isinstance(field, TextField):
        if raw is None or raw == "":
            return ""
        value = raw
    elif isinstance(field, NumberField):
        if raw is None or str(raw).strip() == "":
            return None
        value = coerce_number(raw)
        if isinstance(value, str):
            raise FormatError(
                f"Default '{raw}' of number field '{_name(field)}' is not a number",
                key=derive_key(field),
                label=field.label,
            )
    elif isinstance(field, ChoiceField):
        if field.is_multiple:
            if raw is None or raw == "":
                return []
            value = [s.strip() for s in raw.split(",")] if isinstance(raw, str) else list(raw)
            value = [s for s in value if s]
            if not value:
                return []
        else:
            if raw is None or (isinstance(raw, str) and not raw.strip()):
                return None
            value = raw
    elif isinstance(field, DateField):
        if raw is None or not raw.strip():
            return None
        value = raw
    elif isinstance(field, BooleanField):
        if raw is True or raw == "true":
            return True
        if raw is False or raw == "false":
            return False
        if raw is None or raw == "":
            return False if field.required else None
        raise FormatError(
            f"Default '{raw}' of boolean field '{_name(field)}' must be 'true' or 'false'",
            key=derive_key(field),
            label=field.label,
        )
    elif isinstance(field, MediaField):
        return None
    else:
        assert_never(field)

    checked, issues = check(value)
    if issues:
        raise FormatError(
            f"Default {raw!r} of field '{_name(field)}' is invalid: {issues[0].message}",
            key=derive_key(field),
            label=field.label,
        )
    return checked


def _field_default(field: FieldDefinition, check: LeafCheck) -> Any:
    value = _declared_default(field, check)
    if field.is_array:
        return [value] if field.required and value is not None else []
    return value


def default_for(field: FieldDefinition) -> Any:
    """
    Default UI value of a field.

    Optional arrays default to ``[]``; required arrays to a one-element
    list seeded from the leaf default, or ``[]`` when there is no leaf
    default to seed with.

    Raises:
        FormatError: If the field declares a default that does not pass
            its own rule.
    """
    return _field_default(field, leaf_check(field))


@dataclass(frozen=True)
class FieldRule:
    """Compiled rule for one field: storage key, leaf check and default."""

    key: str
    field: FieldDefinition
    default: Any
    check: LeafCheck

    @property
    def label(self) -> str | None:
        return self.field.label

    @property
    def kind(self) -> str:
        return self.field.kind

    def _error(self, issue: Issue, index: int | None = None) -> FieldValidationError:
        return FieldValidationError(
            field_name=self.key,
            label=self.field.label,
            error_type=issue.kind,
            message=issue.message,
            index=index,
            minimum=issue.minimum,
            maximum=issue.maximum,
            expected=issue.expected,
            received=issue.received,
        )

    def validate(self, raw: Any) -> tuple[Any, list[FieldValidationError]]:
        """Validate one submitted value, returning the cleaned value and every error found."""
        if not self.field.is_array:
            value, issues = self.check(raw)
            return value, [self._error(issue) for issue in issues]

        list_name = self.field.label or "List"
        if raw is MISSING or raw is None:
            if self.field.required:
                return MISSING, [self._error(Issue(ErrorKind.MISSING_REQUIRED, f"{list_name} is required."))]
            return [], []
        if not isinstance(raw, (list, tuple)):
            return raw, [self._error(Issue(ErrorKind.INVALID_TYPE, f"{list_name} must be a list.", received=raw))]
        if self.field.required and not raw:
            return [], [self._error(Issue(ErrorKind.ARRAY_EMPTY, f"{list_name} cannot be empty."))]

        values: list[Any] = []
        errors: list[FieldValidationError] = []
        for index, item in enumerate(raw):
            value, issues = self.check(item)
            values.append(None if value is MISSING else value)
            errors.extend(self._error(issue, index) for issue in issues)
        return values, errors


def _validate_handle(value: Any) -> tuple[Any, list[FieldValidationError]]:
    if value is MISSING or is_blank_handle(value):
        return value, [
            FieldValidationError(
                field_name=HANDLE_KEY,
                label="Handle",
                error_type=ErrorKind.MISSING_REQUIRED,
                message="Handle is required.",
            )
        ]
    try:
        return _handle_adapter.validate_python(value), []
    except ValidationError as e:
        if e.errors()[0]["type"] in _PATTERN_ERRORS:
            kind = ErrorKind.PATTERN_MISMATCH
            message = "Handle must be lowercase alphanumeric with hyphens."
        else:
            kind = ErrorKind.INVALID_TYPE
            message = "Handle must be a string."
        return value, [
            FieldValidationError(
                field_name=HANDLE_KEY,
                label="Handle",
                error_type=kind,
                message=message,
                expected=HANDLE_PATTERN,
                received=value,
            )
        ]


_TEMPORAL_JSON_FORMATS = {"date": "date", "time": "time", "datetime": "date-time"}


def _leaf_json_schema(field: FieldDefinition) -> dict[str, Any]:
    if isinstance(field, TextField):
        schema: dict[str, Any] = {"type": "string"}
        min_length = _text_min_length(field)
        if min_length:
            schema["minLength"] = min_length
        if field.max is not None:
            schema["maxLength"] = field.max
        if field.sub_type == "email":
            schema["format"] = "email"
        elif field.sub_type == "rich-text":
            schema["contentMediaType"] = "text/html"
    elif isinstance(field, NumberField):
        schema = {"type": "integer" if field.sub_type == "integer" else "number"}
        if field.min is not None:
            schema["minimum"] = field.min
        if field.max is not None:
            schema["maximum"] = field.max
    elif isinstance(field, ChoiceField):
        option_schema: dict[str, Any] = {"type": "string"}
        if field.options:
            option_schema["enum"] = list(field.options)
        if not field.is_multiple:
            schema = option_schema
        else:
            schema = {"type": "array", "items": option_schema}
            if field.required:
                schema["minItems"] = 1
            return schema
    elif isinstance(field, DateField):
        schema = {"type": "string", "format": _TEMPORAL_JSON_FORMATS[field.sub_type]}
    elif isinstance(field, BooleanField):
        schema = {"type": "boolean"}
    elif isinstance(field, MediaField):
        schema = {"type": "integer", "exclusiveMinimum": 0}
    else:
        assert_never(field)

    if not field.required:
        schema["type"] = [schema["type"], "null"]
        if "enum" in schema:
            schema["enum"] = schema["enum"] + [None]
    return schema


def _widget(field: FieldDefinition) -> str:
    if isinstance(field, TextField):
        return {"default": "text", "email": "email", "rich-text": "rich-text"}[field.sub_type]
    if isinstance(field, NumberField):
        return "number"
    if isinstance(field, ChoiceField):
        return "multi-select" if field.is_multiple else "select"
    if isinstance(field, DateField):
        return field.sub_type
    if isinstance(field, BooleanField):
        return "switch"
    if isinstance(field, MediaField):
        return "media-picker"
    assert_never(field)


@dataclass(frozen=True)
class CompiledSchema:
    """
    Validator and defaults compiled from one Format.

    Rebuilt whenever the format changes; never mutated. ``defaults``
    returns a fresh copy on every access so callers can seed a form
    with it freely.
    """

    rules: tuple[FieldRule, ...]
    title: str | None = None
    description: str | None = None

    @property
    def fields(self) -> list[FieldDefinition]:
        return [rule.field for rule in self.rules]

    @property
    def keys(self) -> list[str]:
        """Storage keys in declared order, ``handle`` first."""
        return [HANDLE_KEY] + [rule.key for rule in self.rules]

    @property
    def defaults(self) -> dict[str, Any]:
        values: dict[str, Any] = {HANDLE_KEY: ""}
        for rule in self.rules:
            values[rule.key] = copy.deepcopy(rule.default)
        return values

    def rule_for(self, key: str) -> FieldRule | None:
        for rule in self.rules:
            if rule.key == key:
                return rule
        return None

    def validate(self, candidate: Mapping[str, Any]) -> ValidationResult:
        """
        Validate form values against the compiled rules.

        Every field is checked; errors are collected rather than
        stopping at the first one. Keys that no field declares are
        ignored and reported as warnings.

        Args:
            candidate: Values keyed by storage key, plus ``handle``.

        Returns:
            ValidationResult; ``validated_data`` holds the cleaned
            values (parsed dates, numbers) when valid.
        """
        handle, errors = _validate_handle(candidate.get(HANDLE_KEY, MISSING))
        data: dict[str, Any] = {HANDLE_KEY: handle}

        for rule in self.rules:
            value, field_errors = rule.validate(candidate.get(rule.key, MISSING))
            data[rule.key] = None if value is MISSING else value
            errors.extend(field_errors)

        known = set(self.keys)
        warnings = [f"Ignoring undeclared key '{key}'" for key in candidate if key not in known]

        if errors:
            logger.debug(f"Validation failed with {len(errors)} error(s): {[e.field_name for e in errors]}")

        return ValidationResult(
            is_valid=not errors,
            errors=errors,
            validated_data=None if errors else data,
            warnings=warnings,
        )

    def to_json_schema(self) -> dict[str, Any]:
        """Export as JSON Schema dict."""
        properties: dict[str, Any] = {
            HANDLE_KEY: {"type": "string", "title": "Handle", "minLength": 1, "pattern": HANDLE_PATTERN},
        }
        required = [HANDLE_KEY]

        for rule in self.rules:
            field = rule.field
            prop = _leaf_json_schema(field)
            if field.is_array:
                prop = {"type": "array", "items": prop}
                if field.required:
                    prop["minItems"] = 1
            prop["title"] = field.label or rule.key
            if field.description:
                prop["description"] = field.description
            prop["default"] = to_jsonable_python(rule.default)
            properties[rule.key] = prop
            if field.required:
                required.append(rule.key)

        return {
            "$schema": JSON_SCHEMA_VERSION,
            "type": "object",
            "title": self.title,
            "description": self.description,
            "properties": properties,
            "required": required,
        }

    def widgets(self) -> dict[str, str]:
        """Widget hint per storage key for the form-rendering layer."""
        widgets = {HANDLE_KEY: "handle"}
        for rule in self.rules:
            widgets[rule.key] = _widget(rule.field)
        return widgets


FormatSource = Format | CompiledSchema | Iterable[FieldDefinition | dict[str, Any]]


def iter_fields(source: FormatSource) -> list[FieldDefinition]:
    """Field definitions of a Format, a CompiledSchema, or an iterable of definitions/dicts."""
    if isinstance(source, CompiledSchema):
        return source.fields
    if isinstance(source, Format):
        return list(source.fields)
    return [parse_field(item) if isinstance(item, dict) else item for item in source]


@trace_operation("compile_format")
def compile_format(source: FormatSource) -> CompiledSchema:
    """
    Compile field definitions into a validator and default values.

    Args:
        source: A Format, a list of field definitions (models or dicts
            with a ``kind`` key), or an already compiled schema, which
            is returned as is.

    Returns:
        CompiledSchema for the fields, in declared order.

    Raises:
        FormatError: If two fields derive the same storage key, a field
            derives the reserved ``handle`` key, or a declared default
            does not pass the field's own rule.

    Example:
        >>> schema = compile_format([
        ...     NumberField(id=1, label="Rating", required=True, min=1, max=10),
        ... ])
        >>> schema.defaults
        {'handle': '', 'rating': None}
        >>> schema.validate({"handle": "my-post", "rating": "5"}).is_valid
        True
    """
    if isinstance(source, CompiledSchema):
        return source

    title = source.name if isinstance(source, Format) else None
    description = source.description if isinstance(source, Format) else None

    rules: list[FieldRule] = []
    seen = {HANDLE_KEY}
    for field in iter_fields(source):
        key = derive_key(field)
        if key in seen:
            raise FormatError(
                f"Field {field.id} ('{field.label}') derives storage key '{key}', which is already in use",
                key=key,
                label=field.label,
            )
        seen.add(key)
        check = leaf_check(field)
        rules.append(FieldRule(key=key, field=field, default=_field_default(field, check), check=check))

    logger.debug(f"Compiled {len(rules)} field rule(s): {[rule.key for rule in rules]}")
    return CompiledSchema(rules=tuple(rules), title=title, description=description)
