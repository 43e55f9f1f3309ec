"""
Value hydrator.

Decodes a stored Record into UI-native values for an edit form: ISO
strings become date/time objects, stringly media ids become ints, and
list/scalar shapes are normalized to what the current Format declares.

A malformed historical record must stay editable, so nothing here
raises on bad stored data: bad values degrade to a sentinel (``None``,
the raw string, or a dropped list element) and a warning is logged.
"""

import copy
import logging
from typing import Any, Mapping

from content_forms.coercion import coerce_media_id, parse_temporal
from content_forms.compiler import CompiledSchema, FieldRule, FormatSource, compile_format
from content_forms.constants import HANDLE_KEY
from content_forms.models.field_definitions import BooleanField, ChoiceField, DateField, MediaField
from content_forms.models.record import Record
from content_forms.tracing import trace_operation

logger = logging.getLogger("content-forms")


def _hydrate_date_list(rule: FieldRule, items: list[Any]) -> list[Any]:
    parsed_items = []
    for item in items:
        parsed = parse_temporal(item, rule.field.sub_type)
        if parsed is None:
            if item not in (None, ""):
                logger.warning(f"Dropping unparseable date {item!r} from field {rule.key}")
            continue
        parsed_items.append(parsed)
    return parsed_items


def _hydrate_media_list(rule: FieldRule, items: list[Any]) -> list[int]:
    ids = []
    for item in items:
        media_id = coerce_media_id(item)
        if media_id is None:
            if item is not None:
                logger.warning(f"Media field {rule.key} has unexpected item {item!r}. Dropping it.")
            continue
        ids.append(media_id)
    return ids


def _hydrate_scalar(rule: FieldRule, stored: Any) -> Any:
    field = rule.field
    if isinstance(field, DateField):
        parsed = parse_temporal(stored, field.sub_type)
        if parsed is None:
            # Keep the raw string so the form can show it as an invalid date
            logger.warning(f"Stored value {stored!r} of date field {rule.key} is not a valid {field.sub_type}")
            return stored
        return parsed
    if isinstance(field, MediaField):
        media_id = coerce_media_id(stored)
        if media_id is None:
            logger.warning(f"Media field {rule.key} has invalid media id {stored!r}. Setting to None.")
        return media_id
    if isinstance(field, ChoiceField) and field.is_multiple and not isinstance(stored, list):
        return [stored]
    return stored


def _hydrate_field(rule: FieldRule, stored: Any) -> Any:
    field = rule.field

    if stored is None:
        if field.is_array:
            return []
        if rule.default is None and field.required and isinstance(field, BooleanField):
            return False
        return copy.deepcopy(rule.default)

    if not field.is_array:
        return _hydrate_scalar(rule, stored)

    items = stored if isinstance(stored, list) else [stored]
    if isinstance(field, DateField):
        return _hydrate_date_list(rule, items)
    if isinstance(field, MediaField):
        return _hydrate_media_list(rule, items)
    if isinstance(field, ChoiceField) and field.is_multiple:
        return [item if isinstance(item, list) else [item] for item in items]
    return list(items)


@trace_operation("hydrate")
def hydrate(record: Record | Mapping[str, Any], fields: FormatSource) -> dict[str, Any]:
    """
    Decode a stored record into form values.

    Starts from the compiled defaults and overrides only the keys the
    current Format declares. Keys in ``record.data`` that no field
    declares any more are ignored.

    Args:
        record: Stored record (``Record`` or a ``{"handle", "data"}`` dict).
        fields: Format, field definitions, or a compiled schema.

    Returns:
        Values keyed by storage key, ``handle`` first, in declared order.

    Example:
        >>> hydrate(Record(handle="launch", data={"starts_at": "2024-05-01T09:00:00"}), fmt)
        {'handle': 'launch', 'starts_at': datetime.datetime(2024, 5, 1, 9, 0)}
    """
    if not isinstance(record, Record):
        record = Record.model_validate(record)
    schema: CompiledSchema = compile_format(fields)

    values = schema.defaults
    values[HANDLE_KEY] = record.handle or ""

    for rule in schema.rules:
        values[rule.key] = _hydrate_field(rule, record.data.get(rule.key))

    stray = [key for key in record.data if schema.rule_for(key) is None]
    if stray:
        logger.debug(f"Ignoring stored keys with no field definition: {stray}")

    return values
