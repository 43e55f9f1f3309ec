"""
Submission encoder.

Inverse of the hydrator: turns edited UI values back into the flat JSON
shape stored on a Record. Dates become ISO-8601 strings and declared
list fields are always emitted as lists, never as null.
"""

import logging
from typing import Any, Mapping, MutableMapping

from content_forms.coercion import format_temporal
from content_forms.compiler import FormatSource, iter_fields
from content_forms.constants import HANDLE_KEY
from content_forms.handles import generate_handle, is_blank_handle
from content_forms.models.field_definitions import DateField
from content_forms.models.record import Submission
from content_forms.naming import derive_key
from content_forms.tracing import trace_operation

logger = logging.getLogger("content-forms")


@trace_operation("encode")
def encode(values: Mapping[str, Any], fields: FormatSource) -> dict[str, Any]:
    """
    Encode form values into the storage JSON shape.

    Only declared keys are emitted; ``handle`` and undeclared keys are
    left out. A declared non-list field missing from ``values`` is left
    out as well, while a declared list field is always emitted.

    Args:
        values: Form values keyed by storage key.
        fields: Format, field definitions, or a compiled schema.

    Returns:
        JSON-ready dict keyed by storage key.
    """
    payload: dict[str, Any] = {}

    for field in iter_fields(fields):
        key = derive_key(field)

        if field.is_array:
            value = values.get(key)
            if value is None:
                value = []
            elif not isinstance(value, (list, tuple)):
                logger.warning(f"List field {key} holds a single value; wrapping it")
                value = [value]
            else:
                value = list(value)
            if isinstance(field, DateField):
                value = [format_temporal(item) for item in value]
        elif key not in values:
            continue
        else:
            value = values[key]
            if isinstance(field, DateField):
                value = format_temporal(value)

        payload[key] = value

    return payload


def ensure_handle(form_state: MutableMapping[str, Any], length: int | None = None) -> tuple[str, bool]:
    """
    Make sure the form state carries a handle.

    A blank handle is replaced with a generated one, written back into
    ``form_state`` so the live form shows the value that is submitted.

    Returns:
        The handle and whether it was generated.
    """
    handle = form_state.get(HANDLE_KEY)
    if is_blank_handle(handle):
        handle = generate_handle(length)
        form_state[HANDLE_KEY] = handle
        logger.info(f"Generated fallback handle '{handle}'")
        return handle, True
    return handle, False


def prepare_submission(
    form_state: MutableMapping[str, Any],
    fields: FormatSource,
    handle_length: int | None = None,
) -> Submission:
    """
    Build the outgoing submission from live form state.

    Args:
        form_state: Live form values; its ``handle`` is filled in place
            when blank.
        fields: Format, field definitions, or a compiled schema.
        handle_length: Length of a generated handle (config default if None).

    Returns:
        Submission with the handle and the encoded values.
    """
    handle, generated = ensure_handle(form_state, handle_length)
    return Submission(
        handle=handle,
        data=encode(form_state, fields),
        handle_generated=generated,
    )
