"""
Storage key derivation.

A field's value is stored under a key derived from its label, so the
key follows the label and is never stored on its own.
"""

from content_forms.constants import DISALLOWED_KEY_CHARS, WHITESPACE_RUN
from content_forms.models.field_definitions import BaseField


def slugify(label: str) -> str:
    """Lowercase, turn whitespace runs into ``_`` and drop anything outside ``[a-z0-9_]``."""
    return DISALLOWED_KEY_CHARS.sub("", WHITESPACE_RUN.sub("_", label.lower()))


def fallback_key(field: BaseField) -> str:
    """Positional key for a field without a usable label."""
    kind = getattr(field, "kind", "field").replace("-", "_")
    return f"field_{kind}_{field.id}"


def derive_key(field: BaseField) -> str:
    """
    Derive the storage key of a field.

    Args:
        field: Any field definition.

    Returns:
        ``slugify(label)`` when that is non-empty, otherwise
        ``field_<kind>_<id>``. Never empty.

    Example:
        >>> derive_key(TextField(id=4, label="Hero Title"))
        'hero_title'
        >>> derive_key(MediaField(id=7, label="!!!"))
        'field_media_reference_7'
    """
    if field.label and field.label.strip():
        key = slugify(field.label)
        if key:
            return key
    return fallback_key(field)
