"""
Record identity handles.

Every record carries a ``handle`` slug. When the editor leaves it blank
a random fallback is generated client-side; uniqueness is enforced by
the storage layer, which reports a duplicate as DuplicateHandleError.
"""

import random
import secrets

from content_forms.config import get_config
from content_forms.constants import (
    HANDLE_ALPHABET,
    HANDLE_LEADING_ALPHABET,
    HANDLE_RE,
)

_system_random = secrets.SystemRandom()


def generate_handle(length: int | None = None, rng: random.Random | None = None) -> str:
    """
    Generate a random fallback handle.

    Args:
        length: Number of characters. Defaults to config.handle_length (12).
        rng: Optional random source, mainly for reproducible tests.

    Returns:
        A string of ``[a-z0-9]`` that always starts with a letter.

    Raises:
        ValueError: If length is smaller than 1.
    """
    if length is None:
        length = get_config().handle_length
    if length < 1:
        raise ValueError(f"Handle length must be at least 1, got {length}")

    chooser = rng or _system_random
    chars = [chooser.choice(HANDLE_ALPHABET) for _ in range(length)]
    if chars[0] not in HANDLE_LEADING_ALPHABET:
        chars[0] = chooser.choice(HANDLE_LEADING_ALPHABET)
    return "".join(chars)


def is_valid_handle(value: object) -> bool:
    """Check that a value is a non-empty handle slug (lowercase alphanumerics and hyphens)."""
    return isinstance(value, str) and HANDLE_RE.match(value) is not None


def is_blank_handle(value: object) -> bool:
    return value is None or (isinstance(value, str) and not value.strip())
