"""
Named input normalizations.

HTML form inputs report an untouched number or date box as an empty
string. These helpers turn such inputs into "absent" before parsing and
convert stored values (ISO strings, stringly ids) into UI-native ones.
They are shared by the compiler, hydrator and encoder.
"""

import math
from datetime import date, datetime, time
from typing import Any, Literal


class _Missing:
    """Sentinel for a value that was not provided at all."""

    _instance = None

    def __new__(cls):
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __repr__(self) -> str:
        return "MISSING"

    def __bool__(self) -> bool:
        return False


MISSING: Any = _Missing()

TemporalKind = Literal["date", "time", "datetime"]


def is_absent(value: Any) -> bool:
    """True for ``MISSING``, ``None`` and the empty string."""
    return value is MISSING or value is None or (isinstance(value, str) and value == "")


def normalize_empty_input(value: Any, required: bool) -> Any:
    """
    Map an empty form input to "absent".

    ``""``, ``None`` and ``MISSING`` become ``MISSING`` for a required
    field, so the required check fires, and ``None`` for an optional one.
    Everything else is returned unchanged.
    """
    if is_absent(value):
        return MISSING if required else None
    return value


def coerce_number(value: Any) -> Any:
    """
    Convert a numeric string into a number.

    Ints and floats are returned as they are. A string that parses as a
    finite number is converted (``int`` when it is a whole-number literal).
    Any other value, including non-numeric strings and booleans, is
    returned unchanged so the type check reports it.
    """
    if not isinstance(value, str):
        return value
    text = value.strip()
    if "_" in text:
        return value
    try:
        return int(text)
    except ValueError:
        pass
    try:
        number = float(text)
    except ValueError:
        return value
    return number if math.isfinite(number) else value


def parse_temporal(value: Any, kind: TemporalKind = "datetime") -> date | time | datetime | None:
    """
    Parse a stored or submitted value into a date, time or datetime.

    Accepts ISO-8601 strings and the native objects. A full timestamp is
    narrowed to its date or time part when the field wants only that
    part. Returns None when the value cannot be parsed.
    """
    if isinstance(value, datetime):
        if kind == "date":
            return value.date()
        if kind == "time":
            return value.time()
        return value
    if isinstance(value, date):
        if kind == "date":
            return value
        if kind == "datetime":
            return datetime.combine(value, time())
        return None
    if isinstance(value, time):
        return value if kind == "time" else None
    if not isinstance(value, str) or not value.strip():
        return None

    text = value.strip()
    try:
        if kind == "date":
            return date.fromisoformat(text)
        if kind == "time":
            return time.fromisoformat(text)
        return datetime.fromisoformat(text)
    except ValueError:
        pass

    # Full timestamps stored for date-only or time-only fields
    if kind != "datetime":
        try:
            parsed = datetime.fromisoformat(text)
        except ValueError:
            return None
        return parsed.date() if kind == "date" else parsed.time()
    return None


def format_temporal(value: Any) -> Any:
    """ISO-8601 string for dates, times and datetimes; anything else unchanged."""
    if isinstance(value, (date, time)):
        return value.isoformat()
    return value


def coerce_media_id(value: Any) -> int | None:
    """
    Coerce a stored media reference into an asset id.

    Positive integers and integral numeric strings become ``int``.
    Anything else (URLs, objects, fractional numbers, booleans, zero or
    negative ids) yields None.
    """
    if isinstance(value, bool):
        return None
    number = coerce_number(value) if isinstance(value, str) else value
    if isinstance(number, float) and number.is_integer():
        number = int(number)
    if isinstance(number, int) and not isinstance(number, bool) and number > 0:
        return number
    return None
