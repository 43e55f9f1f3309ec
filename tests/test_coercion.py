"""Tests for input normalization helpers."""

from datetime import date, datetime, time, timezone

from content_forms.coercion import (
    MISSING,
    coerce_media_id,
    coerce_number,
    format_temporal,
    normalize_empty_input,
    parse_temporal,
)


class TestNormalizeEmptyInput:
    """Tests for normalize_empty_input."""

    def test_required_empty_becomes_missing(self):
        """Test that empty inputs on a required field become MISSING."""
        for value in ("", None, MISSING):
            assert normalize_empty_input(value, required=True) is MISSING

    def test_optional_empty_becomes_none(self):
        """Test that empty inputs on an optional field become None."""
        for value in ("", None, MISSING):
            assert normalize_empty_input(value, required=False) is None

    def test_other_values_unchanged(self):
        """Test that non-empty inputs pass through, even non-numeric ones."""
        assert normalize_empty_input("abc", required=True) == "abc"
        assert normalize_empty_input(0, required=True) == 0
        assert normalize_empty_input(" ", required=False) == " "


class TestCoerceNumber:
    """Tests for coerce_number."""

    def test_numeric_strings(self):
        """Test conversion of numeric strings."""
        assert coerce_number("5") == 5
        assert isinstance(coerce_number("5"), int)
        assert coerce_number(" 2.5 ") == 2.5
        assert coerce_number("1e3") == 1000.0

    def test_non_numeric_passthrough(self):
        """Test that other strings come back unchanged."""
        assert coerce_number("abc") == "abc"
        assert coerce_number("nan") == "nan"
        assert coerce_number("1_000") == "1_000"

    def test_numbers_unchanged(self):
        """Test that numbers are returned as they are."""
        assert coerce_number(3) == 3
        assert coerce_number(1.5) == 1.5
        assert coerce_number(True) is True


class TestParseTemporal:
    """Tests for parse_temporal."""

    def test_datetime_string(self):
        """Test parsing a full timestamp."""
        assert parse_temporal("2024-05-01T09:30:00") == datetime(2024, 5, 1, 9, 30)

    def test_utc_suffix(self):
        """Test parsing an ISO string with a Z suffix."""
        assert parse_temporal("2024-05-01T09:30:00.000Z") == datetime(2024, 5, 1, 9, 30, tzinfo=timezone.utc)

    def test_date_only(self):
        """Test date fields, including a stored full timestamp."""
        assert parse_temporal("2024-05-01", "date") == date(2024, 5, 1)
        assert parse_temporal("2024-05-01T23:00:00Z", "date") == date(2024, 5, 1)

    def test_time_only(self):
        """Test time fields."""
        assert parse_temporal("09:15", "time") == time(9, 15)
        assert parse_temporal("2024-05-01T09:15:00", "time") == time(9, 15)

    def test_date_for_datetime_field(self):
        """Test that a date-only string is midnight for a datetime field."""
        assert parse_temporal("2024-05-01", "datetime") == datetime(2024, 5, 1)

    def test_native_values(self):
        """Test that native objects are narrowed to the wanted part."""
        moment = datetime(2024, 5, 1, 9, 30)
        assert parse_temporal(moment, "datetime") is moment
        assert parse_temporal(moment, "date") == date(2024, 5, 1)
        assert parse_temporal(date(2024, 5, 1), "datetime") == datetime(2024, 5, 1)
        assert parse_temporal(time(8, 0), "date") is None

    def test_invalid_values(self):
        """Test that unparseable values yield None."""
        assert parse_temporal("not-a-date") is None
        assert parse_temporal("2024-13-45", "date") is None
        assert parse_temporal("") is None
        assert parse_temporal(12345) is None
        assert parse_temporal(None) is None


class TestFormatTemporal:
    """Tests for format_temporal."""

    def test_iso_strings(self):
        """Test ISO output for each temporal type."""
        assert format_temporal(datetime(2024, 5, 1, 9, 30)) == "2024-05-01T09:30:00"
        assert format_temporal(date(2024, 5, 1)) == "2024-05-01"
        assert format_temporal(time(9, 30)) == "09:30:00"

    def test_other_values_unchanged(self):
        """Test that non-temporal values pass through."""
        assert format_temporal("not-a-date") == "not-a-date"
        assert format_temporal(None) is None


class TestCoerceMediaId:
    """Tests for coerce_media_id."""

    def test_numeric_values(self):
        """Test ints, integral floats and numeric strings."""
        assert coerce_media_id(42) == 42
        assert coerce_media_id(42.0) == 42
        assert coerce_media_id("42") == 42
        assert coerce_media_id(" 7 ") == 7

    def test_junk_values(self):
        """Test that non-id values yield None."""
        assert coerce_media_id("https://cdn.example.com/a.png") is None
        assert coerce_media_id({"id": 4}) is None
        assert coerce_media_id("4.5") is None
        assert coerce_media_id(True) is None
        assert coerce_media_id(None) is None

    def test_non_positive_ids(self):
        """Test that zero and negative ids are not asset ids."""
        assert coerce_media_id(0) is None
        assert coerce_media_id(-5) is None
        assert coerce_media_id("-3") is None
        assert coerce_media_id(-2.0) is None
