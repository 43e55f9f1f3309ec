"""Tests for the value hydrator."""

import logging
from datetime import date, datetime

import pytest

from content_forms.compiler import compile_format
from content_forms.encoder import encode
from content_forms.hydrator import hydrate
from content_forms.models.field_definitions import (
    BooleanField,
    ChoiceField,
    DateField,
    MediaField,
    NumberField,
    TextField,
)
from content_forms.models.record import Record


@pytest.fixture
def fields():
    return [
        TextField(id=1, label="Title"),
        NumberField(id=2, label="Count", default="3"),
        ChoiceField(id=3, label="Color", options=["red", "blue"]),
        ChoiceField(id=4, label="Tags", sub_type="multiple", options=["a", "b"]),
        DateField(id=5, label="Due"),
        DateField(id=6, label="Days", sub_type="date", is_array=True),
        BooleanField(id=7, label="Flag", required=True),
        MediaField(id=8, label="Cover"),
        MediaField(id=9, label="Gallery", is_array=True),
        TextField(id=10, label="Notes", is_array=True),
    ]


class TestHydrate:
    """Tests for hydrate."""

    def test_empty_record_uses_defaults(self, fields):
        """Test that a record without data hydrates to the defaults."""
        values = hydrate(Record(handle="launch"), fields)
        expected = compile_format(fields).defaults
        expected["handle"] = "launch"
        assert values == expected
        assert values["flag"] is False
        assert values["count"] == 3

    def test_dates_parsed(self, fields):
        """Test ISO strings become datetime objects."""
        values = hydrate(Record(handle="x", data={"due": "2024-05-01T09:00:00"}), fields)
        assert values["due"] == datetime(2024, 5, 1, 9, 0)

    def test_bad_date_kept_raw(self, fields, caplog):
        """Test that an unparseable stored date is kept as the raw string."""
        with caplog.at_level(logging.WARNING, logger="content-forms"):
            values = hydrate(Record(handle="x", data={"due": "not-a-date"}), fields)
        assert values["due"] == "not-a-date"
        assert "not-a-date" in caplog.text

    def test_date_list_drops_bad_items(self, fields):
        """Test that bad elements of a date list are dropped."""
        values = hydrate(Record(handle="x", data={"days": ["2024-01-01", "bad", "2024-01-02T10:00:00"]}), fields)
        assert values["days"] == [date(2024, 1, 1), date(2024, 1, 2)]

    def test_media_coerced(self, fields, caplog):
        """Test media ids from strings, and junk becoming None."""
        assert hydrate(Record(handle="x", data={"cover": "42"}), fields)["cover"] == 42
        with caplog.at_level(logging.WARNING, logger="content-forms"):
            assert hydrate(Record(handle="x", data={"cover": "https://cdn/x.png"}), fields)["cover"] is None
            assert hydrate(Record(handle="x", data={"cover": "-5"}), fields)["cover"] is None
            assert hydrate(Record(handle="x", data={"cover": 0}), fields)["cover"] is None
        assert "cover" in caplog.text

    def test_media_list_drops_bad_items(self, fields):
        """Test media list coercion."""
        values = hydrate(Record(handle="x", data={"gallery": ["1", "x", 0, "-3", -5, 3, None]}), fields)
        assert values["gallery"] == [1, 3]

    def test_scalar_into_list_field(self, fields):
        """Test that a scalar stored on a list field is wrapped."""
        values = hydrate(Record(handle="x", data={"notes": "one", "tags": "a"}), fields)
        assert values["notes"] == ["one"]
        assert values["tags"] == ["a"]

    def test_null_values(self, fields):
        """Test that stored nulls fall back to defaults or empty lists."""
        values = hydrate(Record(handle="x", data={"notes": None, "flag": None, "count": None}), fields)
        assert values["notes"] == []
        assert values["flag"] is False
        assert values["count"] == 3

    def test_stray_keys_ignored(self, fields):
        """Test that keys no field declares are dropped."""
        values = hydrate(Record(handle="x", data={"title": "Hi", "retired_field": 1}), fields)
        assert "retired_field" not in values
        assert values["title"] == "Hi"

    def test_mapping_record(self, fields):
        """Test hydrating from a plain dict."""
        values = hydrate({"handle": "x", "data": {"color": "red"}}, fields)
        assert values["color"] == "red"

    def test_key_order(self, fields):
        """Test that values follow the declared order with handle first."""
        values = hydrate(Record(handle="x"), fields)
        assert list(values) == compile_format(fields).keys


class TestRoundTrip:
    """Tests for hydrate after encode."""

    def test_round_trip(self, fields):
        """Test that well-typed values survive encode then hydrate."""
        values = {
            "handle": "spring-sale",
            "title": "Spring sale",
            "count": 7,
            "color": "blue",
            "tags": ["a", "b"],
            "due": datetime(2024, 3, 1, 12, 30),
            "days": [date(2024, 3, 1), date(2024, 3, 2)],
            "flag": True,
            "cover": 5,
            "gallery": [6, 7],
            "notes": ["first", "second"],
        }
        stored = encode(values, fields)
        assert stored["due"] == "2024-03-01T12:30:00"
        assert hydrate(Record(handle="spring-sale", data=stored), fields) == values
