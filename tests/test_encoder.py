"""Tests for the submission encoder."""

from datetime import date, datetime, time

from content_forms.encoder import encode, ensure_handle, prepare_submission
from content_forms.handles import is_valid_handle
from content_forms.models.field_definitions import (
    ChoiceField,
    DateField,
    MediaField,
    TextField,
)


FIELDS = [
    TextField(id=1, label="Title"),
    DateField(id=2, label="Starts"),
    DateField(id=3, label="Opening", sub_type="time", is_array=True),
    ChoiceField(id=4, label="Tags", sub_type="multiple", options=["a", "b"]),
    MediaField(id=5, label="Gallery", is_array=True),
]


class TestEncode:
    """Tests for encode."""

    def test_dates_to_iso(self):
        """Test that dates are stored as ISO strings."""
        payload = encode(
            {"starts": datetime(2024, 5, 1, 9, 0), "opening": [time(9, 0), time(14, 30)]},
            FIELDS,
        )
        assert payload["starts"] == "2024-05-01T09:00:00"
        assert payload["opening"] == ["09:00:00", "14:30:00"]

    def test_date_field_value(self):
        """Test a plain date value."""
        payload = encode({"starts": date(2024, 5, 1)}, [DateField(id=1, label="Starts", sub_type="date")])
        assert payload == {"starts": "2024-05-01"}

    def test_list_fields_never_null(self):
        """Test that declared list fields are always emitted as lists."""
        payload = encode({"gallery": None}, FIELDS)
        assert payload["gallery"] == []
        assert payload["opening"] == []

    def test_scalar_wrapped(self):
        """Test that a scalar on a list field is wrapped."""
        assert encode({"gallery": 4}, FIELDS)["gallery"] == [4]

    def test_handle_and_stray_keys_left_out(self):
        """Test that only declared keys are emitted."""
        payload = encode({"handle": "x", "title": "Hi", "legacy": 1}, FIELDS)
        assert "handle" not in payload
        assert "legacy" not in payload
        assert payload["title"] == "Hi"

    def test_missing_scalar_skipped(self):
        """Test that a declared scalar missing from values is not emitted."""
        payload = encode({}, FIELDS)
        assert "title" not in payload
        assert "starts" not in payload

    def test_multiple_choice_passthrough(self):
        """Test that multi-select lists are kept as lists."""
        assert encode({"tags": ["a", "b"]}, FIELDS)["tags"] == ["a", "b"]


class TestEnsureHandle:
    """Tests for handle fallback."""

    def test_blank_handle_generated(self):
        """Test that a blank handle is generated and written back."""
        state = {"handle": "  ", "title": "Hi"}
        handle, generated = ensure_handle(state, 8)
        assert generated is True
        assert len(handle) == 8
        assert state["handle"] == handle
        assert is_valid_handle(handle)

    def test_missing_handle_generated(self):
        """Test a form state without any handle key."""
        state = {}
        handle, generated = ensure_handle(state)
        assert generated is True
        assert state["handle"] == handle

    def test_existing_handle_kept(self):
        """Test that a filled handle is left alone."""
        state = {"handle": "about-us"}
        assert ensure_handle(state) == ("about-us", False)
        assert state["handle"] == "about-us"


class TestPrepareSubmission:
    """Tests for prepare_submission."""

    def test_submission(self):
        """Test building a submission from form state."""
        state = {"handle": "", "title": "Hi", "gallery": [1]}
        submission = prepare_submission(state, FIELDS, handle_length=10)
        assert submission.handle_generated is True
        assert submission.handle == state["handle"]
        assert len(submission.handle) == 10
        assert submission.to_payload()["meta_data"]["title"] == "Hi"
        assert submission.to_payload()["meta_data"]["gallery"] == [1]
