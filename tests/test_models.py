"""Tests for content-forms data models."""

import pytest
from pydantic import ValidationError

from content_forms.models.field_definitions import (
    BooleanField,
    ChoiceField,
    DateField,
    Format,
    MediaField,
    NumberField,
    TextField,
    field_from_cms,
    parse_field,
)
from content_forms.models.record import Record, Submission
from content_forms.models.validation_result import (
    ErrorKind,
    FieldValidationError,
    ValidationResult,
)


class TestFieldDefinitions:
    """Tests for the field definition union."""

    def test_basic_field(self):
        """Test creating a basic text field."""
        field = TextField(id=1, label="Title")
        assert field.kind == "text"
        assert field.required is False
        assert field.is_array is False
        assert field.sub_type == "default"

    def test_parse_by_kind(self):
        """Test that the kind discriminator picks the model."""
        field = parse_field({"id": 2, "kind": "number", "label": "Seats", "min": 1, "max": 10})
        assert isinstance(field, NumberField)
        assert field.min == 1
        assert field.max == 10

    def test_unknown_kind_rejected(self):
        """Test that kinds outside the closed set are rejected."""
        with pytest.raises(ValidationError):
            parse_field({"id": 3, "kind": "color", "label": "Tint"})

    def test_fields_are_immutable(self):
        """Test that field definitions cannot be changed in place."""
        field = ChoiceField(id=4, label="Tags", options=["a", "b"])
        with pytest.raises(ValidationError):
            field.label = "Other"

    def test_choice_multiple(self):
        """Test the multiple flag of choice fields."""
        assert ChoiceField(id=1, sub_type="multiple").is_multiple
        assert not ChoiceField(id=1).is_multiple


class TestCmsAdapter:
    """Tests for translating CMS dynamic-zone components."""

    def test_text_component(self):
        """Test a rich-text component."""
        field = field_from_cms({
            "id": 7,
            "__component": "dynamic-component.text-field",
            "label": "Body",
            "required": True,
            "inputType": "tip-tap",
            "max": 5000,
        })
        assert isinstance(field, TextField)
        assert field.sub_type == "rich-text"
        assert field.required is True
        assert field.max == 5000

    def test_enum_component(self):
        """Test an enum component with tag values."""
        field = field_from_cms({
            "id": 8,
            "__component": "dynamic-component.enum-field",
            "label": "Tags",
            "type": "multi-select",
            "Values": [{"id": 1, "tag_value": "news"}, {"id": 2, "tag_value": ""}, {"id": 3, "tag_value": "blog"}],
            "default": "news",
        })
        assert isinstance(field, ChoiceField)
        assert field.is_multiple
        assert field.options == ["news", "blog"]

    def test_date_and_media_types(self):
        """Test sub-type mapping for dates and media."""
        date_field = field_from_cms({"id": 1, "__component": "dynamic-component.date-field", "type": "data&time"})
        media_field = field_from_cms({"id": 2, "__component": "dynamic-component.media-field", "type": "pdf", "is_array": True})
        assert isinstance(date_field, DateField)
        assert date_field.sub_type == "datetime"
        assert isinstance(media_field, MediaField)
        assert media_field.sub_type == "document"
        assert media_field.is_array is True

    def test_numeric_text_default(self):
        """Test that a numeric text default is kept as a string."""
        fmt = Format.from_cms({
            "from_formate": [
                {"id": 1, "__component": "dynamic-component.text-field", "label": "Code", "default": 5},
            ],
        })
        assert len(fmt.fields) == 1
        assert fmt.fields[0].default == "5"

    def test_number_float_is_decimal(self):
        """Test that CMS float numbers map to decimal."""
        field = field_from_cms({"id": 1, "__component": "dynamic-component.number-field", "type": "float"})
        assert isinstance(field, NumberField)
        assert field.sub_type == "decimal"

    def test_invalid_components_skipped(self):
        """Test that malformed components are skipped, not fatal."""
        assert field_from_cms({"id": 1}) is None
        assert field_from_cms({"id": 1, "__component": "dynamic-component.color-field"}) is None
        assert field_from_cms({"__component": "dynamic-component.boolean-field"}) is None

    def test_format_from_cms(self):
        """Test building a whole format from a meta-format entry."""
        fmt = Format.from_cms({
            "id": 12,
            "documentId": "abc123",
            "name": "Team member",
            "from_formate": [
                {"id": 1, "__component": "dynamic-component.text-field", "label": "Name"},
                {"id": 2},
                {"id": 3, "__component": "dynamic-component.boolean-field", "label": "Active"},
            ],
        })
        assert fmt.name == "Team member"
        assert fmt.document_id == "abc123"
        assert [f.kind for f in fmt.fields] == ["text", "boolean"]

    def test_format_from_dict(self):
        """Test validating a Format from a plain dict."""
        fmt = Format.model_validate({
            "name": "Event",
            "fields": [
                {"id": 1, "kind": "date", "label": "Starts", "sub_type": "date"},
                {"id": 2, "kind": "media-reference", "label": "Cover"},
            ],
        })
        assert isinstance(fmt.fields[0], DateField)
        assert isinstance(fmt.fields[1], MediaField)


class TestRecord:
    """Tests for Record and Submission."""

    def test_record_from_cms(self):
        """Test reading handle and meta_data from a CMS entry."""
        record = Record.from_cms({"handle": "about-us", "meta_data": {"title": "About"}, "tenent_id": "t1"})
        assert record.handle == "about-us"
        assert record.data == {"title": "About"}

    def test_record_from_cms_without_data(self):
        """Test that a missing meta_data blob becomes an empty dict."""
        record = Record.from_cms({"handle": None, "meta_data": None})
        assert record.handle == ""
        assert record.data == {}

    def test_submission_payload(self):
        """Test exporting the CMS request shape."""
        submission = Submission(handle="x1", data={"title": "Hi"}, handle_generated=True)
        assert submission.to_payload() == {"handle": "x1", "meta_data": {"title": "Hi"}}


class TestValidationResult:
    """Tests for ValidationResult model."""

    def test_valid_result(self):
        """Test valid validation result."""
        result = ValidationResult(
            is_valid=True,
            validated_data={"handle": "about"},
        )
        assert result.is_valid
        assert result.error_count == 0

    def test_invalid_result(self):
        """Test invalid validation result with errors."""
        result = ValidationResult(
            is_valid=False,
            errors=[
                FieldValidationError(
                    field_name="email",
                    label="Email",
                    error_type=ErrorKind.PATTERN_MISMATCH,
                    message="Invalid email address.",
                ),
            ],
        )
        assert not result.is_valid
        assert result.error_count == 1
        assert len(result.get_field_errors("email")) == 1
        assert result.error_kinds("email") == [ErrorKind.PATTERN_MISMATCH]

    def test_error_dict_conversion(self):
        """Test converting errors to dict format."""
        result = ValidationResult(
            is_valid=False,
            errors=[
                FieldValidationError(
                    field_name="tags",
                    error_type=ErrorKind.INVALID_ENUM_VALUE,
                    message="Tags: 'x' is not one of the allowed options.",
                    index=0,
                ),
                FieldValidationError(
                    field_name="tags",
                    error_type=ErrorKind.INVALID_ENUM_VALUE,
                    message="Tags: 'y' is not one of the allowed options.",
                    index=1,
                ),
                FieldValidationError(
                    field_name="seats",
                    error_type=ErrorKind.OUT_OF_RANGE,
                    message="Seats must be at least 1.",
                    minimum=1,
                ),
            ],
        )
        error_dict = result.to_error_dict()
        assert len(error_dict["tags"]) == 2
        assert len(error_dict["seats"]) == 1

    def test_json_dump_uses_kind_values(self):
        """Test that error kinds serialize as their string values."""
        error = FieldValidationError(
            field_name="handle",
            error_type=ErrorKind.MISSING_REQUIRED,
            message="Handle is required.",
        )
        assert error.model_dump(mode="json")["error_type"] == "missing_required"
