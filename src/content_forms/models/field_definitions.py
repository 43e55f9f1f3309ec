"""
Field definition models for extra-content formats.

A Format is an ordered list of typed field definitions. Each kind of
field is its own model and the kinds are joined in a discriminated
union on ``kind``, so every consumer dispatches over a closed set.

The CMS stores these definitions as dynamic-zone components
(``dynamic-component.text-field`` and friends); ``field_from_cms`` and
``Format.from_cms`` translate that wire shape into the models here.
"""

import logging
from typing import Annotated, Any, Literal, Union

from pydantic import BaseModel, ConfigDict, Field, TypeAdapter, ValidationError

from content_forms.constants import CMS_COMPONENT_KINDS

logger = logging.getLogger("content-forms")

FieldKind = Literal["text", "number", "choice", "date", "boolean", "media-reference"]
FIELD_KINDS: tuple[str, ...] = ("text", "number", "choice", "date", "boolean", "media-reference")


class BaseField(BaseModel):
    """Attributes shared by every field kind."""

    model_config = ConfigDict(frozen=True)

    id: int = Field(..., description="Stable identifier of the field within its format")
    label: str | None = Field(default=None, description="Human-readable label, basis of the storage key")
    description: str | None = Field(default=None, description="Help text")
    placeholder: str | None = Field(default=None, description="Placeholder text")
    required: bool = Field(default=False, description="Whether a value must be provided")
    is_array: bool = Field(default=False, description="Whether the field stores 0..N values")


class TextField(BaseField):
    """Free text, optionally an email address or rich-text HTML."""

    kind: Literal["text"] = "text"
    sub_type: Literal["default", "email", "rich-text"] = Field(default="default")
    min: int | None = Field(default=None, ge=0, description="Minimum length")
    max: int | None = Field(default=None, ge=0, description="Maximum length")
    default: str | None = Field(default=None)


class NumberField(BaseField):
    """Numeric value with optional bounds."""

    kind: Literal["number"] = "number"
    sub_type: Literal["integer", "decimal"] = Field(default="decimal")
    min: float | None = Field(default=None, description="Minimum value")
    max: float | None = Field(default=None, description="Maximum value")
    default: str | float | None = Field(default=None)


class ChoiceField(BaseField):
    """One or many values picked from an ordered list of options."""

    kind: Literal["choice"] = "choice"
    sub_type: Literal["single", "multiple"] = Field(default="single")
    options: list[str] = Field(default_factory=list, description="Allowed values in display order")
    default: str | list[str] | None = Field(default=None)

    @property
    def is_multiple(self) -> bool:
        return self.sub_type == "multiple"


class DateField(BaseField):
    """Calendar date, time of day, or both."""

    kind: Literal["date"] = "date"
    sub_type: Literal["date", "time", "datetime"] = Field(default="datetime")
    default: str | None = Field(default=None, description="ISO-8601 literal")


class BooleanField(BaseField):
    """On/off switch."""

    kind: Literal["boolean"] = "boolean"
    default: bool | str | None = Field(default=None, description="true/false literal")


class MediaField(BaseField):
    """Reference to a media asset by its numeric id."""

    kind: Literal["media-reference"] = "media-reference"
    sub_type: Literal["image", "video", "document", "any"] = Field(default="any")


FieldDefinition = Annotated[
    Union[TextField, NumberField, ChoiceField, DateField, BooleanField, MediaField],
    Field(discriminator="kind"),
]

field_definition_adapter: TypeAdapter[FieldDefinition] = TypeAdapter(FieldDefinition)


def parse_field(data: dict[str, Any]) -> FieldDefinition:
    """Validate a plain dict (with a ``kind`` key) into a field definition."""
    return field_definition_adapter.validate_python(data)


# CMS attribute values -> sub_type
_TEXT_INPUT_TYPES = {"email": "email", "tip-tap": "rich-text"}
_NUMBER_TYPES = {"integer": "integer", "float": "decimal", "decimal": "decimal"}
_CHOICE_TYPES = {"single-select": "single", "multi-select": "multiple"}
_DATE_TYPES = {"date": "date", "time": "time", "datetime": "datetime", "data&time": "datetime"}
_MEDIA_TYPES = {"image": "image", "video": "video", "pdf": "document", "media": "any", "other": "any"}


def field_from_cms(component: dict[str, Any]) -> FieldDefinition | None:
    """
    Translate one CMS dynamic-zone component into a field definition.

    Malformed components (no ``__component``, an unknown component type,
    or attributes that fail validation) are skipped with a warning and
    ``None`` is returned, so a single bad entry does not hide the rest
    of the format.

    Args:
        component: Component dict as returned by the CMS API.
            Example: {"id": 3, "__component": "dynamic-component.text-field",
                      "label": "Title", "required": true}

    Returns:
        The field definition, or None if the component was skipped.
    """
    if not isinstance(component, dict) or not component.get("__component"):
        logger.warning(f"Skipping an invalid component in format: {component!r}")
        return None

    kind = CMS_COMPONENT_KINDS.get(component["__component"])
    if kind is None:
        logger.warning(f"Skipping unknown component type: {component['__component']}")
        return None

    data: dict[str, Any] = {
        "kind": kind,
        "id": component.get("id"),
        "label": component.get("label"),
        "description": component.get("description"),
        "placeholder": component.get("placeholder"),
        "required": bool(component.get("required")),
        "is_array": bool(component.get("is_array")),
    }
    cms_type = component.get("type")

    if kind == "text":
        data["sub_type"] = _TEXT_INPUT_TYPES.get(component.get("inputType") or "", "default")
        data["min"] = component.get("min")
        data["max"] = component.get("max")
        default = component.get("default")
        data["default"] = None if default is None else str(default)
    elif kind == "number":
        data["sub_type"] = _NUMBER_TYPES.get(cms_type or "", "decimal")
        data["min"] = component.get("min")
        data["max"] = component.get("max")
        data["default"] = component.get("default")
    elif kind == "choice":
        data["sub_type"] = _CHOICE_TYPES.get(cms_type or "", "single")
        data["options"] = [
            value["tag_value"]
            for value in component.get("Values") or []
            if isinstance(value, dict) and value.get("tag_value")
        ]
        data["default"] = component.get("default")
    elif kind == "date":
        data["sub_type"] = _DATE_TYPES.get(cms_type or "", "datetime")
        data["default"] = component.get("default")
    elif kind == "boolean":
        data["default"] = component.get("default")
    elif kind == "media-reference":
        data["sub_type"] = _MEDIA_TYPES.get(cms_type or "", "any")

    try:
        return parse_field(data)
    except ValidationError as e:
        logger.warning(f"Skipping component {component['__component']} ({component.get('id')}): {e}")
        return None


class Format(BaseModel):
    """
    Administrator-defined record shape.

    Read-only from the compiler's point of view: a changed format is a
    new Format and gets compiled again.
    """

    model_config = ConfigDict(frozen=True)

    id: int | None = Field(default=None)
    document_id: str | None = Field(default=None, description="CMS document identifier")
    name: str | None = Field(default=None, description="Format name")
    description: str | None = Field(default=None, description="Format description")
    fields: list[FieldDefinition] = Field(default_factory=list, description="Ordered field definitions")

    @classmethod
    def from_cms(cls, payload: dict[str, Any]) -> "Format":
        """Build a Format from a CMS meta-format entry (``from_formate`` dynamic zone)."""
        fields = [
            field
            for field in (field_from_cms(c) for c in payload.get("from_formate") or [])
            if field is not None
        ]
        return cls(
            id=payload.get("id"),
            document_id=payload.get("documentId"),
            name=payload.get("name"),
            description=payload.get("description"),
            fields=fields,
        )
