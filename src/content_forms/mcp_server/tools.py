"""
MCP Tool definitions for content-forms.

Wraps the compiler, hydrator and encoder as MCP tools. Each handler
takes the tool arguments dict and returns a JSON-ready dict.
"""

import logging
from typing import Any, Callable

from pydantic_core import to_jsonable_python

from content_forms.compiler import compile_format
from content_forms.encoder import prepare_submission
from content_forms.handles import generate_handle
from content_forms.hydrator import hydrate
from content_forms.models.field_definitions import Format
from content_forms.models.record import Record

logger = logging.getLogger("content-forms.mcp")


def load_format(payload: dict[str, Any]) -> Format:
    """Accept either a CMS meta-format (``from_formate``) or a Format dict (``fields``)."""
    if "from_formate" in payload:
        return Format.from_cms(payload)
    return Format.model_validate(payload)


def mcp_compile_format(arguments: dict[str, Any]) -> dict[str, Any]:
    schema = compile_format(load_format(arguments["format"]))
    return {
        "keys": schema.keys,
        "defaults": to_jsonable_python(schema.defaults),
        "widgets": schema.widgets(),
        "json_schema": schema.to_json_schema(),
    }


def mcp_validate_values(arguments: dict[str, Any]) -> dict[str, Any]:
    schema = compile_format(load_format(arguments["format"]))
    result = schema.validate(arguments.get("values") or {})
    return result.model_dump(mode="json")


def mcp_hydrate_record(arguments: dict[str, Any]) -> dict[str, Any]:
    record = arguments.get("record") or {}
    values = hydrate(
        Record(handle=record.get("handle") or "", data=record.get("data") or {}),
        load_format(arguments["format"]),
    )
    return {"values": to_jsonable_python(values)}


def mcp_encode_values(arguments: dict[str, Any]) -> dict[str, Any]:
    form_state = dict(arguments.get("values") or {})
    submission = prepare_submission(
        form_state,
        load_format(arguments["format"]),
        handle_length=arguments.get("handle_length"),
    )
    return {
        "payload": to_jsonable_python(submission.to_payload()),
        "handle_generated": submission.handle_generated,
    }


def mcp_generate_handle(arguments: dict[str, Any]) -> dict[str, Any]:
    return {"handle": generate_handle(arguments.get("length"))}


TOOL_HANDLERS: dict[str, Callable[[dict[str, Any]], dict[str, Any]]] = {
    "compile_format": mcp_compile_format,
    "validate_values": mcp_validate_values,
    "hydrate_record": mcp_hydrate_record,
    "encode_values": mcp_encode_values,
    "generate_handle": mcp_generate_handle,
}


_FORMAT_PROPERTY = {
    "type": "object",
    "description": (
        "Format definition: either {name, description, fields: [{id, kind, label, required, "
        "is_array, ...}]} or a CMS meta-format entry with a from_formate dynamic zone"
    ),
}


def get_mcp_tools() -> list[dict]:
    """
    Get MCP tool definitions for registration with MCP server.

    Returns list of tool schemas compatible with MCP protocol.
    """
    return [
        {
            "name": "compile_format",
            "description": (
                "Compile a format into its storage keys, default values, widget hints "
                "and a JSON Schema describing valid records."
            ),
            "inputSchema": {
                "type": "object",
                "properties": {"format": _FORMAT_PROPERTY},
                "required": ["format"],
            },
        },
        {
            "name": "validate_values",
            "description": (
                "Validate form values (keyed by storage key, plus handle) against a format. "
                "Returns every error at once with its field, kind and message."
            ),
            "inputSchema": {
                "type": "object",
                "properties": {
                    "format": _FORMAT_PROPERTY,
                    "values": {"type": "object", "description": "Form values keyed by storage key"},
                },
                "required": ["format", "values"],
            },
        },
        {
            "name": "hydrate_record",
            "description": (
                "Decode a stored record {handle, data} into edit-form values for a format. "
                "Keys the format no longer declares are ignored."
            ),
            "inputSchema": {
                "type": "object",
                "properties": {
                    "format": _FORMAT_PROPERTY,
                    "record": {
                        "type": "object",
                        "properties": {
                            "handle": {"type": "string"},
                            "data": {"type": "object"},
                        },
                    },
                },
                "required": ["format", "record"],
            },
        },
        {
            "name": "encode_values",
            "description": (
                "Encode form values into the storage payload {handle, meta_data}. "
                "A blank handle is replaced with a generated one."
            ),
            "inputSchema": {
                "type": "object",
                "properties": {
                    "format": _FORMAT_PROPERTY,
                    "values": {"type": "object", "description": "Form values keyed by storage key"},
                    "handle_length": {
                        "type": "integer",
                        "description": "Length of a generated handle (default: 12)",
                    },
                },
                "required": ["format", "values"],
            },
        },
        {
            "name": "generate_handle",
            "description": "Generate a random record handle that starts with a letter.",
            "inputSchema": {
                "type": "object",
                "properties": {
                    "length": {
                        "type": "integer",
                        "description": "Number of characters (default: 12)",
                    },
                },
            },
        },
    ]
