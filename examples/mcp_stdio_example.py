#!/usr/bin/env python3
"""
MCP Server stdio Example

Starts the content-forms MCP server as a subprocess, compiles a small
format, validates a submission and hydrates a stored record.

Usage:
    pip install -e .
    python examples/mcp_stdio_example.py
"""

import asyncio
import json
import sys
from pathlib import Path

from mcp import ClientSession, StdioServerParameters
from mcp.client.stdio import stdio_client

SERVER_SCRIPT = Path(__file__).parent.parent / "run_mcp_server.py"

EVENT_FORMAT = {
    "name": "Event",
    "fields": [
        {"id": 1, "kind": "text", "label": "Title", "required": True, "max": 80},
        {"id": 2, "kind": "number", "label": "Seats", "required": True, "min": 1, "max": 500, "sub_type": "integer"},
        {"id": 3, "kind": "choice", "label": "Tags", "sub_type": "multiple", "options": ["talk", "workshop", "social"]},
        {"id": 4, "kind": "date", "label": "Starts At", "required": True, "sub_type": "datetime"},
        {"id": 5, "kind": "media-reference", "label": "Cover", "sub_type": "image"},
    ],
}


async def call(session: ClientSession, name: str, arguments: dict) -> dict:
    result = await session.call_tool(name, arguments)
    return json.loads(result.content[0].text)


async def main():
    params = StdioServerParameters(
        command=sys.executable,
        args=[str(SERVER_SCRIPT), "--transport", "stdio"],
    )

    async with stdio_client(params) as (read_stream, write_stream):
        async with ClientSession(read_stream, write_stream) as session:
            await session.initialize()

            tools = await session.list_tools()
            print("Tools:", ", ".join(t.name for t in tools.tools))

            compiled = await call(session, "compile_format", {"format": EVENT_FORMAT})
            print("\nDefaults:", json.dumps(compiled["defaults"], indent=2))

            invalid = await call(session, "validate_values", {
                "format": EVENT_FORMAT,
                "values": {"handle": "", "title": "Meetup", "seats": "0", "tags": ["talk", "party"]},
            })
            print("\nValidation errors:")
            for error in invalid["errors"]:
                print(f"  - {error['field_name']}: [{error['error_type']}] {error['message']}")

            hydrated = await call(session, "hydrate_record", {
                "format": EVENT_FORMAT,
                "record": {
                    "handle": "spring-meetup",
                    "data": {"title": "Spring meetup", "seats": 40, "starts_at": "2024-04-12T18:30:00", "cover": "17", "old_field": 1},
                },
            })
            print("\nHydrated:", json.dumps(hydrated["values"], indent=2))

            encoded = await call(session, "encode_values", {"format": EVENT_FORMAT, "values": hydrated["values"]})
            print("\nPayload:", json.dumps(encoded["payload"], indent=2))


if __name__ == "__main__":
    asyncio.run(main())
