#!/usr/bin/env python3
"""
MCP Server SSE Example

Connects to a content-forms MCP server running with SSE transport,
encodes a submission with a blank handle and maps it back into form
values.

Prerequisites:
    python run_mcp_server.py --transport sse --port 8080

    # Health check
    curl http://localhost:8080/health

Usage:
    python examples/mcp_sse_example.py [http://localhost:8080/sse]
"""

import asyncio
import json
import sys

from mcp import ClientSession
from mcp.client.sse import sse_client

TEAM_FORMAT = {
    "id": 4,
    "documentId": "team-member",
    "name": "Team member",
    "from_formate": [
        {"id": 1, "__component": "dynamic-component.text-field", "label": "Name", "required": True},
        {"id": 2, "__component": "dynamic-component.text-field", "label": "Email", "inputType": "email"},
        {"id": 3, "__component": "dynamic-component.boolean-field", "label": "Active", "default": "true"},
        {"id": 4, "__component": "dynamic-component.media-field", "label": "Portrait", "type": "image"},
    ],
}


async def main():
    mcp_url = sys.argv[1] if len(sys.argv) > 1 else "http://localhost:8080/sse"

    print("=" * 60)
    print("content-forms MCP Server SSE Example")
    print("=" * 60)
    print(f"MCP Server URL: {mcp_url}\n")

    async with sse_client(mcp_url) as (read_stream, write_stream):
        async with ClientSession(read_stream, write_stream) as session:
            await session.initialize()

            result = await session.call_tool(
                "encode_values",
                {
                    "format": TEAM_FORMAT,
                    "values": {"handle": "", "name": "Ada", "email": "ada@example.com", "active": True, "portrait": 17},
                },
            )
            encoded = json.loads(result.content[0].text)
            print("Encoded payload:")
            print(json.dumps(encoded, indent=2))

            payload = encoded["payload"]
            result = await session.call_tool(
                "hydrate_record",
                {"format": TEAM_FORMAT, "record": {"handle": payload["handle"], "data": payload["meta_data"]}},
            )
            print("\nHydrated form values:")
            print(json.dumps(json.loads(result.content[0].text), indent=2))


if __name__ == "__main__":
    try:
        asyncio.run(main())
    except KeyboardInterrupt:
        print("\nInterrupted.")
    except Exception as e:
        print(f"Error: {e}")
        print("Make sure the server is running: python run_mcp_server.py --transport sse")
        sys.exit(1)
