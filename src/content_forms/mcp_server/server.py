"""
MCP server for content-forms.

Serves the tools from ``tools.py`` over stdio (local clients spawn the
server as a subprocess) or SSE (a long-running HTTP service with a
``/health`` route).
"""

import json
import logging
from typing import Any, Literal

from mcp.server import Server
from mcp.server.sse import SseServerTransport
from mcp.server.stdio import stdio_server
from mcp.types import TextContent, Tool
from starlette.applications import Starlette
from starlette.responses import JSONResponse
from starlette.routing import Mount, Route

from content_forms import __version__
from content_forms.config import get_config
from content_forms.mcp_server.tools import TOOL_HANDLERS, get_mcp_tools

logger = logging.getLogger("content-forms.mcp")

SERVER_NAME = "content-forms-mcp"

Transport = Literal["stdio", "sse"]


def dispatch_tool(name: str, arguments: dict[str, Any] | None) -> str:
    """
    Run one tool and return its result as JSON text.

    An unknown tool name or a failing handler is reported in the JSON
    body (``{"error": ...}``) instead of being raised, so the client
    always gets a readable answer.
    """
    logger.info(f"Tool call: {name}")

    handler = TOOL_HANDLERS.get(name)
    if handler is None:
        logger.warning(f"Unknown tool requested: {name}")
        return json.dumps({"error": f"Unknown tool: {name}"})

    try:
        result = handler(arguments or {})
    except Exception as e:
        logger.error(f"Tool {name} failed: {type(e).__name__}: {e}")
        return json.dumps({"error": str(e), "error_type": type(e).__name__})
    return json.dumps(result, indent=get_config().indent_json_output)


def create_mcp_server() -> Server:
    """Build the MCP server with every content-forms tool registered."""
    server = Server(SERVER_NAME)
    tools = [
        Tool(name=spec["name"], description=spec["description"], inputSchema=spec["inputSchema"])
        for spec in get_mcp_tools()
    ]

    @server.list_tools()
    async def list_tools() -> list[Tool]:
        return tools

    @server.call_tool()
    async def call_tool(name: str, arguments: dict[str, Any]) -> list[TextContent]:
        return [TextContent(type="text", text=dispatch_tool(name, arguments))]

    return server


async def run_stdio_server(server: Server) -> None:
    """Serve over stdin/stdout until the client disconnects."""
    logger.info(f"{SERVER_NAME} {__version__} listening on stdio")

    async with stdio_server() as (read_stream, write_stream):
        await server.run(read_stream, write_stream, server.create_initialization_options())


def create_sse_app(server: Server) -> Starlette:
    """
    Starlette app serving the MCP server over SSE.

    Routes:
        GET  /health           service status and tool names
        GET  /sse              event stream for one client session
        POST /sse/messages/    client messages for a session
    """
    # Relative to the /sse mount; the transport prefixes the root path
    transport = SseServerTransport("/messages/")

    async def sse_endpoint(scope, receive, send):
        async with transport.connect_sse(scope, receive, send) as (read_stream, write_stream):
            await server.run(read_stream, write_stream, server.create_initialization_options())

    async def messages_endpoint(scope, receive, send):
        await transport.handle_post_message(scope, receive, send)

    async def health(request):
        return JSONResponse({
            "status": "healthy",
            "service": SERVER_NAME,
            "version": __version__,
            "transport": "sse",
            "tools": sorted(TOOL_HANDLERS),
        })

    return Starlette(
        routes=[
            Route("/health", health, methods=["GET"]),
            Mount("/sse/messages", app=messages_endpoint),
            Mount("/sse", app=sse_endpoint),
        ],
    )


async def run_sse_server(server: Server, host: str = "0.0.0.0", port: int = 8080) -> None:
    """Serve over HTTP with uvicorn until interrupted."""
    import uvicorn

    logger.info(f"{SERVER_NAME} {__version__} listening on http://{host}:{port}/sse")

    uvicorn_config = uvicorn.Config(
        create_sse_app(server),
        host=host,
        port=port,
        log_level=get_config().log_level.lower(),
    )
    await uvicorn.Server(uvicorn_config).serve()


async def run_mcp_server(transport: Transport = "stdio", host: str = "0.0.0.0", port: int = 8080) -> None:
    """
    Create the server and run it on the chosen transport.

    Args:
        transport: ``stdio`` or ``sse``.
        host: Bind address, SSE only.
        port: Listen port, SSE only.

    Raises:
        ValueError: For any other transport name.
    """
    if transport not in ("stdio", "sse"):
        raise ValueError(f"Unknown transport: {transport}. Use 'stdio' or 'sse'.")

    server = create_mcp_server()
    if transport == "stdio":
        await run_stdio_server(server)
    else:
        await run_sse_server(server, host, port)
