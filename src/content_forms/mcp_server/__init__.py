"""
MCP Server module for content-forms.

Provides Model Context Protocol server implementation
with stdio and SSE transport support.
"""

from content_forms.mcp_server.server import create_mcp_server, dispatch_tool, run_mcp_server
from content_forms.mcp_server.tools import get_mcp_tools

__all__ = [
    "create_mcp_server",
    "dispatch_tool",
    "run_mcp_server",
    "get_mcp_tools",
]
