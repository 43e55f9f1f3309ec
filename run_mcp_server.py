"""
Start the content-forms MCP server.

    python run_mcp_server.py                         # stdio, for local MCP clients
    python run_mcp_server.py --transport sse         # HTTP/SSE on MCP_HOST:MCP_PORT
    MCP_TRANSPORT=sse MCP_PORT=9000 python run_mcp_server.py
"""

import argparse
import asyncio
import sys

from content_forms.config import get_config
from content_forms.mcp_server import run_mcp_server
from content_forms.tracing import setup_tracing

ENVIRONMENT_HELP = """
environment:
  MCP_TRANSPORT                    stdio or sse
  MCP_HOST, MCP_PORT               bind address for sse
  CONTENT_FORMS_HANDLE_LENGTH      length of generated handles
  CONTENT_FORMS_LOG_LEVEL          DEBUG, INFO, WARNING, ...
  CONTENT_FORMS_LOG_FILE           also write JSON-lines logs to this file
  CONTENT_FORMS_VERBOSE_OUTPUT     true to log operation timings
"""


def build_parser() -> argparse.ArgumentParser:
    config = get_config()
    parser = argparse.ArgumentParser(
        description="Serve content-forms compile/validate/hydrate/encode tools over MCP.",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog=ENVIRONMENT_HELP,
    )
    parser.add_argument(
        "--transport",
        choices=["stdio", "sse"],
        default=config.mcp_transport,
        help=f"transport to serve on (default: {config.mcp_transport})",
    )
    parser.add_argument("--host", default=config.mcp_host, help=f"sse bind host (default: {config.mcp_host})")
    parser.add_argument("--port", type=int, default=config.mcp_port, help=f"sse port (default: {config.mcp_port})")
    parser.add_argument("--verbose", action="store_true", help="log operation timings")
    return parser


def main():
    args = build_parser().parse_args()

    # stdout carries the stdio protocol, logs go to stderr
    logger = setup_tracing(console=True, verbose=args.verbose)

    try:
        asyncio.run(run_mcp_server(transport=args.transport, host=args.host, port=args.port))
    except KeyboardInterrupt:
        logger.info("Shutting down")
    except Exception as e:
        logger.exception(f"Server stopped: {e}")
        sys.exit(1)


if __name__ == "__main__":
    main()
