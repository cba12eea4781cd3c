"""MCP Server exposing the USFM processor as tools.

Registers:
- process_book              (full book processing)
- process_verse             (text + word tokens for one verse)
- get_translator_sections   (\\ts\\* section ranges)
"""

from __future__ import annotations

import argparse
import logging

from mcp.server.fastmcp import FastMCP

from usfm_processor.processor import ScriptureProcessor
from usfm_processor.tools import processing

logging.basicConfig(level=logging.INFO)
logger = logging.getLogger(__name__)

mcp = FastMCP("usfm-processor")

# Shared processor instance used by the tools
processor = ScriptureProcessor()
processing.register(mcp, processor)


def main():
    """Run the MCP server."""
    parser = argparse.ArgumentParser(description="USFM Processor MCP Server")
    transport_group = parser.add_mutually_exclusive_group()
    transport_group.add_argument("--sse", type=int, metavar="PORT", help="Serve SSE on PORT")
    transport_group.add_argument(
        "--http", type=int, metavar="PORT", help="Serve Streamable HTTP on PORT"
    )
    parser.add_argument("--verbose", "-v", action="store_true", help="Debug logging")
    args = parser.parse_args()

    if args.verbose:
        logging.getLogger().setLevel(logging.DEBUG)

    if args.sse or args.http:
        transport = "sse" if args.sse else "streamable-http"
        mcp.settings.host = "0.0.0.0"
        mcp.settings.port = args.sse or args.http
    else:
        transport = "stdio"

    logger.info("Starting USFM processor MCP server (transport: %s)...", transport)
    mcp.run(transport=transport)


if __name__ == "__main__":
    main()
