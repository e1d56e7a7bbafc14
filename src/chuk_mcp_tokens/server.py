#!/usr/bin/env python3
"""
Entry point for the CHUK Tokens MCP Server.

This module provides the main entry point for the MCP server,
supporting multiple transport modes (stdio, http), and a one-shot
build mode for CI.
"""

import argparse
import asyncio
import logging
import os
import sys
from pathlib import Path

logging.basicConfig(level=logging.INFO)
logger = logging.getLogger(__name__)


def main() -> None:
    """Main entry point with transport detection."""
    parser = argparse.ArgumentParser(description="CHUK Tokens MCP Server")
    parser.add_argument(
        "--config",
        type=Path,
        default=Path("tokens.yaml"),
        help="Build config YAML (default: ./tokens.yaml)",
    )
    parser.add_argument(
        "--transport",
        choices=["stdio", "http"],
        default="stdio",
        help="Transport mode (default: stdio)",
    )
    parser.add_argument(
        "--port",
        type=int,
        default=8000,
        help="HTTP port (only for http transport)",
    )
    parser.add_argument(
        "--build",
        action="store_true",
        help="Run one build and exit instead of serving",
    )
    parser.add_argument(
        "--debug",
        action="store_true",
        help="Enable debug logging",
    )

    args = parser.parse_args()

    if args.debug:
        logging.getLogger().setLevel(logging.DEBUG)

    if args.build:
        from chuk_mcp_tokens.build import TokenBuild
        from chuk_mcp_tokens.config import load_config
        from chuk_mcp_tokens.errors import TokenBuildError

        try:
            asyncio.run(TokenBuild(load_config(args.config)).run())
        except TokenBuildError as e:
            logger.error(str(e))
            sys.exit(1)
        return

    os.environ["CHUK_MCP_TOKENS_CONFIG"] = str(args.config.resolve())

    # Import after argument parsing so the config path is set
    from chuk_mcp_tokens.async_server import mcp

    if args.transport == "stdio":
        logger.info("Starting CHUK Tokens MCP Server (stdio)")
        asyncio.run(mcp.run_stdio())
    else:
        logger.info(f"Starting CHUK Tokens MCP Server (http:{args.port})")
        asyncio.run(mcp.run_http(port=args.port))


if __name__ == "__main__":
    main()
