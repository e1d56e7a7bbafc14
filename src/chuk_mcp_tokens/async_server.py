#!/usr/bin/env python3
"""
Async Tokens MCP Server using chuk-mcp-server

This server builds design tokens from layered source documents and
exposes the resulting registry to MCP clients.

The server provides tools for:
- Building CSS, TypeScript, snapshot and documentation artifacts
- Looking up tokens, their references and their outputs
- Impact analysis across the reference graph
- Per-theme override listings
"""

import logging
import os
from pathlib import Path

from chuk_mcp_server import ChukMCPServer

from chuk_mcp_tokens.build import BuildSession
from chuk_mcp_tokens.tools import register_build_tools, register_query_tools

logging.basicConfig(level=logging.INFO)
logger = logging.getLogger(__name__)

# Create the MCP server instance
mcp = ChukMCPServer("chuk-mcp-tokens")

# Config path - set by server.py from --config, defaults to ./tokens.yaml
CONFIG_PATH = Path(os.environ.get("CHUK_MCP_TOKENS_CONFIG", Path.cwd() / "tokens.yaml"))

session = BuildSession(config_path=CONFIG_PATH)

# Register all tools
build_tools = register_build_tools(mcp, session)
query_tools = register_query_tools(mcp, session)

# Export tool functions for direct access
tokens_build = build_tools["tokens_build"]
tokens_stats = build_tools["tokens_stats"]

tokens_get_token = query_tools["tokens_get_token"]
tokens_list = query_tools["tokens_list"]
tokens_references = query_tools["tokens_references"]
tokens_impact = query_tools["tokens_impact"]
tokens_theme_overrides = query_tools["tokens_theme_overrides"]

logger.info("CHUK Tokens MCP Server initialized")
logger.info(f"  Config: {CONFIG_PATH}")
