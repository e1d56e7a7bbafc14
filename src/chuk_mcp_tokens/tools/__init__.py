"""
MCP tool implementations.

Tools are organized by domain:
- build - Running builds and build statistics
- query - Token, reference, impact and theme lookups
"""

from chuk_mcp_tokens.tools.build import register_build_tools
from chuk_mcp_tokens.tools.query import register_query_tools

__all__ = [
    "register_build_tools",
    "register_query_tools",
]
