"""
Token parsers.
"""

from chuk_mcp_tokens.parsing.dtcg import DTCGParser, TokenParser, flatten_tree

__all__ = ["DTCGParser", "TokenParser", "flatten_tree"]
