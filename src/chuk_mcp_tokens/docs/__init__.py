"""
Documentation exports.
"""

from chuk_mcp_tokens.docs.exporter import DocumentationExporter, compute_stats

__all__ = ["DocumentationExporter", "compute_stats"]
