"""
Token source discovery and merging.
"""

from chuk_mcp_tokens.sources.loader import (
    MergedDocument,
    SourceFile,
    SourceLoader,
    collect_token_ids,
    deep_merge,
    read_document,
)
from chuk_mcp_tokens.sources.manifest import load_manifest

__all__ = [
    "MergedDocument",
    "SourceFile",
    "SourceLoader",
    "collect_token_ids",
    "deep_merge",
    "load_manifest",
    "read_document",
]
