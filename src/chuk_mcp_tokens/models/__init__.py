"""
Pydantic models for the token system.

This module provides:
- TokenDefinition: Parsed token handed to the registry
- TokenRecord: Immutable registry view of a token
- OutputSpec / OutputRecord: Format-specific renderings
- ThemeOverride: A theme value that differs from base
- ThemeManifest / ThemeConfig: The themes manifest
"""

from chuk_mcp_tokens.models.theme import ThemeConfig, ThemeManifest
from chuk_mcp_tokens.models.token import (
    OutputRecord,
    OutputSpec,
    ReferenceEdge,
    ThemeOverride,
    TokenDefinition,
    TokenRecord,
    TokenSource,
    TypeClassification,
)

__all__ = [
    "OutputRecord",
    "OutputSpec",
    "ReferenceEdge",
    "ThemeConfig",
    "ThemeManifest",
    "ThemeOverride",
    "TokenDefinition",
    "TokenRecord",
    "TokenSource",
    "TypeClassification",
]
