"""
Token registry and the analysis that feeds it.

This module provides:
- OutputRegistry: Token records, reference graph, and outputs
- TypeInferencer: Ordered type rules and the composite flag
- CompositeExpander: Child tokens for structured values
- ThemeVariantTracker: Per-theme override detection
"""

from chuk_mcp_tokens.registry.composite import (
    ChildToken,
    CompositeExpander,
    child_id,
    child_values,
)
from chuk_mcp_tokens.registry.inference import (
    DEFAULT_RULES,
    InferenceContext,
    TypeInferencer,
    TypeRule,
    is_composite,
)
from chuk_mcp_tokens.registry.references import (
    extract_references,
    reference_targets,
    single_reference,
)
from chuk_mcp_tokens.registry.registry import OutputRegistry, component_of
from chuk_mcp_tokens.registry.themes import ThemeDiff, ThemeVariantTracker, deep_equal

__all__ = [
    "DEFAULT_RULES",
    "ChildToken",
    "CompositeExpander",
    "InferenceContext",
    "OutputRegistry",
    "ThemeDiff",
    "ThemeVariantTracker",
    "TypeInferencer",
    "TypeRule",
    "child_id",
    "child_values",
    "component_of",
    "deep_equal",
    "extract_references",
    "is_composite",
    "reference_targets",
    "single_reference",
]
