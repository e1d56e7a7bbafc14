"""
Documentation exporter - serializes the finished registry.

Runs after every generator has reported, so output coverage is final.
Two documents are produced:
- the registry export: every record, nested or flat, with statistics
- the reference export: per-tier, per-category arrays for doc sites
"""

from __future__ import annotations

import logging
from typing import Any

from chuk_mcp_tokens.constants import (
    GENERATOR_NAME,
    TIER_PREFIXES,
    DocsLayout,
    ErrorMessages,
)
from chuk_mcp_tokens.errors import TokenBuildError
from chuk_mcp_tokens.models.token import TokenRecord
from chuk_mcp_tokens.registry.registry import OutputRegistry

logger = logging.getLogger(__name__)

# Key holding the record inside a nested node, so composite parents
# and their children can share a path.
NESTED_TOKEN_KEY = "$token"

# Category for single-segment ids
DEFAULT_CATEGORY = "default"

# Top-level key of the reference export; no tier may use it
REFERENCE_METADATA_KEY = "metadata"


def compute_stats(registry: OutputRegistry) -> dict[str, Any]:
    """
    Aggregate statistics for a registry.

    Density is edges / (n * (n - 1)): the share of possible directed
    edges that exist.
    """
    total = len(registry)
    with_outputs = registry.tokens_with_outputs
    total_references = registry.total_references
    possible = total * (total - 1)

    return {
        "total": total,
        "byType": registry.types,
        "byFormat": registry.formats,
        "byComponent": registry.components,
        "themes": registry.themes,
        "coverage": {
            "total": total,
            "withOutputs": with_outputs,
            "percentage": round(with_outputs / total * 100) if total else 0,
        },
        "references": {
            "tokensWithReferences": registry.tokens_with_references,
            "tokensReferenced": registry.tokens_referenced,
            "totalReferences": total_references,
            "density": round(total_references / possible, 6) if possible else 0.0,
        },
    }


class DocumentationExporter:
    """Builds the documentation exports from a populated registry."""

    def __init__(
        self,
        layout: DocsLayout = "nested",
        include_stats: bool = True,
        include_transformations: bool = False,
    ):
        self.layout = layout
        self.include_stats = include_stats
        self.include_transformations = include_transformations

    def export_registry(self, registry: OutputRegistry) -> dict[str, Any]:
        """
        Export every token record.

        Returns:
            {tokens, formats, metadata[, transformations]}
        """
        records = registry.get_records()
        tokens: dict[str, Any] = {}

        if self.layout == "nested":
            for token_id, record in records.items():
                node = tokens
                for part in token_id.split("."):
                    node = node.setdefault(part, {})
                node[NESTED_TOKEN_KEY] = record.to_dict()
        else:
            tokens = {token_id: record.to_dict() for token_id, record in records.items()}

        metadata: dict[str, Any] = {
            "schema": "tokens-registry/v1",
            "generator": GENERATOR_NAME,
            "format": self.layout,
        }
        if self.include_stats:
            metadata["stats"] = compute_stats(registry)

        data: dict[str, Any] = {
            "tokens": tokens,
            "formats": list(registry.formats),
            "metadata": metadata,
        }
        if self.include_transformations:
            data["transformations"] = registry.get_transformations()

        logger.info(f"Registry export: {len(records)} tokens ({self.layout})")
        return data

    def export_reference(self, registry: OutputRegistry) -> dict[str, Any]:
        """
        Export tokens grouped by tier and category.

        Returns:
            {ref: {category: [...]}, sys: {...}, cmp: {...}, ..., metadata}.
            Tiers beyond the standard three are added as they appear.

        Raises:
            TokenBuildError: If a token's tier is the metadata key
        """
        records = registry.get_records()
        data: dict[str, Any] = {prefix: {} for prefix in TIER_PREFIXES.values()}

        for token_id, record in records.items():
            parts = token_id.split(".")
            tier = parts[0]
            if tier == REFERENCE_METADATA_KEY:
                raise TokenBuildError(
                    ErrorMessages.RESERVED_TIER.format(token_id=token_id, tier=tier)
                )
            category = parts[1] if len(parts) > 1 else DEFAULT_CATEGORY
            entry = self._reference_entry(record, records)
            data.setdefault(tier, {}).setdefault(category, []).append(entry)

        data[REFERENCE_METADATA_KEY] = {
            "schema": "tokens-reference/v1",
            "generator": GENERATOR_NAME,
            "totalTokens": len(records),
            "themes": registry.themes,
        }
        return data

    def _reference_entry(
        self,
        record: TokenRecord,
        records: dict[str, TokenRecord],
    ) -> dict[str, Any]:
        references = []
        for edge in record.reference_edges:
            target = records.get(edge.target)
            ref: dict[str, Any] = {"id": edge.target}
            if edge.property:
                ref["property"] = edge.property
            ref["type"] = target.type if target else None
            ref["value"] = target.value if target else None
            references.append(ref)

        entry: dict[str, Any] = {
            "id": record.id,
            "type": record.type,
            "description": record.description or "",
            "originalValue": record.original_value,
            "value": record.value,
            "references": references,
            "referencedBy": list(record.referenced_by),
            "themes": {theme: o.model_dump() for theme, o in record.overrides.items()},
            "themeable": record.themeable,
            "outputs": {fmt: o.to_dict() for fmt, o in record.outputs.items()},
        }
        if record.deprecated:
            entry["deprecated"] = record.deprecated
        if record.parent:
            entry["parent"] = record.parent
        return entry
