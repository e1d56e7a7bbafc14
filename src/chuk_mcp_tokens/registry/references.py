"""
Reference extraction.

References come from a token's original value only, so a token that
points at an alias records the alias, not what the alias resolves to.
"""

from __future__ import annotations

from collections.abc import Iterable
from typing import Any

from chuk_mcp_tokens.constants import REFERENCE_PATTERN
from chuk_mcp_tokens.models.token import ReferenceEdge


def extract_references(value: Any, property: str | None = None) -> list[ReferenceEdge]:
    """
    Extract every {token.id} reference from a value.

    Recurses into objects and arrays. Object keys build a dotted property
    path (e.g. 'fontFamily', 'border.color'); array items keep the path
    of the array itself.

    Args:
        value: An original (unresolved) token value
        property: Property path of `value` within its token

    Returns:
        Edges in the order they appear
    """
    if isinstance(value, str):
        return [
            ReferenceEdge(target=m.group(1).strip(), property=property)
            for m in REFERENCE_PATTERN.finditer(value)
        ]

    edges: list[ReferenceEdge] = []
    if isinstance(value, dict):
        for key, item in value.items():
            path = f"{property}.{key}" if property else str(key)
            edges.extend(extract_references(item, path))
    elif isinstance(value, list):
        for item in value:
            edges.extend(extract_references(item, property))
    return edges


def reference_targets(edges: Iterable[ReferenceEdge]) -> list[str]:
    """Distinct edge targets, first-seen order."""
    return list(dict.fromkeys(edge.target for edge in edges))


def single_reference(value: Any) -> str | None:
    """The target id if `value` is exactly one {reference}, else None."""
    if not isinstance(value, str):
        return None
    match = REFERENCE_PATTERN.fullmatch(value.strip())
    return match.group(1).strip() if match else None
