"""
Composite expansion - one child token per property of a structured value.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any

from chuk_mcp_tokens.models.token import ReferenceEdge, TokenDefinition, TypeClassification
from chuk_mcp_tokens.registry.inference import TypeInferencer
from chuk_mcp_tokens.registry.references import extract_references


@dataclass(frozen=True)
class ChildToken:
    """A synthesized child, ready to register."""

    id: str
    definition: TokenDefinition
    classification: TypeClassification
    edges: tuple[ReferenceEdge, ...]


def child_id(parent_id: str, prop: str) -> str:
    """Id of a composite child."""
    return f"{parent_id}.{prop}"


def child_values(parent_id: str, value: Any) -> dict[str, Any]:
    """Map child ids to their slice of a composite value."""
    if not isinstance(value, dict):
        return {}
    return {child_id(parent_id, prop): item for prop, item in value.items()}


class CompositeExpander:
    """
    Splits composite tokens into children.

    Children are classified with the property name as a hint and are
    never expanded further.
    """

    def __init__(self, inferencer: TypeInferencer | None = None):
        self.inferencer = inferencer or TypeInferencer()

    def expand(self, parent_id: str, definition: TokenDefinition) -> list[ChildToken]:
        """
        Build the children of a composite token.

        Args:
            parent_id: Parent token id
            definition: Parent definition (value must be an object)

        Returns:
            Children in property order. Each child's edges start with the
            parent, followed by references in its own original slice.
        """
        if not isinstance(definition.value, dict):
            return []

        originals = (
            definition.original_value if isinstance(definition.original_value, dict) else {}
        )
        children: list[ChildToken] = []

        for prop, value in definition.value.items():
            cid = child_id(parent_id, prop)
            child = TokenDefinition(
                value=value,
                original_value=originals.get(prop),
                mode=definition.mode,
                source=definition.source,
                parent=parent_id,
            )
            edges = (
                ReferenceEdge(target=parent_id),
                *extract_references(originals.get(prop), prop),
            )
            children.append(
                ChildToken(
                    id=cid,
                    definition=child,
                    classification=self.inferencer.classify(cid, child, hint=prop),
                    edges=edges,
                )
            )

        return children
