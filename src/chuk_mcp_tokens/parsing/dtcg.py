"""
DTCG parser - flattens a merged token tree and resolves references.

The registry never resolves references itself; it consumes what a
TokenParser hands it. DTCGParser is the default implementation.
"""

from __future__ import annotations

import copy
import json
import logging
from typing import Any, Protocol

from chuk_mcp_tokens.constants import DEFAULT_MODE, REFERENCE_PATTERN
from chuk_mcp_tokens.errors import UnresolvedReferenceError
from chuk_mcp_tokens.models.token import TokenDefinition
from chuk_mcp_tokens.sources.loader import MergedDocument

logger = logging.getLogger(__name__)


class TokenParser(Protocol):
    """Turns a merged document into token definitions."""

    def parse(self, document: MergedDocument) -> dict[str, TokenDefinition]:
        """Parse a merged document into id -> definition, in document order."""
        ...


class ReferenceCycleError(Exception):
    """Raised internally when resolution re-enters a token on the stack."""

    def __init__(self, chain: tuple[str, ...]):
        self.chain = chain
        super().__init__(" -> ".join(chain))


class DTCGParser:
    """
    Parser for W3C DTCG-style token trees.

    Tokens are mappings holding `$value`; `$type` on a group is inherited
    by descendants that declare none.
    """

    def parse(self, document: MergedDocument) -> dict[str, TokenDefinition]:
        """
        Flatten and resolve a merged document.

        Args:
            document: Merged tree for one theme

        Returns:
            Token id -> TokenDefinition, in document order

        Raises:
            UnresolvedReferenceError: If a reference names an unknown token
        """
        raw: dict[str, dict[str, Any]] = {}
        flatten_tree(document.tree, "", None, raw)

        resolver = _Resolver(raw)
        definitions: dict[str, TokenDefinition] = {}

        for token_id, node in raw.items():
            try:
                value = resolver.resolve_token(token_id)
            except ReferenceCycleError as e:
                logger.warning(f"Circular reference left unresolved in '{token_id}': {e}")
                value = copy.deepcopy(node["value"])

            definitions[token_id] = TokenDefinition(
                type=node["type"],
                value=value,
                original_value=copy.deepcopy(node["value"]),
                description=node["description"],
                deprecated=node["deprecated"],
                mode=DEFAULT_MODE,
                source=document.winning_source(token_id),
            )

        logger.info(f"Parsed {len(definitions)} tokens for '{document.theme}' theme")
        return definitions


def flatten_tree(
    node: dict[str, Any],
    prefix: str,
    inherited_type: str | None,
    out: dict[str, dict[str, Any]],
) -> None:
    """Collect token nodes into `out`, carrying group $type down."""
    group_type = node.get("$type", inherited_type)

    for key, child in node.items():
        if key.startswith("$") or not isinstance(child, dict):
            continue

        token_id = f"{prefix}.{key}" if prefix else key
        if "$value" in child:
            out[token_id] = {
                "type": child.get("$type", group_type),
                "value": child["$value"],
                "description": child.get("$description"),
                "deprecated": child.get("$deprecated", False),
            }
        else:
            flatten_tree(child, token_id, group_type, out)


class _Resolver:
    """Resolves {references} across one flattened tree, memoizing results."""

    def __init__(self, raw: dict[str, dict[str, Any]]):
        self.raw = raw
        self._resolved: dict[str, Any] = {}

    def resolve_token(self, token_id: str, stack: tuple[str, ...] = ()) -> Any:
        if token_id in self._resolved:
            return self._resolved[token_id]
        if token_id in stack:
            raise ReferenceCycleError((*stack, token_id))

        value = self._resolve_value(self.raw[token_id]["value"], token_id, (*stack, token_id))
        self._resolved[token_id] = value
        return value

    def _resolve_value(self, value: Any, token_id: str, stack: tuple[str, ...]) -> Any:
        if isinstance(value, str):
            return self._resolve_string(value, token_id, stack)
        if isinstance(value, dict):
            return {k: self._resolve_value(v, token_id, stack) for k, v in value.items()}
        if isinstance(value, list):
            return [self._resolve_value(v, token_id, stack) for v in value]
        return value

    def _resolve_string(self, text: str, token_id: str, stack: tuple[str, ...]) -> Any:
        match = REFERENCE_PATTERN.fullmatch(text)
        if match:
            return copy.deepcopy(self._lookup(match.group(1).strip(), token_id, stack))

        def substitute(m: Any) -> str:
            return _to_text(self._lookup(m.group(1).strip(), token_id, stack))

        return REFERENCE_PATTERN.sub(substitute, text)

    def _lookup(self, target: str, token_id: str, stack: tuple[str, ...]) -> Any:
        if target in self.raw:
            return self.resolve_token(target, stack)

        # {parent.prop} points into a composite value
        parts = target.split(".")
        for i in range(len(parts) - 1, 0, -1):
            parent = ".".join(parts[:i])
            if parent not in self.raw:
                continue
            value = self.resolve_token(parent, stack)
            for key in parts[i:]:
                if not isinstance(value, dict) or key not in value:
                    raise UnresolvedReferenceError(token_id, target)
                value = value[key]
            return value

        raise UnresolvedReferenceError(token_id, target)


def _to_text(value: Any) -> str:
    """Render a resolved value for embedding in a longer string."""
    if isinstance(value, str):
        return value
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, (int, float)):
        return str(value)
    return json.dumps(value, ensure_ascii=False)
