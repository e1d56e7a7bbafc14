"""
Output Registry - every token, its references, and what was built from it.

One registry is created per build. Registration happens in a single
pass before any generator runs; generators then report outputs back.
Queries return fresh copies so callers can never reach the indexes.
"""

from __future__ import annotations

import copy
import logging
from collections import deque
from collections.abc import Mapping
from dataclasses import dataclass, field
from typing import Any

from chuk_mcp_tokens.constants import TOKEN_ID_PATTERN, TokenTier
from chuk_mcp_tokens.errors import DuplicateTokenError, InvalidTokenIdError, TokenNotFoundError
from chuk_mcp_tokens.models.token import (
    OutputRecord,
    OutputSpec,
    ReferenceEdge,
    ThemeOverride,
    TokenDefinition,
    TokenRecord,
    TypeClassification,
)
from chuk_mcp_tokens.registry.composite import CompositeExpander
from chuk_mcp_tokens.registry.references import extract_references, reference_targets

logger = logging.getLogger(__name__)


@dataclass
class _Entry:
    """Mutable registry-internal token state."""

    id: str
    definition: TokenDefinition
    classification: TypeClassification
    edges: list[ReferenceEdge]
    children: list[str] = field(default_factory=list)
    overrides: dict[str, ThemeOverride] = field(default_factory=dict)
    variants: dict[str, Any] = field(default_factory=dict)
    outputs: dict[str, OutputRecord] = field(default_factory=dict)


def component_of(token_id: str) -> str | None:
    """Component name for cmp.<name>.* ids."""
    parts = token_id.split(".")
    if len(parts) >= 2 and TokenTier.from_token_id(token_id) == TokenTier.COMPONENT:
        return parts[1]
    return None


class OutputRegistry:
    """
    Central store for token records and their indexes.

    Indexes are insertion-ordered so every query is deterministic.
    """

    def __init__(self, expander: CompositeExpander | None = None):
        """
        Initialize an empty registry.

        Args:
            expander: Composite expander (and inferencer) used on registration
        """
        self.expander = expander or CompositeExpander()
        self._tokens: dict[str, _Entry] = {}
        self._by_type: dict[str, dict[str, None]] = {}
        self._by_format: dict[str, dict[str, None]] = {}
        self._by_component: dict[str, dict[str, None]] = {}
        self._by_file: dict[str, dict[str, None]] = {}
        self._references: dict[str, list[str]] = {}
        self._referenced_by: dict[str, dict[str, None]] = {}
        self._transformations: dict[str, list[dict[str, Any]]] = {}
        self._themes: dict[str, None] = {}

    # ------------------------------------------------------------------
    # Registration
    # ------------------------------------------------------------------

    def register_token(
        self,
        token_id: str,
        definition: TokenDefinition,
        classification: TypeClassification | None = None,
    ) -> list[str]:
        """
        Register a token, expanding composites into children.

        Args:
            token_id: Dot-delimited token id
            definition: Parsed definition
            classification: Precomputed type; inferred when omitted

        Returns:
            Ids registered: the token followed by its children

        Raises:
            InvalidTokenIdError: If the id breaks the id grammar
            DuplicateTokenError: If the id is already registered
        """
        if classification is None:
            classification = self.expander.inferencer.classify(token_id, definition)

        edges = extract_references(definition.unresolved_value)
        self._add(token_id, definition, classification, edges)
        registered = [token_id]

        if classification.composite:
            for child in self.expander.expand(token_id, definition):
                self._add(child.id, child.definition, child.classification, list(child.edges))
                self._tokens[token_id].children.append(child.id)
                registered.append(child.id)
            logger.debug(f"Expanded {token_id} into {len(registered) - 1} children")

        return registered

    def register_output(
        self,
        token_id: str,
        format: str,
        output: OutputSpec | Mapping[str, Any],
    ) -> None:
        """
        Attach a format-specific rendering to a token.

        Raises:
            TokenNotFoundError: If the token was never registered
        """
        entry = self._require(token_id)
        spec = output if isinstance(output, OutputSpec) else OutputSpec.model_validate(output)
        record = OutputRecord(format=format, **spec.model_dump())

        entry.outputs[format] = record
        self._by_format.setdefault(format, {})[token_id] = None
        self._transformations.setdefault(token_id, []).append(
            {"format": format, "name": record.name, "value": record.value}
        )

    def register_theme_variant(self, token_id: str, theme: str, value: Any) -> None:
        """
        Attach a token's raw value for a theme, whether or not it differs.

        Raises:
            TokenNotFoundError: If the token was never registered
        """
        entry = self._require(token_id)
        entry.variants[theme] = copy.deepcopy(value)
        self._themes[theme] = None

    def register_override(self, token_id: str, theme: str, value: Any) -> None:
        """
        Record that a theme overrides a token.

        Raises:
            TokenNotFoundError: If the token was never registered
        """
        entry = self._require(token_id)
        entry.overrides[theme] = ThemeOverride(value=copy.deepcopy(value), differs=True)
        self._themes[theme] = None

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------

    def __contains__(self, token_id: object) -> bool:
        return token_id in self._tokens

    def __len__(self) -> int:
        return len(self._tokens)

    def get_all_ids(self) -> list[str]:
        """All token ids in registration order."""
        return list(self._tokens)

    def get_token(self, token_id: str) -> TokenRecord | None:
        """
        Get a full, immutable snapshot of a token.

        Args:
            token_id: Token id

        Returns:
            A fresh TokenRecord, or None if not registered
        """
        entry = self._tokens.get(token_id)
        if entry is None:
            return None

        definition = entry.definition
        return TokenRecord(
            id=entry.id,
            type=entry.classification.type,
            value=copy.deepcopy(definition.value),
            original_value=copy.deepcopy(definition.original_value),
            description=definition.description,
            deprecated=definition.deprecated,
            source=definition.source,
            mode=definition.mode,
            composite=entry.classification.composite,
            parent=definition.parent,
            children=tuple(entry.children),
            references=tuple(self._references.get(token_id, [])),
            reference_edges=tuple(entry.edges),
            referenced_by=tuple(self._referenced_by.get(token_id, {})),
            overrides={
                theme: ThemeOverride(value=copy.deepcopy(o.value), differs=o.differs)
                for theme, o in entry.overrides.items()
            },
            variants=copy.deepcopy(entry.variants),
            outputs={fmt: o.model_copy(deep=True) for fmt, o in entry.outputs.items()},
        )

    def get_records(self) -> dict[str, TokenRecord]:
        """Snapshot of every token, keyed by id in registration order."""
        return {token_id: self.get_token(token_id) for token_id in self._tokens}  # type: ignore[misc]

    def get_tokens_by_type(self, token_type: str) -> list[str]:
        return list(self._by_type.get(token_type, {}))

    def get_tokens_by_format(self, format: str) -> list[str]:
        return list(self._by_format.get(format, {}))

    def get_tokens_by_component(self, component: str) -> list[str]:
        return list(self._by_component.get(component, {}))

    def get_tokens_by_file(self, file: str) -> list[str]:
        """Tokens whose winning definition came from `file`."""
        return list(self._by_file.get(file, {}))

    def get_references(self, token_id: str) -> list[str]:
        """Ids a token references (forward edges)."""
        return list(self._references.get(token_id, []))

    def get_reference_edges(self, token_id: str) -> list[ReferenceEdge]:
        """Typed outgoing edges, with the property each came from."""
        entry = self._tokens.get(token_id)
        return list(entry.edges) if entry else []

    def get_referenced_by(self, token_id: str) -> list[str]:
        """Ids that reference a token (backward edges)."""
        return list(self._referenced_by.get(token_id, {}))

    def get_impact(self, token_id: str) -> list[str]:
        """
        Every token affected if `token_id` changes.

        Walks backward edges breadth-first. Cycles are tolerated; each
        token appears once and the start token is never included.
        """
        seen = {token_id}
        impact: list[str] = []
        queue = deque([token_id])

        while queue:
            current = queue.popleft()
            for dependent in self._referenced_by.get(current, {}):
                if dependent not in seen:
                    seen.add(dependent)
                    impact.append(dependent)
                    queue.append(dependent)

        return impact

    def get_theme_overrides(self, theme: str) -> dict[str, Any]:
        """Token id -> override value for one theme."""
        return {
            token_id: copy.deepcopy(entry.overrides[theme].value)
            for token_id, entry in self._tokens.items()
            if theme in entry.overrides
        }

    def get_transformations(self, token_id: str | None = None) -> dict[str, list[dict[str, Any]]]:
        """Output history per token, in the order outputs were reported."""
        if token_id is not None:
            return {token_id: copy.deepcopy(self._transformations.get(token_id, []))}
        return copy.deepcopy(self._transformations)

    @property
    def types(self) -> dict[str, int]:
        """Token count per type."""
        return {t: len(ids) for t, ids in self._by_type.items()}

    @property
    def formats(self) -> dict[str, int]:
        """Token count per output format."""
        return {f: len(ids) for f, ids in self._by_format.items()}

    @property
    def components(self) -> dict[str, int]:
        """Token count per component."""
        return {c: len(ids) for c, ids in self._by_component.items()}

    @property
    def themes(self) -> list[str]:
        """Themes seen through variants or overrides."""
        return list(self._themes)

    @property
    def tokens_with_references(self) -> int:
        return sum(1 for refs in self._references.values() if refs)

    @property
    def tokens_referenced(self) -> int:
        return sum(1 for refs in self._referenced_by.values() if refs)

    @property
    def total_references(self) -> int:
        return sum(len(refs) for refs in self._references.values())

    @property
    def tokens_with_outputs(self) -> int:
        return sum(1 for entry in self._tokens.values() if entry.outputs)

    # ------------------------------------------------------------------
    # Internals
    # ------------------------------------------------------------------

    def _add(
        self,
        token_id: str,
        definition: TokenDefinition,
        classification: TypeClassification,
        edges: list[ReferenceEdge],
    ) -> None:
        if not isinstance(token_id, str) or not TOKEN_ID_PATTERN.match(token_id):
            raise InvalidTokenIdError(str(token_id))
        if token_id in self._tokens:
            raise DuplicateTokenError(token_id)

        self._tokens[token_id] = _Entry(
            id=token_id,
            definition=definition,
            classification=classification,
            edges=edges,
        )

        self._by_type.setdefault(classification.type, {})[token_id] = None

        component = component_of(token_id)
        if component:
            self._by_component.setdefault(component, {})[token_id] = None

        if definition.source and definition.source.file:
            self._by_file.setdefault(definition.source.file, {})[token_id] = None

        targets = reference_targets(edges)
        self._references[token_id] = targets
        for target in targets:
            self._referenced_by.setdefault(target, {})[token_id] = None

    def _require(self, token_id: str) -> _Entry:
        entry = self._tokens.get(token_id)
        if entry is None:
            raise TokenNotFoundError(token_id)
        return entry
