"""
Type inference - assigns a type to tokens that don't declare one.

Inference is an ordered list of rules. Each rule looks at a value and
either names a type or passes. The first rule that names a type wins;
new heuristics are new entries in the list.
"""

from __future__ import annotations

import logging
import re
from collections.abc import Callable, Mapping
from dataclasses import dataclass
from typing import Any

from chuk_mcp_tokens.constants import (
    FONT_WEIGHTS,
    NON_EXPANDABLE_TYPES,
    TokenTier,
    TokenType,
)
from chuk_mcp_tokens.models.token import TokenDefinition, TypeClassification
from chuk_mcp_tokens.registry.references import single_reference

logger = logging.getLogger(__name__)

HEX_COLOR = re.compile(r"^#(?:[0-9a-fA-F]{3,4}|[0-9a-fA-F]{6}|[0-9a-fA-F]{8})$")
FUNCTIONAL_COLOR = re.compile(r"^(?:rgba?|hsla?)\(.*\)$", re.IGNORECASE)
DIMENSION = re.compile(r"^-?(?:\d+\.?\d*|\.\d+)(?:px|rem|em|%|vh|vw|vmin|vmax|pt|ch|ex)$")
DURATION = re.compile(r"^-?(?:\d+\.?\d*|\.\d+)(?:ms|s)$")

# Composite child property name -> type
PROPERTY_TYPE_HINTS: dict[str, str] = {
    "fontFamily": TokenType.FONT_FAMILY.value,
    "fontWeight": TokenType.FONT_WEIGHT.value,
    "fontSize": TokenType.DIMENSION.value,
    "letterSpacing": TokenType.DIMENSION.value,
    "color": TokenType.COLOR.value,
    "backgroundColor": TokenType.COLOR.value,
    "borderColor": TokenType.COLOR.value,
    "textColor": TokenType.COLOR.value,
    "duration": TokenType.DURATION.value,
}

TYPOGRAPHY_FIELDS = frozenset(
    {"fontFamily", "fontSize", "fontWeight", "lineHeight", "letterSpacing"}
)


@dataclass(frozen=True)
class InferenceContext:
    """What a rule may look at besides the resolved value."""

    token_id: str
    original_value: Any = None
    explicit_type: str | None = None
    hint: str | None = None
    lookup: Callable[[str], str | None] = lambda _target: None


@dataclass(frozen=True)
class TypeRule:
    """A named rule: returns a type, or None to pass."""

    name: str
    infer: Callable[[Any, InferenceContext], str | None]


def when(name: str, predicate: Callable[[Any], bool], token_type: TokenType) -> TypeRule:
    """Build a rule from a plain value predicate."""
    return TypeRule(name, lambda value, _ctx: token_type.value if predicate(value) else None)


def _is_number(value: Any) -> bool:
    return isinstance(value, (int, float)) and not isinstance(value, bool)


def _is_color_string(value: Any) -> bool:
    return isinstance(value, str) and bool(
        HEX_COLOR.match(value.strip()) or FUNCTIONAL_COLOR.match(value.strip())
    )


def _is_color_object(value: Any) -> bool:
    if not isinstance(value, dict):
        return False
    keys = value.keys()
    return (
        {"colorSpace", "components"} <= keys
        or {"r", "g", "b"} <= keys
        or {"h", "s", "l"} <= keys
    )


def _is_shadow_layer(value: Any) -> bool:
    return isinstance(value, dict) and {"offsetX", "offsetY"} <= value.keys()


def _is_shadow(value: Any) -> bool:
    if isinstance(value, list):
        return bool(value) and all(_is_shadow_layer(v) for v in value)
    return _is_shadow_layer(value)


DEFAULT_RULES: list[TypeRule] = [
    TypeRule("explicit", lambda _value, ctx: ctx.explicit_type),
    TypeRule(
        "reference",
        lambda _value, ctx: (
            ctx.lookup(target) if (target := single_reference(ctx.original_value)) else None
        ),
    ),
    TypeRule("property-hint", lambda _value, ctx: PROPERTY_TYPE_HINTS.get(ctx.hint or "")),
    when("color-string", _is_color_string, TokenType.COLOR),
    when(
        "dimension-string",
        lambda v: isinstance(v, str) and bool(DIMENSION.match(v.strip())),
        TokenType.DIMENSION,
    ),
    when(
        "duration-string",
        lambda v: isinstance(v, str) and bool(DURATION.match(v.strip())),
        TokenType.DURATION,
    ),
    when("font-weight", lambda v: _is_number(v) and v in FONT_WEIGHTS, TokenType.FONT_WEIGHT),
    when("number", _is_number, TokenType.NUMBER),
    when(
        "font-family",
        lambda v: isinstance(v, list) and bool(v) and all(isinstance(i, str) for i in v),
        TokenType.FONT_FAMILY,
    ),
    when(
        "dimension-object",
        lambda v: isinstance(v, dict) and {"value", "unit"} <= v.keys(),
        TokenType.DIMENSION,
    ),
    when("color-object", _is_color_object, TokenType.COLOR),
    when("shadow-object", _is_shadow, TokenType.SHADOW),
    when(
        "typography-object",
        lambda v: isinstance(v, dict) and bool(TYPOGRAPHY_FIELDS & v.keys()),
        TokenType.TYPOGRAPHY,
    ),
]


def is_composite(token_id: str, value: Any, token_type: str) -> bool:
    """Whether a token's value expands into child tokens."""
    return (
        isinstance(value, dict)
        and TokenTier.from_token_id(token_id) != TokenTier.REFERENCE
        and token_type not in NON_EXPANDABLE_TYPES
    )


class TypeInferencer:
    """
    Classifies tokens by type and decides the composite flag.

    Referent types are looked up in `definitions` and cached, so a chain
    of aliases is walked once.
    """

    def __init__(
        self,
        definitions: Mapping[str, TokenDefinition] | None = None,
        rules: list[TypeRule] | None = None,
    ):
        """
        Initialize the inferencer.

        Args:
            definitions: All parsed tokens, for reference lookups
            rules: Rule list, defaults to DEFAULT_RULES
        """
        self.definitions = definitions or {}
        self.rules = list(rules) if rules is not None else list(DEFAULT_RULES)
        self._cache: dict[str, tuple[str, bool]] = {}
        self._visiting: set[str] = set()

    def classify(
        self,
        token_id: str,
        definition: TokenDefinition,
        hint: str | None = None,
    ) -> TypeClassification:
        """
        Classify a token.

        Args:
            token_id: Token id
            definition: Parsed definition
            hint: Property name, for composite children

        Returns:
            TypeClassification; children (hint given) are never composite
        """
        token_type, inferred = self._infer(token_id, definition, hint)
        composite = hint is None and is_composite(token_id, definition.value, token_type)
        return TypeClassification(type=token_type, composite=composite, inferred=inferred)

    def type_of(self, token_id: str) -> str | None:
        """Type of a known token, None if unknown or already being inferred."""
        definition = self.definitions.get(token_id)
        if definition is None or token_id in self._visiting:
            return None

        self._visiting.add(token_id)
        try:
            token_type, _ = self._infer(token_id, definition, None)
        finally:
            self._visiting.discard(token_id)
        return token_type

    def _infer(
        self,
        token_id: str,
        definition: TokenDefinition,
        hint: str | None,
    ) -> tuple[str, bool]:
        if hint is None and token_id in self._cache:
            return self._cache[token_id]

        context = InferenceContext(
            token_id=token_id,
            original_value=definition.unresolved_value,
            explicit_type=definition.type,
            hint=hint,
            lookup=self.type_of,
        )

        result: tuple[str, bool] | None = None
        for rule in self.rules:
            token_type = rule.infer(definition.value, context)
            if token_type:
                result = (token_type, rule.name != "explicit")
                break

        if result is None:
            logger.warning(f"Could not infer a type for '{token_id}', using 'string'")
            result = (TokenType.STRING.value, True)

        if hint is None:
            self._cache[token_id] = result
        return result
