"""
Theme variant tracking - which tokens a theme actually changes.

An override is recorded only when the theme's resolved value differs
from the base value. Equal values never produce an entry.
"""

from __future__ import annotations

import copy
import logging
from collections.abc import Mapping
from dataclasses import dataclass, field
from typing import Any

from chuk_mcp_tokens.models.token import TokenDefinition, TypeClassification
from chuk_mcp_tokens.registry.composite import child_id

logger = logging.getLogger(__name__)


def deep_equal(a: Any, b: Any) -> bool:
    """
    Structural equality for token values.

    Key order is ignored. Booleans never equal numbers, so `true` and `1`
    are different values.
    """
    if isinstance(a, bool) or isinstance(b, bool):
        return isinstance(a, bool) and isinstance(b, bool) and a == b
    if isinstance(a, dict) and isinstance(b, dict):
        return a.keys() == b.keys() and all(deep_equal(a[k], b[k]) for k in a)
    if isinstance(a, (list, tuple)) and isinstance(b, (list, tuple)):
        return len(a) == len(b) and all(deep_equal(x, y) for x, y in zip(a, b))
    if isinstance(a, (dict, list, tuple)) or isinstance(b, (dict, list, tuple)):
        return False
    return bool(a == b)


@dataclass
class ThemeDiff:
    """Overrides found for one theme."""

    theme: str
    overrides: dict[str, Any] = field(default_factory=dict)  # token id -> theme value
    theme_only: list[str] = field(default_factory=list)

    @property
    def count(self) -> int:
        return len(self.overrides)


class ThemeVariantTracker:
    """
    Diffs theme token maps against the base map.

    Composite tokens are diffed twice: as a whole, then per child using
    the matching sub-property.
    """

    def __init__(
        self,
        base: Mapping[str, TokenDefinition],
        classifications: Mapping[str, TypeClassification],
        theme_only: Mapping[str, TokenDefinition] | None = None,
    ):
        """
        Initialize the tracker.

        Args:
            base: Default theme definitions
            classifications: Type classification per token id, including
                theme-only tokens
            theme_only: Registered definitions of theme-only tokens; their
                value decides which children exist
        """
        self.base = base
        self.classifications = classifications
        self.theme_only = theme_only or {}
        self._themes_by_token: dict[str, list[str]] = {}

    def diff(self, theme: str, definitions: Mapping[str, TokenDefinition]) -> ThemeDiff:
        """
        Find the tokens a theme overrides.

        Args:
            theme: Theme name
            definitions: The theme's parsed tokens

        Returns:
            ThemeDiff; theme-only tokens are listed and count as overrides
        """
        result = ThemeDiff(theme=theme)

        for token_id, definition in definitions.items():
            base = self.base.get(token_id)
            classification = self.classifications.get(token_id)
            composite = bool(classification and classification.composite)

            if base is None:
                result.theme_only.append(token_id)
                self._record(result, token_id, definition.value)
                # Children exist only for properties of the registered value
                shape = self.theme_only.get(token_id, definition).value
                if composite and isinstance(shape, dict) and isinstance(definition.value, dict):
                    for prop, value in definition.value.items():
                        if prop in shape:
                            self._record(result, child_id(token_id, prop), value)
                continue

            if deep_equal(base.value, definition.value):
                continue

            self._record(result, token_id, definition.value)
            if composite and isinstance(base.value, dict) and isinstance(definition.value, dict):
                for prop, value in definition.value.items():
                    # Children exist only for base properties
                    if prop in base.value and not deep_equal(base.value[prop], value):
                        self._record(result, child_id(token_id, prop), value)

        if result.theme_only:
            logger.warning(
                f"Theme '{theme}' defines tokens missing from base: {', '.join(result.theme_only)}"
            )
        logger.info(f"Theme '{theme}' overrides {result.count} tokens")
        return result

    def override_themes(self, token_id: str) -> list[str]:
        """Themes that override a token, in the order they were diffed."""
        return list(self._themes_by_token.get(token_id, []))

    def _record(self, result: ThemeDiff, token_id: str, value: Any) -> None:
        result.overrides[token_id] = copy.deepcopy(value)
        themes = self._themes_by_token.setdefault(token_id, [])
        if result.theme not in themes:
            themes.append(result.theme)
