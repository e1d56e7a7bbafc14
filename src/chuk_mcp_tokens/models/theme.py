"""
Theme manifest models.

The manifest ($themes.json) lists theme ids and which token sets are
active for each theme.
"""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, Field

from chuk_mcp_tokens.constants import TokenSetStatus


class ThemeConfig(BaseModel):
    """One theme entry in the manifest."""

    id: str = Field(..., description="Theme identifier (e.g. 'dark')")
    name: str = Field("", description="Display name")
    selected_token_sets: dict[str, TokenSetStatus] = Field(
        default_factory=dict,
        alias="selectedTokenSets",
        description="Token set name (path without suffix) to status",
    )

    model_config = {"frozen": True, "populate_by_name": True}

    def is_set_enabled(self, set_name: str) -> bool:
        """
        Check whether a token set takes part in this theme.

        Sets not listed are enabled; only an explicit 'disabled' drops one.
        """
        status = self.selected_token_sets.get(set_name)
        return status != TokenSetStatus.DISABLED

    @property
    def display_name(self) -> str:
        """Name for display, falling back to a capitalized id."""
        return self.name or self.id.capitalize()


class ThemeManifest(BaseModel):
    """All themes known to a token source tree."""

    themes: list[ThemeConfig] = Field(default_factory=list, alias="$themes")

    model_config = {"frozen": True, "populate_by_name": True}

    @classmethod
    def from_data(cls, data: Any) -> ThemeManifest:
        """
        Build a manifest from parsed JSON.

        Accepts both `{"$themes": [...]}` and a bare list of themes.
        """
        if isinstance(data, list):
            return cls.model_validate({"$themes": data})
        return cls.model_validate(data)

    @property
    def theme_ids(self) -> list[str]:
        """Theme ids in manifest order."""
        return [t.id for t in self.themes]

    def get_theme(self, theme_id: str) -> ThemeConfig | None:
        """Get a theme entry by id."""
        for theme in self.themes:
            if theme.id == theme_id:
                return theme
        return None
