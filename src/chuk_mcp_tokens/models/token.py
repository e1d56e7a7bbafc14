"""
Token models - definitions in, records out.

A TokenDefinition is what the parser hands to the registry.
A TokenRecord is the plain, immutable view the registry hands back.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any

from pydantic import BaseModel, Field

from chuk_mcp_tokens.constants import DEFAULT_MODE, TokenTier


class TokenSource(BaseModel):
    """Where a token definition came from."""

    file: str | None = Field(None, description="Source file, relative to the source dir")
    tier: TokenTier | None = Field(None, description="Tier folder the file lives in")
    theme: str = Field(DEFAULT_MODE, description="Theme folder, or 'default' for base files")

    model_config = {"frozen": True}

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for serialization."""
        return {
            "file": self.file,
            "tier": self.tier.value if self.tier else None,
            "theme": self.theme,
        }


class TokenDefinition(BaseModel):
    """
    A parsed token, ready for registration.

    `value` is resolved; `original_value` still carries {references}.
    """

    type: str | None = Field(None, description="Explicit or inferred type")
    value: Any = Field(None, description="Resolved value")
    original_value: Any = Field(None, alias="originalValue", description="Pre-resolution value")
    description: str | None = Field(None, description="Human-readable description")
    deprecated: bool | str = Field(False, description="Deprecation flag or message")
    mode: str = Field(DEFAULT_MODE, description="'default' or the theme of a theme-only token")
    source: TokenSource | None = Field(None, description="Winning source document")
    parent: str | None = Field(None, description="Parent id for synthesized children")

    model_config = {"frozen": True, "populate_by_name": True}

    @property
    def unresolved_value(self) -> Any:
        """The value references are extracted from."""
        return self.original_value if self.original_value is not None else self.value


@dataclass(frozen=True)
class ReferenceEdge:
    """A single outgoing reference, tagged with the property it came from."""

    target: str
    property: str | None = None  # e.g. 'fontFamily' inside a composite

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for serialization."""
        d: dict[str, Any] = {"target": self.target}
        if self.property:
            d["property"] = self.property
        return d


@dataclass(frozen=True)
class TypeClassification:
    """Result of type inference."""

    type: str
    composite: bool = False
    inferred: bool = False  # False when the type was explicit


class OutputSpec(BaseModel):
    """What a generator reports for one token in one format."""

    name: str = Field(..., description="Name in the artifact (e.g. '--sys-color-bg')")
    value: Any = Field(None, description="Serialized value as written")
    usage: str | None = Field(None, description="How consumers refer to it")
    metadata: dict[str, Any] = Field(default_factory=dict)

    model_config = {"frozen": True}


class OutputRecord(OutputSpec):
    """An output attached to a token record."""

    format: str = Field(..., description="Output format")

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for serialization."""
        d: dict[str, Any] = {
            "format": self.format,
            "name": self.name,
            "value": self.value,
            "usage": self.usage,
        }
        if self.metadata:
            d["metadata"] = dict(self.metadata)
        return d


class ThemeOverride(BaseModel):
    """A theme value that differs from the base value."""

    value: Any = None
    differs: bool = True

    model_config = {"frozen": True}


class TokenRecord(BaseModel):
    """
    Plain, immutable snapshot of a registered token.

    Built fresh on every query; mutating it never touches the registry.
    """

    id: str
    type: str | None = None
    value: Any = None
    original_value: Any = None
    description: str | None = None
    deprecated: bool | str = False
    source: TokenSource | None = None
    mode: str = DEFAULT_MODE
    composite: bool = False
    parent: str | None = None
    children: tuple[str, ...] = ()
    references: tuple[str, ...] = ()
    reference_edges: tuple[ReferenceEdge, ...] = ()
    referenced_by: tuple[str, ...] = ()
    overrides: dict[str, ThemeOverride] = Field(default_factory=dict)
    variants: dict[str, Any] = Field(default_factory=dict)
    outputs: dict[str, OutputRecord] = Field(default_factory=dict)

    model_config = {"frozen": True}

    @property
    def themeable(self) -> bool:
        """True if any theme overrides this token."""
        return bool(self.overrides)

    @property
    def override_themes(self) -> list[str]:
        """Themes that override this token, in registration order."""
        return list(self.overrides)

    @property
    def tier(self) -> TokenTier | None:
        """Tier derived from the id prefix."""
        return TokenTier.from_token_id(self.id)

    def to_dict(self, include_source: bool = True) -> dict[str, Any]:
        """Convert to dictionary for serialization."""
        d: dict[str, Any] = {
            "id": self.id,
            "type": self.type,
            "value": self.value,
            "originalValue": self.original_value,
            "description": self.description,
            "deprecated": self.deprecated,
            "mode": self.mode,
            "composite": self.composite,
            "references": list(self.references),
            "referenceEdges": [e.to_dict() for e in self.reference_edges],
            "referencedBy": list(self.referenced_by),
            "themes": {theme: o.model_dump() for theme, o in self.overrides.items()},
            "themeable": self.themeable,
            "variants": dict(self.variants),
            "outputs": {fmt: o.to_dict() for fmt, o in self.outputs.items()},
        }
        if self.parent:
            d["parent"] = self.parent
        if self.children:
            d["children"] = list(self.children)
        if include_source:
            d["source"] = self.source.to_dict() if self.source else None
        return d
