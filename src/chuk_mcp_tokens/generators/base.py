"""
Generator contract.

A generator reads the finalized token map, emits one or more files
through `emit`, and reports what it produced for each token through
`report`. Generators never touch the registry directly.
"""

from __future__ import annotations

from collections.abc import Callable, Mapping
from dataclasses import dataclass
from typing import Any, Protocol

from chuk_mcp_tokens.constants import DEFAULT_MODE, OutputFormat
from chuk_mcp_tokens.models.token import OutputSpec, TokenRecord


@dataclass(frozen=True)
class GeneratorContext:
    """Everything a generator may read, plus its two callbacks."""

    tokens: Mapping[str, TokenRecord]  # includes composite children
    theme_values: Mapping[str, Mapping[str, Any]]  # theme -> token id -> resolved value
    themes: tuple[str, ...]
    default_theme: str
    emit: Callable[[str, str], None]
    report: Callable[[str, OutputSpec], None]

    def base_tokens(self) -> list[TokenRecord]:
        """Tokens defined in base documents, registration order."""
        return [t for t in self.tokens.values() if t.mode == DEFAULT_MODE]

    def overridden(self, theme: str) -> list[TokenRecord]:
        """Tokens a theme overrides, registration order."""
        return [t for t in self.tokens.values() if theme in t.overrides]


class Generator(Protocol):
    """An output format plugin."""

    format: OutputFormat

    def generate(self, context: GeneratorContext) -> None:
        """Emit files and report outputs."""
        ...
