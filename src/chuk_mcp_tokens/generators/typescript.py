"""
TypeScript generator - a typed token module with theme selection.
"""

from __future__ import annotations

import json
import logging
from typing import Any

from chuk_mcp_tokens.constants import DEFAULT_TYPESCRIPT_FILE, GENERATED_HEADER, OutputFormat
from chuk_mcp_tokens.errors import TokenBuildError
from chuk_mcp_tokens.generators.base import GeneratorContext
from chuk_mcp_tokens.generators.values import format_native_value, to_camel_case
from chuk_mcp_tokens.models.token import OutputSpec

logger = logging.getLogger(__name__)


def _literal(value: Any) -> str:
    return json.dumps(value, ensure_ascii=False)


def _key(name: str) -> str:
    """Quote keys that aren't valid identifiers (e.g. leading digit)."""
    return name if name.isidentifier() else _literal(name)


class TypeScriptGenerator:
    """
    Writes `tokens`, `themes`, `Theme` and `getTokens(theme)`.

    Composite parents are left out; their children carry the values.
    Theme-only tokens have no base key and are left out as well.
    """

    format = OutputFormat.TYPESCRIPT

    def __init__(self, filename: str = DEFAULT_TYPESCRIPT_FILE):
        self.filename = filename

    def generate(self, context: GeneratorContext) -> None:
        names: dict[str, str] = {}  # camelCase name -> token id
        token_lines: list[str] = []

        for token in context.base_tokens():
            if token.composite:
                continue

            name = to_camel_case(token.id)
            if name in names:
                raise TokenBuildError(
                    f"Tokens '{names[name]}' and '{token.id}' both map to '{name}'"
                )
            names[name] = token.id

            value = format_native_value(token.value, token.type)
            token_lines.append(f"  {_key(name)}: {_literal(value)},")
            context.report(
                token.id,
                OutputSpec(
                    name=name,
                    value=value,
                    usage=f"tokens.{name}",
                    metadata={"file": self.filename},
                ),
            )

        ids = set(names.values())
        theme_blocks: list[str] = []
        for theme in context.themes:
            lines = []
            for token in context.overridden(theme):
                if token.composite or token.id not in ids:
                    continue
                value = format_native_value(token.overrides[theme].value, token.type)
                lines.append(f"    {_key(to_camel_case(token.id))}: {_literal(value)},")
            body = "\n".join(lines)
            theme_blocks.append(
                f"  {_key(theme)}: {{\n{body}\n  }}," if lines else f"  {_key(theme)}: {{}},"
            )

        theme_union = " | ".join(_literal(t) for t in context.themes) or "never"
        content = "\n".join(
            [
                "/**",
                f" * {GENERATED_HEADER}",
                " */",
                "",
                "export const tokens = {",
                *token_lines,
                "} as const;",
                "",
                "export type TokenName = keyof typeof tokens;",
                "export type TokenValue = string | number;",
                f"export type Theme = {theme_union};",
                "",
                "export const themes: Record<Theme, Partial<Record<TokenName, TokenValue>>> = {",
                *theme_blocks,
                "};",
                "",
                f"export function getTokens(theme: Theme = {_literal(context.default_theme)})"
                ": Record<TokenName, TokenValue> {",
                "  return { ...tokens, ...themes[theme] };",
                "}",
                "",
            ]
        )

        context.emit(self.filename, content)
        logger.info(f"TypeScript: {len(token_lines)} tokens in {self.filename}")
