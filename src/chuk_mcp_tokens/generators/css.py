"""
CSS generator - custom properties split by tier, component and theme.

Files:
- css/base.css: ref.* and sys.* tokens under :root
- css/components/<name>.css: cmp.<name>.* tokens under :root
- css/themes/<theme>.css: [data-theme] blocks holding overrides only
"""

from __future__ import annotations

import logging

from chuk_mcp_tokens.constants import (
    CSS_BASE_FILE,
    CSS_COMPONENT_FILE,
    CSS_THEME_FILE,
    GENERATED_HEADER,
    OutputFormat,
    TokenType,
)
from chuk_mcp_tokens.generators.base import GeneratorContext
from chuk_mcp_tokens.generators.values import format_css_value, to_css_var
from chuk_mcp_tokens.models.token import OutputSpec, TokenRecord
from chuk_mcp_tokens.registry.registry import component_of

logger = logging.getLogger(__name__)


def _renders(token: TokenRecord) -> bool:
    """Composite parents render through their children, except typography."""
    return not token.composite or token.type == TokenType.TYPOGRAPHY.value


def _block(selector: str, lines: list[str]) -> str:
    body = "".join(f"  {line}\n" for line in lines)
    return f"/* {GENERATED_HEADER} */\n\n{selector} {{\n{body}}}\n"


class CSSGenerator:
    """Custom-property stylesheets."""

    format = OutputFormat.CSS

    def generate(self, context: GeneratorContext) -> None:
        base_lines: list[str] = []
        component_lines: dict[str, list[str]] = {}

        for token in context.base_tokens():
            if not _renders(token):
                continue

            name = to_css_var(token.id)
            value = format_css_value(token.value, token.type)
            component = component_of(token.id)

            if component:
                filename = CSS_COMPONENT_FILE.format(component=component)
                component_lines.setdefault(component, []).append(f"{name}: {value};")
            else:
                filename = CSS_BASE_FILE
                base_lines.append(f"{name}: {value};")

            context.report(
                token.id,
                OutputSpec(
                    name=name,
                    value=value,
                    usage=f"var({name})",
                    metadata={"file": filename},
                ),
            )

        context.emit(CSS_BASE_FILE, _block(":root", base_lines))
        for component in sorted(component_lines):
            context.emit(
                CSS_COMPONENT_FILE.format(component=component),
                _block(":root", component_lines[component]),
            )

        for theme in context.themes:
            context.emit(CSS_THEME_FILE.format(theme=theme), self._theme_file(context, theme))

        logger.info(
            f"CSS: {len(base_lines)} base, {len(component_lines)} component files, "
            f"{len(context.themes)} themes"
        )

    def _theme_file(self, context: GeneratorContext, theme: str) -> str:
        if theme == context.default_theme:
            return (
                f"/* {GENERATED_HEADER} */\n\n"
                f"/* The {theme} theme is the default; its values live in base.css. */\n"
            )

        filename = CSS_THEME_FILE.format(theme=theme)
        lines = []
        for token in context.overridden(theme):
            if not _renders(token):
                continue
            name = to_css_var(token.id)
            value = format_css_value(token.overrides[theme].value, token.type)
            lines.append(f"{name}: {value};")

            # Theme-only tokens have no base rule; their first theme is the output
            if token.mode == theme:
                context.report(
                    token.id,
                    OutputSpec(
                        name=name,
                        value=value,
                        usage=f"var({name})",
                        metadata={"file": filename},
                    ),
                )

        return _block(f'[data-theme="{theme}"]', lines)
