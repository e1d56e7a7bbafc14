"""
Value formatting shared by generators.

CSS formatting turns DTCG structured values into declaration text.
Native formatting turns them into values a JS/React Native consumer
can use directly.
"""

from __future__ import annotations

import json
import re
from typing import Any

from chuk_mcp_tokens.constants import TokenType

_WORD_SPLIT = re.compile(r"[._\-\s]+")
_PX = re.compile(r"^(-?(?:\d+\.?\d*|\.\d+))px$")
_GENERIC_FAMILIES = frozenset(
    {"serif", "sans-serif", "monospace", "cursive", "fantasy", "system-ui", "inherit"}
)


def to_css_var(token_id: str) -> str:
    """'sys.color.bg' -> '--sys-color-bg'."""
    return "--" + token_id.replace(".", "-")


def to_camel_case(token_id: str) -> str:
    """'sys.color.action-primary' -> 'sysColorActionPrimary'."""
    words = [w for w in _WORD_SPLIT.split(token_id) if w]
    if not words:
        return token_id
    return words[0] + "".join(w[:1].upper() + w[1:] for w in words[1:])


def format_number(value: int | float) -> str:
    """Format a number without a trailing '.0'."""
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    return str(value)


def _dimension(value: Any) -> str:
    if isinstance(value, dict) and "value" in value:
        return f"{format_number(value['value'])}{value.get('unit', '')}"
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, (int, float)):
        return format_number(value)
    return str(value)


def _channel(value: float) -> str:
    return str(round(value * 255))


def format_color(value: Any) -> str:
    """
    Format a color as CSS.

    Strings pass through. DTCG color objects become rgba(), or hsla()
    for HSL components.
    """
    if not isinstance(value, dict):
        return str(value)

    alpha = value.get("alpha", value.get("a", 1))
    if "components" in value:
        space = str(value.get("colorSpace", "srgb")).lower()
        components = list(value["components"])
        if space == "hsl" and len(components) >= 3:
            h, s, light = components[:3]
            return (
                f"hsla({format_number(h)}, {format_number(s)}%, "
                f"{format_number(light)}%, {format_number(alpha)})"
            )
        if value.get("hex") and alpha == 1:
            return str(value["hex"])
        r, g, b = components[:3]
        return f"rgba({_channel(r)}, {_channel(g)}, {_channel(b)}, {format_number(alpha)})"
    if {"r", "g", "b"} <= value.keys():
        return (
            f"rgba({format_number(value['r'])}, {format_number(value['g'])}, "
            f"{format_number(value['b'])}, {format_number(alpha)})"
        )
    if {"h", "s", "l"} <= value.keys():
        return (
            f"hsla({format_number(value['h'])}, {format_number(value['s'])}%, "
            f"{format_number(value['l'])}%, {format_number(alpha)})"
        )
    return str(value)


def format_font_family(value: Any) -> str:
    """Join a family list, quoting names that contain spaces."""
    families = value if isinstance(value, list) else [value]
    parts = []
    for family in families:
        name = str(family)
        if " " in name and name not in _GENERIC_FAMILIES and not name.startswith(("'", '"')):
            name = f'"{name}"'
        parts.append(name)
    return ", ".join(parts)


def format_shadow(value: Any) -> str:
    """Format one shadow layer or a list of layers."""
    layers = value if isinstance(value, list) else [value]
    rendered = []
    for layer in layers:
        if not isinstance(layer, dict):
            rendered.append(str(layer))
            continue
        parts = [
            _dimension(layer.get("offsetX", 0)),
            _dimension(layer.get("offsetY", 0)),
            _dimension(layer.get("blur", 0)),
            _dimension(layer.get("spread", 0)),
            format_color(layer.get("color", "transparent")),
        ]
        text = " ".join(parts)
        rendered.append(f"inset {text}" if layer.get("inset") else text)
    return ", ".join(rendered)


def format_border(value: Any) -> str:
    if not isinstance(value, dict):
        return str(value)
    return " ".join(
        [
            _dimension(value.get("width", 0)),
            str(value.get("style", "solid")),
            format_color(value.get("color", "currentColor")),
        ]
    )


def format_gradient(value: Any) -> str:
    if not isinstance(value, list):
        return str(value)
    stops = []
    for stop in value:
        if isinstance(stop, dict):
            position = stop.get("position")
            color = format_color(stop.get("color"))
            if position is None:
                stops.append(color)
            elif isinstance(position, (int, float)) and not isinstance(position, bool):
                stops.append(f"{color} {format_number(position * 100)}%")
            else:
                stops.append(f"{color} {position}")
        else:
            stops.append(str(stop))
    return f"linear-gradient({', '.join(stops)})"


def format_transition(value: Any) -> str:
    if not isinstance(value, dict):
        return str(value)
    timing = value.get("timingFunction", "ease")
    if isinstance(timing, list):
        timing = format_cubic_bezier(timing)
    return " ".join(
        [_dimension(value.get("duration", 0)), str(timing), _dimension(value.get("delay", 0))]
    )


def format_cubic_bezier(value: Any) -> str:
    if isinstance(value, list):
        return f"cubic-bezier({', '.join(format_number(v) for v in value)})"
    return str(value)


def format_typography(value: Any) -> str:
    """CSS `font` shorthand: [style] weight size[/line-height] family."""
    if not isinstance(value, dict):
        return str(value)
    parts = []
    if value.get("fontStyle"):
        parts.append(str(value["fontStyle"]))
    if value.get("fontWeight") is not None:
        parts.append(_dimension(value["fontWeight"]))
    size = _dimension(value.get("fontSize", "medium"))
    if value.get("lineHeight") is not None:
        size = f"{size}/{_dimension(value['lineHeight'])}"
    parts.append(size)
    parts.append(format_font_family(value.get("fontFamily", "sans-serif")))
    return " ".join(parts)


def format_stroke_style(value: Any) -> str:
    if isinstance(value, dict):
        return "dashed"
    return str(value)


_CSS_FORMATTERS = {
    TokenType.COLOR.value: format_color,
    TokenType.DIMENSION.value: _dimension,
    TokenType.DURATION.value: _dimension,
    TokenType.FONT_FAMILY.value: format_font_family,
    TokenType.SHADOW.value: format_shadow,
    TokenType.BORDER.value: format_border,
    TokenType.GRADIENT.value: format_gradient,
    TokenType.TRANSITION.value: format_transition,
    TokenType.CUBIC_BEZIER.value: format_cubic_bezier,
    TokenType.TYPOGRAPHY.value: format_typography,
    TokenType.STROKE_STYLE.value: format_stroke_style,
}


def format_css_value(value: Any, token_type: str | None) -> str:
    """Format any token value as CSS text."""
    formatter = _CSS_FORMATTERS.get(token_type or "")
    if formatter:
        return formatter(value)
    if isinstance(value, list):
        return ", ".join(format_css_value(v, None) for v in value)
    if isinstance(value, dict):
        return json.dumps(value, ensure_ascii=False, sort_keys=True)
    return _dimension(value)


def format_native_value(value: Any, token_type: str | None) -> str | int | float:
    """
    Format a token value for a typed JS module.

    Font family lists collapse to the first family, font weights become
    strings, and px dimensions become plain numbers.
    """
    if token_type == TokenType.FONT_FAMILY.value:
        first = value[0] if isinstance(value, list) and value else value
        return str(first)
    if token_type == TokenType.FONT_WEIGHT.value:
        return _dimension(value)
    if token_type == TokenType.DIMENSION.value:
        if isinstance(value, dict) and value.get("unit") == "px":
            return value["value"]
        if isinstance(value, str) and (match := _PX.match(value.strip())):
            number = float(match.group(1))
            return int(number) if number.is_integer() else number
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, (int, float)):
        return value
    return format_css_value(value, token_type)
