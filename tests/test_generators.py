"""
Tests for output generators.

Tests cover:
- Value formatting for CSS and typed modules
- CSS files split by tier, component and theme
- TypeScript module contents
- JSON snapshot
"""

import json

import pytest

from chuk_mcp_tokens.config import BuildConfig
from chuk_mcp_tokens.constants import OutputFormat
from chuk_mcp_tokens.errors import TokenBuildError
from chuk_mcp_tokens.generators import (
    CSSGenerator,
    GeneratorContext,
    SnapshotGenerator,
    TypeScriptGenerator,
    create_generators,
)
from chuk_mcp_tokens.generators.values import (
    format_border,
    format_color,
    format_css_value,
    format_font_family,
    format_gradient,
    format_native_value,
    format_shadow,
    format_transition,
    format_typography,
    to_camel_case,
    to_css_var,
)
from chuk_mcp_tokens.models.token import TokenDefinition
from chuk_mcp_tokens.registry import OutputRegistry


class Collector:
    """Collects what a generator emits and reports."""

    def __init__(self):
        self.files: dict[str, str] = {}
        self.reports: dict[str, list] = {}

    def emit(self, filename: str, contents: str) -> None:
        assert filename not in self.files
        self.files[filename] = contents

    def report(self, token_id: str, output) -> None:
        self.reports.setdefault(token_id, []).append(output)


@pytest.fixture
def registry() -> OutputRegistry:
    """Registry with one token per tier, a composite and a dark override."""
    reg = OutputRegistry()
    reg.register_token("ref.color.blue.500", TokenDefinition(value="#1E40AF", type="color"))
    reg.register_token("ref.color.blue.300", TokenDefinition(value="#3B82F6", type="color"))
    reg.register_token(
        "sys.color.action.primary.default",
        TokenDefinition(value="#1E40AF", original_value="{ref.color.blue.500}"),
    )
    reg.register_token(
        "sys.typography.heading.xl",
        TokenDefinition(
            value={
                "fontFamily": ["Inter", "system-ui"],
                "fontSize": "24px",
                "fontWeight": 700,
                "lineHeight": "32px",
            }
        ),
    )
    reg.register_token("cmp.button.radius", TokenDefinition(value="8px"))
    reg.register_override("sys.color.action.primary.default", "dark", "#3B82F6")
    return reg


def run(generator, registry: OutputRegistry, themes=("light", "dark")) -> Collector:
    collector = Collector()
    generator.generate(
        GeneratorContext(
            tokens=registry.get_records(),
            theme_values={},
            themes=themes,
            default_theme="light",
            emit=collector.emit,
            report=collector.report,
        )
    )
    return collector


class TestValueFormatting:
    """Tests for value formatting helpers."""

    def test_names(self):
        """Ids map to CSS variables and camelCase keys."""
        assert to_css_var("sys.color.bg") == "--sys-color-bg"
        assert to_camel_case("sys.color.action-primary") == "sysColorActionPrimary"
        assert to_camel_case("ref.color.blue.500") == "refColorBlue500"

    def test_color_strings_pass_through(self):
        """Color strings are kept as written."""
        assert format_color("#1E40AF") == "#1E40AF"

    def test_color_objects(self):
        """Color objects become rgba() or hsla()."""
        assert format_color({"colorSpace": "srgb", "components": [1, 0, 0]}) == "rgba(255, 0, 0, 1)"
        assert (
            format_color({"colorSpace": "hsl", "components": [210, 50, 40], "alpha": 0.5})
            == "hsla(210, 50%, 40%, 0.5)"
        )
        assert format_color({"r": 0, "g": 128, "b": 255}) == "rgba(0, 128, 255, 1)"

    def test_font_family_quoting(self):
        """Families with spaces are quoted, generic families are not."""
        assert (
            format_font_family(["Inter", "Helvetica Neue", "sans-serif"])
            == 'Inter, "Helvetica Neue", sans-serif'
        )

    def test_shadow(self):
        """Shadow layers are space-joined, multiple layers comma-joined."""
        layer = {
            "offsetX": "0px",
            "offsetY": "1px",
            "blur": "2px",
            "spread": "0px",
            "color": "#000",
        }
        assert format_shadow(layer) == "0px 1px 2px 0px #000"
        assert format_shadow([layer, {**layer, "inset": True}]) == (
            "0px 1px 2px 0px #000, inset 0px 1px 2px 0px #000"
        )

    def test_border(self):
        """Borders are width style color."""
        assert format_border({"width": "1px", "style": "dashed", "color": "#000"}) == (
            "1px dashed #000"
        )

    def test_gradient(self):
        """Gradient stops get percentage positions."""
        stops = [{"color": "#fff", "position": 0}, {"color": "#000", "position": 0.5}]
        assert format_gradient(stops) == "linear-gradient(#fff 0%, #000 50%)"

    def test_gradient_text_positions(self):
        """Non-numeric stop positions are written as given."""
        stops = [{"color": "#fff", "position": "50%"}, {"color": "#000", "position": "{ref.stop}"}]
        assert format_gradient(stops) == "linear-gradient(#fff 50%, #000 {ref.stop})"

    def test_transition(self):
        """Transitions render bezier timing functions."""
        value = {"duration": "200ms", "timingFunction": [0.4, 0, 0.2, 1], "delay": "0ms"}
        assert format_transition(value) == "200ms cubic-bezier(0.4, 0, 0.2, 1) 0ms"

    def test_typography_shorthand(self):
        """Typography renders as a font shorthand."""
        value = {"fontFamily": ["Inter"], "fontSize": "16px", "fontWeight": 400, "lineHeight": 1.5}
        assert format_typography(value) == "400 16px/1.5 Inter"

    def test_css_fallbacks(self):
        """Unknown types fall back by shape."""
        assert format_css_value({"value": 16, "unit": "px"}, "dimension") == "16px"
        assert format_css_value(1.0, "number") == "1"
        assert format_css_value(True, None) == "true"
        assert format_css_value(["a", "b"], None) == "a, b"
        assert format_css_value({"b": 1, "a": 2}, None) == '{"a": 2, "b": 1}'

    def test_native_values(self):
        """Typed-module values are JS friendly."""
        assert format_native_value("16px", "dimension") == 16
        assert format_native_value("1.5rem", "dimension") == "1.5rem"
        assert format_native_value({"value": 4, "unit": "px"}, "dimension") == 4
        assert format_native_value(["Inter", "system-ui"], "fontFamily") == "Inter"
        assert format_native_value(700, "fontWeight") == "700"
        assert format_native_value(1.5, "number") == 1.5
        assert format_native_value("#fff", "color") == "#fff"


class TestCSSGenerator:
    """Tests for CSSGenerator."""

    def test_files(self, registry: OutputRegistry):
        """Base, component and one file per theme."""
        files = run(CSSGenerator(), registry).files
        assert sorted(files) == [
            "css/base.css",
            "css/components/button.css",
            "css/themes/dark.css",
            "css/themes/light.css",
        ]

    def test_base_file(self, registry: OutputRegistry):
        """ref and sys tokens go to base.css under :root."""
        css = run(CSSGenerator(), registry).files["css/base.css"]
        assert ":root {" in css
        assert "  --ref-color-blue-500: #1E40AF;\n" in css
        assert "  --sys-color-action-primary-default: #1E40AF;\n" in css
        assert "--cmp-button-radius" not in css

    def test_typography_shorthand_and_children(self, registry: OutputRegistry):
        """Typography parents get a shorthand; children get their own properties."""
        css = run(CSSGenerator(), registry).files["css/base.css"]
        assert "  --sys-typography-heading-xl: 700 24px/32px Inter, system-ui;\n" in css
        assert "  --sys-typography-heading-xl-fontFamily: Inter, system-ui;\n" in css
        assert "  --sys-typography-heading-xl-fontWeight: 700;\n" in css

    def test_non_typography_composite_parent_skipped(self):
        """Other composite parents render through their children only."""
        reg = OutputRegistry()
        reg.register_token(
            "sys.space.inset", TokenDefinition(value={"x": "4px", "y": "8px"}, type="spacing")
        )
        collector = run(CSSGenerator(), reg, themes=("light",))

        css = collector.files["css/base.css"]
        assert "--sys-space-inset:" not in css
        assert "  --sys-space-inset-x: 4px;\n" in css
        assert "sys.space.inset" not in collector.reports

    def test_component_file(self, registry: OutputRegistry):
        """cmp.<name>.* tokens go to their component file."""
        css = run(CSSGenerator(), registry).files["css/components/button.css"]
        assert "  --cmp-button-radius: 8px;\n" in css

    def test_theme_files(self, registry: OutputRegistry):
        """Non-default themes hold only their overrides."""
        files = run(CSSGenerator(), registry).files

        dark = files["css/themes/dark.css"]
        assert '[data-theme="dark"] {' in dark
        assert "  --sys-color-action-primary-default: #3B82F6;\n" in dark
        assert "--ref-color-blue-500" not in dark

        light = files["css/themes/light.css"]
        assert "[data-theme" not in light
        assert "base.css" in light

    def test_reports(self, registry: OutputRegistry):
        """Each rendered token is reported once, with usage and file."""
        reports = run(CSSGenerator(), registry).reports

        (output,) = reports["sys.color.action.primary.default"]
        assert output.name == "--sys-color-action-primary-default"
        assert output.value == "#1E40AF"
        assert output.usage == "var(--sys-color-action-primary-default)"
        assert output.metadata == {"file": "css/base.css"}
        assert reports["cmp.button.radius"][0].metadata == {"file": "css/components/button.css"}

    def test_deterministic(self, registry: OutputRegistry):
        """Two runs over the same registry give identical text."""
        assert run(CSSGenerator(), registry).files == run(CSSGenerator(), registry).files


class TestTypeScriptGenerator:
    """Tests for TypeScriptGenerator."""

    def test_tokens_object(self, registry: OutputRegistry):
        """Leaf tokens are camelCase keys with native values."""
        ts = run(TypeScriptGenerator(), registry).files["tokens.ts"]
        assert "export const tokens = {" in ts
        assert '  refColorBlue500: "#1E40AF",\n' in ts
        assert '  sysTypographyHeadingXlFontFamily: "Inter",\n' in ts
        assert "  sysTypographyHeadingXlFontSize: 24,\n" in ts
        assert '  sysTypographyHeadingXlFontWeight: "700",\n' in ts
        assert "} as const;" in ts

    def test_composite_parent_omitted(self, registry: OutputRegistry):
        """Composite parents are carried by their children."""
        collector = run(TypeScriptGenerator(), registry)
        assert "  sysTypographyHeadingXl:" not in collector.files["tokens.ts"]
        assert "sys.typography.heading.xl" not in collector.reports

    def test_themes_and_types(self, registry: OutputRegistry):
        """Themes map to their overrides; Theme is a union of names."""
        ts = run(TypeScriptGenerator(), registry).files["tokens.ts"]
        assert '    sysColorActionPrimaryDefault: "#3B82F6",\n' in ts
        assert "  light: {},\n" in ts
        assert 'export type Theme = "light" | "dark";' in ts
        assert "export type TokenName = keyof typeof tokens;" in ts
        assert 'export function getTokens(theme: Theme = "light")' in ts

    def test_custom_filename(self, registry: OutputRegistry):
        """The output filename is configurable."""
        collector = run(TypeScriptGenerator("src/tokens.ts"), registry)
        assert list(collector.files) == ["src/tokens.ts"]
        assert collector.reports["cmp.button.radius"][0].usage == "tokens.cmpButtonRadius"

    def test_name_collision(self):
        """Two ids with the same camelCase name are fatal."""
        reg = OutputRegistry()
        reg.register_token("sys.color-bg", TokenDefinition(value="#fff"))
        reg.register_token("sys.color.bg", TokenDefinition(value="#000"))

        with pytest.raises(TokenBuildError, match="sysColorBg"):
            run(TypeScriptGenerator(), reg)


class TestSnapshotGenerator:
    """Tests for SnapshotGenerator."""

    def test_snapshot(self, registry: OutputRegistry):
        """Top-level tokens and per-theme overrides."""
        collector = run(SnapshotGenerator(), registry)
        text = collector.files["tokens.json"]
        data = json.loads(text)

        assert text.endswith("}\n")
        assert data["tokens"]["ref.color.blue.500"] == "#1E40AF"
        assert data["tokens"]["sys.typography.heading.xl"]["fontWeight"] == 700
        assert "sys.typography.heading.xl.fontSize" not in data["tokens"]
        assert data["themes"] == {
            "light": {},
            "dark": {"sys.color.action.primary.default": "#3B82F6"},
        }
        assert collector.reports["ref.color.blue.500"][0].name == "ref.color.blue.500"


class TestCreateGenerators:
    """Tests for create_generators."""

    def test_config_order(self, temp_dir):
        """Generators follow the configured formats."""
        config = BuildConfig(
            source_dir=temp_dir,
            formats=[OutputFormat.JSON, OutputFormat.CSS],
            snapshot_filename="snapshot.json",
        )
        generators = create_generators(config)

        assert [g.format for g in generators] == [OutputFormat.JSON, OutputFormat.CSS]
        assert generators[0].filename == "snapshot.json"
