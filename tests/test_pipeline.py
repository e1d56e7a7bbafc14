"""
Tests for the build pipeline and build session.

Tests cover:
- End-to-end build of the sample tree
- Theme overrides, theme-only tokens and manifest-driven themes
- Idempotent output
- Atomic writes and failure handling
- BuildSession lifecycle
"""

import json
import logging
from pathlib import Path

import pytest
import yaml

from chuk_mcp_tokens.build import BuildSession, TokenBuild, write_outputs
from chuk_mcp_tokens.config import BuildConfig
from chuk_mcp_tokens.errors import (
    ConfigError,
    SourceDocumentError,
    TokenBuildError,
    UnresolvedReferenceError,
)
from chuk_mcp_tokens.generators import CSSGenerator

EXPECTED_FILES = [
    "css/base.css",
    "css/components/button.css",
    "css/themes/dark.css",
    "css/themes/light.css",
    "docs/tokens-reference.json",
    "docs/tokens-registry.json",
    "tokens.json",
    "tokens.ts",
]


def read_output(output_dir: Path) -> dict[str, bytes]:
    return {
        p.relative_to(output_dir).as_posix(): p.read_bytes()
        for p in sorted(output_dir.rglob("*"))
        if p.is_file()
    }


class TestTokenBuild:
    """Tests for a full build of the sample tree."""

    @pytest.mark.asyncio
    async def test_writes_all_files(self, build_config: BuildConfig):
        """Every generator and both doc exports land in the output dir."""
        result = await TokenBuild(build_config).run()

        assert sorted(result.files) == EXPECTED_FILES
        assert sorted(read_output(build_config.output_dir)) == EXPECTED_FILES
        assert result.output_dir == build_config.output_dir
        assert result.themes == ["light", "dark"]

    @pytest.mark.asyncio
    async def test_dry_run(self, build_config: BuildConfig):
        """write=False builds in memory only."""
        result = await TokenBuild(build_config).run(write=False)

        assert sorted(result.files) == EXPECTED_FILES
        assert result.output_dir is None
        assert not build_config.output_dir.exists()

    @pytest.mark.asyncio
    async def test_primary_action_color(self, build_config: BuildConfig):
        """The aliased primary color carries references, outputs and the dark override."""
        result = await TokenBuild(build_config).run(write=False)
        token = result.registry.get_token("sys.color.action.primary.default")

        assert token.type == "color"
        assert token.value == "#1E40AF"
        assert token.original_value == "{ref.color.blue.500}"
        assert token.references == ("ref.color.blue.500",)
        assert token.outputs["css"].usage == "var(--sys-color-action-primary-default)"
        assert token.outputs["typescript"].name == "sysColorActionPrimaryDefault"
        assert token.overrides["dark"].value == "#3B82F6"
        assert token.variants == {"light": "#1E40AF", "dark": "#3B82F6"}
        assert token.source.file == "semantic/base/color.json"

    @pytest.mark.asyncio
    async def test_typography_children(self, build_config: BuildConfig):
        """The heading composite expands into typed children."""
        result = await TokenBuild(build_config).run(write=False)
        registry = result.registry
        parent = "sys.typography.heading.xl"

        props = ("fontFamily", "fontSize", "fontWeight", "lineHeight")
        children = [f"{parent}.{p}" for p in props]
        assert registry.get_token(parent).children == tuple(children)
        assert [registry.get_token(c).type for c in children] == [
            "fontFamily",
            "dimension",
            "fontWeight",
            "dimension",
        ]
        assert registry.get_references(f"{parent}.fontFamily") == [
            parent,
            "ref.font.family.sans",
        ]
        assert registry.get_references(f"{parent}.lineHeight") == [parent]
        assert registry.get_referenced_by(parent) == children

    @pytest.mark.asyncio
    async def test_overrides_follow_aliases(self, build_config: BuildConfig):
        """Tokens aliasing an overridden token are overridden too."""
        result = await TokenBuild(build_config).run(write=False)

        assert result.overrides == {"dark": 5}
        assert result.registry.get_theme_overrides("dark") == {
            "sys.color.action.primary.default": "#3B82F6",
            "sys.color.surface": "#111827",
            "sys.color.text": "#FFFFFF",
            "cmp.button.background": "#3B82F6",
            "cmp.button.label": "#111827",
        }
        assert result.registry.get_token("cmp.button.radius").themeable is False

    @pytest.mark.asyncio
    async def test_impact(self, build_config: BuildConfig):
        """Impact walks from a primitive up to components."""
        result = await TokenBuild(build_config).run(write=False)
        assert result.registry.get_impact("ref.color.blue.500") == [
            "sys.color.action.primary.default",
            "cmp.button.background",
        ]

    @pytest.mark.asyncio
    async def test_dark_stylesheet(self, build_config: BuildConfig):
        """The dark stylesheet holds only overrides."""
        result = await TokenBuild(build_config).run(write=False)
        dark = result.files["css/themes/dark.css"]

        assert '[data-theme="dark"] {' in dark
        assert "  --sys-color-surface: #111827;\n" in dark
        assert "--cmp-button-radius" not in dark

    @pytest.mark.asyncio
    async def test_full_coverage(self, build_config: BuildConfig):
        """Every base token gets at least one output."""
        result = await TokenBuild(build_config).run(write=False)
        registry_doc = json.loads(result.files["docs/tokens-registry.json"])

        coverage = registry_doc["metadata"]["stats"]["coverage"]
        assert coverage["percentage"] == 100
        assert coverage["withOutputs"] == len(result.registry)

    @pytest.mark.asyncio
    async def test_idempotent(self, build_config: BuildConfig):
        """Two builds over the same sources write identical bytes."""
        await TokenBuild(build_config).run()
        first = read_output(build_config.output_dir)
        await TokenBuild(build_config).run()
        second = read_output(build_config.output_dir)

        assert first == second

    @pytest.mark.asyncio
    async def test_theme_only_token(
        self, build_config: BuildConfig, token_source, write_tokens, caplog
    ):
        """A token only a theme defines is registered with that theme as its mode."""
        write_tokens(
            token_source,
            {"semantic/dark/glow.json": {"sys": {"color": {"glow": {"$value": "#00FFFF"}}}}},
        )

        with caplog.at_level(logging.WARNING):
            result = await TokenBuild(build_config).run(write=False)

        assert "sys.color.glow" in caplog.text
        token = result.registry.get_token("sys.color.glow")
        assert token.mode == "dark"
        assert token.overrides["dark"].value == "#00FFFF"
        assert "  --sys-color-glow: #00FFFF;\n" in result.files["css/themes/dark.css"]
        assert "--sys-color-glow" not in result.files["css/base.css"]
        assert "sysColorGlow" not in result.files["tokens.ts"]

        css = token.outputs["css"]
        assert css.name == "--sys-color-glow"
        assert css.usage == "var(--sys-color-glow)"
        assert css.metadata == {"file": "css/themes/dark.css"}
        assert result.registry.tokens_with_outputs == len(result.registry)

    @pytest.mark.asyncio
    async def test_theme_only_composite_changes_properties(
        self, build_config: BuildConfig, token_source: Path, write_tokens
    ):
        """A later theme's extra properties don't create children the first theme lacks."""
        (token_source / "$themes.json").write_text(
            json.dumps([{"id": "light"}, {"id": "dark"}, {"id": "contrast"}])
        )
        write_tokens(
            token_source,
            {
                "semantic/dark/card.json": {
                    "sys": {"card": {"$value": {"fontSize": "16px", "lineHeight": 1.5}}}
                },
                "semantic/contrast/card.json": {
                    "sys": {"card": {"$value": {"fontSize": "18px", "letterSpacing": "1px"}}}
                },
            },
        )

        result = await TokenBuild(build_config).run(write=False)
        registry = result.registry

        card = registry.get_token("sys.card")
        assert card.mode == "dark"
        assert card.children == ("sys.card.fontSize", "sys.card.lineHeight")
        assert "sys.card.letterSpacing" not in registry

        contrast = registry.get_theme_overrides("contrast")
        assert contrast["sys.card"] == {"fontSize": "18px", "letterSpacing": "1px"}
        assert contrast["sys.card.fontSize"] == "18px"
        assert "sys.card.lineHeight" not in contrast

    @pytest.mark.asyncio
    async def test_theme_only_composite_becomes_scalar(
        self, build_config: BuildConfig, token_source: Path, write_tokens
    ):
        """A later theme may give a theme-only composite a plain value."""
        (token_source / "$themes.json").write_text(
            json.dumps([{"id": "light"}, {"id": "dark"}, {"id": "contrast"}])
        )
        write_tokens(
            token_source,
            {
                "semantic/dark/card.json": {"sys": {"card": {"$value": {"fontSize": "16px"}}}},
                "semantic/contrast/card.json": {"sys": {"card": {"$value": "none"}}},
            },
        )

        result = await TokenBuild(build_config).run(write=False)
        registry = result.registry

        assert registry.get_token("sys.card").children == ("sys.card.fontSize",)
        assert registry.get_theme_overrides("contrast")["sys.card"] == "none"
        assert registry.get_token("sys.card.fontSize").override_themes == ["dark"]
        assert "  --sys-card: none;\n" in result.files["css/themes/contrast.css"]

    @pytest.mark.asyncio
    async def test_manifest_themes(self, build_config: BuildConfig, token_source: Path):
        """Manifest themes replace configured themes, default first."""
        (token_source / "$themes.json").write_text(
            json.dumps([{"id": "contrast"}, {"id": "dark"}, {"id": "light"}])
        )

        result = await TokenBuild(build_config).run(write=False)

        assert result.themes == ["light", "contrast", "dark"]
        assert result.overrides["contrast"] == 0
        assert "css/themes/contrast.css" in result.files

    @pytest.mark.asyncio
    async def test_cycle_does_not_abort(
        self, build_config: BuildConfig, token_source, write_tokens
    ):
        """Circular aliases are left unresolved and still indexed."""
        write_tokens(
            token_source,
            {
                "semantic/base/loop.json": {
                    "sys": {
                        "loop": {
                            "a": {"$value": "{sys.loop.b}"},
                            "b": {"$value": "{sys.loop.a}"},
                        }
                    }
                }
            },
        )

        result = await TokenBuild(build_config).run(write=False)
        registry = result.registry
        assert registry.get_references("sys.loop.a") == ["sys.loop.b"]
        assert registry.get_impact("sys.loop.a") == ["sys.loop.b"]

    @pytest.mark.asyncio
    async def test_unresolved_reference(
        self, build_config: BuildConfig, token_source, write_tokens
    ):
        """A dangling reference aborts the build."""
        write_tokens(
            token_source,
            {"component/card.json": {"cmp": {"card": {"bg": {"$value": "{sys.nope}"}}}}},
        )

        with pytest.raises(UnresolvedReferenceError):
            await TokenBuild(build_config).run()
        assert not build_config.output_dir.exists()

    @pytest.mark.asyncio
    async def test_duplicate_emit(self, build_config: BuildConfig):
        """Two generators writing the same file abort the build."""
        build = TokenBuild(build_config, generators=[CSSGenerator(), CSSGenerator()])
        with pytest.raises(TokenBuildError, match="css/base.css"):
            await build.run(write=False)


class TestAtomicWrite:
    """Tests for write_outputs and failure handling."""

    def test_replaces_previous_output(self, temp_dir: Path):
        """Stale files from an earlier build are gone after a write."""
        output = temp_dir / "dist"
        write_outputs(output, {"a.css": "a", "nested/b.json": "{}"})
        write_outputs(output, {"a.css": "new"})

        assert read_output(output) == {"a.css": b"new"}
        assert sorted(p.name for p in temp_dir.iterdir()) == ["dist"]

    @pytest.mark.asyncio
    async def test_failed_build_keeps_output(
        self, build_config: BuildConfig, token_source: Path, temp_dir: Path
    ):
        """A failed build leaves the previous output and no staging leftovers."""
        await TokenBuild(build_config).run()
        before = read_output(build_config.output_dir)

        (token_source / "reference" / "zz.json").write_text("{ not json")
        with pytest.raises(SourceDocumentError):
            await TokenBuild(build_config).run()

        assert read_output(build_config.output_dir) == before
        assert not [p for p in temp_dir.iterdir() if "staging" in p.name]


class TestBuildSession:
    """Tests for BuildSession."""

    def test_no_build_yet(self, build_config: BuildConfig):
        """Queries before the first build fail with a clear message."""
        session = BuildSession(config=build_config)

        assert session.has_build is False
        with pytest.raises(ValueError, match="No build found"):
            session.result

    def test_no_config(self):
        """A session without any config can't build."""
        with pytest.raises(ConfigError):
            BuildSession().config

    def test_config_loaded_lazily(self, temp_dir: Path, token_source: Path):
        """A config path is read on first use, relative to the file."""
        path = temp_dir / "tokens.yaml"
        path.write_text(yaml.safe_dump({"source_dir": "tokens", "output_dir": "out"}))

        session = BuildSession(config_path=path)
        assert session.config.source_dir == token_source
        assert session.config.output_dir == temp_dir / "out"

    @pytest.mark.asyncio
    async def test_build_keeps_result(self, build_config: BuildConfig):
        """A successful build is kept for queries."""
        session = BuildSession(config=build_config)
        result = await session.build(write=False)

        assert session.has_build is True
        assert session.result is result
        assert "ref.color.blue.500" in session.registry

    @pytest.mark.asyncio
    async def test_failed_build_keeps_previous(
        self, build_config: BuildConfig, token_source: Path, temp_dir: Path
    ):
        """A failed rebuild raises and the previous registry stays queryable."""
        session = BuildSession(config=build_config)
        first = await session.build(write=False)

        bad = build_config.model_copy(update={"source_dir": temp_dir / "missing-ref"})
        (temp_dir / "missing-ref" / "component").mkdir(parents=True)
        (temp_dir / "missing-ref" / "component" / "x.json").write_text(
            json.dumps({"cmp": {"x": {"$value": "{ref.gone}"}}})
        )
        with pytest.raises(UnresolvedReferenceError):
            await session.build(config=bad, write=False)

        assert session.result is first
