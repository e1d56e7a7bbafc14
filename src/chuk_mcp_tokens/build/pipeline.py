"""
Build pipeline - source documents in, artifacts out.

Stages run in a fixed order:
load -> parse -> classify -> theme diff -> register -> generate -> document -> write

Theme sources are loaded and parsed concurrently. Everything after
that has a single writer. Artifacts are held in memory and written to a
staging directory that replaces the output directory only once every
stage has succeeded.
"""

from __future__ import annotations

import asyncio
import logging
import shutil
import tempfile
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

from chuk_mcp_tokens.config import BuildConfig
from chuk_mcp_tokens.constants import SuccessMessages
from chuk_mcp_tokens.docs.exporter import DocumentationExporter, compute_stats
from chuk_mcp_tokens.errors import TokenBuildError
from chuk_mcp_tokens.generators import Generator, GeneratorContext, create_generators
from chuk_mcp_tokens.models.theme import ThemeManifest
from chuk_mcp_tokens.models.token import OutputSpec, TokenDefinition, TypeClassification
from chuk_mcp_tokens.parsing.dtcg import DTCGParser, TokenParser
from chuk_mcp_tokens.registry.composite import CompositeExpander, child_values
from chuk_mcp_tokens.registry.inference import TypeInferencer
from chuk_mcp_tokens.registry.registry import OutputRegistry
from chuk_mcp_tokens.registry.themes import ThemeDiff, ThemeVariantTracker
from chuk_mcp_tokens.sources.loader import SourceLoader
from chuk_mcp_tokens.sources.manifest import load_manifest
from chuk_mcp_tokens.utils import dump_json

logger = logging.getLogger(__name__)


@dataclass
class BuildResult:
    """Outcome of a successful build."""

    registry: OutputRegistry
    files: dict[str, str] = field(default_factory=dict)  # relative path -> contents
    themes: list[str] = field(default_factory=list)
    overrides: dict[str, int] = field(default_factory=dict)  # theme -> override count
    output_dir: Path | None = None

    def to_dict(self) -> dict[str, Any]:
        """Summary for tools and logs."""
        return {
            "tokens": len(self.registry),
            "themes": self.themes,
            "overrides": self.overrides,
            "files": sorted(self.files),
            "output_dir": str(self.output_dir) if self.output_dir else None,
            "stats": compute_stats(self.registry),
        }


class TokenBuild:
    """
    One build invocation.

    Each run creates its own registry; nothing carries over between runs.
    """

    def __init__(
        self,
        config: BuildConfig,
        parser: TokenParser | None = None,
        generators: list[Generator] | None = None,
    ):
        """
        Initialize the build.

        Args:
            config: Build configuration
            parser: Token parser, defaults to DTCGParser
            generators: Generators, defaults to those named in config.formats
        """
        self.config = config
        self.parser = parser or DTCGParser()
        self.generators = generators if generators is not None else create_generators(config)

    async def run(self, write: bool = True) -> BuildResult:
        """
        Run every stage.

        Args:
            write: Write artifacts to config.output_dir

        Returns:
            BuildResult with the registry and the emitted files

        Raises:
            TokenBuildError: On any fatal error; nothing is written
        """
        config = self.config
        manifest = load_manifest(config.manifest_path)
        themes = self._themes(manifest)
        loader = SourceLoader(
            config.source_dir,
            default_theme=config.default_theme,
            manifest=manifest,
            manifest_filename=config.manifest_file,
        )

        # Load + parse, one task per theme
        parsed = await asyncio.gather(
            *(asyncio.to_thread(self._load_theme, loader, theme) for theme in themes)
        )
        definitions = dict(zip(themes, parsed))
        base = definitions[config.default_theme]

        # Classify
        inferencer = TypeInferencer(base)
        classifications = {
            token_id: inferencer.classify(token_id, definition)
            for token_id, definition in base.items()
        }
        theme_only = self._classify_theme_only(definitions, classifications)

        # Theme diff
        tracker = ThemeVariantTracker(base, classifications, theme_only)
        diffs = {
            theme: tracker.diff(theme, defs)
            for theme, defs in definitions.items()
            if theme != config.default_theme
        }

        # Register
        registry = OutputRegistry(expander=CompositeExpander(inferencer))
        for token_id, definition in base.items():
            registry.register_token(token_id, definition, classifications[token_id])
        for token_id, definition in theme_only.items():
            registry.register_token(token_id, definition, classifications[token_id])
        self._register_themes(registry, definitions, classifications, diffs)
        logger.info(f"Registered {len(registry)} tokens")

        # Generate
        files: dict[str, str] = {}

        def emit(filename: str, contents: str) -> None:
            if filename in files:
                raise TokenBuildError(f"Output file emitted twice: {filename}")
            files[filename] = contents

        records = registry.get_records()
        theme_values = {
            theme: _expanded_values(defs, classifications) for theme, defs in definitions.items()
        }
        for generator in self.generators:
            fmt = generator.format.value

            def report(token_id: str, output: OutputSpec, fmt: str = fmt) -> None:
                registry.register_output(token_id, fmt, output)

            generator.generate(
                GeneratorContext(
                    tokens=records,
                    theme_values=theme_values,
                    themes=tuple(themes),
                    default_theme=config.default_theme,
                    emit=emit,
                    report=report,
                )
            )
        logger.info(f"Outputs cover {registry.tokens_with_outputs}/{len(registry)} tokens")

        # Document
        docs = config.docs
        if docs.enabled:
            exporter = DocumentationExporter(
                layout=docs.layout,
                include_stats=docs.include_stats,
                include_transformations=docs.include_transformations,
            )
            emit(docs.registry_filename, dump_json(exporter.export_registry(registry)))
            emit(docs.reference_filename, dump_json(exporter.export_reference(registry)))

        result = BuildResult(
            registry=registry,
            files=files,
            themes=themes,
            overrides={theme: diff.count for theme, diff in diffs.items()},
        )

        if write:
            write_outputs(config.output_dir, files)
            result.output_dir = config.output_dir

        logger.info(SuccessMessages.BUILD_COMPLETE.format(tokens=len(registry), files=len(files)))
        return result

    def _themes(self, manifest: ThemeManifest | None) -> list[str]:
        """Themes to build, default first."""
        if manifest and manifest.theme_ids:
            themes = list(manifest.theme_ids)
        else:
            themes = list(self.config.themes)
        if self.config.default_theme in themes:
            themes.remove(self.config.default_theme)
        return [self.config.default_theme, *themes]

    def _load_theme(self, loader: SourceLoader, theme: str) -> dict[str, TokenDefinition]:
        return self.parser.parse(loader.load(theme))

    def _classify_theme_only(
        self,
        definitions: dict[str, dict[str, TokenDefinition]],
        classifications: dict[str, TypeClassification],
    ) -> dict[str, TokenDefinition]:
        """Classify tokens that only exist in a theme. The first theme to define one wins."""
        base = definitions[self.config.default_theme]
        theme_only: dict[str, TokenDefinition] = {}

        for theme, defs in definitions.items():
            if theme == self.config.default_theme:
                continue
            inferencer = TypeInferencer(defs)
            for token_id, definition in defs.items():
                if token_id in base or token_id in theme_only:
                    continue
                theme_only[token_id] = definition.model_copy(update={"mode": theme})
                classifications[token_id] = inferencer.classify(token_id, definition)

        return theme_only

    def _register_themes(
        self,
        registry: OutputRegistry,
        definitions: dict[str, dict[str, TokenDefinition]],
        classifications: dict[str, TypeClassification],
        diffs: dict[str, ThemeDiff],
    ) -> None:
        for theme, defs in definitions.items():
            for token_id, value in _expanded_values(defs, classifications).items():
                if token_id in registry:
                    registry.register_theme_variant(token_id, theme, value)

        for theme, diff in diffs.items():
            for token_id, value in diff.overrides.items():
                registry.register_override(token_id, theme, value)


def _expanded_values(
    definitions: dict[str, TokenDefinition],
    classifications: dict[str, TypeClassification],
) -> dict[str, Any]:
    """Token id -> resolved value, with composite children split out."""
    values: dict[str, Any] = {}
    for token_id, definition in definitions.items():
        values[token_id] = definition.value
        classification = classifications.get(token_id)
        if classification and classification.composite:
            values.update(child_values(token_id, definition.value))
    return values


def write_outputs(output_dir: Path, files: dict[str, str]) -> None:
    """
    Write artifacts atomically.

    Files go to a sibling staging directory first. The old output is
    swapped out only after every file is on disk; on failure the staging
    directory is removed and the old output stays as it was.
    """
    output_dir.parent.mkdir(parents=True, exist_ok=True)
    staging = Path(tempfile.mkdtemp(prefix=f".{output_dir.name}-staging-", dir=output_dir.parent))

    try:
        for relative, contents in sorted(files.items()):
            path = staging / relative
            path.parent.mkdir(parents=True, exist_ok=True)
            path.write_text(contents, encoding="utf-8")
    except BaseException:
        shutil.rmtree(staging, ignore_errors=True)
        raise

    previous = None
    if output_dir.exists():
        previous = staging.with_name(f"{staging.name}-previous")
        output_dir.rename(previous)
    try:
        staging.rename(output_dir)
    except BaseException:
        if previous is not None:
            previous.rename(output_dir)
        shutil.rmtree(staging, ignore_errors=True)
        raise

    if previous is not None:
        shutil.rmtree(previous, ignore_errors=True)
    logger.info(f"Wrote {len(files)} files to {output_dir}")
