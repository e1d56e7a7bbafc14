"""
Source loader - discovers and merges layered token documents.

Documents come from tier folders under the source directory:
1. reference/       (base primitives)
2. semantic/base/   (semantic aliases)
3. component/       (component values)
4. semantic/<theme>/ (theme overrides, non-default themes only)

Later documents win. Nested objects merge key-by-key.
"""

from __future__ import annotations

import copy
import json
import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

import yaml

from chuk_mcp_tokens.constants import (
    COMPONENT_DIR,
    DEFAULT_MODE,
    DEFAULT_THEME,
    DOCUMENT_SUFFIXES,
    MANIFEST_FILENAME,
    REFERENCE_DIR,
    SEMANTIC_BASE_DIR,
    SEMANTIC_THEME_DIR,
    TokenTier,
)
from chuk_mcp_tokens.errors import SourceDocumentError
from chuk_mcp_tokens.models.theme import ThemeManifest
from chuk_mcp_tokens.models.token import TokenSource

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class SourceFile:
    """A discovered token document."""

    path: Path
    relative: str  # POSIX path relative to the source dir
    tier: TokenTier
    theme: str  # 'default' for base files

    @property
    def set_name(self) -> str:
        """Token set name as used by the manifest (path without suffix)."""
        return self.relative.rsplit(".", 1)[0]


@dataclass
class MergedDocument:
    """One theme's merged token tree plus provenance."""

    theme: str
    tree: dict[str, Any] = field(default_factory=dict)
    sources: dict[str, list[TokenSource]] = field(default_factory=dict)
    files: list[SourceFile] = field(default_factory=list)

    def winning_source(self, token_id: str) -> TokenSource | None:
        """The last document that defined a token."""
        sources = self.sources.get(token_id)
        return sources[-1] if sources else None


def deep_merge(target: dict[str, Any], source: dict[str, Any]) -> dict[str, Any]:
    """
    Right-biased deep merge of `source` into `target`.

    Scalars and arrays from `source` replace; mappings merge per key.

    Returns:
        The mutated target
    """
    for key, value in source.items():
        if isinstance(value, dict):
            existing = target.get(key)
            if not isinstance(existing, dict):
                existing = {}
                target[key] = existing
            deep_merge(existing, value)
        else:
            target[key] = copy.deepcopy(value)
    return target


def read_document(path: Path) -> dict[str, Any]:
    """
    Read a JSON or YAML token document.

    Raises:
        SourceDocumentError: If the file can't be read or isn't a mapping
    """
    try:
        text = path.read_text(encoding="utf-8")
        if path.suffix == ".json":
            data = json.loads(text)
        else:
            data = yaml.safe_load(text)
    except (OSError, UnicodeDecodeError, json.JSONDecodeError, yaml.YAMLError) as e:
        raise SourceDocumentError(path, str(e)) from e

    if data is None:
        return {}
    if not isinstance(data, dict):
        raise SourceDocumentError(path, f"top level must be a mapping, got {type(data).__name__}")
    return data


class SourceLoader:
    """
    Discovers and merges token documents for a theme.

    File discovery is lexicographic within each layer, so repeated
    loads of an unchanged tree produce identical merges.
    """

    def __init__(
        self,
        source_dir: Path,
        default_theme: str = DEFAULT_THEME,
        manifest: ThemeManifest | None = None,
        manifest_filename: str = MANIFEST_FILENAME,
    ):
        """
        Initialize the loader.

        Args:
            source_dir: Root of the token source tree
            default_theme: Theme that uses base documents only
            manifest: Optional themes manifest for token-set filtering
            manifest_filename: Manifest file name, skipped during discovery
        """
        self.source_dir = source_dir
        self.default_theme = default_theme
        self.manifest = manifest
        self.manifest_filename = manifest_filename

    def layers(self, theme: str) -> list[tuple[TokenTier, str, str]]:
        """
        Layer folders for a theme, in merge order.

        Returns:
            List of (tier, relative folder, source theme)
        """
        result = [
            (TokenTier.REFERENCE, REFERENCE_DIR, DEFAULT_MODE),
            (TokenTier.SEMANTIC, SEMANTIC_BASE_DIR, DEFAULT_MODE),
            (TokenTier.COMPONENT, COMPONENT_DIR, DEFAULT_MODE),
        ]
        if theme != self.default_theme:
            result.append((TokenTier.SEMANTIC, SEMANTIC_THEME_DIR.format(theme=theme), theme))
        return result

    def discover(self, theme: str) -> list[SourceFile]:
        """
        List the documents that make up a theme, in merge order.

        Args:
            theme: Theme name

        Returns:
            Source files, lexicographic within each layer
        """
        theme_config = self.manifest.get_theme(theme) if self.manifest else None
        files: list[SourceFile] = []

        for tier, folder, source_theme in self.layers(theme):
            layer_dir = self.source_dir / folder
            if not layer_dir.is_dir():
                continue

            paths = sorted(
                (
                    p
                    for p in layer_dir.rglob("*")
                    if p.is_file()
                    and p.suffix in DOCUMENT_SUFFIXES
                    and p.name != self.manifest_filename
                ),
                key=lambda p: p.relative_to(self.source_dir).as_posix(),
            )

            for path in paths:
                source_file = SourceFile(
                    path=path,
                    relative=path.relative_to(self.source_dir).as_posix(),
                    tier=tier,
                    theme=source_theme,
                )
                if theme_config and not theme_config.is_set_enabled(source_file.set_name):
                    logger.debug(f"Skipping disabled token set {source_file.set_name} for {theme}")
                    continue
                files.append(source_file)

        return files

    def load(self, theme: str) -> MergedDocument:
        """
        Merge every document for a theme into one tree.

        Args:
            theme: Theme name

        Returns:
            MergedDocument with the tree and per-token sources

        Raises:
            SourceDocumentError: If any document is malformed
        """
        merged = MergedDocument(theme=theme)
        merged.files = self.discover(theme)

        for source_file in merged.files:
            document = read_document(source_file.path)
            deep_merge(merged.tree, document)

            source = TokenSource(
                file=source_file.relative,
                tier=source_file.tier,
                theme=source_file.theme,
            )
            for token_id in collect_token_ids(document):
                merged.sources.setdefault(token_id, []).append(source)

        logger.info(f"Merged {len(merged.files)} token files for '{theme}' theme")
        return merged


def collect_token_ids(document: dict[str, Any], prefix: str = "") -> list[str]:
    """Ids of every token node ($value holder) in a document, in document order."""
    ids: list[str] = []
    for key, value in document.items():
        if key.startswith("$") or not isinstance(value, dict):
            continue
        path = f"{prefix}.{key}" if prefix else key
        if "$value" in value:
            ids.append(path)
        else:
            ids.extend(collect_token_ids(value, path))
    return ids
