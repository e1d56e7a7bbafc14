"""
Build configuration.

Configuration is a YAML file loaded into frozen models. Relative paths
resolve against the config file's directory.
"""

from __future__ import annotations

from pathlib import Path
from typing import Any

import yaml
from pydantic import BaseModel, Field, ValidationError

from chuk_mcp_tokens.constants import (
    DEFAULT_OUTPUT_DIR,
    DEFAULT_REFERENCE_DOCS_FILE,
    DEFAULT_REGISTRY_DOCS_FILE,
    DEFAULT_SNAPSHOT_FILE,
    DEFAULT_THEME,
    DEFAULT_THEMES,
    DEFAULT_TYPESCRIPT_FILE,
    MANIFEST_FILENAME,
    DocsLayout,
    OutputFormat,
)
from chuk_mcp_tokens.errors import ConfigError


class DocsConfig(BaseModel):
    """Documentation export settings."""

    enabled: bool = Field(True, description="Write documentation exports")
    registry_filename: str = Field(DEFAULT_REGISTRY_DOCS_FILE)
    reference_filename: str = Field(DEFAULT_REFERENCE_DOCS_FILE)
    layout: DocsLayout = Field("nested", alias="format", description="nested or flat tree")
    include_stats: bool = Field(True)
    include_transformations: bool = Field(False)

    model_config = {"frozen": True, "populate_by_name": True}


class BuildConfig(BaseModel):
    """Everything a build needs to know."""

    source_dir: Path = Field(..., description="Root of the token source tree")
    output_dir: Path = Field(Path(DEFAULT_OUTPUT_DIR), description="Artifact directory")
    default_theme: str = Field(DEFAULT_THEME, description="Theme whose values are the base")
    themes: list[str] = Field(
        default_factory=lambda: list(DEFAULT_THEMES),
        description="Themes to build (the manifest wins when present)",
    )
    manifest_file: str = Field(MANIFEST_FILENAME, description="Themes manifest, in source_dir")
    formats: list[OutputFormat] = Field(
        default_factory=lambda: [OutputFormat.CSS, OutputFormat.TYPESCRIPT, OutputFormat.JSON],
        description="Generators to run",
    )
    typescript_filename: str = Field(DEFAULT_TYPESCRIPT_FILE)
    snapshot_filename: str = Field(DEFAULT_SNAPSHOT_FILE)
    docs: DocsConfig = Field(default_factory=DocsConfig)

    model_config = {"frozen": True}

    @property
    def manifest_path(self) -> Path:
        """Full path of the themes manifest."""
        return self.source_dir / self.manifest_file

    def resolve_paths(self, base: Path) -> BuildConfig:
        """Return a copy with relative paths anchored at `base`."""
        updates: dict[str, Any] = {}
        if not self.source_dir.is_absolute():
            updates["source_dir"] = base / self.source_dir
        if not self.output_dir.is_absolute():
            updates["output_dir"] = base / self.output_dir
        return self.model_copy(update=updates) if updates else self


def load_config(path: Path) -> BuildConfig:
    """
    Load a build configuration from a YAML file.

    Args:
        path: Path to the YAML config

    Returns:
        BuildConfig with paths resolved against the file's directory

    Raises:
        ConfigError: If the file is missing or invalid
    """
    if not path.exists():
        raise ConfigError(f"Config file not found: {path}")

    try:
        with open(path) as f:
            data = yaml.safe_load(f) or {}
    except yaml.YAMLError as e:
        raise ConfigError(f"Invalid YAML in {path}: {e}") from e

    if not isinstance(data, dict):
        raise ConfigError(f"Config {path} must be a mapping")

    try:
        config = BuildConfig.model_validate(data)
    except ValidationError as e:
        raise ConfigError(f"Invalid config {path}: {e}") from e

    return config.resolve_paths(path.parent)
