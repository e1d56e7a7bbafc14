"""
Output format generators.

Each generator handles one OutputFormat:
- css - custom-property stylesheets
- typescript - typed token module
- json - flat snapshot
"""

from __future__ import annotations

from chuk_mcp_tokens.config import BuildConfig
from chuk_mcp_tokens.constants import ErrorMessages, OutputFormat
from chuk_mcp_tokens.errors import ConfigError
from chuk_mcp_tokens.generators.base import Generator, GeneratorContext
from chuk_mcp_tokens.generators.css import CSSGenerator
from chuk_mcp_tokens.generators.snapshot import SnapshotGenerator
from chuk_mcp_tokens.generators.typescript import TypeScriptGenerator


def create_generators(config: BuildConfig) -> list[Generator]:
    """
    Instantiate the generators a config asks for, in config order.

    Raises:
        ConfigError: If a format has no generator
    """
    generators: list[Generator] = []
    for fmt in config.formats:
        if fmt == OutputFormat.CSS:
            generators.append(CSSGenerator())
        elif fmt == OutputFormat.TYPESCRIPT:
            generators.append(TypeScriptGenerator(config.typescript_filename))
        elif fmt == OutputFormat.JSON:
            generators.append(SnapshotGenerator(config.snapshot_filename))
        else:
            raise ConfigError(ErrorMessages.UNKNOWN_FORMAT.format(format=fmt))
    return generators


__all__ = [
    "CSSGenerator",
    "Generator",
    "GeneratorContext",
    "SnapshotGenerator",
    "TypeScriptGenerator",
    "create_generators",
]
