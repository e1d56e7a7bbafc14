"""
Build session - keeps the registry of the last successful build.
"""

from __future__ import annotations

import logging
from pathlib import Path

from chuk_mcp_tokens.build.pipeline import BuildResult, TokenBuild
from chuk_mcp_tokens.config import BuildConfig, load_config
from chuk_mcp_tokens.constants import ErrorMessages
from chuk_mcp_tokens.errors import ConfigError
from chuk_mcp_tokens.registry.registry import OutputRegistry

logger = logging.getLogger(__name__)


class BuildSession:
    """
    Runs builds and holds on to the latest good one.

    A failed build raises and leaves the previous result in place.
    """

    def __init__(self, config: BuildConfig | None = None, config_path: Path | None = None):
        """
        Initialize the session.

        Args:
            config: Build configuration
            config_path: YAML config to load lazily when `config` is None
        """
        self._config = config
        self.config_path = config_path
        self._result: BuildResult | None = None

    @property
    def config(self) -> BuildConfig:
        """The active config, loading it from config_path on first use."""
        if self._config is None:
            if self.config_path is None:
                raise ConfigError("No build configuration set")
            self._config = load_config(self.config_path)
        return self._config

    @property
    def result(self) -> BuildResult:
        """
        Latest successful build.

        Raises:
            ValueError: If nothing has been built yet
        """
        if self._result is None:
            raise ValueError(ErrorMessages.NO_BUILD)
        return self._result

    @property
    def registry(self) -> OutputRegistry:
        return self.result.registry

    @property
    def has_build(self) -> bool:
        return self._result is not None

    async def build(self, config: BuildConfig | None = None, write: bool = True) -> BuildResult:
        """
        Run a build and keep its result.

        Args:
            config: Replace the session config before building
            write: Write artifacts to the output directory

        Returns:
            BuildResult
        """
        if config is not None:
            self._config = config

        result = await TokenBuild(self.config).run(write=write)
        self._result = result
        return result
