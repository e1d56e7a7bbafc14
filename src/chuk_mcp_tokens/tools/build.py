"""
Build tools - MCP tools for running builds.

Tools for building tokens and reading aggregate statistics.
"""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import TYPE_CHECKING, Any

from chuk_mcp_tokens.build import BuildSession
from chuk_mcp_tokens.config import load_config
from chuk_mcp_tokens.docs import compute_stats

if TYPE_CHECKING:
    from chuk_mcp_server import ChukMCPServer

logger = logging.getLogger(__name__)


def register_build_tools(
    mcp: ChukMCPServer,
    session: BuildSession,
) -> dict[str, Any]:
    """
    Register build tools with the MCP server.

    Args:
        mcp: The MCP server instance
        session: The build session

    Returns:
        Dictionary of registered tool functions
    """
    tools: dict[str, Any] = {}

    @mcp.tool  # type: ignore[arg-type]
    async def tokens_build(
        config_path: str | None = None,
        write: bool = True,
    ) -> str:
        """
        Build all token artifacts.

        Merges the token sources, builds the registry, and writes CSS,
        TypeScript, the JSON snapshot and documentation exports.

        Args:
            config_path: Optional YAML config to use instead of the session's
            write: Write artifacts to the output directory (default true)

        Returns:
            JSON string with a build summary

        Example:
            tokens_build()
        """
        try:
            config = load_config(Path(config_path)) if config_path else None
            result = await session.build(config=config, write=write)
            summary = result.to_dict()

            return json.dumps(
                {
                    "status": "success",
                    "tokens": summary["tokens"],
                    "themes": summary["themes"],
                    "overrides": summary["overrides"],
                    "files": summary["files"],
                    "output_dir": summary["output_dir"],
                    "coverage": summary["stats"]["coverage"],
                }
            )
        except Exception as e:
            logger.exception("Failed to build tokens")
            return json.dumps({"status": "error", "message": str(e)})

    tools["tokens_build"] = tokens_build

    @mcp.tool  # type: ignore[arg-type]
    async def tokens_stats() -> str:
        """
        Get statistics for the last build.

        Returns token counts by type, format and component, output
        coverage, and reference graph density.

        Returns:
            JSON string with statistics
        """
        try:
            return json.dumps({"status": "success", "stats": compute_stats(session.registry)})
        except Exception as e:
            logger.exception("Failed to get stats")
            return json.dumps({"status": "error", "message": str(e)})

    tools["tokens_stats"] = tokens_stats

    return tools
