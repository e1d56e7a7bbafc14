"""
Query tools - MCP tools for inspecting the token registry.

Tools for looking up tokens, references, impact and theme overrides
from the last successful build.
"""

from __future__ import annotations

import json
import logging
from typing import TYPE_CHECKING, Any

from chuk_mcp_tokens.build import BuildSession
from chuk_mcp_tokens.constants import ErrorMessages

if TYPE_CHECKING:
    from chuk_mcp_server import ChukMCPServer

logger = logging.getLogger(__name__)


def register_query_tools(
    mcp: ChukMCPServer,
    session: BuildSession,
) -> dict[str, Any]:
    """
    Register registry query tools with the MCP server.

    Args:
        mcp: The MCP server instance
        session: The build session

    Returns:
        Dictionary of registered tool functions
    """
    tools: dict[str, Any] = {}

    def not_found(token_id: str) -> str:
        return json.dumps(
            {"status": "error", "message": ErrorMessages.TOKEN_NOT_FOUND.format(token_id=token_id)}
        )

    @mcp.tool  # type: ignore[arg-type]
    async def tokens_get_token(token_id: str) -> str:
        """
        Get the full record for a token.

        Includes type, resolved and original value, references, theme
        overrides and every output generated from it.

        Args:
            token_id: Token id (e.g., 'sys.color.action.primary.default')

        Returns:
            JSON string with the token record

        Example:
            tokens_get_token(token_id="ref.color.blue.500")
        """
        try:
            record = session.registry.get_token(token_id)
            if record is None:
                return not_found(token_id)
            return json.dumps({"status": "success", "token": record.to_dict()})
        except Exception as e:
            logger.exception("Failed to get token")
            return json.dumps({"status": "error", "message": str(e)})

    tools["tokens_get_token"] = tokens_get_token

    @mcp.tool  # type: ignore[arg-type]
    async def tokens_list(
        type: str | None = None,
        format: str | None = None,
        component: str | None = None,
    ) -> str:
        """
        List token ids, optionally filtered.

        Filters combine: a token must match every filter given.

        Args:
            type: Token type (e.g., 'color', 'dimension', 'typography')
            format: Output format the token was generated into ('css', 'typescript', 'json')
            component: Component name for cmp.* tokens (e.g., 'button')

        Returns:
            JSON string with matching ids

        Example:
            tokens_list(type="color")
        """
        try:
            registry = session.registry
            ids = registry.get_all_ids()

            if type:
                by_type = set(registry.get_tokens_by_type(type))
                ids = [i for i in ids if i in by_type]
            if format:
                by_format = set(registry.get_tokens_by_format(format))
                ids = [i for i in ids if i in by_format]
            if component:
                by_component = set(registry.get_tokens_by_component(component))
                ids = [i for i in ids if i in by_component]

            return json.dumps({"status": "success", "tokens": ids, "count": len(ids)})
        except Exception as e:
            logger.exception("Failed to list tokens")
            return json.dumps({"status": "error", "message": str(e)})

    tools["tokens_list"] = tokens_list

    @mcp.tool  # type: ignore[arg-type]
    async def tokens_references(token_id: str) -> str:
        """
        Get a token's references in both directions.

        Args:
            token_id: Token id

        Returns:
            JSON string with outgoing edges (with the property each came
            from) and the ids that reference this token
        """
        try:
            registry = session.registry
            if token_id not in registry:
                return not_found(token_id)

            return json.dumps(
                {
                    "status": "success",
                    "token_id": token_id,
                    "references": registry.get_references(token_id),
                    "edges": [e.to_dict() for e in registry.get_reference_edges(token_id)],
                    "referenced_by": registry.get_referenced_by(token_id),
                }
            )
        except Exception as e:
            logger.exception("Failed to get references")
            return json.dumps({"status": "error", "message": str(e)})

    tools["tokens_references"] = tokens_references

    @mcp.tool  # type: ignore[arg-type]
    async def tokens_impact(token_id: str) -> str:
        """
        Find every token affected by changing one token.

        Follows reverse references transitively.

        Args:
            token_id: Token id

        Returns:
            JSON string with affected ids

        Example:
            tokens_impact(token_id="ref.color.blue.500")
        """
        try:
            registry = session.registry
            if token_id not in registry:
                return not_found(token_id)

            impact = registry.get_impact(token_id)
            return json.dumps(
                {
                    "status": "success",
                    "token_id": token_id,
                    "affected": impact,
                    "count": len(impact),
                }
            )
        except Exception as e:
            logger.exception("Failed to analyze impact")
            return json.dumps({"status": "error", "message": str(e)})

    tools["tokens_impact"] = tokens_impact

    @mcp.tool  # type: ignore[arg-type]
    async def tokens_theme_overrides(theme: str) -> str:
        """
        List the tokens a theme overrides.

        Only values that differ from the base are listed.

        Args:
            theme: Theme name (e.g., 'dark')

        Returns:
            JSON string mapping token id to the theme's value
        """
        try:
            overrides = session.registry.get_theme_overrides(theme)
            return json.dumps(
                {
                    "status": "success",
                    "theme": theme,
                    "overrides": overrides,
                    "count": len(overrides),
                }
            )
        except Exception as e:
            logger.exception("Failed to get theme overrides")
            return json.dumps({"status": "error", "message": str(e)})

    tools["tokens_theme_overrides"] = tokens_theme_overrides

    return tools
