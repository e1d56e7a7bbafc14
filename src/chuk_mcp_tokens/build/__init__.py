"""
Build orchestration.
"""

from chuk_mcp_tokens.build.pipeline import BuildResult, TokenBuild, write_outputs
from chuk_mcp_tokens.build.session import BuildSession

__all__ = ["BuildResult", "BuildSession", "TokenBuild", "write_outputs"]
