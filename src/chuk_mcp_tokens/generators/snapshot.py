"""
Snapshot generator - flat id -> value map plus theme overrides.
"""

from __future__ import annotations

import logging
from typing import Any

from chuk_mcp_tokens.constants import DEFAULT_SNAPSHOT_FILE, OutputFormat
from chuk_mcp_tokens.generators.base import GeneratorContext
from chuk_mcp_tokens.models.token import OutputSpec
from chuk_mcp_tokens.utils import dump_json

logger = logging.getLogger(__name__)


class SnapshotGenerator:
    """Writes `{tokens: {id: value}, themes: {theme: {id: value}}}`."""

    format = OutputFormat.JSON

    def __init__(self, filename: str = DEFAULT_SNAPSHOT_FILE):
        self.filename = filename

    def generate(self, context: GeneratorContext) -> None:
        tokens: dict[str, Any] = {}
        for token in context.base_tokens():
            if token.parent:
                continue
            tokens[token.id] = token.value
            context.report(
                token.id,
                OutputSpec(
                    name=token.id,
                    value=token.value,
                    usage=token.id,
                    metadata={"file": self.filename},
                ),
            )

        themes = {
            theme: {
                token.id: token.overrides[theme].value
                for token in context.overridden(theme)
                if not token.parent
            }
            for theme in context.themes
        }

        context.emit(self.filename, dump_json({"tokens": tokens, "themes": themes}))
        logger.info(f"Snapshot: {len(tokens)} tokens in {self.filename}")
