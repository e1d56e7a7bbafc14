"""
Themes manifest loading.
"""

from __future__ import annotations

import json
import logging
from pathlib import Path

from pydantic import ValidationError

from chuk_mcp_tokens.errors import SourceDocumentError
from chuk_mcp_tokens.models.theme import ThemeManifest

logger = logging.getLogger(__name__)


def load_manifest(path: Path) -> ThemeManifest | None:
    """
    Load the themes manifest if the source tree has one.

    Args:
        path: Path to $themes.json

    Returns:
        ThemeManifest, or None if the file doesn't exist

    Raises:
        SourceDocumentError: If the manifest is malformed
    """
    if not path.exists():
        return None

    try:
        data = json.loads(path.read_text(encoding="utf-8"))
        manifest = ThemeManifest.from_data(data)
    except (OSError, json.JSONDecodeError) as e:
        raise SourceDocumentError(path, str(e)) from e
    except ValidationError as e:
        raise SourceDocumentError(path, str(e)) from e

    logger.info(f"Loaded themes manifest: {', '.join(manifest.theme_ids) or '(empty)'}")
    return manifest
