"""
Shared helpers.
"""

from __future__ import annotations

import json
from typing import Any


def dump_json(data: Any) -> str:
    """Serialize for artifacts: 2-space indent, UTF-8 kept, trailing newline."""
    return json.dumps(data, indent=2, ensure_ascii=False) + "\n"
