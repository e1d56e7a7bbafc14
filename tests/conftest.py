"""
Pytest configuration and shared fixtures.
"""

import copy
import json
import tempfile
from pathlib import Path
from typing import Any

import pytest
import yaml

from chuk_mcp_tokens.config import BuildConfig

SAMPLE_TREE: dict[str, Any] = {
    "reference/color.json": {
        "ref": {
            "color": {
                "$type": "color",
                "blue": {
                    "300": {"$value": "#3B82F6"},
                    "500": {"$value": "#1E40AF"},
                },
                "gray": {"900": {"$value": "#111827"}},
                "white": {"$value": "#FFFFFF"},
            }
        }
    },
    "reference/font.yaml": {
        "ref": {
            "font": {
                "family": {"sans": {"$value": ["Inter", "system-ui"]}},
                "size": {"xl": {"$value": "24px"}},
                "weight": {"bold": {"$value": 700}},
            }
        }
    },
    "semantic/base/color.json": {
        "sys": {
            "color": {
                "action": {"primary": {"default": {"$value": "{ref.color.blue.500}"}}},
                "surface": {"$value": "{ref.color.white}"},
                "text": {"$value": "{ref.color.gray.900}"},
            }
        }
    },
    "semantic/base/typography.json": {
        "sys": {
            "typography": {
                "heading": {
                    "xl": {
                        "$value": {
                            "fontFamily": "{ref.font.family.sans}",
                            "fontSize": "{ref.font.size.xl}",
                            "fontWeight": "{ref.font.weight.bold}",
                            "lineHeight": "32px",
                        }
                    }
                }
            }
        }
    },
    "semantic/dark/color.json": {
        "sys": {
            "color": {
                "action": {"primary": {"default": {"$value": "{ref.color.blue.300}"}}},
                "surface": {"$value": "{ref.color.gray.900}"},
                "text": {"$value": "{ref.color.white}"},
            }
        }
    },
    "component/button.json": {
        "cmp": {
            "button": {
                "background": {"$value": "{sys.color.action.primary.default}"},
                "label": {"$value": "{sys.color.surface}"},
                "radius": {"$value": "8px"},
            }
        }
    },
}


def write_tree(root: Path, files: dict[str, Any]) -> Path:
    """Write token documents under `root`, as JSON or YAML by suffix."""
    for relative, data in files.items():
        path = root / relative
        path.parent.mkdir(parents=True, exist_ok=True)
        if path.suffix == ".json":
            path.write_text(json.dumps(data, indent=2))
        else:
            path.write_text(yaml.safe_dump(data, sort_keys=False))
    return root


@pytest.fixture
def temp_dir() -> Path:
    """Create a temporary directory for test outputs."""
    with tempfile.TemporaryDirectory() as tmpdir:
        yield Path(tmpdir)


@pytest.fixture
def token_source(temp_dir: Path) -> Path:
    """The sample token tree, written to disk."""
    return write_tree(temp_dir / "tokens", SAMPLE_TREE)


@pytest.fixture
def build_config(temp_dir: Path, token_source: Path) -> BuildConfig:
    """Config building the sample tree into temp_dir/dist."""
    return BuildConfig(source_dir=token_source, output_dir=temp_dir / "dist")


@pytest.fixture
def sample_tree() -> dict[str, Any]:
    """A fresh copy of the sample documents, safe to modify."""
    return copy.deepcopy(SAMPLE_TREE)


@pytest.fixture
def write_tokens():
    """Helper that writes token documents under a root directory."""
    return write_tree
