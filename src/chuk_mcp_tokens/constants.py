"""
Constants and enums for the token system.

No magic strings - use enums and Literal types for constrained values.
"""

import re
from enum import Enum
from typing import Literal


class TokenTier(str, Enum):
    """
    Layering dimension for tokens.

    Each tier maps to a source folder and an id prefix.
    """

    REFERENCE = "reference"  # Primitives (ref.*)
    SEMANTIC = "semantic"  # Aliases (sys.*)
    COMPONENT = "component"  # Component-specific values (cmp.*)

    @property
    def prefix(self) -> str:
        """Id prefix for tokens in this tier."""
        return TIER_PREFIXES[self]

    @classmethod
    def from_token_id(cls, token_id: str) -> "TokenTier | None":
        """Get the tier a token id belongs to, if any."""
        head = token_id.split(".", 1)[0]
        for tier, prefix in TIER_PREFIXES.items():
            if head == prefix:
                return tier
        return None


TIER_PREFIXES: dict[TokenTier, str] = {
    TokenTier.REFERENCE: "ref",
    TokenTier.SEMANTIC: "sys",
    TokenTier.COMPONENT: "cmp",
}


class TokenType(str, Enum):
    """Token types the inferencer can assign."""

    COLOR = "color"
    DIMENSION = "dimension"
    FONT_FAMILY = "fontFamily"
    FONT_WEIGHT = "fontWeight"
    NUMBER = "number"
    STRING = "string"
    TYPOGRAPHY = "typography"
    SHADOW = "shadow"
    BORDER = "border"
    GRADIENT = "gradient"
    TRANSITION = "transition"
    DURATION = "duration"
    CUBIC_BEZIER = "cubicBezier"
    STROKE_STYLE = "strokeStyle"


# Structured values that are rendered whole and never split into children
NON_EXPANDABLE_TYPES: frozenset[str] = frozenset(
    {
        TokenType.COLOR.value,
        TokenType.DIMENSION.value,
        TokenType.SHADOW.value,
        TokenType.BORDER.value,
        TokenType.GRADIENT.value,
        TokenType.TRANSITION.value,
        TokenType.DURATION.value,
        TokenType.CUBIC_BEZIER.value,
        TokenType.STROKE_STYLE.value,
    }
)

# Bare numbers treated as font weights
FONT_WEIGHTS: frozenset[int] = frozenset(range(100, 1000, 100))


class OutputFormat(str, Enum):
    """Artifact-generation targets."""

    CSS = "css"
    TYPESCRIPT = "typescript"
    JSON = "json"


class TokenSetStatus(str, Enum):
    """Status of a token set in the themes manifest."""

    ENABLED = "enabled"
    SOURCE = "source"
    DISABLED = "disabled"


# Token ids: letter-initial, then letters/digits/dot/underscore/hyphen
TOKEN_ID_PATTERN = re.compile(r"^[A-Za-z][A-Za-z0-9._-]*$")

# {token.id} reference delimiters
REFERENCE_PATTERN = re.compile(r"\{([^{}]+)\}")

DEFAULT_THEME = "light"
DEFAULT_THEMES: tuple[str, ...] = ("light", "dark")
DEFAULT_MODE = "default"
MANIFEST_FILENAME = "$themes.json"

# Source layout, in merge order. Theme overrides come last.
REFERENCE_DIR = "reference"
SEMANTIC_BASE_DIR = "semantic/base"
COMPONENT_DIR = "component"
SEMANTIC_THEME_DIR = "semantic/{theme}"
DOCUMENT_SUFFIXES: tuple[str, ...] = (".json", ".yaml", ".yml")

# Output layout
DEFAULT_OUTPUT_DIR = "dist"
CSS_BASE_FILE = "css/base.css"
CSS_COMPONENT_FILE = "css/components/{component}.css"
CSS_THEME_FILE = "css/themes/{theme}.css"
DEFAULT_TYPESCRIPT_FILE = "tokens.ts"
DEFAULT_SNAPSHOT_FILE = "tokens.json"
DEFAULT_REGISTRY_DOCS_FILE = "docs/tokens-registry.json"
DEFAULT_REFERENCE_DOCS_FILE = "docs/tokens-reference.json"

# Schema versions - frozen for v1
SchemaVersion = Literal[
    "tokens-registry/v1",
    "tokens-reference/v1",
    "tokens-snapshot/v1",
]

DocsLayout = Literal["nested", "flat"]

GENERATOR_NAME = "chuk-mcp-tokens"
GENERATED_HEADER = "Do not edit directly, this file was auto-generated."


class ErrorMessages:
    """Standardized error messages."""

    NO_BUILD = "No build found. Run tokens_build first."
    TOKEN_NOT_FOUND = "Token '{token_id}' not found."
    INVALID_TOKEN_ID = (
        "Invalid token id: '{token_id}'. Ids must start with a letter and contain "
        "only letters, digits, '.', '_' or '-'."
    )
    DUPLICATE_TOKEN = "Token '{token_id}' is already registered."
    UNRESOLVED_REFERENCE = "Token '{token_id}' references non-existent token '{target}'."
    MALFORMED_DOCUMENT = "Malformed token document {path}: {reason}"
    UNKNOWN_FORMAT = "Unknown output format: '{format}'."
    RESERVED_TIER = "Token '{token_id}' uses the reserved tier '{tier}'."


class SuccessMessages:
    """Standardized success messages."""

    BUILD_COMPLETE = "Built {tokens} tokens into {files} files."
