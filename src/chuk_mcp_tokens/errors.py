"""
Build errors.

Every error here aborts the build. Soft failures (type inference
fallback, theme-only tokens, cycles) are logged instead.
"""

from __future__ import annotations

from pathlib import Path

from chuk_mcp_tokens.constants import ErrorMessages


class TokenBuildError(ValueError):
    """Base class for fatal build errors."""


class ConfigError(TokenBuildError):
    """Invalid or missing build configuration."""


class SourceDocumentError(TokenBuildError):
    """A token source document could not be read or parsed."""

    def __init__(self, path: Path | str, reason: str):
        self.path = Path(path)
        self.reason = reason
        super().__init__(ErrorMessages.MALFORMED_DOCUMENT.format(path=path, reason=reason))


class UnresolvedReferenceError(TokenBuildError):
    """A token references an id that no document defines."""

    def __init__(self, token_id: str, target: str):
        self.token_id = token_id
        self.target = target
        super().__init__(
            ErrorMessages.UNRESOLVED_REFERENCE.format(token_id=token_id, target=target)
        )


class InvalidTokenIdError(TokenBuildError):
    """A token id violates the identifier grammar."""

    def __init__(self, token_id: str):
        self.token_id = token_id
        super().__init__(ErrorMessages.INVALID_TOKEN_ID.format(token_id=token_id))


class DuplicateTokenError(TokenBuildError):
    """A token id was registered twice."""

    def __init__(self, token_id: str):
        self.token_id = token_id
        super().__init__(ErrorMessages.DUPLICATE_TOKEN.format(token_id=token_id))


class TokenNotFoundError(TokenBuildError):
    """A registration targeted a token that was never registered."""

    def __init__(self, token_id: str):
        self.token_id = token_id
        super().__init__(ErrorMessages.TOKEN_NOT_FOUND.format(token_id=token_id))
