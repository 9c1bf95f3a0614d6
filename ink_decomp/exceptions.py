"""
Exception hierarchy for the ink decompiler.
"""
from typing import Optional


class InkDecompError(Exception):
    """Base class for all decompilation errors."""


class TokenizerError(InkDecompError, ValueError):
    """Raised when a token stream cannot be turned into values."""

    def __init__(self, kind, offset: int = 0, detail: Optional[str] = None):
        self.kind = kind
        self.offset = offset
        message = f"{kind.message} at offset {offset}"
        if detail:
            message += f": {detail}"
        super().__init__(message)


class StoryFormatError(InkDecompError, ValueError):
    """Raised when a decoded document is not ink story data."""


__all__ = ["InkDecompError", "TokenizerError", "StoryFormatError"]
