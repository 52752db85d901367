"""
CodeAtlas Source Model Errors.

Requires Python 3.11+.
"""


class SourceModelError(Exception):
    """Base class for source model failures."""


class SourceParseError(SourceModelError):
    """A file could not be read or parsed into a usable tree."""

    def __init__(self, path: str, reason: str) -> None:
        super().__init__(f"{path}: {reason}")
        self.path = path
        self.reason = reason


class UnsupportedHandleError(SourceModelError):
    """Exact resolution was requested for a declaration kind it does not cover."""
