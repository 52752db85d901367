"""
CodeAtlas Catalog Errors.

Per-file and per-symbol failures are absorbed by the phases that hit
them; only ProjectRootError escapes a scan.
Requires Python 3.11+.
"""

from pathlib import Path


class CatalogError(Exception):
    """Base class for catalog engine failures."""


class ProjectRootError(CatalogError):
    """The project root is missing or not a directory."""

    def __init__(self, root: Path, reason: str) -> None:
        super().__init__(f"{root}: {reason}")
        self.root = root
        self.reason = reason


class DuplicateSymbolError(CatalogError):
    """A symbol id was registered twice."""

    def __init__(self, symbol_id: str) -> None:
        super().__init__(f"duplicate symbol id: {symbol_id}")
        self.symbol_id = symbol_id
