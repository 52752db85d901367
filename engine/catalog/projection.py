"""
CodeAtlas Catalog Projection.

Read-only view of a finished catalog for output consumers: one list of
plain dictionaries per analysis kind, plus a summary.
Requires Python 3.11+.
"""

from typing import Any

from catalog.models import Catalog, SymbolKind

SECTIONS: dict[str, SymbolKind] = {
    "classes": SymbolKind.CLASS,
    "functions": SymbolKind.FUNCTION,
    "interfaces": SymbolKind.INTERFACE,
    "enums": SymbolKind.ENUM,
    "types": SymbolKind.TYPE_ALIAS,
}


class CatalogProjection:
    """Builds the consumer-facing structure of a catalog without mutating it."""

    def __init__(self, catalog: Catalog):
        self.catalog = catalog

    def build(self) -> dict[str, Any]:
        """Project every section and the summary."""
        result: dict[str, Any] = {
            section: self.section(kind) for section, kind in SECTIONS.items()
        }
        result["summary"] = self.summary()
        return result

    def section(self, kind: SymbolKind) -> list[dict[str, Any]]:
        """Symbols of one kind: locals first, then import stubs, each sorted by id."""
        symbols = self.catalog.symbols_of_kind(kind)
        ordered = [s for s in symbols if s.is_local] + [s for s in symbols if not s.is_local]
        return [s.as_dict for s in ordered]

    def summary(self) -> dict[str, Any]:
        counts = {
            section: len(self.catalog.symbols_of_kind(kind)) for section, kind in SECTIONS.items()
        }
        total_references = sum(s.reference_count for s in self.catalog.symbols.values())
        member_references = sum(
            m.reference_count for s in self.catalog.symbols.values() for m in s.members
        )
        return {
            "files": len(self.catalog.files),
            "skipped_files": list(self.catalog.skipped_files),
            "symbols": counts,
            "references": total_references,
            "member_references": member_references,
            "crosslinked": self.catalog.crosslinked,
        }


def project_catalog(catalog: Catalog) -> dict[str, Any]:
    """Project a finished catalog into per-kind lists of plain dictionaries."""
    return CatalogProjection(catalog).build()
