"""
CodeAtlas Heuristic Reference Scanner.

Single pass over the identifier tokens of each file, matching
capitalized names against the catalog for the kinds whose naming
conventions make text matching safe.
Requires Python 3.11+.
"""

from catalog.contexts import classify_declaration_usage
from catalog.instrumentation import ScanMetrics
from catalog.kinds import CatalogableKind, default_kinds
from catalog.models import Catalog, CodeLocation, Reference, Symbol
from source_model.errors import SourceParseError
from source_model.models import IdentifierToken, SyntaxKind
from source_model.typescript_model import TypeScriptSourceModel
from utils.logger import LoggerMixin


class HeuristicReferenceScanner(LoggerMixin):
    """
    Name-based reference scanner for classes, interfaces, enums and
    type aliases.

    Each candidate token is looked up once per heuristic kind with the
    catalog's local-preferred lookup. Declaration names and import or
    export specifiers are never recorded as references.
    """

    def __init__(
        self,
        model: TypeScriptSourceModel,
        kinds: tuple[CatalogableKind, ...] | None = None,
    ) -> None:
        self._model = model
        self._kinds = tuple(k for k in (kinds or default_kinds()) if k.heuristic)

    def scan(
        self, files: list[str], catalog: Catalog, metrics: ScanMetrics | None = None
    ) -> None:
        """Append references to the catalog's symbols (mutates catalog)."""
        metrics = metrics if metrics is not None else ScanMetrics()
        touched: dict[str, Symbol] = {}

        with metrics.phase("heuristic_scan") as phase:
            for file in files:
                try:
                    tokens = self._model.get_identifiers(file)
                except SourceParseError as e:
                    self.log.warning("file_skipped", path=e.path, error=e.reason)
                    phase.count("files_skipped")
                    continue

                for token in tokens:
                    for symbol in self._match(token, catalog):
                        symbol.references.append(self._reference(token))
                        touched[symbol.id] = symbol
                        phase.count("references")

            for symbol in touched.values():
                symbol.references.sort(key=lambda r: r.sort_key)

        self.log.info(
            "heuristic_scan_complete",
            files=len(files),
            symbols_referenced=len(touched),
        )

    def _match(self, token: IdentifierToken, catalog: Catalog) -> list[Symbol]:
        if token.is_declaration or token.syntax == SyntaxKind.MODULE_BINDING:
            return []

        matches = []
        for kind in self._kinds:
            if not kind.is_candidate(token.name):
                continue
            symbol = catalog.lookup(token.name, kind.kind)
            if symbol is None:
                continue
            if symbol.location is not None and symbol.location.key == (
                token.location.file,
                token.location.line,
                token.location.column,
            ):
                continue
            matches.append(symbol)
        return matches

    def _reference(self, token: IdentifierToken) -> Reference:
        return Reference(
            location=CodeLocation.from_source(token.location, with_end=False),
            context=classify_declaration_usage(token),
            context_line=token.context_line,
        )
