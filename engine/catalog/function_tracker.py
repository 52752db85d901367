"""
CodeAtlas Function Reference Tracker.

Resolves references to top-level functions through the source model.
Usages in other files are only found for exported functions imported
through a relative module path.
Requires Python 3.11+.
"""

from catalog.contexts import classify_function_usage
from catalog.instrumentation import ScanMetrics
from catalog.models import Catalog, CodeLocation, Reference, SymbolKind
from source_model.typescript_model import TypeScriptSourceModel
from utils.logger import LoggerMixin


class FunctionReferenceTracker(LoggerMixin):
    """Attaches classified usage references to local function symbols."""

    def __init__(self, model: TypeScriptSourceModel) -> None:
        self._model = model

    def track(
        self, files: list[str], catalog: Catalog, metrics: ScanMetrics | None = None
    ) -> None:
        """Set the references of every local function declared in files."""
        metrics = metrics if metrics is not None else ScanMetrics()
        scope = set(files)

        with metrics.phase("function_tracking") as phase:
            for symbol in catalog.local_symbols(SymbolKind.FUNCTION):
                if symbol.handle is None or symbol.location is None:
                    continue
                if symbol.location.file not in scope:
                    continue

                try:
                    sites = self._model.resolve_exact_references(symbol.handle)
                except Exception as e:
                    self.log.warning(
                        "function_skipped",
                        symbol=symbol.name,
                        path=symbol.location.file,
                        error=str(e),
                    )
                    phase.count("functions_skipped")
                    continue

                references: dict[tuple[str, int, int], Reference] = {}
                for site in sites:
                    location = CodeLocation.from_source(site.location, with_end=False)
                    if location.key == symbol.location.key:
                        continue
                    references.setdefault(
                        location.key,
                        Reference(
                            location=location,
                            context=classify_function_usage(site),
                            context_line=site.context_line,
                        ),
                    )
                symbol.references = sorted(references.values(), key=lambda r: r.sort_key)
                phase.count("functions")
                phase.count("references", symbol.reference_count)

        self.log.info("function_tracking_complete", functions=phase.counters.get("functions", 0))
