"""
CodeAtlas Catalog Builder.

First phase of a scan: registers every local declaration and a stub for
every externally imported name that could denote a catalogable kind.
Requires Python 3.11+.
"""

from catalog.instrumentation import PhaseMetrics, ScanMetrics
from catalog.kinds import CatalogableKind, default_kinds
from catalog.models import Catalog, Symbol, SymbolKind
from source_model.errors import SourceParseError
from source_model.models import DeclarationInfo, ImportInfo
from source_model.typescript_model import TypeScriptSourceModel
from utils.logger import LoggerMixin


class CatalogBuilder(LoggerMixin):
    """
    Builds a Catalog from the files of a source model.

    A file the source model cannot parse is skipped with a warning; the
    returned catalog reflects every file that succeeded.
    """

    def __init__(
        self,
        model: TypeScriptSourceModel,
        kinds: tuple[CatalogableKind, ...] | None = None,
    ) -> None:
        self._model = model
        self._kinds = kinds or default_kinds()

    def build(self, files: list[str], metrics: ScanMetrics | None = None) -> Catalog:
        """
        Build the symbol registry and name index.

        Args:
            files: Project-relative file keys, in scan order
            metrics: Instrumentation context to record into

        Returns:
            Catalog with files (parsed) and skipped_files populated
        """
        catalog = Catalog()
        metrics = metrics if metrics is not None else ScanMetrics()

        with metrics.phase("catalog_build") as phase:
            for file in files:
                try:
                    declarations = self._model.get_declarations(file)
                    imports = self._model.get_imports(file)
                except SourceParseError as e:
                    self.log.warning("file_skipped", path=e.path, error=e.reason)
                    catalog.skipped_files.append(e.path)
                    phase.count("files_skipped")
                    continue

                catalog.files.append(file)
                self._catalog_file(catalog, declarations, imports, phase)

            phase.count("files", len(catalog.files))
            phase.count("symbols", len(catalog))

        self.log.info(
            "catalog_built",
            symbols=len(catalog),
            files=len(catalog.files),
            skipped=len(catalog.skipped_files),
        )
        return catalog

    def _catalog_file(
        self,
        catalog: Catalog,
        declarations: list[DeclarationInfo],
        imports: list[ImportInfo],
        phase: PhaseMetrics,
    ) -> None:
        for kind in self._kinds:
            for decl in kind.extract(declarations):
                self._add_local(catalog, kind, decl, phase)

            if not kind.stub_imports:
                continue
            for imp in imports:
                if not imp.is_external or imp.is_namespace:
                    continue
                if not kind.is_candidate(imp.local_name):
                    continue
                if kind.stub_id(imp.local_name, imp.module) in catalog:
                    continue
                catalog.add(kind.make_stub(imp.local_name, imp.module))
                phase.count("stubs")

    def _add_local(
        self,
        catalog: Catalog,
        kind: CatalogableKind,
        decl: DeclarationInfo,
        phase: PhaseMetrics,
    ) -> None:
        symbol = kind.make_symbol(decl)
        existing = catalog.get(symbol.id)
        if existing is None:
            catalog.add(symbol)
            phase.count("local_symbols")
            return

        if kind.kind == SymbolKind.INTERFACE:
            self._merge_interface(existing, symbol)
            phase.count("merged_interfaces")
            return

        self.log.warning(
            "duplicate_symbol",
            symbol_id=symbol.id,
            path=decl.location.file,
            line=decl.location.line,
        )
        phase.count("duplicates")

    def _merge_interface(self, existing: Symbol, addition: Symbol) -> None:
        """Apply TypeScript declaration merging to a re-declared interface."""
        known = {(m.name, m.kind) for m in existing.members}
        for member in addition.members:
            if (member.name, member.kind) in known:
                continue
            member.owner_id = existing.id
            existing.members.append(member)
            known.add((member.name, member.kind))
        for parent in addition.extends:
            if parent not in existing.extends:
                existing.extends.append(parent)
        existing.is_exported = existing.is_exported or addition.is_exported
        self.log.debug("interface_merged", symbol_id=existing.id, line=addition.location.line)
