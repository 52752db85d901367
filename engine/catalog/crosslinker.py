"""
CodeAtlas Polymorphic Cross-Linker.

Propagates calls made through an interface method onto the matching
method of every local class that implements the interface. Runs once,
after both reference-tracking phases.
Requires Python 3.11+.
"""

from dataclasses import dataclass, field
from typing import Any

from catalog.instrumentation import ScanMetrics
from catalog.models import Catalog, MemberSymbol, Reference, ReferenceContext, Symbol, SymbolKind
from source_model.models import MemberKind
from utils.logger import LoggerMixin


@dataclass(slots=True)
class CrossLinkDiagnostic:
    """An implementing class that lacks the interface method being propagated."""

    interface: str
    implementation: str
    method: str
    path: str | None = None

    @property
    def as_dict(self) -> dict[str, Any]:
        """Convert to dictionary for serialization."""
        return {
            "interface": self.interface,
            "implementation": self.implementation,
            "method": self.method,
            "path": self.path,
        }


@dataclass(slots=True)
class CrossLinkReport:
    """Outcome of one cross-link run."""

    links: int = 0
    references_added: int = 0
    diagnostics: list[CrossLinkDiagnostic] = field(default_factory=list)
    skipped: bool = False

    @property
    def as_dict(self) -> dict[str, Any]:
        """Convert to dictionary for serialization."""
        return {
            "links": self.links,
            "references_added": self.references_added,
            "diagnostics": [d.as_dict for d in self.diagnostics],
            "skipped": self.skipped,
        }


def implementation_map(catalog: Catalog) -> dict[str, list[Symbol]]:
    """Interface name -> local classes whose implements list names it exactly."""
    links: dict[str, list[Symbol]] = {}
    for cls in catalog.local_symbols(SymbolKind.CLASS):
        for interface_name in cls.implements:
            links.setdefault(interface_name, []).append(cls)
    return links


def reset_polymorphic_references(catalog: Catalog) -> int:
    """
    Remove propagated references so cross-linking can run again.

    Returns:
        Number of references removed
    """
    removed = 0
    for cls in catalog.local_symbols(SymbolKind.CLASS):
        for member in cls.members:
            kept = [r for r in member.references if r.context != ReferenceContext.POLYMORPHIC_CALL]
            removed += len(member.references) - len(kept)
            member.references = kept
    catalog.crosslinked = False
    return removed


class PolymorphicCrossLinker(LoggerMixin):
    """
    Interface-to-implementation reference propagation.

    A catalog is linked at most once: a second call on an already
    linked catalog is a no-op that logs a warning. Call
    reset_polymorphic_references() first to link again.
    """

    def crosslink(self, catalog: Catalog, metrics: ScanMetrics | None = None) -> CrossLinkReport:
        """Append polymorphic_call copies of interface method references (mutates catalog)."""
        if catalog.crosslinked:
            self.log.warning("crosslink_already_applied", symbols=len(catalog))
            return CrossLinkReport(skipped=True)

        metrics = metrics if metrics is not None else ScanMetrics()
        report = CrossLinkReport()

        with metrics.phase("crosslink") as phase:
            # Step 1: interface methods that are actually used
            used: list[tuple[Symbol, MemberSymbol, list[Reference]]] = []
            for interface in catalog.local_symbols(SymbolKind.INTERFACE):
                for method in interface.members_of_kind(MemberKind.METHOD):
                    if method.references:
                        used.append((interface, method, list(method.references)))

            # Step 2: interface name -> implementing classes
            implementations = implementation_map(catalog)

            # Step 3: propagate
            for interface, method, references in used:
                for cls in implementations.get(interface.name, []):
                    target = cls.find_member(method.name, MemberKind.METHOD)
                    if target is None:
                        report.diagnostics.append(
                            CrossLinkDiagnostic(
                                interface=interface.name,
                                implementation=cls.name,
                                method=method.name,
                                path=cls.location.file if cls.location else None,
                            )
                        )
                        self.log.warning(
                            "crosslink_missing_method",
                            interface=interface.name,
                            implementation=cls.name,
                            method=method.name,
                            path=cls.location.file if cls.location else None,
                        )
                        continue

                    target.references.extend(
                        r.with_context(ReferenceContext.POLYMORPHIC_CALL) for r in references
                    )
                    report.links += 1
                    report.references_added += len(references)

            phase.count("links", report.links)
            phase.count("references_added", report.references_added)
            phase.count("diagnostics", len(report.diagnostics))

        catalog.crosslinked = True
        self.log.info(
            "crosslink_complete",
            links=report.links,
            references_added=report.references_added,
            diagnostics=len(report.diagnostics),
        )
        return report
