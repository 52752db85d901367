"""
CodeAtlas Catalog Package.

Declaration catalog and cross-reference engine: catalog building,
heuristic and precise reference tracking, polymorphic cross-linking.
Requires Python 3.11+.
"""

from catalog.builder import CatalogBuilder
from catalog.candidates import make_name_predicate
from catalog.crosslinker import (
    CrossLinkDiagnostic,
    CrossLinkReport,
    PolymorphicCrossLinker,
    implementation_map,
    reset_polymorphic_references,
)
from catalog.errors import CatalogError, DuplicateSymbolError, ProjectRootError
from catalog.function_tracker import FunctionReferenceTracker
from catalog.heuristic_scanner import HeuristicReferenceScanner
from catalog.instrumentation import PhaseMetrics, ScanMetrics
from catalog.kinds import CatalogableKind, default_kinds
from catalog.member_tracker import MemberReferenceTracker
from catalog.models import (
    Catalog,
    CodeLocation,
    MemberSymbol,
    Reference,
    ReferenceContext,
    Symbol,
    SymbolKind,
    generate_symbol_id,
)
from catalog.pipeline import ProjectScanner, ScanResult, scan_project
from catalog.projection import CatalogProjection, project_catalog

__all__ = [
    # Enums
    "SymbolKind",
    "ReferenceContext",
    # Data classes
    "CodeLocation",
    "Reference",
    "MemberSymbol",
    "Symbol",
    "Catalog",
    "generate_symbol_id",
    # Errors
    "CatalogError",
    "DuplicateSymbolError",
    "ProjectRootError",
    # Phases
    "make_name_predicate",
    "CatalogableKind",
    "default_kinds",
    "CatalogBuilder",
    "HeuristicReferenceScanner",
    "MemberReferenceTracker",
    "FunctionReferenceTracker",
    "PolymorphicCrossLinker",
    "CrossLinkReport",
    "CrossLinkDiagnostic",
    "implementation_map",
    "reset_polymorphic_references",
    "PhaseMetrics",
    "ScanMetrics",
    "CatalogProjection",
    "project_catalog",
    # Pipeline
    "ProjectScanner",
    "ScanResult",
    "scan_project",
]
