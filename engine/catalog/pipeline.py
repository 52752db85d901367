"""
CodeAtlas Scan Pipeline.

Runs a complete, stateless scan of one project:
- Discovery: find source files under the project root
- Catalog build: register declarations and import stubs
- Reference tracking: heuristic scan, member tracking, function tracking
- Cross-link: propagate interface method usage to implementations

Requires Python 3.11+.
"""

from dataclasses import dataclass
from datetime import datetime, timezone
from pathlib import Path
from typing import Any

from catalog.builder import CatalogBuilder
from catalog.crosslinker import CrossLinkReport, PolymorphicCrossLinker
from catalog.errors import ProjectRootError
from catalog.function_tracker import FunctionReferenceTracker
from catalog.heuristic_scanner import HeuristicReferenceScanner
from catalog.instrumentation import ScanMetrics
from catalog.kinds import default_kinds
from catalog.member_tracker import MemberReferenceTracker
from catalog.models import Catalog
from catalog.projection import project_catalog
from source_model.typescript_model import TypeScriptSourceModel
from utils.config import Settings, get_settings
from utils.logger import LoggerMixin


@dataclass(slots=True)
class ScanResult:
    """Everything one scan produced."""

    root: Path
    catalog: Catalog
    metrics: ScanMetrics
    crosslink: CrossLinkReport
    scanned_at: str

    @property
    def as_dict(self) -> dict[str, Any]:
        """Convert to dictionary for serialization."""
        return {
            "project_root": str(self.root),
            "scanned_at": self.scanned_at,
            "catalog": project_catalog(self.catalog),
            "crosslink": self.crosslink.as_dict,
            "metrics": self.metrics.as_dict,
        }


class ProjectScanner(LoggerMixin):
    """
    Full-pass scanner for one project root.

    Each scan builds a fresh source model and catalog; nothing carries
    over between scans.
    """

    def __init__(self, root: Path, settings: Settings | None = None) -> None:
        """
        Initialize the scanner.

        Args:
            root: Project root directory
            settings: Settings override (defaults to get_settings())
        """
        self.root = root
        self.settings = settings or get_settings()

    def scan(self) -> ScanResult:
        """
        Execute every phase in order.

        Raises:
            ProjectRootError: The root is missing, not a directory or
                unreadable. Raised before any cataloging begins.
        """
        root = self._check_root()
        files = self._discover_files(root)
        self.log.info("discovered_files", count=len(files), root=str(root))
        if not files:
            self.log.warning("no_source_files_found", root=str(root))

        metrics = ScanMetrics()
        model = TypeScriptSourceModel(root, files, self.settings)
        kinds = default_kinds(self.settings.candidates)

        catalog = CatalogBuilder(model, kinds).build(model.files, metrics)

        # Later phases only see files that parsed
        parsed = list(catalog.files)
        HeuristicReferenceScanner(model, kinds).scan(parsed, catalog, metrics)
        MemberReferenceTracker(model, self.settings.tracker.bucket_by_owner).track(
            parsed, catalog, metrics
        )
        FunctionReferenceTracker(model).track(parsed, catalog, metrics)
        report = PolymorphicCrossLinker().crosslink(catalog, metrics)

        self.log.info(
            "scan_complete",
            root=str(root),
            symbols=len(catalog),
            skipped_files=len(catalog.skipped_files),
            elapsed_ms=round(metrics.total_ms, 2),
        )
        return ScanResult(
            root=root,
            catalog=catalog,
            metrics=metrics,
            crosslink=report,
            scanned_at=datetime.now(timezone.utc).isoformat(),
        )

    def _check_root(self) -> Path:
        root = self.root.resolve()
        if not root.exists():
            raise ProjectRootError(root, "does not exist")
        if not root.is_dir():
            raise ProjectRootError(root, "not a directory")
        try:
            next(root.iterdir(), None)
        except OSError as e:
            raise ProjectRootError(root, f"not readable: {e}") from e
        return root

    def _discover_files(self, root: Path) -> list[Path]:
        """Find all source files with a configured extension."""
        files = set()
        for extension in self.settings.scanner.extensions:
            for file_path in root.rglob(f"*{extension}"):
                if file_path.is_file() and not self._should_ignore(root, file_path):
                    files.add(file_path)
        return sorted(files)

    def _should_ignore(self, root: Path, path: Path) -> bool:
        """Check if a path matches an ignore pattern."""
        path_str = path.relative_to(root).as_posix()
        return any(pattern in path_str for pattern in self.settings.scanner.ignore_patterns)


def scan_project(root: Path | str, settings: Settings | None = None) -> ScanResult:
    """
    Scan a project and return its finished catalog.

    Args:
        root: Project root directory
        settings: Settings override

    Returns:
        ScanResult with the catalog, metrics and cross-link report
    """
    return ProjectScanner(Path(root), settings).scan()
