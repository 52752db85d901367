"""
Tests for the Scan Pipeline and Catalog Projection.

Requires Python 3.11+.
"""

from pathlib import Path

import pytest
from structlog.testing import capture_logs

from catalog.errors import ProjectRootError
from catalog.instrumentation import ScanMetrics
from catalog.models import ReferenceContext
from catalog.pipeline import ProjectScanner, ScanResult, scan_project
from catalog.projection import SECTIONS, project_catalog
from utils.config import ScannerSettings, Settings, TrackerSettings

PROJECT = {
    "src/shape.ts": "export interface Shape {\n  draw(): void;\n}\n",
    "src/circle.ts": (
        'import { Shape } from "./shape";\n'
        'import { Component } from "react";\n'
        "\n"
        "export class Circle extends Component implements Shape {\n"
        "  draw(): void {}\n"
        "}\n"
    ),
    "src/render.ts": (
        'import { Shape } from "./shape";\n'
        'import { Circle } from "./circle";\n'
        "\n"
        "export function render(shape: Shape): void {\n"
        "  shape.draw();\n"
        "}\n"
        "\n"
        "render(new Circle());\n"
    ),
    "src/colors.ts": "export enum Color {\n  Red,\n}\nexport type Hex = string;\n",
    "node_modules/lib/index.ts": "export class Vendored {}\n",
    "src/circle.test.ts": "export class CircleTest {}\n",
    "README.md": "# not source\n",
}


@pytest.fixture
def project(make_project) -> Path:
    """A small project with every catalogable kind."""
    return make_project(PROJECT)


@pytest.fixture
def result(project: Path, settings: Settings) -> ScanResult:
    """Scan result of the sample project."""
    return scan_project(project, settings)


class TestProjectScanner:
    """Test cases for the full scan pipeline."""

    def test_discovery(self, result: ScanResult):
        """Test ignored paths and other extensions are not scanned."""
        assert result.catalog.files == [
            "src/circle.ts",
            "src/colors.ts",
            "src/render.ts",
            "src/shape.ts",
        ]

    def test_custom_extensions(self, make_project):
        """Test discovery follows the configured extensions and ignore patterns."""
        root = make_project({"a.ts": "export class A {}\n", "b.mts": "export class B {}\n"})
        settings = Settings(scanner=ScannerSettings(extensions=[".mts"], ignore_patterns=[]))

        result = scan_project(root, settings)

        assert result.catalog.files == ["b.mts"]

    def test_end_to_end(self, result: ScanResult):
        """Test references from every phase end up in one catalog."""
        catalog = result.catalog

        circle = catalog.get("src/circle.ts::class::Circle")
        assert [(r.location.file, r.context) for r in circle.references] == [
            ("src/render.ts", ReferenceContext.INSTANTIATION)
        ]

        render = catalog.get("src/render.ts::function::render::4")
        assert [(r.location.line, r.context) for r in render.references] == [
            (8, ReferenceContext.FUNCTION_CALL)
        ]

        draw = circle.find_member("draw")
        assert [r.context for r in draw.references] == [ReferenceContext.POLYMORPHIC_CALL]
        assert result.crosslink.links == 1

        stub = catalog.get("react::class::Component")
        assert stub.references[0].context == ReferenceContext.INHERITANCE

    def test_counts_match_references(self, result: ScanResult):
        """Test reference counts are always the length of the reference lists."""
        for symbol in result.catalog.symbols.values():
            assert symbol.reference_count == len(symbol.references)
            assert symbol.as_dict["reference_count"] == len(symbol.references)
            for member in symbol.members:
                assert member.as_dict["reference_count"] == len(member.references)

    def test_no_self_references(self, result: ScanResult):
        """Test no symbol references its own declaration site."""
        for symbol in result.catalog.symbols.values():
            if symbol.location is None:
                continue
            assert all(r.location.key != symbol.location.key for r in symbol.references)
            for member in symbol.members:
                assert all(r.location.key != member.location.key for r in member.references)

    def test_deterministic(self, project: Path, settings: Settings):
        """Test two scans of the same tree produce the same catalog."""
        first = scan_project(project, settings)
        second = scan_project(project, settings)

        assert project_catalog(first.catalog) == project_catalog(second.catalog)

    def test_metrics(self, result: ScanResult):
        """Test every phase is timed in order."""
        names = [p.name for p in result.metrics.phases]

        assert names == [
            "catalog_build",
            "heuristic_scan",
            "member_tracking",
            "function_tracking",
            "crosslink",
        ]
        assert result.metrics.get("catalog_build").counters["files"] == 4
        assert result.metrics.total_ms >= 0

    def test_bucket_by_owner_setting(self, make_project):
        """Test the tracker setting flows through the pipeline."""
        root = make_project({
            "a.ts": "export class A {\n  go(): void {}\n}\n",
            "b.ts": "export class B {\n  go(): void {}\n}\n",
            "main.ts": 'import { A } from "./a";\n\nnew A().go();\n',
        })

        shared = scan_project(root, Settings())
        split = scan_project(root, Settings(tracker=TrackerSettings(bucket_by_owner=True)))

        assert shared.catalog.get("b.ts::class::B").find_member("go").reference_count == 1
        assert split.catalog.get("b.ts::class::B").find_member("go").reference_count == 0

    def test_skipped_file(self, make_project, settings: Settings):
        """Test one broken file yields one warning and a partial catalog."""
        root = make_project({
            "broken.ts": "export class Broken {\n  method( {\n}\n",
            "good.ts": "export class Good {}\nconst g = new Good();\n",
        })

        with capture_logs() as logs:
            result = scan_project(root, settings)

        skipped = [e for e in logs if e["event"] == "file_skipped"]
        assert len(skipped) == 1
        assert skipped[0]["path"] == "broken.ts"
        assert skipped[0]["log_level"] == "warning"
        assert result.catalog.skipped_files == ["broken.ts"]
        assert result.catalog.get("good.ts::class::Good").reference_count == 1

    def test_missing_root(self, tmp_path: Path, settings: Settings):
        """Test a missing root fails before any cataloging."""
        with pytest.raises(ProjectRootError) as exc_info:
            ProjectScanner(tmp_path / "missing", settings).scan()

        assert exc_info.value.reason == "does not exist"

    def test_root_is_file(self, tmp_path: Path, settings: Settings):
        """Test a file root is rejected."""
        target = tmp_path / "file.ts"
        target.write_text("export class A {}\n")

        with pytest.raises(ProjectRootError, match="not a directory"):
            scan_project(target, settings)

    def test_empty_project(self, tmp_path: Path, settings: Settings):
        """Test an empty root yields an empty catalog."""
        result = scan_project(tmp_path, settings)

        assert len(result.catalog) == 0
        assert result.catalog.files == []

    def test_result_serialization(self, result: ScanResult, project: Path):
        """Test the serialized result shape."""
        data = result.as_dict

        assert data["project_root"] == str(project.resolve())
        assert set(data["catalog"]) == {*SECTIONS, "summary"}
        assert data["crosslink"]["links"] == 1
        assert [p["name"] for p in data["metrics"]["phases"]][0] == "catalog_build"


class TestCatalogProjection:
    """Test cases for the catalog projection."""

    def test_sections(self, result: ScanResult):
        """Test each kind lands in its section, locals before stubs."""
        data = project_catalog(result.catalog)

        assert [c["name"] for c in data["classes"]] == ["Circle", "Component"]
        assert data["classes"][1]["is_local"] is False
        assert [i["name"] for i in data["interfaces"]] == ["Shape", "Component"]
        assert [e["name"] for e in data["enums"]] == ["Color"]
        assert data["enums"][0]["enum_members"] == ["Red"]
        assert [t["type_definition"] for t in data["types"]] == ["string"]
        assert [f["name"] for f in data["functions"]] == ["render"]

    def test_class_shape(self, result: ScanResult):
        """Test a local class carries heritage, members and counts."""
        circle = project_catalog(result.catalog)["classes"][0]

        assert circle["extends"] == ["Component"]
        assert circle["implements"] == ["Shape"]
        assert circle["source_filename"] == "circle.ts"
        assert circle["members"][0]["polymorphic_reference_count"] == 1
        assert circle["members"][0]["direct_reference_count"] == 0

    def test_summary(self, result: ScanResult):
        """Test summary counts."""
        summary = project_catalog(result.catalog)["summary"]

        assert summary["files"] == 4
        assert summary["skipped_files"] == []
        assert summary["symbols"]["classes"] == 2
        assert summary["crosslinked"] is True

    def test_projection_does_not_mutate(self, result: ScanResult):
        """Test projecting twice yields equal output."""
        assert project_catalog(result.catalog) == project_catalog(result.catalog)


class TestScanMetrics:
    """Test cases for scan instrumentation."""

    def test_phase_records(self):
        """Test phases record elapsed time and counters."""
        metrics = ScanMetrics()

        with metrics.phase("heuristic_scan") as phase:
            phase.count("references")
            phase.count("references", 2)

        record = metrics.get("heuristic_scan")
        assert record.counters == {"references": 3}
        assert record.elapsed_ms >= 0
        assert metrics.get("missing") is None

    def test_phase_recorded_on_error(self):
        """Test a failing phase is still recorded."""
        metrics = ScanMetrics()

        with pytest.raises(RuntimeError):
            with metrics.phase("catalog_build"):
                raise RuntimeError("boom")

        assert [p.name for p in metrics.phases] == ["catalog_build"]

    def test_independent_scans(self):
        """Test separate contexts never share measurements."""
        first = ScanMetrics()
        second = ScanMetrics()

        with first.phase("crosslink"):
            pass

        assert second.phases == []
        assert first.as_dict["phases"][0]["name"] == "crosslink"
