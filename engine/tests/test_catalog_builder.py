"""
Tests for the Catalog Builder and Catalog Models.

Requires Python 3.11+.
"""

import pytest
from structlog.testing import capture_logs

from catalog.builder import CatalogBuilder
from catalog.candidates import accept_any, make_name_predicate
from catalog.errors import DuplicateSymbolError
from catalog.kinds import default_kinds
from catalog.models import (
    Catalog,
    CodeLocation,
    Symbol,
    SymbolKind,
    generate_symbol_id,
)
from utils.config import DEFAULT_DENYLIST


class TestNameCandidacy:
    """Test cases for the name predicate."""

    @pytest.fixture
    def is_candidate(self):
        """Predicate with the default denylist."""
        return make_name_predicate(DEFAULT_DENYLIST)

    def test_capitalized_names(self, is_candidate):
        """Test capitalized names of two or more characters qualify."""
        assert is_candidate("UserService") is True
        assert is_candidate("Ab") is True

    def test_rejected_names(self, is_candidate):
        """Test short, lowercase and denylisted names."""
        assert is_candidate("T") is False
        assert is_candidate("userService") is False
        assert is_candidate("Promise") is False
        assert is_candidate("") is False

    def test_custom_settings(self):
        """Test denylist and minimum length come from configuration."""
        predicate = make_name_predicate(["Widget"], min_length=4)

        assert predicate("Widget") is False
        assert predicate("Abc") is False
        assert predicate("Promise") is True

    def test_accept_any(self):
        """Test the function predicate only rejects empty names."""
        assert accept_any("format") is True
        assert accept_any("") is False


class TestCatalogModels:
    """Test cases for symbol ids and catalog lookup."""

    def test_symbol_ids(self):
        """Test id formats for locals, functions and stubs."""
        assert generate_symbol_id("src/a.ts", SymbolKind.CLASS, "A") == "src/a.ts::class::A"
        assert (
            generate_symbol_id("src/a.ts", SymbolKind.FUNCTION, "f", 12)
            == "src/a.ts::function::f::12"
        )
        assert generate_symbol_id("react", SymbolKind.CLASS, "Component") == "react::class::Component"

    def test_duplicate_id_rejected(self):
        """Test ids are unique within a catalog."""
        catalog = Catalog()
        catalog.add(Symbol(id="a.ts::class::A", name="A", kind=SymbolKind.CLASS, is_local=True))

        with pytest.raises(DuplicateSymbolError):
            catalog.add(
                Symbol(id="a.ts::class::A", name="A", kind=SymbolKind.CLASS, is_local=True)
            )

    def test_lookup_prefers_local(self):
        """Test local symbols win over stubs regardless of insertion order."""
        catalog = Catalog()
        catalog.add(
            Symbol(
                id="react::class::Component",
                name="Component",
                kind=SymbolKind.CLASS,
                is_local=False,
                module="react",
            )
        )
        catalog.add(
            Symbol(
                id="z.ts::class::Component",
                name="Component",
                kind=SymbolKind.CLASS,
                is_local=True,
                location=CodeLocation(file="z.ts", line=3, column=0),
            )
        )
        catalog.add(
            Symbol(
                id="b.ts::class::Component",
                name="Component",
                kind=SymbolKind.CLASS,
                is_local=True,
                location=CodeLocation(file="b.ts", line=9, column=0),
            )
        )

        assert catalog.lookup("Component").id == "b.ts::class::Component"
        assert catalog.lookup("Component", SymbolKind.INTERFACE) is None
        assert catalog.lookup("Missing") is None

    def test_name_index(self):
        """Test every symbol is indexed under its bare name."""
        catalog = Catalog()
        catalog.add(Symbol(id="a.ts::class::A", name="A", kind=SymbolKind.CLASS, is_local=True))
        catalog.add(Symbol(id="a.ts::enum::A", name="A", kind=SymbolKind.ENUM, is_local=True))

        assert catalog.name_index["A"] == ["a.ts::class::A", "a.ts::enum::A"]
        assert [s.id for s in catalog.candidates("A", SymbolKind.ENUM)] == ["a.ts::enum::A"]
        assert "a.ts::enum::A" in catalog
        assert len(catalog) == 2


class TestCatalogBuilder:
    """Test cases for CatalogBuilder."""

    def build(self, model) -> Catalog:
        return CatalogBuilder(model, default_kinds()).build(model.files)

    def test_local_symbols(self, make_model, sample_typescript_code: str):
        """Test each catalogable declaration becomes one local symbol."""
        model = make_model({"src/repo.ts": sample_typescript_code})

        catalog = self.build(model)

        assert "src/repo.ts::class::Repository" in catalog
        assert "src/repo.ts::interface::Store" in catalog
        assert "src/repo.ts::enum::Color" in catalog
        assert "src/repo.ts::type_alias::UserId" in catalog
        functions = catalog.symbols_of_kind(SymbolKind.FUNCTION)
        assert sorted(f.name for f in functions) == ["format", "helper", "parse"]
        assert all(f.id.count("::") == 3 for f in functions)

    def test_symbol_detail(self, make_model, sample_typescript_code: str):
        """Test structural detail carried onto symbols and members."""
        model = make_model({"src/repo.ts": sample_typescript_code})

        catalog = self.build(model)
        repository = catalog.get("src/repo.ts::class::Repository")

        assert repository.is_local is True
        assert repository.source_filename == "repo.ts"
        assert repository.source_loc == 16
        assert all(m.owner_id == repository.id for m in repository.members)
        assert repository.references == []
        assert repository.as_dict["is_abstract"] is True

    def test_import_stubs(self, make_model, sample_typescript_code: str):
        """Test stubs for external imports only, one per class and interface kind."""
        model = make_model({"src/repo.ts": sample_typescript_code})

        catalog = self.build(model)
        stubs = [s for s in catalog.symbols.values() if not s.is_local]

        assert sorted(s.id for s in stubs) == [
            "@angular/core::class::Injectable",
            "@angular/core::interface::Injectable",
        ]
        assert stubs[0].module == "@angular/core"
        assert stubs[0].location is None
        assert "module" in stubs[0].as_dict

    def test_stub_shared_across_files(self, make_model):
        """Test the same external import yields one stub per kind."""
        model = make_model({
            "a.ts": 'import { Component } from "react";\n',
            "b.ts": 'import { Component } from "react";\n',
        })

        catalog = self.build(model)

        assert len(catalog.candidates("Component", SymbolKind.CLASS)) == 1

    def test_denylisted_imports_not_stubbed(self, make_model):
        """Test ambient names never become stubs."""
        model = make_model({"a.ts": 'import { Promise, useState } from "lib";\n'})

        catalog = self.build(model)

        assert len(catalog) == 0

    def test_interface_merging(self, make_model):
        """Test re-declared interfaces merge into one symbol."""
        model = make_model({
            "a.ts": "interface Box {\n  width: number;\n}\n"
            "interface Box extends Sized {\n  height: number;\n}\n"
        })

        catalog = self.build(model)
        box = catalog.get("a.ts::interface::Box")

        assert [m.name for m in box.members] == ["width", "height"]
        assert box.extends == ["Sized"]
        assert all(m.owner_id == box.id for m in box.members)

    def test_unparseable_file_skipped(self, make_model):
        """Test a broken file is skipped with one warning."""
        model = make_model({
            "bad.ts": "export class Broken {\n  method( {\n}\n",
            "good.ts": "export class Good {}\n",
        })

        with capture_logs() as logs:
            catalog = self.build(model)

        assert catalog.files == ["good.ts"]
        assert catalog.skipped_files == ["bad.ts"]
        assert "good.ts::class::Good" in catalog
        warnings = [e for e in logs if e["log_level"] == "warning"]
        assert len(warnings) == 1
        assert warnings[0]["event"] == "file_skipped"
        assert warnings[0]["path"] == "bad.ts"
