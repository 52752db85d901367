"""
Tests for the Heuristic Reference Scanner and context classification.

Requires Python 3.11+.
"""

import pytest

from catalog.contexts import classify_declaration_usage, classify_function_usage, classify_member_usage
from catalog.models import Catalog, ReferenceContext
from source_model.models import SourceLocation, SyntaxKind, UsageSite


def site(syntax: SyntaxKind, outer: SyntaxKind = SyntaxKind.OTHER) -> UsageSite:
    return UsageSite(
        location=SourceLocation(file="a.ts", line=1, column=0, end_line=1),
        context_line="",
        syntax=syntax,
        outer_syntax=outer,
    )


class TestContextClassification:
    """Test cases for the ordered decision lists."""

    def test_declaration_rules(self):
        """Test each syntactic role maps to its declaration context."""
        expected = {
            SyntaxKind.NEW_EXPRESSION: ReferenceContext.INSTANTIATION,
            SyntaxKind.CALL_EXPRESSION: ReferenceContext.METHOD_CALL,
            SyntaxKind.TYPE_REFERENCE: ReferenceContext.TYPE_ANNOTATION,
            SyntaxKind.EXTENDS_CLAUSE: ReferenceContext.INHERITANCE,
            SyntaxKind.IMPLEMENTS_CLAUSE: ReferenceContext.IMPLEMENTATION,
            SyntaxKind.VARIABLE_DECLARATION: ReferenceContext.VARIABLE_DECLARATION,
            SyntaxKind.PARAMETER: ReferenceContext.PARAMETER,
            SyntaxKind.PROPERTY_DECLARATION: ReferenceContext.PROPERTY,
            SyntaxKind.MEMBER_ACCESS: ReferenceContext.PROPERTY_ACCESS,
            SyntaxKind.OTHER: ReferenceContext.REFERENCE,
        }
        for syntax, context in expected.items():
            assert classify_declaration_usage(site(syntax)) == context

    def test_member_rules(self):
        """Test called member accesses are method calls."""
        assert (
            classify_member_usage(site(SyntaxKind.MEMBER_ACCESS, SyntaxKind.CALL_EXPRESSION))
            == ReferenceContext.METHOD_CALL
        )
        assert (
            classify_member_usage(site(SyntaxKind.MEMBER_ACCESS))
            == ReferenceContext.PROPERTY_ACCESS
        )
        assert classify_member_usage(site(SyntaxKind.NEW_EXPRESSION)) == ReferenceContext.INSTANTIATION
        assert classify_member_usage(site(SyntaxKind.TYPE_REFERENCE)) == ReferenceContext.REFERENCE

    def test_function_rules(self):
        """Test function calls, namespace calls and bare references."""
        assert classify_function_usage(site(SyntaxKind.CALL_EXPRESSION)) == ReferenceContext.FUNCTION_CALL
        assert (
            classify_function_usage(site(SyntaxKind.MEMBER_ACCESS, SyntaxKind.CALL_EXPRESSION))
            == ReferenceContext.FUNCTION_CALL
        )
        assert (
            classify_function_usage(site(SyntaxKind.VARIABLE_DECLARATION))
            == ReferenceContext.REFERENCE
        )


class TestHeuristicReferenceScanner:
    """Test cases for name-based reference scanning."""

    @pytest.fixture
    def catalog(self, tracked_catalog) -> Catalog:
        """A project using its declarations in every syntactic role."""
        return tracked_catalog({
            "types.ts": (
                "export class Animal {}\n"
                "export interface Walker {}\n"
                "export enum Color {\n"
                "  Red,\n"
                "}\n"
                "export type Id = string;\n"
            ),
            "use.ts": (
                'import { Animal, Walker, Color, Id } from "./types";\n'
                "\n"
                "class Dog extends Animal implements Walker {\n"
                "  friend = Animal;\n"
                "}\n"
                "const pet: Animal = new Animal();\n"
                "const kind = Animal;\n"
                "function adopt(x = Animal, id?: Id) {}\n"
                "const shade = Color.Red;\n"
                "Animal();\n"
                "interface Runner extends Walker {}\n"
            ),
        })

    def contexts(self, catalog: Catalog, symbol_id: str) -> list[tuple[int, str]]:
        symbol = catalog.get(symbol_id)
        return [(r.location.line, r.context.value) for r in symbol.references]

    def test_class_contexts(self, catalog: Catalog):
        """Test every usage of a class is classified by its syntactic role."""
        assert self.contexts(catalog, "types.ts::class::Animal") == [
            (3, "inheritance"),
            (4, "property"),
            (6, "type_annotation"),
            (6, "instantiation"),
            (7, "variable_declaration"),
            (8, "parameter"),
            (10, "method_call"),
        ]

    def test_interface_contexts(self, catalog: Catalog):
        """Test implements and interface extends clauses."""
        assert self.contexts(catalog, "types.ts::interface::Walker") == [
            (3, "implementation"),
            (11, "inheritance"),
        ]

    def test_enum_and_alias_contexts(self, catalog: Catalog):
        """Test enum member access and type alias annotations."""
        assert self.contexts(catalog, "types.ts::enum::Color") == [(9, "property_access")]
        assert self.contexts(catalog, "types.ts::type_alias::Id") == [(8, "type_annotation")]

    def test_declarations_not_references(self, catalog: Catalog):
        """Test declaration names and import specifiers are never recorded."""
        for symbol in catalog.symbols.values():
            for reference in symbol.references:
                assert reference.location.line != 1 or reference.location.file != "use.ts"
                if symbol.location is not None:
                    assert reference.location.key != symbol.location.key

        assert catalog.get("use.ts::class::Dog").references == []

    def test_reference_detail(self, catalog: Catalog):
        """Test reference locations and context lines."""
        reference = catalog.get("types.ts::class::Animal").references[3]

        assert reference.location.file == "use.ts"
        assert reference.location.column == 24
        assert reference.location.end_line is None
        assert reference.context_line == "const pet: Animal = new Animal();"

    def test_local_preferred_over_stub(self, tracked_catalog):
        """Test a local declaration absorbs references to a same-named import."""
        catalog = tracked_catalog({
            "view.ts": 'import { Component } from "react";\n'
            "\n"
            "class View extends Component {}\n",
            "component.ts": "export class Component {}\n",
        })

        assert catalog.get("component.ts::class::Component").reference_count == 1
        assert catalog.get("react::class::Component").reference_count == 0
        # The interface kind has no local Component, so its stub is credited
        assert catalog.get("react::interface::Component").reference_count == 1

    def test_stub_references(self, tracked_catalog):
        """Test external types are tracked through their stubs."""
        catalog = tracked_catalog({
            "svc.ts": 'import { Injectable } from "@angular/core";\n'
            "\n"
            "const marker: Injectable = null;\n",
        })

        stub = catalog.get("@angular/core::class::Injectable")

        assert stub.reference_count == 1
        assert stub.references[0].context == ReferenceContext.TYPE_ANNOTATION

    def test_ambient_names_ignored(self, tracked_catalog):
        """Test denylisted and single-letter names never match."""
        catalog = tracked_catalog({
            "a.ts": "export class Promise {}\nexport class T {}\n"
            "const p = new Promise();\nconst t = new T();\n",
        })

        assert catalog.get("a.ts::class::Promise").reference_count == 0
        assert catalog.get("a.ts::class::T").reference_count == 0
