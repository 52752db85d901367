"""
CodeAtlas Catalogable Kinds.

One generic description of a catalogable declaration kind, instantiated
per kind. The builder and the heuristic scanner are written once
against this abstraction.
Requires Python 3.11+.
"""

from dataclasses import dataclass

from catalog.candidates import NamePredicate, accept_any, make_name_predicate
from catalog.models import (
    CodeLocation,
    MemberSymbol,
    Symbol,
    SymbolKind,
    generate_symbol_id,
)
from source_model.models import DeclarationInfo, DeclarationKind
from utils.config import CandidateSettings


@dataclass(frozen=True, slots=True)
class CatalogableKind:
    """
    A declaration kind the catalog tracks.

    Attributes:
        kind: Symbol kind produced
        declaration_kind: Source model declarations it is built from
        is_candidate: Name predicate for import stubs and heuristic scanning
        heuristic: References are found by the heuristic scanner
        stub_imports: External imports passing is_candidate get stub symbols
        keyed_by_line: Ids include the declaration line
    """

    kind: SymbolKind
    declaration_kind: DeclarationKind
    is_candidate: NamePredicate
    heuristic: bool = True
    stub_imports: bool = False
    keyed_by_line: bool = False

    def extract(self, declarations: list[DeclarationInfo]) -> list[DeclarationInfo]:
        """Select the declarations of this kind."""
        return [d for d in declarations if d.kind == self.declaration_kind]

    def symbol_id(self, decl: DeclarationInfo) -> str:
        line = decl.location.line if self.keyed_by_line else None
        return generate_symbol_id(decl.location.file, self.kind, decl.name, line)

    def stub_id(self, name: str, module: str) -> str:
        return generate_symbol_id(module, self.kind, name)

    def make_symbol(self, decl: DeclarationInfo) -> Symbol:
        """Build a local symbol with full structural detail."""
        symbol_id = self.symbol_id(decl)
        symbol = Symbol(
            id=symbol_id,
            name=decl.name,
            kind=self.kind,
            is_local=True,
            location=CodeLocation.from_source(decl.location),
            handle=decl.handle,
            extends=list(decl.extends),
            implements=list(decl.implements),
            type_parameters=list(decl.type_parameters),
            jsdoc=decl.jsdoc,
            is_exported=decl.is_exported,
            is_abstract=decl.is_abstract,
            enum_members=list(decl.enum_members),
            type_definition=decl.type_definition,
            parameters=list(decl.parameters),
            return_type=decl.return_type,
            overloads=list(decl.overloads),
        )
        symbol.members = [
            MemberSymbol(
                name=member.name,
                kind=member.kind,
                owner_id=symbol_id,
                location=CodeLocation.from_source(member.location),
                handle=member.handle,
                parameters=list(member.parameters),
                type=member.type,
                is_static=member.is_static,
                is_abstract=member.is_abstract,
                is_optional=member.is_optional,
                visibility=member.visibility,
                type_parameters=list(member.type_parameters),
                overloads=list(member.overloads),
                jsdoc=member.jsdoc,
            )
            for member in decl.members
        ]
        return symbol

    def make_stub(self, name: str, module: str) -> Symbol:
        """Build a placeholder for a name imported from an external module."""
        return Symbol(
            id=self.stub_id(name, module),
            name=name,
            kind=self.kind,
            is_local=False,
            module=module,
        )


def default_kinds(settings: CandidateSettings | None = None) -> tuple[CatalogableKind, ...]:
    """
    The five catalogable kinds.

    Classes and interfaces get import stubs; functions are neither
    stubbed nor heuristically scanned since their names are ordinary
    lowercase words.
    """
    settings = settings or CandidateSettings()
    predicate = make_name_predicate(settings.denylist, settings.min_length)
    return (
        CatalogableKind(SymbolKind.CLASS, DeclarationKind.CLASS, predicate, stub_imports=True),
        CatalogableKind(
            SymbolKind.INTERFACE, DeclarationKind.INTERFACE, predicate, stub_imports=True
        ),
        CatalogableKind(SymbolKind.ENUM, DeclarationKind.ENUM, predicate),
        CatalogableKind(SymbolKind.TYPE_ALIAS, DeclarationKind.TYPE_ALIAS, predicate),
        CatalogableKind(
            SymbolKind.FUNCTION,
            DeclarationKind.FUNCTION,
            accept_any,
            heuristic=False,
            keyed_by_line=True,
        ),
    )
