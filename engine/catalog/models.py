"""
CodeAtlas Catalog Data Models.

Symbols, members and their classified references, plus the Catalog
registry with its name index.
Requires Python 3.11+.
"""

from dataclasses import dataclass, field
from enum import Enum
from pathlib import PurePosixPath
from typing import Any

from catalog.errors import DuplicateSymbolError
from source_model.models import (
    DeclarationHandle,
    MemberKind,
    OverloadInfo,
    ParameterInfo,
    SourceLocation,
    TypeParameterInfo,
    Visibility,
)


class SymbolKind(str, Enum):
    """Catalogable declaration kinds."""

    CLASS = "class"
    INTERFACE = "interface"
    ENUM = "enum"
    TYPE_ALIAS = "type_alias"
    FUNCTION = "function"


class ReferenceContext(str, Enum):
    """Syntactic role of one usage occurrence."""

    INSTANTIATION = "instantiation"
    METHOD_CALL = "method_call"
    FUNCTION_CALL = "function_call"
    TYPE_ANNOTATION = "type_annotation"
    INHERITANCE = "inheritance"
    IMPLEMENTATION = "implementation"
    PROPERTY_ACCESS = "property_access"
    VARIABLE_DECLARATION = "variable_declaration"
    PARAMETER = "parameter"
    PROPERTY = "property"
    POLYMORPHIC_CALL = "polymorphic_call"
    REFERENCE = "reference"


def generate_symbol_id(
    origin: str, kind: SymbolKind, name: str, line: int | None = None
) -> str:
    """
    Generate a symbol ID.

    Format: origin::kind::name[::line]

    origin is the declaring file for local symbols and the module
    specifier for import stubs; line is only used for functions.

    Examples:
        - src/shapes.ts::class::Circle
        - src/util.ts::function::format::12
        - react::class::Component
    """
    base = f"{origin}::{kind.value}::{name}"
    if line is not None:
        return f"{base}::{line}"
    return base


@dataclass(slots=True, frozen=True)
class CodeLocation:
    """File position of a symbol or reference."""

    file: str
    line: int
    column: int
    end_line: int | None = None

    @classmethod
    def from_source(cls, location: SourceLocation, with_end: bool = True) -> "CodeLocation":
        return cls(
            file=location.file,
            line=location.line,
            column=location.column,
            end_line=location.end_line if with_end else None,
        )

    @property
    def key(self) -> tuple[str, int, int]:
        """Position identity, ignoring the span end."""
        return (self.file, self.line, self.column)

    @property
    def as_dict(self) -> dict[str, Any]:
        """Convert to dictionary for serialization."""
        data: dict[str, Any] = {"file": self.file, "line": self.line, "column": self.column}
        if self.end_line is not None:
            data["end_line"] = self.end_line
        return data


@dataclass(slots=True)
class Reference:
    """One usage occurrence of a symbol or member."""

    location: CodeLocation
    context: ReferenceContext
    context_line: str | None = None

    def with_context(self, context: ReferenceContext) -> "Reference":
        """Copy of this reference under a different context."""
        return Reference(location=self.location, context=context, context_line=self.context_line)

    @property
    def sort_key(self) -> tuple[str, int, int]:
        return self.location.key

    @property
    def as_dict(self) -> dict[str, Any]:
        """Convert to dictionary for serialization."""
        return {
            "location": self.location.as_dict,
            "context": self.context.value,
            "context_line": self.context_line,
        }


@dataclass(slots=True)
class MemberSymbol:
    """A method, property or constructor of a class or interface."""

    name: str
    kind: MemberKind
    owner_id: str
    location: CodeLocation
    handle: DeclarationHandle | None = None
    parameters: list[ParameterInfo] = field(default_factory=list)
    type: str | None = None
    is_static: bool = False
    is_abstract: bool = False
    is_optional: bool = False
    visibility: Visibility | None = None
    type_parameters: list[TypeParameterInfo] = field(default_factory=list)
    overloads: list[OverloadInfo] = field(default_factory=list)
    jsdoc: str | None = None
    references: list[Reference] = field(default_factory=list)

    @property
    def reference_count(self) -> int:
        """Always derived from references."""
        return len(self.references)

    @property
    def polymorphic_reference_count(self) -> int:
        return sum(1 for r in self.references if r.context == ReferenceContext.POLYMORPHIC_CALL)

    @property
    def direct_reference_count(self) -> int:
        return self.reference_count - self.polymorphic_reference_count

    @property
    def as_dict(self) -> dict[str, Any]:
        """Convert to dictionary for serialization."""
        return {
            "name": self.name,
            "kind": self.kind.value,
            "location": self.location.as_dict,
            "parameters": [p.as_dict for p in self.parameters],
            "type": self.type,
            "is_static": self.is_static,
            "is_abstract": self.is_abstract,
            "is_optional": self.is_optional,
            "visibility": self.visibility.value if self.visibility else None,
            "type_parameters": [t.as_dict for t in self.type_parameters],
            "overloads": [o.as_dict for o in self.overloads],
            "jsdoc": self.jsdoc,
            "references": [r.as_dict for r in self.references],
            "reference_count": self.reference_count,
            "direct_reference_count": self.direct_reference_count,
            "polymorphic_reference_count": self.polymorphic_reference_count,
        }


@dataclass(slots=True)
class Symbol:
    """
    A cataloged declaration.

    Local symbols carry structural detail; import stubs (is_local False)
    only carry their originating module and serve as reference targets.
    """

    id: str
    name: str
    kind: SymbolKind
    is_local: bool
    location: CodeLocation | None = None
    module: str | None = None
    handle: DeclarationHandle | None = None
    members: list[MemberSymbol] = field(default_factory=list)
    extends: list[str] = field(default_factory=list)
    implements: list[str] = field(default_factory=list)
    type_parameters: list[TypeParameterInfo] = field(default_factory=list)
    jsdoc: str | None = None
    is_exported: bool = False
    is_abstract: bool = False
    enum_members: list[str] = field(default_factory=list)
    type_definition: str | None = None
    parameters: list[ParameterInfo] = field(default_factory=list)
    return_type: str | None = None
    overloads: list[OverloadInfo] = field(default_factory=list)
    references: list[Reference] = field(default_factory=list)

    @property
    def reference_count(self) -> int:
        """Always derived from references."""
        return len(self.references)

    @property
    def source_loc(self) -> int | None:
        """Lines spanned by the declaration."""
        if self.location is None or self.location.end_line is None:
            return None
        return self.location.end_line - self.location.line + 1

    @property
    def source_filename(self) -> str | None:
        if self.location is None:
            return None
        return PurePosixPath(self.location.file).name

    def members_of_kind(self, kind: MemberKind) -> list[MemberSymbol]:
        return [m for m in self.members if m.kind == kind]

    def find_member(self, name: str, kind: MemberKind | None = None) -> MemberSymbol | None:
        """Return the first member with the given name (and kind, if given)."""
        for member in self.members:
            if member.name == name and (kind is None or member.kind == kind):
                return member
        return None

    @property
    def as_dict(self) -> dict[str, Any]:
        """Convert to dictionary for serialization."""
        data: dict[str, Any] = {
            "id": self.id,
            "name": self.name,
            "kind": self.kind.value,
            "is_local": self.is_local,
            "references": [r.as_dict for r in self.references],
            "reference_count": self.reference_count,
        }
        if not self.is_local:
            data["module"] = self.module
            return data

        data.update({
            "location": self.location.as_dict if self.location else None,
            "source_loc": self.source_loc,
            "source_filename": self.source_filename,
            "jsdoc": self.jsdoc,
            "is_exported": self.is_exported,
            "type_parameters": [t.as_dict for t in self.type_parameters],
        })
        if self.kind in (SymbolKind.CLASS, SymbolKind.INTERFACE):
            data["extends"] = list(self.extends)
            data["members"] = [m.as_dict for m in self.members]
        if self.kind == SymbolKind.CLASS:
            data["implements"] = list(self.implements)
            data["is_abstract"] = self.is_abstract
        if self.kind == SymbolKind.ENUM:
            data["enum_members"] = list(self.enum_members)
        if self.kind == SymbolKind.TYPE_ALIAS:
            data["type_definition"] = self.type_definition
        if self.kind == SymbolKind.FUNCTION:
            data["parameters"] = [p.as_dict for p in self.parameters]
            data["return_type"] = self.return_type
            data["overloads"] = [o.as_dict for o in self.overloads]
        return data


@dataclass
class Catalog:
    """
    Registry of every symbol found in one scan.

    symbols maps id -> Symbol; name_index maps a bare name to the ids
    declared under it, in insertion order.
    """

    symbols: dict[str, Symbol] = field(default_factory=dict)
    name_index: dict[str, list[str]] = field(default_factory=dict)
    files: list[str] = field(default_factory=list)
    skipped_files: list[str] = field(default_factory=list)
    crosslinked: bool = False

    def __contains__(self, symbol_id: str) -> bool:
        return symbol_id in self.symbols

    def __len__(self) -> int:
        return len(self.symbols)

    def get(self, symbol_id: str) -> Symbol | None:
        return self.symbols.get(symbol_id)

    def add(self, symbol: Symbol) -> None:
        """
        Register a symbol under its id and bare name.

        Raises:
            DuplicateSymbolError: A symbol with the same id is registered.
        """
        if symbol.id in self.symbols:
            raise DuplicateSymbolError(symbol.id)
        self.symbols[symbol.id] = symbol
        self.name_index.setdefault(symbol.name, []).append(symbol.id)

    def candidates(self, name: str, kind: SymbolKind | None = None) -> list[Symbol]:
        """All symbols registered under a bare name, optionally of one kind."""
        return [
            self.symbols[symbol_id]
            for symbol_id in self.name_index.get(name, [])
            if kind is None or self.symbols[symbol_id].kind == kind
        ]

    def lookup(self, name: str, kind: SymbolKind | None = None) -> Symbol | None:
        """
        Resolve a bare name to one symbol.

        Local symbols always win over import stubs. Among several
        candidates of the same locality the one with the smallest
        (file, line) or module is chosen, so the result does not
        depend on cataloging order.
        """
        found = self.candidates(name, kind)
        if not found:
            return None
        local = [s for s in found if s.is_local]
        if local:
            return min(local, key=lambda s: (s.location.file, s.location.line, s.id))
        return min(found, key=lambda s: (s.module or "", s.id))

    def symbols_of_kind(self, kind: SymbolKind) -> list[Symbol]:
        """Symbols of one kind, sorted by id."""
        return sorted(
            (s for s in self.symbols.values() if s.kind == kind),
            key=lambda s: s.id,
        )

    def local_symbols(self, kind: SymbolKind | None = None) -> list[Symbol]:
        """Local symbols (optionally of one kind), sorted by id."""
        return sorted(
            (
                s
                for s in self.symbols.values()
                if s.is_local and (kind is None or s.kind == kind)
            ),
            key=lambda s: s.id,
        )
