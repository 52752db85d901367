"""
CodeAtlas Source Model Data Structures.

Structural facts extracted from TypeScript files, plus the usage
sites returned by exact reference resolution.
Requires Python 3.11+.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any


class DeclarationKind(str, Enum):
    """Top-level declaration kinds the source model reports."""

    CLASS = "class"
    INTERFACE = "interface"
    ENUM = "enum"
    TYPE_ALIAS = "type_alias"
    FUNCTION = "function"


class MemberKind(str, Enum):
    """Kinds of class and interface members."""

    METHOD = "method"
    PROPERTY = "property"
    CONSTRUCTOR = "constructor"


class SyntaxKind(str, Enum):
    """
    Normalized syntactic role of a parent node relative to its child.

    NEW_EXPRESSION and CALL_EXPRESSION are only reported when the child
    is the constructor or callee, not an argument.
    """

    NEW_EXPRESSION = "new_expression"
    CALL_EXPRESSION = "call_expression"
    TYPE_REFERENCE = "type_reference"
    EXTENDS_CLAUSE = "extends_clause"
    IMPLEMENTS_CLAUSE = "implements_clause"
    VARIABLE_DECLARATION = "variable_declaration"
    PARAMETER = "parameter"
    PROPERTY_DECLARATION = "property_declaration"
    MEMBER_ACCESS = "member_access"
    MODULE_BINDING = "module_binding"
    OTHER = "other"


class Visibility(str, Enum):
    """Member accessibility."""

    PUBLIC = "public"
    PROTECTED = "protected"
    PRIVATE = "private"


@dataclass(slots=True, frozen=True)
class SourceLocation:
    """Position of a node; file is project-relative, line 1-indexed, column 0-indexed."""

    file: str
    line: int
    column: int
    end_line: int
    end_column: int = 0

    @property
    def as_dict(self) -> dict[str, Any]:
        """Convert to dictionary for serialization."""
        return {
            "file": self.file,
            "line": self.line,
            "column": self.column,
            "end_line": self.end_line,
            "end_column": self.end_column,
        }


@dataclass(slots=True, frozen=True)
class DeclarationHandle:
    """
    Opaque address of a declaration node.

    Handed back to TypeScriptSourceModel.resolve_exact_references();
    owner is the enclosing class or interface for members.
    """

    kind: DeclarationKind | MemberKind
    file: str
    name: str
    start_byte: int
    owner: str | None = None
    owner_kind: DeclarationKind | None = None


@dataclass(slots=True)
class ParameterInfo:
    """Function, method or constructor parameter."""

    name: str
    type: str | None = None
    optional: bool = False
    default_value: str | None = None
    is_rest: bool = False

    @property
    def as_dict(self) -> dict[str, Any]:
        """Convert to dictionary for serialization."""
        return {
            "name": self.name,
            "type": self.type,
            "optional": self.optional,
            "default_value": self.default_value,
            "is_rest": self.is_rest,
        }


@dataclass(slots=True)
class TypeParameterInfo:
    """Generic type parameter."""

    name: str
    constraint: str | None = None
    default_type: str | None = None

    @property
    def as_dict(self) -> dict[str, Any]:
        """Convert to dictionary for serialization."""
        return {
            "name": self.name,
            "constraint": self.constraint,
            "default_type": self.default_type,
        }


@dataclass(slots=True)
class OverloadInfo:
    """One overload signature of a function or method."""

    parameters: list[ParameterInfo] = field(default_factory=list)
    return_type: str | None = None

    @property
    def as_dict(self) -> dict[str, Any]:
        """Convert to dictionary for serialization."""
        return {
            "parameters": [p.as_dict for p in self.parameters],
            "return_type": self.return_type,
        }


@dataclass(slots=True)
class MemberInfo:
    """Method, property or constructor declared by a class or interface."""

    name: str
    kind: MemberKind
    location: SourceLocation
    handle: DeclarationHandle
    parameters: list[ParameterInfo] = field(default_factory=list)
    type: str | None = None  # property type or method return type
    is_static: bool = False
    is_abstract: bool = False
    is_optional: bool = False
    is_parameter_property: bool = False
    visibility: Visibility | None = None
    type_parameters: list[TypeParameterInfo] = field(default_factory=list)
    overloads: list[OverloadInfo] = field(default_factory=list)
    jsdoc: str | None = None


@dataclass(slots=True)
class DeclarationInfo:
    """A top-level declaration with its structural detail."""

    name: str
    kind: DeclarationKind
    location: SourceLocation
    handle: DeclarationHandle
    members: list[MemberInfo] = field(default_factory=list)
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

    def find_member(self, name: str, kind: MemberKind | None = None) -> MemberInfo | None:
        """Return the first member with the given name (and kind, if given)."""
        for member in self.members:
            if member.name == name and (kind is None or member.kind == kind):
                return member
        return None


@dataclass(slots=True)
class ImportInfo:
    """One imported binding."""

    name: str  # exported name in the source module ("default" for default imports)
    local_name: str
    module: str
    is_external: bool
    is_default: bool = False
    is_namespace: bool = False


@dataclass(slots=True)
class UsageSite:
    """
    A syntactic occurrence returned by the source model.

    syntax is the parent's role relative to the occurrence and
    outer_syntax the grandparent's role relative to the parent.
    """

    location: SourceLocation
    context_line: str
    syntax: SyntaxKind
    outer_syntax: SyntaxKind


@dataclass(slots=True)
class IdentifierToken(UsageSite):
    """An identifier-like token seen while walking a file."""

    name: str = ""
    is_declaration: bool = False
