"""
CodeAtlas Source Model Package.

Tree-sitter based TypeScript parsing and exact reference resolution
consumed by the catalog engine.
Requires Python 3.11+.
"""

from source_model.errors import SourceModelError, SourceParseError, UnsupportedHandleError
from source_model.models import (
    DeclarationHandle,
    DeclarationInfo,
    DeclarationKind,
    IdentifierToken,
    ImportInfo,
    MemberInfo,
    MemberKind,
    OverloadInfo,
    ParameterInfo,
    SourceLocation,
    SyntaxKind,
    TypeParameterInfo,
    UsageSite,
    Visibility,
)
from source_model.resolver import ReferenceResolver
from source_model.typescript_model import ParsedFile, TypeScriptSourceModel

__all__ = [
    # Errors
    "SourceModelError",
    "SourceParseError",
    "UnsupportedHandleError",
    # Enums
    "DeclarationKind",
    "MemberKind",
    "SyntaxKind",
    "Visibility",
    # Data classes
    "SourceLocation",
    "DeclarationHandle",
    "ParameterInfo",
    "TypeParameterInfo",
    "OverloadInfo",
    "MemberInfo",
    "DeclarationInfo",
    "ImportInfo",
    "UsageSite",
    "IdentifierToken",
    # Model
    "ParsedFile",
    "TypeScriptSourceModel",
    "ReferenceResolver",
]
