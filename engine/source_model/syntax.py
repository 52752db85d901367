"""
CodeAtlas TypeScript Syntax Helpers.

Pure functions over tree-sitter nodes: traversal, syntactic roles,
and normalization of type and heritage text.
Requires Python 3.11+.
"""

from typing import Iterator

from tree_sitter import Node

from source_model.models import SyntaxKind

CLASS_NODES = frozenset({"class_declaration", "abstract_class_declaration", "class"})

FUNCTION_SCOPES = frozenset({
    "function_declaration",
    "generator_function_declaration",
    "function_expression",
    "generator_function",
    "arrow_function",
    "method_definition",
})

BLOCK_SCOPES = frozenset({"program", "statement_block", "switch_case", "switch_default"})

PARAMETER_NODES = frozenset({"required_parameter", "optional_parameter"})

IDENTIFIER_NODES = frozenset({"identifier", "type_identifier", "shorthand_property_identifier"})

TYPE_NODES = frozenset({"type_identifier", "generic_type", "nested_type_identifier"})

MODULE_BINDING_NODES = frozenset({
    "import_specifier",
    "import_clause",
    "namespace_import",
    "namespace_export",
    "export_specifier",
    "import_require_clause",
})

# Parent node type -> field holding a declared name
DECLARATION_NAME_FIELDS: dict[str, str] = {
    "class_declaration": "name",
    "abstract_class_declaration": "name",
    "class": "name",
    "interface_declaration": "name",
    "enum_declaration": "name",
    "type_alias_declaration": "name",
    "function_declaration": "name",
    "generator_function_declaration": "name",
    "function_signature": "name",
    "type_parameter": "name",
    "variable_declarator": "name",
    "required_parameter": "pattern",
    "optional_parameter": "pattern",
}

_NULLISH = frozenset({"null", "undefined", "void", "never"})


def walk(node: Node) -> Iterator[Node]:
    """Yield node and all descendants in document order."""
    stack = [node]
    while stack:
        current = stack.pop()
        yield current
        stack.extend(reversed(current.children))


def is_field(parent: Node, field_name: str, child: Node) -> bool:
    """Check whether child sits in parent's named field."""
    candidate = parent.child_by_field_name(field_name)
    return candidate is not None and candidate == child


def lift_type_name(node: Node) -> Node:
    """Climb from a type name to the generic or qualified type that wraps it."""
    current = node
    parent = current.parent
    while (
        parent is not None
        and parent.type in ("generic_type", "nested_type_identifier")
        and is_field(parent, "name", current)
    ):
        current = parent
        parent = current.parent
    return current


def parent_role(child: Node) -> SyntaxKind:
    """Classify the syntactic role of child's parent relative to child."""
    parent = child.parent
    if parent is None:
        return SyntaxKind.OTHER

    kind = parent.type
    if kind == "new_expression":
        if is_field(parent, "constructor", child):
            return SyntaxKind.NEW_EXPRESSION
        return SyntaxKind.OTHER
    if kind == "call_expression":
        if is_field(parent, "function", child):
            return SyntaxKind.CALL_EXPRESSION
        return SyntaxKind.OTHER
    if kind in ("extends_clause", "extends_type_clause"):
        return SyntaxKind.EXTENDS_CLAUSE
    if kind == "implements_clause":
        return SyntaxKind.IMPLEMENTS_CLAUSE
    if kind == "variable_declarator" and is_field(parent, "value", child):
        return SyntaxKind.VARIABLE_DECLARATION
    if kind in PARAMETER_NODES and is_field(parent, "value", child):
        return SyntaxKind.PARAMETER
    if kind in ("public_field_definition", "field_definition") and is_field(parent, "value", child):
        return SyntaxKind.PROPERTY_DECLARATION
    if kind == "member_expression":
        return SyntaxKind.MEMBER_ACCESS
    if kind in MODULE_BINDING_NODES:
        return SyntaxKind.MODULE_BINDING
    if child.type in TYPE_NODES:
        return SyntaxKind.TYPE_REFERENCE
    return SyntaxKind.OTHER


def roles(node: Node) -> tuple[SyntaxKind, SyntaxKind]:
    """Return (parent role, grandparent role) for an occurrence node."""
    subject = lift_type_name(node) if node.type == "type_identifier" else node
    outer = parent_role(subject.parent) if subject.parent is not None else SyntaxKind.OTHER
    return parent_role(subject), outer


def is_declaration_name(node: Node) -> bool:
    """Check whether node is the name being declared by its parent."""
    parent = node.parent
    if parent is None:
        return False
    field_name = DECLARATION_NAME_FIELDS.get(parent.type)
    return field_name is not None and is_field(parent, field_name, node)


def enclosing(node: Node, types: frozenset[str]) -> Node | None:
    """Return the nearest ancestor whose type is in types."""
    current = node.parent
    while current is not None:
        if current.type in types:
            return current
        current = current.parent
    return None


def split_top_level(text: str, separator: str) -> list[str]:
    """Split text on separator, ignoring separators nested in brackets."""
    parts: list[str] = []
    depth = 0
    start = 0
    for index, char in enumerate(text):
        if char in "<([{":
            depth += 1
        elif char in ">)]}":
            depth = max(depth - 1, 0)
        elif char == separator and depth == 0:
            parts.append(text[start:index])
            start = index + 1
    parts.append(text[start:])
    return parts


def heritage_name(text: str) -> str:
    """Normalize a heritage entry such as ``ns.Base<T>`` to ``Base``."""
    name = text.strip()
    if "<" in name:
        name = name[: name.index("<")]
    return name.rsplit(".", 1)[-1].strip()


def base_type_name(text: str | None) -> str | None:
    """
    Reduce a type expression to the single named type it denotes.

    ``Foo | null`` and ``ns.Foo<T>`` both become ``Foo``; arrays,
    unions of several named types and literal object types give None.
    """
    if not text:
        return None
    cleaned = text.strip()
    if cleaned.startswith(":"):
        cleaned = cleaned[1:].strip()
    parts = [
        part.strip()
        for part in split_top_level(cleaned, "|")
        if part.strip() and part.strip() not in _NULLISH
    ]
    if len(parts) != 1:
        return None
    candidate = parts[0]
    if candidate.startswith(("(", "{", "[", "'", '"')) or candidate.endswith("[]"):
        return None
    name = heritage_name(candidate)
    return name if name.isidentifier() else None


def unwrap_promise(text: str | None) -> str | None:
    """Return T for ``Promise<T>``; other text is returned unchanged."""
    if not text:
        return text
    stripped = text.strip()
    if stripped.startswith("Promise<") and stripped.endswith(">"):
        return stripped[len("Promise<") : -1].strip()
    return stripped


def clean_jsdoc(comment: str) -> str | None:
    """Extract the description part of a ``/** ... */`` comment."""
    body = comment.strip()
    if not body.startswith("/**"):
        return None
    body = body[3:]
    if body.endswith("*/"):
        body = body[:-2]

    lines: list[str] = []
    for raw in body.splitlines():
        line = raw.strip()
        if line.startswith("*"):
            line = line[1:].strip()
        if line.startswith("@"):
            break
        if line:
            lines.append(line)
    return " ".join(lines) or None
