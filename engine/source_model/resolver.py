"""
CodeAtlas Exact Reference Resolver.

Resolves the usage sites of a single declaration across the project.
Project-wide indexes (member accesses by property name, constructions,
identifiers, type declarations) are built once per source model, so
resolving many declarations never rescans the project.
Requires Python 3.11+.
"""

import posixpath
from collections import defaultdict
from typing import TYPE_CHECKING

from tree_sitter import Node

from source_model.errors import UnsupportedHandleError
from source_model.models import (
    DeclarationHandle,
    DeclarationInfo,
    DeclarationKind,
    ImportInfo,
    MemberKind,
    SyntaxKind,
    UsageSite,
)
from source_model.syntax import (
    BLOCK_SCOPES,
    CLASS_NODES,
    FUNCTION_SCOPES,
    PARAMETER_NODES,
    base_type_name,
    heritage_name,
    is_declaration_name,
    parent_role,
    unwrap_promise,
    walk,
)
from utils.config import ResolverSettings
from utils.logger import LoggerMixin

if TYPE_CHECKING:
    from source_model.typescript_model import ParsedFile, TypeScriptSourceModel

# (file, name) of a resolved declaration
TargetKey = tuple[str, str]
Occurrence = tuple["ParsedFile", Node]

MODULE_SUFFIXES = ("", ".ts", ".tsx", ".d.ts", "/index.ts", "/index.tsx")


class ReferenceResolver(LoggerMixin):
    """
    Exact usage resolution for one TypeScriptSourceModel.

    Member accesses are matched by inferring the receiver's type and
    walking extends chains to the type that declares the member.
    """

    def __init__(self, model: "TypeScriptSourceModel", settings: ResolverSettings) -> None:
        self._model = model
        self._settings = settings
        self._indexed = False

        self._types: dict[str, list[DeclarationInfo]] = defaultdict(list)
        self._functions: dict[str, list[DeclarationInfo]] = defaultdict(list)
        self._accesses: dict[str, list[Occurrence]] = defaultdict(list)
        self._constructions: dict[TargetKey, list[Occurrence]] = defaultdict(list)
        self._identifiers: dict[tuple[str, str], list[Node]] = defaultdict(list)
        self._parsed: dict[str, "ParsedFile"] = {}

        self._import_bindings: dict[str, dict[str, ImportInfo]] = {}
        self._owner_cache: dict[tuple[str, int, str], TargetKey | None] = {}

    def resolve(self, handle: DeclarationHandle) -> list[UsageSite]:
        """Return every usage site of the declaration the handle addresses."""
        self._ensure_indexes()

        if handle.kind in (MemberKind.METHOD, MemberKind.PROPERTY):
            return self._resolve_member(handle)
        if handle.kind == MemberKind.CONSTRUCTOR:
            return self._resolve_constructor(handle)
        if handle.kind == DeclarationKind.FUNCTION:
            return self._resolve_function(handle)
        raise UnsupportedHandleError(
            f"exact resolution does not cover {handle.kind.value} declarations ({handle.name})"
        )

    # =========================================================================
    # Index construction
    # =========================================================================

    def _ensure_indexes(self) -> None:
        if self._indexed:
            return

        parsed_files = self._model.parsed_files()
        for pf in parsed_files:
            self._parsed[pf.path] = pf
            for decl in self._model.get_declarations(pf.path):
                if decl.kind in (DeclarationKind.CLASS, DeclarationKind.INTERFACE):
                    self._types[decl.name].append(decl)
                elif decl.kind == DeclarationKind.FUNCTION:
                    self._functions[decl.name].append(decl)

        super_calls: list[Occurrence] = []
        constructions: list[Occurrence] = []
        for pf in parsed_files:
            for node in walk(pf.tree.root_node):
                if node.type == "member_expression":
                    prop = node.child_by_field_name("property")
                    if prop is not None:
                        self._accesses[pf.text(prop)].append((pf, node))
                elif node.type == "new_expression":
                    ctor = node.child_by_field_name("constructor")
                    if ctor is not None and ctor.type == "identifier":
                        constructions.append((pf, ctor))
                elif node.type == "call_expression":
                    fn = node.child_by_field_name("function")
                    if fn is not None and fn.type == "super":
                        super_calls.append((pf, fn))
                elif node.type == "identifier":
                    self._identifiers[(pf.path, pf.text(node))].append(node)

        for pf, ctor in constructions:
            target = self._class_target(pf.text(ctor), pf.path)
            if target is not None:
                self._constructions[target].append((pf, ctor))

        for pf, sup in super_calls:
            cls = self._enclosing_class(sup)
            parent = self._superclass_name(pf, cls) if cls is not None else None
            target = self._class_target(parent, pf.path) if parent else None
            if target is not None:
                self._constructions[target].append((pf, sup))

        self._indexed = True
        self.log.debug(
            "resolver_indexed",
            files=len(parsed_files),
            types=len(self._types),
            member_names=len(self._accesses),
        )

    # =========================================================================
    # Resolution per declaration kind
    # =========================================================================

    def _resolve_member(self, handle: DeclarationHandle) -> list[UsageSite]:
        sites = []
        wanted: TargetKey = (handle.file, handle.owner or "")

        for pf, access in self._accesses.get(handle.name, []):
            prop = access.child_by_field_name("property")
            key = (pf.path, access.start_byte, handle.name)
            if key not in self._owner_cache:
                self._owner_cache[key] = self._access_owner(pf, access, handle.name)
            owner = self._owner_cache[key]

            if owner is None:
                if self._settings.include_unresolved_receivers and not self._is_resolvable(
                    pf, access
                ):
                    sites.append(self._model.usage_site(pf, prop))
                continue
            if owner == wanted:
                sites.append(self._model.usage_site(pf, prop))
        return sites

    def _resolve_constructor(self, handle: DeclarationHandle) -> list[UsageSite]:
        occurrences = self._constructions.get((handle.file, handle.owner or ""), [])
        return [self._model.usage_site(pf, node) for pf, node in occurrences]

    def _resolve_function(self, handle: DeclarationHandle) -> list[UsageSite]:
        decl = next(
            (
                d
                for d in self._functions.get(handle.name, [])
                if d.handle.file == handle.file and d.handle.start_byte == handle.start_byte
            ),
            None,
        )
        exported = decl.is_exported if decl is not None else False

        # (file, local name) pairs that denote the function
        bindings: list[tuple[str, str]] = [(handle.file, handle.name)]
        namespaces: list[tuple[str, str]] = []
        if exported:
            for path in sorted(self._parsed):
                if path == handle.file:
                    continue
                for binding in self._bindings_of(path).values():
                    if self._resolve_module(path, binding.module) != handle.file:
                        continue
                    if binding.is_namespace:
                        namespaces.append((path, binding.local_name))
                    elif binding.name == handle.name:
                        bindings.append((path, binding.local_name))

        sites = []
        for path, local_name in bindings:
            pf = self._parsed.get(path)
            if pf is None:
                continue
            for node in self._identifiers.get((path, local_name), []):
                if is_declaration_name(node):
                    continue
                if parent_role(node) == SyntaxKind.MODULE_BINDING:
                    continue
                if path != handle.file and self._is_locally_bound(pf, node, local_name):
                    continue
                sites.append(self._model.usage_site(pf, node))

        for path, namespace in namespaces:
            pf = self._parsed[path]
            for access_file, access in self._accesses.get(handle.name, []):
                if access_file.path != path:
                    continue
                receiver = access.child_by_field_name("object")
                if receiver is None or receiver.type != "identifier":
                    continue
                if pf.text(receiver) == namespace:
                    prop = access.child_by_field_name("property")
                    sites.append(self._model.usage_site(pf, prop))

        sites.sort(key=lambda s: (s.location.file, s.location.line, s.location.column))
        return sites

    # =========================================================================
    # Type lookup
    # =========================================================================

    def _bindings_of(self, path: str) -> dict[str, ImportInfo]:
        """Relative-module imports of a file, keyed by local name."""
        if path not in self._import_bindings:
            self._import_bindings[path] = {
                imp.local_name: imp
                for imp in self._model.get_imports(path)
                if not imp.is_external
            }
        return self._import_bindings[path]

    def _resolve_module(self, from_file: str, specifier: str) -> str | None:
        """Map a relative module specifier to a registered project file."""
        base = posixpath.dirname(from_file)
        joined = posixpath.normpath(posixpath.join(base, specifier))
        stems = [joined]
        for js_ext, ts_ext in ((".js", ""), (".jsx", ""), (".mjs", "")):
            if joined.endswith(js_ext):
                stems.append(joined[: -len(js_ext)] + ts_ext)
        for stem in stems:
            for suffix in MODULE_SUFFIXES:
                candidate = stem + suffix
                if self._model.has_file(candidate):
                    return candidate
        return None

    def _lookup(
        self, index: dict[str, list[DeclarationInfo]], name: str, from_file: str
    ) -> list[DeclarationInfo]:
        """
        Declarations a name denotes when used in from_file.

        An import binding wins; otherwise same-file declarations come
        before the rest, which keep their index order.
        """
        binding = self._bindings_of(from_file).get(name)
        if binding is not None and not binding.is_namespace:
            target_file = self._resolve_module(from_file, binding.module)
            found = [
                d for d in index.get(binding.name, []) if d.location.file == target_file
            ]
            if found:
                return found
        candidates = index.get(name, [])
        return sorted(candidates, key=lambda d: d.location.file != from_file)

    def _class_target(self, name: str, from_file: str) -> TargetKey | None:
        for decl in self._lookup(self._types, name, from_file):
            if decl.kind == DeclarationKind.CLASS:
                return (decl.location.file, decl.name)
        return None

    def _member_owner(
        self, type_name: str, member: str, from_file: str, seen: set[str] | None = None
    ) -> DeclarationInfo | None:
        """Find the class or interface that declares member, walking extends chains."""
        seen = seen if seen is not None else set()
        candidates = self._lookup(self._types, type_name, from_file)
        for decl in candidates:
            marker = f"{decl.location.file}::{decl.name}"
            if marker in seen:
                continue
            seen.add(marker)
            if any(m.name == member and m.kind != MemberKind.CONSTRUCTOR for m in decl.members):
                return decl
            for parent in decl.extends:
                owner = self._member_owner(parent, member, decl.location.file, seen)
                if owner is not None:
                    return owner
        return None

    def _access_owner(self, pf: "ParsedFile", access: Node, member: str) -> TargetKey | None:
        receiver = access.child_by_field_name("object")
        type_name = base_type_name(self._infer(pf, receiver, 0))
        if type_name is None:
            return None
        owner = self._member_owner(type_name, member, pf.path)
        if owner is None:
            return None
        return (owner.location.file, owner.name)

    def _is_resolvable(self, pf: "ParsedFile", access: Node) -> bool:
        """Whether the receiver's type is known at all (even if unrelated)."""
        receiver = access.child_by_field_name("object")
        type_name = base_type_name(self._infer(pf, receiver, 0))
        return type_name is not None and bool(self._lookup(self._types, type_name, pf.path))

    # =========================================================================
    # Receiver type inference
    # =========================================================================

    def _infer(self, pf: "ParsedFile", node: Node | None, depth: int) -> str | None:
        """Infer the type text of an expression, or None when unknown."""
        if node is None or depth > self._settings.max_inference_depth:
            return None

        kind = node.type
        if kind == "this":
            cls = self._enclosing_class(node)
            name_node = cls.child_by_field_name("name") if cls is not None else None
            return pf.text(name_node) if name_node is not None else None
        if kind == "super":
            cls = self._enclosing_class(node)
            return self._superclass_name(pf, cls) if cls is not None else None
        if kind == "identifier":
            return self._infer_identifier(pf, node, depth)
        if kind in ("parenthesized_expression", "non_null_expression"):
            inner = [c for c in node.named_children if c.type != "comment"]
            return self._infer(pf, inner[0], depth + 1) if inner else None
        if kind in ("as_expression", "satisfies_expression"):
            parts = node.named_children
            return pf.text(parts[-1]) if len(parts) > 1 else None
        if kind == "await_expression":
            inner = node.named_children
            return unwrap_promise(self._infer(pf, inner[0], depth + 1)) if inner else None
        if kind == "new_expression":
            ctor = node.child_by_field_name("constructor")
            return pf.text(ctor) if ctor is not None else None
        if kind == "member_expression":
            return self._infer_member(pf, node, depth, want_call=False)
        if kind == "call_expression":
            fn = node.child_by_field_name("function")
            if fn is None:
                return None
            if fn.type == "member_expression":
                return self._infer_member(pf, fn, depth, want_call=True)
            if fn.type == "identifier":
                decls = self._lookup(self._functions, pf.text(fn), pf.path)
                return decls[0].return_type if decls else None
        return None

    def _infer_member(
        self, pf: "ParsedFile", access: Node, depth: int, want_call: bool
    ) -> str | None:
        receiver = access.child_by_field_name("object")
        prop = access.child_by_field_name("property")
        if prop is None:
            return None
        owner_name = base_type_name(self._infer(pf, receiver, depth + 1))
        if owner_name is None:
            return None
        member_name = pf.text(prop)
        owner = self._member_owner(owner_name, member_name, pf.path)
        if owner is None:
            return None
        wanted = MemberKind.METHOD if want_call else MemberKind.PROPERTY
        member = owner.find_member(member_name, wanted)
        return member.type if member is not None else None

    def _infer_identifier(self, pf: "ParsedFile", node: Node, depth: int) -> str | None:
        name = pf.text(node)
        binding = self._find_binding(pf, node, name)
        if binding is None:
            # Unbound identifiers naming a type are static accesses
            return name if self._lookup(self._types, name, pf.path) else None

        if binding.type == "variable_declarator" or binding.type in PARAMETER_NODES:
            annotation = binding.child_by_field_name("type")
            if annotation is not None:
                inner = annotation.named_children
                return pf.text(inner[-1]) if inner else None
            value = binding.child_by_field_name("value")
            return self._infer(pf, value, depth + 1)
        return None

    def _find_binding(self, pf: "ParsedFile", node: Node, name: str) -> Node | None:
        """
        Find the nearest declaration of name visible from node.

        Returns the variable declarator or parameter node, or the
        enclosing construct (arrow function, for loop) for untyped
        bindings; None when the name is not locally bound.
        """
        current = node.parent
        while current is not None:
            if current.type in FUNCTION_SCOPES:
                single = current.child_by_field_name("parameter")
                if single is not None and pf.text(single) == name:
                    return current
                params = current.child_by_field_name("parameters")
                if params is not None:
                    for param in params.named_children:
                        if param.type not in PARAMETER_NODES:
                            continue
                        pattern = param.child_by_field_name("pattern")
                        if pattern is not None and pattern.type == "identifier" and pf.text(pattern) == name:
                            return param
            elif current.type in BLOCK_SCOPES:
                declarator = self._declarator_in(pf, current, name)
                if declarator is not None:
                    return declarator
            elif current.type in ("for_in_statement", "for_statement", "catch_clause"):
                for child in current.named_children:
                    if child.type == "identifier" and pf.text(child) == name:
                        return current
                    if child.type in ("lexical_declaration", "variable_declaration"):
                        for declarator in child.named_children:
                            target = declarator.child_by_field_name("name")
                            if target is not None and pf.text(target) == name:
                                return declarator
            current = current.parent
        return None

    def _declarator_in(self, pf: "ParsedFile", block: Node, name: str) -> Node | None:
        for statement in block.named_children:
            if statement.type == "export_statement":
                statement = statement.child_by_field_name("declaration") or statement
            if statement.type not in ("lexical_declaration", "variable_declaration"):
                continue
            for declarator in statement.named_children:
                if declarator.type != "variable_declarator":
                    continue
                target = declarator.child_by_field_name("name")
                if target is not None and target.type == "identifier" and pf.text(target) == name:
                    return declarator
        return None

    def _is_locally_bound(self, pf: "ParsedFile", node: Node, name: str) -> bool:
        return self._find_binding(pf, node, name) is not None

    def _enclosing_class(self, node: Node) -> Node | None:
        current = node.parent
        while current is not None:
            if current.type in CLASS_NODES:
                return current
            current = current.parent
        return None

    def _superclass_name(self, pf: "ParsedFile", cls: Node) -> str | None:
        for child in cls.named_children:
            if child.type != "class_heritage":
                continue
            for clause in child.named_children:
                if clause.type == "extends_clause":
                    value = clause.child_by_field_name("value")
                    if value is not None:
                        return heritage_name(pf.text(value))
        return None
