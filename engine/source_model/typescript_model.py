"""
CodeAtlas TypeScript Source Model.

Parses TypeScript and TSX files with Tree-sitter and reports their
top-level declarations, imports and identifier tokens. Exact usage
resolution is delegated to ReferenceResolver.
Requires Python 3.11+.
"""

import time
from dataclasses import dataclass
from pathlib import Path

import tree_sitter_typescript as tstypescript
from tree_sitter import Language, Node, Parser, Tree

from source_model.errors import SourceParseError
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
    TypeParameterInfo,
    UsageSite,
    Visibility,
)
from source_model.resolver import ReferenceResolver
from source_model.syntax import (
    IDENTIFIER_NODES,
    PARAMETER_NODES,
    TYPE_NODES,
    clean_jsdoc,
    heritage_name,
    is_declaration_name,
    roles,
    walk,
)
from utils.config import Settings, get_settings
from utils.logger import LoggerMixin

FUNCTION_VALUE_NODES = frozenset({"arrow_function", "function_expression", "generator_function"})


@dataclass(slots=True)
class ParsedFile:
    """A parsed source file: project-relative path, bytes, tree and lines."""

    path: str
    source: bytes
    tree: Tree
    lines: list[str]

    def text(self, node: Node) -> str:
        """Extract text content from a node."""
        return self.source[node.start_byte : node.end_byte].decode("utf-8")

    def location(self, node: Node) -> SourceLocation:
        """Extract source location from a node."""
        return SourceLocation(
            file=self.path,
            line=node.start_point[0] + 1,  # 1-indexed
            column=node.start_point[1],
            end_line=node.end_point[0] + 1,
            end_column=node.end_point[1],
        )

    def line_text(self, node: Node) -> str:
        """Return the stripped source line a node starts on."""
        row = node.start_point[0]
        return self.lines[row].strip() if row < len(self.lines) else ""


class TypeScriptSourceModel(LoggerMixin):
    """
    Source model for a TypeScript project.

    Trees, declarations, imports and tokens are cached per file for the
    lifetime of the model; a model is meant to serve a single scan.
    """

    TS_LANG = Language(tstypescript.language_typescript())
    TSX_LANG = Language(tstypescript.language_tsx())

    def __init__(
        self,
        root: Path,
        files: list[Path] | None = None,
        settings: Settings | None = None,
    ) -> None:
        """
        Initialize the source model.

        Args:
            root: Project root; locations are reported relative to it
            files: Files belonging to the project
            settings: Settings override (defaults to get_settings())
        """
        settings = settings or get_settings()
        self.root = root.resolve()
        self.settings = settings.scanner
        self._ts_parser = Parser(self.TS_LANG)
        self._tsx_parser = Parser(self.TSX_LANG)

        self._paths: dict[str, Path] = {}
        for file_path in files or []:
            self.add_file(file_path)

        self._parsed: dict[str, ParsedFile] = {}
        self._failures: dict[str, SourceParseError] = {}
        self._declarations: dict[str, list[DeclarationInfo]] = {}
        self._imports: dict[str, list[ImportInfo]] = {}
        self._tokens: dict[str, list[IdentifierToken]] = {}

        self.resolver = ReferenceResolver(self, settings.resolver)

    # =========================================================================
    # Files and parsing
    # =========================================================================

    def add_file(self, file_path: Path) -> str:
        """Register a file and return its project-relative key."""
        resolved = file_path if file_path.is_absolute() else self.root / file_path
        key = self.relative_path(resolved)
        self._paths[key] = resolved
        return key

    def relative_path(self, file_path: Path) -> str:
        """Get path relative to project root, in POSIX form."""
        try:
            return file_path.resolve().relative_to(self.root).as_posix()
        except ValueError:
            return file_path.as_posix()

    @property
    def files(self) -> list[str]:
        """All registered files, sorted."""
        return sorted(self._paths)

    @property
    def failures(self) -> dict[str, SourceParseError]:
        """Files that failed to parse, keyed by relative path."""
        return dict(self._failures)

    def has_file(self, key: str) -> bool:
        return key in self._paths

    def parse(self, file: str | Path) -> ParsedFile:
        """
        Parse a file, caching the result.

        Raises:
            SourceParseError: The file is unreadable, not UTF-8, too large,
                or (when skip_syntax_errors is set) contains syntax errors.
                Failures are cached and re-raised on later calls.
        """
        key = self._key(file)
        if key in self._parsed:
            return self._parsed[key]
        if key in self._failures:
            raise self._failures[key]

        start_time = time.perf_counter()
        try:
            parsed = self._parse_path(key, self._paths.get(key, self.root / key))
        except SourceParseError as e:
            self._failures[key] = e
            self.log.debug("parse_failed", path=key, error=e.reason)
            raise

        self._parsed[key] = parsed
        elapsed_ms = (time.perf_counter() - start_time) * 1000
        self.log.debug("parsed_file", path=key, elapsed_ms=round(elapsed_ms, 2))
        return parsed

    def parsed_files(self) -> list[ParsedFile]:
        """Parse every registered file and return those that succeeded."""
        result = []
        for key in self.files:
            if key in self._failures:
                continue
            try:
                result.append(self.parse(key))
            except SourceParseError:
                continue  # recorded in self.failures
        return result

    def _key(self, file: str | Path) -> str:
        if isinstance(file, Path):
            return self.relative_path(file if file.is_absolute() else self.root / file)
        return file

    def _parse_path(self, key: str, path: Path) -> ParsedFile:
        try:
            size_mb = path.stat().st_size / (1024 * 1024)
            if size_mb > self.settings.max_file_size_mb:
                raise SourceParseError(key, f"file too large ({size_mb:.1f} MB)")
            source = path.read_bytes()
            text = source.decode("utf-8")
        except OSError as e:
            raise SourceParseError(key, f"unreadable: {e}") from e
        except UnicodeDecodeError as e:
            raise SourceParseError(key, f"not valid UTF-8: {e}") from e

        parser = self._tsx_parser if key.endswith(".tsx") else self._ts_parser
        tree = parser.parse(source)
        if tree.root_node.has_error and self.settings.skip_syntax_errors:
            raise SourceParseError(key, f"syntax error at line {self._first_error_line(tree)}")

        return ParsedFile(path=key, source=source, tree=tree, lines=text.splitlines())

    def _first_error_line(self, tree: Tree) -> int:
        for node in walk(tree.root_node):
            if node.type == "ERROR" or node.is_missing:
                return node.start_point[0] + 1
        return tree.root_node.start_point[0] + 1

    # =========================================================================
    # Source model operations
    # =========================================================================

    def get_declarations(self, file: str | Path) -> list[DeclarationInfo]:
        """
        Get the top-level class, interface, enum, type alias and function
        declarations of a file, including exported ones.
        """
        pf = self.parse(file)
        if pf.path not in self._declarations:
            self._declarations[pf.path] = self._extract_declarations(pf)
        return self._declarations[pf.path]

    def get_imports(self, file: str | Path) -> list[ImportInfo]:
        """Get every imported binding of a file."""
        pf = self.parse(file)
        if pf.path not in self._imports:
            self._imports[pf.path] = self._extract_imports(pf)
        return self._imports[pf.path]

    def get_identifiers(self, file: str | Path) -> list[IdentifierToken]:
        """Get every identifier-like token of a file, in document order."""
        pf = self.parse(file)
        if pf.path not in self._tokens:
            self._tokens[pf.path] = [
                self._token(pf, node)
                for node in walk(pf.tree.root_node)
                if node.type in IDENTIFIER_NODES
            ]
        return self._tokens[pf.path]

    def resolve_exact_references(self, handle: DeclarationHandle) -> list[UsageSite]:
        """
        Resolve every usage site of a declaration.

        Raises:
            UnsupportedHandleError: The handle's kind is not resolvable.
            SourceParseError: The declaring file cannot be parsed.
        """
        return self.resolver.resolve(handle)

    def usage_site(self, pf: ParsedFile, node: Node) -> UsageSite:
        """Describe an occurrence node as a UsageSite."""
        syntax, outer = roles(node)
        return UsageSite(
            location=pf.location(node),
            context_line=pf.line_text(node),
            syntax=syntax,
            outer_syntax=outer,
        )

    def _token(self, pf: ParsedFile, node: Node) -> IdentifierToken:
        syntax, outer = roles(node)
        return IdentifierToken(
            location=pf.location(node),
            context_line=pf.line_text(node),
            syntax=syntax,
            outer_syntax=outer,
            name=pf.text(node),
            is_declaration=is_declaration_name(node),
        )

    # =========================================================================
    # Declaration extraction
    # =========================================================================

    def _extract_declarations(self, pf: ParsedFile) -> list[DeclarationInfo]:
        declarations: list[DeclarationInfo] = []
        pending_signatures: dict[str, list[Node]] = {}

        for statement in pf.tree.root_node.named_children:
            target, exported = self._unwrap_statement(statement)
            if target is None:
                continue
            jsdoc = self._jsdoc(pf, statement)

            if target.type in ("class_declaration", "abstract_class_declaration"):
                declarations.append(self._parse_class(pf, target, exported, jsdoc))
            elif target.type == "interface_declaration":
                declarations.append(self._parse_interface(pf, target, exported, jsdoc))
            elif target.type == "enum_declaration":
                declarations.append(self._parse_enum(pf, target, exported, jsdoc))
            elif target.type == "type_alias_declaration":
                declarations.append(self._parse_type_alias(pf, target, exported, jsdoc))
            elif target.type == "function_signature":
                name_node = target.child_by_field_name("name")
                if name_node is not None:
                    pending_signatures.setdefault(pf.text(name_node), []).append(target)
            elif target.type in ("function_declaration", "generator_function_declaration"):
                name_node = target.child_by_field_name("name")
                signatures = pending_signatures.pop(pf.text(name_node), []) if name_node else []
                declarations.append(
                    self._parse_function(pf, target, target, exported, jsdoc, signatures)
                )
            elif target.type in ("lexical_declaration", "variable_declaration"):
                declarations.extend(self._parse_function_variables(pf, target, exported, jsdoc))

        # Ambient overloads with no implementation
        for signatures in pending_signatures.values():
            first = signatures[0]
            exported = first.parent is not None and first.parent.type == "export_statement"
            declarations.append(
                self._parse_function(pf, first, first, exported, None, signatures)
            )

        return declarations

    def _unwrap_statement(self, statement: Node) -> tuple[Node | None, bool]:
        """Return (declaration node, exported) for a top-level statement."""
        target: Node | None = statement
        exported = False
        if statement.type == "export_statement":
            target = statement.child_by_field_name("declaration")
            exported = True
        if target is not None and target.type == "ambient_declaration":
            inner = [c for c in target.named_children if c.type != "comment"]
            target = inner[0] if inner else None
        return target, exported

    def _jsdoc(self, pf: ParsedFile, statement: Node) -> str | None:
        previous = statement.prev_named_sibling
        if previous is None or previous.type != "comment":
            return None
        if previous.end_point[0] < statement.start_point[0] - 1:
            return None
        return clean_jsdoc(pf.text(previous))

    def _handle(
        self,
        pf: ParsedFile,
        kind: DeclarationKind | MemberKind,
        name: str,
        name_node: Node,
        owner: str | None = None,
        owner_kind: DeclarationKind | None = None,
    ) -> DeclarationHandle:
        return DeclarationHandle(
            kind=kind,
            file=pf.path,
            name=name,
            start_byte=name_node.start_byte,
            owner=owner,
            owner_kind=owner_kind,
        )

    def _parse_class(
        self, pf: ParsedFile, node: Node, exported: bool, jsdoc: str | None
    ) -> DeclarationInfo:
        """Parse a class declaration with its heritage and members."""
        name_node = node.child_by_field_name("name")
        name = pf.text(name_node) if name_node else "default"
        decl = DeclarationInfo(
            name=name,
            kind=DeclarationKind.CLASS,
            location=pf.location(node),
            handle=self._handle(pf, DeclarationKind.CLASS, name, name_node or node),
            jsdoc=jsdoc,
            is_exported=exported,
            is_abstract=node.type == "abstract_class_declaration",
            type_parameters=self._type_parameters(pf, node),
        )

        for child in node.named_children:
            if child.type != "class_heritage":
                continue
            for clause in child.named_children:
                if clause.type == "extends_clause":
                    value = clause.child_by_field_name("value")
                    if value is not None:
                        decl.extends.append(heritage_name(pf.text(value)))
                elif clause.type == "implements_clause":
                    for type_node in clause.named_children:
                        if type_node.type in TYPE_NODES:
                            decl.implements.append(heritage_name(pf.text(type_node)))

        body = node.child_by_field_name("body")
        if body is not None:
            decl.members = self._parse_class_members(pf, body, name)
        return decl

    def _parse_class_members(self, pf: ParsedFile, body: Node, owner: str) -> list[MemberInfo]:
        members: list[MemberInfo] = []
        signatures: dict[str, list[OverloadInfo]] = {}

        for child in body.named_children:
            name_node = child.child_by_field_name("name")
            if name_node is None:
                continue
            name = pf.text(name_node)
            modifiers = self._modifiers(pf, child)

            if child.type == "method_signature":
                signatures.setdefault(name, []).append(self._overload(pf, child))
                continue

            if child.type == "public_field_definition":
                member = MemberInfo(
                    name=name,
                    kind=MemberKind.PROPERTY,
                    location=pf.location(child),
                    handle=self._handle(
                        pf, MemberKind.PROPERTY, name, name_node, owner, DeclarationKind.CLASS
                    ),
                    type=self._annotation(pf, child.child_by_field_name("type")),
                    is_optional="?" in modifiers,
                )
            elif child.type in ("method_definition", "abstract_method_signature"):
                kind = MemberKind.CONSTRUCTOR if name == "constructor" else MemberKind.METHOD
                params_node = child.child_by_field_name("parameters")
                member = MemberInfo(
                    name=name,
                    kind=kind,
                    location=pf.location(child),
                    handle=self._handle(pf, kind, name, name_node, owner, DeclarationKind.CLASS),
                    parameters=self._parameters(pf, params_node),
                    type=self._annotation(pf, child.child_by_field_name("return_type")),
                    type_parameters=self._type_parameters(pf, child),
                    overloads=signatures.pop(name, []),
                    is_abstract=child.type == "abstract_method_signature",
                )
                if kind == MemberKind.CONSTRUCTOR and params_node is not None:
                    members.extend(self._parameter_properties(pf, params_node, owner))
            else:
                continue

            member.is_static = "static" in modifiers
            member.is_abstract = member.is_abstract or "abstract" in modifiers
            member.visibility = self._visibility(modifiers)
            member.jsdoc = self._jsdoc(pf, child)
            members.append(member)

        return members

    def _parameter_properties(
        self, pf: ParsedFile, params_node: Node, owner: str
    ) -> list[MemberInfo]:
        """Constructor parameters declared with an accessibility or readonly modifier."""
        properties = []
        for param in params_node.named_children:
            if param.type not in PARAMETER_NODES:
                continue
            modifiers = self._modifiers(pf, param)
            if not modifiers & {"public", "protected", "private", "readonly"}:
                continue
            pattern = param.child_by_field_name("pattern")
            if pattern is None or pattern.type != "identifier":
                continue
            name = pf.text(pattern)
            properties.append(
                MemberInfo(
                    name=name,
                    kind=MemberKind.PROPERTY,
                    location=pf.location(param),
                    handle=self._handle(
                        pf, MemberKind.PROPERTY, name, pattern, owner, DeclarationKind.CLASS
                    ),
                    type=self._annotation(pf, param.child_by_field_name("type")),
                    is_optional=param.type == "optional_parameter",
                    is_parameter_property=True,
                    visibility=self._visibility(modifiers),
                )
            )
        return properties

    def _parse_interface(
        self, pf: ParsedFile, node: Node, exported: bool, jsdoc: str | None
    ) -> DeclarationInfo:
        """Parse an interface declaration with its extends list and members."""
        name_node = node.child_by_field_name("name")
        name = pf.text(name_node)
        decl = DeclarationInfo(
            name=name,
            kind=DeclarationKind.INTERFACE,
            location=pf.location(node),
            handle=self._handle(pf, DeclarationKind.INTERFACE, name, name_node),
            jsdoc=jsdoc,
            is_exported=exported,
            type_parameters=self._type_parameters(pf, node),
        )

        for child in node.named_children:
            if child.type == "extends_type_clause":
                for type_node in child.named_children:
                    if type_node.type in TYPE_NODES:
                        decl.extends.append(heritage_name(pf.text(type_node)))

        body = node.child_by_field_name("body")
        if body is None:
            return decl

        for child in body.named_children:
            member_name_node = child.child_by_field_name("name")
            if member_name_node is None:
                continue
            member_name = pf.text(member_name_node)
            modifiers = self._modifiers(pf, child)

            if child.type == "property_signature":
                kind = MemberKind.PROPERTY
                type_text = self._annotation(pf, child.child_by_field_name("type"))
                parameters: list[ParameterInfo] = []
            elif child.type == "method_signature":
                existing = decl.find_member(member_name, MemberKind.METHOD)
                if existing is not None:
                    existing.overloads.append(self._overload(pf, child))
                    continue
                kind = MemberKind.METHOD
                type_text = self._annotation(pf, child.child_by_field_name("return_type"))
                parameters = self._parameters(pf, child.child_by_field_name("parameters"))
            else:
                continue

            decl.members.append(
                MemberInfo(
                    name=member_name,
                    kind=kind,
                    location=pf.location(child),
                    handle=self._handle(
                        pf, kind, member_name, member_name_node, name, DeclarationKind.INTERFACE
                    ),
                    parameters=parameters,
                    type=type_text,
                    is_optional="?" in modifiers,
                    jsdoc=self._jsdoc(pf, child),
                )
            )
        return decl

    def _parse_enum(
        self, pf: ParsedFile, node: Node, exported: bool, jsdoc: str | None
    ) -> DeclarationInfo:
        name_node = node.child_by_field_name("name")
        name = pf.text(name_node)
        decl = DeclarationInfo(
            name=name,
            kind=DeclarationKind.ENUM,
            location=pf.location(node),
            handle=self._handle(pf, DeclarationKind.ENUM, name, name_node),
            jsdoc=jsdoc,
            is_exported=exported,
        )
        body = node.child_by_field_name("body")
        if body is not None:
            for child in body.named_children:
                if child.type == "enum_assignment":
                    member_node = child.child_by_field_name("name")
                    if member_node is not None:
                        decl.enum_members.append(pf.text(member_node))
                elif child.type in ("property_identifier", "string"):
                    decl.enum_members.append(pf.text(child).strip("'\""))
        return decl

    def _parse_type_alias(
        self, pf: ParsedFile, node: Node, exported: bool, jsdoc: str | None
    ) -> DeclarationInfo:
        name_node = node.child_by_field_name("name")
        name = pf.text(name_node)
        value = node.child_by_field_name("value")
        return DeclarationInfo(
            name=name,
            kind=DeclarationKind.TYPE_ALIAS,
            location=pf.location(node),
            handle=self._handle(pf, DeclarationKind.TYPE_ALIAS, name, name_node),
            jsdoc=jsdoc,
            is_exported=exported,
            type_parameters=self._type_parameters(pf, node),
            type_definition=pf.text(value) if value is not None else None,
        )

    def _parse_function(
        self,
        pf: ParsedFile,
        span: Node,
        node: Node,
        exported: bool,
        jsdoc: str | None,
        signatures: list[Node],
        name_node: Node | None = None,
    ) -> DeclarationInfo:
        """
        Parse a function.

        span is the node whose location is reported; node carries the
        parameters and return type (the arrow function for const-bound
        functions, where name_node is the declarator's name).
        """
        name_node = name_node or node.child_by_field_name("name")
        name = pf.text(name_node) if name_node else "default"
        return DeclarationInfo(
            name=name,
            kind=DeclarationKind.FUNCTION,
            location=pf.location(span),
            handle=self._handle(pf, DeclarationKind.FUNCTION, name, name_node or node),
            jsdoc=jsdoc,
            is_exported=exported,
            type_parameters=self._type_parameters(pf, node),
            parameters=self._parameters(pf, node.child_by_field_name("parameters")),
            return_type=self._annotation(pf, node.child_by_field_name("return_type")),
            overloads=[self._overload(pf, sig) for sig in signatures],
        )

    def _parse_function_variables(
        self, pf: ParsedFile, node: Node, exported: bool, jsdoc: str | None
    ) -> list[DeclarationInfo]:
        """Functions bound with ``const name = (...) => ...``."""
        functions = []
        for declarator in node.named_children:
            if declarator.type != "variable_declarator":
                continue
            name_node = declarator.child_by_field_name("name")
            value = declarator.child_by_field_name("value")
            if name_node is None or name_node.type != "identifier":
                continue
            if value is None or value.type not in FUNCTION_VALUE_NODES:
                continue
            functions.append(
                self._parse_function(pf, node, value, exported, jsdoc, [], name_node=name_node)
            )
        return functions

    # =========================================================================
    # Shared extraction helpers
    # =========================================================================

    def _modifiers(self, pf: ParsedFile, node: Node) -> set[str]:
        """Collect modifier keywords (static, abstract, readonly, ?, accessibility)."""
        modifiers = set()
        for child in node.children:
            if child.type == "accessibility_modifier":
                modifiers.add(pf.text(child))
            elif child.type in ("static", "abstract", "readonly", "?", "override_modifier"):
                modifiers.add(child.type)
        return modifiers

    def _visibility(self, modifiers: set[str]) -> Visibility | None:
        for visibility in Visibility:
            if visibility.value in modifiers:
                return visibility
        return None

    def _annotation(self, pf: ParsedFile, node: Node | None) -> str | None:
        """Text of the type inside a ``: T`` annotation."""
        if node is None:
            return None
        inner = [c for c in node.named_children if c.type != "comment"]
        if inner:
            return pf.text(inner[-1])
        return pf.text(node).lstrip(":").strip() or None

    def _parameters(self, pf: ParsedFile, node: Node | None) -> list[ParameterInfo]:
        if node is None:
            return []
        params = []
        for param in node.named_children:
            if param.type not in PARAMETER_NODES:
                continue
            pattern = param.child_by_field_name("pattern")
            if pattern is None:
                continue
            is_rest = pattern.type == "rest_pattern"
            if is_rest and pattern.named_children:
                name = pf.text(pattern.named_children[0])
            else:
                name = pf.text(pattern)
            value = param.child_by_field_name("value")
            params.append(
                ParameterInfo(
                    name=name,
                    type=self._annotation(pf, param.child_by_field_name("type")),
                    optional=param.type == "optional_parameter",
                    default_value=pf.text(value) if value is not None else None,
                    is_rest=is_rest,
                )
            )
        return params

    def _overload(self, pf: ParsedFile, node: Node) -> OverloadInfo:
        return OverloadInfo(
            parameters=self._parameters(pf, node.child_by_field_name("parameters")),
            return_type=self._annotation(pf, node.child_by_field_name("return_type")),
        )

    def _type_parameters(self, pf: ParsedFile, node: Node) -> list[TypeParameterInfo]:
        params_node = node.child_by_field_name("type_parameters")
        if params_node is None:
            return []
        result = []
        for param in params_node.named_children:
            if param.type != "type_parameter":
                continue
            name_node = param.child_by_field_name("name")
            if name_node is None:
                continue
            constraint = param.child_by_field_name("constraint")
            default = param.child_by_field_name("value")
            result.append(
                TypeParameterInfo(
                    name=pf.text(name_node),
                    constraint=self._annotation(pf, constraint),
                    default_type=self._annotation(pf, default),
                )
            )
        return result

    # =========================================================================
    # Imports
    # =========================================================================

    def _extract_imports(self, pf: ParsedFile) -> list[ImportInfo]:
        imports: list[ImportInfo] = []
        for statement in pf.tree.root_node.named_children:
            if statement.type != "import_statement":
                continue
            source_node = statement.child_by_field_name("source")
            if source_node is None:
                continue
            module = pf.text(source_node).strip("'\"`")
            is_external = not module.startswith((".", "/"))

            for clause in statement.named_children:
                if clause.type == "import_clause":
                    imports.extend(self._import_clause(pf, clause, module, is_external))
                elif clause.type == "import_require_clause":
                    ident = next((c for c in clause.named_children if c.type == "identifier"), None)
                    if ident is not None:
                        imports.append(
                            ImportInfo(
                                name="*",
                                local_name=pf.text(ident),
                                module=module,
                                is_external=is_external,
                                is_namespace=True,
                            )
                        )
        return imports

    def _import_clause(
        self, pf: ParsedFile, clause: Node, module: str, is_external: bool
    ) -> list[ImportInfo]:
        imports = []
        for child in clause.named_children:
            if child.type == "identifier":
                imports.append(
                    ImportInfo(
                        name="default",
                        local_name=pf.text(child),
                        module=module,
                        is_external=is_external,
                        is_default=True,
                    )
                )
            elif child.type == "namespace_import":
                ident = next((c for c in child.named_children if c.type == "identifier"), None)
                if ident is not None:
                    imports.append(
                        ImportInfo(
                            name="*",
                            local_name=pf.text(ident),
                            module=module,
                            is_external=is_external,
                            is_namespace=True,
                        )
                    )
            elif child.type == "named_imports":
                for specifier in child.named_children:
                    if specifier.type != "import_specifier":
                        continue
                    name_node = specifier.child_by_field_name("name")
                    alias_node = specifier.child_by_field_name("alias")
                    if name_node is None:
                        continue
                    name = pf.text(name_node).strip("'\"")
                    imports.append(
                        ImportInfo(
                            name=name,
                            local_name=pf.text(alias_node) if alias_node else name,
                            module=module,
                            is_external=is_external,
                        )
                    )
        return imports
