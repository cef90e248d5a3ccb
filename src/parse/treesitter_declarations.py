"""Tree-sitter based declaration extraction for Python modules and stubs."""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

from tree_sitter import Language, Node, Parser
from tree_sitter_python import language as get_python_language

from metadata.models import (
    ClassMetadata,
    FunctionMetadata,
    InterfaceMetadata,
    MemberKind,
    MemberMetadata,
    Reference,
)
from paths.utils import has_suffix

if TYPE_CHECKING:
    from metadata.models import SymbolDescriptor, SymbolTable
    from vfs.filesystem import FileSystem

PYTHON_DECLARATION_EXTENSIONS: tuple[str, ...] = (".pyi", ".py")

_PROTOCOL_BASES = frozenset(
    {"Protocol", "typing.Protocol", "typing_extensions.Protocol"}
)
_NON_INHERITANCE_BASES = frozenset({"object", "Generic", "typing.Generic"})
_SPLAT_PATTERNS = frozenset({"list_splat_pattern", "dictionary_splat_pattern"})

_PARSER: Parser | None = None


def _get_parser() -> Parser:
    """Initialize and return the Tree-sitter parser with Python language."""
    global _PARSER
    if _PARSER is None:
        lang = Language(get_python_language())
        _PARSER = Parser(lang)

    return _PARSER


def _text(node: Node | None) -> str | None:
    if node is None or not node.text:
        return None
    return node.text.decode("utf8")


def _unwrap_decorated(node: Node) -> Node:
    if node.type == "decorated_definition":
        definition = node.child_by_field_name("definition")
        if definition is not None:
            return definition
    return node


def _extract_base_classes(node: Node) -> list[str]:
    """Extract base class names from a class definition node, as written."""
    superclasses = node.child_by_field_name("superclasses")
    if superclasses is None:
        return []

    bases: list[str] = []
    for child in superclasses.named_children:
        if child.type in ("identifier", "attribute"):
            name = _text(child)
        elif child.type == "subscript":
            # e.g. Generic[T] or Protocol[T]: keep the base name
            name = _text(child.child_by_field_name("value"))
        elif child.type == "call":
            name = _text(child.child_by_field_name("function"))
        else:
            # keyword arguments such as metaclass=ABCMeta
            continue
        if name:
            bases.append(name)
    return bases


def _reference(dotted_name: str) -> Reference:
    module, _, name = dotted_name.rpartition(".")
    if module:
        return Reference(name=name, module=module)
    return Reference(name=name)


def _string_literal(node: Node) -> str | None:
    if node.type != "string":
        return None
    return "".join(
        _text(child) or ""
        for child in node.children
        if child.type == "string_content"
    )


def _explicit_exports(root: Node) -> set[str] | None:
    """Return the names listed in a module-level ``__all__``, if declared."""
    for child in root.children:
        if child.type != "expression_statement":
            continue
        for expr in child.named_children:
            if expr.type != "assignment":
                continue
            if _text(expr.child_by_field_name("left")) != "__all__":
                continue
            value = expr.child_by_field_name("right")
            if value is None or value.type not in ("list", "tuple"):
                return None
            names = (_string_literal(item) for item in value.named_children)
            return {name for name in names if name}
    return None


def _add_member(
    members: dict[str, list[MemberMetadata]], name: str, kind: MemberKind
) -> None:
    members.setdefault(name, []).append(MemberMetadata(symbolic=kind))


def _class_members(body: Node | None) -> dict[str, list[MemberMetadata]]:
    members: dict[str, list[MemberMetadata]] = {}
    if body is None:
        return members

    for child in body.children:
        node = _unwrap_decorated(child)
        if node.type == "function_definition":
            name = _text(node.child_by_field_name("name"))
            if name == "__init__":
                _add_member(members, name, "constructor")
            elif name and not name.startswith("_"):
                _add_member(members, name, "method")
        elif node.type == "expression_statement":
            for expr in node.named_children:
                if expr.type != "assignment":
                    continue
                left = expr.child_by_field_name("left")
                if left is None or left.type != "identifier":
                    continue
                if expr.child_by_field_name("type") is None:
                    continue
                name = _text(left)
                if name and not name.startswith("_"):
                    _add_member(members, name, "property")
    return members


def _class_descriptor(node: Node) -> SymbolDescriptor:
    bases = _extract_base_classes(node)
    parents = [
        base
        for base in bases
        if base not in _PROTOCOL_BASES and base not in _NON_INHERITANCE_BASES
    ]
    fields: dict[str, Any] = {}
    if parents:
        fields["extends"] = _reference(parents[0])
    members = _class_members(node.child_by_field_name("body"))
    if members:
        fields["members"] = members

    if any(base in _PROTOCOL_BASES for base in bases):
        return InterfaceMetadata(**fields)
    return ClassMetadata(**fields)


def _parameter_names(node: Node) -> list[str]:
    parameters = node.child_by_field_name("parameters")
    if parameters is None:
        return []

    names: list[str] = []
    for child in parameters.named_children:
        target = child.child_by_field_name("name")
        if target is None:
            target = child.named_children[0] if child.named_children else child
        if target.type in _SPLAT_PATTERNS and target.named_children:
            target = target.named_children[0]
        if target.type == "identifier":
            name = _text(target)
            if name:
                names.append(name)
    return names


def extract_declarations(root: Node) -> SymbolTable:
    """Collect the exported classes and functions of a parsed module.

    Exports follow ``__all__`` when the module declares one, and otherwise
    every top-level name without a leading underscore.
    """
    exported = _explicit_exports(root)
    symbols: SymbolTable = {}

    for child in root.children:
        node = _unwrap_decorated(child)
        if node.type == "class_definition":
            descriptor = _class_descriptor(node)
        elif node.type == "function_definition":
            descriptor = FunctionMetadata(parameters=_parameter_names(node))
        else:
            continue

        name = _text(node.child_by_field_name("name"))
        if not name:
            continue
        if exported is not None and name not in exported:
            continue
        if exported is None and name.startswith("_"):
            continue
        # Later definitions win, as they do at import time.
        symbols[name] = descriptor

    return symbols


class TreeSitterDeclarationSource:
    """Declaration source that parses Python modules and stub files.

    Files with other extensions, and files that cannot be read, are unknown.
    """

    def __init__(
        self,
        filesystem: FileSystem,
        *,
        extensions: tuple[str, ...] = PYTHON_DECLARATION_EXTENSIONS,
    ) -> None:
        self.filesystem = filesystem
        self.extensions = extensions

    def exported_symbols(self, file: str) -> SymbolTable | None:
        if not has_suffix(file, self.extensions):
            return None
        try:
            source_bytes = self.filesystem.read_file(file)
        except (FileNotFoundError, IsADirectoryError, NotADirectoryError):
            return None

        tree = _get_parser().parse(source_bytes)
        return extract_declarations(tree.root_node)


__all__ = [
    "PYTHON_DECLARATION_EXTENSIONS",
    "TreeSitterDeclarationSource",
    "extract_declarations",
]
