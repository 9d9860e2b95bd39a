"""Tree-sitter backed Dart parser producing :mod:`dart_inspect.syntax` trees."""

from __future__ import annotations

import re
from abc import ABC, abstractmethod
from typing import Callable, Iterator, List, Optional, Sequence, Set, Tuple

from .syntax import (
    ClassDeclaration,
    CompilationUnit,
    Declaration,
    Directive,
    FieldDeclaration,
    ImportDirective,
    Member,
    OtherDeclaration,
    OtherDirective,
    OtherMember,
)

try:  # pragma: no cover - optional dependency
    from tree_sitter import Parser
    from tree_sitter_language_pack import get_parser

    TREE_SITTER_AVAILABLE = True
except ModuleNotFoundError:  # pragma: no cover - optional dependency
    Parser = None  # type: ignore[assignment]
    get_parser = None  # type: ignore[assignment]
    TREE_SITTER_AVAILABLE = False


_LANGUAGE_KEY = "dart"

_DIRECTIVE_KEYWORDS = {
    "library_name": "library",
    "part_directive": "part",
    "part_of_directive": "part of",
    "library_export": "export",
}

_IDENTIFIER_LISTS = {
    "initialized_identifier_list",
    "static_final_declaration_list",
    "identifier_list",
}

_NAMED_IDENTIFIERS = {"initialized_identifier", "static_final_declaration"}

_NON_CODE = {"annotation", "marker_annotation", "comment", "documentation_comment"}

_MODIFIER = re.compile(r"\s*\b(static|final|const|late|covariant|external|abstract|var)\b")
_COMMENT = re.compile(r"//[^\n]*|/\*.*?\*/", re.DOTALL)
_DEFERRED = re.compile(r"\bdeferred\b")
_STRING_LITERAL = re.compile(r"^(r?)('''|\"\"\"|'|\")(.*)\2$", re.DOTALL)

_MAX_DIAGNOSTICS = 20


class ParserUnavailableError(RuntimeError):
    """Raised when the tree-sitter Dart grammar cannot be loaded."""


class SourceParser(ABC):
    """Contract for turning Dart source text into a syntax tree."""

    @abstractmethod
    def parse(self, source: str) -> CompilationUnit:
        """Parse ``source``; must not raise on syntax errors."""


class _LazyNodes:
    """Re-iterable view that converts tree-sitter nodes on demand."""

    def __init__(self, nodes: Sequence, convert: Callable) -> None:  # type: ignore[type-arg]
        self._nodes = nodes
        self._convert = convert

    def __iter__(self) -> Iterator:  # type: ignore[type-arg]
        for node in self._nodes:
            converted = self._convert(node)
            if converted is not None:
                yield converted


class TreeSitterDartParser(SourceParser):
    """Parses Dart with the grammar bundled in ``tree_sitter_language_pack``.

    The grammar is loaded on construction so a missing or broken grammar
    surfaces as :class:`ParserUnavailableError` before any file is read.
    """

    def __init__(self) -> None:
        if not TREE_SITTER_AVAILABLE:
            raise ParserUnavailableError(
                "tree_sitter and tree_sitter_language_pack are required to parse Dart sources"
            )
        self._parser: Optional[Parser] = None
        self._get_parser()

    def parse(self, source: str) -> CompilationUnit:
        source_bytes = source.encode("utf-8")
        tree = self._get_parser().parse(source_bytes)
        root = tree.root_node
        converter = _Converter(source_bytes)
        diagnostics: Tuple[str, ...] = ()
        if root.has_error:
            diagnostics = tuple(_collect_errors(root))
        return CompilationUnit(
            directives=_LazyNodes(root.children, converter.directive),
            declarations=_LazyNodes(root.children, converter.declaration),
            diagnostics=diagnostics,
        )

    def _get_parser(self) -> Parser:
        if self._parser is None:
            try:
                self._parser = get_parser(_LANGUAGE_KEY)
            except Exception as exc:  # grammar lookup errors vary across releases
                raise ParserUnavailableError(
                    f"Failed to load the tree-sitter '{_LANGUAGE_KEY}' grammar: {exc}"
                ) from exc
        return self._parser


class _Converter:
    def __init__(self, source_bytes: bytes) -> None:
        self._source = source_bytes

    def _text(self, node, start: Optional[int] = None, end: Optional[int] = None) -> str:  # type: ignore[no-untyped-def]
        start = node.start_byte if start is None else start
        end = node.end_byte if end is None else end
        return self._source[start:end].decode("utf-8", errors="ignore")

    # Directives

    def directive(self, node) -> Optional[Directive]:  # type: ignore[no-untyped-def]
        if node.type in _DIRECTIVE_KEYWORDS:
            return OtherDirective(_DIRECTIVE_KEYWORDS[node.type])
        if node.type not in {"import_or_export", "library_import", "import_specification"}:
            return None
        spec = _find_first(node, {"import_specification"})
        if spec is None:
            keyword = "export" if _find_first(node, {"library_export"}) is not None else node.type
            return OtherDirective(keyword)
        return self._import(spec)

    def _import(self, spec) -> ImportDirective:  # type: ignore[no-untyped-def]
        uri_node = _find_first(spec, {"uri"}) or _find_first(spec, {"string_literal"})
        prefix_node = next(
            (child for child in spec.named_children if child.type == "identifier"), None
        )
        uri = _string_value(self._text(uri_node)) if uri_node is not None else None
        prefix = self._text(prefix_node) if prefix_node is not None else None
        deferred = False
        if uri_node is not None:
            end = prefix_node.start_byte if prefix_node is not None else spec.end_byte
            between = _COMMENT.sub(" ", self._text(spec, uri_node.end_byte, end))
            deferred = bool(_DEFERRED.search(between))
        return ImportDirective(uri=uri, prefix=prefix, deferred=deferred)

    # Declarations

    def declaration(self, node) -> Optional[Declaration]:  # type: ignore[no-untyped-def]
        if not node.is_named or node.type in _NON_CODE:
            return None
        if node.type in _DIRECTIVE_KEYWORDS or node.type in {
            "import_or_export",
            "library_import",
            "script_tag",
        }:
            return None
        if node.type != "class_definition":
            name_node = node.child_by_field_name("name")
            name = self._text(name_node) if name_node is not None else None
            return OtherDeclaration(kind=node.type, name=name)

        name_node = node.child_by_field_name("name") or next(
            (child for child in node.named_children if child.type == "identifier"), None
        )
        body = node.child_by_field_name("body") or next(
            (child for child in node.named_children if child.type == "class_body"), None
        )
        members: Tuple[Member, ...] = ()
        if body is not None:
            members = tuple(self._member(child) for child in body.named_children)
        name = self._text(name_node) if name_node is not None else ""
        return ClassDeclaration(name=name, members=members)

    def _member(self, node) -> Member:  # type: ignore[no-untyped-def]
        if node.type != "declaration":
            return OtherMember(node.type)
        list_node = next(
            (child for child in node.named_children if child.type in _IDENTIFIER_LISTS), None
        )
        if list_node is None:
            return OtherMember(node.type)

        start = node.start_byte
        for child in node.children:
            if child.start_byte >= list_node.start_byte:
                break
            if child.type in _NON_CODE:
                start = child.end_byte
        head = _COMMENT.sub(" ", self._text(node, start, list_node.start_byte))

        modifiers: Set[str] = set()
        position = 0
        while True:
            match = _MODIFIER.match(head, position)
            if match is None:
                break
            modifiers.add(match.group(1))
            position = match.end()
        declared_type = normalise_type(head[position:])

        return FieldDeclaration(
            names=tuple(self._names(list_node)),
            type=declared_type or None,
            is_final="final" in modifiers,
            is_static="static" in modifiers,
        )

    def _names(self, list_node) -> List[str]:  # type: ignore[no-untyped-def]
        names: List[str] = []
        for child in list_node.named_children:
            if child.type == "identifier":
                names.append(self._text(child))
            elif child.type in _NAMED_IDENTIFIERS:
                ident = next(
                    (sub for sub in child.named_children if sub.type == "identifier"), None
                )
                if ident is not None:
                    names.append(self._text(ident))
        return names


def normalise_type(text: str) -> str:
    """Collapse whitespace in a type annotation, e.g. ``Map< String ,int >``."""
    collapsed = " ".join(text.split())
    collapsed = re.sub(r"\s+([<>?])", r"\1", collapsed)
    collapsed = re.sub(r"<\s+", "<", collapsed)
    collapsed = re.sub(r"\s*,\s*", ", ", collapsed)
    return collapsed


def _string_value(text: str) -> Optional[str]:
    match = _STRING_LITERAL.match(text.strip())
    if match is None:
        return None
    raw, quote, body = match.groups()
    if not raw and "$" in body:
        return None
    # adjacent literals such as 'a' 'b'
    delimiter = re.escape(quote)
    pattern = delimiter if raw else rf"(?<!\\){delimiter}"
    if re.search(pattern, body):
        return None
    return body


def _find_first(node, types: Set[str]):  # type: ignore[no-untyped-def]
    if node.type in types:
        return node
    for child in node.children:
        found = _find_first(child, types)
        if found is not None:
            return found
    return None


def _collect_errors(node) -> Iterator[str]:  # type: ignore[no-untyped-def]
    count = 0
    stack = [node]
    while stack and count < _MAX_DIAGNOSTICS:
        current = stack.pop()
        if current.type == "ERROR" or current.is_missing:
            row, column = current.start_point
            label = f"missing {current.type}" if current.is_missing else "unexpected syntax"
            yield f"{row + 1}:{column + 1}: {label}"
            count += 1
            continue
        if current.has_error:
            stack.extend(reversed(current.children))


__all__ = [
    "ParserUnavailableError",
    "SourceParser",
    "TREE_SITTER_AVAILABLE",
    "TreeSitterDartParser",
    "normalise_type",
]
