"""Tree-sitter powered Rust parser producing :mod:`snipgen.syntax.tree` models."""

from __future__ import annotations

import re
from dataclasses import replace
from typing import Dict, Iterable, List, Optional, Tuple

from tree_sitter import Node, Parser
from tree_sitter_language_pack import get_language

from ..errors import SnipgenError
from .tokens import (
    CLOSERS,
    OPENERS,
    Group,
    Token,
    TokenKind,
    TokenTree,
    classify,
    doc_attribute,
    literal,
    punct,
)
from .tree import Attribute, AttrStyle, Declaration, DeclarationKind, SourceFile


class ParseError(SnipgenError):
    """Raised when a source file cannot be turned into a declaration tree."""

    def __init__(self, message: str, line: Optional[int] = None, column: Optional[int] = None) -> None:
        location = f" at line {line}, column {column}" if line is not None else ""
        super().__init__(f"{message}{location}")
        self.line = line
        self.column = column


_DECLARATION_KINDS: Dict[str, DeclarationKind] = {
    "function_item": DeclarationKind.FUNCTION,
    "const_item": DeclarationKind.CONST,
    "static_item": DeclarationKind.STATIC,
    "type_item": DeclarationKind.TYPE_ALIAS,
    "struct_item": DeclarationKind.STRUCT,
    "enum_item": DeclarationKind.ENUM,
    "union_item": DeclarationKind.UNION,
    "trait_item": DeclarationKind.TRAIT,
    "impl_item": DeclarationKind.IMPL,
    "mod_item": DeclarationKind.MODULE,
    "use_declaration": DeclarationKind.USE,
    "extern_crate_declaration": DeclarationKind.EXTERN_CRATE,
    "foreign_mod_item": DeclarationKind.FOREIGN_MOD,
    "macro_definition": DeclarationKind.MACRO_DEFINITION,
    "macro_invocation": DeclarationKind.MACRO_INVOCATION,
}

_COMMENT_TYPES = frozenset({"line_comment", "block_comment"})
_LITERAL_TYPES = frozenset(
    {
        "string_literal",
        "raw_string_literal",
        "char_literal",
        "integer_literal",
        "float_literal",
    }
)
# Multi-token constructs that must be emitted without inner spacing.
_ATOMIC_TYPES = frozenset({"lifetime", "label", "metavariable", "shebang"})
_BRACES = frozenset({"{", "}"})
_STATEMENT_ENDS = frozenset({"empty_statement", ";"})
# Operator characters that may be glued to a neighbouring operator, e.g. `..` + `=`.
_JOINABLE_RE = re.compile(r"^[!%&*+\-./:<=>?@^|~]+$")

_LANGUAGE_NAME = "rust"


def doc_comment(text: str) -> Optional[Tuple[str, bool]]:
    """Classify a comment; return ``(payload, is_inner)`` for doc comments."""
    if text.startswith("//"):
        text = text.rstrip("\r\n")
        if text.startswith("///") and not text.startswith("////"):
            return text[3:], False
        if text.startswith("//!"):
            return text[3:], True
        return None
    if text.startswith("/*") and text.endswith("*/") and len(text) >= 5:
        if text.startswith("/**") and not text.startswith("/***"):
            return text[3:-2], False
        if text.startswith("/*!"):
            return text[3:-2], True
    return None


class RustParser:
    """Parses Rust source text into a :class:`SourceFile`."""

    def __init__(self) -> None:
        self._parser: Optional[Parser] = None

    def parse(self, text: str) -> SourceFile:
        source = text.encode("utf-8")
        tree = self._get_parser().parse(source)
        root = tree.root_node
        if root.has_error:
            broken = _first_error(root)
            if broken is None:
                raise ParseError("syntax error")
            row, column = broken.start_point
            kind = "missing token" if broken.is_missing else "syntax error"
            raise ParseError(kind, row + 1, column + 1)
        inner, items = self._collect(root.children, source)
        return SourceFile(attrs=tuple(inner), items=tuple(items))

    def _get_parser(self) -> Parser:
        if self._parser is None:
            self._parser = Parser(get_language(_LANGUAGE_NAME))
        return self._parser

    # ------------------------------------------------------------------
    # Item level

    def _collect(
        self, nodes: Iterable[Node], source: bytes
    ) -> Tuple[List[Attribute], List[Declaration]]:
        inner: List[Attribute] = []
        items: List[Declaration] = []
        pending: List[Attribute] = []
        for node in nodes:
            if node.type in _BRACES:
                continue
            if node.type in _COMMENT_TYPES:
                doc = doc_comment(_node_text(node, source))
                if doc is None:
                    continue
                payload, is_inner = doc
                attr = self._attribute(list(doc_attribute(payload, inner=is_inner)), node)
                (inner if is_inner else pending).append(attr)
            elif node.type == "inner_attribute_item":
                inner.append(self._attribute(self._tokens(node, source), node))
            elif node.type == "attribute_item":
                pending.append(self._attribute(self._tokens(node, source), node))
            elif node.type in _STATEMENT_ENDS and not pending and _is_open_macro(items):
                # `foo!(...);` can parse as an invocation followed by a bare semicolon.
                last = items[-1]
                items[-1] = replace(last, tokens=last.tokens + (punct(";"),))
            else:
                items.append(self._declaration(node, tuple(pending), source))
                pending = []
        return inner, items

    def _declaration(
        self, node: Node, attrs: Tuple[Attribute, ...], source: bytes
    ) -> Declaration:
        target = node
        if node.type == "expression_statement" and node.named_child_count == 1:
            child = node.named_children[0]
            if child.type == "macro_invocation":
                target = child
        kind = _DECLARATION_KINDS.get(target.type, DeclarationKind.VERBATIM)

        name_node = target.child_by_field_name("name") if kind is not DeclarationKind.VERBATIM else None
        name = _node_text(name_node, source) if name_node is not None else None

        body = node.child_by_field_name("body") if kind is DeclarationKind.MODULE else None
        if body is None:
            return Declaration(
                kind=kind,
                attrs=attrs,
                tokens=tuple(self._tokens(node, source)),
                name=name,
            )

        header: List[TokenTree] = []
        for child in node.children:
            if child.end_byte <= body.start_byte:
                header.extend(self._flatten(child, source))
        inner, items = self._collect(body.children, source)
        return Declaration(
            kind=kind,
            attrs=attrs,
            tokens=tuple(_group(header, node)),
            name=name,
            inner_attrs=tuple(inner),
            items=tuple(items),
        )

    @staticmethod
    def _attribute(tokens: List[TokenTree], node: Node) -> Attribute:
        if (
            len(tokens) == 2
            and isinstance(tokens[0], Token)
            and tokens[0].is_punct("#")
            and isinstance(tokens[1], Group)
        ):
            return Attribute(AttrStyle.OUTER, tokens[1].stream)
        if (
            len(tokens) == 3
            and isinstance(tokens[0], Token)
            and tokens[0].is_punct("#")
            and isinstance(tokens[1], Token)
            and tokens[1].is_punct("!")
            and isinstance(tokens[2], Group)
        ):
            return Attribute(AttrStyle.INNER, tokens[2].stream)
        row, column = node.start_point
        raise ParseError("malformed attribute", row + 1, column + 1)

    # ------------------------------------------------------------------
    # Token level

    def _tokens(self, node: Node, source: bytes) -> List[TokenTree]:
        return _group(self._flatten(node, source), node)

    def _flatten(self, node: Node, source: bytes) -> List[TokenTree]:
        out: List[TokenTree] = []
        self._leaves(node, source, out, [-1])
        return out

    def _leaves(
        self, node: Node, source: bytes, out: List[TokenTree], last_end: List[int]
    ) -> None:
        if node.type in _COMMENT_TYPES:
            doc = doc_comment(_node_text(node, source))
            if doc is not None:
                payload, is_inner = doc
                out.extend(doc_attribute(payload, inner=is_inner))
            return
        if node.type in _LITERAL_TYPES:
            out.append(literal(_node_text(node, source)))
            return
        if node.type in _ATOMIC_TYPES or node.child_count == 0:
            text = _node_text(node, source)
            if not text:
                return
            token = Token(classify(text), text)
            # Token trees split `'a` into a quote and an identifier; rejoin them.
            if (
                token.kind is TokenKind.IDENT
                and last_end[0] == node.start_byte
                and out
                and isinstance(out[-1], Token)
                and out[-1].is_punct("'")
            ):
                token = Token(TokenKind.PUNCT, "'" + text)
                out.pop()
            elif (
                token.kind is TokenKind.PUNCT
                and last_end[0] == node.start_byte
                and _JOINABLE_RE.match(text)
                and out
                and isinstance(out[-1], Token)
                and out[-1].kind is TokenKind.PUNCT
                and _JOINABLE_RE.match(out[-1].text)
            ):
                # Operators touching in the source stay one token (`..=`, `>>=`).
                token = Token(TokenKind.PUNCT, out.pop().text + text)
            out.append(token)
            last_end[0] = node.end_byte
            return
        for child in node.children:
            self._leaves(child, source, out, last_end)


def _group(flat: List[TokenTree], node: Node) -> List[TokenTree]:
    """Fold bracket punctuation in ``flat`` into nested :class:`Group` trees."""
    stack: List[Tuple[Optional[object], List[TokenTree]]] = [(None, [])]
    for token in flat:
        if isinstance(token, Token) and token.kind is TokenKind.PUNCT:
            if token.text in OPENERS:
                stack.append((OPENERS[token.text], []))
                continue
            if token.text in CLOSERS:
                delimiter, stream = stack.pop() if len(stack) > 1 else (None, [])
                if delimiter is not CLOSERS[token.text]:
                    row, column = node.start_point
                    raise ParseError(f"unbalanced delimiter {token.text!r}", row + 1, column + 1)
                stack[-1][1].append(Group(CLOSERS[token.text], tuple(stream)))
                continue
        stack[-1][1].append(token)
    if len(stack) != 1:
        row, column = node.start_point
        raise ParseError("unclosed delimiter", row + 1, column + 1)
    return stack[0][1]


def _is_open_macro(items: List[Declaration]) -> bool:
    if not items or items[-1].kind is not DeclarationKind.MACRO_INVOCATION:
        return False
    tokens = items[-1].tokens
    if not tokens:
        return False
    last = tokens[-1]
    return not (isinstance(last, Token) and last.is_punct(";"))


def _first_error(node: Node) -> Optional[Node]:
    if node.type == "ERROR" or node.is_missing:
        return node
    for child in node.children:
        if child.has_error or child.is_missing:
            found = _first_error(child)
            if found is not None:
                return found
    return None


def _node_text(node: Node, source: bytes) -> str:
    return source[node.start_byte : node.end_byte].decode("utf-8", errors="replace")


_DEFAULT_PARSER: Optional[RustParser] = None


def parse_source(text: str) -> SourceFile:
    """Parse ``text`` with a shared :class:`RustParser` instance."""
    global _DEFAULT_PARSER
    if _DEFAULT_PARSER is None:
        _DEFAULT_PARSER = RustParser()
    return _DEFAULT_PARSER.parse(text)


__all__ = ["ParseError", "RustParser", "doc_comment", "parse_source"]
