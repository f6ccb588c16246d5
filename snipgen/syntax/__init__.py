"""Rust syntax boundary: token trees, declaration model and the tree-sitter parser."""

from .parser import ParseError, RustParser, parse_source
from .tree import Attribute, AttrStyle, Declaration, DeclarationKind, SourceFile

__all__ = [
    "AttrStyle",
    "Attribute",
    "Declaration",
    "DeclarationKind",
    "ParseError",
    "RustParser",
    "SourceFile",
    "parse_source",
]
