"""Declaration model for parsed Rust source files.

Declarations form a closed set of variants (:class:`DeclarationKind`). The
scanner never branches on the variant directly; it relies on the capability
queries exposed here: whether a declaration carries attributes, whether it
declares an identifier and whether it nests further declarations.
"""

from __future__ import annotations

from dataclasses import dataclass, replace
from enum import Enum
from typing import Callable, List, Optional, Tuple

from .tokens import Delimiter, Group, TokenTree, doc_payload, path_prefix, punct


class AttrStyle(str, Enum):
    OUTER = "outer"
    INNER = "inner"


@dataclass(frozen=True)
class Attribute:
    """A ``#[...]`` or ``#![...]`` attribute; ``stream`` is the bracket content."""

    style: AttrStyle
    stream: Tuple[TokenTree, ...]

    @property
    def path(self) -> str:
        text, _ = path_prefix(self.stream)
        return text

    @property
    def is_doc(self) -> bool:
        return doc_payload(Group(Delimiter.BRACKET, self.stream)) is not None

    def to_tokens(self) -> List[TokenTree]:
        tokens: List[TokenTree] = [punct("#")]
        if self.style is AttrStyle.INNER:
            tokens.append(punct("!"))
        tokens.append(Group(Delimiter.BRACKET, self.stream))
        return tokens


AttributePredicate = Callable[[Attribute], bool]


class DeclarationKind(str, Enum):
    FUNCTION = "function"
    CONST = "const"
    STATIC = "static"
    TYPE_ALIAS = "type_alias"
    STRUCT = "struct"
    ENUM = "enum"
    UNION = "union"
    TRAIT = "trait"
    IMPL = "impl"
    MODULE = "module"
    USE = "use"
    EXTERN_CRATE = "extern_crate"
    FOREIGN_MOD = "foreign_mod"
    MACRO_DEFINITION = "macro_definition"
    MACRO_INVOCATION = "macro_invocation"
    VERBATIM = "verbatim"


_NAMED_KINDS = frozenset(
    {
        DeclarationKind.FUNCTION,
        DeclarationKind.CONST,
        DeclarationKind.STATIC,
        DeclarationKind.TYPE_ALIAS,
        DeclarationKind.STRUCT,
        DeclarationKind.ENUM,
        DeclarationKind.UNION,
        DeclarationKind.TRAIT,
        DeclarationKind.MODULE,
        DeclarationKind.MACRO_DEFINITION,
    }
)


@dataclass(frozen=True)
class Declaration:
    """A top-level or module-level item.

    ``tokens`` holds the item without its outer attributes. For a module with
    an inline body, ``tokens`` is only the header (``pub mod name``) and the
    body lives in ``inner_attrs`` and ``items``.
    """

    kind: DeclarationKind
    attrs: Tuple[Attribute, ...]
    tokens: Tuple[TokenTree, ...]
    name: Optional[str] = None
    inner_attrs: Tuple[Attribute, ...] = ()
    items: Optional[Tuple["Declaration", ...]] = None

    @property
    def has_attributes(self) -> bool:
        return self.kind is not DeclarationKind.VERBATIM

    @property
    def ident(self) -> Optional[str]:
        if self.kind in _NAMED_KINDS:
            return self.name
        return None

    @property
    def has_items(self) -> bool:
        return self.items is not None

    def marker_candidates(self) -> Tuple[Attribute, ...]:
        """Attributes that may mark this declaration, inner module attributes included."""
        if not self.has_attributes:
            return ()
        return self.attrs + self.inner_attrs

    def without_attributes(self, predicate: AttributePredicate) -> "Declaration":
        """Return a copy with matching attributes removed here and in nested modules."""
        if not self.has_attributes:
            return self
        items = self.items
        if items is not None:
            items = tuple(item.without_attributes(predicate) for item in items)
        return replace(
            self,
            attrs=tuple(attr for attr in self.attrs if not predicate(attr)),
            inner_attrs=tuple(attr for attr in self.inner_attrs if not predicate(attr)),
            items=items,
        )

    def to_tokens(self) -> List[TokenTree]:
        tokens: List[TokenTree] = []
        for attr in self.attrs:
            tokens.extend(attr.to_tokens())
        tokens.extend(self.tokens)
        if self.items is not None:
            body: List[TokenTree] = []
            for attr in self.inner_attrs:
                body.extend(attr.to_tokens())
            for item in self.items:
                body.extend(item.to_tokens())
            tokens.append(Group(Delimiter.BRACE, tuple(body)))
        return tokens


@dataclass(frozen=True)
class SourceFile:
    """A parsed file: its inner attributes followed by its declarations."""

    attrs: Tuple[Attribute, ...]
    items: Tuple[Declaration, ...]

    def without_attributes(self, predicate: AttributePredicate) -> "SourceFile":
        return SourceFile(
            attrs=tuple(attr for attr in self.attrs if not predicate(attr)),
            items=tuple(item.without_attributes(predicate) for item in self.items),
        )

    def to_tokens(self) -> List[TokenTree]:
        tokens: List[TokenTree] = []
        for attr in self.attrs:
            tokens.extend(attr.to_tokens())
        for item in self.items:
            tokens.extend(item.to_tokens())
        return tokens


__all__ = [
    "AttrStyle",
    "Attribute",
    "AttributePredicate",
    "Declaration",
    "DeclarationKind",
    "SourceFile",
]
