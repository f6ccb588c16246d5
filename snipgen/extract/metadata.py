"""The ``#[snippet(...)]`` attribute schema.

Recognised forms::

    #[snippet]                                  name derived from the item
    #[snippet("name")]                          explicit name
    #[snippet = "name"]                         explicit name
    #[snippet(name = "a", name = "b")]          several names
    #[snippet(include = "dep1, dep2")]          dependencies
    #[snippet(prefix = "use std::io;")]         text emitted before the snippet
    #[snippet(doc_hidden)]                      drop doc comments from the body
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Dict, Iterable, List, Optional, Sequence, Tuple, Union

from ..models import DiagnosticKind, Diagnostics
from ..syntax.tokens import Delimiter, Group, Token, TokenKind, TokenTree, path_prefix, string_literal_value
from ..syntax.tree import Attribute

DEFAULT_MARKERS: Tuple[str, ...] = ("snippet", "cargo_snippet::snippet")

_KEY_NAME = "name"
_KEY_INCLUDE = "include"
_KEY_PREFIX = "prefix"
_FLAG_DOC_HIDDEN = "doc_hidden"


class MetaKind(str, Enum):
    PATH = "path"
    LIST = "list"
    NAME_VALUE = "name_value"


@dataclass(frozen=True)
class Meta:
    """A structured view of an attribute: ``path``, ``path = lit`` or ``path(...)``."""

    path: str
    kind: MetaKind
    value: Optional[Token] = None
    nested: Tuple[Union["Meta", Token], ...] = ()


def parse_meta(stream: Sequence[TokenTree]) -> Optional[Meta]:
    """Parse attribute content into a :class:`Meta`; None when it is not well formed."""
    path, consumed = path_prefix(stream)
    if not path:
        return None
    rest = list(stream[consumed:])
    if not rest:
        return Meta(path=path, kind=MetaKind.PATH)
    if len(rest) == 2:
        eq, value = rest
        if (
            isinstance(eq, Token)
            and eq.is_punct("=")
            and isinstance(value, Token)
            and value.kind is TokenKind.LITERAL
        ):
            return Meta(path=path, kind=MetaKind.NAME_VALUE, value=value)
        return None
    if len(rest) == 1 and isinstance(rest[0], Group) and rest[0].delimiter is Delimiter.PARENTHESIS:
        nested: List[Union[Meta, Token]] = []
        for chunk in _split_commas(rest[0].stream):
            if len(chunk) == 1 and isinstance(chunk[0], Token) and chunk[0].kind is TokenKind.LITERAL:
                nested.append(chunk[0])
                continue
            inner = parse_meta(chunk)
            if inner is None:
                return None
            nested.append(inner)
        return Meta(path=path, kind=MetaKind.LIST, nested=tuple(nested))
    return None


def _split_commas(stream: Sequence[TokenTree]) -> List[List[TokenTree]]:
    chunks: List[List[TokenTree]] = [[]]
    for token in stream:
        if isinstance(token, Token) and token.is_punct(","):
            chunks.append([])
        else:
            chunks[-1].append(token)
    # A trailing comma leaves an empty final chunk.
    return [chunk for chunk in chunks if chunk]


class MarkerMatcher:
    """Decides which attributes are snippet markers."""

    def __init__(self, paths: Iterable[str] = DEFAULT_MARKERS) -> None:
        self.paths = frozenset(path.replace(" ", "") for path in paths)

    def meta(self, attr: Attribute) -> Optional[Meta]:
        """Return the parsed marker meta of ``attr``, or None if it is not a marker."""
        meta = parse_meta(attr.stream)
        if meta is None or meta.path not in self.paths:
            return None
        return meta

    def __call__(self, attr: Attribute) -> bool:
        return self.meta(attr) is not None


@dataclass
class SnippetAttributes:
    """Snippet metadata collected from every marker on one declaration."""

    names: List[str] = field(default_factory=list)
    dependencies: List[str] = field(default_factory=list)
    prefix: str = ""
    doc_hidden: bool = False


def parse_snippet_attributes(
    attrs: Sequence[Attribute],
    default_name: Optional[str],
    matcher: MarkerMatcher,
    *,
    diagnostics: Optional[Diagnostics] = None,
    origin: Optional[str] = None,
) -> Optional[SnippetAttributes]:
    """Collect snippet metadata from ``attrs``.

    Returns None when no marker is present, or when no output name can be
    determined (no explicit name and no ``default_name``).
    """
    metas = [meta for meta in (matcher.meta(attr) for attr in attrs) if meta is not None]
    if not metas:
        return None

    names: Dict[str, None] = {}
    dependencies: Dict[str, None] = {}
    prefixes: List[str] = []
    doc_hidden = False
    bare = False

    def _string(value: Optional[Token], key: str) -> Optional[str]:
        text = string_literal_value(value) if value is not None else None
        if text is None and diagnostics is not None:
            shown = value.text if value is not None else "<missing>"
            diagnostics.add(
                DiagnosticKind.METADATA,
                f"snippet attribute `{key}` expects a string literal, got {shown}",
                path=origin,
            )
        return text

    for meta in metas:
        if meta.kind is MetaKind.PATH:
            bare = True
        elif meta.kind is MetaKind.NAME_VALUE:
            name = _string(meta.value, _KEY_NAME)
            if name is not None:
                names[name] = None
        else:
            for nested in meta.nested:
                if isinstance(nested, Token):
                    name = _string(nested, _KEY_NAME)
                    if name is not None:
                        names[name] = None
                elif nested.kind is MetaKind.PATH and nested.path == _FLAG_DOC_HIDDEN:
                    doc_hidden = True
                elif nested.kind is MetaKind.NAME_VALUE and nested.path == _KEY_NAME:
                    name = _string(nested.value, _KEY_NAME)
                    if name is not None:
                        names[name] = None
                elif nested.kind is MetaKind.NAME_VALUE and nested.path == _KEY_INCLUDE:
                    value = _string(nested.value, _KEY_INCLUDE)
                    if value is not None:
                        for dependency in value.split(","):
                            dependency = dependency.strip()
                            if dependency:
                                dependencies[dependency] = None
                elif nested.kind is MetaKind.NAME_VALUE and nested.path == _KEY_PREFIX:
                    value = _string(nested.value, _KEY_PREFIX)
                    if value is not None:
                        prefixes.append(value)

    if bare and default_name is not None:
        names[default_name] = None
    if not names:
        if default_name is None:
            return None
        names[default_name] = None

    return SnippetAttributes(
        names=list(names),
        dependencies=list(dependencies),
        prefix="\n".join(prefixes),
        doc_hidden=doc_hidden,
    )


__all__ = [
    "DEFAULT_MARKERS",
    "MarkerMatcher",
    "Meta",
    "MetaKind",
    "SnippetAttributes",
    "parse_meta",
    "parse_snippet_attributes",
]
