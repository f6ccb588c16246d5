"""Locate snippet-marked declarations in a parsed source file."""

from __future__ import annotations

from typing import Iterable, Iterator, List, Optional, Sequence

from ..logging import get_logger
from ..models import Diagnostics, Fragment
from ..syntax.tokens import TokenTree
from ..syntax.tree import Declaration, SourceFile
from .metadata import DEFAULT_MARKERS, MarkerMatcher, SnippetAttributes, parse_snippet_attributes
from .reconstruct import reconstruct


class SnippetScanner:
    """Walks a :class:`SourceFile` depth first and yields one fragment per marker.

    The whole-file fragment (``#![snippet("name")]``) comes first, followed by
    the fragments of each top-level declaration in source order. Modules are
    always descended into, marked or not, so a marked module and its marked
    children each produce their own fragment.
    """

    def __init__(self, markers: Iterable[str] = DEFAULT_MARKERS) -> None:
        self.matcher = MarkerMatcher(markers)
        self.logger = get_logger("scanner")

    def scan(
        self,
        source: SourceFile,
        *,
        origin: Optional[str] = None,
        diagnostics: Optional[Diagnostics] = None,
    ) -> List[Fragment]:
        fragments: List[Fragment] = []
        attrs = parse_snippet_attributes(
            source.attrs, None, self.matcher, diagnostics=diagnostics, origin=origin
        )
        if attrs is not None:
            stripped = source.without_attributes(self.matcher)
            fragments.append(self._fragment(attrs, stripped.to_tokens(), origin))
        for item in source.items:
            fragments.extend(self._scan_declaration(item, origin, diagnostics))
        self.logger.debug("Found %d snippet fragments in %s", len(fragments), origin or "<source>")
        return fragments

    def _scan_declaration(
        self,
        declaration: Declaration,
        origin: Optional[str],
        diagnostics: Optional[Diagnostics],
    ) -> Iterator[Fragment]:
        if declaration.has_attributes:
            attrs = parse_snippet_attributes(
                declaration.marker_candidates(),
                declaration.ident,
                self.matcher,
                diagnostics=diagnostics,
                origin=origin,
            )
            if attrs is not None:
                stripped = declaration.without_attributes(self.matcher)
                yield self._fragment(attrs, stripped.to_tokens(), origin)
        for child in declaration.items or ():
            yield from self._scan_declaration(child, origin, diagnostics)

    @staticmethod
    def _fragment(
        attrs: SnippetAttributes, tokens: Sequence[TokenTree], origin: Optional[str]
    ) -> Fragment:
        return Fragment(
            names=tuple(attrs.names),
            dependencies=tuple(attrs.dependencies),
            prefix=attrs.prefix,
            doc_hidden=attrs.doc_hidden,
            body=reconstruct(tokens, doc_hidden=attrs.doc_hidden),
            origin=origin,
        )


__all__ = ["SnippetScanner"]
