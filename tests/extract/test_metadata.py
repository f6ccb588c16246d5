"""Tests for snippet attribute parsing."""

from __future__ import annotations

from typing import Tuple

from snipgen.extract.metadata import (
    MarkerMatcher,
    MetaKind,
    parse_meta,
    parse_snippet_attributes,
)
from snipgen.models import DiagnosticKind, Diagnostics
from snipgen.syntax.tokens import Delimiter, Group, TokenTree, ident, literal, punct
from snipgen.syntax.tree import Attribute, AttrStyle


def _marker(*args: TokenTree) -> Attribute:
    return Attribute(AttrStyle.OUTER, (ident("snippet"), Group(Delimiter.PARENTHESIS, args)))


def _bare() -> Attribute:
    return Attribute(AttrStyle.OUTER, (ident("snippet"),))


def _kv(key: str, value: str) -> Tuple[TokenTree, ...]:
    return (ident(key), punct("="), literal(value))


def test_parse_meta_recognises_the_three_shapes() -> None:
    path = parse_meta((ident("snippet"),))
    assert path is not None and path.kind is MetaKind.PATH

    name_value = parse_meta((ident("snippet"), punct("="), literal('"x"')))
    assert name_value is not None and name_value.kind is MetaKind.NAME_VALUE

    listed = parse_meta((ident("snippet"), Group(Delimiter.PARENTHESIS, (literal('"x"'), punct(","), ident("doc_hidden")))))
    assert listed is not None and listed.kind is MetaKind.LIST
    assert len(listed.nested) == 2


def test_parse_meta_rejects_malformed_content() -> None:
    assert parse_meta((punct("="),)) is None
    assert parse_meta((ident("snippet"), punct("="), ident("x"))) is None
    assert parse_meta((ident("snippet"), Group(Delimiter.BRACKET, ()))) is None


def test_matcher_accepts_configured_paths_only() -> None:
    matcher = MarkerMatcher()
    scoped = Attribute(AttrStyle.OUTER, (ident("cargo_snippet"), punct("::"), ident("snippet")))
    derive = Attribute(AttrStyle.OUTER, (ident("derive"), Group(Delimiter.PARENTHESIS, (ident("Debug"),))))

    assert matcher(_bare())
    assert matcher(scoped)
    assert not matcher(derive)
    assert MarkerMatcher(["my :: snip"]).paths == frozenset({"my::snip"})


def test_no_marker_yields_none() -> None:
    derive = Attribute(AttrStyle.OUTER, (ident("derive"), Group(Delimiter.PARENTHESIS, ())))
    assert parse_snippet_attributes([derive], "foo", MarkerMatcher()) is None


def test_bare_marker_uses_the_declared_identifier() -> None:
    attrs = parse_snippet_attributes([_bare()], "foo", MarkerMatcher())

    assert attrs is not None
    assert attrs.names == ["foo"]
    assert attrs.dependencies == []
    assert attrs.prefix == ""
    assert attrs.doc_hidden is False


def test_bare_marker_without_identifier_is_skipped() -> None:
    assert parse_snippet_attributes([_bare()], None, MarkerMatcher()) is None


def test_explicit_names_replace_the_default() -> None:
    attrs = parse_snippet_attributes(
        [_marker(literal('"a"')), _marker(*_kv("name", '"b"'))], "foo", MarkerMatcher()
    )

    assert attrs is not None
    assert attrs.names == ["a", "b"]


def test_bare_marker_alongside_named_marker_adds_both() -> None:
    attrs = parse_snippet_attributes([_bare(), _marker(literal('"bar2"'))], "bar", MarkerMatcher())

    assert attrs is not None
    assert sorted(attrs.names) == ["bar", "bar2"]


def test_name_value_marker_form() -> None:
    attr = Attribute(AttrStyle.OUTER, (ident("snippet"), punct("="), literal('"eq"')))
    attrs = parse_snippet_attributes([attr], "foo", MarkerMatcher())

    assert attrs is not None
    assert attrs.names == ["eq"]


def test_include_list_is_split_trimmed_and_deduplicated() -> None:
    attrs = parse_snippet_attributes(
        [_marker(*_kv("include", '" foo, bar ,,foo"'))], "baz", MarkerMatcher()
    )

    assert attrs is not None
    assert attrs.names == ["baz"]
    assert attrs.dependencies == ["foo", "bar"]


def test_prefixes_are_joined_in_order() -> None:
    attrs = parse_snippet_attributes(
        [_marker(*_kv("prefix", '"use std::io;"')), _marker(*_kv("prefix", '"use std::fmt;"'))],
        "foo",
        MarkerMatcher(),
    )

    assert attrs is not None
    assert attrs.prefix == "use std::io;\nuse std::fmt;"


def test_doc_hidden_flag_and_combined_keys() -> None:
    attrs = parse_snippet_attributes(
        [
            _marker(
                *_kv("name", '"bar"'),
                punct(","),
                ident("doc_hidden"),
                punct(","),
                *_kv("prefix", '"use std::collections::HashMap;"'),
            )
        ],
        "foo",
        MarkerMatcher(),
    )

    assert attrs is not None
    assert attrs.names == ["bar"]
    assert attrs.doc_hidden is True
    assert attrs.prefix == "use std::collections::HashMap;"


def test_non_string_value_is_reported_and_ignored() -> None:
    diagnostics = Diagnostics()
    attrs = parse_snippet_attributes(
        [_marker(*_kv("name", "3"))], "foo", MarkerMatcher(), diagnostics=diagnostics, origin="src/lib.rs"
    )

    assert attrs is not None
    assert attrs.names == ["foo"]
    (diagnostic,) = diagnostics.of_kind(DiagnosticKind.METADATA)
    assert diagnostic.path == "src/lib.rs"
    assert "string literal" in diagnostic.message


def test_unknown_keys_are_ignored() -> None:
    attrs = parse_snippet_attributes([_marker(*_kv("color", '"red"'))], "foo", MarkerMatcher())

    assert attrs is not None
    assert attrs.names == ["foo"]
