"""Tests for the snippet format writers."""

from __future__ import annotations

import io
import json

import pytest

from snipgen.output import OutputType, write_snippets


def _render(output_type: OutputType, snippets: dict[str, str]) -> str:
    stream = io.StringIO()
    write_snippets(output_type, snippets, stream)
    return stream.getvalue()


def test_neosnippet_indents_each_line() -> None:
    text = _render(
        OutputType.NEOSNIPPET,
        {"bar": "fn bar() {}\n", "baz": "fn baz() {\n    1\n}\n"},
    )

    assert text == (
        "snippet bar\n"
        "    fn bar() {}\n"
        "\n"
        "snippet baz\n"
        "    fn baz() {\n"
        "        1\n"
        "    }\n"
        "\n"
    )


def test_vscode_emits_json_with_escaped_dollars() -> None:
    text = _render(OutputType.VSCODE, {"cost": "let s = \"$5\";\nprintln!(\"{}\", s);\n"})

    document = json.loads(text)
    assert document == {
        "cost": {
            "prefix": "cost",
            "body": ['let s = "\\$5";', 'println!("{}", s);'],
        }
    }
    assert text.endswith("\n")


def test_ultisnips_wraps_text_in_markers() -> None:
    text = _render(OutputType.ULTISNIPS, {"bar": "fn bar() {}\n"})

    assert text == "snippet bar\nfn bar() {}\nendsnippet\n\n"


def test_writers_sort_names() -> None:
    text = _render(OutputType.ULTISNIPS, {"b": "b\n", "a": "a\n"})

    assert text.index("snippet a") < text.index("snippet b")


def test_empty_snippet_set_produces_empty_output() -> None:
    assert _render(OutputType.NEOSNIPPET, {}) == ""
    assert json.loads(_render(OutputType.VSCODE, {})) == {}


def test_output_type_parse_is_case_insensitive() -> None:
    assert OutputType.parse(" VSCode ") is OutputType.VSCODE


def test_output_type_parse_rejects_unknown_values() -> None:
    with pytest.raises(ValueError, match="neosnippet"):
        OutputType.parse("emacs")
