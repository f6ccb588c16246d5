from __future__ import annotations

from snipgen.models import Diagnostic, DiagnosticKind, Diagnostics, ResolvedSnippet


def test_resolved_snippet_text_is_prefix_then_body() -> None:
    snippet = ResolvedSnippet(name="a", prefix="use std::io;\n", body="fn a () {} ")

    assert snippet.text == "use std::io;\nfn a () {} "


def test_diagnostic_str_includes_location() -> None:
    assert str(Diagnostic(DiagnosticKind.READ, "boom", path="src/lib.rs")) == "src/lib.rs: boom"
    assert str(Diagnostic(DiagnosticKind.FORMAT, "boom")) == "boom"


def test_diagnostics_collection_filters_by_kind() -> None:
    diagnostics = Diagnostics()
    diagnostics.add(DiagnosticKind.READ, "one")
    other = Diagnostics()
    other.add(DiagnosticKind.PARSE, "two", path="x.rs")
    diagnostics.extend(other)

    assert len(diagnostics) == 2
    assert [item.message for item in diagnostics] == ["one", "two"]
    assert [item.message for item in diagnostics.of_kind(DiagnosticKind.PARSE)] == ["two"]
