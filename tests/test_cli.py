"""CLI parser and entrypoint behaviour tests."""

from __future__ import annotations

import json

import pytest

from snipgen.cli import _build_parser, main
from tests._fixtures.crate_builder import CrateBuilder


def test_cli_accepts_verbose_before_command() -> None:
    parser = _build_parser()
    args = parser.parse_args(["--verbose", "snippet"])
    assert args.verbose is True
    assert args.command == "snippet"


def test_cli_accepts_verbose_after_command() -> None:
    parser = _build_parser()
    args = parser.parse_args(["snippet", "--verbose"])
    assert args.verbose is True
    assert args.command == "snippet"


def test_cli_snippet_defaults() -> None:
    parser = _build_parser()
    args = parser.parse_args(["snippet"])
    assert args.paths == []
    assert args.output_type is None
    assert args.output is None
    assert args.no_format is False


def test_cli_accepts_paths_and_type() -> None:
    parser = _build_parser()
    args = parser.parse_args(["snippet", "src/lib.rs", "src/util", "-t", "vscode", "--no-format"])
    assert args.paths == ["src/lib.rs", "src/util"]
    assert args.output_type == "vscode"
    assert args.no_format is True


def test_cli_rejects_unknown_type() -> None:
    parser = _build_parser()
    with pytest.raises(SystemExit):
        parser.parse_args(["snippet", "-t", "emacs"])


def test_main_prints_neosnippet_for_project(
    inside_crate: CrateBuilder, capsys: pytest.CaptureFixture[str]
) -> None:
    inside_crate.write({"src/lib.rs": "#[snippet]\nfn bar() {}\n"})

    main(["snippet", "--no-format"])

    assert capsys.readouterr().out == "snippet bar\n    fn bar () {}\n\n"


def test_main_uses_config_output_type_and_writes_file(inside_crate: CrateBuilder) -> None:
    inside_crate.write(
        {
            "src/lib.rs": "#[snippet]\nfn bar() {}\n",
            ".snipgen.yml": "output_type: vscode\nformatter:\n  enabled: false\n",
        }
    )
    target = inside_crate.path() / "out.json"

    main(["snippet", "src/lib.rs", "-o", str(target)])

    document = json.loads(target.read_text(encoding="utf-8"))
    assert document == {"bar": {"prefix": "bar", "body": ["fn bar () {}"]}}


def test_main_exits_on_invalid_config(inside_crate: CrateBuilder) -> None:
    inside_crate.write({".snipgen.yml": "output_type: emacs\n"})

    with pytest.raises(SystemExit) as excinfo:
        main(["snippet", "--no-format"])

    assert excinfo.value.code == 1


def test_cli_accepts_quiet_and_log_file() -> None:
    parser = _build_parser()
    args = parser.parse_args(["snippet", "-q", "--log-file", "run.log"])
    assert args.quiet is True
    assert args.log_file == "run.log"


def test_main_writes_debug_log_file(inside_crate: CrateBuilder, capsys: pytest.CaptureFixture[str]) -> None:
    inside_crate.write({"src/lib.rs": '#[snippet(include = "missing")]\nfn bar() {}\n'})
    log_path = inside_crate.path() / "snipgen.log"

    main(["snippet", "--no-format", "--quiet", "--log-file", str(log_path)])

    logged = log_path.read_text(encoding="utf-8")
    assert "Scanning 1 source files" in logged
    assert "'missing'" in logged
    stderr = capsys.readouterr().err
    assert "'missing'" in stderr
    assert "Scanning" not in stderr
