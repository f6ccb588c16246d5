"""CLI entrypoints for snipgen commands."""

from __future__ import annotations

import argparse
import sys
from pathlib import Path
from typing import TextIO

from .config import CONFIG_FILENAME, ConfigError, SnipgenConfig, load_config
from .discovery import find_project_root
from .logging import configure_logging
from .orchestrator import Orchestrator
from .output.writers import OutputType, write_snippets


def _add_verbose_option(
    parser: argparse.ArgumentParser, *, suppress_default: bool = False
) -> None:
    kwargs: dict[str, object] = {
        "action": "store_true",
        "help": "Increase log verbosity for troubleshooting.",
    }
    if suppress_default:
        kwargs["default"] = argparse.SUPPRESS
    else:
        kwargs["default"] = False
    parser.add_argument(
        "-v",
        "--verbose",
        **kwargs,
    )


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="snipgen",
        description="Extract editor snippets from #[snippet]-annotated Rust sources.",
    )
    _add_verbose_option(parser)
    subparsers = parser.add_subparsers(dest="command", required=True)

    snippet_parser = subparsers.add_parser(
        "snippet",
        help="Extract code snippets from a cargo project.",
    )
    _add_verbose_option(snippet_parser, suppress_default=True)
    snippet_parser.add_argument(
        "paths",
        nargs="*",
        metavar="PATH",
        help=(
            "The files or directories (including children) to extract snippets from "
            "(defaults to <project_root>/src when omitted)."
        ),
    )
    snippet_parser.add_argument(
        "-t",
        "--type",
        dest="output_type",
        choices=[member.value for member in OutputType],
        default=None,
        help="Snippet format to emit (default: neosnippet, or output_type from the config).",
    )
    snippet_parser.add_argument(
        "-o",
        "--output",
        default=None,
        help="Write snippets to this file instead of stdout.",
    )
    snippet_parser.add_argument(
        "--config",
        default=None,
        help=f"Path to a {CONFIG_FILENAME} file (defaults to the project root).",
    )
    snippet_parser.add_argument(
        "--no-format",
        action="store_true",
        help="Skip rustfmt and emit the reconstructed text as is.",
    )
    snippet_parser.add_argument(
        "-q",
        "--quiet",
        action="store_true",
        help="Only log warnings and diagnostics.",
    )
    snippet_parser.add_argument(
        "--log-file",
        default=None,
        help="Also write a debug-level log to this file.",
    )
    return parser


def main(argv: list[str] | None = None) -> None:
    """CLI entrypoint for snipgen commands."""
    parser = _build_parser()
    args = parser.parse_args(argv)

    configure_logging(
        verbose=bool(args.verbose),
        quiet=args.quiet,
        log_file=Path(args.log_file) if args.log_file else None,
    )

    if args.command == "snippet":
        project_root = find_project_root()
        try:
            config = _load_config(args.config, project_root)
        except ConfigError as exc:
            parser.exit(1, f"{exc}\n")
        output_type = OutputType(args.output_type) if args.output_type else config.output_type
        targets = list(args.paths) or [str(config.root / path) for path in config.paths]

        orchestrator = Orchestrator.from_config(config, format_output=not args.no_format)
        report = orchestrator.run(targets, project_root=project_root)

        if args.output:
            try:
                with open(args.output, "w", encoding="utf-8") as handle:
                    _emit(output_type, report.snippets, handle)
            except OSError as exc:
                parser.exit(1, f"Cannot write {args.output}: {exc}\n")
        else:
            _emit(output_type, report.snippets, sys.stdout)
    else:  # pragma: no cover - argparse enforces choices
        parser.exit(1, "Unknown command\n")


def _load_config(config_arg: str | None, project_root: Path | None) -> SnipgenConfig:
    if config_arg:
        return load_config(Path(config_arg))
    return load_config(project_root or Path.cwd())


def _emit(output_type: OutputType, snippets: dict[str, str], stream: TextIO) -> None:
    write_snippets(output_type, snippets, stream)
    stream.flush()


if __name__ == "__main__":
    main(sys.argv[1:])
