"""Pipeline orchestration: discover, parse, scan, resolve and format snippets."""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import Dict, List, Optional, Sequence

from .config import SnipgenConfig
from .discovery import SourceDiscovery
from .extract.scanner import SnippetScanner
from .logging import get_logger
from .models import DiagnosticKind, Diagnostics, Fragment
from .output.formatter import Formatter, PassthroughFormatter, RustfmtFormatter
from .resolver import DependencyResolver, Resolution
from .syntax.parser import ParseError, RustParser


@dataclass
class RunReport:
    """Outcome of a full extraction run."""

    snippets: Dict[str, str] = field(default_factory=dict)
    diagnostics: Diagnostics = field(default_factory=Diagnostics)
    files: int = 0
    fragments: int = 0


class Orchestrator:
    """Coordinates the snippet pipeline.

    Every stage is recoverable: unreadable or unparsable files are skipped,
    missing dependencies are left out of the merge, and snippets the formatter
    rejects are dropped. Each such event is recorded as a diagnostic and logged.
    """

    def __init__(
        self,
        parser: RustParser | None = None,
        scanner: SnippetScanner | None = None,
        resolver: DependencyResolver | None = None,
        formatter: Formatter | None = None,
        discovery: SourceDiscovery | None = None,
    ) -> None:
        self.parser = parser or RustParser()
        self.scanner = scanner or SnippetScanner()
        self.resolver = resolver or DependencyResolver()
        self.formatter = formatter or RustfmtFormatter()
        self.discovery = discovery or SourceDiscovery()
        self.logger = get_logger("orchestrator")

    @classmethod
    def from_config(cls, config: SnipgenConfig, *, format_output: bool = True) -> "Orchestrator":
        formatter: Formatter
        if format_output and config.formatter.enabled:
            formatter = RustfmtFormatter(config.formatter.command, timeout=config.formatter.timeout)
        else:
            formatter = PassthroughFormatter()
        return cls(
            scanner=SnippetScanner(config.markers),
            formatter=formatter,
            discovery=SourceDiscovery(config.exclude_paths),
        )

    def run(self, targets: Sequence[str], *, project_root: Path | None = None) -> RunReport:
        """Extract, resolve and format snippets from ``targets``."""
        report = RunReport()
        paths = self.discovery.discover(
            targets, project_root=project_root, diagnostics=report.diagnostics
        )
        self._log_new(report.diagnostics, 0)
        self.logger.info("Scanning %d source files", len(paths))

        fragments = self.extract(paths, report.diagnostics)
        report.files = len(paths)
        report.fragments = len(fragments)

        resolution = self.resolve(fragments, report.diagnostics)
        report.snippets = self.format(resolution, report.diagnostics)
        self.logger.info(
            "Emitting %d snippets (%d diagnostics)", len(report.snippets), len(report.diagnostics)
        )
        return report

    def extract(self, paths: Sequence[Path], diagnostics: Diagnostics) -> List[Fragment]:
        """Scan every path in order; failures skip only the offending file."""
        fragments: List[Fragment] = []
        for path in paths:
            fragments.extend(self.extract_file(path, diagnostics))
        return fragments

    def extract_file(self, path: Path, diagnostics: Diagnostics) -> List[Fragment]:
        since = len(diagnostics)
        origin = str(path)
        try:
            text = path.read_text(encoding="utf-8")
        except (OSError, UnicodeDecodeError) as exc:
            diagnostics.add(DiagnosticKind.READ, f"cannot read file: {exc}", path=origin)
            self._log_new(diagnostics, since)
            return []
        fragments = self.extract_text(text, diagnostics, origin=origin)
        self._log_new(diagnostics, since)
        return fragments

    def extract_text(
        self, text: str, diagnostics: Diagnostics, *, origin: Optional[str] = None
    ) -> List[Fragment]:
        try:
            source = self.parser.parse(text)
        except ParseError as exc:
            diagnostics.add(DiagnosticKind.PARSE, f"cannot parse file: {exc}", path=origin)
            return []
        return self.scanner.scan(source, origin=origin, diagnostics=diagnostics)

    def resolve(self, fragments: Sequence[Fragment], diagnostics: Diagnostics) -> Resolution:
        resolution = self.resolver.resolve(fragments)
        since = len(diagnostics)
        diagnostics.extend(resolution.diagnostics)
        self._log_new(diagnostics, since)
        return resolution

    def format(self, resolution: Resolution, diagnostics: Diagnostics) -> Dict[str, str]:
        """Format each resolved snippet; names the formatter rejects are omitted."""
        since = len(diagnostics)
        formatted: Dict[str, str] = {}
        for name, snippet in resolution.snippets.items():
            result = self.formatter.format(snippet.text)
            if result is None:
                diagnostics.add(
                    DiagnosticKind.FORMAT,
                    f"snippet {name!r} could not be formatted and was omitted",
                    name=name,
                )
                continue
            formatted[name] = result
        self._log_new(diagnostics, since)
        return formatted

    def _log_new(self, diagnostics: Diagnostics, since: int) -> None:
        for diagnostic in diagnostics.items[since:]:
            self.logger.warning("%s", diagnostic)


__all__ = ["Orchestrator", "RunReport"]
