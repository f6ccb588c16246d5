"""Core data models shared across snipgen components."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Iterator, List, Optional, Tuple


@dataclass(frozen=True)
class Fragment:
    """One extracted unit: a marked declaration or a marked file."""

    names: Tuple[str, ...]
    dependencies: Tuple[str, ...]
    prefix: str
    doc_hidden: bool
    body: str
    origin: Optional[str] = None


@dataclass(frozen=True)
class ResolvedSnippet:
    """Final merged text for a single output name."""

    name: str
    prefix: str
    body: str

    @property
    def text(self) -> str:
        return self.prefix + self.body


class DiagnosticKind(str, Enum):
    """Recoverable failure categories reported by the pipeline."""

    READ = "read"
    PARSE = "parse"
    METADATA = "metadata"
    MISSING_DEPENDENCY = "missing-dependency"
    FORMAT = "format"


@dataclass(frozen=True)
class Diagnostic:
    """A recoverable problem encountered while extracting snippets."""

    kind: DiagnosticKind
    message: str
    path: Optional[str] = None
    name: Optional[str] = None

    def __str__(self) -> str:
        location = f"{self.path}: " if self.path else ""
        return f"{location}{self.message}"


@dataclass
class Diagnostics:
    """Ordered collection of diagnostics returned alongside results."""

    items: List[Diagnostic] = field(default_factory=list)

    def add(
        self,
        kind: DiagnosticKind,
        message: str,
        *,
        path: Optional[str] = None,
        name: Optional[str] = None,
    ) -> Diagnostic:
        diagnostic = Diagnostic(kind=kind, message=message, path=path, name=name)
        self.items.append(diagnostic)
        return diagnostic

    def extend(self, other: "Diagnostics") -> None:
        self.items.extend(other.items)

    def of_kind(self, kind: DiagnosticKind) -> List[Diagnostic]:
        return [item for item in self.items if item.kind is kind]

    def __iter__(self) -> Iterator[Diagnostic]:
        return iter(self.items)

    def __len__(self) -> int:
        return len(self.items)


__all__ = [
    "Diagnostic",
    "DiagnosticKind",
    "Diagnostics",
    "Fragment",
    "ResolvedSnippet",
]
