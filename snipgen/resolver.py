"""Merge fragments by name and expand their declared dependencies."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Dict, List, Sequence

from .logging import get_logger
from .models import DiagnosticKind, Diagnostics, Fragment, ResolvedSnippet


@dataclass
class _Accumulator:
    prefix: str = ""
    body: str = ""

    def add(self, prefix: str, body: str) -> None:
        if prefix:
            self.prefix += prefix if prefix.endswith("\n") else prefix + "\n"
        self.body += body


@dataclass
class Resolution:
    """Resolved snippets keyed by name (lexicographic order) plus diagnostics."""

    snippets: Dict[str, ResolvedSnippet] = field(default_factory=dict)
    diagnostics: Diagnostics = field(default_factory=Diagnostics)

    def texts(self) -> Dict[str, str]:
        return {name: snippet.text for name, snippet in self.snippets.items()}


class DependencyResolver:
    """Builds self-contained snippet text, dependencies first.

    Fragments that share a name are concatenated in the order they were
    scanned. For every name, the transitive closure of its ``include`` list is
    walked depth first; each dependency contributes its accumulated prefix and
    body exactly once, ahead of the snippet's own text. All prefixes precede
    all bodies in the final text.
    """

    def __init__(self) -> None:
        self.logger = get_logger("resolver")

    def resolve(self, fragments: Sequence[Fragment]) -> Resolution:
        own: Dict[str, _Accumulator] = {}
        deps: Dict[str, Dict[str, None]] = {}
        origins: Dict[str, str] = {}

        for fragment in fragments:
            for name in fragment.names:
                own.setdefault(name, _Accumulator()).add(fragment.prefix, fragment.body)
                requires = deps.setdefault(name, {})
                for dependency in fragment.dependencies:
                    requires[dependency] = None
                if fragment.origin and name not in origins:
                    origins[name] = fragment.origin

        resolution = Resolution()
        for name in sorted(own):
            merged = _Accumulator()
            for dependency in self._closure(name, own, deps, resolution.diagnostics, origins):
                merged.prefix += own[dependency].prefix
                merged.body += own[dependency].body
            merged.prefix += own[name].prefix
            merged.body += own[name].body
            resolution.snippets[name] = ResolvedSnippet(
                name=name, prefix=merged.prefix, body=merged.body
            )
        self.logger.debug("Resolved %d snippets", len(resolution.snippets))
        return resolution

    def _closure(
        self,
        name: str,
        own: Dict[str, _Accumulator],
        deps: Dict[str, Dict[str, None]],
        diagnostics: Diagnostics,
        origins: Dict[str, str],
    ) -> List[str]:
        """Return the dependencies of ``name`` in first-visited depth-first order."""
        visited = {name}
        order: List[str] = []
        stack = list(reversed(deps.get(name, {})))
        while stack:
            dependency = stack.pop()
            if dependency in visited:
                continue
            visited.add(dependency)
            if dependency not in own:
                diagnostics.add(
                    DiagnosticKind.MISSING_DEPENDENCY,
                    f"snippet {name!r} includes {dependency!r}, which is not defined",
                    path=origins.get(name),
                    name=name,
                )
                continue
            order.append(dependency)
            stack.extend(
                nested for nested in reversed(deps.get(dependency, {})) if nested not in visited
            )
        return order


def resolve_fragments(fragments: Sequence[Fragment]) -> Resolution:
    """Resolve ``fragments`` with a default :class:`DependencyResolver`."""
    return DependencyResolver().resolve(fragments)


__all__ = ["DependencyResolver", "Resolution", "resolve_fragments"]
