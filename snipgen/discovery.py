"""Locate the Rust sources to extract snippets from."""

from __future__ import annotations

import os
from fnmatch import fnmatchcase
from pathlib import Path
from typing import Iterator, List, Optional, Sequence

from .logging import get_logger
from .models import DiagnosticKind, Diagnostics

MANIFEST_FILENAME = "Cargo.toml"
SOURCE_DIRNAME = "src"
SOURCE_SUFFIX = ".rs"

_EXCLUDED_DIRS = {
    ".git",
    ".hg",
    ".svn",
    "target",
    "node_modules",
}


def find_project_root(start: Path | None = None) -> Optional[Path]:
    """Return the nearest directory at or above ``start`` holding a Cargo.toml."""
    current = (start or Path.cwd()).resolve()
    for candidate in (current, *current.parents):
        if (candidate / MANIFEST_FILENAME).is_file():
            return candidate
    return None


class SourceDiscovery:
    """Expands files and directories into an ordered list of ``.rs`` files."""

    def __init__(self, exclude_paths: Sequence[str] = ()) -> None:
        self.exclude_paths = [pattern.strip() for pattern in exclude_paths if pattern.strip()]
        self.logger = get_logger("discovery")

    def discover(
        self,
        targets: Sequence[str],
        *,
        project_root: Path | None = None,
        diagnostics: Diagnostics | None = None,
    ) -> List[Path]:
        """Resolve ``targets``; with no targets, use ``<project root>/src``."""
        if not targets:
            root = project_root if project_root is not None else find_project_root()
            if root is None:
                self._report(
                    diagnostics,
                    f"no {MANIFEST_FILENAME} found above {Path.cwd()}; pass paths explicitly",
                    None,
                )
                return []
            source_dir = root / SOURCE_DIRNAME
            if not source_dir.is_dir():
                self._report(diagnostics, "source directory does not exist", str(source_dir))
                return []
            return list(self._walk(source_dir))

        paths: List[Path] = []
        seen = set()
        for target in targets:
            path = Path(target).expanduser()
            if path.is_dir():
                found = list(self._walk(path))
            elif path.is_file():
                found = [path]
            else:
                self._report(diagnostics, "path does not exist", str(path))
                continue
            for item in found:
                key = item.resolve()
                if key not in seen:
                    seen.add(key)
                    paths.append(item)
        self.logger.debug("Discovered %d source files", len(paths))
        return paths

    def _walk(self, directory: Path) -> Iterator[Path]:
        found: List[Path] = []
        for current, dirnames, filenames in os.walk(directory):
            current_path = Path(current)
            dirnames[:] = sorted(
                name
                for name in dirnames
                if name not in _EXCLUDED_DIRS
                and not self._is_excluded(_relative(current_path / name, directory))
            )
            for filename in filenames:
                if not filename.endswith(SOURCE_SUFFIX):
                    continue
                candidate = current_path / filename
                if self._is_excluded(_relative(candidate, directory)):
                    continue
                found.append(candidate)
        yield from sorted(found)

    def _is_excluded(self, rel_path: str) -> bool:
        for pattern in self.exclude_paths:
            if pattern.endswith("/"):
                prefix = pattern.rstrip("/")
                if rel_path == prefix or rel_path.startswith(f"{prefix}/"):
                    return True
                continue
            if fnmatchcase(rel_path, pattern):
                return True
            if "/" not in pattern and any(fnmatchcase(part, pattern) for part in rel_path.split("/")):
                return True
        return False

    def _report(self, diagnostics: Diagnostics | None, message: str, path: Optional[str]) -> None:
        if diagnostics is not None:
            diagnostics.add(DiagnosticKind.READ, message, path=path)
        else:
            self.logger.warning("%s%s", f"{path}: " if path else "", message)


def _relative(path: Path, root: Path) -> str:
    return path.relative_to(root).as_posix()


__all__ = ["MANIFEST_FILENAME", "SourceDiscovery", "find_project_root"]
