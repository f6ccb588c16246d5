"""Formatting and serialization of resolved snippets."""

from .formatter import Formatter, PassthroughFormatter, RustfmtFormatter
from .writers import OutputType, write_snippets

__all__ = [
    "Formatter",
    "OutputType",
    "PassthroughFormatter",
    "RustfmtFormatter",
    "write_snippets",
]
