"""Snippet extraction: marker metadata, declaration scanning and text reconstruction."""

from .metadata import DEFAULT_MARKERS, MarkerMatcher, SnippetAttributes, parse_snippet_attributes
from .reconstruct import reconstruct, unescape
from .scanner import SnippetScanner

__all__ = [
    "DEFAULT_MARKERS",
    "MarkerMatcher",
    "SnippetAttributes",
    "SnippetScanner",
    "parse_snippet_attributes",
    "reconstruct",
    "unescape",
]
