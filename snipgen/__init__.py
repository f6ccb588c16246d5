"""Extract editor snippets from annotated Rust sources."""

__version__ = "0.1.0"
