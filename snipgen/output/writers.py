"""Serializers for editor snippet formats."""

from __future__ import annotations

import json
from enum import Enum
from typing import Callable, Dict, List, Mapping, TextIO


def _lines(text: str) -> List[str]:
    lines = text.split("\n")
    if lines and lines[-1] == "":
        lines.pop()
    return [line[:-1] if line.endswith("\r") else line for line in lines]


class OutputType(str, Enum):
    NEOSNIPPET = "neosnippet"
    VSCODE = "vscode"
    ULTISNIPS = "ultisnips"

    @classmethod
    def parse(cls, value: str) -> "OutputType":
        try:
            return cls(value.strip().lower())
        except ValueError as exc:
            choices = ", ".join(member.value for member in cls)
            raise ValueError(f"Unknown output type {value!r} (expected one of: {choices})") from exc


def write_neosnippet(snippets: Mapping[str, str], stream: TextIO) -> None:
    for name in sorted(snippets):
        stream.write(f"snippet {name}\n")
        for line in _lines(snippets[name]):
            stream.write(f"    {line}\n")
        stream.write("\n")


def write_vscode(snippets: Mapping[str, str], stream: TextIO) -> None:
    document = {
        name: {
            "prefix": name,
            # `$` starts a placeholder in VS Code snippet bodies.
            "body": [line.replace("$", "\\$") for line in _lines(snippets[name])],
        }
        for name in sorted(snippets)
    }
    stream.write(json.dumps(document, indent=2, ensure_ascii=False))
    stream.write("\n")


def write_ultisnips(snippets: Mapping[str, str], stream: TextIO) -> None:
    for name in sorted(snippets):
        text = snippets[name]
        stream.write(f"snippet {name}\n")
        stream.write(text)
        if text and not text.endswith("\n"):
            stream.write("\n")
        stream.write("endsnippet\n")
        stream.write("\n")


Writer = Callable[[Mapping[str, str], TextIO], None]

WRITERS: Dict[OutputType, Writer] = {
    OutputType.NEOSNIPPET: write_neosnippet,
    OutputType.VSCODE: write_vscode,
    OutputType.ULTISNIPS: write_ultisnips,
}


def write_snippets(output_type: OutputType, snippets: Mapping[str, str], stream: TextIO) -> None:
    """Write formatted ``snippets`` to ``stream`` in the given format."""
    WRITERS[output_type](snippets, stream)


__all__ = [
    "OutputType",
    "WRITERS",
    "write_neosnippet",
    "write_snippets",
    "write_ultisnips",
    "write_vscode",
]
