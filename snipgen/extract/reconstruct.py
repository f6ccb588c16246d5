"""Turn token trees back into Rust source text."""

from __future__ import annotations

import re
from typing import List, Optional, Sequence

from ..syntax.tokens import Group, Token, TokenTree, doc_payload

_UNESCAPE_RE = re.compile(r"\\(?:u\{([0-9a-fA-F]{1,6})\}|(.))", re.DOTALL)
_RAW_PAYLOAD_RE = re.compile(r'^r(#*)"(.*)"\1$', re.DOTALL)
_PAYLOAD_RE = re.compile(r'^"(.*)"$', re.DOTALL)
_SIMPLE_ESCAPES = {
    "\\": "\\",
    '"': '"',
    "'": "'",
    "t": "\t",
    "n": "\n",
    "r": "\r",
    "0": "\0",
}
# EN SPACE through HAIR SPACE come back as a plain space. Comment text copied
# from rendered documentation often carries these instead of ASCII spaces.
_SPACE_LIKE = range(0x2002, 0x200B)

OUTER_DOC_MARKER = "///"
INNER_DOC_MARKER = "//!"


def unescape(text: str) -> str:
    """Undo string-literal escaping of a doc payload."""
    return _UNESCAPE_RE.sub(_replace_escape, text)


def _replace_escape(match: "re.Match[str]") -> str:
    code, simple = match.groups()
    if code is not None:
        value = int(code, 16)
        if value in _SPACE_LIKE:
            return " "
        try:
            return chr(value)
        except (ValueError, OverflowError):
            return match.group(0)
    return _SIMPLE_ESCAPES.get(simple, match.group(0))


def _payload_text(token: Token) -> Optional[str]:
    raw = _RAW_PAYLOAD_RE.match(token.text)
    if raw:
        return raw.group(2)
    cooked = _PAYLOAD_RE.match(token.text)
    if cooked:
        return unescape(cooked.group(1))
    return None


def _lines(text: str) -> List[str]:
    lines = text.split("\n")
    if lines and lines[-1] == "":
        lines.pop()
    return [line[:-1] if line.endswith("\r") else line for line in lines]


def render_doc(token: Token, *, inner: bool) -> Optional[str]:
    """Render a ``doc = "..."`` payload as ``///`` or ``//!`` lines."""
    text = _payload_text(token)
    if text is None:
        return None
    marker = INNER_DOC_MARKER if inner else OUTER_DOC_MARKER
    return "".join(f"{marker}{line}\n" for line in _lines(text))


def reconstruct(tokens: Sequence[TokenTree], *, doc_hidden: bool = False) -> str:
    """Serialise ``tokens`` to text, re-rendering doc attributes as comments."""
    out: List[str] = []
    _write(tokens, doc_hidden, out)
    return "".join(out)


def _write(tokens: Sequence[TokenTree], doc_hidden: bool, out: List[str]) -> None:
    index = 0
    while index < len(tokens):
        token = tokens[index]
        if isinstance(token, Token) and token.is_punct("#"):
            consumed = _write_doc(tokens, index, doc_hidden, out)
            if consumed:
                index += consumed
                continue
        if isinstance(token, Group):
            out.append(token.delimiter.open)
            _write(token.stream, doc_hidden, out)
            out.append(token.delimiter.close)
            out.append(" ")
        else:
            out.append(token.text)
            out.append(" ")
        index += 1


def _write_doc(tokens: Sequence[TokenTree], index: int, doc_hidden: bool, out: List[str]) -> int:
    """Emit the doc attribute starting at ``tokens[index]``; return tokens consumed."""
    following = tokens[index + 1] if index + 1 < len(tokens) else None
    inner = isinstance(following, Token) and following.is_punct("!")
    group_index = index + 2 if inner else index + 1
    if group_index >= len(tokens):
        return 0
    payload = doc_payload(tokens[group_index])
    if payload is None:
        return 0
    consumed = group_index - index + 1
    if doc_hidden:
        return consumed
    rendered = render_doc(payload, inner=inner)
    if rendered is None:
        return 0
    if rendered and out and not out[-1].endswith("\n"):
        out.append("\n")
    out.append(rendered)
    return consumed


__all__ = [
    "INNER_DOC_MARKER",
    "OUTER_DOC_MARKER",
    "reconstruct",
    "render_doc",
    "unescape",
]
