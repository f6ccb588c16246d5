"""Token trees used as the internal representation of Rust source."""

from __future__ import annotations

import re
from dataclasses import dataclass
from enum import Enum
from typing import Optional, Sequence, Tuple, Union


class TokenKind(str, Enum):
    IDENT = "ident"
    PUNCT = "punct"
    LITERAL = "literal"


class Delimiter(str, Enum):
    PARENTHESIS = "()"
    BRACE = "{}"
    BRACKET = "[]"

    @property
    def open(self) -> str:
        return self.value[0]

    @property
    def close(self) -> str:
        return self.value[1]


@dataclass(frozen=True)
class Token:
    """A single leaf token: identifier, punctuation or literal."""

    kind: TokenKind
    text: str

    def is_punct(self, text: str) -> bool:
        return self.kind is TokenKind.PUNCT and self.text == text

    def is_ident(self, text: str | None = None) -> bool:
        if self.kind is not TokenKind.IDENT:
            return False
        return text is None or self.text == text


@dataclass(frozen=True)
class Group:
    """A delimited sequence of token trees."""

    delimiter: Delimiter
    stream: Tuple["TokenTree", ...]


TokenTree = Union[Token, Group]

OPENERS = {delimiter.open: delimiter for delimiter in Delimiter}
CLOSERS = {delimiter.close: delimiter for delimiter in Delimiter}

_IDENT_RE = re.compile(r"^(?:r#)?[A-Za-z_][A-Za-z0-9_]*$")
_RAW_STRING_RE = re.compile(r'^b?r(#*)"(.*)"\1$', re.DOTALL)
_STRING_RE = re.compile(r'^b?"(.*)"$', re.DOTALL)
_LITERAL_ESCAPE_RE = re.compile(
    r"\\(?:u\{([0-9a-fA-F_]{1,8})\}|x([0-9a-fA-F]{2})|\n[ \t\r\n]*|(.))", re.DOTALL
)
_SIMPLE_ESCAPES = {
    "n": "\n",
    "r": "\r",
    "t": "\t",
    "\\": "\\",
    "0": "\0",
    "'": "'",
    '"': '"',
}


def ident(text: str) -> Token:
    return Token(TokenKind.IDENT, text)


def punct(text: str) -> Token:
    return Token(TokenKind.PUNCT, text)


def literal(text: str) -> Token:
    return Token(TokenKind.LITERAL, text)


def classify(text: str) -> TokenKind:
    """Guess the kind of a leaf that is not known to be a literal."""
    if _IDENT_RE.match(text):
        return TokenKind.IDENT
    return TokenKind.PUNCT


def escape_string(value: str) -> str:
    """Escape ``value`` the way a Rust string literal debug form would."""
    out = []
    for ch in value:
        if ch == "\\":
            out.append("\\\\")
        elif ch == '"':
            out.append('\\"')
        elif ch == "\n":
            out.append("\\n")
        elif ch == "\r":
            out.append("\\r")
        elif ch == "\t":
            out.append("\\t")
        elif ch == "\0":
            out.append("\\0")
        elif not ch.isprintable():
            out.append("\\u{%x}" % ord(ch))
        else:
            out.append(ch)
    return "".join(out)


def string_literal_value(token: TokenTree) -> Optional[str]:
    """Return the value of a (raw) string literal token, or None for anything else."""
    if not isinstance(token, Token) or token.kind is not TokenKind.LITERAL:
        return None
    raw = _RAW_STRING_RE.match(token.text)
    if raw:
        return raw.group(2)
    cooked = _STRING_RE.match(token.text)
    if cooked is None:
        return None
    return _LITERAL_ESCAPE_RE.sub(_replace_literal_escape, cooked.group(1))


def _replace_literal_escape(match: "re.Match[str]") -> str:
    unicode_hex, byte_hex, simple = match.groups()
    if unicode_hex is not None:
        try:
            return chr(int(unicode_hex.replace("_", ""), 16))
        except (ValueError, OverflowError):
            return match.group(0)
    if byte_hex is not None:
        return chr(int(byte_hex, 16))
    if simple is None:
        # Line continuation swallows the newline and leading whitespace.
        return ""
    return _SIMPLE_ESCAPES.get(simple, match.group(0))


def doc_attribute(payload: str, *, inner: bool) -> Tuple[TokenTree, ...]:
    """Build ``#[doc = "..."]`` (or ``#![doc = "..."]``) tokens for a doc comment."""
    body = Group(
        Delimiter.BRACKET,
        (ident("doc"), punct("="), literal('"' + escape_string(payload) + '"')),
    )
    if inner:
        return (punct("#"), punct("!"), body)
    return (punct("#"), body)


def doc_payload(group: TokenTree) -> Optional[Token]:
    """Return the literal of a ``[doc = "..."]`` bracket group, if ``group`` is one."""
    if not isinstance(group, Group) or group.delimiter is not Delimiter.BRACKET:
        return None
    stream = group.stream
    if len(stream) != 3:
        return None
    name, eq, value = stream
    if not (isinstance(name, Token) and name.is_ident("doc")):
        return None
    if not (isinstance(eq, Token) and eq.is_punct("=")):
        return None
    if not isinstance(value, Token) or value.kind is not TokenKind.LITERAL:
        return None
    return value


def path_prefix(stream: Sequence[TokenTree]) -> Tuple[str, int]:
    """Read a leading ``a::b::c`` path; return its normalised text and token count."""
    parts = []
    index = 0
    expect_ident = True
    while index < len(stream):
        token = stream[index]
        if not isinstance(token, Token):
            break
        if expect_ident and token.is_ident():
            parts.append(token.text)
            expect_ident = False
        elif token.is_punct("::"):
            parts.append("::")
            expect_ident = True
        else:
            break
        index += 1
    if expect_ident and parts:
        # A trailing `::` is not part of a valid path.
        parts.pop()
        index -= 1
    return "".join(parts), index


__all__ = [
    "CLOSERS",
    "Delimiter",
    "Group",
    "OPENERS",
    "Token",
    "TokenKind",
    "TokenTree",
    "classify",
    "doc_attribute",
    "doc_payload",
    "escape_string",
    "ident",
    "literal",
    "path_prefix",
    "punct",
    "string_literal_value",
]
