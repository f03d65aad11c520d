"""Tokenizer for the brace-delimited key/value format used by map data files.

The format is line-insensitive::

    strategic_region = {
        id = 173
        name = "C_DAKOTA"
        provinces = { 1 2 3 }   # comments run to end of line
    }

Comments are removed before tokenizing.  A ``#`` inside a quoted string is
part of the string, not a comment.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import StrEnum

from regionmap.errors import MalformedStructure

OPERATORS = ("<=", ">=", "!=", "?=", "==", "=", "<", ">")
_DELIMITERS = frozenset('{}=<>"#')


class TokenKind(StrEnum):
    """Lexical categories of the grammar."""

    OPEN = "open"
    CLOSE = "close"
    OPERATOR = "operator"
    WORD = "word"
    STRING = "string"


@dataclass(frozen=True, slots=True)
class Token:
    """A single lexical token and the line it starts on."""

    kind: TokenKind
    text: str
    line: int


def strip_comments(text: str) -> str:
    """Remove ``#`` comments, keeping line breaks so line numbers survive.

    Applying the function twice gives the same result as applying it once.
    """

    out: list[str] = []
    in_string = False
    in_comment = False
    escaped = False
    for char in text:
        if in_comment:
            if char == "\n":
                in_comment = False
                out.append(char)
            continue
        if in_string:
            out.append(char)
            if escaped:
                escaped = False
            elif char == "\\":
                escaped = True
            elif char == '"':
                in_string = False
            continue
        if char == "#":
            in_comment = True
            continue
        if char == '"':
            in_string = True
        out.append(char)
    return "".join(out)


def tokenize(text: str) -> list[Token]:
    """Split source text into tokens.

    Raises:
        MalformedStructure: on an unterminated quoted string.
    """

    source = strip_comments(text.removeprefix("\ufeff"))
    tokens: list[Token] = []
    line = 1
    index = 0
    length = len(source)

    while index < length:
        char = source[index]

        if char == "\n":
            line += 1
            index += 1
            continue
        if char.isspace():
            index += 1
            continue
        if char == "{":
            tokens.append(Token(TokenKind.OPEN, char, line))
            index += 1
            continue
        if char == "}":
            tokens.append(Token(TokenKind.CLOSE, char, line))
            index += 1
            continue

        operator = _match_operator(source, index)
        if operator is not None:
            tokens.append(Token(TokenKind.OPERATOR, operator, line))
            index += len(operator)
            continue

        if char == '"':
            text_value, index, end_line = _read_string(source, index + 1, line)
            tokens.append(Token(TokenKind.STRING, text_value, line))
            line = end_line
            continue

        start = index
        while index < length:
            char = source[index]
            if char.isspace() or char in _DELIMITERS:
                break
            index += 1
        tokens.append(Token(TokenKind.WORD, source[start:index], line))

    return tokens


def _match_operator(source: str, index: int) -> str | None:
    for operator in OPERATORS:
        if source.startswith(operator, index):
            return operator
    return None


def _read_string(source: str, index: int, line: int) -> tuple[str, int, int]:
    """Read a quoted string body starting after the opening quote."""

    start_line = line
    chars: list[str] = []
    length = len(source)
    while index < length:
        char = source[index]
        if char == "\\" and index + 1 < length and source[index + 1] in '"\\':
            chars.append(source[index + 1])
            index += 2
            continue
        if char == '"':
            return "".join(chars), index + 1, line
        if char == "\n":
            line += 1
        chars.append(char)
        index += 1
    raise MalformedStructure("unterminated quoted string", line=start_line)
