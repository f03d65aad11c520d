"""Generic tree for the brace grammar.

The parser knows nothing about regions, rules or cities.  It turns text into
nested :class:`Block` values; typed extraction happens in
:mod:`regionmap.domain`.
"""

from __future__ import annotations

from collections.abc import Iterator
from dataclasses import dataclass, field

from regionmap.errors import MalformedStructure
from regionmap.grammar.tokenizer import Token, TokenKind, tokenize


@dataclass(frozen=True, slots=True)
class Scalar:
    """A bare word or quoted string."""

    text: str
    quoted: bool = False
    line: int | None = field(default=None, compare=False)


@dataclass(frozen=True, slots=True)
class Entry:
    """``key <operator> value`` inside a block."""

    key: str
    operator: str
    value: Value
    line: int | None = field(default=None, compare=False)


@dataclass(frozen=True, slots=True)
class Block:
    """An ordered ``{ ... }`` body: entries and bare values, in source order."""

    items: tuple[Item, ...] = ()
    line: int | None = field(default=None, compare=False)

    def entries(self) -> Iterator[Entry]:
        for item in self.items:
            if isinstance(item, Entry):
                yield item

    def values(self) -> tuple[Value, ...]:
        """Return the bare (keyless) values, e.g. the ids in ``{ 1 2 3 }``."""

        return tuple(item for item in self.items if not isinstance(item, Entry))

    def keys(self) -> list[str]:
        seen: dict[str, None] = {}
        for entry in self.entries():
            seen.setdefault(entry.key, None)
        return list(seen)

    def find(self, key: str) -> Entry | None:
        """Return the last entry for ``key``; later assignments win."""

        found = None
        for entry in self.entries():
            if entry.key == key:
                found = entry
        return found

    def find_all(self, key: str) -> list[Entry]:
        return [entry for entry in self.entries() if entry.key == key]

    def get(self, key: str, default: Value | None = None) -> Value | None:
        entry = self.find(key)
        return default if entry is None else entry.value

    def get_all(self, key: str) -> list[Value]:
        return [entry.value for entry in self.find_all(key)]

    def __contains__(self, key: object) -> bool:
        return any(entry.key == key for entry in self.entries())

    def __len__(self) -> int:
        return len(self.items)


Value = Scalar | Block
Item = Entry | Scalar | Block


@dataclass(slots=True)
class _Frame:
    """A block whose closing brace has not been reached yet."""

    parent: list[Item]
    opened_at: int
    key: Token | None = None
    operator: Token | None = None
    items: list[Item] = field(default_factory=list)

    def close(self) -> Item:
        block = Block(tuple(self.items), line=self.opened_at)
        if self.key is None or self.operator is None:
            return block
        return Entry(self.key.text, self.operator.text, block, line=self.key.line)


class _Parser:
    """Builds the tree with an explicit stack, so nesting depth is unbounded."""

    def __init__(self, tokens: list[Token]) -> None:
        self._tokens = tokens
        self._index = 0

    def _peek(self) -> Token | None:
        if self._index < len(self._tokens):
            return self._tokens[self._index]
        return None

    def _advance(self) -> Token:
        token = self._tokens[self._index]
        self._index += 1
        return token

    def parse_document(self) -> Block:
        root: list[Item] = []
        stack: list[_Frame] = []
        items = root

        while True:
            token = self._peek()
            if token is None:
                if stack:
                    raise MalformedStructure(
                        "unexpected end of input: "
                        f"block opened on line {stack[-1].opened_at} is never closed"
                    )
                return Block(tuple(root), line=1)

            if token.kind is TokenKind.CLOSE:
                self._advance()
                if not stack:
                    raise MalformedStructure("unexpected '}' without matching '{'", line=token.line)
                frame = stack.pop()
                frame.parent.append(frame.close())
                items = frame.parent
                continue

            if token.kind is TokenKind.OPERATOR:
                raise MalformedStructure(f"operator '{token.text}' has no key", line=token.line)

            if token.kind is TokenKind.OPEN:
                self._advance()
                stack.append(_Frame(parent=items, opened_at=token.line))
                items = stack[-1].items
                continue

            self._advance()
            following = self._peek()
            if following is None or following.kind is not TokenKind.OPERATOR:
                items.append(_scalar(token))
                continue

            self._advance()
            value = self._value_token(token, following)
            if value.kind is TokenKind.OPEN:
                stack.append(
                    _Frame(parent=items, opened_at=value.line, key=token, operator=following)
                )
                items = stack[-1].items
            else:
                items.append(Entry(token.text, following.text, _scalar(value), line=token.line))

    def _value_token(self, key: Token, operator: Token) -> Token:
        token = self._peek()
        if token is None or token.kind in (TokenKind.CLOSE, TokenKind.OPERATOR):
            raise MalformedStructure(
                f"missing value after '{key.text} {operator.text}'", line=operator.line
            )
        return self._advance()


def _scalar(token: Token) -> Scalar:
    return Scalar(token.text, quoted=token.kind is TokenKind.STRING, line=token.line)


def parse_document(text: str) -> Block:
    """Parse a whole file into its top-level block.

    Raises:
        MalformedStructure: for unbalanced braces, dangling operators or
            unterminated strings.
    """

    return _Parser(tokenize(text)).parse_document()
