"""Typed extraction of record fields from generic grammar blocks.

Every helper takes the block, the key and a ``context`` naming the enclosing
record so errors read ``missing required field 'id' in 'strategic_region'``.
Keys that no helper asks for are never looked at, which is how unknown keys
get ignored.
"""

from __future__ import annotations

import math
import re
from collections.abc import Callable
from typing import TypeVar

from regionmap.errors import InvalidNumber, InvalidValue, MalformedStructure, MissingField
from regionmap.grammar.tree import Block, Entry, Scalar

T = TypeVar("T")

INT_RE = re.compile(r"^[+-]?\d+$")
FLOAT_RE = re.compile(r"^[+-]?(?:\d+(?:\.\d*)?|\.\d+)$")

BOOL_LITERALS = {"yes": True, "no": False}


def require_entry(block: Block, key: str, *, context: str) -> Entry:
    entry = block.find(key)
    if entry is None:
        raise MissingField(key, block=context)
    return entry


def require_block(block: Block, key: str, *, context: str) -> Block:
    return as_block(require_entry(block, key, context=context))


def as_block(entry: Entry) -> Block:
    if not isinstance(entry.value, Block):
        raise MalformedStructure(
            f"field '{entry.key}' expects a '{{ ... }}' block, got {entry.value.text!r}",
            line=entry.line,
        )
    return entry.value


def as_scalar(entry: Entry) -> Scalar:
    if not isinstance(entry.value, Scalar):
        raise MalformedStructure(
            f"field '{entry.key}' expects a single value, got a block", line=entry.line
        )
    return entry.value


def parse_int(scalar: Scalar, field: str, *, non_negative: bool = False) -> int:
    text = scalar.text.strip()
    if not INT_RE.match(text):
        raise InvalidNumber(field, scalar.text, expected="an integer", line=scalar.line)
    try:
        value = int(text)
    except ValueError:
        # past the interpreter's integer digit limit
        raise InvalidNumber(
            field, scalar.text, expected="an integer within the digit limit", line=scalar.line
        ) from None
    if non_negative and value < 0:
        raise InvalidNumber(
            field, scalar.text, expected="a non-negative integer", line=scalar.line
        )
    return value


def parse_float(
    scalar: Scalar,
    field: str,
    *,
    minimum: float | None = None,
    below: float | None = None,
) -> float:
    """Parse a decimal literal, optionally bounded to ``[minimum, below)``.

    Only plain decimal notation is accepted, so ``inf`` and ``nan`` are never
    spelled out.  A literal with too many digits still overflows to infinity
    and is rejected.
    """

    text = scalar.text.strip()
    if not FLOAT_RE.match(text):
        raise InvalidNumber(field, scalar.text, line=scalar.line)
    try:
        value = float(text)
    except ValueError:
        raise InvalidNumber(field, scalar.text, line=scalar.line) from None
    if not math.isfinite(value):
        raise InvalidNumber(field, scalar.text, expected="a finite number", line=scalar.line)
    if minimum is not None and value < minimum:
        raise InvalidNumber(
            field, scalar.text, expected=f"a number >= {minimum:g}", line=scalar.line
        )
    if below is not None and value >= below:
        raise InvalidNumber(
            field, scalar.text, expected=f"a number < {below:g}", line=scalar.line
        )
    return value


def parse_bool(scalar: Scalar, field: str) -> bool:
    try:
        return BOOL_LITERALS[scalar.text.strip().lower()]
    except KeyError:
        raise InvalidValue(field, scalar.text, expected="'yes' or 'no'", line=scalar.line) from None


def read_int(block: Block, key: str, *, context: str, non_negative: bool = False) -> int:
    entry = require_entry(block, key, context=context)
    return parse_int(as_scalar(entry), key, non_negative=non_negative)


def read_float(
    block: Block,
    key: str,
    *,
    context: str,
    minimum: float | None = None,
    below: float | None = None,
) -> float:
    entry = require_entry(block, key, context=context)
    return parse_float(as_scalar(entry), key, minimum=minimum, below=below)


def read_text(block: Block, key: str, *, context: str) -> str:
    return as_scalar(require_entry(block, key, context=context)).text


def read_bool(block: Block, key: str, *, context: str) -> bool:
    entry = require_entry(block, key, context=context)
    return parse_bool(as_scalar(entry), key)


def list_scalars(entry: Entry) -> list[Scalar]:
    """Return the bare values of a ``key = { a b c }`` list."""

    body = as_block(entry)
    scalars: list[Scalar] = []
    for item in body.items:
        if not isinstance(item, Scalar):
            raise MalformedStructure(
                f"field '{entry.key}' expects a list of plain values", line=entry.line
            )
        scalars.append(item)
    return scalars


def read_list(
    block: Block,
    key: str,
    convert: Callable[[Scalar, str], T],
    *,
    context: str,
) -> list[T]:
    entry = require_entry(block, key, context=context)
    return [convert(scalar, key) for scalar in list_scalars(entry)]


def read_pair(
    block: Block,
    key: str,
    *,
    context: str,
    minimum: float | None = None,
    below: float | None = None,
) -> tuple[tuple[float, float], tuple[str, str]]:
    """Read ``key = { a b }`` as two floats, also returning the literals."""

    entry = require_entry(block, key, context=context)
    scalars = list_scalars(entry)
    if len(scalars) != 2:
        raise MalformedStructure(
            f"field '{key}' expects exactly 2 values, got {len(scalars)}", line=entry.line
        )
    first, second = (
        parse_float(scalar, key, minimum=minimum, below=below) for scalar in scalars
    )
    return (first, second), (scalars[0].text, scalars[1].text)


def entry_blocks(block: Block, key: str) -> list[Block]:
    """Return every ``key = { ... }`` body in source order."""

    return [as_block(entry) for entry in block.find_all(key)]
