"""Exception hierarchy for map data parsing and validation.

Parse errors describe text that cannot be turned into a record at all.
Validation errors describe records that parsed but break a rule, either on
their own (an empty name) or across a batch (a duplicated region id).
"""

from __future__ import annotations

from collections.abc import Sequence
from pathlib import Path


class RegionMapError(Exception):
    """Base class for every error raised by the loader."""

    def __init__(self, message: str, *, source: Path | str | None = None) -> None:
        self.message = message
        self.source = source
        super().__init__(message)

    def with_source(self, source: Path | str) -> RegionMapError:
        """Attach the originating file if none was recorded yet."""

        if self.source is None:
            self.source = source
        return self

    def __str__(self) -> str:
        if self.source is None:
            return self.message
        return f"{self.source}: {self.message}"


class ParseError(RegionMapError, ValueError):
    """Text could not be turned into a record."""


class MalformedStructure(ParseError):
    """Grammar error: unbalanced braces, stray operators, bad shapes."""

    def __init__(
        self,
        message: str,
        *,
        line: int | None = None,
        source: Path | str | None = None,
    ) -> None:
        self.line = line
        if line is not None:
            message = f"line {line}: {message}"
        super().__init__(message, source=source)


class MissingField(ParseError):
    """A required key is absent from a block."""

    def __init__(
        self, field: str, *, block: str | None = None, source: Path | str | None = None
    ) -> None:
        self.field = field
        self.block = block
        where = f" in '{block}'" if block else ""
        super().__init__(f"missing required field '{field}'{where}", source=source)


class InvalidValue(ParseError):
    """A literal does not have the shape its field expects."""

    expected = "a valid value"

    def __init__(
        self,
        field: str,
        literal: str,
        *,
        expected: str | None = None,
        line: int | None = None,
        source: Path | str | None = None,
    ) -> None:
        self.field = field
        self.literal = literal
        self.line = line
        if expected is not None:
            self.expected = expected
        where = f" (line {line})" if line is not None else ""
        super().__init__(
            f"field '{field}' expected {self.expected}, got {literal!r}{where}",
            source=source,
        )


class InvalidNumber(InvalidValue):
    """A numeric literal cannot be parsed as its declared type."""

    expected = "a number"


class ValidationError(RegionMapError, ValueError):
    """A parsed record breaks a data rule."""


class EmptyField(ValidationError):
    """A field that must hold something is empty."""

    def __init__(
        self,
        field: str,
        *,
        region_id: int | None = None,
        source: Path | str | None = None,
    ) -> None:
        self.field = field
        self.region_id = region_id
        label = f"region {region_id}" if region_id is not None else "record"
        super().__init__(f"{label} has an empty '{field}'", source=source)


class DuplicateId(ValidationError):
    """Several records in one batch share a region id."""

    def __init__(self, region_id: int, sources: Sequence[Path | str]) -> None:
        self.region_id = region_id
        self.sources = tuple(sources)
        listed = ", ".join(str(source) for source in self.sources)
        super().__init__(f"strategic region id {region_id} is defined in {listed}")


class FileNameMismatch(ValidationError):
    """A region file name does not match the record it holds."""


class BatchLoadError(RegionMapError):
    """Raised once for a batch, carrying every collected error."""

    def __init__(self, errors: Sequence[RegionMapError]) -> None:
        self.errors = tuple(errors)
        lines = "\n".join(f"  {error}" for error in self.errors)
        super().__init__(f"{len(self.errors)} error(s) while loading map data:\n{lines}")
