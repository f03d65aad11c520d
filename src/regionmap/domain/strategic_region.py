"""Strategic region records: provinces plus a seasonal weather table.

A region file holds exactly one block::

    strategic_region = {
        id = 173
        name = "C_DAKOTA"
        provinces = { 1583 1642 ... }
        weather = {
            period = {
                between = { 0.0 30.0 }
                temperature = { -32.0 -2.0 }
                ...
            }
        }
    }

Parsing is a pure transform from text to a frozen :class:`StrategicRegion`;
nothing partial is ever returned.  Validation is separate so the batch loader
can report parse and rule failures alike.
"""

from __future__ import annotations

from collections.abc import Iterable
from functools import partial
from pathlib import Path

from regionmap.errors import DuplicateId, EmptyField, MalformedStructure
from regionmap.grammar.tree import Block, parse_document

from . import extract
from .enums import Phenomenon
from .models import ProvinceID, RegionID, StrategicRegion, WeatherPeriod

ROOT_KEY = "strategic_region"
PERIOD_KEY = "period"
WEATHER_KEY = "weather"

# ``between`` literals are day-of-month values in [0, 31).
BETWEEN_MINIMUM = 0.0
BETWEEN_BELOW = 31.0

_parse_province = partial(extract.parse_int, non_negative=True)


def parse_region(text: str) -> StrategicRegion:
    """Parse the text of one region file.

    Raises:
        MalformedStructure: unbalanced braces or no single ``strategic_region`` block.
        MissingField: ``id``, ``name`` or ``provinces`` (or a period field) is absent.
        InvalidNumber: a numeric field does not parse as its declared type.
    """

    return region_from_block(_root_block(parse_document(text)))


def parse_weather_block(text: str) -> tuple[WeatherPeriod, ...]:
    """Parse the ``period`` entries of a weather block, in source order.

    ``text`` is either the body of a weather block or a text holding a
    ``weather = { ... }`` entry.
    """

    document = parse_document(text)
    if PERIOD_KEY not in document and WEATHER_KEY in document:
        document = extract.require_block(document, WEATHER_KEY, context="document")
    return periods_from_block(document)


def region_from_block(block: Block) -> StrategicRegion:
    region_id = extract.read_int(block, "id", context=ROOT_KEY, non_negative=True)
    name = extract.read_text(block, "name", context=ROOT_KEY)
    provinces = extract.read_list(block, "provinces", _parse_province, context=ROOT_KEY)

    weather: tuple[WeatherPeriod, ...] = ()
    weather_entry = block.find(WEATHER_KEY)
    if weather_entry is not None:
        weather = periods_from_block(extract.as_block(weather_entry))

    return StrategicRegion(
        id=RegionID(region_id),
        name=name,
        provinces=frozenset(ProvinceID(province) for province in provinces),
        weather=weather,
    )


def periods_from_block(block: Block) -> tuple[WeatherPeriod, ...]:
    return tuple(
        period_from_block(body) for body in extract.entry_blocks(block, PERIOD_KEY)
    )


def period_from_block(block: Block) -> WeatherPeriod:
    """Build one period; every field is required, unknown keys are ignored."""

    between, between_text = extract.read_pair(
        block,
        "between",
        context=PERIOD_KEY,
        minimum=BETWEEN_MINIMUM,
        below=BETWEEN_BELOW,
    )
    temperature, _ = extract.read_pair(block, "temperature", context=PERIOD_KEY)
    day_night, _ = extract.read_pair(block, "temperature_day_night", context=PERIOD_KEY)
    weights = {
        phenomenon.value: extract.read_float(
            block, phenomenon.value, context=PERIOD_KEY, minimum=0.0
        )
        for phenomenon in Phenomenon
    }
    min_snow_level = extract.read_float(block, "min_snow_level", context=PERIOD_KEY, minimum=0.0)

    return WeatherPeriod(
        between=between,
        temperature=temperature,
        temperature_day_night=day_night,
        min_snow_level=min_snow_level,
        between_text=between_text,
        **weights,
    )


def validate(region: StrategicRegion) -> None:
    """Check the rules a single region must satisfy on its own.

    Raises:
        EmptyField: the region has no name or no provinces.
    """

    if not region.name.strip():
        raise EmptyField("name", region_id=region.id)
    if not region.provinces:
        raise EmptyField("provinces", region_id=region.id)


def validate_batch(
    sourced_regions: Iterable[tuple[Path | str, StrategicRegion]],
) -> list[DuplicateId]:
    """Return one :class:`DuplicateId` per region id defined more than once.

    Each error names every source that defines the id, in the order given.
    """

    sources_by_id: dict[int, list[Path | str]] = {}
    for source, region in sourced_regions:
        sources_by_id.setdefault(region.id, []).append(source)
    return [
        DuplicateId(region_id, sources)
        for region_id, sources in sources_by_id.items()
        if len(sources) > 1
    ]


def _root_block(document: Block) -> Block:
    entries = document.find_all(ROOT_KEY)
    if not entries:
        raise MalformedStructure(f"no '{ROOT_KEY}' block found")
    if len(entries) > 1:
        raise MalformedStructure(
            f"expected one '{ROOT_KEY}' block per file, found {len(entries)}",
            line=entries[1].line,
        )
    return extract.as_block(entries[0])
