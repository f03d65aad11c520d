"""Dataclasses describing every map data record.

All records are frozen: they are produced once by the parsers and handed to
consumers read-only.  Reloading map data means parsing again, never mutating
an existing value.
"""

from __future__ import annotations

import re
from dataclasses import dataclass, field
from typing import NewType

from .enums import AdjacencyStance, PassageKind, Phenomenon

# --- Strongly typed identifiers -------------------------------------------------

RegionID = NewType("RegionID", int)
ProvinceID = NewType("ProvinceID", int)
ColorIndex = NewType("ColorIndex", int)

_DAY_MONTH_RE = re.compile(r"^(\d+)\.(\d+)$")


# --- Weather --------------------------------------------------------------------


@dataclass(frozen=True, slots=True, order=True, kw_only=True)
class DayMonth:
    """Zero-indexed day of month (0-30) and month of year (0-11).

    ``between`` values are written ``day.month``, so ``4.11`` is the fifth of
    December and ``0.10`` (day 0 of November) differs from ``0.1``.  Fields are
    keyword-only and declared month first, so instances sort by calendar date.
    """

    month: int
    day: int

    def __post_init__(self) -> None:
        if not 0 <= self.day <= 30:
            raise ValueError(f"day must be within 0-30, got {self.day}")
        if not 0 <= self.month <= 11:
            raise ValueError(f"month must be within 0-11, got {self.month}")

    @classmethod
    def parse(cls, text: str) -> DayMonth:
        match = _DAY_MONTH_RE.match(text.strip())
        if match is None:
            raise ValueError(f"expected 'day.month', got {text!r}")
        return cls(month=int(match.group(2)), day=int(match.group(1)))

    def __str__(self) -> str:
        return f"{self.day}.{self.month}"


@dataclass(frozen=True, slots=True)
class WeatherPeriod:
    """Weather regime active between two dates of a region's year.

    The eight phenomenon values are weights, not probabilities; their sum is
    frequently above 1.0.
    """

    between: tuple[float, float]
    temperature: tuple[float, float]
    temperature_day_night: tuple[float, float]
    no_phenomenon: float
    rain_light: float
    rain_heavy: float
    snow: float
    blizzard: float
    arctic_water: float
    mud: float
    sandstorm: float
    min_snow_level: float
    between_text: tuple[str, str] = ("", "")

    @property
    def phenomena(self) -> dict[Phenomenon, float]:
        return {phenomenon: getattr(self, phenomenon.value) for phenomenon in Phenomenon}

    @property
    def total_weight(self) -> float:
        return sum(self.phenomena.values())

    @property
    def dates(self) -> tuple[DayMonth, DayMonth]:
        """Interpret ``between`` as a ``(start, end)`` pair of calendar dates.

        Raises:
            ValueError: if the literals are not valid ``day.month`` dates.
        """

        start, end = self.between_text
        if not start or not end:
            raise ValueError("period has no recorded 'between' literals")
        return DayMonth.parse(start), DayMonth.parse(end)


@dataclass(frozen=True, slots=True)
class StrategicRegion:
    """Named group of provinces sharing one weather model."""

    id: RegionID
    name: str
    provinces: frozenset[ProvinceID]
    weather: tuple[WeatherPeriod, ...] = ()


# --- Adjacency rules ------------------------------------------------------------


@dataclass(frozen=True, slots=True)
class AdjacencyLogic:
    """Which kinds of traffic may pass for one stance."""

    army: bool
    navy: bool
    submarine: bool
    trade: bool

    def allows(self, kind: PassageKind) -> bool:
        return getattr(self, kind.value)


@dataclass(frozen=True, slots=True)
class IsDisabled:
    """Tooltip shown when a rule's disabling trigger fires.

    The trigger itself is left to the game engine.
    """

    tooltip: str | None = None


@dataclass(frozen=True, slots=True)
class AdjacencyRule:
    """Passage rule for a named chokepoint such as a strait or canal."""

    name: str
    contested: AdjacencyLogic
    enemy: AdjacencyLogic
    friend: AdjacencyLogic
    neutral: AdjacencyLogic
    required_provinces: tuple[ProvinceID, ...]
    icon: ProvinceID
    offset: tuple[float, ...] = ()
    is_disabled: IsDisabled | None = None

    def logic_for(self, stance: AdjacencyStance) -> AdjacencyLogic:
        return getattr(self, stance.value)


# --- Cities ---------------------------------------------------------------------


@dataclass(frozen=True, slots=True)
class BuildingMesh:
    """Meshes used at a given distance from the edge of an urban area."""

    distance: float
    meshes: tuple[str, ...]


@dataclass(frozen=True, slots=True)
class CityGroup:
    """Building meshes for one colour index of the city bitmap."""

    color_index: ColorIndex
    density: float
    buildings: tuple[BuildingMesh, ...] = ()


@dataclass(frozen=True, slots=True)
class CityLayout:
    """Contents of ``cities.txt``."""

    types_source: str
    pixel_step_x: int
    pixel_step_y: int
    city_groups: tuple[CityGroup, ...] = ()

    def group_for(self, color_index: int) -> CityGroup | None:
        for group in self.city_groups:
            if group.color_index == color_index:
                return group
        return None


# --- Aggregate ------------------------------------------------------------------


@dataclass(frozen=True, slots=True)
class MapData:
    """Everything loaded from one map directory.

    ``strategic_regions`` is a plain ``dict`` so snapshots serialize it as a
    JSON object.  Treat it as read-only: every load builds a fresh mapping, so
    one caller's edits never reach another's.  Because of the dict field,
    instances are not hashable.
    """

    strategic_regions: dict[RegionID, StrategicRegion] = field(default_factory=dict)
    adjacency_rules: tuple[AdjacencyRule, ...] = ()
    cities: CityLayout | None = None

    def region_of(self, province_id: int) -> StrategicRegion | None:
        """Return the first region (by id) listing ``province_id``."""

        for region_id in sorted(self.strategic_regions):
            region = self.strategic_regions[region_id]
            if province_id in region.provinces:
                return region
        return None

    def adjacency_rule(self, name: str) -> AdjacencyRule | None:
        for rule in self.adjacency_rules:
            if rule.name == name:
                return rule
        return None
