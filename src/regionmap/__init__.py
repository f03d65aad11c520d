"""Loader and validator for strategy-game map data files."""

from regionmap.domain.adjacency_rules import parse_adjacency_rules
from regionmap.domain.cities import parse_cities
from regionmap.domain.models import (
    AdjacencyRule,
    CityLayout,
    DayMonth,
    MapData,
    StrategicRegion,
    WeatherPeriod,
)
from regionmap.domain.strategic_region import (
    parse_region,
    parse_weather_block,
    validate,
    validate_batch,
)
from regionmap.loader import LoadReport, RegionLoader

__version__ = "0.1.0"

__all__ = [
    "AdjacencyRule",
    "CityLayout",
    "DayMonth",
    "LoadReport",
    "MapData",
    "RegionLoader",
    "StrategicRegion",
    "WeatherPeriod",
    "parse_adjacency_rules",
    "parse_cities",
    "parse_region",
    "parse_weather_block",
    "validate",
    "validate_batch",
]
