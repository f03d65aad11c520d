"""Enumerations shared by the map data records."""

from __future__ import annotations

from enum import StrEnum


class Phenomenon(StrEnum):
    """Weighted weather states a period can roll."""

    NO_PHENOMENON = "no_phenomenon"
    RAIN_LIGHT = "rain_light"
    RAIN_HEAVY = "rain_heavy"
    SNOW = "snow"
    BLIZZARD = "blizzard"
    ARCTIC_WATER = "arctic_water"
    MUD = "mud"
    SANDSTORM = "sandstorm"


class AdjacencyStance(StrEnum):
    """Relationship of a unit to whoever controls an adjacency's provinces."""

    CONTESTED = "contested"
    ENEMY = "enemy"
    FRIEND = "friend"
    NEUTRAL = "neutral"


class PassageKind(StrEnum):
    """What kind of traffic an adjacency rule allows through."""

    ARMY = "army"
    NAVY = "navy"
    SUBMARINE = "submarine"
    TRADE = "trade"
