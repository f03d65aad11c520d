"""Typed map data records and the parsers that build them.

This package hosts everything that understands what the generic grammar
tree *means*.  It exposes:

* Frozen dataclasses describing every record (see :mod:`models`).
* Enumerations for weather phenomena and adjacency stances.
* One parser module per file kind: strategic regions, adjacency rules and
  cities.

Nothing here touches the filesystem; :mod:`regionmap.loader` reads files
and hands their text to these parsers.
"""

from . import (
    adjacency_rules,
    cities,
    enums,
    extract,
    models,
    strategic_region,
)

__all__ = [
    "adjacency_rules",
    "cities",
    "enums",
    "extract",
    "models",
    "strategic_region",
]
