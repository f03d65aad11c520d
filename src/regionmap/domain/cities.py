"""City groups: which building meshes to scatter for each bitmap colour."""

from __future__ import annotations

from regionmap.grammar.tree import Block, parse_document

from . import extract
from .models import BuildingMesh, CityGroup, CityLayout, ColorIndex

GROUP_KEY = "city_group"
BUILDING_KEY = "building"


def parse_cities(text: str) -> CityLayout:
    """Parse ``cities.txt``.

    ``types_source`` and both pixel steps are required; city groups and their
    buildings keep source order.  Buildings are listed by growing distance in
    the shipped data, but the order is not enforced.
    """

    document = parse_document(text)
    context = "cities"
    return CityLayout(
        types_source=extract.read_text(document, "types_source", context=context),
        pixel_step_x=extract.read_int(document, "pixel_step_x", context=context),
        pixel_step_y=extract.read_int(document, "pixel_step_y", context=context),
        city_groups=tuple(
            _group_from_block(body) for body in extract.entry_blocks(document, GROUP_KEY)
        ),
    )


def _group_from_block(block: Block) -> CityGroup:
    color_index = extract.read_int(block, "color_index", context=GROUP_KEY, non_negative=True)
    return CityGroup(
        color_index=ColorIndex(color_index),
        # negative density means fewer buildings than the default
        density=extract.read_float(block, "density", context=GROUP_KEY),
        buildings=tuple(
            _building_from_block(body) for body in extract.entry_blocks(block, BUILDING_KEY)
        ),
    )


def _building_from_block(block: Block) -> BuildingMesh:
    mesh_entry = extract.require_entry(block, "mesh", context=BUILDING_KEY)
    if isinstance(mesh_entry.value, Block):
        meshes = tuple(scalar.text for scalar in extract.list_scalars(mesh_entry))
    else:
        meshes = (mesh_entry.value.text,)
    return BuildingMesh(
        distance=extract.read_float(block, "distance", context=BUILDING_KEY),
        meshes=meshes,
    )
