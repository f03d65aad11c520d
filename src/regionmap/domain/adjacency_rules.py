"""Adjacency rules: who may pass through straits, canals and other chokepoints.

``adjacency_rules.txt`` holds any number of blocks like::

    adjacency_rule = {
        name = "KIEL_CANAL"
        contested = { army = no navy = no submarine = no trade = no }
        enemy = { army = no navy = no submarine = no trade = no }
        friend = { army = yes navy = yes submarine = yes trade = yes }
        neutral = { army = no navy = yes submarine = no trade = yes }
        required_provinces = { 6389 }
        is_disabled = { tooltip = "kiel_canal_closed" has_global_flag = KIEL_CLOSED }
        icon = 6389
        offset = { 0 0 -3 }
    }

Triggers inside ``is_disabled`` are kept for the game engine; only the tooltip
is read here.
"""

from __future__ import annotations

from functools import partial

from regionmap.grammar.tree import Block, parse_document

from . import extract
from .enums import AdjacencyStance, PassageKind
from .models import AdjacencyLogic, AdjacencyRule, IsDisabled, ProvinceID

RULE_KEY = "adjacency_rule"

_parse_province = partial(extract.parse_int, non_negative=True)


def parse_adjacency_rules(text: str) -> tuple[AdjacencyRule, ...]:
    """Parse every ``adjacency_rule`` block of a file, in source order."""

    document = parse_document(text)
    return tuple(rule_from_block(body) for body in extract.entry_blocks(document, RULE_KEY))


def rule_from_block(block: Block) -> AdjacencyRule:
    name = extract.read_text(block, "name", context=RULE_KEY)
    logic = {
        stance.value: _logic_from_block(
            extract.require_block(block, stance.value, context=RULE_KEY), stance
        )
        for stance in AdjacencyStance
    }
    required = extract.read_list(block, "required_provinces", _parse_province, context=RULE_KEY)
    icon = extract.read_int(block, "icon", context=RULE_KEY, non_negative=True)

    offset: tuple[float, ...] = ()
    if "offset" in block:
        offset = tuple(extract.read_list(block, "offset", extract.parse_float, context=RULE_KEY))

    is_disabled = None
    disabled_entry = block.find("is_disabled")
    if disabled_entry is not None:
        disabled_body = extract.as_block(disabled_entry)
        tooltip = None
        if "tooltip" in disabled_body:
            tooltip = extract.read_text(disabled_body, "tooltip", context="is_disabled")
        is_disabled = IsDisabled(tooltip=tooltip)

    return AdjacencyRule(
        name=name,
        required_provinces=tuple(ProvinceID(province) for province in required),
        icon=ProvinceID(icon),
        offset=offset,
        is_disabled=is_disabled,
        **logic,
    )


def _logic_from_block(block: Block, stance: AdjacencyStance) -> AdjacencyLogic:
    context = f"{RULE_KEY}.{stance.value}"
    flags = {
        kind.value: extract.read_bool(block, kind.value, context=context) for kind in PassageKind
    }
    return AdjacencyLogic(**flags)
