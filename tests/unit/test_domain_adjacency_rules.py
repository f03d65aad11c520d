"""Tests for adjacency rule parsing."""

from __future__ import annotations

import pytest

from regionmap.domain.adjacency_rules import parse_adjacency_rules
from regionmap.domain.enums import AdjacencyStance, PassageKind
from regionmap.domain.models import AdjacencyLogic, IsDisabled
from regionmap.errors import InvalidValue, MissingField

CLOSED = "{ army = no navy = no submarine = no trade = no }"
OPEN = "{ army = yes navy = yes submarine = yes trade = yes }"


def _rule(**overrides: str | None) -> str:
    fields = {
        "name": '"TEST_STRAIT"',
        "contested": CLOSED,
        "enemy": CLOSED,
        "friend": OPEN,
        "neutral": CLOSED,
        "required_provinces": "{ 100 }",
        "icon": "100",
        **overrides,
    }
    body = "\n".join(f"{key} = {value}" for key, value in fields.items() if value is not None)
    return f"adjacency_rule = {{\n{body}\n}}"


@pytest.fixture
def sample_rules(map_root):
    return parse_adjacency_rules((map_root / "adjacency_rules.txt").read_text(encoding="utf-8"))


def test_sample_file_rules_in_order(sample_rules):
    assert [rule.name for rule in sample_rules] == ["KIEL_CANAL", "DANISH_STRAITS"]


def test_sample_kiel_canal(sample_rules):
    kiel = sample_rules[0]
    assert kiel.friend == AdjacencyLogic(army=True, navy=True, submarine=True, trade=True)
    assert kiel.neutral == AdjacencyLogic(army=False, navy=True, submarine=False, trade=True)
    assert kiel.required_provinces == (6389,)
    assert kiel.icon == 6389
    assert kiel.offset == (0.0, 0.0, -3.0)
    assert kiel.is_disabled == IsDisabled(tooltip="kiel_canal_closed")


def test_optional_fields_default(sample_rules):
    straits = sample_rules[1]
    assert straits.offset == ()
    assert straits.is_disabled is None
    assert straits.required_provinces == (6389, 9240)


def test_logic_lookup_by_stance_and_kind(sample_rules):
    straits = sample_rules[1]
    enemy = straits.logic_for(AdjacencyStance.ENEMY)
    assert enemy.allows(PassageKind.SUBMARINE)
    assert not enemy.allows(PassageKind.NAVY)


def test_is_disabled_without_tooltip():
    (rule,) = parse_adjacency_rules(_rule(is_disabled="{ has_global_flag = CLOSED }"))
    assert rule.is_disabled == IsDisabled(tooltip=None)


def test_missing_stance_block():
    with pytest.raises(MissingField) as excinfo:
        parse_adjacency_rules(_rule(neutral=None))
    assert excinfo.value.field == "neutral"


def test_missing_flag_inside_stance():
    with pytest.raises(MissingField) as excinfo:
        parse_adjacency_rules(_rule(enemy="{ army = no navy = no submarine = no }"))
    assert excinfo.value.field == "trade"
    assert "adjacency_rule.enemy" in str(excinfo.value)


def test_flags_must_be_yes_or_no():
    with pytest.raises(InvalidValue) as excinfo:
        parse_adjacency_rules(
            _rule(friend="{ army = maybe navy = yes submarine = yes trade = yes }")
        )
    assert excinfo.value.field == "army"


def test_empty_file_has_no_rules():
    assert parse_adjacency_rules("# nothing here\n") == ()
