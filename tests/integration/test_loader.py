"""Integration tests for loading region directories and whole maps."""

from __future__ import annotations

import shutil
from pathlib import Path

import pytest

from regionmap.errors import (
    BatchLoadError,
    DuplicateId,
    EmptyField,
    FileNameMismatch,
    InvalidNumber,
    MalformedStructure,
    MissingField,
)
from regionmap.loader import RegionLoader

REGION_TEMPLATE = """strategic_region = {{
    id = {region_id}
    name = "{name}"
    provinces = {{ {provinces} }}
}}
"""


def _write_region(
    directory: Path, filename: str, region_id: int, name: str = "R", provinces: str = "1 2"
) -> Path:
    path = directory / filename
    path.write_text(
        REGION_TEMPLATE.format(region_id=region_id, name=name, provinces=provinces),
        encoding="utf-8",
    )
    return path


@pytest.fixture
def regions_dir(tmp_path, map_root) -> Path:
    target = tmp_path / "strategicregions"
    shutil.copytree(map_root / "strategicregions", target)
    return target


def test_load_file(settings, map_root):
    loader = RegionLoader(settings)
    region = loader.load_file(map_root / "strategicregions" / "173-StrategicRegion.txt")
    assert region.name == "C_DAKOTA"
    assert len(region.weather) == 12


def test_load_file_tags_errors_with_path(settings, tmp_path):
    path = tmp_path / "9-StrategicRegion.txt"
    path.write_text('strategic_region = { id = 9 name = "X" }', encoding="utf-8")
    with pytest.raises(MissingField) as excinfo:
        RegionLoader(settings).load_file(path)
    assert excinfo.value.source == path
    assert str(path) in str(excinfo.value)


def test_load_file_tolerates_byte_order_mark(settings, tmp_path):
    path = tmp_path / "9-StrategicRegion.txt"
    path.write_text(
        'strategic_region = { id = 9 name = "X" provinces = { 1 } }', encoding="utf-8-sig"
    )
    assert RegionLoader(settings).load_file(path).id == 9


def test_load_sample_directory(settings, map_root):
    report = RegionLoader(settings).load_directory(map_root / "strategicregions")
    assert report.ok
    assert report.files_read == 2
    assert sorted(report.regions) == [40, 173]
    assert report.sources[173].name == "173-StrategicRegion.txt"


def test_directory_keeps_going_after_errors(settings, regions_dir):
    (regions_dir / "50-StrategicRegion.txt").write_text(
        'strategic_region = { id = 50 name = "BROKEN" provinces = { 1 2 }', encoding="utf-8"
    )
    _write_region(regions_dir, "51-StrategicRegion.txt", 51, provinces="")
    (regions_dir / "52-StrategicRegion.txt").write_bytes(b"strategic_region = { name = \xff }")

    report = RegionLoader(settings).load_directory(regions_dir)

    assert not report.ok
    assert sorted(report.regions) == [40, 173]
    kinds = {Path(str(error.source)).name: type(error) for error in report.errors}
    assert kinds == {
        "50-StrategicRegion.txt": MalformedStructure,
        "51-StrategicRegion.txt": EmptyField,
        "52-StrategicRegion.txt": MalformedStructure,
    }


def test_deep_nesting_does_not_abort_the_directory(settings, tmp_path):
    directory = tmp_path / "strategicregions"
    directory.mkdir()
    _write_region(directory, "1-StrategicRegion.txt", 1)
    (directory / "2-StrategicRegion.txt").write_text("{ " * 5000, encoding="utf-8")

    report = RegionLoader(settings).load_directory(directory)

    assert sorted(report.regions) == [1]
    assert [type(error) for error in report.errors] == [MalformedStructure]
    assert "never closed" in str(report.errors[0])


def test_deeply_nested_unknown_key_is_ignored(settings, tmp_path):
    path = tmp_path / "3-StrategicRegion.txt"
    path.write_text(
        'strategic_region = { id = 3 name = "DEEP" provinces = { 1 } extra = '
        + "{ " * 5000
        + "} " * 5000
        + "}",
        encoding="utf-8",
    )
    assert RegionLoader(settings).load_file(path).name == "DEEP"


def test_overlong_integer_does_not_abort_the_directory(settings, tmp_path):
    directory = tmp_path / "strategicregions"
    directory.mkdir()
    _write_region(directory, "1-StrategicRegion.txt", 1)
    _write_region(directory, "2-StrategicRegion.txt", 2, provinces="9" * 5000)

    report = RegionLoader(settings).load_directory(directory)

    assert sorted(report.regions) == [1]
    assert len(report.errors) == 1
    error = report.errors[0]
    assert isinstance(error, InvalidNumber)
    assert error.field == "provinces"
    assert Path(str(error.source)).name == "2-StrategicRegion.txt"


def test_duplicate_ids_reported_once_with_both_sources(settings, regions_dir):
    duplicate = _write_region(regions_dir, "999-StrategicRegion.txt", 173, name="COPY")

    report = RegionLoader(settings).load_directory(regions_dir)

    duplicates = [error for error in report.errors if isinstance(error, DuplicateId)]
    assert len(duplicates) == 1
    assert duplicates[0].region_id == 173
    assert set(duplicates[0].sources) == {regions_dir / "173-StrategicRegion.txt", duplicate}
    assert 173 not in report.regions
    assert 40 in report.regions
    with pytest.raises(BatchLoadError) as excinfo:
        report.raise_for_errors()
    assert excinfo.value.errors == tuple(report.errors)


def test_misnamed_file_only_warns_by_default(settings, regions_dir, caplog):
    _write_region(regions_dir, "7-Region.txt", 7)
    _write_region(regions_dir, "8-StrategicRegion.txt", 80)

    with caplog.at_level("WARNING", logger="regionmap.loader"):
        report = RegionLoader(settings).load_directory(regions_dir)

    assert report.ok
    assert {7, 80} <= set(report.regions)
    assert "7-Region.txt" in caplog.text
    assert "does not match" in caplog.text


def test_strict_file_names(settings, regions_dir):
    strict = settings.model_copy(update={"strict_file_names": True})
    _write_region(regions_dir, "8-StrategicRegion.txt", 80)

    report = RegionLoader(strict).load_directory(regions_dir)

    assert [type(error) for error in report.errors] == [FileNameMismatch]
    assert 80 not in report.regions


def test_serial_and_parallel_loads_agree(settings, regions_dir):
    for region_id in range(300, 320):
        _write_region(regions_dir, f"{region_id}-StrategicRegion.txt", region_id)
    serial = RegionLoader(settings.model_copy(update={"max_workers": 1}))
    parallel = RegionLoader(settings.model_copy(update={"max_workers": 8}))
    serial_regions = serial.load_directory(regions_dir).regions
    assert serial_regions == parallel.load_directory(regions_dir).regions


def test_missing_directory(settings, tmp_path):
    with pytest.raises(FileNotFoundError):
        RegionLoader(settings).load_directory(tmp_path / "nope")


def test_load_map(settings, map_root):
    map_data = RegionLoader(settings).load_map(map_root)
    assert list(map_data.strategic_regions) == [40, 173]
    assert [rule.name for rule in map_data.adjacency_rules] == ["KIEL_CANAL", "DANISH_STRAITS"]
    assert map_data.cities is not None
    assert map_data.region_of(6389).name == "SEA_BALTIC_SOUTH"
    assert map_data.region_of(1) is None
    assert map_data.adjacency_rule("KIEL_CANAL").icon == 6389


def test_each_map_load_builds_its_own_mapping(settings, map_root):
    loader = RegionLoader(settings)
    first = loader.load_map(map_root)
    del first.strategic_regions[40]

    second = loader.load_map(map_root)
    assert sorted(second.strategic_regions) == [40, 173]
    with pytest.raises(TypeError):
        hash(second)


def test_load_map_defaults_to_configured_root(settings):
    assert 173 in RegionLoader(settings).load_map().strategic_regions


def test_load_map_optional_files(settings, tmp_path, regions_dir):
    map_data = RegionLoader(settings).load_map(tmp_path)
    assert map_data.adjacency_rules == ()
    assert map_data.cities is None


def test_load_map_collects_errors_from_every_file(settings, tmp_path, regions_dir):
    _write_region(regions_dir, "1-StrategicRegion.txt", 1, provinces="x")
    (tmp_path / "adjacency_rules.txt").write_text("adjacency_rule = { name = A", encoding="utf-8")
    (tmp_path / "cities.txt").write_text("pixel_step_x = 2", encoding="utf-8")

    with pytest.raises(BatchLoadError) as excinfo:
        RegionLoader(settings).load_map(tmp_path)

    names = sorted(Path(str(error.source)).name for error in excinfo.value.errors)
    assert names == ["1-StrategicRegion.txt", "adjacency_rules.txt", "cities.txt"]
