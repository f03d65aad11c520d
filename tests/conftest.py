"""Pytest configuration to ensure the `src` package layout is importable.

This adds the `src/` directory to `sys.path` so tests can import the
`regionmap` package without requiring an editable install in CI, and
exposes the sample map shipped under `tests/data/`.
"""

import sys
from pathlib import Path

import pytest

SRC_PATH = Path(__file__).resolve().parents[1] / "src"
if str(SRC_PATH) not in sys.path:
    sys.path.insert(0, str(SRC_PATH))

from regionmap.config import Settings  # noqa: E402

DATA_DIR = Path(__file__).resolve().parent / "data"
MAP_ROOT = DATA_DIR / "map"
REGIONS_DIR = MAP_ROOT / "strategicregions"


@pytest.fixture
def map_root() -> Path:
    return MAP_ROOT


@pytest.fixture
def dakota_text() -> str:
    return (REGIONS_DIR / "173-StrategicRegion.txt").read_text(encoding="utf-8")


@pytest.fixture
def settings(tmp_path) -> Settings:
    return Settings(
        data_dir=MAP_ROOT,
        snapshot_dir=tmp_path / "snapshots",
        max_workers=2,
        strict_file_names=False,
    )
