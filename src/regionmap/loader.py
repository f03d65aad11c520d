"""Read map data files from disk and collect every error along the way.

Single files raise; directories and whole maps never stop at the first bad
file.  Region files are parsed independently on worker threads and the only
cross-file step, the duplicate id check, runs once after all of them finish.
"""

from __future__ import annotations

import logging
import re
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass, field
from pathlib import Path

from regionmap.config import Settings, get_settings
from regionmap.domain import models as dm
from regionmap.domain.adjacency_rules import parse_adjacency_rules
from regionmap.domain.cities import parse_cities
from regionmap.domain.strategic_region import parse_region, validate, validate_batch
from regionmap.errors import (
    BatchLoadError,
    FileNameMismatch,
    MalformedStructure,
    RegionMapError,
)

logger = logging.getLogger(__name__)

STRATEGIC_REGIONS_DIR = "strategicregions"
ADJACENCY_RULES_FILE = "adjacency_rules.txt"
CITIES_FILE = "cities.txt"
REGION_FILE_SUFFIX = "StrategicRegion.txt"

_REGION_FILE_RE = re.compile(r"^(?P<id>\d+)-(?P<suffix>.+)$")


@dataclass(slots=True)
class LoadReport:
    """Outcome of loading a directory of region files."""

    regions: dict[dm.RegionID, dm.StrategicRegion] = field(default_factory=dict)
    sources: dict[dm.RegionID, Path] = field(default_factory=dict)
    errors: list[RegionMapError] = field(default_factory=list)
    files_read: int = 0

    @property
    def ok(self) -> bool:
        return not self.errors

    def raise_for_errors(self) -> None:
        """Raise a single :class:`BatchLoadError` if anything went wrong."""

        if self.errors:
            raise BatchLoadError(self.errors)


@dataclass(frozen=True, slots=True)
class _FileResult:
    path: Path
    region: dm.StrategicRegion | None = None
    error: RegionMapError | None = None


class RegionLoader:
    """Load strategic regions, adjacency rules and cities from a map directory."""

    def __init__(self, settings: Settings | None = None) -> None:
        self.settings = settings or get_settings()

    # --- single files -----------------------------------------------------------

    def read_text(self, path: Path) -> str:
        """Read a data file as UTF-8, tolerating a byte order mark."""

        try:
            return path.read_text(encoding="utf-8-sig")
        except UnicodeDecodeError as exc:
            raise MalformedStructure(
                f"file is not valid UTF-8 ({exc.reason})", source=path
            ) from exc

    def load_file(self, path: Path | str) -> dm.StrategicRegion:
        """Parse and validate one region file.

        Raises:
            RegionMapError: any parse or validation error, tagged with ``path``.
            OSError: the file cannot be read.
        """

        path = Path(path)
        text = self.read_text(path)
        try:
            region = parse_region(text)
            validate(region)
            self._check_file_name(path, region)
        except RegionMapError as exc:
            exc.with_source(path)
            raise
        logger.debug("parsed strategic region %s (%s) from %s", region.id, region.name, path)
        return region

    def load_adjacency_rules(self, path: Path | str) -> tuple[dm.AdjacencyRule, ...]:
        path = Path(path)
        try:
            rules = parse_adjacency_rules(self.read_text(path))
        except RegionMapError as exc:
            exc.with_source(path)
            raise
        logger.debug("parsed %d adjacency rules from %s", len(rules), path)
        return rules

    def load_cities(self, path: Path | str) -> dm.CityLayout:
        path = Path(path)
        try:
            layout = parse_cities(self.read_text(path))
        except RegionMapError as exc:
            exc.with_source(path)
            raise
        logger.debug("parsed %d city groups from %s", len(layout.city_groups), path)
        return layout

    # --- batches ----------------------------------------------------------------

    def load_directory(self, directory: Path | str) -> LoadReport:
        """Parse every region file in ``directory`` and collect all errors.

        Raises:
            FileNotFoundError: ``directory`` does not exist.
        """

        directory = Path(directory)
        if not directory.is_dir():
            raise FileNotFoundError(f"strategic region directory not found: {directory}")

        paths = sorted(
            path for path in directory.glob(self.settings.region_file_glob) if path.is_file()
        )
        with ThreadPoolExecutor(max_workers=self.settings.max_workers) as pool:
            results = list(pool.map(self._load_one, paths))

        report = LoadReport(files_read=len(paths))
        parsed: list[tuple[Path, dm.StrategicRegion]] = []
        for result in results:
            if result.error is not None:
                logger.warning("skipping %s", result.error)
                report.errors.append(result.error)
            elif result.region is not None:
                parsed.append((result.path, result.region))

        duplicates = validate_batch(parsed)
        duplicated_ids = {duplicate.region_id for duplicate in duplicates}
        for duplicate in duplicates:
            logger.warning("%s", duplicate)

        for path, region in parsed:
            if region.id in duplicated_ids:
                continue
            report.regions[region.id] = region
            report.sources[region.id] = path
        report.errors.extend(duplicates)

        logger.info(
            "loaded %d strategic regions from %d files in %s (%d errors)",
            len(report.regions),
            report.files_read,
            directory,
            len(report.errors),
        )
        return report

    def load_map(self, root: Path | str | None = None) -> dm.MapData:
        """Load a whole map directory.

        ``strategicregions/`` is required; ``adjacency_rules.txt`` and
        ``cities.txt`` are read when present.

        Raises:
            FileNotFoundError: the strategic region directory is missing.
            BatchLoadError: any file failed to parse or validate.
        """

        root = Path(root) if root is not None else self.settings.data_dir
        report = self.load_directory(root / STRATEGIC_REGIONS_DIR)
        errors: list[RegionMapError] = list(report.errors)

        adjacency_rules: tuple[dm.AdjacencyRule, ...] = ()
        rules_path = root / ADJACENCY_RULES_FILE
        if rules_path.is_file():
            try:
                adjacency_rules = self.load_adjacency_rules(rules_path)
            except RegionMapError as exc:
                errors.append(exc)
        else:
            logger.info("no %s in %s", ADJACENCY_RULES_FILE, root)

        cities = None
        cities_path = root / CITIES_FILE
        if cities_path.is_file():
            try:
                cities = self.load_cities(cities_path)
            except RegionMapError as exc:
                errors.append(exc)
        else:
            logger.info("no %s in %s", CITIES_FILE, root)

        if errors:
            raise BatchLoadError(errors)

        return dm.MapData(
            strategic_regions=dict(sorted(report.regions.items())),
            adjacency_rules=adjacency_rules,
            cities=cities,
        )

    # --- helpers ----------------------------------------------------------------

    def _load_one(self, path: Path) -> _FileResult:
        try:
            return _FileResult(path, region=self.load_file(path))
        except RegionMapError as exc:
            return _FileResult(path, error=exc)
        except OSError as exc:
            return _FileResult(path, error=RegionMapError(f"cannot read file: {exc}", source=path))

    def _check_file_name(self, path: Path, region: dm.StrategicRegion) -> None:
        """Region files are named ``<id>-StrategicRegion.txt``."""

        match = _REGION_FILE_RE.match(path.name)
        if match is None or match.group("suffix") != REGION_FILE_SUFFIX:
            message = f"strategic region file name is not correct: {path.name}"
        elif int(match.group("id")) != region.id:
            message = (
                f"file name id {int(match.group('id'))} does not match strategic region id "
                f"{region.id}"
            )
        else:
            return

        if self.settings.strict_file_names:
            raise FileNameMismatch(message, source=path)
        logger.warning("%s (%s)", message, path)
