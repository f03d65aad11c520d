"""Command line entrypoint for checking and snapshotting map data.

Usage:
    regionmap check map/strategicregions/
    regionmap show map/strategicregions/173-StrategicRegion.txt
    regionmap snapshot map/ vanilla
"""

from __future__ import annotations

import argparse
import logging
from collections.abc import Sequence
from pathlib import Path

from regionmap.config import Settings, get_settings
from regionmap.domain import models as dm
from regionmap.errors import BatchLoadError, RegionMapError
from regionmap.loader import RegionLoader
from regionmap.repository import JsonSnapshotRepository

logger = logging.getLogger(__name__)

LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")


def cmd_check(args: argparse.Namespace, settings: Settings) -> int:
    """Load a strategic region directory and print every error."""

    loader = RegionLoader(settings)
    report = loader.load_directory(args.directory)

    print(f"{report.files_read} files, {len(report.regions)} strategic regions loaded")
    if report.ok:
        print("No errors.")
        return 0

    print(f"{len(report.errors)} error(s):")
    for error in report.errors:
        print(f"  {type(error).__name__}: {error}")
    return 1


def cmd_show(args: argparse.Namespace, settings: Settings) -> int:
    """Print one region and its weather table."""

    loader = RegionLoader(settings)
    try:
        region = loader.load_file(args.file)
    except RegionMapError as exc:
        print(f"{type(exc).__name__}: {exc}")
        return 1

    print(f"Strategic region {region.id}: {region.name}")
    print(f"  provinces: {len(region.provinces)}")
    print(f"  weather periods: {len(region.weather)}")
    for period in region.weather:
        print("  " + _format_period(period))
    return 0


def cmd_snapshot(args: argparse.Namespace, settings: Settings) -> int:
    """Load a full map directory and store it as a JSON snapshot."""

    loader = RegionLoader(settings)
    try:
        map_data = loader.load_map(args.map_root)
    except BatchLoadError as exc:
        print(f"{len(exc.errors)} error(s), no snapshot written:")
        for error in exc.errors:
            print(f"  {type(error).__name__}: {error}")
        return 1

    repository = JsonSnapshotRepository(args.output or settings.snapshot_dir)
    path = repository.save(args.name, map_data)
    print(
        f"Saved {len(map_data.strategic_regions)} regions, "
        f"{len(map_data.adjacency_rules)} adjacency rules to {path}"
    )
    return 0


def _format_period(period: dm.WeatherPeriod) -> str:
    start, end = period.between_text
    low, high = period.temperature
    return (
        f"{start:>5} - {end:<5}  temp {low:g}..{high:g}  "
        f"weight {period.total_weight:g}  snow>={period.min_snow_level:g}"
    )


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="regionmap",
        description="Validate strategy-game map data files",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog=__doc__,
    )
    parser.add_argument(
        "--log-level",
        type=str.upper,
        choices=LOG_LEVELS,
        help="Override the configured log level",
    )
    parser.add_argument(
        "--strict-file-names",
        action="store_true",
        default=None,
        help="Treat misnamed region files as errors",
    )

    subparsers = parser.add_subparsers(dest="command", help="Command to run")

    p_check = subparsers.add_parser("check", help="Validate a strategic region directory")
    p_check.add_argument("directory", type=Path, help="Directory with region files")

    p_show = subparsers.add_parser("show", help="Print one strategic region")
    p_show.add_argument("file", type=Path, help="Region file")

    p_snap = subparsers.add_parser("snapshot", help="Save a map directory as JSON")
    p_snap.add_argument("map_root", type=Path, help="Map root holding strategicregions/")
    p_snap.add_argument("name", help="Snapshot name")
    p_snap.add_argument("--output", "-o", type=Path, help="Snapshot directory")

    return parser


COMMANDS = {
    "check": cmd_check,
    "show": cmd_show,
    "snapshot": cmd_snapshot,
}


def main(argv: Sequence[str] | None = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)

    settings = get_settings()
    overrides: dict[str, object] = {}
    if args.log_level:
        overrides["log_level"] = args.log_level
    if args.strict_file_names is not None:
        overrides["strict_file_names"] = args.strict_file_names
    if overrides:
        settings = settings.model_copy(update=overrides)

    logging.basicConfig(
        level=settings.log_level.upper(),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    handler = COMMANDS.get(args.command)
    if handler is None:
        parser.print_help()
        return 2

    try:
        return handler(args, settings)
    except FileNotFoundError as exc:
        logger.error("%s", exc)
        return 2


if __name__ == "__main__":
    raise SystemExit(main())
