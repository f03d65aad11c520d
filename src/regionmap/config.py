"""Lightweight configuration for the map data loader."""

from __future__ import annotations

from functools import lru_cache
from pathlib import Path

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Environment-driven loader settings."""

    model_config = SettingsConfigDict(
        env_prefix="REGIONMAP_", env_file=".env", env_file_encoding="utf-8", extra="ignore"
    )

    data_dir: Path = Field(default=Path("map"), description="Map root holding strategicregions/")
    snapshot_dir: Path = Field(
        default=Path("snapshots"), description="Where JSON snapshots of loaded map data live"
    )
    max_workers: int = Field(
        default=4, gt=0, description="Worker threads used to parse region files in parallel"
    )
    strict_file_names: bool = Field(
        default=False,
        description="Treat region files not named '<id>-StrategicRegion.txt' as errors",
    )
    region_file_glob: str = Field(
        default="*.txt", description="Pattern selecting region files inside a directory"
    )
    log_level: str = Field(default="INFO", description="Root log level used by the CLI")


@lru_cache
def get_settings() -> Settings:
    """Return a cached Settings instance."""

    return Settings()
