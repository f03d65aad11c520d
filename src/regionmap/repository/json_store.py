"""JSON-based repository for loaded map data."""

from __future__ import annotations

import re
from pathlib import Path

from pydantic import TypeAdapter

from regionmap.domain import models as dm

_NAME_RE = re.compile(r"^[A-Za-z0-9][A-Za-z0-9_.-]*$")


class JsonSnapshotRepository:
    """Persist map data as named JSON snapshots on disk."""

    def __init__(self, base_path: Path) -> None:
        self.base_path = base_path
        self.base_path.mkdir(parents=True, exist_ok=True)
        self._adapter: TypeAdapter[dm.MapData] = TypeAdapter(dm.MapData)

    def _path_for(self, name: str) -> Path:
        if not _NAME_RE.match(name) or name.endswith(".json"):
            raise ValueError(f"Invalid snapshot name: {name!r}")
        return self.base_path / f"{name}.json"

    def save(self, name: str, map_data: dm.MapData) -> Path:
        """Serialize map data to disk and return the snapshot path."""

        path = self._path_for(name)
        payload = self._adapter.dump_json(map_data, indent=2)
        path.write_bytes(payload)
        return path

    def load(self, name: str) -> dm.MapData:
        """Load a previously saved snapshot."""

        path = self._path_for(name)
        data = path.read_bytes()
        return self._adapter.validate_json(data)

    def list_snapshots(self) -> list[str]:
        """Return the names of every snapshot currently stored."""

        return sorted(path.stem for path in self.base_path.glob("*.json") if path.is_file())

    def delete(self, name: str) -> None:
        """Remove a snapshot if it exists."""

        path = self._path_for(name)
        if path.exists():
            path.unlink()
