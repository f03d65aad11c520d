from .json_store import JsonSnapshotRepository

__all__ = ["JsonSnapshotRepository"]
