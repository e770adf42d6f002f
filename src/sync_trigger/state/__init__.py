"""
Snapshot store implementations.

Select a backend with create_snapshot_store() or the TRIGGER_STATE_BACKEND
environment variable:
    - json (default): one JSON file holding all snapshots
    - sqlite: a SQLite database
    - memory: nothing is persisted
"""

import logging
import os
from pathlib import Path
from typing import Optional, Union

from ..core.snapshot_store import SnapshotStore
from .json_file_store import JsonFileSnapshotStore
from .memory_store import MemorySnapshotStore
from .sqlite_store import SqliteSnapshotStore


logger = logging.getLogger(__name__)


def create_snapshot_store(
    backend: Optional[str] = None,
    path: Optional[Union[str, Path]] = None,
) -> SnapshotStore:
    """
    Factory function to create a snapshot store.

    Args:
        backend: 'json', 'sqlite' or 'memory'. Defaults to TRIGGER_STATE_BACKEND or 'json'.
        path: File path for json/sqlite backends

    Returns:
        SnapshotStore instance

    Raises:
        ValueError: If backend is not recognized
    """
    if backend is None:
        backend = os.environ.get("TRIGGER_STATE_BACKEND", "json")
    backend = backend.lower()

    if backend == "memory":
        return MemorySnapshotStore()

    if backend == "json":
        return JsonFileSnapshotStore(Path(path or "state/snapshots.json"))

    if backend == "sqlite":
        return SqliteSnapshotStore(Path(path or "state/snapshots.db"))

    raise ValueError(
        f"Unknown snapshot store backend: {backend}. "
        "Supported backends: 'json' (default), 'sqlite', 'memory'"
    )


__all__ = [
    "JsonFileSnapshotStore",
    "MemorySnapshotStore",
    "SqliteSnapshotStore",
    "create_snapshot_store",
]
