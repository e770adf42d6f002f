"""
In-memory snapshot store.
"""

import copy
from typing import Dict, List

from ..core.models import Snapshot
from ..core.snapshot_store import SnapshotStore


class MemorySnapshotStore(SnapshotStore):
    """Keeps snapshots in a dict; nothing survives the process."""

    def __init__(self):
        self._snapshots: Dict[str, Snapshot] = {}

    def load(self, key: str) -> Snapshot:
        return copy.deepcopy(self._snapshots.get(key, Snapshot()))

    def save(self, key: str, snapshot: Snapshot) -> None:
        self._snapshots[key] = copy.deepcopy(snapshot)

    def keys(self) -> List[str]:
        return sorted(self._snapshots)
