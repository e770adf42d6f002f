"""
JSON file snapshot store.
"""

import json
import logging
import os
import tempfile
from pathlib import Path
from typing import Any, Dict, List

from ..core.exceptions import TriggerError
from ..core.models import Snapshot
from ..core.snapshot_store import SnapshotStore


logger = logging.getLogger(__name__)


class JsonFileSnapshotStore(SnapshotStore):
    """
    Stores all snapshots in one JSON file keyed by trigger key.

    File layout: {"<key>": {"lastUpdated": ...}, ...}

    Writes go to a temporary file in the same directory which then
    replaces the original, so readers never see a half-written file.
    """

    def __init__(self, path: Path, create_dirs: bool = True):
        """
        Initialize the store.

        Args:
            path: Path of the JSON file
            create_dirs: Whether to create the parent directory
        """
        self.path = Path(path)
        if create_dirs:
            self.path.parent.mkdir(parents=True, exist_ok=True)

    def _read_all(self) -> Dict[str, Any]:
        if not self.path.exists():
            return {}
        try:
            with open(self.path, "r", encoding="utf-8") as f:
                content = json.load(f)
        except (OSError, json.JSONDecodeError) as e:
            raise TriggerError(f"Cannot read snapshot file {self.path}: {e}") from e
        if not isinstance(content, dict):
            raise TriggerError(f"Snapshot file {self.path} does not hold a JSON object")
        return content

    def _write_all(self, content: Dict[str, Any]) -> None:
        fd, tmp_path = tempfile.mkstemp(
            dir=str(self.path.parent), prefix=f".{self.path.name}.", suffix=".tmp"
        )
        try:
            with os.fdopen(fd, "w", encoding="utf-8") as f:
                json.dump(content, f, indent=2, sort_keys=True, default=str)
            os.replace(tmp_path, self.path)
        except Exception:
            if os.path.exists(tmp_path):
                os.unlink(tmp_path)
            raise

    def load(self, key: str) -> Snapshot:
        snapshot = Snapshot.from_dict(self._read_all().get(key))
        logger.debug(f"Loaded snapshot for {key}: {snapshot.to_dict()}")
        return snapshot

    def save(self, key: str, snapshot: Snapshot) -> None:
        content = self._read_all()
        content[key] = snapshot.to_dict()
        self._write_all(content)
        logger.debug(f"Saved snapshot for {key}: {snapshot.to_dict()}")

    def keys(self) -> List[str]:
        return sorted(self._read_all())
