"""
SQLite-based snapshot store.
"""

import json
import logging
import sqlite3
from datetime import datetime, timezone
from pathlib import Path
from typing import List, Optional

from ..core.models import Snapshot
from ..core.snapshot_store import SnapshotStore


logger = logging.getLogger(__name__)


class SqliteSnapshotStore(SnapshotStore):
    """
    SQLite-based implementation of the snapshot store.

    One row per trigger key. The snapshot is stored as JSON so the
    watermark keeps its original type (string, number).
    """

    def __init__(self, db_path: Path, auto_init: bool = True):
        """
        Initialize the SQLite snapshot store.

        Args:
            db_path: Path to the SQLite database file (':memory:' allowed)
            auto_init: Whether to create tables automatically
        """
        self.db_path = db_path if str(db_path) == ":memory:" else Path(db_path)
        self.conn: Optional[sqlite3.Connection] = None
        self._connect()

        if auto_init:
            self._init_schema()

    def _connect(self) -> None:
        """Establish database connection."""
        if isinstance(self.db_path, Path):
            self.db_path.parent.mkdir(parents=True, exist_ok=True)
        self.conn = sqlite3.connect(str(self.db_path), check_same_thread=False)
        self.conn.row_factory = sqlite3.Row
        logger.debug(f"Connected to SQLite snapshot store: {self.db_path}")

    def _init_schema(self) -> None:
        """Initialize database schema."""
        cursor = self.conn.cursor()
        cursor.execute("""
            CREATE TABLE IF NOT EXISTS snapshots (
                trigger_key TEXT PRIMARY KEY,
                snapshot TEXT NOT NULL,
                updated_at TEXT NOT NULL
            )
        """)
        self.conn.commit()
        logger.debug("Initialized snapshot store schema")

    def load(self, key: str) -> Snapshot:
        cursor = self.conn.cursor()
        cursor.execute("SELECT snapshot FROM snapshots WHERE trigger_key = ?", (key,))
        row = cursor.fetchone()
        if row is None:
            return Snapshot()
        return Snapshot.from_dict(json.loads(row["snapshot"]))

    def save(self, key: str, snapshot: Snapshot) -> None:
        try:
            cursor = self.conn.cursor()
            cursor.execute("""
                INSERT INTO snapshots (trigger_key, snapshot, updated_at)
                VALUES (?, ?, ?)
                ON CONFLICT(trigger_key) DO UPDATE SET
                    snapshot = excluded.snapshot,
                    updated_at = excluded.updated_at
            """, (
                key,
                json.dumps(snapshot.to_dict(), default=str),
                datetime.now(timezone.utc).isoformat(),
            ))
            self.conn.commit()
            logger.debug(f"Saved snapshot for {key}: {snapshot.to_dict()}")
        except sqlite3.Error as e:
            logger.error(f"Failed to save snapshot for {key}: {e}")
            raise

    def keys(self) -> List[str]:
        cursor = self.conn.cursor()
        cursor.execute("SELECT trigger_key FROM snapshots ORDER BY trigger_key")
        return [row["trigger_key"] for row in cursor.fetchall()]

    def close(self) -> None:
        """Close the database connection."""
        if self.conn:
            self.conn.close()
            self.conn = None
            logger.debug("Closed SQLite snapshot store connection")
