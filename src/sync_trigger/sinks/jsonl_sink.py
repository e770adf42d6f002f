"""
File-based event sink writing JSON lines.
"""

import json
import logging
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Optional

from ..core.sink import EventSink


logger = logging.getLogger(__name__)


def event_payload_to_dict(payload: Any) -> Any:
    """Convert an event payload (Envelope, Snapshot or plain JSON) to JSON data."""
    to_dict = getattr(payload, "to_dict", None)
    if callable(to_dict):
        return to_dict()
    return payload


class JsonLinesSink(EventSink):
    """
    Appends events to a JSON lines file.

    Each line holds: {"type": ..., "emitted_at": ..., "payload": ...}.
    The file is flushed after every event so a crashed cycle leaves the
    events delivered so far on disk.
    """

    def __init__(self, path: Path, create_dirs: bool = True, name: Optional[str] = None):
        """
        Initialize the JSON lines sink.

        Args:
            path: Output file path (appended to)
            create_dirs: Whether to create the parent directory
            name: Sink name (defaults to 'jsonl')
        """
        self.path = Path(path)
        self.name = name or "jsonl"
        if create_dirs:
            self.path.parent.mkdir(parents=True, exist_ok=True)
        self._handle = None

    def _open(self):
        if self._handle is None:
            self._handle = open(self.path, "a", encoding="utf-8")
        return self._handle

    async def emit(self, event_type: str, payload: Any) -> None:
        line = {
            "type": event_type,
            "emitted_at": datetime.now(timezone.utc).isoformat(),
            "payload": event_payload_to_dict(payload),
        }
        handle = self._open()
        handle.write(json.dumps(line, ensure_ascii=False, default=str) + "\n")
        handle.flush()
        logger.debug(f"Wrote {event_type} event to {self.path}")

    def get_name(self) -> str:
        return self.name

    def close(self) -> None:
        if self._handle is not None:
            self._handle.close()
            self._handle = None
