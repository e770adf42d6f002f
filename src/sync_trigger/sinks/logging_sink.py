"""
Event sink that only logs events.
"""

import json
import logging
from typing import Any, Optional

from ..core.sink import EventSink
from .jsonl_sink import event_payload_to_dict


class LoggingSink(EventSink):
    """Logs every event as one JSON line at INFO level."""

    def __init__(self, logger: Optional[logging.Logger] = None, name: str = "log"):
        self.logger = logger or logging.getLogger(__name__)
        self.name = name

    async def emit(self, event_type: str, payload: Any) -> None:
        self.logger.info(
            f"Emitted {event_type}: "
            f"{json.dumps(event_payload_to_dict(payload), ensure_ascii=False, default=str)}"
        )

    def get_name(self) -> str:
        return self.name
