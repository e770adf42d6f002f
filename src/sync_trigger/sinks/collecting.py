"""
In-memory event sink.
"""

import copy
from typing import Any, List, Tuple

from ..core.models import EventType
from ..core.sink import EventSink


class CollectingSink(EventSink):
    """
    Keeps every emitted event in memory, in emission order.

    Payloads are deep-copied on receipt so that later in-place updates
    (the snapshot is mutated by the engine) do not rewrite history.
    """

    def __init__(self, name: str = "collecting"):
        self.name = name
        self.events: List[Tuple[str, Any]] = []

    async def emit(self, event_type: str, payload: Any) -> None:
        self.events.append((event_type, copy.deepcopy(payload)))

    def get_name(self) -> str:
        return self.name

    @property
    def data_events(self) -> List[Any]:
        """Payloads of all data events."""
        return [payload for kind, payload in self.events if kind == EventType.DATA.value]

    @property
    def snapshot_events(self) -> List[Any]:
        """Payloads of all snapshot events."""
        return [payload for kind, payload in self.events if kind == EventType.SNAPSHOT.value]

    def clear(self) -> None:
        self.events = []
