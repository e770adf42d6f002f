"""
Event sink interface for delivering trigger output downstream.
"""

from abc import ABC, abstractmethod
from typing import Any, Awaitable, Callable

# Signature of the emit callback handed to the synchronization engine
EmitFn = Callable[[str, Any], Awaitable[None]]


class EventSink(ABC):
    """
    Abstract base class for event sinks.

    A sink receives the ordered stream of ``data`` and ``snapshot``
    events produced by one poll cycle. Exceptions raised by ``emit``
    abort the cycle.
    """

    @abstractmethod
    async def emit(self, event_type: str, payload: Any) -> None:
        """
        Deliver one event.

        Args:
            event_type: 'data' or 'snapshot'
            payload: Envelope for data events, Snapshot for snapshot events
        """
        pass

    @abstractmethod
    def get_name(self) -> str:
        """Return the sink name/identifier."""
        pass

    def close(self) -> None:
        """Close any open resources. Optional."""
        pass
