"""
Snapshot store interface for persisting watermarks between cycles.
"""

from abc import ABC, abstractmethod
from typing import List

from ..core.models import Snapshot


class SnapshotStore(ABC):
    """
    Abstract base class for snapshot stores.

    The synchronization engine never persists anything itself; the
    polling runner loads a snapshot before each cycle and saves it when
    the cycle emits its snapshot event.
    """

    @abstractmethod
    def load(self, key: str) -> Snapshot:
        """
        Load the snapshot for a trigger.

        Args:
            key: Trigger key (usually the operation id)

        Returns:
            The stored snapshot, or an empty Snapshot on first run
        """
        pass

    @abstractmethod
    def save(self, key: str, snapshot: Snapshot) -> None:
        """
        Persist the snapshot for a trigger.

        Args:
            key: Trigger key
            snapshot: Snapshot to store
        """
        pass

    @abstractmethod
    def keys(self) -> List[str]:
        """Return the keys with a stored snapshot."""
        pass

    def close(self) -> None:
        """Close any open resources. Optional."""
        pass
