"""
Core data models for the sync trigger.
"""

from dataclasses import dataclass, field, replace
from datetime import datetime, timezone
from enum import Enum
from typing import Any, Dict, List, Optional, Union


# Numeric zero marks a watermark that has never been set
UNSET_WATERMARK = 0

METADATA_KEYS = ("oihUid", "recordUid", "applicationUid")


class EventType(str, Enum):
    """Type of event delivered to the downstream pipeline."""
    DATA = "data"
    SNAPSHOT = "snapshot"


@dataclass
class Snapshot:
    """
    Watermark carried between poll cycles.

    The engine reads ``last_updated`` to filter records and overwrites it
    in place when newer records were emitted. ``None`` means the trigger
    has never completed a cycle.

    Attributes:
        last_updated: Opaque sortable timestamp of the newest emitted record
    """
    last_updated: Optional[Any] = None

    @property
    def is_set(self) -> bool:
        """Whether a watermark exists (falsy values count as unset)."""
        return bool(self.last_updated)

    def to_dict(self) -> Dict[str, Any]:
        """Wire representation of the snapshot."""
        if self.last_updated is None:
            return {}
        return {"lastUpdated": self.last_updated}

    @classmethod
    def from_dict(cls, data: Optional[Dict[str, Any]]) -> "Snapshot":
        """Build a snapshot from its wire representation."""
        if not data:
            return cls()
        return cls(last_updated=data.get("lastUpdated"))


@dataclass
class Envelope:
    """
    Wraps one unit of synchronized data.

    Attributes:
        metadata: Correlation identifiers (see METADATA_KEYS)
        data: The extracted record, list of records, or None
    """
    metadata: Dict[str, Any]
    data: Any = None

    def with_data(self, data: Any) -> "Envelope":
        """Return a copy of this envelope carrying different data."""
        return replace(self, data=data)

    def to_dict(self) -> Dict[str, Any]:
        return {"metadata": dict(self.metadata), "data": self.data}


@dataclass
class IncomingMessage:
    """
    Message that starts a poll cycle.

    Attributes:
        data: Message body, usually an object; declared operation parameters
            are read from it
        metadata: Inbound correlation identifiers
        headers: Inbound message headers, logged only
    """
    data: Any = field(default_factory=dict)
    metadata: Any = None
    headers: Dict[str, Any] = field(default_factory=dict)

    @classmethod
    def from_dict(cls, raw: Optional[Dict[str, Any]]) -> "IncomingMessage":
        raw = raw or {}
        return cls(
            data=raw["data"] if raw.get("data") is not None else {},
            metadata=raw.get("metadata"),
            headers=dict(raw.get("headers") or {}),
        )


@dataclass(frozen=True)
class NoRecords:
    """Extraction found nothing at the splitting key."""


@dataclass(frozen=True)
class SingleRecord:
    """Response data is a single object, not a collection."""
    record: Any


@dataclass(frozen=True)
class RecordCollection:
    """Response data is an ordered list of records."""
    records: List[Any]


DataShape = Union[NoRecords, SingleRecord, RecordCollection]


def classify_data(data: Any) -> DataShape:
    """
    Decide the shape of envelope data.

    Args:
        data: Value produced by record extraction

    Returns:
        NoRecords for None, RecordCollection for lists and tuples,
        SingleRecord for anything else
    """
    if data is None:
        return NoRecords()
    if isinstance(data, (list, tuple)):
        return RecordCollection(records=list(data))
    return SingleRecord(record=data)


@dataclass
class SyncResult:
    """
    Outcome of a completed synchronization cycle.

    Attributes:
        shape: Which branch the engine took ('none', 'single', 'collection')
        records_seen: Number of records examined
        records_emitted: Number of data events emitted
        snapshot_emitted: Whether a snapshot event was emitted
        watermark_before: Watermark at the start of the cycle
        watermark_after: Watermark at the end of the cycle
    """
    shape: str
    records_seen: int = 0
    records_emitted: int = 0
    snapshot_emitted: bool = False
    watermark_before: Optional[Any] = None
    watermark_after: Optional[Any] = None

    @property
    def watermark_advanced(self) -> bool:
        return self.watermark_after != self.watermark_before


@dataclass
class CycleMetrics:
    """Metrics collected by the polling runner for one cycle."""
    cycle_id: str
    operation_id: str
    started_at: datetime = field(default_factory=lambda: datetime.now(timezone.utc))
    ended_at: Optional[datetime] = None
    status: str = "running"
    records_emitted: int = 0
    snapshot_saved: bool = False
    error_message: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        return {
            "cycle_id": self.cycle_id,
            "operation_id": self.operation_id,
            "started_at": self.started_at.isoformat(),
            "ended_at": self.ended_at.isoformat() if self.ended_at else None,
            "status": self.status,
            "records_emitted": self.records_emitted,
            "snapshot_saved": self.snapshot_saved,
            "error_message": self.error_message,
        }
