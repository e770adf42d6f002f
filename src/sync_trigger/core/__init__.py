"""
Core abstractions and models for the sync trigger.
"""

from .models import (
    Snapshot, Envelope, IncomingMessage, EventType, SyncResult, CycleMetrics,
    NoRecords, SingleRecord, RecordCollection, DataShape, classify_data,
    UNSET_WATERMARK, METADATA_KEYS,
)
from .connector import Connector, ConnectorRequest, ConnectorResponse
from .sink import EventSink, EmitFn
from .snapshot_store import SnapshotStore
from .exceptions import (
    TriggerError, TriggerConfigError, TriggerTransportError, ApiSpecError,
)

__all__ = [
    "Snapshot",
    "Envelope",
    "IncomingMessage",
    "EventType",
    "SyncResult",
    "CycleMetrics",
    "NoRecords",
    "SingleRecord",
    "RecordCollection",
    "DataShape",
    "classify_data",
    "UNSET_WATERMARK",
    "METADATA_KEYS",
    "Connector",
    "ConnectorRequest",
    "ConnectorResponse",
    "EventSink",
    "EmitFn",
    "SnapshotStore",
    "TriggerError",
    "TriggerConfigError",
    "TriggerTransportError",
    "ApiSpecError",
]
