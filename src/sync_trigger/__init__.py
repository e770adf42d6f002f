"""
Sync trigger: polls a REST API operation and emits records that are new
since the last stored snapshot.
"""

from .core.models import Envelope, Snapshot, IncomingMessage, SyncResult
from .sync import (
    IncrementalEmitter, extract_records, is_after, project_metadata, synchronize,
)

__version__ = "1.0.0"

__all__ = [
    "Envelope",
    "Snapshot",
    "IncomingMessage",
    "SyncResult",
    "IncrementalEmitter",
    "extract_records",
    "is_after",
    "project_metadata",
    "synchronize",
]
