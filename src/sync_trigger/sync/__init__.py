"""
Incremental synchronization: record extraction, metadata projection,
watermark comparison and the emission engine.
"""

from .paths import extract_records, resolve_path, is_truthy
from .metadata import project_metadata
from .watermark import is_after, parse_timestamp
from .engine import IncrementalEmitter, synchronize

__all__ = [
    "extract_records",
    "resolve_path",
    "is_truthy",
    "project_metadata",
    "is_after",
    "parse_timestamp",
    "IncrementalEmitter",
    "synchronize",
]
