"""
Event sinks receiving the trigger's data and snapshot events.
"""

from .collecting import CollectingSink
from .jsonl_sink import JsonLinesSink, event_payload_to_dict
from .logging_sink import LoggingSink

__all__ = [
    "CollectingSink",
    "JsonLinesSink",
    "LoggingSink",
    "event_payload_to_dict",
]
