"""
Runner module for executing poll cycles.
"""

from .trigger_processor import TriggerProcessor, ProcessResult, drop_null_fields
from .poll_runner import PollingRunner, RunnerConfig

__all__ = [
    "TriggerProcessor",
    "ProcessResult",
    "drop_null_fields",
    "PollingRunner",
    "RunnerConfig",
]
