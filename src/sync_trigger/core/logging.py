"""
Logging utilities for the sync trigger.

Provides structured logging with correlation fields so the events of one
poll cycle can be traced (cycle → operation → inbound record).
"""

import json
import logging
import sys
from datetime import datetime, timezone
from typing import Any, Dict, Optional


CORRELATION_FIELDS = ("cycle_id", "operation_id", "oihUid")

PACKAGE_LOGGER = "sync_trigger"


class StructuredFormatter(logging.Formatter):
    """
    Formatter that outputs JSON-structured log lines.

    Each log line includes:
    - Standard log fields (timestamp, level, message, logger)
    - Correlation fields if present (cycle_id, operation_id, oihUid)
    """

    def __init__(self, include_timestamp: bool = True):
        super().__init__()
        self.include_timestamp = include_timestamp

    def format(self, record: logging.LogRecord) -> str:
        """Format the log record as JSON."""
        log_entry = {
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }

        if self.include_timestamp:
            log_entry["timestamp"] = datetime.fromtimestamp(
                record.created, tz=timezone.utc
            ).isoformat()

        for name in CORRELATION_FIELDS:
            value = getattr(record, name, None)
            if value is not None:
                log_entry[name] = value

        if record.exc_info:
            log_entry["exception"] = self.formatException(record.exc_info)

        return json.dumps(log_entry, default=str)


class HumanReadableFormatter(logging.Formatter):
    """
    Formatter that outputs human-readable log lines with correlation context.

    Format: TIMESTAMP [LEVEL] LOGGER - MESSAGE [cycle_id=X operation_id=Y]
    """

    def __init__(self, include_timestamp: bool = True):
        if include_timestamp:
            fmt = "%(asctime)s [%(levelname)s] %(name)s - %(message)s"
        else:
            fmt = "[%(levelname)s] %(name)s - %(message)s"
        super().__init__(fmt, datefmt="%Y-%m-%d %H:%M:%S")

    def format(self, record: logging.LogRecord) -> str:
        base = super().format(record)

        context_parts = []
        for name in CORRELATION_FIELDS:
            value = getattr(record, name, None)
            if value is not None:
                context_parts.append(f"{name}={value}")

        if context_parts:
            return f"{base} [{' '.join(context_parts)}]"
        return base


def configure_logging(
    level: int = logging.INFO,
    structured: bool = False,
    include_timestamp: bool = True,
) -> None:
    """
    Configure the package logger.

    Args:
        level: Logging level (default: INFO)
        structured: If True, output JSON lines; if False, human-readable
        include_timestamp: Whether to include timestamps
    """
    package_logger = logging.getLogger(PACKAGE_LOGGER)
    package_logger.setLevel(level)

    # Only add handler if none exist (avoid duplicate handlers)
    if not package_logger.handlers:
        handler = logging.StreamHandler(sys.stderr)
        handler.setLevel(level)

        if structured:
            formatter = StructuredFormatter(include_timestamp=include_timestamp)
        else:
            formatter = HumanReadableFormatter(include_timestamp=include_timestamp)

        handler.setFormatter(formatter)
        package_logger.addHandler(handler)
    else:
        for handler in package_logger.handlers:
            handler.setLevel(level)


class CorrelationContext:
    """
    Context manager for adding correlation fields to log records.

    Example:
        >>> with CorrelationContext(cycle_id="abc", operation_id="listItems"):
        ...     log_with_context(logger, logging.INFO, "Polling")
    """

    _current: Optional["CorrelationContext"] = None

    def __init__(self, **fields: Any):
        self.context = {k: v for k, v in fields.items() if v is not None}
        self._previous: Optional["CorrelationContext"] = None

    def __enter__(self) -> "CorrelationContext":
        self._previous = CorrelationContext._current
        CorrelationContext._current = self
        return self

    def __exit__(self, *args) -> None:
        CorrelationContext._current = self._previous

    @classmethod
    def get_current(cls) -> Dict[str, Any]:
        """Get the current correlation context."""
        if cls._current is None:
            return {}
        return cls._current.context.copy()


def log_with_context(
    logger: logging.Logger,
    level: int,
    message: str,
    *args: Any,
    **extra: Any,
) -> None:
    """
    Log a message with the current correlation context merged in.

    Args:
        logger: The logger to use
        level: Log level (e.g., logging.INFO)
        message: Log message (%-style, formatted lazily with args)
        **extra: Additional correlation fields
    """
    context = CorrelationContext.get_current()
    context.update(extra)
    logger.log(level, message, *args, extra=context)
