"""
Chronological comparison of watermark values.

Watermarks are opaque values taken straight from API records: ISO-8601
strings, loosely formatted date strings, epoch milliseconds or datetime
objects. They are parsed only for comparison and stored as received.
"""

import logging
import math
from datetime import date, datetime, timezone
from typing import Any, Optional

from dateutil import parser as dateparser

from ..core.models import UNSET_WATERMARK

logger = logging.getLogger(__name__)


def is_unset(value: Any) -> bool:
    """Whether ``value`` is the numeric sentinel for a watermark never set."""
    return (
        isinstance(value, (int, float))
        and not isinstance(value, bool)
        and value == UNSET_WATERMARK
    )


def _to_utc(value: datetime) -> datetime:
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


def parse_timestamp(value: Any) -> Optional[datetime]:
    """
    Parse a timestamp-like value into an aware UTC datetime.

    Args:
        value: datetime, date, string, or number of epoch milliseconds

    Returns:
        The parsed datetime, or None when the value cannot be interpreted
    """
    if value is None or isinstance(value, bool):
        return None

    if isinstance(value, datetime):
        return _to_utc(value)

    if isinstance(value, date):
        return datetime(value.year, value.month, value.day, tzinfo=timezone.utc)

    if isinstance(value, (int, float)):
        if isinstance(value, float) and not math.isfinite(value):
            return None
        try:
            return datetime.fromtimestamp(value / 1000.0, tz=timezone.utc)
        except (OverflowError, OSError, ValueError):
            return None

    if isinstance(value, str):
        text = value.strip()
        if not text:
            return None
        try:
            return _to_utc(dateparser.isoparse(text))
        except ValueError:
            pass
        try:
            return _to_utc(dateparser.parse(text))
        except (ValueError, OverflowError) as e:
            logger.debug(f"Unparseable timestamp {value!r}: {e}")
            return None

    return None


def is_after(a: Any, b: Any) -> bool:
    """
    Strict chronological 'a is after b'.

    The unset sentinel (numeric zero) as ``b`` sorts before every parseable
    timestamp. Any value that cannot be parsed makes the comparison False,
    so a malformed record timestamp never wins.

    Args:
        a: Candidate timestamp
        b: Reference timestamp

    Returns:
        True if a is strictly later than b
    """
    if is_unset(a):
        return False

    parsed_a = parse_timestamp(a)
    if parsed_a is None:
        return False

    if is_unset(b):
        return True

    parsed_b = parse_timestamp(b)
    if parsed_b is None:
        return False

    return parsed_a > parsed_b
