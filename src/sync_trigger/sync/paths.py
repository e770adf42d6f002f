"""
Dotted-path lookup over JSON-shaped values.

Two flavours are provided:

- ``resolve_path`` returns whatever is stored at the path, falsy values
  included, and ``default`` only when a node is missing.
- ``extract_records`` is the lenient walk used on API responses: any
  falsy node along the way ends the walk with ``None``.
"""

import logging
import math
from typing import Any, List, Mapping, Optional, Sequence, Union

logger = logging.getLogger(__name__)

_MISSING = object()

PathLike = Union[str, Sequence[str]]


def is_truthy(value: Any) -> bool:
    """
    Truthiness as JSON payloads are usually interpreted by the APIs we poll.

    None, False, zero, NaN and the empty string are falsy. Empty lists and
    empty objects count as present.
    """
    if value is None or value is False:
        return False
    if isinstance(value, str):
        return value != ""
    if isinstance(value, bool):
        return True
    if isinstance(value, (int, float)):
        return value != 0 and not (isinstance(value, float) and math.isnan(value))
    return True


def split_path(path: PathLike) -> List[str]:
    """Split a dotted path into its segments."""
    if isinstance(path, str):
        return path.split(".") if path else []
    return [str(segment) for segment in path]


def _step(value: Any, segment: str) -> Any:
    """Move one level down, returning _MISSING when the node does not exist."""
    if isinstance(value, Mapping):
        return value.get(segment, _MISSING)
    if isinstance(value, (list, tuple)):
        try:
            index = int(segment)
        except ValueError:
            return _MISSING
        if 0 <= index < len(value):
            return value[index]
        return _MISSING
    return _MISSING


def resolve_path(value: Any, path: Optional[PathLike], default: Any = None) -> Any:
    """
    Look up a dotted path.

    Args:
        value: Root JSON value (dicts, lists, scalars)
        path: Dotted path such as 'meta.updated_at' or 'items.0.id'
        default: Returned when any node along the path is missing

    Returns:
        The value at the path, or ``default``
    """
    segments = split_path(path) if path is not None else []
    if not segments:
        return default

    current = value
    for segment in segments:
        if current is None:
            return default
        current = _step(current, segment)
        if current is _MISSING:
            return default
    # A stored null resolves to the default
    return default if current is None else current


def extract_records(splitting_key: Optional[str], response: Any) -> Optional[Any]:
    """
    Extract the part of an API response that holds the records.

    Args:
        splitting_key: Dotted path to the records, or None for the whole response
        response: Parsed JSON response

    Returns:
        The sub-value at the splitting key, the whole response when no key is
        given, or None when the walk hits a missing or falsy node
    """
    if not splitting_key:
        logger.info("Splitting key missing, going to return original data...")
        return response

    logger.info(f"Going to split result by key: {splitting_key}")
    current = response
    for segment in split_path(splitting_key):
        if not is_truthy(current):
            return None
        current = _step(current, segment)
        if current is _MISSING or not is_truthy(current):
            return None
    return current
