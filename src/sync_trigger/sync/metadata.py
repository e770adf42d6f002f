"""
Projection of inbound message metadata onto the envelope metadata.
"""

from typing import Any, Dict, Mapping

from ..core.models import METADATA_KEYS


def placeholder(key: str) -> str:
    """Placeholder used for an identifier the inbound message did not carry."""
    return f"{key} not set yet"


def project_metadata(metadata: Any = None) -> Dict[str, Any]:
    """
    Build envelope metadata from inbound message metadata.

    Every identifier in METADATA_KEYS is always present in the result, in
    that order. Identifiers missing from ``metadata`` are replaced with a
    "<key> not set yet" placeholder. A key that is present keeps its value,
    None included. Metadata that is not a mapping carries no identifiers.

    Args:
        metadata: Inbound message metadata, any JSON value or None

    Returns:
        New dict with exactly the METADATA_KEYS
    """
    if not isinstance(metadata, Mapping):
        metadata = {}
    return {
        key: metadata[key] if key in metadata else placeholder(key)
        for key in METADATA_KEYS
    }
