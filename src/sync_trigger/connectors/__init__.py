"""
Connectors package for remote APIs.
"""

from .http import HttpConnector
from .static_connector import StaticConnector

__all__ = [
    "HttpConnector",
    "StaticConnector",
]
