"""
HTTP connector package.
"""

from .http_connector import HttpConnector

__all__ = ["HttpConnector"]
