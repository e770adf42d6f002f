"""
Connector interface for calling the remote API.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Any, Dict, Optional


@dataclass
class ConnectorRequest:
    """
    Request to be sent by a connector.

    Attributes:
        uri: The URI to call (path parameters already substituted)
        method: HTTP method (GET, POST, etc.)
        headers: Optional request headers
        body: Optional JSON-serializable request body
        params: Optional query parameters
        content_type: Request content type for non-GET calls
        metadata: Additional connector-specific metadata
    """
    uri: str
    method: str = "GET"
    headers: Optional[Dict[str, str]] = None
    body: Optional[Any] = None
    params: Optional[Dict[str, Any]] = None
    content_type: Optional[str] = None
    metadata: Optional[Dict[str, Any]] = None


@dataclass
class ConnectorResponse:
    """
    Response from a connector.

    Attributes:
        status_code: HTTP status code (0 if no response was received)
        payload: Parsed JSON response body
        headers: Response headers
        duration_ms: Time taken for the request in milliseconds
        error_message: Error message if request failed
    """
    status_code: int
    payload: Any
    headers: Optional[Dict[str, str]] = None
    duration_ms: Optional[int] = None
    error_message: Optional[str] = None

    @property
    def ok(self) -> bool:
        return 200 <= self.status_code < 300 and self.error_message is None


class Connector(ABC):
    """
    Abstract base class for all connectors.

    Connectors execute one request against the remote API and return
    its parsed response.
    """

    @abstractmethod
    def fetch(self, request: ConnectorRequest) -> ConnectorResponse:
        """
        Execute the request.

        Args:
            request: The request to execute

        Returns:
            ConnectorResponse with the result
        """
        pass

    @abstractmethod
    def get_name(self) -> str:
        """Return the connector name/identifier."""
        pass

    def close(self) -> None:
        """Close any open resources. Optional."""
        pass
