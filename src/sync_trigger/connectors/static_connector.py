"""
Static connector for dry runs and tests.

Serves canned JSON payloads without any network access. Payloads are
returned in order, one per call; once the list is exhausted the last
payload keeps being served, which mimics an API that has no new data.
"""

import copy
import logging
from typing import Any, List, Optional, Sequence

from ..core.connector import Connector, ConnectorRequest, ConnectorResponse

logger = logging.getLogger(__name__)


class StaticConnector(Connector):
    """
    Connector returning predefined payloads.

    Useful for exercising the full trigger path (parameter resolution,
    extraction, emission, snapshot persistence) deterministically.
    """

    def __init__(
        self,
        payloads: Optional[Sequence[Any]] = None,
        name: str = "static",
        status_code: int = 200,
        error_message: Optional[str] = None,
    ):
        """
        Initialize the static connector.

        Args:
            payloads: Payloads served in order (defaults to one empty list)
            name: Connector name
            status_code: Status code reported with every response
            error_message: When set, every call fails with this message
        """
        self.payloads: List[Any] = list(payloads) if payloads is not None else [[]]
        self.name = name
        self.status_code = status_code
        self.error_message = error_message
        self.request_history: List[ConnectorRequest] = []
        self._position = 0

    def fetch(self, request: ConnectorRequest) -> ConnectorResponse:
        """Return the next canned payload."""
        self.request_history.append(request)
        logger.debug(f"Static fetch {request.method} {request.uri} params={request.params}")

        if self.error_message is not None:
            return ConnectorResponse(
                status_code=self.status_code,
                payload=None,
                error_message=self.error_message,
            )

        index = min(self._position, len(self.payloads) - 1)
        self._position += 1
        return ConnectorResponse(
            status_code=self.status_code,
            payload=copy.deepcopy(self.payloads[index]),
            headers={"Content-Type": "application/json"},
            duration_ms=0,
        )

    def get_name(self) -> str:
        return self.name

    def reset(self) -> None:
        """Clear request history and start serving payloads from the beginning."""
        self.request_history = []
        self._position = 0
