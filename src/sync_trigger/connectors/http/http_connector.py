"""
HTTP connector for calling REST APIs.
"""

import json
import logging
import time
from typing import Dict, Optional

import requests

from ...core.connector import Connector, ConnectorRequest, ConnectorResponse


logger = logging.getLogger(__name__)

RETRYABLE_STATUS_CODES = frozenset({429, 500, 502, 503, 504})


class HttpConnector(Connector):
    """
    Generic HTTP connector for JSON REST APIs.

    Supports:
    - GET, POST, PUT, PATCH and DELETE requests
    - Static default headers
    - Rate limiting
    - Retries with exponential backoff on network errors and 429/5xx
    """

    def __init__(
        self,
        name: str = "http",
        rate_limit_delay: float = 0.0,
        timeout: int = 30,
        max_retries: int = 3,
        user_agent: Optional[str] = None,
        default_headers: Optional[Dict[str, str]] = None,
        backoff_base: float = 1.0,
    ):
        """
        Initialize the HTTP connector.

        Args:
            name: Connector name
            rate_limit_delay: Minimum seconds between requests
            timeout: Request timeout in seconds
            max_retries: Maximum attempts for a request
            user_agent: Custom User-Agent header
            default_headers: Headers sent with every request
            backoff_base: Base delay in seconds for exponential backoff
        """
        self.name = name
        self.rate_limit_delay = rate_limit_delay
        self.timeout = timeout
        self.max_retries = max(1, max_retries)
        self.user_agent = user_agent or "SyncTrigger/1.0"
        self.default_headers = dict(default_headers or {})
        self.backoff_base = backoff_base
        self.last_request_time = 0.0
        self.session = requests.Session()

    def fetch(self, request: ConnectorRequest) -> ConnectorResponse:
        """
        Execute the request over HTTP.

        Args:
            request: The request to execute

        Returns:
            ConnectorResponse with the parsed JSON payload, or with
            error_message set when the call did not succeed
        """
        headers = dict(self.default_headers)
        headers.update(request.headers or {})
        headers.setdefault("User-Agent", self.user_agent)
        headers.setdefault("Accept", "application/json")

        method = request.method.upper()
        kwargs = {"headers": headers, "params": request.params, "timeout": self.timeout}
        if method != "GET" and request.body is not None:
            content_type = request.content_type or "application/json"
            headers.setdefault("Content-Type", content_type)
            if "json" in content_type:
                kwargs["data"] = json.dumps(request.body)
            else:
                kwargs["data"] = request.body

        last_error = None
        for attempt in range(self.max_retries):
            self._wait_for_rate_limit()
            try:
                start_time = time.time()
                response = self.session.request(method, request.uri, **kwargs)
                duration_ms = int((time.time() - start_time) * 1000)
            except requests.exceptions.RequestException as e:
                last_error = str(e)
                logger.warning(
                    f"Request failed (attempt {attempt + 1}/{self.max_retries}): {e}"
                )
                self._backoff(attempt)
                continue

            if response.status_code in RETRYABLE_STATUS_CODES and attempt < self.max_retries - 1:
                last_error = f"HTTP {response.status_code}"
                logger.warning(
                    f"Retryable status {response.status_code} "
                    f"(attempt {attempt + 1}/{self.max_retries}) for {request.uri}"
                )
                self._backoff(attempt)
                continue

            return self._build_response(response, duration_ms)

        return ConnectorResponse(
            status_code=0,
            payload=None,
            error_message=f"Request failed after {self.max_retries} attempts: {last_error}",
        )

    def _build_response(self, response: "requests.Response", duration_ms: int) -> ConnectorResponse:
        error_message = None
        try:
            payload = response.json()
        except ValueError:
            payload = None
            error_message = (
                f"Response is not valid JSON "
                f"(Content-Type: {response.headers.get('Content-Type', 'unknown')})"
            )

        if not 200 <= response.status_code < 300:
            error_message = f"HTTP {response.status_code}: {response.text[:500]}"

        return ConnectorResponse(
            status_code=response.status_code,
            payload=payload,
            headers=dict(response.headers),
            duration_ms=duration_ms,
            error_message=error_message,
        )

    def _backoff(self, attempt: int) -> None:
        if attempt < self.max_retries - 1:
            time.sleep(self.backoff_base * (2 ** attempt))

    def _wait_for_rate_limit(self) -> None:
        """Enforce rate limiting between requests."""
        if self.rate_limit_delay > 0:
            elapsed = time.time() - self.last_request_time
            if elapsed < self.rate_limit_delay:
                time.sleep(self.rate_limit_delay - elapsed)
        self.last_request_time = time.time()

    def get_name(self) -> str:
        """Return the connector name."""
        return self.name

    def close(self) -> None:
        """Close the session."""
        if self.session:
            self.session.close()
