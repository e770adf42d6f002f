"""
Custom exceptions for the sync trigger.
"""


class TriggerError(Exception):
    """Base exception for all trigger errors."""
    pass


class TriggerConfigError(TriggerError):
    """
    Error in trigger configuration.

    Raised when:
    - Configuration file is missing or invalid
    - The configured operation is not described by the API document
    - No server URL can be resolved
    """
    pass


class ApiSpecError(TriggerError):
    """
    Error loading or reading the API description.

    Raised when:
    - The document cannot be read or parsed
    - The document has no 'paths' section
    - An operation id is not found
    """
    pass


class TriggerTransportError(TriggerError):
    """
    Error calling the remote API.

    Raised when:
    - The request fails after all retries
    - The API answers with a non-2xx status
    - The response body is not JSON
    """

    def __init__(self, message: str, status_code: int = None, uri: str = None):
        super().__init__(message)
        self.status_code = status_code
        self.uri = uri
