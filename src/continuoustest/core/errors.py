"""
Error hierarchy for the continuous-test client.

Every failure is raised to the immediate caller with enough context to be
classified without inspecting client internals:

- ConfigurationError: missing or invalid endpoint configuration (fatal)
- SerializationError: a write batch could not be encoded
- TransportError: the request never produced an HTTP response
- ProtocolError: the backend answered with a non-2xx status
- QueryError: the query API returned an error envelope
- ShapeError: the query result is not a matrix

The client never retries; that policy belongs to the caller.
"""

from __future__ import annotations

from typing import Any


class ContinuousTestError(Exception):
    """Base exception for continuous-test client errors."""

    def __init__(self, message: str, details: dict[str, Any] | None = None):
        super().__init__(message)
        self.message = message
        self.details = details or {}


class ConfigurationError(ContinuousTestError):
    """Raised for configuration-related errors."""


class RequestError(ContinuousTestError):
    """Base for errors raised while sending a request.

    ``status_code`` is the HTTP status observed for the failing request
    (on the write path, the failing batch), or 0 when no response was
    received.
    """

    def __init__(
        self,
        message: str,
        *,
        status_code: int = 0,
        details: dict[str, Any] | None = None,
    ):
        super().__init__(message, details)
        self.status_code = status_code


class SerializationError(RequestError):
    """Raised when a batch cannot be encoded into a write request."""


class TransportError(RequestError):
    """Raised when a request fails before any HTTP response is received."""


class ProtocolError(RequestError):
    """Raised when the backend answers with a non-2xx HTTP status."""

    def __init__(
        self,
        message: str,
        *,
        status_code: int,
        status: str,
        body: bytes = b"",
        details: dict[str, Any] | None = None,
    ):
        super().__init__(message, status_code=status_code, details=details)
        self.status = status
        self.body = body

    @property
    def is_client_error(self) -> bool:
        return 400 <= self.status_code < 500

    @property
    def is_server_error(self) -> bool:
        return 500 <= self.status_code < 600


class QueryError(ContinuousTestError):
    """Raised when the query API responds with ``status: error``."""

    def __init__(
        self,
        message: str,
        *,
        error_type: str,
        status_code: int,
        details: dict[str, Any] | None = None,
    ):
        super().__init__(message, details)
        self.error_type = error_type
        self.status_code = status_code


class ShapeError(ContinuousTestError):
    """Raised when a query result does not have the expected matrix shape."""


def format_error_message(error: ContinuousTestError) -> str:
    """Format an error message for display to users."""
    msg = error.message
    if error.details:
        detail_str = ", ".join(f"{k}={v}" for k, v in error.details.items())
        msg = f"{msg} ({detail_str})"
    return msg
