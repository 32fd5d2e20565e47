"""Core modules for the continuous-test client - centralized error definitions."""

from continuoustest.core.errors import (
    ConfigurationError,
    ContinuousTestError,
    ProtocolError,
    QueryError,
    RequestError,
    SerializationError,
    ShapeError,
    TransportError,
    format_error_message,
)

__all__ = [
    "ContinuousTestError",
    "ConfigurationError",
    "RequestError",
    "SerializationError",
    "TransportError",
    "ProtocolError",
    "QueryError",
    "ShapeError",
    "format_error_message",
]
