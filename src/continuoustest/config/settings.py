"""
Client settings using Pydantic.

Provides environment-based configuration loading with the
MIMIR_CONTINUOUS_TEST_ prefix, plus argparse flag registration for
command-line front-ends.
"""

from __future__ import annotations

import argparse
from typing import Any
from urllib.parse import urlsplit

import pydantic
from pydantic import Field, field_validator
from pydantic_settings import BaseSettings

from continuoustest.core.errors import ConfigurationError

DEFAULT_TENANT_ID = "anonymous"
DEFAULT_WRITE_BATCH_SIZE = 1000
DEFAULT_WRITE_TIMEOUT = 5.0
DEFAULT_READ_TIMEOUT = 30.0


class ClientConfig(BaseSettings):
    """Connection parameters for the write and read paths."""

    tenant_id: str = Field(default=DEFAULT_TENANT_ID, min_length=1)

    # Write path
    write_endpoint: str | None = None
    write_batch_size: int = Field(default=DEFAULT_WRITE_BATCH_SIZE, gt=0)
    write_timeout: float = Field(default=DEFAULT_WRITE_TIMEOUT, gt=0)

    # Read path
    read_endpoint: str | None = None
    read_timeout: float = Field(default=DEFAULT_READ_TIMEOUT, gt=0)

    class Config:
        env_file = ".env"
        env_file_encoding = "utf-8"
        env_prefix = "MIMIR_CONTINUOUS_TEST_"
        extra = "ignore"

    @field_validator("write_endpoint", "read_endpoint")
    @classmethod
    def _validate_endpoint(cls, value: str | None) -> str | None:
        if value is None or value == "":
            return None
        parts = urlsplit(value)
        if parts.scheme not in ("http", "https") or not parts.netloc:
            raise ValueError(f"invalid endpoint URL {value!r}: expected http(s)://host[:port][/path]")
        # API paths are appended by the client.
        return value.rstrip("/")

    def require_endpoints(self) -> None:
        """Ensure both endpoints are configured before any request is attempted."""
        if self.write_endpoint is None:
            raise ConfigurationError("the write endpoint has not been set")
        if self.read_endpoint is None:
            raise ConfigurationError("the read endpoint has not been set")

    @classmethod
    def from_args(cls, args: argparse.Namespace) -> ClientConfig:
        """Build config from parsed flags; unset flags fall back to env and defaults."""
        overrides = {
            name: getattr(args, name)
            for name in cls.model_fields
            if getattr(args, name, None) is not None
        }
        return load_config(**overrides)


def load_config(**overrides: Any) -> ClientConfig:
    """Load config from the environment, applying explicit overrides.

    Raises:
        ConfigurationError: If any value fails validation
    """
    try:
        return ClientConfig(**overrides)
    except pydantic.ValidationError as exc:
        fields = sorted({str(err["loc"][0]) for err in exc.errors() if err.get("loc")})
        raise ConfigurationError(
            f"invalid client configuration: {exc.error_count()} error(s)",
            details={"fields": ",".join(fields)},
        ) from exc


def add_arguments(parser: argparse.ArgumentParser) -> None:
    """Register the client flags on an argparse parser."""
    parser.add_argument(
        "--tests.tenant-id",
        dest="tenant_id",
        default=None,
        help=f"The tenant ID to use to write and read metrics in tests. (default: {DEFAULT_TENANT_ID})",
    )
    parser.add_argument(
        "--tests.write-endpoint",
        dest="write_endpoint",
        default=None,
        help=(
            "The base endpoint on the write path. The URL should have no trailing slash. "
            "The specific API path is appended to the URL, for example /api/v1/push for "
            "the remote write API endpoint, so the configured URL must not include it."
        ),
    )
    parser.add_argument(
        "--tests.write-batch-size",
        dest="write_batch_size",
        type=int,
        default=None,
        help=f"The maximum number of series to write in a single request. (default: {DEFAULT_WRITE_BATCH_SIZE})",
    )
    parser.add_argument(
        "--tests.write-timeout",
        dest="write_timeout",
        type=float,
        default=None,
        help=f"The timeout in seconds for a single write request. (default: {DEFAULT_WRITE_TIMEOUT})",
    )
    parser.add_argument(
        "--tests.read-endpoint",
        dest="read_endpoint",
        default=None,
        help=(
            "The base endpoint on the read path. The URL should have no trailing slash. "
            "The specific API path is appended to the URL, for example /api/v1/query_range "
            "for range query API, so the configured URL must not include it."
        ),
    )
    parser.add_argument(
        "--tests.read-timeout",
        dest="read_timeout",
        type=float,
        default=None,
        help=f"The timeout in seconds for a single read request. (default: {DEFAULT_READ_TIMEOUT})",
    )
