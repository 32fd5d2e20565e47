"""
Client configuration.

Provides Pydantic-based settings (environment variables, .env files) and
argparse flag registration for the write and read endpoints.
"""

from continuoustest.config.settings import (
    DEFAULT_READ_TIMEOUT,
    DEFAULT_TENANT_ID,
    DEFAULT_WRITE_BATCH_SIZE,
    DEFAULT_WRITE_TIMEOUT,
    ClientConfig,
    add_arguments,
    load_config,
)

__all__ = [
    "ClientConfig",
    "add_arguments",
    "load_config",
    "DEFAULT_TENANT_ID",
    "DEFAULT_WRITE_BATCH_SIZE",
    "DEFAULT_WRITE_TIMEOUT",
    "DEFAULT_READ_TIMEOUT",
]
