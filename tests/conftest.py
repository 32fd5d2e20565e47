"""Root test configuration."""

import logging
import os

import pytest
import structlog
from continuoustest.config import ClientConfig, load_config
from continuoustest.remote_write import TimeSeries, make_series

WRITE_ENDPOINT = "http://mimir-write:8080"
READ_ENDPOINT = "http://mimir-read:8080/prometheus"


def pytest_configure(config):
    """Configure structlog for tests to suppress debug/info output."""
    logging.basicConfig(level=logging.WARNING, force=True)
    structlog.configure(
        processors=[
            structlog.stdlib.filter_by_level,
            structlog.processors.add_log_level,
            structlog.processors.format_exc_info,
            structlog.dev.ConsoleRenderer(),
        ],
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=False,
    )


@pytest.fixture(autouse=True)
def _clean_env(monkeypatch):
    """Keep MIMIR_CONTINUOUS_TEST_* variables from the host out of tests."""
    for name in list(os.environ):
        if name.startswith("MIMIR_CONTINUOUS_TEST_"):
            monkeypatch.delenv(name)


@pytest.fixture
def client_config() -> ClientConfig:
    return load_config(
        tenant_id="tenant-1",
        write_endpoint=WRITE_ENDPOINT,
        read_endpoint=READ_ENDPOINT,
    )


@pytest.fixture
def series_factory():
    """Build distinct single-sample series: s0, s1, ..."""

    def _make(count: int) -> list[TimeSeries]:
        return [
            make_series(
                "mimir_continuous_test_sine_wave",
                float(i),
                {"series_id": str(i)},
                timestamp_ms=1_700_000_000_000 + i * 20_000,
            )
            for i in range(count)
        ]

    return _make
