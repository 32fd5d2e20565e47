"""Tests for logging configuration and tenant-bound client events."""

import logging
from datetime import datetime, timedelta, timezone

import pytest
import respx
import structlog
from continuoustest.clients import HTTPMimirClient
from continuoustest.core.errors import ProtocolError
from continuoustest.logging import bind_context, configure_logging
from httpx import Response
from structlog.testing import capture_logs

PUSH_URL = "http://mimir-write:8080/api/v1/push"
QUERY_RANGE_URL = "http://mimir-read:8080/prometheus/api/v1/query_range"
START = datetime(2024, 1, 1, tzinfo=timezone.utc)


@pytest.fixture
def restore_logging():
    saved = structlog.get_config()
    root_level = logging.getLogger().level
    yield
    structlog.configure(**saved)
    logging.getLogger().setLevel(root_level)


class TestConfigureLogging:
    def test_json_renderer_by_default(self, restore_logging):
        configure_logging(logging.DEBUG)

        config = structlog.get_config()
        assert isinstance(config["processors"][-1], structlog.processors.JSONRenderer)
        assert structlog.stdlib.filter_by_level in config["processors"]
        assert isinstance(config["logger_factory"], structlog.stdlib.LoggerFactory)
        assert logging.getLogger().level == logging.DEBUG

    def test_console_renderer(self, restore_logging):
        configure_logging("WARNING", json_output=False)

        assert isinstance(structlog.get_config()["processors"][-1], structlog.dev.ConsoleRenderer)
        assert logging.getLogger().level == logging.WARNING


def test_bind_context_adds_fields():
    with capture_logs() as logs:
        bind_context(tenant="tenant-1").info("started", run=3)

    assert logs == [{"event": "started", "tenant": "tenant-1", "run": 3, "log_level": "info"}]


class TestClientEvents:
    """Client debug events carry the tenant they were issued for."""

    @pytest.mark.asyncio
    async def test_write_batch_event(self, client_config, series_factory):
        config = client_config.model_copy(update={"write_batch_size": 2})

        with respx.mock, capture_logs() as logs:
            respx.post(PUSH_URL).mock(return_value=Response(200))
            async with HTTPMimirClient(config) as client:
                await client.write_series(series_factory(3))

        events = [entry for entry in logs if entry["event"] == "write_batch_sent"]
        assert [entry["series"] for entry in events] == [2, 1]
        assert all(entry["tenant"] == "tenant-1" for entry in events)
        assert all(entry["status"] == 200 for entry in events)

    @pytest.mark.asyncio
    async def test_failed_batch_is_not_logged_as_sent(self, client_config, series_factory):
        with respx.mock, capture_logs() as logs:
            respx.post(PUSH_URL).mock(return_value=Response(500))
            async with HTTPMimirClient(client_config) as client:
                with pytest.raises(ProtocolError):
                    await client.write_series(series_factory(1))

        assert not [entry for entry in logs if entry["event"] == "write_batch_sent"]

    @pytest.mark.asyncio
    async def test_query_events(self, client_config):
        payload = {
            "status": "success",
            "data": {"resultType": "matrix", "result": [{"metric": {}, "values": [[1, "1"]]}]},
            "warnings": ["partial response"],
        }

        with respx.mock, capture_logs() as logs:
            respx.post(QUERY_RANGE_URL).mock(return_value=Response(200, json=payload))
            async with HTTPMimirClient(client_config) as client:
                await client.query_range("up", START, START + timedelta(minutes=1), timedelta(seconds=20))

        by_event = {entry["event"]: entry for entry in logs}
        assert by_event["query_range_warnings"]["warnings"] == ["partial response"]
        assert by_event["query_range_warnings"]["tenant"] == "tenant-1"
        assert by_event["query_range_completed"]["series"] == 1
        assert by_event["query_range_completed"]["tenant"] == "tenant-1"
