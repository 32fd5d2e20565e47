"""
Mimir client for continuous testing.

Writes series through the Prometheus remote write API and reads them back
through the Prometheus range query API. Every request carries the tenant
header via TenantScopedTransport.

API endpoints:
    POST /api/v1/push         - Remote write (snappy-compressed protobuf)
    POST /api/v1/query_range  - Range query (GET fallback on 405 or 501)
"""

from __future__ import annotations

import asyncio
from datetime import datetime, timedelta
from typing import Any, Sequence

import httpx

from continuoustest.clients.transport import TenantScopedTransport
from continuoustest.config.settings import ClientConfig
from continuoustest.core.errors import ProtocolError, TransportError
from continuoustest.logging import bind_context
from continuoustest.query.models import Matrix
from continuoustest.query.parser import to_matrix, unwrap_envelope
from continuoustest.remote_write.codec import (
    CONTENT_ENCODING,
    CONTENT_TYPE,
    REMOTE_WRITE_VERSION,
    compress,
    encode_write_request,
)
from continuoustest.remote_write.models import TimeSeries

DEFAULT_USER_AGENT = "mimir-continuous-test"
PUSH_PATH = "/api/v1/push"
QUERY_RANGE_PATH = "/api/v1/query_range"

# Maximum number of response body bytes embedded in error messages.
MAX_ERR_MSG_LEN = 256


class HTTPMimirClient:
    """
    Network-backed MimirClient.

    Holds no mutable state beyond one httpx.AsyncClient, so concurrent calls
    from multiple tasks are safe. Use as an async context manager, or call
    ``aclose()`` when done.
    """

    def __init__(
        self,
        config: ClientConfig,
        *,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        """
        Initialize the client.

        Args:
            config: Endpoint configuration; both endpoints must be set
            transport: Underlying transport to wrap (defaults to
                httpx.AsyncHTTPTransport)

        Raises:
            ConfigurationError: If the write or read endpoint is not set
        """
        config.require_endpoints()

        self._config = config
        self._write_url = f"{config.write_endpoint}{PUSH_PATH}"
        self._query_range_url = f"{config.read_endpoint}{QUERY_RANGE_PATH}"
        self._logger = bind_context(tenant=config.tenant_id)
        # Deadlines are enforced per call with asyncio.wait_for.
        self._client = httpx.AsyncClient(
            transport=TenantScopedTransport(config.tenant_id, transport),
            timeout=None,
        )

    @property
    def config(self) -> ClientConfig:
        return self._config

    async def aclose(self) -> None:
        await self._client.aclose()

    async def __aenter__(self) -> HTTPMimirClient:
        return self

    async def __aexit__(self, *exc_info: Any) -> None:
        await self.aclose()

    async def write_series(self, series: Sequence[TimeSeries]) -> int:
        """
        Write series in batches of at most ``write_batch_size``.

        Stops at the first failing batch; batches already sent are not
        rolled back.

        Args:
            series: Series to write, in order

        Returns:
            Status code of the last batch sent (0 if nothing was sent)

        Raises:
            SerializationError: If a batch cannot be encoded
            TransportError: If a batch gets no HTTP response
            ProtocolError: If a batch gets a non-2xx response
        """
        last_status_code = 0
        batch_size = self._config.write_batch_size

        for offset in range(0, len(series), batch_size):
            batch = series[offset : offset + batch_size]
            last_status_code = await self._send_write_request(batch)

        return last_status_code

    async def _send_write_request(self, batch: Sequence[TimeSeries]) -> int:
        data = encode_write_request(batch)
        compressed = compress(data)

        headers = {
            "Content-Encoding": CONTENT_ENCODING,
            "Content-Type": CONTENT_TYPE,
            "User-Agent": DEFAULT_USER_AGENT,
            "X-Prometheus-Remote-Write-Version": REMOTE_WRITE_VERSION,
        }
        timeout = self._config.write_timeout
        loop = asyncio.get_running_loop()
        deadline = loop.time() + timeout

        request = self._client.build_request("POST", self._write_url, content=compressed, headers=headers)
        try:
            response = await asyncio.wait_for(self._client.send(request, stream=True), timeout=timeout)
        except asyncio.TimeoutError as exc:
            raise TransportError(
                f"write request to {self._write_url} timed out after {timeout}s"
            ) from exc
        except httpx.HTTPError as exc:
            raise TransportError(f"write request to {self._write_url} failed: {exc}") from exc

        try:
            if not response.is_success:
                # The body read shares the batch deadline.
                await _raise_write_failure(response, max(deadline - loop.time(), 0.0))
        finally:
            await response.aclose()

        self._logger.debug(
            "write_batch_sent",
            series=len(batch),
            bytes=len(compressed),
            status=response.status_code,
        )
        return response.status_code

    async def query_range(
        self,
        query: str,
        start: datetime,
        end: datetime,
        step: timedelta,
    ) -> Matrix:
        """
        Execute a range query and narrow the result to a Matrix.

        Args:
            query: PromQL query string
            start: Start time (timezone-aware datetimes are recommended)
            end: End time
            step: Query resolution

        Returns:
            Matrix of the series returned by the query

        Raises:
            TransportError: On network failure or timeout
            ProtocolError: On a non-2xx response without an API error body
            QueryError: If the API reports an error
            ShapeError: If the result is not a matrix
        """
        params = {
            "query": query,
            "start": _format_time(start),
            "end": _format_time(end),
            "step": _format_duration(step),
        }
        timeout = self._config.read_timeout

        try:
            response = await asyncio.wait_for(self._post_query(params), timeout=timeout)
        except asyncio.TimeoutError as exc:
            raise TransportError(
                f"range query to {self._query_range_url} timed out after {timeout}s"
            ) from exc
        except httpx.HTTPError as exc:
            raise TransportError(f"range query to {self._query_range_url} failed: {exc}") from exc

        data, warnings = _decode_query_response(response)
        if warnings:
            self._logger.debug("query_range_warnings", query=query, warnings=warnings)

        matrix = to_matrix(data)
        self._logger.debug("query_range_completed", query=query, series=len(matrix))
        return matrix

    async def _post_query(self, params: dict[str, str]) -> httpx.Response:
        headers = {"User-Agent": DEFAULT_USER_AGENT}
        response = await self._client.post(self._query_range_url, data=params, headers=headers)
        if response.status_code in (httpx.codes.METHOD_NOT_ALLOWED, httpx.codes.NOT_IMPLEMENTED):
            response = await self._client.get(self._query_range_url, params=params, headers=headers)
        return response


async def _raise_write_failure(response: httpx.Response, timeout: float) -> None:
    """Raise ProtocolError for a non-2xx write response, keeping its status code."""
    status = _status_line(response)
    try:
        truncated_body = await asyncio.wait_for(
            _read_truncated(response, MAX_ERR_MSG_LEN),
            timeout=timeout,
        )
    except (asyncio.TimeoutError, httpx.HTTPError) as exc:
        reason = "timed out" if isinstance(exc, asyncio.TimeoutError) else str(exc)
        raise ProtocolError(
            f"server returned HTTP status {status} and client failed to read response body: {reason}",
            status_code=response.status_code,
            status=status,
        ) from exc

    raise ProtocolError(
        f"server returned HTTP status {status} and body "
        f"{truncated_body.decode('utf-8', errors='replace')!r} "
        f"(truncated to {MAX_ERR_MSG_LEN} bytes)",
        status_code=response.status_code,
        status=status,
        body=truncated_body,
    )


def _decode_query_response(response: httpx.Response) -> tuple[dict[str, Any], list[str]]:
    try:
        payload = response.json()
    except ValueError:
        payload = None

    if not response.is_success:
        if isinstance(payload, dict) and payload.get("status") == "error":
            unwrap_envelope(payload, response.status_code)
        status = _status_line(response)
        truncated_body = response.content[:MAX_ERR_MSG_LEN]
        raise ProtocolError(
            f"server returned HTTP status {status} and body "
            f"{truncated_body.decode('utf-8', errors='replace')!r} "
            f"(truncated to {MAX_ERR_MSG_LEN} bytes)",
            status_code=response.status_code,
            status=status,
            body=truncated_body,
        )

    if payload is None:
        status = _status_line(response)
        raise ProtocolError(
            "failed to decode query response as JSON",
            status_code=response.status_code,
            status=status,
            body=response.content[:MAX_ERR_MSG_LEN],
        )

    return unwrap_envelope(payload, response.status_code)


async def _read_truncated(response: httpx.Response, limit: int) -> bytes:
    """Read at most ``limit`` bytes from a streamed response body."""
    buf = bytearray()
    async for chunk in response.aiter_bytes():
        buf += chunk
        if len(buf) >= limit:
            break
    return bytes(buf[:limit])


def _status_line(response: httpx.Response) -> str:
    return f"{response.status_code} {response.reason_phrase}".rstrip()


def _format_time(t: datetime) -> str:
    return str(t.timestamp())


def _format_duration(d: timedelta) -> str:
    return str(d.total_seconds())
