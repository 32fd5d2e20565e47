from __future__ import annotations

import httpx

TENANT_HEADER = "X-Scope-OrgID"


class TenantScopedTransport(httpx.AsyncBaseTransport):
    """Transport decorator that adds the tenant ID header required by Mimir.

    Requests are delegated unmodified otherwise, and the delegate's response
    or exception is returned as-is.
    """

    def __init__(self, tenant_id: str, transport: httpx.AsyncBaseTransport | None = None) -> None:
        self._tenant_id = tenant_id
        self._transport = transport if transport is not None else httpx.AsyncHTTPTransport()

    @property
    def tenant_id(self) -> str:
        return self._tenant_id

    async def handle_async_request(self, request: httpx.Request) -> httpx.Response:
        request.headers[TENANT_HEADER] = self._tenant_id
        return await self._transport.handle_async_request(request)

    async def aclose(self) -> None:
        await self._transport.aclose()
