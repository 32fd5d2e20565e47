from continuoustest.clients.base import MimirClient
from continuoustest.clients.mimir import HTTPMimirClient
from continuoustest.clients.recording import QueryRangeCall, RecordingMimirClient
from continuoustest.clients.transport import TENANT_HEADER, TenantScopedTransport

__all__ = [
    "MimirClient",
    "HTTPMimirClient",
    "RecordingMimirClient",
    "QueryRangeCall",
    "TenantScopedTransport",
    "TENANT_HEADER",
]
