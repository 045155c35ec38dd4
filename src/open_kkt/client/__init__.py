"""
HTTP Client module for the Open API SDK
"""

from open_kkt.client.open_client import OpenClient
from open_kkt.client.request_engine import (
    Credentials,
    RequestEngine,
    RequestEnvelope,
    RequestState,
    TOKEN_RESOURCE,
)
from open_kkt.client.http_client import (
    HttpTransport,
    HttpMethod,
    HttpAuditEntry,
    Transport,
    TransportResponse,
)

__all__ = [
    "OpenClient",
    "Credentials",
    "RequestEngine",
    "RequestEnvelope",
    "RequestState",
    "TOKEN_RESOURCE",
    "HttpTransport",
    "HttpMethod",
    "HttpAuditEntry",
    "Transport",
    "TransportResponse",
]
