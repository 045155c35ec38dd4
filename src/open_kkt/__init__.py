"""
Open API cash register SDK for Python

Main entry point for the SDK
"""

from open_kkt.client import OpenClient
from open_kkt.exceptions import (
    OpenApiError,
    OpenApiErrorCategory,
    TransportError,
    AuthError,
    ServerError,
    ProtocolError,
    CacheUnavailable,
    CacheMiss,
    ValidationError,
    ConfigError,
)

# Request engine and transport
from open_kkt.client import (
    Credentials,
    RequestEngine,
    RequestEnvelope,
    RequestState,
    HttpTransport,
    HttpMethod,
    HttpAuditEntry,
    Transport,
    TransportResponse,
)

# Signing
from open_kkt.crypto import Signer, NonceGenerator, canonical_json

# Token cache
from open_kkt.cache import FileCache, MemoryCache, KeyValueStore, TokenStore

# Configuration
from open_kkt.config import (
    OpenApiConfig,
    PartialOpenApiConfig,
    LogLevel,
    ConfigLoader,
    ConfigValidator,
    ENV_VAR_MAPPING,
    ConfigDefaults,
)

# Models
from open_kkt.models import (
    CommandType,
    ShiftCommand,
    CommandFilter,
)

# Logging
from open_kkt.utils import Logger, LogSink

__version__ = "0.1.0"

__all__ = [
    # Client
    "OpenClient",
    # Engine and transport
    "Credentials",
    "RequestEngine",
    "RequestEnvelope",
    "RequestState",
    "HttpTransport",
    "HttpMethod",
    "HttpAuditEntry",
    "Transport",
    "TransportResponse",
    # Exceptions
    "OpenApiError",
    "OpenApiErrorCategory",
    "TransportError",
    "AuthError",
    "ServerError",
    "ProtocolError",
    "CacheUnavailable",
    "CacheMiss",
    "ValidationError",
    "ConfigError",
    # Signing
    "Signer",
    "NonceGenerator",
    "canonical_json",
    # Token cache
    "FileCache",
    "MemoryCache",
    "KeyValueStore",
    "TokenStore",
    # Configuration
    "OpenApiConfig",
    "PartialOpenApiConfig",
    "LogLevel",
    "ConfigLoader",
    "ConfigValidator",
    "ENV_VAR_MAPPING",
    "ConfigDefaults",
    # Models
    "CommandType",
    "ShiftCommand",
    "CommandFilter",
    # Logging
    "Logger",
    "LogSink",
]
