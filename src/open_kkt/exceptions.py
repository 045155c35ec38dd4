"""Exception classes for the Open API cash register SDK"""

from datetime import datetime, timezone
from enum import Enum
from typing import Any, Dict, Optional


class OpenApiErrorCategory(str, Enum):
    """Open API error category codes"""
    AUTH = "AUTH"
    NETWORK = "NET"
    SERVER = "SRV"
    PROTOCOL = "PROTO"
    CACHE = "CACHE"
    VALIDATION = "VAL"
    CONFIG = "CONFIG"
    UNKNOWN = "UNKNOWN"


class OpenApiError(Exception):
    """
    Base exception for Open API errors

    All errors in the SDK extend from this class.
    Provides consistent error handling and categorization.
    """

    def __init__(
        self,
        message: str,
        code: Optional[str] = None,
        status_code: Optional[int] = None,
        cause: Optional[Exception] = None,
        details: Optional[Dict[str, Any]] = None,
    ) -> None:
        super().__init__(message)
        self.code = code
        self.status_code = status_code
        self.cause = cause
        self.details = details
        self.timestamp = datetime.now(timezone.utc)
        self.category = self._determine_category(code)

    def _determine_category(self, code: Optional[str]) -> OpenApiErrorCategory:
        """Determine error category from code"""
        if not code:
            return OpenApiErrorCategory.UNKNOWN

        for category in OpenApiErrorCategory:
            if category is not OpenApiErrorCategory.UNKNOWN and code.startswith(category.value):
                return category

        return OpenApiErrorCategory.UNKNOWN

    def to_dict(self) -> Dict[str, Any]:
        """Convert error to dictionary"""
        return {
            "name": self.__class__.__name__,
            "message": str(self),
            "code": self.code,
            "status_code": self.status_code,
            "category": self.category.value,
            "timestamp": self.timestamp.isoformat(),
            "details": self.details,
        }

    def has_code(self, code: str) -> bool:
        """Check if error has a specific code"""
        return self.code == code

    def is_category(self, category: OpenApiErrorCategory) -> bool:
        """Check if error belongs to a category"""
        return self.category == category

    def get_description(self) -> str:
        """Get human-readable error description"""
        parts = [str(self)]

        if self.code:
            parts.insert(0, f"[{self.code}]")

        if self.status_code:
            parts.append(f"(HTTP {self.status_code})")

        return " ".join(parts)


class TransportError(OpenApiError):
    """
    Network/connection failure below the HTTP status level

    Fatal to the current call; the request engine never retries it.
    """

    def __init__(
        self,
        message: str,
        network_code: str = "NET10",
        cause: Optional[Exception] = None,
    ) -> None:
        super().__init__(message, code=network_code, cause=cause)
        self.network_code = network_code

    @classmethod
    def timeout(
        cls, message: str = "Request timed out", cause: Optional[Exception] = None
    ) -> "TransportError":
        """Create a timeout error"""
        return cls(message, network_code="NET01", cause=cause)

    @classmethod
    def connection_failed(
        cls, message: str = "Connection failed", cause: Optional[Exception] = None
    ) -> "TransportError":
        """Create a connection error"""
        return cls(message, network_code="NET02", cause=cause)


class AuthError(OpenApiError):
    """The token endpoint rejected the integration credentials"""

    def __init__(
        self,
        message: str,
        code: str = "AUTH01",
        status_code: Optional[int] = None,
        details: Optional[Dict[str, Any]] = None,
    ) -> None:
        super().__init__(message, code=code, status_code=status_code, details=details)


class ServerError(OpenApiError):
    """Remote service answered with HTTP 500"""

    def __init__(self, message: str, body: Any = None) -> None:
        super().__init__(
            message, code="SRV500", status_code=500, details={"body": body}
        )
        self.body = body


class ProtocolError(OpenApiError):
    """Unexpected HTTP status or undecodable response body"""

    def __init__(self, status_code: int, body: Any, message: Optional[str] = None) -> None:
        super().__init__(
            message or f"Unexpected response status {status_code}",
            code="PROTO01",
            status_code=status_code,
            details={"body": body},
        )
        self.body = body


class CacheUnavailable(OpenApiError):
    """Token cache backing store malfunction"""

    def __init__(
        self,
        message: str,
        code: str = "CACHE01",
        cause: Optional[Exception] = None,
    ) -> None:
        super().__init__(message, code=code, cause=cause)


class CacheMiss(CacheUnavailable):
    """The backing store holds no entry for the requested key"""

    def __init__(self, key: str) -> None:
        super().__init__(f"No cache entry for key '{key}'", code="CACHE02")
        self.key = key


class ValidationError(OpenApiError):
    """Validation error"""

    def __init__(
        self,
        message: str,
        field: Optional[str] = None,
        details: Optional[Dict[str, Any]] = None,
    ) -> None:
        super().__init__(message, code="VALIDATION_ERROR", details=details)
        self.field = field


class ConfigError(OpenApiError):
    """Configuration error"""

    def __init__(
        self,
        message: str,
        code: str = "CONFIG01",
        details: Optional[Dict[str, Any]] = None,
    ) -> None:
        super().__init__(message, code=code, details=details)
