"""
HTTP transport layer for the Open API
Sends one signed request and reports status code and raw body;
status interpretation and retries belong to the request engine
"""

import json
import time
import uuid
import logging
from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum
from typing import (
    Any,
    Callable,
    Dict,
    Mapping,
    Optional,
    Protocol,
    Union,
    runtime_checkable,
)

import requests
from requests.adapters import HTTPAdapter

from open_kkt.exceptions import ProtocolError, TransportError
from open_kkt.utils.redaction import redact_sensitive_data


# Logger for this module
logger = logging.getLogger(__name__)


class HttpMethod(str, Enum):
    """HTTP method types supported"""
    GET = "GET"
    POST = "POST"


@dataclass
class TransportResponse:
    """Status code and raw body of a completed HTTP exchange"""
    status_code: int
    body: bytes
    headers: Dict[str, str] = field(default_factory=dict)
    duration: int = 0  # milliseconds
    request_id: Optional[str] = None

    def decode(self) -> Dict[str, Any]:
        """
        Decode the JSON body

        Returns:
            Decoded object (empty dict for an empty body)

        Raises:
            ProtocolError: If the body is not a JSON object
        """
        if not self.body or not self.body.strip():
            return {}
        try:
            data = json.loads(self.body.decode("utf-8"))
        except (UnicodeDecodeError, ValueError) as e:
            raise ProtocolError(
                self.status_code,
                self.text()[:500],
                message=f"Response body is not valid JSON: {e}",
            ) from e
        if not isinstance(data, dict):
            raise ProtocolError(
                self.status_code,
                data,
                message="Response body is not a JSON object",
            )
        return data

    def text(self) -> str:
        return self.body.decode("utf-8", errors="replace")


@dataclass
class HttpAuditEntry:
    """Audit log entry for HTTP requests"""
    timestamp: str
    request_id: str
    method: str
    url: str
    headers: Dict[str, str]
    body: Optional[Any] = None
    response: Optional[Dict[str, Any]] = None
    duration: int = 0
    success: bool = False
    error: Optional[str] = None


RequestBody = Union[bytes, Mapping[str, Any], None]


@runtime_checkable
class Transport(Protocol):
    """HTTP send capability consumed by the request engine"""

    def send(
        self,
        method: str,
        url: str,
        headers: Mapping[str, str],
        body: RequestBody = None,
    ) -> TransportResponse:
        ...


class HttpTransport:
    """
    requests-based Transport for the Open API

    Features:
    - Connection keep-alive via session pooling
    - Request ID generation for traceability
    - Redacted audit entries
    - requests exceptions normalized to TransportError

    Example:
        >>> transport = HttpTransport(timeout=30000)
        >>> response = transport.send(
        ...     "GET", "https://check.business.ru/open-api/v1/StateSystem",
        ...     {"sign": "..."}, {"app_id": "42", "nonce": "...", "token": "..."},
        ... )
        >>> response.status_code
        200
    """

    def __init__(
        self,
        timeout: int = 30000,
        enable_audit_log: bool = False,
        session: Optional[requests.Session] = None,
    ) -> None:
        """
        Create a new HTTP transport

        Args:
            timeout: Request timeout in milliseconds
            enable_audit_log: Emit audit entries to the registered callback
            session: Pre-configured session (a pooled one is created if omitted)
        """
        self.timeout = timeout
        self.enable_audit_log = enable_audit_log
        self._audit_log_callback: Optional[Callable[[HttpAuditEntry], None]] = None
        self._session = session or self._create_session()

    def _create_session(self) -> requests.Session:
        """Create requests session with connection pooling"""
        session = requests.Session()

        session.headers.update({
            "Content-Type": "application/json",
            "Accept": "application/json",
        })

        # Retries are decided by the request engine, never here
        adapter = HTTPAdapter(
            pool_connections=10,
            pool_maxsize=10,
            max_retries=0,
        )

        session.mount("http://", adapter)
        session.mount("https://", adapter)

        return session

    def _generate_request_id(self) -> str:
        """Generate unique request ID for traceability"""
        timestamp = hex(int(time.time() * 1000))[2:]
        unique_id = uuid.uuid4().hex[:8]
        return f"kkt-{timestamp}-{unique_id}"

    def send(
        self,
        method: str,
        url: str,
        headers: Mapping[str, str],
        body: RequestBody = None,
    ) -> TransportResponse:
        """
        Perform a single HTTP exchange

        Args:
            method: GET or POST
            url: Absolute request URL
            headers: Extra request headers (the ``sign`` header among them)
            body: Query mapping for GET, encoded bytes for POST

        Returns:
            TransportResponse for any HTTP status

        Raises:
            TransportError: On timeout, connection or other transport failure
        """
        verb = HttpMethod(method.upper())
        request_id = self._generate_request_id()
        request_headers = dict(headers)
        request_headers["X-Request-ID"] = request_id

        params = None
        data = None
        if verb is HttpMethod.GET:
            params = dict(body) if body else None
        elif isinstance(body, Mapping):
            data = json.dumps(dict(body), ensure_ascii=False).encode("utf-8")
        else:
            data = body

        start_time = time.time()
        try:
            response = self._session.request(
                verb.value,
                url,
                headers=request_headers,
                params=params,
                data=data,
                timeout=self.timeout / 1000.0,
            )
        except requests.exceptions.RequestException as e:
            error = self._normalize_error(e, url)
            self._log_audit(self._create_audit_entry(
                verb.value, url, request_headers, params or data, request_id, start_time, error=error
            ))
            raise error from e

        duration = int((time.time() - start_time) * 1000)
        result = TransportResponse(
            status_code=response.status_code,
            body=response.content,
            headers=dict(response.headers),
            duration=duration,
            request_id=request_id,
        )
        self._log_audit(self._create_audit_entry(
            verb.value, url, request_headers, params or data, request_id, start_time, response=result
        ))
        logger.debug(
            "%s %s -> %s in %sms [%s]",
            verb.value, url, result.status_code, duration, request_id,
        )
        return result

    def _normalize_error(
        self, error: requests.exceptions.RequestException, url: str
    ) -> TransportError:
        """Normalize a requests exception into TransportError"""
        if isinstance(error, requests.exceptions.Timeout):
            return TransportError.timeout(f"Request to {url} timed out", cause=error)

        if isinstance(error, requests.exceptions.ConnectionError):
            return TransportError.connection_failed(
                f"Connection error: {error}", cause=error
            )

        return TransportError(f"Request error: {error}", cause=error)

    def _create_audit_entry(
        self,
        method: str,
        url: str,
        headers: Dict[str, str],
        body: Optional[Any],
        request_id: str,
        start_time: float,
        response: Optional[TransportResponse] = None,
        error: Optional[Exception] = None,
    ) -> HttpAuditEntry:
        """Create audit log entry"""
        duration = int((time.time() - start_time) * 1000)

        if isinstance(body, bytes):
            try:
                body = json.loads(body.decode("utf-8"))
            except ValueError:
                body = body.decode("utf-8", errors="replace")[:500]

        response_data = None
        if response is not None:
            try:
                response_body: Any = response.decode()
            except ProtocolError:
                response_body = response.text()[:500] or None

            response_data = {
                "statusCode": response.status_code,
                "body": redact_sensitive_data(response_body),
            }

        return HttpAuditEntry(
            timestamp=datetime.now(timezone.utc).isoformat(),
            request_id=request_id,
            method=method,
            url=url,
            headers=redact_sensitive_data(dict(headers)),
            body=redact_sensitive_data(body),
            response=response_data,
            duration=duration,
            success=error is None,
            error=str(error) if error else None,
        )

    def _log_audit(self, entry: HttpAuditEntry) -> None:
        """Log audit entry"""
        if self.enable_audit_log and self._audit_log_callback:
            self._audit_log_callback(entry)

    def set_audit_log_callback(
        self, callback: Callable[[HttpAuditEntry], None]
    ) -> None:
        """Set audit log callback"""
        self._audit_log_callback = callback

    def close(self) -> None:
        """Close the HTTP session"""
        self._session.close()

    def __enter__(self) -> "HttpTransport":
        """Context manager entry"""
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> None:
        """Context manager exit"""
        self.close()
