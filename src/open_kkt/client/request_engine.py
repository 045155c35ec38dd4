"""
Request engine for the Open API

Turns a logical operation (verb, resource, parameters) into a signed HTTP
call, classifies the response status and manages the bearer token.

Per call the engine walks a small state machine:

    INIT -> SIGNED -> SENT -> ACCEPTED | NEEDS_REFRESH | FAILED
    NEEDS_REFRESH -> SIGNED -> SENT -> ACCEPTED | FAILED

At most one refresh-and-retry cycle happens per logical call. The token
request itself never enters NEEDS_REFRESH; its 401/403 answers are final.
"""

import logging
import threading
from dataclasses import asdict, dataclass, field
from enum import Enum
from typing import Any, Dict, Mapping, Optional, Tuple, Union

from open_kkt.cache.file_cache import FileCache
from open_kkt.cache.token_store import TokenStore
from open_kkt.client.http_client import (
    HttpAuditEntry,
    HttpMethod,
    HttpTransport,
    Transport,
    TransportResponse,
)
from open_kkt.config.open_api_config import OpenApiConfig
from open_kkt.crypto.canonical import canonical_bytes, canonical_json
from open_kkt.crypto.nonce import NonceGenerator
from open_kkt.crypto.signer import Signer
from open_kkt.exceptions import (
    AuthError,
    OpenApiError,
    ProtocolError,
    ServerError,
    TransportError,
    ValidationError,
)
from open_kkt.models.requests import RequestParams, TokenParams
from open_kkt.utils.logger import Logger, LogSink


# Logger for this module
logger = logging.getLogger(__name__)
audit_logger = logging.getLogger("open_kkt.audit")

TOKEN_RESOURCE = "Token"

# Statuses whose body is handed back to the caller as-is
ACCEPTED_STATUSES = (200, 400, 422)

_refresh_locks: Dict[Tuple[str, str], threading.Lock] = {}
_refresh_locks_guard = threading.Lock()


def refresh_lock_for(account: str, app_id: str) -> threading.Lock:
    """Process-wide lock serializing token refresh per (account, app_id)"""
    with _refresh_locks_guard:
        return _refresh_locks.setdefault((account, app_id), threading.Lock())


class RequestState(str, Enum):
    """States of a single logical request"""
    INIT = "INIT"
    SIGNED = "SIGNED"
    SENT = "SENT"
    ACCEPTED = "ACCEPTED"
    NEEDS_REFRESH = "NEEDS_REFRESH"
    FAILED = "FAILED"


@dataclass(frozen=True)
class Credentials:
    """Integration identity; immutable for the lifetime of an engine"""
    account: str
    app_id: str
    secret: str = field(repr=False)

    def __post_init__(self) -> None:
        for name in ("account", "app_id", "secret"):
            if not getattr(self, name):
                raise ValidationError(f"{name} is required", field=name)


@dataclass(frozen=True)
class RequestEnvelope:
    """One request as signed and sent; params are ordered by key"""
    verb: HttpMethod
    resource: str
    params: Dict[str, Any]

    def with_token(self, token: str, nonce: Optional[str] = None) -> "RequestEnvelope":
        """Copy with the token (and nonce, when given) substituted"""
        params = dict(self.params)
        if "token" in params:
            params["token"] = token
        if nonce is not None and "nonce" in params:
            params["nonce"] = nonce
        return RequestEnvelope(self.verb, self.resource, params)


@dataclass
class Transition:
    """Outcome of classifying one response"""
    state: RequestState
    body: Optional[Dict[str, Any]] = None
    error: Optional[OpenApiError] = None


class RequestEngine:
    """
    Signs, sends and classifies Open API requests

    Features:
    - Signature header over the canonical parameter encoding
    - Token loaded from the token cache at construction, fetched lazily
    - Single refresh-and-retry on 401/403
    - Refresh serialized per (account, app_id) across threads and engines

    Example:
        >>> engine = RequestEngine(Credentials(
        ...     account="https://check.business.ru/open-api/v1/",
        ...     app_id="42",
        ...     secret="secret",
        ... ))
        >>> engine.request("GET", "StateSystem", {
        ...     "app_id": engine.app_id,
        ...     "nonce": engine.new_nonce(),
        ...     "token": engine.token,
        ... })
    """

    MAX_REFRESHES_PER_CALL = 1

    def __init__(
        self,
        credentials: Credentials,
        transport: Optional[Transport] = None,
        token_store: Optional[TokenStore] = None,
        log: Optional[LogSink] = None,
        timeout: int = 30000,
    ) -> None:
        """
        Create a new request engine

        Args:
            credentials: Account URL, app_id and secret of the integration
            transport: HTTP capability (requests-based transport if omitted)
            token_store: Token cache (file-backed if omitted)
            log: Log sink (SDK Logger if omitted)
            timeout: Timeout in milliseconds for the default transport

        Raises:
            CacheUnavailable: If the cached token cannot be read
        """
        account = credentials.account
        if not account.endswith("/"):
            account = account + "/"
            credentials = Credentials(account, credentials.app_id, credentials.secret)

        self._credentials = credentials
        self._owns_transport = transport is None
        self._transport: Transport = transport or HttpTransport(timeout=timeout)
        self._token_store = token_store or TokenStore(FileCache())
        self._log_sink: LogSink = log or Logger()
        self._signer = Signer(credentials.secret)
        self._nonces = NonceGenerator()
        self._refresh_lock = refresh_lock_for(credentials.account, credentials.app_id)
        self._token: Optional[str] = self._token_store.load(credentials.app_id)

    @classmethod
    def from_config(cls, config: OpenApiConfig) -> "RequestEngine":
        """Build an engine with default collaborators from configuration"""
        transport = HttpTransport(
            timeout=config.timeout,
            enable_audit_log=config.enable_audit_log,
        )
        transport.set_audit_log_callback(_write_audit_entry)
        engine = cls(
            Credentials(config.account, config.app_id, config.secret),
            transport=transport,
            token_store=TokenStore(FileCache(config.cache_path)),
            log=Logger(log_path=config.log_path, level=config.log_level.value),
        )
        engine._owns_transport = True
        return engine

    @property
    def account(self) -> str:
        return self._credentials.account

    @property
    def app_id(self) -> str:
        return self._credentials.app_id

    @property
    def token(self) -> str:
        """Current token, fetched from the Token resource if none is known"""
        current = self._token
        if current is not None:
            return current
        return self.refresh_token(stale_token=None)

    def new_nonce(self) -> str:
        return self._nonces.next()

    def sign(self, params: Mapping[str, Any]) -> str:
        return self._signer.sign(params)

    def request(
        self,
        verb: str,
        resource: str,
        params: Union[RequestParams, Mapping[str, Any], None] = None,
    ) -> Dict[str, Any]:
        """
        Execute a logical request

        Args:
            verb: GET or POST
            resource: Resource path relative to the account URL
            params: Parameters to sign and send

        Returns:
            Decoded response body for 200, 400 and 422 answers

        Raises:
            AuthError: If authorization still fails after a token refresh
            ServerError: On HTTP 500
            ProtocolError: On any other unexpected status or bad body
            TransportError: On network failure
            CacheUnavailable: If the token cache malfunctions during refresh
        """
        envelope = self.build_envelope(verb, resource, params)
        return self._execute(envelope, refreshable=True)

    def build_envelope(
        self,
        verb: str,
        resource: str,
        params: Union[RequestParams, Mapping[str, Any], None] = None,
    ) -> RequestEnvelope:
        """
        Validate and order request parameters

        Raises:
            ValidationError: On an unsupported verb or unencodable params
        """
        try:
            method = HttpMethod(str(verb).upper())
        except ValueError:
            raise ValidationError(f"Unsupported HTTP method: {verb}", field="verb") from None

        if not resource:
            raise ValidationError("Resource path is required", field="resource")

        if isinstance(params, RequestParams):
            params = params.to_params()
        ordered = {key: value for key, value in sorted(dict(params or {}).items())}

        try:
            canonical_json(ordered)
        except (TypeError, ValueError) as e:
            raise ValidationError(f"Parameters cannot be encoded: {e}", field="params") from e

        if method is HttpMethod.GET:
            # Signed map and query string carry the same strings
            ordered = {
                key: _query_value(key, value)
                for key, value in ordered.items()
                if value is not None
            }

        return RequestEnvelope(method, resource.lstrip("/"), ordered)

    def refresh_token(self, stale_token: Optional[str]) -> str:
        """
        Replace the token the caller saw as stale

        Only one refresh per (account, app_id) runs at a time. A caller
        whose stale token was already replaced, in memory or in the token
        cache, adopts the newer token without another Token request.

        Args:
            stale_token: Token rejected by the server (None if none was known)

        Returns:
            The token to use from now on
        """
        with self._refresh_lock:
            current = self._token
            if current is not None and current != stale_token:
                return current

            cached = self._token_store.load(self.app_id)
            if cached is not None and cached != stale_token:
                logger.debug("Adopting token refreshed by another client for app_id %s", self.app_id)
                self._token = cached
                return cached

            token = self._fetch_token()
            self._token = token
            self._token_store.set(self.app_id, token)
            return token

    def reset_token(self) -> None:
        """Forget the current token in memory and in the token cache"""
        with self._refresh_lock:
            self._token = None
            self._token_store.delete(self.app_id)

    def _fetch_token(self) -> str:
        params = TokenParams(app_id=self.app_id, nonce=self.new_nonce())
        envelope = self.build_envelope(HttpMethod.GET.value, TOKEN_RESOURCE, params)
        body = self._execute(envelope, refreshable=False)

        token = body.get("token")
        if not isinstance(token, str) or not token:
            error = AuthError(
                "Token response does not contain a token",
                code="AUTH03",
                details=body,
            )
            self._log("error", str(error), {"resource": TOKEN_RESOURCE, "body": body})
            raise error
        return token

    def _execute(self, envelope: RequestEnvelope, refreshable: bool) -> Dict[str, Any]:
        refreshes = 0
        while True:
            response = self._send(envelope)
            transition = self._classify(envelope, response, refreshable)

            if transition.state is RequestState.ACCEPTED:
                return transition.body or {}

            if transition.state is RequestState.NEEDS_REFRESH:
                if refreshes >= self.MAX_REFRESHES_PER_CALL:
                    raise AuthError(
                        f"Authorization rejected for {envelope.resource} after token refresh",
                        code="AUTH02",
                        status_code=response.status_code,
                    )
                token = self.refresh_token(stale_token=envelope.params.get("token"))
                envelope = envelope.with_token(token, nonce=self.new_nonce())
                refreshes += 1
                logger.debug("%s -> %s", RequestState.NEEDS_REFRESH.value, RequestState.SIGNED.value)
                continue

            raise transition.error

    def _send(self, envelope: RequestEnvelope) -> TransportResponse:
        url = f"{self.account}{envelope.resource}"
        headers = {"sign": self._signer.sign(envelope.params)}
        logger.debug("%s %s %s", RequestState.SIGNED.value, envelope.verb.value, envelope.resource)

        if envelope.verb is HttpMethod.GET:
            body: Any = envelope.params
        else:
            body = canonical_bytes(envelope.params)

        try:
            response = self._transport.send(envelope.verb.value, url, headers, body)
        except TransportError as e:
            self._log("error", f"Transport failure: {e}", {
                "resource": envelope.resource,
                "code": e.code,
            })
            raise

        logger.debug("%s %s -> %s", RequestState.SENT.value, envelope.resource, response.status_code)
        return response

    def _classify(
        self,
        envelope: RequestEnvelope,
        response: TransportResponse,
        refreshable: bool,
    ) -> Transition:
        status = response.status_code
        context: Dict[str, Any] = {
            "resource": envelope.resource,
            "status": status,
            "app_id": self.app_id,
        }

        if status in ACCEPTED_STATUSES:
            try:
                return Transition(RequestState.ACCEPTED, body=response.decode())
            except ProtocolError as e:
                self._log("error", str(e), {**context, "body": e.body})
                return Transition(RequestState.FAILED, error=e)

        if status in (401, 403) and not refreshable:
            error = AuthError(
                f"Token request rejected with status {status}",
                status_code=status,
                details={"body": response.text()[:500]},
            )
            self._log("error", str(error), context)
            return Transition(RequestState.FAILED, error=error)

        if status == 401:
            self._log("info", "Token expired", context)
            return Transition(RequestState.NEEDS_REFRESH)

        if status == 403:
            self._log("debug", "Access forbidden", context)
            return Transition(RequestState.NEEDS_REFRESH)

        body = _safe_body(response)
        if status == 500:
            self._log("critical", "Open API server error", {**context, "body": body})
            return Transition(
                RequestState.FAILED,
                error=ServerError(f"Server error on {envelope.resource}", body=body),
            )

        self._log("error", f"Unexpected response status {status}", {**context, "body": body})
        return Transition(RequestState.FAILED, error=ProtocolError(status, body))

    def _log(self, level: str, message: str, context: Dict[str, Any]) -> None:
        try:
            self._log_sink.write(level, message, context)
        except Exception:
            logger.debug("Log sink failed to write %s record", level, exc_info=True)

    def close(self) -> None:
        """Close the transport if this engine created it"""
        if self._owns_transport and hasattr(self._transport, "close"):
            self._transport.close()

    def __enter__(self) -> "RequestEngine":
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> None:
        self.close()


def _query_value(key: str, value: Any) -> str:
    """Render a GET parameter the way it appears in the query string"""
    if isinstance(value, (Mapping, list, tuple)):
        raise ValidationError(f"GET parameter '{key}' must be a scalar value", field=key)
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, float):
        return repr(value)
    return str(value)


def _safe_body(response: TransportResponse) -> Any:
    try:
        return response.decode()
    except ProtocolError:
        return response.text()[:500]


def _write_audit_entry(entry: HttpAuditEntry) -> None:
    audit_logger.debug("HTTP audit %s", entry.request_id, extra={"context": asdict(entry)})
