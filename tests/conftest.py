"""
Shared test doubles for the request engine and client tests
"""

import json
import threading
from dataclasses import dataclass
from typing import Any, Callable, Dict, List, Optional

import pytest

from open_kkt.cache import MemoryCache, TokenStore
from open_kkt.client import Credentials, TransportResponse


ACCOUNT = "https://kkt.example.com/open-api/v1/"
APP_ID = "42"
SECRET = "test-secret"


def reply(status: int, body: Optional[Any] = None) -> TransportResponse:
    """Build a transport response with a JSON body"""
    raw = b"" if body is None else json.dumps(body, ensure_ascii=False).encode("utf-8")
    return TransportResponse(status_code=status, body=raw)


@dataclass
class SentRequest:
    method: str
    url: str
    headers: Dict[str, str]
    body: Any

    @property
    def resource(self) -> str:
        return self.url[len(ACCOUNT):]

    @property
    def params(self) -> Dict[str, Any]:
        if isinstance(self.body, bytes):
            return json.loads(self.body.decode("utf-8"))
        return dict(self.body or {})


class FakeTransport:
    """
    Transport double answering from per-resource queues

    Each resource maps to a list of responses consumed in order; a handler
    callable may be given instead for dynamic answers.
    """

    def __init__(
        self,
        script: Optional[Dict[str, List[TransportResponse]]] = None,
        handler: Optional[Callable[[SentRequest], TransportResponse]] = None,
    ) -> None:
        self.script = {key: list(value) for key, value in (script or {}).items()}
        self.handler = handler
        self.calls: List[SentRequest] = []
        self._lock = threading.Lock()

    def send(self, method, url, headers, body=None) -> TransportResponse:
        sent = SentRequest(method, url, dict(headers), body)
        with self._lock:
            self.calls.append(sent)
        if self.handler is not None:
            return self.handler(sent)
        queue = self.script.get(sent.resource)
        if not queue:
            raise AssertionError(f"Unexpected request to {sent.resource}")
        return queue.pop(0)

    @property
    def resources(self) -> List[str]:
        return [call.resource for call in self.calls]


class RecordingLog:
    """LogSink double keeping every record"""

    def __init__(self) -> None:
        self.records: List[tuple] = []

    def write(self, level, message, context=None) -> None:
        self.records.append((level, message, dict(context or {})))

    @property
    def levels(self) -> List[str]:
        return [record[0] for record in self.records]


@pytest.fixture
def credentials() -> Credentials:
    return Credentials(account=ACCOUNT, app_id=APP_ID, secret=SECRET)


@pytest.fixture
def memory_cache() -> MemoryCache:
    return MemoryCache()


@pytest.fixture
def token_store(memory_cache: MemoryCache) -> TokenStore:
    return TokenStore(memory_cache)


@pytest.fixture
def log() -> RecordingLog:
    return RecordingLog()
