"""
HTTP Transport Unit Tests
"""

import json

import pytest
import requests
import responses

from open_kkt.client import HttpTransport, TransportResponse
from open_kkt.crypto import canonical_bytes
from open_kkt.exceptions import ProtocolError, TransportError


BASE = "https://kkt.example.com/open-api/v1/"


@pytest.fixture
def transport():
    with HttpTransport(timeout=5000) as t:
        yield t


class TestHttpTransport:
    """Tests for HttpTransport.send"""

    @responses.activate
    def test_get_sends_query_parameters(self, transport: HttpTransport):
        responses.add(responses.GET, BASE + "StateSystem", json={"ok": True}, status=200)

        result = transport.send(
            "GET", BASE + "StateSystem", {"sign": "abc"}, {"app_id": "42", "nonce": "nonce_1"}
        )

        assert result.status_code == 200
        assert result.decode() == {"ok": True}
        request = responses.calls[0].request
        assert "app_id=42" in request.url
        assert "nonce=nonce_1" in request.url
        assert request.headers["sign"] == "abc"
        assert request.headers["X-Request-ID"].startswith("kkt-")

    @responses.activate
    def test_post_sends_body_bytes_unchanged(self, transport: HttpTransport):
        responses.add(responses.POST, BASE + "Command", json={"command_id": "1"}, status=200)
        body = canonical_bytes({"command": {"author": "Иванова"}, "type": "openShift"})

        transport.send("POST", BASE + "Command", {"sign": "abc"}, body)

        request = responses.calls[0].request
        assert request.body == body
        assert request.headers["Content-Type"] == "application/json"

    @responses.activate
    @pytest.mark.parametrize("status", [401, 403, 422, 500, 503])
    def test_error_statuses_are_not_raised(self, transport: HttpTransport, status: int):
        """Should report any HTTP status; classification is the engine's job"""
        responses.add(responses.GET, BASE + "StateSystem", json={"error": "x"}, status=status)

        result = transport.send("GET", BASE + "StateSystem", {}, {})

        assert result.status_code == status
        assert result.decode() == {"error": "x"}

    @responses.activate
    def test_timeout_maps_to_transport_error(self, transport: HttpTransport):
        responses.add(
            responses.GET, BASE + "StateSystem", body=requests.exceptions.ReadTimeout("slow")
        )

        with pytest.raises(TransportError) as exc_info:
            transport.send("GET", BASE + "StateSystem", {}, {})

        assert exc_info.value.code == "NET01"
        assert isinstance(exc_info.value.__cause__, requests.exceptions.Timeout)

    @responses.activate
    def test_connection_error_maps_to_transport_error(self, transport: HttpTransport):
        responses.add(
            responses.GET,
            BASE + "StateSystem",
            body=requests.exceptions.ConnectionError("refused"),
        )

        with pytest.raises(TransportError) as exc_info:
            transport.send("GET", BASE + "StateSystem", {}, {})

        assert exc_info.value.code == "NET02"

    @responses.activate
    def test_audit_entries_are_redacted(self):
        responses.add(responses.GET, BASE + "Token", json={"token": "issued"}, status=200)
        entries = []
        transport = HttpTransport(enable_audit_log=True)
        transport.set_audit_log_callback(entries.append)

        transport.send("GET", BASE + "Token", {"sign": "abc"}, {"app_id": "42", "token": "t"})

        assert len(entries) == 1
        entry = entries[0]
        assert entry.success is True
        assert entry.headers["sign"] == "[REDACTED]"
        assert entry.body["token"] == "[REDACTED]"
        assert entry.body["app_id"] == "42"
        assert entry.response == {"statusCode": 200, "body": {"token": "[REDACTED]"}}

    @responses.activate
    def test_audit_disabled_by_default(self, transport: HttpTransport):
        responses.add(responses.GET, BASE + "Token", json={}, status=200)
        entries = []
        transport.set_audit_log_callback(entries.append)

        transport.send("GET", BASE + "Token", {}, {})

        assert entries == []

    def test_unsupported_method(self, transport: HttpTransport):
        with pytest.raises(ValueError):
            transport.send("DELETE", BASE + "Command", {}, None)


class TestTransportResponse:
    """Tests for response decoding"""

    def test_decode_object(self):
        body = json.dumps({"ключ": "значение"}, ensure_ascii=False).encode("utf-8")
        assert TransportResponse(200, body).decode() == {"ключ": "значение"}

    def test_decode_empty(self):
        assert TransportResponse(200, b"").decode() == {}

    def test_decode_invalid_json(self):
        with pytest.raises(ProtocolError) as exc_info:
            TransportResponse(502, b"<html>Bad gateway</html>").decode()
        assert exc_info.value.status_code == 502

    def test_decode_non_object(self):
        with pytest.raises(ProtocolError):
            TransportResponse(200, b"[1, 2]").decode()
