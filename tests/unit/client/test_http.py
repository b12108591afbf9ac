"""Unit tests for the HTTP client: auth header, error mapping and envelopes."""

from __future__ import annotations

import httpx
import pytest

from policedash.client.errors import HttpStatusError, NetworkError
from policedash.client.http import extract_server_message, unwrap_envelope, unwrap_page


def _status(code: int, body=None):
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(code, json=body)

    return handler


def test_bearer_token_sent_when_present(make_client):
    seen = {}

    def handler(request: httpx.Request) -> httpx.Response:
        seen["auth"] = request.headers.get("Authorization")
        return httpx.Response(200, json={"ok": True})

    client = make_client(handler, token="secret-token")
    assert client.get("/health") == {"ok": True}
    assert seen["auth"] == "Bearer secret-token"


def test_no_auth_header_without_token(make_client):
    seen = {}

    def handler(request: httpx.Request) -> httpx.Response:
        seen["auth"] = request.headers.get("Authorization")
        return httpx.Response(200, json=[])

    make_client(handler).get("/api/v1/alerts")
    assert seen["auth"] is None


def test_unauthorized_clears_token(make_client):
    client = make_client(_status(401, {"detail": "expired"}), token="stale")

    with pytest.raises(HttpStatusError) as excinfo:
        client.get("/api/v1/alerts")

    assert excinfo.value.message == "Unauthorized access"
    assert excinfo.value.status_code == 401
    assert client.token_store.get() is None


def test_not_found_message(make_client):
    with pytest.raises(HttpStatusError) as excinfo:
        make_client(_status(404, {"detail": "nope"})).get("/api/v1/criminals/x")
    assert excinfo.value.message == "Resource not found"
    assert excinfo.value.status_code == 404


@pytest.mark.parametrize(
    ("code", "body", "expected"),
    [
        (500, {"detail": "index offline"}, "index offline"),
        (400, {"error": "bad form"}, "bad form"),
        (422, {"message": "unprocessable"}, "unprocessable"),
        (503, None, "Service temporarily unavailable"),
        (403, {}, "Access forbidden"),
        (418, None, "An error occurred"),
    ],
)
def test_status_error_messages(make_client, code, body, expected):
    with pytest.raises(HttpStatusError) as excinfo:
        make_client(_status(code, body)).get("/anything")
    assert excinfo.value.message == expected
    assert excinfo.value.status_code == code


def test_connection_failure_is_network_error(make_client):
    def handler(request: httpx.Request) -> httpx.Response:
        raise httpx.ConnectError("connection refused", request=request)

    client = make_client(handler)
    with pytest.raises(NetworkError) as excinfo:
        client.get("/health")

    assert excinfo.value.status_code == 0
    assert client.base_url in excinfo.value.message


def test_timeout_is_network_error(make_client):
    def handler(request: httpx.Request) -> httpx.Response:
        raise httpx.ReadTimeout("timed out", request=request)

    with pytest.raises(NetworkError):
        make_client(handler).get("/health")


def test_non_json_body_returned_as_text(make_client):
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(200, text="plain")

    assert make_client(handler).get("/health") == "plain"


def test_unwrap_envelope():
    assert unwrap_envelope({"success": True, "data": {"person_id": "P1"}}) == {"person_id": "P1"}
    assert unwrap_envelope({"person_id": "P1"}) == {"person_id": "P1"}
    assert unwrap_envelope([1, 2]) == [1, 2]


def test_unwrap_page_shapes():
    page = unwrap_page({"success": True, "data": [{"a": 1}], "count": 7, "limit": 1, "offset": 3})
    assert page.items == [{"a": 1}]
    assert (page.count, page.limit, page.offset) == (7, 1, 3)

    bare = unwrap_page([{"a": 1}, {"a": 2}])
    assert bare.count == 2

    assert unwrap_page(None).items == []
    assert unwrap_page({"data": None}).items == []

    with pytest.raises(HttpStatusError):
        unwrap_page({"unexpected": True})


def test_extract_server_message_prefers_error_then_detail():
    assert extract_server_message({"error": "e", "detail": "d", "message": "m"}) == "e"
    assert extract_server_message({"detail": "d", "message": "m"}) == "d"
    assert extract_server_message({"message": "m"}) == "m"
    assert extract_server_message("oops") is None
