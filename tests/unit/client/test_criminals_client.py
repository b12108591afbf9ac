"""Unit tests for the criminal record accessors."""

from __future__ import annotations

import httpx
import pytest

from policedash.client.criminals import (
    get_criminal,
    get_criminals,
    get_districts_by_state,
    get_unique_crime_types,
    get_unique_states,
    update_criminal,
)
from policedash.client.errors import ClientValidationError, HttpStatusError, UnknownError
from policedash.client.uploads import UploadFile

RECORDS = [
    {"person_id": "P1", "name": "Asha", "state": "Kerala", "district": "Kochi", "crime_type": "Theft"},
    {"person_id": "P2", "name": "Ravi", "state": "Kerala", "district": "Thrissur", "crime_type": "Fraud"},
    {"person_id": "P3", "name": "Meena", "state": "Goa", "district": "Panaji", "crime_type": "Theft"},
    {"person_id": "P4", "name": "Unknown", "state": None, "district": None},
]


@pytest.mark.parametrize(("limit", "offset"), [(0, 0), (1001, 0), (10, -1)])
def test_paging_bounds_rejected_without_request(unreachable, limit, offset):
    with pytest.raises(ClientValidationError):
        get_criminals(unreachable, limit=limit, offset=offset)


def test_minimum_page_accepted(make_client):
    seen = {}

    def handler(request: httpx.Request) -> httpx.Response:
        seen.update(request.url.params)
        return httpx.Response(200, json={"success": True, "data": RECORDS[:1], "count": 1})

    records = get_criminals(make_client(handler), limit=1, offset=0)

    assert [record.person_id for record in records] == ["P1"]
    assert seen == {"limit": "1", "offset": "0"}


def test_filters_trimmed_and_blank_filters_omitted(make_client):
    seen = {}

    def handler(request: httpx.Request) -> httpx.Response:
        seen.update(request.url.params)
        return httpx.Response(200, json=[])

    get_criminals(make_client(handler), search="  Asha ", state="   ", crime_type="Theft", gender=None)

    assert seen["search"] == "Asha"
    assert seen["crime_type"] == "Theft"
    assert "state" not in seen
    assert "gender" not in seen


def test_get_criminal_requires_id(unreachable):
    with pytest.raises(ClientValidationError) as excinfo:
        get_criminal(unreachable, "   ")
    assert excinfo.value.message == "personId is required"


def test_get_criminal_unwraps_envelope(make_client):
    def handler(request: httpx.Request) -> httpx.Response:
        assert request.url.path == "/api/v1/criminals/P1"
        return httpx.Response(200, json={"success": True, "data": RECORDS[0]})

    record = get_criminal(make_client(handler), " P1 ")
    assert record.name == "Asha"


def test_malformed_payload_becomes_unknown_error(make_client):
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(200, json={"data": {"unexpected": True}})

    with pytest.raises(UnknownError) as excinfo:
        get_criminal(make_client(handler), "P1")
    assert excinfo.value.message == "Failed to retrieve criminal"
    assert excinfo.value.status_code == 500


def test_status_errors_pass_through_unchanged(make_client):
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(404)

    with pytest.raises(HttpStatusError) as excinfo:
        get_criminal(make_client(handler), "missing")
    assert excinfo.value.message == "Resource not found"


def test_update_criminal_form_semantics(make_client):
    captured = {}

    def handler(request: httpx.Request) -> httpx.Response:
        captured["method"] = request.method
        captured["body"] = request.read()
        return httpx.Response(200, json={"data": {**RECORDS[0], "name": "Asha K", "district": ""}})

    updated = update_criminal(make_client(handler), "P1", name="Asha K", district="", state=None)

    body = captured["body"]
    assert captured["method"] == "PUT"
    assert b"name=Asha+K" in body
    assert b"district=" in body
    assert b"state=" not in body
    assert updated.name == "Asha K"


def test_update_criminal_with_image_is_multipart(make_client):
    captured = {}

    def handler(request: httpx.Request) -> httpx.Response:
        captured["content_type"] = request.headers["content-type"]
        captured["body"] = request.read()
        return httpx.Response(200, json=RECORDS[0])

    image = UploadFile(filename="face.png", content=b"\x89PNG", content_type="image/png")
    update_criminal(make_client(handler), "P1", crime_type="Fraud", image=image)

    assert captured["content_type"].startswith("multipart/form-data")
    assert b'filename="face.png"' in captured["body"]


def test_unique_states_and_crime_types(make_client):
    def handler(request: httpx.Request) -> httpx.Response:
        assert request.url.params["limit"] == "1000"
        return httpx.Response(200, json={"data": RECORDS})

    client = make_client(handler)
    assert get_unique_states(client) == ["Goa", "Kerala"]
    assert get_unique_crime_types(client) == ["Fraud", "Theft"]
    assert get_districts_by_state(client, "Kerala") == ["Kochi", "Thrissur"]


def test_districts_for_blank_state_is_empty(unreachable):
    assert get_districts_by_state(unreachable, "") == []
    assert get_districts_by_state(unreachable, None) == []
