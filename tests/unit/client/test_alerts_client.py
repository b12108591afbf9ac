"""Unit tests for the alert accessors."""

from __future__ import annotations

import json

import httpx
import pytest

from policedash.client.alerts import get_alert, get_alerts, update_alert_status
from policedash.client.errors import ClientValidationError
from policedash.client.models import AlertStatus

ALERT = {
    "alert_id": "A1",
    "query_image_url": "https://bucket/q.jpg",
    "matches": [{"person_id": "P1", "name": "Asha", "confidence": 88.0}],
    "status": "Pending",
}


def test_get_alerts_passes_status_filter(make_client):
    seen = {}

    def handler(request: httpx.Request) -> httpx.Response:
        seen.update(request.url.params)
        return httpx.Response(200, json={"success": True, "data": [ALERT], "count": 1})

    alerts = get_alerts(make_client(handler), status=AlertStatus.PENDING, limit=100, offset=0)

    assert seen == {"status": "Pending", "limit": "100", "offset": "0"}
    assert alerts[0].is_pending


def test_get_alerts_without_filter(make_client):
    seen = {}

    def handler(request: httpx.Request) -> httpx.Response:
        seen.update(request.url.params)
        return httpx.Response(200, json=[])

    assert get_alerts(make_client(handler)) == []
    assert "status" not in seen


def test_get_alert_requires_id(unreachable):
    with pytest.raises(ClientValidationError) as excinfo:
        get_alert(unreachable, "")
    assert excinfo.value.message == "alertId is required"


def test_update_alert_status_puts_status(make_client):
    captured = {}

    def handler(request: httpx.Request) -> httpx.Response:
        captured["method"] = request.method
        captured["path"] = request.url.path
        captured["body"] = json.loads(request.read())
        return httpx.Response(200, json={"data": {**ALERT, "status": "Verified"}})

    updated = update_alert_status(make_client(handler), "A1", "Verified")

    assert captured == {"method": "PUT", "path": "/api/v1/alerts/A1/status", "body": {"status": "Verified"}}
    assert updated.status == "Verified"


def test_update_alert_status_rejects_unknown_status(unreachable):
    with pytest.raises(ClientValidationError) as excinfo:
        update_alert_status(unreachable, "A1", "Closed")
    assert excinfo.value.message == "Invalid status. Must be one of: Pending, Verified, Rejected"
