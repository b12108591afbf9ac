"""Alert accessors: list, detail and status updates."""

from __future__ import annotations

from typing import Any, Dict, List, Optional

from .criminals import validate_paging
from .errors import ClientValidationError, wrap_errors
from .http import FaceApiClient, unwrap_envelope, unwrap_page
from .models import ALERT_STATUSES, Alert, AlertStatus

ALERTS_PATH = "/api/v1/alerts"


def _status_value(status: AlertStatus | str) -> str:
    return status.value if isinstance(status, AlertStatus) else status


@wrap_errors("Failed to retrieve alerts")
def get_alerts(
    client: FaceApiClient,
    *,
    status: AlertStatus | str | None = None,
    limit: int = 100,
    offset: int = 0,
) -> List[Alert]:
    validate_paging(limit, offset)
    params: Dict[str, Any] = {"limit": limit, "offset": offset}
    if status:
        params["status"] = _status_value(status)
    page = unwrap_page(client.get(ALERTS_PATH, params=params))
    return [Alert.model_validate(item) for item in page.items]


@wrap_errors("Failed to retrieve alert")
def get_alert(client: FaceApiClient, alert_id: str) -> Alert:
    if not alert_id or not alert_id.strip():
        raise ClientValidationError("alertId is required")
    payload = unwrap_envelope(client.get(f"{ALERTS_PATH}/{alert_id.strip()}"))
    return Alert.model_validate(payload)


@wrap_errors("Failed to update alert status")
def update_alert_status(client: FaceApiClient, alert_id: str, status: AlertStatus | str) -> Alert:
    """Set an alert's status. Concurrent operators are not coordinated: last write wins."""

    if not alert_id or not alert_id.strip():
        raise ClientValidationError("alertId is required")
    value: Optional[str] = _status_value(status)
    if value not in ALERT_STATUSES:
        raise ClientValidationError(f"Invalid status. Must be one of: {', '.join(ALERT_STATUSES)}")
    payload = unwrap_envelope(client.put(f"{ALERTS_PATH}/{alert_id.strip()}/status", json={"status": value}))
    return Alert.model_validate(payload)


__all__ = ["get_alert", "get_alerts", "update_alert_status"]
