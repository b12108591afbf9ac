"""Review queue for face-match alerts raised by the backend."""

from __future__ import annotations

import logging
from typing import Callable, List, Optional, Tuple

from policedash.client.alerts import get_alert, get_alerts, update_alert_status
from policedash.client.errors import ApiError, NetworkError
from policedash.client.http import FaceApiClient
from policedash.client.models import ALERT_STATUSES, Alert, AlertStatus
from policedash.observability import Observability, get_observability
from policedash.settings import Settings, get_settings
from policedash.store.changes import ChangeEvent, Subscription

from .notifications import Notifier

LOGGER = logging.getLogger(__name__)

ALL_FILTER = "All"
STATUS_FILTERS: Tuple[str, ...] = (ALL_FILTER, *ALERT_STATUSES)
TERMINAL_STATUSES: Tuple[str, ...] = (AlertStatus.VERIFIED.value, AlertStatus.REJECTED.value)


class InvalidTransition(ValueError):
    """Raised when an alert is moved along an edge the lifecycle does not allow."""


def available_actions(alert: Alert) -> Tuple[str, ...]:
    """Verify/Reject are offered only while an alert is exactly ``Pending``."""

    return TERMINAL_STATUSES if alert.status == AlertStatus.PENDING.value else ()


def alert_source(alert: Alert) -> str:
    return "bot" if alert.sender_id else "api"


class AlertTriage:
    """Alert list with a status filter and the Pending -> Verified|Rejected transitions."""

    def __init__(
        self,
        client: FaceApiClient,
        *,
        notifier: Notifier | None = None,
        settings: Settings | None = None,
        list_fn: Callable[..., List[Alert]] = get_alerts,
        detail_fn: Callable[[FaceApiClient, str], Alert] = get_alert,
        update_fn: Callable[[FaceApiClient, str, str], Alert] = update_alert_status,
        observability: Observability | None = None,
    ) -> None:
        self.client = client
        self.settings = settings or get_settings()
        self.notifier = notifier or Notifier()
        self._list = list_fn
        self._detail = detail_fn
        self._update = update_fn
        self._obs = observability or get_observability(component="alert_triage", settings=self.settings)
        self.status_filter = ALL_FILTER
        self.alerts: List[Alert] = []
        self.connection_error: Optional[str] = None
        self._subscription: Optional[Subscription] = None

    # ------------------------------------------------------------------
    # Listing
    # ------------------------------------------------------------------
    def set_filter(self, status: str) -> List[Alert]:
        if status not in STATUS_FILTERS:
            raise ValueError(f"Unknown alert filter '{status}'")
        self.status_filter = status
        return self.refresh()

    def refresh(self) -> List[Alert]:
        status = None if self.status_filter == ALL_FILTER else self.status_filter
        try:
            self.alerts = self._list(self.client, status=status, limit=100, offset=0)
            self.connection_error = None
        except NetworkError as exc:
            LOGGER.warning("Alert refresh failed: %s", exc.message)
            self.connection_error = exc.message
        except ApiError as exc:
            LOGGER.error("Failed to load alerts: %s", exc.message)
            self.notifier.error(exc.message or "Failed to load alerts")
        return self.alerts

    def counts(self) -> dict[str, int]:
        totals = {status: 0 for status in ALERT_STATUSES}
        for alert in self.alerts:
            if alert.status in totals:
                totals[alert.status] += 1
        return totals

    def view(self, alert: Alert) -> Alert:
        """Full detail for ``alert``; the listed copy is used if the fetch fails."""

        try:
            return self._detail(self.client, alert.alert_id)
        except ApiError as exc:
            LOGGER.warning("Failed to load alert %s: %s", alert.alert_id, exc.message)
            return alert

    # ------------------------------------------------------------------
    # Transitions
    # ------------------------------------------------------------------
    def _find(self, alert_id: str) -> Optional[Alert]:
        return next((alert for alert in self.alerts if alert.alert_id == alert_id), None)

    def transition(self, alert_id: str, target: AlertStatus | str) -> Optional[Alert]:
        """Move a pending alert to Verified or Rejected.

        Concurrent reviewers are not coordinated; the last write wins.
        """

        value = target.value if isinstance(target, AlertStatus) else target
        current = self._find(alert_id)
        if value not in TERMINAL_STATUSES:
            raise InvalidTransition(f"Cannot move an alert to '{value}'")
        if current is not None and current.status != AlertStatus.PENDING.value:
            raise InvalidTransition(f"Alert {alert_id} is already {current.status}")

        try:
            updated = self._update(self.client, alert_id, value)
        except ApiError as exc:
            LOGGER.error("Failed to update alert %s: %s", alert_id, exc.message)
            self.notifier.error(exc.message or "Failed to update alert status")
            return None

        self.alerts = [updated if alert.alert_id == alert_id else alert for alert in self.alerts]
        self.notifier.success(f"Alert marked as {value}")
        self._obs.emit_event("alert_transition", alert_id=alert_id, status=value)
        self._obs.increment("alerts.transition", tags={"status": value.lower()})
        self.refresh()
        return updated

    def verify(self, alert_id: str) -> Optional[Alert]:
        return self.transition(alert_id, AlertStatus.VERIFIED)

    def reject(self, alert_id: str) -> Optional[Alert]:
        return self.transition(alert_id, AlertStatus.REJECTED)

    # ------------------------------------------------------------------
    # Real-time
    # ------------------------------------------------------------------
    def subscribe(self, store) -> Optional[Subscription]:
        """Refresh whenever an ``alerts`` change is published; failures are only logged."""

        try:
            self._subscription = store.subscribe("alerts", self._on_change)
        except Exception:
            LOGGER.warning("Alert subscription unavailable", exc_info=True)
            self._subscription = None
        return self._subscription

    def unsubscribe(self) -> None:
        if self._subscription is not None:
            self._subscription.unsubscribe()
            self._subscription = None

    def _on_change(self, event: ChangeEvent) -> None:
        LOGGER.debug("Alert change received: %s", event.event_type)
        self.refresh()


__all__ = [
    "ALL_FILTER",
    "AlertTriage",
    "InvalidTransition",
    "STATUS_FILTERS",
    "alert_source",
    "available_actions",
]
