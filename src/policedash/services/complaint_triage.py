"""Citizen complaint triage: status buckets plus accept/reject."""

from __future__ import annotations

import logging
from enum import Enum
from typing import Any, Dict, List, Optional

from policedash.observability import get_observability
from policedash.settings import Settings, get_settings
from policedash.store.changes import ChangeEvent, Subscription
from policedash.store.datastore import DataStore, DataStoreError

from .notifications import Notifier

LOGGER = logging.getLogger(__name__)

TABLE = "complaints"


class ComplaintBucket(str, Enum):
    PENDING = "pending"
    OPEN = "open"
    CLOSED = "closed"
    UNKNOWN = "unknown"


_BUCKETS: Dict[str, ComplaintBucket] = {
    "Pending": ComplaintBucket.PENDING,
    "pending": ComplaintBucket.PENDING,
    "Submitted": ComplaintBucket.PENDING,
    "submitted": ComplaintBucket.PENDING,
    "Open": ComplaintBucket.OPEN,
    "open": ComplaintBucket.OPEN,
    "Closed": ComplaintBucket.CLOSED,
    "closed": ComplaintBucket.CLOSED,
    "Resolved": ComplaintBucket.CLOSED,
    "resolved": ComplaintBucket.CLOSED,
}


def classify_status(raw: Optional[str]) -> ComplaintBucket:
    """Map a stored status string to its bucket; unrecognized values land in UNKNOWN."""

    return _BUCKETS.get(raw or "", ComplaintBucket.UNKNOWN)


class ComplaintTriage:
    def __init__(
        self,
        store: DataStore,
        *,
        notifier: Notifier | None = None,
        settings: Settings | None = None,
    ) -> None:
        self.store = store
        self.settings = settings or get_settings()
        self.notifier = notifier or Notifier()
        self._obs = get_observability(component="complaint_triage", settings=self.settings)
        self.complaints: List[Dict[str, Any]] = []
        self.active_tab = ComplaintBucket.PENDING
        self.error: Optional[str] = None
        self._subscription: Optional[Subscription] = None

    def refresh(self) -> List[Dict[str, Any]]:
        try:
            self.complaints = self.store.select(TABLE, order_by="created_at", descending=True)
            self.error = None
        except DataStoreError as exc:
            LOGGER.error("Error fetching complaints: %s", exc)
            self.error = str(exc)
        return self.complaints

    def bucket(self, bucket: ComplaintBucket) -> List[Dict[str, Any]]:
        return [row for row in self.complaints if classify_status(row.get("status")) is bucket]

    def counts(self) -> Dict[ComplaintBucket, int]:
        totals = {bucket: 0 for bucket in ComplaintBucket}
        for row in self.complaints:
            totals[classify_status(row.get("status"))] += 1
        return totals

    def accept(self, complaint_id: Any) -> bool:
        return self._set_status(complaint_id, "Open", ComplaintBucket.OPEN, "Complaint accepted")

    def reject(self, complaint_id: Any) -> bool:
        return self._set_status(complaint_id, "Closed", ComplaintBucket.CLOSED, "Complaint rejected")

    def _set_status(self, complaint_id: Any, status: str, tab: ComplaintBucket, message: str) -> bool:
        try:
            self.store.update(TABLE, complaint_id, {"status": status})
        except DataStoreError as exc:
            LOGGER.error("Failed to set complaint %s to %s: %s", complaint_id, status, exc)
            self.notifier.error("Failed to update complaint status")
            return False

        self.complaints = [
            {**row, "status": status} if row.get("id") == complaint_id else row for row in self.complaints
        ]
        self.active_tab = tab
        self.notifier.success(message)
        self._obs.emit_event("complaint_transition", complaint_id=complaint_id, status=status)
        self._obs.increment("complaints.transition", tags={"status": status.lower()})
        return True

    # ------------------------------------------------------------------
    # Real-time
    # ------------------------------------------------------------------
    def subscribe(self) -> Optional[Subscription]:
        try:
            self._subscription = self.store.subscribe(TABLE, self._on_change)
        except Exception:
            LOGGER.warning("Complaint subscription unavailable", exc_info=True)
            self._subscription = None
        return self._subscription

    def unsubscribe(self) -> None:
        if self._subscription is not None:
            self._subscription.unsubscribe()
            self._subscription = None

    def _on_change(self, event: ChangeEvent) -> None:
        LOGGER.debug("Complaint change received: %s", event.event_type)
        self.refresh()


__all__ = ["ComplaintBucket", "ComplaintTriage", "classify_status"]
