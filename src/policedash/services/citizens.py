"""Registered citizen users and their verification state."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, Dict, List, Mapping, Optional

from policedash.store.changes import ChangeEvent, Subscription
from policedash.store.datastore import DataStore, DataStoreError

LOGGER = logging.getLogger(__name__)

TABLE = "users"


def _verification(user: Mapping[str, Any]) -> Mapping[str, Any]:
    return user.get("verification_status") or {}


def is_mobile_verified(user: Mapping[str, Any]) -> bool:
    return bool(_verification(user).get("is_mobile_verified"))


def is_fully_verified(user: Mapping[str, Any]) -> bool:
    status = _verification(user)
    return bool(status.get("is_mobile_verified") and status.get("is_aadhaar_verified"))


@dataclass
class CitizenStats:
    total_users: int = 0
    total_verified: int = 0
    total_mobile_verified: int = 0


class CitizensOverview:
    def __init__(self, store: DataStore) -> None:
        self.store = store
        self.users: List[Dict[str, Any]] = []
        self.error: Optional[str] = None
        self._subscription: Optional[Subscription] = None

    def refresh(self) -> List[Dict[str, Any]]:
        try:
            self.users = self.store.select(TABLE, order_by="created_at", descending=True)
            self.error = None
        except DataStoreError as exc:
            LOGGER.error("Error fetching users: %s", exc)
            self.error = str(exc)
        return self.users

    @property
    def stats(self) -> CitizenStats:
        return CitizenStats(
            total_users=len(self.users),
            total_verified=sum(1 for user in self.users if is_fully_verified(user)),
            total_mobile_verified=sum(1 for user in self.users if is_mobile_verified(user)),
        )

    def subscribe(self) -> Optional[Subscription]:
        try:
            self._subscription = self.store.subscribe(TABLE, self._on_change)
        except Exception:
            LOGGER.warning("User subscription unavailable", exc_info=True)
            self._subscription = None
        return self._subscription

    def unsubscribe(self) -> None:
        if self._subscription is not None:
            self._subscription.unsubscribe()
            self._subscription = None

    def _on_change(self, event: ChangeEvent) -> None:
        LOGGER.debug("User change received: %s", event.event_type)
        self.refresh()


__all__ = ["CitizenStats", "CitizensOverview", "is_fully_verified", "is_mobile_verified"]
