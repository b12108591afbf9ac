"""Per-table change notifications used to push list refreshes to open views."""

from __future__ import annotations

import logging
import threading
from dataclasses import dataclass, field
from typing import Any, Callable, Dict, List, Literal, Mapping

LOGGER = logging.getLogger(__name__)

ChangeType = Literal["INSERT", "UPDATE", "DELETE"]


@dataclass(frozen=True)
class ChangeEvent:
    table: str
    event_type: ChangeType
    row: Mapping[str, Any] = field(default_factory=dict)


ChangeCallback = Callable[[ChangeEvent], None]


class Subscription:
    """Handle returned by :meth:`ChangeFeed.subscribe`."""

    def __init__(self, feed: "ChangeFeed", table: str, callback: ChangeCallback) -> None:
        self.feed = feed
        self.table = table
        self.callback = callback
        self.active = True

    def unsubscribe(self) -> None:
        if self.active:
            self.feed._remove(self)
            self.active = False


class ChangeFeed:
    """Fan change events out to every subscriber of a table.

    Callbacks run synchronously on the publishing thread. Events are not
    coalesced, so a burst of changes triggers one callback per change.
    """

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._subscribers: Dict[str, List[Subscription]] = {}

    def subscribe(self, table: str, callback: ChangeCallback) -> Subscription:
        subscription = Subscription(self, table, callback)
        with self._lock:
            self._subscribers.setdefault(table, []).append(subscription)
        LOGGER.debug("Subscribed to %s changes", table)
        return subscription

    def publish(self, table: str, event_type: ChangeType, row: Mapping[str, Any] | None = None) -> int:
        """Deliver an event and return how many subscribers received it."""

        event = ChangeEvent(table=table, event_type=event_type, row=dict(row or {}))
        with self._lock:
            targets = list(self._subscribers.get(table, ()))
        delivered = 0
        for subscription in targets:
            try:
                subscription.callback(event)
                delivered += 1
            except Exception:
                LOGGER.exception("Change callback for %s failed", table)
        return delivered

    def subscriber_count(self, table: str) -> int:
        with self._lock:
            return len(self._subscribers.get(table, ()))

    def _remove(self, subscription: Subscription) -> None:
        with self._lock:
            subscribers = self._subscribers.get(subscription.table, [])
            if subscription in subscribers:
                subscribers.remove(subscription)


__all__ = ["ChangeEvent", "ChangeFeed", "ChangeType", "Subscription"]
