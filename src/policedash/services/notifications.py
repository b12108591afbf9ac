"""Transient user-visible notifications (toasts)."""

from __future__ import annotations

import time
import uuid
from dataclasses import dataclass, field
from enum import Enum
from typing import Callable, List


class Variant(str, Enum):
    DEFAULT = "default"
    SUCCESS = "success"
    ERROR = "error"
    WARNING = "warning"


DEFAULT_LIFETIME_SECONDS = 5.0


@dataclass
class Notification:
    title: str
    description: str
    variant: Variant = Variant.DEFAULT
    created_at: float = 0.0
    lifetime: float = DEFAULT_LIFETIME_SECONDS
    id: str = field(default_factory=lambda: uuid.uuid4().hex[:8])

    def expired(self, now: float) -> bool:
        return now - self.created_at >= self.lifetime


class Notifier:
    """Collects notifications; expired entries drop out of :meth:`active`."""

    def __init__(
        self,
        *,
        clock: Callable[[], float] = time.monotonic,
        lifetime: float = DEFAULT_LIFETIME_SECONDS,
    ) -> None:
        self._clock = clock
        self._lifetime = lifetime
        self._items: List[Notification] = []

    def push(self, title: str, description: str, variant: Variant = Variant.DEFAULT) -> Notification:
        item = Notification(
            title=title,
            description=description,
            variant=variant,
            created_at=self._clock(),
            lifetime=self._lifetime,
        )
        self._items.append(item)
        return item

    def success(self, description: str, title: str = "Success") -> Notification:
        return self.push(title, description, Variant.SUCCESS)

    def error(self, description: str, title: str = "Error") -> Notification:
        return self.push(title, description, Variant.ERROR)

    def warning(self, description: str, title: str = "Warning") -> Notification:
        return self.push(title, description, Variant.WARNING)

    def dismiss(self, notification_id: str) -> None:
        self._items = [item for item in self._items if item.id != notification_id]

    def active(self) -> List[Notification]:
        now = self._clock()
        self._items = [item for item in self._items if not item.expired(now)]
        return list(self._items)

    @property
    def latest(self) -> Notification | None:
        return self._items[-1] if self._items else None


__all__ = ["Notification", "Notifier", "Variant"]
