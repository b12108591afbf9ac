"""Per-session workflow objects and their change-feed subscriptions."""

from __future__ import annotations

import logging
import weakref
from typing import Any, Callable, Dict, TypeVar

LOGGER = logging.getLogger(__name__)

T = TypeVar("T")


def close_workflows(items: Dict[str, Any]) -> None:
    """Detach every workflow from the shared change feed and forget it."""

    for name, workflow in list(items.items()):
        unsubscribe = getattr(workflow, "unsubscribe", None)
        if callable(unsubscribe):
            unsubscribe()
        debouncer = getattr(workflow, "debouncer", None)
        if debouncer is not None:
            debouncer.cancel()
        LOGGER.debug("Closed workflow %s", name)
    items.clear()


class WorkflowRegistry:
    """Workflows owned by one browser session.

    The data store and its change feed are shared by every session, so a
    workflow that subscribed must be detached when it is discarded: on
    :meth:`clear` (logout, API base URL change) or when the session state
    holding the registry is garbage collected.
    """

    def __init__(self) -> None:
        self._items: Dict[str, Any] = {}
        self._finalizer = weakref.finalize(self, close_workflows, self._items)

    def get(self, name: str, factory: Callable[[], T]) -> T:
        if name not in self._items:
            self._items[name] = factory()
        return self._items[name]

    def clear(self) -> None:
        close_workflows(self._items)

    def __contains__(self, name: str) -> bool:
        return name in self._items

    def __len__(self) -> int:
        return len(self._items)


__all__ = ["WorkflowRegistry", "close_workflows"]
