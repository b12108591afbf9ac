"""Trailing-edge debouncer for search and filter inputs."""

from __future__ import annotations

import threading
from typing import Any, Callable, Optional


class Debouncer:
    """Run ``func`` once the caller has been quiet for ``delay_seconds``.

    Each :meth:`call` cancels the pending timer and schedules a new one with
    the latest arguments.
    """

    def __init__(self, delay_seconds: float, func: Callable[..., Any]) -> None:
        self.delay_seconds = delay_seconds
        self.func = func
        self._lock = threading.Lock()
        self._timer: Optional[threading.Timer] = None
        self._pending: Optional[tuple[tuple[Any, ...], dict[str, Any]]] = None

    def call(self, *args: Any, **kwargs: Any) -> None:
        with self._lock:
            if self._timer is not None:
                self._timer.cancel()
            self._pending = (args, kwargs)
            self._timer = threading.Timer(self.delay_seconds, self._fire)
            self._timer.daemon = True
            self._timer.start()

    def flush(self) -> bool:
        """Run the pending call immediately; returns False when nothing was pending."""

        with self._lock:
            if self._timer is not None:
                self._timer.cancel()
                self._timer = None
            pending, self._pending = self._pending, None
        if pending is None:
            return False
        args, kwargs = pending
        self.func(*args, **kwargs)
        return True

    def cancel(self) -> None:
        with self._lock:
            if self._timer is not None:
                self._timer.cancel()
            self._timer = None
            self._pending = None

    @property
    def pending(self) -> bool:
        return self._pending is not None

    def _fire(self) -> None:
        with self._lock:
            pending, self._pending = self._pending, None
            self._timer = None
        if pending is not None:
            args, kwargs = pending
            self.func(*args, **kwargs)


__all__ = ["Debouncer"]
