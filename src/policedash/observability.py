"""Workflow events and StatsD counters for the dashboard services.

Services call ``get_observability(component=...)`` once and then record what
operators did (enrollments, matches, alert and complaint transitions)::

    obs = get_observability(component="alert_triage")
    obs.emit_event("alert_transition", alert_id="a-1", status="Verified")
    obs.increment("alerts.transition", tags={"status": "verified"})

Events are logged under ``policedash.observability``, one JSON object per line
when ``observability.structured_logging`` is on. Counters go to StatsD over UDP
when ``observability.statsd_host`` is set and are dropped otherwise.
"""

from __future__ import annotations

import json
import logging
import socket
import threading
from datetime import datetime, timezone
from typing import Any, Mapping

from policedash.settings import Settings, get_settings

_LOGGER = logging.getLogger("policedash.observability")
LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"


class StatsdSender:
    """Fire-and-forget UDP counter sender (DogStatsD tag syntax)."""

    def __init__(self, host: str, port: int, prefix: str = "") -> None:
        self.address = (host, port)
        self.prefix = prefix
        self._sock = socket.socket(socket.AF_INET, socket.SOCK_DGRAM)

    def format_counter(self, metric: str, value: float, tags: Mapping[str, str] | None = None) -> str:
        name = f"{self.prefix}.{metric}" if self.prefix else metric
        line = f"{name}:{value:g}|c"
        if tags:
            line += "|#" + ",".join(f"{key}:{tags[key]}" for key in sorted(tags))
        return line

    def counter(self, metric: str, value: float, tags: Mapping[str, str] | None = None) -> None:
        try:
            self._sock.sendto(self.format_counter(metric, value, tags).encode("utf-8"), self.address)
        except OSError:
            _LOGGER.debug("Dropped StatsD counter %s", metric, exc_info=True)

    def close(self) -> None:
        self._sock.close()


class Observability:
    """Per-component handle for events and counters."""

    def __init__(
        self,
        *,
        settings: Settings,
        component: str | None = None,
        statsd: StatsdSender | None = None,
        logger: logging.Logger | None = None,
    ) -> None:
        self.component = component or "dashboard"
        self.service = settings.observability.service_name
        self.structured = settings.observability.structured_logging
        self._statsd = statsd
        self._logger = logger or _LOGGER

    def emit_event(self, event: str, **fields: Any) -> None:
        record = {
            "event": event,
            "service": self.service,
            "component": self.component,
            "timestamp": datetime.now(timezone.utc).isoformat(),
            **fields,
        }
        if self.structured:
            self._logger.info(json.dumps(record, default=str))
        else:
            details = " ".join(f"{key}={value}" for key, value in fields.items())
            self._logger.info("[%s] %s %s", self.component, event, details)

    def increment(self, metric: str, *, value: float = 1.0, tags: Mapping[str, Any] | None = None) -> None:
        if self._statsd is None:
            return
        clean = {str(key): str(val) for key, val in (tags or {}).items() if val is not None}
        self._statsd.counter(metric, value, clean or None)


_statsd_lock = threading.Lock()
_statsd_sender: StatsdSender | None = None


def _shared_statsd(settings: Settings) -> StatsdSender | None:
    """One UDP socket per process, created the first time a host is configured."""

    global _statsd_sender
    config = settings.observability
    if not config.statsd_host:
        return None
    with _statsd_lock:
        if _statsd_sender is None:
            _statsd_sender = StatsdSender(config.statsd_host, config.statsd_port, config.statsd_prefix)
        return _statsd_sender


def get_observability(*, component: str | None = None, settings: Settings | None = None) -> Observability:
    resolved = settings or get_settings()
    return Observability(settings=resolved, component=component, statsd=_shared_statsd(resolved))


def reset_observability_cache() -> None:
    """Close and forget the shared StatsD socket so the next call rereads settings."""

    global _statsd_sender
    with _statsd_lock:
        if _statsd_sender is not None:
            _statsd_sender.close()
        _statsd_sender = None


def configure_logging(settings: Settings | None = None) -> None:
    """Install a root handler if none exists and apply ``runtime.log_level``."""

    resolved = settings or get_settings()
    level = logging.getLevelName(resolved.log_level.upper())
    if not isinstance(level, int):
        level = logging.INFO
    root = logging.getLogger()
    if not root.handlers:
        logging.basicConfig(level=level, format=LOG_FORMAT)
    root.setLevel(level)


__all__ = [
    "Observability",
    "StatsdSender",
    "configure_logging",
    "get_observability",
    "reset_observability_cache",
]
