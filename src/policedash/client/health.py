"""Diagnostic liveness probe for the face-recognition API."""

from __future__ import annotations

import logging

from .errors import ApiError
from .http import FaceApiClient
from .models import HealthReport

LOGGER = logging.getLogger(__name__)

HEALTH_PATH = "/health"


def check_backend_connection(client: FaceApiClient, *, timeout: float | None = None) -> HealthReport:
    """Probe ``/health``; a failure is informational and never raised."""

    probe_timeout = timeout if timeout is not None else client.settings.api.health_timeout_seconds
    try:
        body = client.get(HEALTH_PATH, timeout=probe_timeout)
    except ApiError as exc:
        LOGGER.info("Health check failed against %s: %s", client.base_url, exc.message)
        return HealthReport(
            success=False,
            message=exc.message or "Health check failed (alerts may still work)",
            details={
                "url": client.base_url,
                "error": exc.response if exc.response is not None else exc.message,
                "note": "This is a diagnostic check. Alerts functionality may still work.",
            },
        )
    return HealthReport(success=True, message="Backend is reachable", details=body)


__all__ = ["check_backend_connection"]
