"""Probe the match endpoint before enrollment to catch people already on record."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from enum import Enum
from typing import Callable, Optional

from policedash.client.criminals import get_criminal
from policedash.client.errors import ApiError
from policedash.client.http import FaceApiClient
from policedash.client.match import match_face
from policedash.client.models import CriminalRecord, MatchResponse, MatchResult
from policedash.client.uploads import UploadFile
from policedash.observability import get_observability
from policedash.settings import Settings, get_settings

LOGGER = logging.getLogger(__name__)

MatchFn = Callable[..., MatchResponse]
LookupFn = Callable[[FaceApiClient, str], CriminalRecord]


class DuplicateStatus(str, Enum):
    CLEAR = "clear"
    DUPLICATE = "duplicate"
    PROBE_FAILED = "probe_failed"


@dataclass
class DuplicateCheck:
    """Outcome of a probe; only ``DUPLICATE`` asks the operator to decide."""

    status: DuplicateStatus
    threshold: float
    match: Optional[MatchResult] = None
    existing: Optional[CriminalRecord] = None
    error: Optional[str] = None

    @property
    def blocking(self) -> bool:
        return self.status is DuplicateStatus.DUPLICATE

    @property
    def confidence(self) -> Optional[float]:
        return self.match.confidence if self.match else None

    @property
    def display_name(self) -> Optional[str]:
        if self.existing:
            return self.existing.name
        return self.match.name if self.match else None


def is_duplicate(match: Optional[MatchResult], threshold: float) -> bool:
    """A probe match counts as the same person at or above ``threshold``."""

    return match is not None and match.confidence >= threshold


class DuplicateGuard:
    """Advisory duplicate-person check run when an image is selected for enrollment.

    The probe never raises an alert and never blocks enrollment on its own
    failure: if the match call errors, the check reports ``PROBE_FAILED`` and
    the operator carries on.
    """

    def __init__(
        self,
        client: FaceApiClient,
        *,
        threshold: float | None = None,
        settings: Settings | None = None,
        match_fn: MatchFn = match_face,
        lookup_fn: LookupFn = get_criminal,
    ) -> None:
        self.client = client
        self.settings = settings or get_settings()
        self.threshold = threshold if threshold is not None else self.settings.match.duplicate_threshold
        self._match = match_fn
        self._lookup = lookup_fn
        self._obs = get_observability(component="duplicate_guard", settings=self.settings)

    def check(self, image: UploadFile) -> DuplicateCheck:
        try:
            response = self._match(
                self.client,
                image,
                max_results=1,
                similarity_threshold=self.threshold,
                create_alert=False,
            )
        except ApiError as exc:
            LOGGER.warning("Failed to check for existing person: %s", exc.message)
            return DuplicateCheck(status=DuplicateStatus.PROBE_FAILED, threshold=self.threshold, error=exc.message)

        top = response.top_match
        if not is_duplicate(top, self.threshold):
            return DuplicateCheck(status=DuplicateStatus.CLEAR, threshold=self.threshold, match=top)

        existing: Optional[CriminalRecord] = None
        try:
            existing = self._lookup(self.client, top.person_id)
        except ApiError as exc:
            LOGGER.warning("Failed to fetch criminal details for %s: %s", top.person_id, exc.message)

        self._obs.emit_event("duplicate_detected", person_id=top.person_id, confidence=top.confidence)
        self._obs.increment("enroll.duplicate_detected")
        return DuplicateCheck(
            status=DuplicateStatus.DUPLICATE,
            threshold=self.threshold,
            match=top,
            existing=existing,
        )


__all__ = ["DuplicateCheck", "DuplicateGuard", "DuplicateStatus", "is_duplicate"]
