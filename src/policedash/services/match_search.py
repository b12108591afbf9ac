"""Face search against enrolled records."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Callable, Optional

from policedash.client.errors import ApiError
from policedash.client.http import FaceApiClient
from policedash.client.match import match_face
from policedash.client.models import MatchResponse
from policedash.client.uploads import UploadFile, validate_image_upload
from policedash.observability import get_observability
from policedash.settings import Settings, get_settings

from .notifications import Notifier

LOGGER = logging.getLogger(__name__)


@dataclass
class MatchParameters:
    similarity_threshold: float = 80.0
    create_alert: bool = True
    max_results: int = 5


class MatchSearch:
    """Holds the selected probe image, search parameters and the last result."""

    def __init__(
        self,
        client: FaceApiClient,
        *,
        notifier: Notifier | None = None,
        settings: Settings | None = None,
        match_fn: Callable[..., MatchResponse] = match_face,
    ) -> None:
        self.client = client
        self.settings = settings or get_settings()
        self.notifier = notifier or Notifier()
        self._match = match_fn
        self._obs = get_observability(component="match_search", settings=self.settings)
        match_settings = self.settings.match
        self.parameters = MatchParameters(
            similarity_threshold=match_settings.default_threshold,
            create_alert=match_settings.create_alert,
            max_results=match_settings.default_max_results,
        )
        self.file: Optional[UploadFile] = None
        self.result: Optional[MatchResponse] = None

    def select_file(self, upload: Optional[UploadFile]) -> bool:
        self.result = None
        if upload is None:
            self.file = None
            return False
        try:
            validate_image_upload(upload, max_size_mb=self.settings.uploads.max_size_mb)
        except ApiError as exc:
            self.file = None
            self.notifier.error(exc.message)
            return False
        self.file = upload
        return True

    def search(self, sender_id: str | None = None) -> Optional[MatchResponse]:
        if self.file is None:
            self.notifier.error("Please select an image to match")
            return None

        params = self.parameters
        try:
            response = self._match(
                self.client,
                self.file,
                max_results=params.max_results,
                similarity_threshold=params.similarity_threshold,
                create_alert=params.create_alert,
                sender_id=sender_id,
            )
        except ApiError as exc:
            LOGGER.error("Match failed: %s", exc.message)
            self.notifier.error(exc.message or "Failed to match face")
            self._obs.increment("match.failed")
            return None

        self.result = response
        count = len(response.matches)
        self._obs.emit_event(
            "match_completed",
            matches=count,
            threshold=params.similarity_threshold,
            create_alert=params.create_alert,
        )
        self._obs.increment("match.completed", tags={"hit": "true" if count else "false"})
        if count:
            self.notifier.success(f"Found {count} match(es)")
        else:
            self.notifier.warning("No matching faces found in the database")
        return response

    def clear(self) -> None:
        self.file = None
        self.result = None


__all__ = ["MatchParameters", "MatchSearch"]
