"""Face matching accessors."""

from __future__ import annotations

from typing import Dict, Optional

from .errors import ClientValidationError, wrap_errors
from .http import FaceApiClient
from .models import MatchRequest, MatchResponse
from .uploads import UploadFile

MATCH_PATH = "/api/v1/match"
MATCH_URL_PATH = "/api/v1/match/url"
MIN_RESULTS = 1
MAX_RESULTS = 100


def _is_http_url(value: str) -> bool:
    return value.startswith("http://") or value.startswith("https://")


def _check_max_results(value: int, label: str) -> None:
    if value < MIN_RESULTS or value > MAX_RESULTS:
        raise ClientValidationError(f"{label} must be between {MIN_RESULTS} and {MAX_RESULTS}")


def _check_threshold(value: float, label: str) -> None:
    if value < 0 or value > 100:
        raise ClientValidationError(f"{label} must be between 0 and 100")


@wrap_errors("Failed to match face")
def match_face(
    client: FaceApiClient,
    image: Optional[UploadFile],
    *,
    max_results: int = 5,
    similarity_threshold: float = 80.0,
    create_alert: bool = True,
    sender_id: Optional[str] = None,
) -> MatchResponse:
    """Search the recognition index for faces similar to ``image``.

    When ``create_alert`` is true and matches clear the threshold, the backend
    raises an alert for the operators to triage.
    """

    if image is None:
        raise ClientValidationError("Image file is required")
    _check_max_results(max_results, "maxResults")
    _check_threshold(similarity_threshold, "similarityThreshold")

    form: Dict[str, str] = {
        "max_results": str(max_results),
        "similarity_threshold": str(similarity_threshold),
        "create_alert": "true" if create_alert else "false",
    }
    if sender_id:
        form["sender_id"] = sender_id

    payload = client.post(MATCH_PATH, data=form, files={"image": image.as_multipart()})
    return MatchResponse.model_validate(payload)


@wrap_errors("Failed to match face from URL")
def match_face_from_url(client: FaceApiClient, request: MatchRequest) -> MatchResponse:
    image_url = (request.image_url or "").strip()
    if not image_url:
        raise ClientValidationError("image_url is required")
    if not _is_http_url(image_url):
        raise ClientValidationError("image_url must be a valid HTTP/HTTPS URL")
    if request.max_results is not None:
        _check_max_results(request.max_results, "max_results")
    if request.similarity_threshold is not None:
        _check_threshold(request.similarity_threshold, "similarity_threshold")

    body = request.model_dump(exclude_none=True)
    body["image_url"] = image_url
    payload = client.post(MATCH_URL_PATH, json=body)
    return MatchResponse.model_validate(payload)


__all__ = ["MAX_RESULTS", "MIN_RESULTS", "match_face", "match_face_from_url"]
