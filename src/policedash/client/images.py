"""Presigned image URLs for privately stored face images."""

from __future__ import annotations

import logging
from typing import Optional

from .errors import ApiError, ClientValidationError, wrap_errors
from .http import FaceApiClient
from .models import CriminalRecord, PresignedUrl

LOGGER = logging.getLogger(__name__)

PRESIGNED_URL_PATH = "/api/v1/images/presigned-url"


def _is_http_url(value: str) -> bool:
    return value.startswith("http://") or value.startswith("https://")


@wrap_errors("Failed to generate presigned URL")
def get_presigned_url(
    client: FaceApiClient,
    *,
    s3_key: Optional[str] = None,
    image_url: Optional[str] = None,
) -> PresignedUrl:
    if not s3_key and not image_url:
        raise ClientValidationError("Either s3_key or image_url must be provided")
    if s3_key and not s3_key.strip():
        raise ClientValidationError("s3_key cannot be empty")
    if image_url:
        if not image_url.strip():
            raise ClientValidationError("image_url cannot be empty")
        if not _is_http_url(image_url.strip()):
            raise ClientValidationError("image_url must be a valid HTTP/HTTPS URL")

    body = {
        "s3_key": s3_key.strip() if s3_key else None,
        "image_url": image_url.strip() if image_url else None,
    }
    payload = client.post(PRESIGNED_URL_PATH, json=body)
    return PresignedUrl.model_validate(payload)


def presigned_url_from_s3_key(client: FaceApiClient, s3_key: str) -> str:
    if not s3_key or not s3_key.strip():
        raise ClientValidationError("s3Key is required")
    return get_presigned_url(client, s3_key=s3_key.strip()).presigned_url


def presigned_url_from_image_url(client: FaceApiClient, image_url: str) -> str:
    if not image_url or not image_url.strip():
        raise ClientValidationError("imageUrl is required")
    return get_presigned_url(client, image_url=image_url.strip()).presigned_url


def resolve_display_url(client: FaceApiClient, record: CriminalRecord) -> Optional[str]:
    """Return a URL suitable for rendering the record's primary image.

    Tries the stored S3 key first, then presigning the stored image URL, and
    finally falls back to the raw stored URL. Never raises.
    """

    s3_path = record.primary_s3_path
    image_path = record.primary_image

    if s3_path:
        try:
            return presigned_url_from_s3_key(client, s3_path)
        except ApiError as exc:
            LOGGER.warning("Failed to get presigned URL from S3 key %s: %s", s3_path, exc.message)

    if not image_path:
        return None
    try:
        return presigned_url_from_image_url(client, image_path)
    except ApiError as exc:
        LOGGER.warning("Failed to get presigned URL from image URL, using original: %s", exc.message)
        return image_path


__all__ = [
    "get_presigned_url",
    "presigned_url_from_image_url",
    "presigned_url_from_s3_key",
    "resolve_display_url",
]
