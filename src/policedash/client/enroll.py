"""Enrollment accessors: single image, multiple images of one identity, and bulk sheets."""

from __future__ import annotations

from typing import Dict, List, Optional, Sequence

from .errors import ClientValidationError, wrap_errors
from .http import FaceApiClient
from .models import EnrollmentResponse
from .uploads import ENROLL_IMAGE_TYPES, UploadFile, is_valid_image_type, validate_sheet_upload

ENROLL_IMAGE_PATH = "/api/v1/enroll/image"
ENROLL_IMAGES_PATH = "/api/v1/enroll/images"
ENROLL_BULK_PATH = "/api/v1/enroll"


def _require(value: Optional[str], message: str) -> str:
    if value is None or not value.strip():
        raise ClientValidationError(message)
    return value.strip()


def _bool_field(value: bool) -> str:
    return "true" if value else "false"


@wrap_errors("Failed to enroll image")
def upload_single_image(
    client: FaceApiClient,
    image: Optional[UploadFile],
    *,
    name: str,
    state: str,
    district: str,
    age_range: str,
    crime_type: str,
    person_id: Optional[str] = None,
    gender: Optional[str] = None,
    apply_augmentations: bool = False,
) -> EnrollmentResponse:
    """Enroll one face image. The backend generates ``person_id`` when none is sent."""

    if image is None:
        raise ClientValidationError("Image file is required")
    clean_name = _require(name, "Name is required")
    if not is_valid_image_type(image, ENROLL_IMAGE_TYPES):
        raise ClientValidationError("Invalid image type. Supported: JPEG, PNG, BMP, GIF")

    form: Dict[str, str] = {"name": clean_name}
    if person_id and person_id.strip():
        form["person_id"] = person_id.strip()
    form["state"] = _require(state, "State is required")
    form["district"] = _require(district, "District is required")
    form["age_range"] = _require(age_range, "Age range is required")
    form["crime_type"] = _require(crime_type, "Crime type is required")
    if gender and gender.strip():
        form["gender"] = gender.strip().lower()
    form["apply_augmentations"] = _bool_field(apply_augmentations)

    payload = client.post(ENROLL_IMAGE_PATH, data=form, files={"image": image.as_multipart()})
    return EnrollmentResponse.model_validate(payload)


@wrap_errors("Failed to enroll images")
def upload_multiple_images(
    client: FaceApiClient,
    images: Sequence[UploadFile],
    *,
    name: str,
    person_id: Optional[str] = None,
    crime_type: Optional[str] = None,
    apply_augmentations: bool = False,
) -> EnrollmentResponse:
    """Enroll several images of the same identity in one call."""

    if not images:
        raise ClientValidationError("At least one image is required")
    clean_name = _require(name, "Name is required")
    for image in images:
        if not is_valid_image_type(image, ENROLL_IMAGE_TYPES):
            raise ClientValidationError(f"Invalid image type: {image.filename}. Supported: JPEG, PNG, BMP, GIF")

    form: Dict[str, str] = {"name": clean_name}
    if person_id and person_id.strip():
        form["person_id"] = person_id.strip()
    if crime_type and crime_type.strip():
        form["crime_type"] = crime_type.strip()
    form["apply_augmentations"] = _bool_field(apply_augmentations)

    files: List[tuple[str, tuple[str, bytes, str]]] = [("images", image.as_multipart()) for image in images]
    payload = client.post(ENROLL_IMAGES_PATH, data=form, files=files)
    return EnrollmentResponse.model_validate(payload)


@wrap_errors("Failed to enroll from Excel/CSV")
def enroll_bulk(
    client: FaceApiClient,
    sheet: Optional[UploadFile],
    images_folder: Optional[str] = None,
) -> EnrollmentResponse:
    """Bulk enrollment from a sheet; ``images_folder`` is a path on the backend host."""

    validate_sheet_upload(sheet)
    form: Dict[str, str] = {}
    if images_folder and images_folder.strip():
        form["images_folder"] = images_folder.strip()
    payload = client.post(ENROLL_BULK_PATH, data=form or None, files={"excel_file": sheet.as_multipart()})
    return EnrollmentResponse.model_validate(payload)


__all__ = ["enroll_bulk", "upload_multiple_images", "upload_single_image"]
