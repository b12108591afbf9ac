"""Criminal record accessors: list, detail, partial update and filter options."""

from __future__ import annotations

from typing import Any, Dict, List, Optional

from .errors import ClientValidationError, wrap_errors
from .http import FaceApiClient, unwrap_envelope, unwrap_page
from .models import CriminalRecord
from .uploads import UploadFile

CRIMINALS_PATH = "/api/v1/criminals"
MAX_LIMIT = 1000
# Upper bound used when scanning records for filter options.
OPTIONS_SCAN_LIMIT = 1000


def validate_paging(limit: int, offset: int) -> None:
    if limit < 1 or limit > MAX_LIMIT:
        raise ClientValidationError(f"limit must be between 1 and {MAX_LIMIT}")
    if offset < 0:
        raise ClientValidationError("offset must be non-negative")


def _clean(value: Optional[str]) -> Optional[str]:
    if value is None:
        return None
    stripped = value.strip()
    return stripped or None


@wrap_errors("Failed to retrieve criminals")
def get_criminals(
    client: FaceApiClient,
    *,
    limit: int = 100,
    offset: int = 0,
    search: Optional[str] = None,
    crime_type: Optional[str] = None,
    state: Optional[str] = None,
    district: Optional[str] = None,
    gender: Optional[str] = None,
) -> List[CriminalRecord]:
    """Return one page of criminal records, optionally filtered."""

    validate_paging(limit, offset)
    params: Dict[str, Any] = {"limit": limit, "offset": offset}
    filters = {
        "search": search,
        "crime_type": crime_type,
        "state": state,
        "district": district,
        "gender": gender,
    }
    for key, value in filters.items():
        cleaned = _clean(value)
        if cleaned:
            params[key] = cleaned

    page = unwrap_page(client.get(CRIMINALS_PATH, params=params))
    return [CriminalRecord.model_validate(item) for item in page.items]


@wrap_errors("Failed to retrieve criminal")
def get_criminal(client: FaceApiClient, person_id: str) -> CriminalRecord:
    cleaned = _clean(person_id)
    if not cleaned:
        raise ClientValidationError("personId is required")
    payload = unwrap_envelope(client.get(f"{CRIMINALS_PATH}/{cleaned}"))
    return CriminalRecord.model_validate(payload)


@wrap_errors("Failed to update criminal")
def update_criminal(
    client: FaceApiClient,
    person_id: str,
    *,
    name: Optional[str] = None,
    crime_type: Optional[str] = None,
    state: Optional[str] = None,
    district: Optional[str] = None,
    gender: Optional[str] = None,
    image: Optional[UploadFile] = None,
) -> CriminalRecord:
    """Apply a partial update. ``None`` leaves a field alone; ``""`` clears it."""

    cleaned = _clean(person_id)
    if not cleaned:
        raise ClientValidationError("personId is required")

    form: Dict[str, str] = {}
    if name is not None:
        form["name"] = name
    for key, value in (("crime_type", crime_type), ("state", state), ("district", district), ("gender", gender)):
        if value is not None:
            form[key] = value or ""

    files = {"image": image.as_multipart()} if image else None
    payload = unwrap_envelope(client.put(f"{CRIMINALS_PATH}/{cleaned}", data=form, files=files))
    return CriminalRecord.model_validate(payload)


@wrap_errors("Failed to retrieve states")
def get_unique_states(client: FaceApiClient) -> List[str]:
    records = get_criminals(client, limit=OPTIONS_SCAN_LIMIT)
    return sorted({record.state for record in records if record.state})


@wrap_errors("Failed to retrieve crime types")
def get_unique_crime_types(client: FaceApiClient) -> List[str]:
    records = get_criminals(client, limit=OPTIONS_SCAN_LIMIT)
    return sorted({record.crime_type for record in records if record.crime_type})


@wrap_errors("Failed to retrieve districts")
def get_districts_by_state(client: FaceApiClient, state: Optional[str]) -> List[str]:
    if not _clean(state):
        return []
    records = get_criminals(client, limit=OPTIONS_SCAN_LIMIT)
    return sorted({record.district for record in records if record.state == state and record.district})


__all__ = [
    "get_criminal",
    "get_criminals",
    "get_districts_by_state",
    "get_unique_crime_types",
    "get_unique_states",
    "update_criminal",
    "validate_paging",
]
