"""Upload-and-enroll workflow with the duplicate-person guard, plus bulk enrollment."""

from __future__ import annotations

import logging
from dataclasses import dataclass, fields
from typing import Callable, List, Optional

from policedash.client.criminals import get_districts_by_state, get_unique_states
from policedash.client.enroll import enroll_bulk, upload_single_image
from policedash.client.errors import ApiError
from policedash.client.http import FaceApiClient
from policedash.client.models import EnrollmentResponse
from policedash.client.uploads import UploadFile, validate_image_upload
from policedash.observability import Observability, get_observability
from policedash.settings import Settings, get_settings

from .duplicate_guard import DuplicateCheck, DuplicateGuard
from .notifications import Notifier

LOGGER = logging.getLogger(__name__)

REQUIRED_FIELDS_MESSAGE = "Please fill in all required fields: Name, State, District, Age Range, and Crime Type"
AGE_RANGES = ("18-25", "26-35", "36-45", "46-55", "56+")


@dataclass
class EnrollmentForm:
    name: str = ""
    person_id: str = ""
    crime_type: str = ""
    gender: str = ""
    state: str = ""
    district: str = ""
    age_range: str = ""
    apply_augmentations: bool = False

    def missing_required(self) -> List[str]:
        required = ("name", "state", "district", "age_range", "crime_type")
        return [name for name in required if not str(getattr(self, name) or "").strip()]

    def reset(self) -> None:
        for item in fields(self):
            setattr(self, item.name, item.default)


class EnrollmentWorkflow:
    """State behind the single-image enrollment page."""

    def __init__(
        self,
        client: FaceApiClient,
        *,
        notifier: Notifier | None = None,
        guard: DuplicateGuard | None = None,
        settings: Settings | None = None,
        enroll_fn: Callable[..., EnrollmentResponse] = upload_single_image,
        states_fn: Callable[[FaceApiClient], List[str]] = get_unique_states,
        districts_fn: Callable[[FaceApiClient, str], List[str]] = get_districts_by_state,
        observability: Observability | None = None,
    ) -> None:
        self.client = client
        self.settings = settings or get_settings()
        self.notifier = notifier or Notifier()
        self.guard = guard or DuplicateGuard(client, settings=self.settings)
        self._enroll = enroll_fn
        self._states = states_fn
        self._districts = districts_fn
        self._obs = observability or get_observability(component="enrollment", settings=self.settings)

        self.form = EnrollmentForm()
        self.file: Optional[UploadFile] = None
        self.file_error: Optional[str] = None
        self.duplicate: Optional[DuplicateCheck] = None
        self.districts: List[str] = []

    # ------------------------------------------------------------------
    # File selection and duplicate decision
    # ------------------------------------------------------------------
    def select_file(self, upload: Optional[UploadFile]) -> Optional[DuplicateCheck]:
        """Validate and select ``upload``, then probe for an existing match.

        Returns the probe outcome, or ``None`` when the file was rejected or cleared.
        """

        self.duplicate = None
        self.file_error = None
        if upload is None:
            self.file = None
            return None
        try:
            validate_image_upload(upload, max_size_mb=self.settings.uploads.max_size_mb)
        except ApiError as exc:
            self.file = None
            self.file_error = exc.message
            self.notifier.error(exc.message)
            return None

        self.file = upload
        check = self.guard.check(upload)
        if check.blocking:
            self.duplicate = check
        return check

    @property
    def awaiting_decision(self) -> bool:
        return self.duplicate is not None and self.duplicate.blocking

    def cancel_duplicate(self) -> None:
        """Operator chose not to enroll a likely-existing person."""

        self.duplicate = None
        self.file = None

    def proceed_anyway(self) -> None:
        """Operator dismissed the duplicate warning; keep the file."""

        self.duplicate = None

    # ------------------------------------------------------------------
    # Location options
    # ------------------------------------------------------------------
    def load_states(self) -> List[str]:
        try:
            return self._states(self.client)
        except ApiError as exc:
            LOGGER.error("Failed to load states: %s", exc.message)
            self.notifier.warning("Could not load states. You can still enter manually.")
            return []

    def set_state(self, state: str) -> List[str]:
        """Change the selected state; the district is cleared and its options reloaded."""

        self.form.state = state
        self.form.district = ""
        if not state:
            self.districts = []
            return self.districts
        try:
            self.districts = self._districts(self.client, state)
        except ApiError as exc:
            LOGGER.error("Failed to load districts: %s", exc.message)
            self.districts = []
        return self.districts

    # ------------------------------------------------------------------
    # Submission
    # ------------------------------------------------------------------
    def submit(self) -> Optional[EnrollmentResponse]:
        if self.file is None or self.form.missing_required():
            self.notifier.error(REQUIRED_FIELDS_MESSAGE)
            return None
        if self.awaiting_decision:
            self.notifier.warning("Resolve the existing-person warning before enrolling.")
            return None

        form = self.form
        try:
            result = self._enroll(
                self.client,
                self.file,
                name=form.name,
                person_id=form.person_id or None,
                crime_type=form.crime_type,
                gender=form.gender or None,
                state=form.state,
                district=form.district,
                age_range=form.age_range,
                apply_augmentations=form.apply_augmentations,
            )
        except ApiError as exc:
            self.notifier.error(exc.message or "Failed to upload image")
            self._obs.increment("enroll.failed")
            return None

        if result.success:
            self.notifier.success(f"Enrolled successfully! {result.total_images_indexed} image(s) indexed.")
            person_id = result.data.person_id if result.data else None
            self._obs.emit_event("enrolled", person_id=person_id, images=result.total_images_indexed)
            self._obs.increment("enroll.succeeded")
            self.form.reset()
            self.file = None
            self.districts = []
        else:
            self.notifier.error(result.message or "Enrollment failed")
            self._obs.increment("enroll.rejected")
        return result


class BulkEnrollment:
    """Sheet-driven enrollment; image paths in the sheet resolve on the backend host."""

    def __init__(
        self,
        client: FaceApiClient,
        *,
        notifier: Notifier | None = None,
        enroll_fn: Callable[..., EnrollmentResponse] = enroll_bulk,
    ) -> None:
        self.client = client
        self.notifier = notifier or Notifier()
        self._enroll = enroll_fn
        self.last_result: Optional[EnrollmentResponse] = None

    def submit(self, sheet: Optional[UploadFile], images_folder: Optional[str] = None) -> Optional[EnrollmentResponse]:
        if sheet is None:
            self.notifier.error("Please select an Excel or CSV file")
            return None
        try:
            result = self._enroll(self.client, sheet, images_folder)
        except ApiError as exc:
            self.notifier.error(exc.message or "Bulk enrollment failed")
            return None

        self.last_result = result
        if result.success:
            self.notifier.success(
                f"Bulk enrollment complete: {result.total_criminals} record(s), "
                f"{result.total_images_indexed} image(s) indexed."
            )
        else:
            self.notifier.error(result.message or "Bulk enrollment failed")
        return result


__all__ = ["AGE_RANGES", "BulkEnrollment", "EnrollmentForm", "EnrollmentWorkflow", "REQUIRED_FIELDS_MESSAGE"]
