"""Paged, filterable browsing and editing of enrolled criminal records."""

from __future__ import annotations

import logging
from dataclasses import dataclass, fields
from typing import Any, Callable, Dict, List, Mapping, Optional, Sequence

from policedash.client.criminals import OPTIONS_SCAN_LIMIT, get_criminals, get_districts_by_state, update_criminal
from policedash.client.errors import ApiError
from policedash.client.http import FaceApiClient
from policedash.client.images import resolve_display_url
from policedash.client.models import CriminalRecord
from policedash.client.uploads import UploadFile
from policedash.settings import Settings, get_settings

from .debounce import Debouncer
from .notifications import Notifier

LOGGER = logging.getLogger(__name__)

EDITABLE_FIELDS = ("name", "crime_type", "state", "district", "gender")


def option_index(options: Sequence[str], value: Optional[str]) -> int:
    """Position of ``value`` in ``options`` ignoring case; 0 (the blank option) when absent."""

    wanted = (value or "").strip().lower()
    for index, option in enumerate(options):
        if option.lower() == wanted:
            return index
    return 0


def changed_fields(record: CriminalRecord, values: Mapping[str, Optional[str]]) -> Dict[str, str]:
    """Edited values that differ from ``record``. Gender compares case-insensitively."""

    changes: Dict[str, str] = {}
    for key in EDITABLE_FIELDS:
        if key not in values:
            continue
        new = (values[key] or "").strip()
        old = (getattr(record, key) or "").strip()
        if key == "gender":
            new, old = new.lower(), old.lower()
        if new != old:
            changes[key] = new
    return changes


@dataclass
class CriminalFilters:
    search: str = ""
    crime_type: str = ""
    state: str = ""
    district: str = ""
    gender: str = ""

    def as_params(self) -> Dict[str, str]:
        return {item.name: getattr(self, item.name) for item in fields(self) if getattr(self, item.name)}

    @property
    def active(self) -> bool:
        return bool(self.as_params())


class CriminalBrowser:
    """Infinite-scroll list state: filters, loaded pages and dropdown options."""

    def __init__(
        self,
        client: FaceApiClient,
        *,
        notifier: Notifier | None = None,
        settings: Settings | None = None,
        list_fn: Callable[..., List[CriminalRecord]] = get_criminals,
        districts_fn: Callable[[FaceApiClient, str], List[str]] = get_districts_by_state,
        update_fn: Callable[..., CriminalRecord] = update_criminal,
        debounce_seconds: float | None = None,
    ) -> None:
        self.client = client
        self.settings = settings or get_settings()
        self.notifier = notifier or Notifier()
        self._list = list_fn
        self._districts = districts_fn
        self._update = update_fn
        self.page_size = self.settings.browser.page_size
        delay = debounce_seconds if debounce_seconds is not None else self.settings.browser.debounce_seconds
        self.debouncer = Debouncer(delay, self.reset)

        self.filters = CriminalFilters()
        self.records: List[CriminalRecord] = []
        self.page = 0
        self.has_more = True
        self.error: Optional[str] = None

        self.states: List[str] = []
        self.crime_types: List[str] = []
        self.districts: List[str] = []
        self._options_loaded = False

    # ------------------------------------------------------------------
    # Paging
    # ------------------------------------------------------------------
    def _fetch(self, page: int) -> List[CriminalRecord]:
        return self._list(
            self.client,
            limit=self.page_size,
            offset=page * self.page_size,
            **self.filters.as_params(),
        )

    def reset(self) -> List[CriminalRecord]:
        """Reload from page zero with the current filters."""

        self.page = 0
        try:
            batch = self._fetch(0)
        except ApiError as exc:
            LOGGER.error("Failed to load criminals: %s", exc.message)
            self.error = exc.message
            self.records = []
            self.has_more = False
            return self.records
        self.error = None
        self.records = list(batch)
        self.has_more = len(batch) == self.page_size
        return self.records

    def load_more(self) -> List[CriminalRecord]:
        if not self.has_more:
            return self.records
        next_page = self.page + 1
        try:
            batch = self._fetch(next_page)
        except ApiError as exc:
            LOGGER.error("Failed to load more criminals: %s", exc.message)
            self.error = exc.message
            self.has_more = False
            return self.records
        self.page = next_page
        self.records.extend(batch)
        self.has_more = len(batch) == self.page_size
        return self.records

    # ------------------------------------------------------------------
    # Filters
    # ------------------------------------------------------------------
    def set_filter(self, name: str, value: str) -> None:
        """Update one filter; the reload is debounced."""

        if name not in {item.name for item in fields(CriminalFilters)}:
            raise ValueError(f"Unknown filter '{name}'")
        value = value or ""
        setattr(self.filters, name, value)
        if name == "state":
            self.filters.district = ""
            self.districts = self._load_districts(value) if value else []
        self.debouncer.call()

    def clear_filters(self) -> None:
        self.filters = CriminalFilters()
        self.districts = []
        self.debouncer.call()

    def _load_districts(self, state: str) -> List[str]:
        try:
            return self._districts(self.client, state)
        except ApiError as exc:
            LOGGER.warning("Failed to load districts for %s: %s", state, exc.message)
            return []

    def load_filter_options(self) -> bool:
        """Populate state and crime-type choices once; a failure leaves a retry open."""

        if self._options_loaded:
            return True
        try:
            records = self._list(self.client, limit=OPTIONS_SCAN_LIMIT, offset=0)
        except ApiError as exc:
            LOGGER.warning("Failed to load filter options: %s", exc.message)
            return False
        self.states = sorted({record.state for record in records if record.state})
        self.crime_types = sorted({record.crime_type for record in records if record.crime_type})
        self._options_loaded = True
        return True

    # ------------------------------------------------------------------
    # Editing
    # ------------------------------------------------------------------
    def save_edit(
        self,
        person_id: str,
        changes: Mapping[str, Any],
        image: Optional[UploadFile] = None,
    ) -> Optional[CriminalRecord]:
        try:
            updated = self._update(self.client, person_id, image=image, **dict(changes))
        except ApiError as exc:
            LOGGER.error("Failed to update criminal %s: %s", person_id, exc.message)
            self.notifier.error(exc.message or "Failed to update criminal")
            return None
        self.records = [updated if record.person_id == person_id else record for record in self.records]
        self.notifier.success("Criminal record updated successfully")
        return updated

    def image_url(self, record: CriminalRecord) -> Optional[str]:
        return resolve_display_url(self.client, record)


__all__ = ["CriminalBrowser", "CriminalFilters", "EDITABLE_FIELDS", "OPTIONS_SCAN_LIMIT", "changed_fields", "option_index"]
