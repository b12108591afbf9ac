"""Unit tests for the criminal record browser."""

from __future__ import annotations

from unittest.mock import MagicMock

from policedash.client.errors import HttpStatusError, NetworkError
from policedash.client.models import CriminalRecord
from policedash.services.criminal_browser import CriminalBrowser, changed_fields, option_index
from policedash.services.notifications import Notifier, Variant


def _records(count: int, start: int = 0, **fields) -> list[CriminalRecord]:
    return [CriminalRecord(person_id=f"P{start + i}", name=f"Person {start + i}", **fields) for i in range(count)]


class PagedApi:
    """Serves ``total`` records in pages, recording each call."""

    def __init__(self, total: int) -> None:
        self.total = total
        self.calls: list[dict] = []
        self.error: Exception | None = None

    def __call__(self, client, *, limit, offset, **filters):
        self.calls.append({"limit": limit, "offset": offset, **filters})
        if self.error:
            raise self.error
        remaining = max(0, min(limit, self.total - offset))
        return _records(remaining, start=offset, state="Kerala", crime_type="Theft")


def _browser(settings, list_fn, **kwargs):
    notifier = Notifier()
    browser = CriminalBrowser(
        object(),
        notifier=notifier,
        settings=settings,
        list_fn=list_fn,
        districts_fn=kwargs.get("districts_fn", MagicMock(return_value=["Kochi"])),
        update_fn=kwargs.get("update_fn", MagicMock()),
        debounce_seconds=60,
    )
    return browser, notifier


def test_paging_until_short_page(settings):
    api = PagedApi(total=45)
    browser, _ = _browser(settings, api)

    browser.reset()
    assert len(browser.records) == 20 and browser.has_more
    browser.load_more()
    assert len(browser.records) == 40 and browser.has_more
    browser.load_more()
    assert len(browser.records) == 45
    assert browser.has_more is False

    assert [call["offset"] for call in api.calls] == [0, 20, 40]
    browser.load_more()
    assert len(api.calls) == 3


def test_exact_page_boundary_reports_more(settings):
    browser, _ = _browser(settings, PagedApi(total=20))
    browser.reset()
    assert browser.has_more is True
    browser.load_more()
    assert browser.has_more is False
    assert len(browser.records) == 20


def test_reset_failure_empties_list(settings):
    api = PagedApi(total=30)
    browser, _ = _browser(settings, api)
    browser.reset()

    api.error = NetworkError("offline")
    browser.reset()

    assert browser.records == []
    assert browser.has_more is False
    assert browser.error == "offline"


def test_filter_changes_are_debounced(settings):
    api = PagedApi(total=5)
    browser, _ = _browser(settings, api)

    browser.set_filter("search", "As")
    browser.set_filter("search", "Asha")
    assert api.calls == []
    assert browser.debouncer.pending

    assert browser.debouncer.flush() is True
    assert len(api.calls) == 1
    assert api.calls[0]["search"] == "Asha"
    assert api.calls[0]["offset"] == 0


def test_clearing_state_clears_district(settings):
    districts_fn = MagicMock(return_value=["Kochi", "Thrissur"])
    browser, _ = _browser(settings, PagedApi(total=0), districts_fn=districts_fn)

    browser.set_filter("state", "Kerala")
    assert browser.districts == ["Kochi", "Thrissur"]
    browser.set_filter("district", "Kochi")

    browser.set_filter("state", "")
    browser.debouncer.cancel()

    assert browser.filters.district == ""
    assert browser.districts == []
    districts_fn.assert_called_once()


def test_filter_options_loaded_once_and_retryable(settings):
    api = PagedApi(total=3)
    api.error = NetworkError("offline")
    browser, _ = _browser(settings, api)

    assert browser.load_filter_options() is False
    api.error = None
    assert browser.load_filter_options() is True
    assert browser.load_filter_options() is True

    assert browser.states == ["Kerala"]
    assert browser.crime_types == ["Theft"]
    assert [call["limit"] for call in api.calls] == [1000, 1000]


def test_save_edit_replaces_local_record(settings):
    updated = CriminalRecord(person_id="P1", name="Renamed")
    update_fn = MagicMock(return_value=updated)
    browser, notifier = _browser(settings, PagedApi(total=3), update_fn=update_fn)
    browser.reset()

    assert browser.save_edit("P1", {"name": "Renamed", "district": ""}) is updated

    assert browser.records[1].name == "Renamed"
    assert update_fn.call_args.kwargs["district"] == ""
    assert notifier.latest.variant is Variant.SUCCESS


def test_save_edit_failure_notifies(settings):
    update_fn = MagicMock(side_effect=HttpStatusError("Resource not found", 404))
    browser, notifier = _browser(settings, PagedApi(total=1), update_fn=update_fn)
    browser.reset()

    assert browser.save_edit("P0", {"name": "x"}) is None
    assert browser.records[0].name == "Person 0"
    assert notifier.latest.description == "Resource not found"


def test_gender_option_matches_ignoring_case():
    options = ("", "male", "female", "other")
    assert option_index(options, "Male") == 1
    assert option_index(options, " FEMALE ") == 2
    assert option_index(options, None) == 0
    assert option_index(options, "unspecified") == 0


def test_changed_fields_keeps_stored_gender():
    record = CriminalRecord(person_id="P1", name="Asha", gender="Male", state="Kerala", district="Kochi")
    values = {"name": "Asha", "crime_type": "", "state": "Kerala", "district": "Ernakulam", "gender": "male"}

    assert changed_fields(record, values) == {"district": "Ernakulam"}


def test_changed_fields_sends_explicit_clear():
    record = CriminalRecord(person_id="P1", name="Asha", gender="female", crime_type="Theft")
    values = {"name": "Asha", "crime_type": "", "state": "", "district": "", "gender": ""}

    assert changed_fields(record, values) == {"crime_type": "", "gender": ""}
