"""Unit tests for the match search workflow."""

from __future__ import annotations

from unittest.mock import MagicMock

from policedash.client.errors import NetworkError
from policedash.client.models import MatchResponse, MatchResult
from policedash.client.uploads import UploadFile
from policedash.services.match_search import MatchSearch
from policedash.services.notifications import Notifier, Variant

IMAGE = UploadFile(filename="probe.png", content=b"\x89PNG", content_type="image/png")


def _search(settings, match_fn):
    notifier = Notifier()
    return MatchSearch(object(), notifier=notifier, settings=settings, match_fn=match_fn), notifier


def test_defaults_from_settings(settings):
    search, _ = _search(settings, MagicMock())
    assert search.parameters.similarity_threshold == 80.0
    assert search.parameters.create_alert is True
    assert search.parameters.max_results == 5


def test_search_without_file(settings):
    match_fn = MagicMock()
    search, notifier = _search(settings, match_fn)

    assert search.search() is None
    assert notifier.latest.description == "Please select an image to match"
    match_fn.assert_not_called()


def test_matches_found(settings):
    response = MatchResponse(
        matches=[
            MatchResult(person_id="P1", name="Asha", confidence=92.0),
            MatchResult(person_id="P2", name="Ravi", confidence=85.0),
        ]
    )
    match_fn = MagicMock(return_value=response)
    search, notifier = _search(settings, match_fn)
    search.select_file(IMAGE)
    search.parameters.create_alert = False

    assert search.search() is response
    assert notifier.latest.description == "Found 2 match(es)"
    assert match_fn.call_args.kwargs["create_alert"] is False


def test_no_matches_warns(settings):
    search, notifier = _search(settings, MagicMock(return_value=MatchResponse()))
    search.select_file(IMAGE)

    search.search()

    assert notifier.latest.variant is Variant.WARNING
    assert notifier.latest.description == "No matching faces found in the database"


def test_failure_notifies_error(settings):
    search, notifier = _search(settings, MagicMock(side_effect=NetworkError("Network error: offline")))
    search.select_file(IMAGE)

    assert search.search() is None
    assert notifier.latest.variant is Variant.ERROR
    assert search.result is None


def test_invalid_file_not_selected(settings):
    search, notifier = _search(settings, MagicMock())
    assert search.select_file(UploadFile(filename="a.txt", content=b"x", content_type="text/plain")) is False
    assert search.file is None
    assert notifier.latest.variant is Variant.ERROR
