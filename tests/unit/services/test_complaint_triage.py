"""Unit tests for complaint triage against an isolated SQLite store."""

from __future__ import annotations

import logging
from datetime import datetime, timedelta, timezone
from unittest.mock import MagicMock

import pytest

from policedash.services.complaint_triage import ComplaintBucket, ComplaintTriage, classify_status
from policedash.services.notifications import Notifier, Variant
from policedash.store.datastore import DataStoreError


@pytest.mark.parametrize(
    ("raw", "bucket"),
    [
        ("Pending", ComplaintBucket.PENDING),
        ("pending", ComplaintBucket.PENDING),
        ("submitted", ComplaintBucket.PENDING),
        ("Submitted", ComplaintBucket.PENDING),
        ("Open", ComplaintBucket.OPEN),
        ("open", ComplaintBucket.OPEN),
        ("Closed", ComplaintBucket.CLOSED),
        ("closed", ComplaintBucket.CLOSED),
        ("Resolved", ComplaintBucket.CLOSED),
        ("resolved", ComplaintBucket.CLOSED),
        ("IN_PROGRESS", ComplaintBucket.UNKNOWN),
        ("", ComplaintBucket.UNKNOWN),
        (None, ComplaintBucket.UNKNOWN),
    ],
)
def test_classify_status(raw, bucket):
    assert classify_status(raw) is bucket


def _seed(store):
    base = datetime(2026, 3, 1, tzinfo=timezone.utc)
    for index, (complaint_id, status) in enumerate(
        [("c1", "pending"), ("c2", "Open"), ("c3", "Resolved"), ("c4", "escalated")]
    ):
        store.insert(
            "complaints",
            {
                "id": complaint_id,
                "complaint_type": "Theft",
                "status": status,
                "created_at": base + timedelta(days=index),
            },
        )


def test_refresh_orders_newest_first_and_buckets(store, settings):
    _seed(store)
    triage = ComplaintTriage(store, settings=settings)

    rows = triage.refresh()

    assert [row["id"] for row in rows] == ["c4", "c3", "c2", "c1"]
    assert [row["id"] for row in triage.bucket(ComplaintBucket.UNKNOWN)] == ["c4"]
    counts = triage.counts()
    assert counts == {
        ComplaintBucket.PENDING: 1,
        ComplaintBucket.OPEN: 1,
        ComplaintBucket.CLOSED: 1,
        ComplaintBucket.UNKNOWN: 1,
    }
    assert sum(counts.values()) == len(rows)


def test_accept_moves_to_open_tab(store, settings):
    _seed(store)
    triage = ComplaintTriage(store, settings=settings)
    triage.refresh()

    assert triage.accept("c1") is True

    assert triage.active_tab is ComplaintBucket.OPEN
    assert {row["id"] for row in triage.bucket(ComplaintBucket.OPEN)} == {"c1", "c2"}
    assert store.select("complaints", filters={"id": "c1"})[0]["status"] == "Open"


def test_reject_moves_to_closed_tab(store, settings):
    _seed(store)
    triage = ComplaintTriage(store, settings=settings)
    triage.refresh()

    triage.reject("c1")

    assert triage.active_tab is ComplaintBucket.CLOSED
    assert store.select("complaints", filters={"id": "c1"})[0]["status"] == "Closed"


def test_update_failure_leaves_list_untouched(settings):
    store = MagicMock()
    store.select.return_value = [{"id": "c1", "status": "pending"}]
    store.update.side_effect = DataStoreError("database is locked")
    notifier = Notifier()
    triage = ComplaintTriage(store, notifier=notifier, settings=settings)
    triage.refresh()

    assert triage.accept("c1") is False

    assert triage.complaints == [{"id": "c1", "status": "pending"}]
    assert triage.active_tab is ComplaintBucket.PENDING
    assert notifier.latest.variant is Variant.ERROR


def test_change_feed_triggers_full_refetch(store, settings):
    triage = ComplaintTriage(store, settings=settings)
    triage.subscribe()
    assert triage.complaints == []

    store.insert("complaints", {"id": "c9", "status": "pending"})

    assert [row["id"] for row in triage.complaints] == ["c9"]
    triage.unsubscribe()
    store.insert("complaints", {"id": "c10", "status": "pending"})
    assert len(triage.complaints) == 1


def test_subscribe_failure_is_logged_not_raised(settings, caplog):
    store = MagicMock()
    store.subscribe.side_effect = RuntimeError("change feed closed")
    triage = ComplaintTriage(store, settings=settings)

    with caplog.at_level(logging.WARNING, logger="policedash.services.complaint_triage"):
        assert triage.subscribe() is None

    assert "Complaint subscription unavailable" in caplog.text
    triage.unsubscribe()
