"""Unit tests for the DataStore and its change feed."""

from __future__ import annotations

import pytest
import sqlalchemy as sa

from policedash.store.changes import ChangeFeed
from policedash.store.datastore import DataStore, DataStoreError


def test_tables_created(store):
    names = set(sa.inspect(store.engine).get_table_names())
    assert {"complaints", "users", "rti_requests", "admins"}.issubset(names)


def test_insert_generates_string_ids(store):
    row = store.insert("complaints", {"complaint_type": "Theft", "status": "pending"})

    assert row["id"]
    assert row["created_at"] is not None
    assert store.count("complaints") == 1


def test_select_filters_order_and_columns(store):
    store.insert("complaints", {"id": "c1", "status": "Open"})
    store.insert("complaints", {"id": "c2", "status": "Open"})
    store.insert("complaints", {"id": "c3", "status": "Closed"})

    rows = store.select("complaints", filters={"status": "Open"}, order_by="id", descending=True, columns=["id"])

    assert rows == [{"id": "c2"}, {"id": "c1"}]
    assert len(store.select("complaints", limit=1)) == 1


def test_update_returns_row_and_sets_updated_at(store):
    store.insert("complaints", {"id": "c1", "status": "pending"})

    updated = store.update("complaints", "c1", {"status": "Open"})

    assert updated["status"] == "Open"
    assert updated["updated_at"] is not None


def test_update_missing_row_raises(store):
    with pytest.raises(DataStoreError):
        store.update("complaints", "missing", {"status": "Open"})


def test_unknown_table_raises(store):
    with pytest.raises(DataStoreError):
        store.select("alerts")


def test_duplicate_admin_email_wrapped(store):
    store.insert("admins", {"email": "a@police.gov.in", "password": "x"})
    with pytest.raises(DataStoreError):
        store.insert("admins", {"email": "a@police.gov.in", "password": "y"})


def test_find_admin_matches_email_and_password(store):
    store.insert("admins", {"email": "a@police.gov.in", "password": "x"})

    assert store.find_admin("a@police.gov.in", "x")["email"] == "a@police.gov.in"
    assert store.find_admin("a@police.gov.in", "wrong") is None


def test_writes_publish_change_events(store):
    events = []
    subscription = store.subscribe("complaints", events.append)

    store.insert("complaints", {"id": "c1", "status": "pending"})
    store.update("complaints", "c1", {"status": "Open"})
    subscription.unsubscribe()
    store.update("complaints", "c1", {"status": "Closed"})

    assert [event.event_type for event in events] == ["INSERT", "UPDATE"]
    assert events[1].row["status"] == "Open"


def test_change_feed_isolates_failing_callbacks():
    feed = ChangeFeed()
    received = []

    def broken(event):
        raise RuntimeError("render failed")

    feed.subscribe("users", broken)
    feed.subscribe("users", received.append)
    feed.subscribe("complaints", received.append)

    delivered = feed.publish("users", "INSERT", {"chat_id": 1})

    assert delivered == 1
    assert len(received) == 1
    assert received[0].table == "users"
    assert feed.subscriber_count("users") == 2


def test_failed_write_publishes_nothing(store):
    events = []
    store.subscribe("complaints", events.append)

    with pytest.raises(DataStoreError):
        store.update("complaints", "missing", {"status": "Open"})

    assert events == []


def test_schema_creation_failure_wrapped(tmp_path, settings):
    engine = sa.create_engine(f"sqlite:///{tmp_path / 'missing' / 'policedash.db'}", future=True)

    with pytest.raises(DataStoreError) as excinfo:
        DataStore(engine=engine, settings=settings, create_schema=True)

    assert str(excinfo.value).startswith("Could not create schema")
    engine.dispose()
