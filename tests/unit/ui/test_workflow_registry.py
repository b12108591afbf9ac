"""Unit tests for per-session workflow bookkeeping."""

from __future__ import annotations

import gc
from unittest.mock import MagicMock

from policedash.services.citizens import CitizensOverview
from policedash.services.complaint_triage import ComplaintTriage
from policedash.ui.registry import WorkflowRegistry


def _subscribed(registry: WorkflowRegistry, store, settings) -> None:
    registry.get("complaints", lambda: ComplaintTriage(store, settings=settings)).subscribe()
    registry.get("citizens", lambda: CitizensOverview(store)).subscribe()


def test_get_builds_once():
    registry = WorkflowRegistry()
    factory = MagicMock(side_effect=lambda: object())

    first = registry.get("match", factory)

    assert registry.get("match", factory) is first
    assert factory.call_count == 1
    assert "match" in registry


def test_clear_detaches_change_feed_subscribers(store, settings):
    registry = WorkflowRegistry()
    _subscribed(registry, store, settings)
    assert store.changes.subscriber_count("complaints") == 1
    assert store.changes.subscriber_count("users") == 1

    registry.clear()

    assert store.changes.subscriber_count("complaints") == 0
    assert store.changes.subscriber_count("users") == 0
    assert len(registry) == 0


def test_repeated_sessions_do_not_accumulate_subscribers(store, settings):
    for _ in range(4):
        registry = WorkflowRegistry()
        _subscribed(registry, store, settings)
        registry.clear()

    assert store.changes.subscriber_count("complaints") == 0


def test_discarded_registry_detaches_on_collection(store, settings):
    registry = WorkflowRegistry()
    _subscribed(registry, store, settings)

    del registry
    gc.collect()

    assert store.changes.subscriber_count("complaints") == 0
    assert store.changes.subscriber_count("users") == 0


def test_clear_cancels_pending_debounce():
    registry = WorkflowRegistry()
    browser = MagicMock(spec=["debouncer"])
    registry.get("criminals", lambda: browser)

    registry.clear()

    browser.debouncer.cancel.assert_called_once_with()
