"""Unit tests for the debouncer and transient notifications."""

from __future__ import annotations

import threading

from policedash.services.debounce import Debouncer
from policedash.services.notifications import Notifier, Variant


def test_only_latest_call_runs_on_flush():
    calls = []
    debouncer = Debouncer(60, lambda value: calls.append(value))

    debouncer.call("a")
    debouncer.call("ab")
    debouncer.call("abc")
    assert calls == []

    assert debouncer.flush() is True
    assert calls == ["abc"]
    assert debouncer.flush() is False


def test_cancel_drops_pending_call():
    calls = []
    debouncer = Debouncer(60, lambda: calls.append(1))

    debouncer.call()
    debouncer.cancel()

    assert not debouncer.pending
    assert debouncer.flush() is False
    assert calls == []


def test_timer_fires_after_quiet_period():
    fired = threading.Event()
    debouncer = Debouncer(0.01, fired.set)

    debouncer.call()

    assert fired.wait(timeout=2.0)
    assert not debouncer.pending


def test_notifications_expire():
    now = [100.0]
    notifier = Notifier(clock=lambda: now[0])

    notifier.success("Saved")
    now[0] = 103.0
    notifier.error("Failed")
    assert [item.variant for item in notifier.active()] == [Variant.SUCCESS, Variant.ERROR]

    now[0] = 105.0
    assert [item.description for item in notifier.active()] == ["Failed"]

    now[0] = 108.0
    assert notifier.active() == []


def test_dismiss_notification():
    notifier = Notifier()
    first = notifier.warning("Careful")
    notifier.push("Info", "Heads up")

    notifier.dismiss(first.id)

    assert [item.title for item in notifier.active()] == ["Info"]
    assert notifier.latest.variant is Variant.DEFAULT
