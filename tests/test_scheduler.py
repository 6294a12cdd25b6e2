"""
Scheduler Tests

Tests for the virtual-clock scheduler and cancelable timer handles.
"""

import pytest

from src.meter import ManualScheduler, TimerHandle


class TestManualScheduler:
    """Tests for ManualScheduler."""

    def test_runs_in_due_order(self):
        scheduler = ManualScheduler()
        calls = []
        scheduler.call_later(30, lambda: calls.append("c"))
        scheduler.call_later(10, lambda: calls.append("a"))
        scheduler.call_later(20, lambda: calls.append("b"))

        assert scheduler.advance(25) == 2
        assert calls == ["a", "b"]
        assert scheduler.now_ms == 25
        scheduler.advance(5)
        assert calls == ["a", "b", "c"]

    def test_cancelled_callback_skipped(self):
        scheduler = ManualScheduler()
        calls = []
        handle = scheduler.call_later(10, lambda: calls.append("x"))
        assert scheduler.pending == 1

        handle.cancel()

        assert handle.cancelled
        assert scheduler.pending == 0
        scheduler.run_until_idle()
        assert calls == []

    def test_reschedule_from_callback(self):
        scheduler = ManualScheduler()
        ticks = []

        def tick():
            ticks.append(scheduler.now_ms)
            if len(ticks) < 3:
                scheduler.call_later(10, tick)

        scheduler.call_later(10, tick)
        assert scheduler.run_until_idle() == 3
        assert ticks == [10, 20, 30]

    def test_runaway_loop_detected(self):
        scheduler = ManualScheduler()

        def forever():
            scheduler.call_later(1, forever)

        scheduler.call_later(1, forever)
        with pytest.raises(RuntimeError):
            scheduler.run_until_idle(max_callbacks=50)


class TestTimerHandle:
    """Tests for TimerHandle."""

    def test_cancel_once(self):
        calls = []
        handle = TimerHandle(lambda: calls.append(1))
        handle.cancel()
        handle.cancel()
        assert calls == [1]
