"""Tests for ManualBackend."""

import pytest

from ticktock.scheduling import ManualBackend, NextTurnBackend, TimerBackend


class TestManualBackend:
    """Test ManualBackend implementation."""

    def test_implements_protocols(self):
        """Backend implements both the timed and next-turn protocols."""
        backend = ManualBackend()
        assert isinstance(backend, TimerBackend)
        assert isinstance(backend, NextTurnBackend)
        assert backend.name == "manual"

    def test_clock_starts_at_given_time(self):
        assert ManualBackend().now() == 0.0
        assert ManualBackend(start=1500).now() == 1500.0

    def test_advance_moves_clock(self):
        backend = ManualBackend()
        backend.advance(25)
        backend.advance(5)
        assert backend.now() == 30.0

    def test_advance_backwards_rejected(self):
        with pytest.raises(ValueError):
            ManualBackend().advance(-1)

    def test_once_fires_at_deadline(self):
        backend = ManualBackend()
        seen = []
        backend.schedule_once(lambda: seen.append(backend.now()), 40)

        assert backend.advance(39) == 0
        assert backend.advance(10) == 1
        assert seen == [40.0]
        assert backend.now() == 49.0

    def test_fires_in_deadline_order(self):
        backend = ManualBackend()
        seen = []
        backend.schedule_once(lambda: seen.append("late"), 30)
        backend.schedule_once(lambda: seen.append("early"), 10)
        backend.schedule_once(lambda: seen.append("tie"), 10)

        backend.advance(30)
        assert seen == ["early", "tie", "late"]

    def test_negative_delay_fires_now(self):
        backend = ManualBackend()
        seen = []
        backend.schedule_once(lambda: seen.append(backend.now()), -5)
        backend.run_pending()
        assert seen == [0.0]

    def test_cancel_once(self):
        backend = ManualBackend()
        handle = backend.schedule_once(lambda: pytest.fail("cancelled"), 10)
        backend.cancel_once(handle)
        assert backend.pending == 0
        assert backend.advance(20) == 0

    def test_repeating_catches_up_within_one_advance(self):
        backend = ManualBackend()
        seen = []
        backend.schedule_repeating(lambda: seen.append(backend.now()), 100)

        assert backend.advance(1000) == 10
        assert seen == [100.0 * i for i in range(1, 11)]

    def test_repeating_period_clamped(self):
        backend = ManualBackend(min_interval_ms=5)
        seen = []
        backend.schedule_repeating(lambda: seen.append(backend.now()), 1)
        backend.advance(10)
        assert seen == [5.0, 10.0]

    def test_cancel_repeating_from_callback(self):
        backend = ManualBackend()
        seen = []

        def once():
            seen.append(backend.now())
            backend.cancel_repeating(handle)

        handle = backend.schedule_repeating(once, 10)
        backend.advance(100)
        assert seen == [10.0]
        assert backend.pending == 0

    def test_next_turn_runs_before_timed_work(self):
        backend = ManualBackend()
        seen = []
        backend.schedule_once(lambda: seen.append("timed"), 0)
        backend.schedule_next_turn(lambda: seen.append("next-turn"))
        backend.run_pending()
        assert seen == ["next-turn", "timed"]

    def test_next_turn_requeue_waits_for_next_drain(self):
        """A next-turn callback that re-queues itself cannot stall advance()."""
        backend = ManualBackend()
        count = 0

        def again():
            nonlocal count
            count += 1
            backend.schedule_next_turn(again)

        backend.schedule_next_turn(again)
        backend.run_pending()
        assert count == 1
        backend.run_pending()
        assert count == 2

    def test_cancel_next_turn(self):
        backend = ManualBackend()
        handle = backend.schedule_next_turn(lambda: pytest.fail("cancelled"))
        backend.cancel_next_turn(handle)
        assert backend.run_pending() == 0

    def test_callback_errors_propagate(self):
        backend = ManualBackend()
        seen = []

        def boom():
            seen.append(backend.now())
            raise RuntimeError("boom")

        backend.schedule_repeating(boom, 10)
        with pytest.raises(RuntimeError, match="boom"):
            backend.advance(100)

        # The clock stopped at the failing fire and the interval stays booked
        assert backend.now() == 10.0
        assert backend.pending == 1
        assert backend.next_deadline() == 20.0

    def test_next_deadline(self):
        backend = ManualBackend()
        assert backend.next_deadline() is None

        backend.schedule_once(lambda: None, 50)
        assert backend.next_deadline() == 50.0

        backend.schedule_next_turn(lambda: None)
        assert backend.next_deadline() == 0.0

    def test_health(self):
        backend = ManualBackend()
        backend.schedule_once(lambda: None, 5)
        backend.schedule_once(lambda: None, 50)
        backend.advance(10)

        health = backend.health()
        assert health["healthy"] is True
        assert health["backend"] == "manual"
        assert health["now_ms"] == 10.0
        assert health["pending"] == 1
        assert health["fired"] == 1
