"""Tests for the session stopwatch and rest countdown."""

from datetime import datetime, timedelta

import pytest

from lift_tracker.core.timers import RestCountdown, Stopwatch, format_clock

T0 = datetime(2026, 3, 2, 18, 0, 0)


@pytest.mark.parametrize(
    "seconds, expected",
    [(0, "00:00"), (59.9, "00:59"), (75, "01:15"), (3600, "60:00"), (-5, "00:00")],
)
def test_format_clock(seconds, expected):
    assert format_clock(seconds) == expected


class TestStopwatch:
    def test_idle(self):
        watch = Stopwatch()
        assert not watch.is_running
        assert watch.elapsed(T0) == 0.0

    def test_running_elapsed(self):
        watch = Stopwatch()
        watch.start(T0)
        assert watch.is_running
        assert watch.elapsed(T0 + timedelta(seconds=30)) == 30.0

    def test_stop_and_resume_accumulate(self):
        watch = Stopwatch()
        watch.start(T0)
        watch.stop(T0 + timedelta(seconds=30))
        assert watch.elapsed(T0 + timedelta(seconds=90)) == 30.0

        watch.start(T0 + timedelta(seconds=100))
        assert watch.elapsed(T0 + timedelta(seconds=110)) == 40.0

    def test_start_while_running_is_ignored(self):
        watch = Stopwatch()
        watch.start(T0)
        watch.start(T0 + timedelta(seconds=20))
        assert watch.elapsed(T0 + timedelta(seconds=30)) == 30.0

    def test_reset(self):
        watch = Stopwatch()
        watch.start(T0)
        watch.stop(T0 + timedelta(seconds=30))
        watch.reset()
        assert not watch.is_running
        assert watch.elapsed(T0 + timedelta(seconds=60)) == 0.0


class TestRestCountdown:
    def test_defaults(self):
        countdown = RestCountdown()
        assert countdown.duration == 60
        assert countdown.remaining == 60
        assert not countdown.is_running

    def test_counts_down_and_finishes(self):
        countdown = RestCountdown()
        countdown.set_duration(3)
        countdown.start()

        assert countdown.tick() is False
        assert countdown.tick() is False
        assert countdown.tick() is True
        assert countdown.remaining == 0
        assert not countdown.is_running

    def test_tick_when_stopped(self):
        countdown = RestCountdown()
        assert countdown.tick(10) is False
        assert countdown.remaining == 60

    def test_does_not_go_negative(self):
        countdown = RestCountdown(duration=5, remaining=5)
        countdown.start()
        assert countdown.tick(30) is True
        assert countdown.remaining == 0

    def test_reset_refills(self):
        countdown = RestCountdown()
        countdown.set_duration(90)
        countdown.start()
        countdown.tick(40)
        countdown.reset()
        assert not countdown.is_running
        assert countdown.remaining == 90

    def test_rejects_negative_duration(self):
        with pytest.raises(ValueError):
            RestCountdown().set_duration(-1)
