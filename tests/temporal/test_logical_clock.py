"""
Logical Clock Tests
===================

INVARIANTS TESTED:
1. Replay mode returns recorded ticks in order, then raises ClockExhausted
2. Live mode records every tick it hands out
3. Naive datetimes are treated as UTC
"""

from datetime import datetime, timedelta, timezone

import pytest

from voicefield.temporal import ClockExhausted, LogicalClock


START = datetime(2024, 3, 1, 15, 45, tzinfo=timezone.utc)


class TestReplayClock:

    def test_returns_ticks_in_order(self):
        clock = LogicalClock.from_ticks([START, START + timedelta(seconds=5)])

        assert clock.now().value == START
        assert clock.now().value == START + timedelta(seconds=5)
        assert clock.tick_count() == 2
        assert not clock.is_live()

    def test_exhaustion_raises(self):
        clock = LogicalClock.from_ticks([START])
        clock.now()

        with pytest.raises(ClockExhausted):
            clock.now()

    def test_naive_ticks_become_utc(self):
        clock = LogicalClock.from_ticks([datetime(2024, 3, 1, 12, 0)])
        assert clock.now().value.tzinfo == timezone.utc

    def test_stepping(self):
        clock = LogicalClock.stepping(START, 3, step=timedelta(milliseconds=250))
        values = [clock.now().epoch_ms for _ in range(3)]

        assert values[1] - values[0] == 250
        assert values[2] - values[1] == 250

    def test_replay_of_same_ticks_is_identical(self):
        first = LogicalClock.stepping(START, 4)
        second = LogicalClock.stepping(START, 4)

        assert [first.now() for _ in range(4)] == [second.now() for _ in range(4)]


class TestLiveClock:

    def test_records_ticks(self):
        clock = LogicalClock.live()
        stamp = clock.now()

        assert clock.is_live()
        assert clock.tick_count() == 1
        assert clock.recorded_ticks() == [stamp.value]
        assert stamp.value.tzinfo is not None

    def test_live_ticks_replay(self):
        live = LogicalClock.live()
        stamps = [live.now() for _ in range(3)]

        replay = LogicalClock.from_ticks(live.recorded_ticks())
        assert [replay.now() for _ in range(3)] == stamps
