"""
Logical Clock for Deterministic Sessions
========================================

Injectable clock: every timestamp the session records goes through here.

GUARANTEES:
- Same fragments + same tick sequence = identical session states
- Never reads system time in replay mode
- All ticks handed out in live mode are kept, so a live run can be replayed
"""

from __future__ import annotations
from dataclasses import dataclass, field
from datetime import datetime, timedelta, timezone
from typing import Iterable, List, Optional

from ..contracts.base import Timestamp


class ClockExhausted(Exception):
    """Raised when replay clock runs out of ticks."""
    pass


@dataclass
class LogicalClock:
    """
    Injectable clock for deterministic execution.

    MODES:
    ======
    1. LIVE mode: Uses real system time, logs all ticks
    2. REPLAY mode: Uses a pre-recorded tick sequence
    """
    _ticks: List[datetime] = field(default_factory=list)
    _current_index: int = 0
    _is_live: bool = True

    def now(self) -> Timestamp:
        """
        Get current logical time.

        In LIVE mode: reads system time and logs it
        In REPLAY mode: returns next tick from recorded sequence
        """
        if self._is_live:
            current = datetime.now(timezone.utc)
            self._ticks.append(current)
            self._current_index = len(self._ticks)
            return Timestamp(current)

        if self._current_index >= len(self._ticks):
            raise ClockExhausted(
                f"Replay clock exhausted at index {self._current_index}. "
                f"Recorded sequence had {len(self._ticks)} ticks."
            )
        tick = self._ticks[self._current_index]
        self._current_index += 1
        return Timestamp(tick)

    def tick_count(self) -> int:
        """Number of ticks recorded/consumed."""
        return self._current_index

    def is_live(self) -> bool:
        return self._is_live

    def recorded_ticks(self) -> List[datetime]:
        """Copy of every tick handed out (live) or available (replay)."""
        return list(self._ticks)

    @classmethod
    def live(cls) -> LogicalClock:
        """Create clock in LIVE mode (uses system time)."""
        return cls(_is_live=True)

    @classmethod
    def from_ticks(cls, ticks: Iterable[datetime]) -> LogicalClock:
        """Create clock in REPLAY mode from an explicit tick sequence."""
        normalized = [
            t if t.tzinfo is not None else t.replace(tzinfo=timezone.utc)
            for t in ticks
        ]
        return cls(_ticks=normalized, _current_index=0, _is_live=False)

    @classmethod
    def stepping(
        cls,
        start: datetime,
        count: int,
        step: Optional[timedelta] = None
    ) -> LogicalClock:
        """REPLAY clock with `count` evenly spaced ticks from `start`."""
        step = step or timedelta(seconds=1)
        return cls.from_ticks(start + step * i for i in range(count))

    def __repr__(self) -> str:
        mode = "LIVE" if self._is_live else "REPLAY"
        return f"LogicalClock({mode}, ticks={len(self._ticks)}, index={self._current_index})"
