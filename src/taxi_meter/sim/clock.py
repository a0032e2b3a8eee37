# sim/clock.py
from __future__ import annotations

from dataclasses import dataclass
from datetime import UTC, datetime, timedelta

SEC = 1.0
MIN = 60.0


def format_elapsed(seconds: int) -> str:
    """MM:SS, minutes keep growing past 99 instead of rolling into hours."""
    seconds = max(0, int(seconds))
    mins, secs = divmod(seconds, int(MIN))
    return f"{mins:02d}:{secs:02d}"


@dataclass(frozen=True)
class SimClock:
    epoch: datetime  # wall-time zero of t=0

    @classmethod
    def utc_epoch(cls, y: int, m: int, d: int, hh=0, mm=0, ss=0) -> SimClock:
        return cls(datetime(y, m, d, hh, mm, ss, tzinfo=UTC))

    @classmethod
    def now_utc(cls) -> SimClock:
        return cls(datetime.now(UTC).replace(microsecond=0))

    # kernel seconds -> wall
    def to_wall(self, t: float) -> datetime:
        return self.epoch + timedelta(seconds=t)
