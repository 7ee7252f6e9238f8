"""Wall-clock windows and their concrete occurrences.

A ``TimeWindow`` whose end is earlier than its start crosses midnight and ends
on the next calendar day. Every wraparound computation in the engine goes
through this module.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime, time, timedelta

from ..core.constants import MAX_SHIFT_MINUTES, MIN_SHIFT_MINUTES, MINUTES_PER_DAY
from ..core.exceptions import ConfigurationError
from .validators import parse_time_of_day


def minute_of_day(value: time) -> int:
    return value.hour * 60 + value.minute


@dataclass(frozen=True)
class TimeWindow:
    start: time
    end: time

    @classmethod
    def parse(cls, start: str, end: str) -> "TimeWindow":
        return cls(start=parse_time_of_day(start, "start"), end=parse_time_of_day(end, "end"))

    @property
    def crosses_midnight(self) -> bool:
        return self.end < self.start

    @property
    def start_minute(self) -> int:
        return minute_of_day(self.start)

    @property
    def end_minute(self) -> int:
        """End on the unwrapped timeline (may exceed a day for overnight windows)."""
        end = minute_of_day(self.end)
        if self.crosses_midnight:
            end += MINUTES_PER_DAY
        return end

    @property
    def duration_minutes(self) -> int:
        return self.end_minute - self.start_minute

    def overlap_minutes(self, other: "TimeWindow") -> int:
        total = 0
        for shift in (0, MINUTES_PER_DAY):
            lo = max(self.start_minute, other.start_minute + shift)
            hi = min(self.end_minute, other.end_minute + shift)
            total += max(0, hi - lo)
        return total

    def label(self) -> str:
        return f"{self.start.strftime('%H:%M')}-{self.end.strftime('%H:%M')}"

    def __str__(self) -> str:
        return self.label()


@dataclass(frozen=True)
class ShiftOccurrence:
    """A window pinned to the calendar date on which it starts."""

    work_date: date
    window: TimeWindow

    @property
    def start(self) -> datetime:
        return datetime.combine(self.work_date, self.window.start)

    @property
    def end(self) -> datetime:
        return self.start + timedelta(minutes=self.window.duration_minutes)


def ensure_reasonable_window(window: TimeWindow, context: str) -> TimeWindow:
    """Reject windows shorter than an hour or longer than twelve."""
    duration = window.duration_minutes
    if duration == 0:
        # Same start and end is read as a full day, which no shift may last.
        duration = MINUTES_PER_DAY
    if duration < MIN_SHIFT_MINUTES:
        raise ConfigurationError(f"{context}: window {window} is shorter than {MIN_SHIFT_MINUTES} minutes")
    if duration > MAX_SHIFT_MINUTES:
        raise ConfigurationError(f"{context}: window {window} is longer than {MAX_SHIFT_MINUTES // 60} hours")
    return window
