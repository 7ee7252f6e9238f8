from __future__ import annotations

from typing import Optional, Sequence

from .base import PayrollCalculator
from ...attendance.model import AttendanceEvent, first_event_of
from ...common.datetime_utils import minutes_between
from ...common.time_window import TimeWindow
from ...core.enums import EventType


class StandardPayrollCalculator(PayrollCalculator):
    """Standard rule: (out - in) - paired breaks, not below 0."""

    def break_minutes(self, events: Sequence[AttendanceEvent]) -> int:
        total = 0
        started = None
        for event in sorted(events, key=lambda e: e.timestamp):
            if event.event_type == EventType.BREAK_START:
                started = event.timestamp
            elif event.event_type == EventType.BREAK_END and started is not None:
                total += max(minutes_between(started, event.timestamp), 0)
                started = None
        return total

    def worked_minutes(self, events: Sequence[AttendanceEvent]) -> int:
        check_in = first_event_of(events, EventType.CHECK_IN)
        check_out = first_event_of(events, EventType.CHECK_OUT)
        if not check_in or not check_out:
            return 0
        minutes = minutes_between(check_in.timestamp, check_out.timestamp)
        minutes -= self.break_minutes(events)
        return max(minutes, 0)

    def expected_minutes(self, window: Optional[TimeWindow], lunch: Optional[TimeWindow]) -> int:
        if window is None:
            return 0
        minutes = window.duration_minutes
        if lunch is not None:
            minutes -= window.overlap_minutes(lunch)
        return max(minutes, 0)
