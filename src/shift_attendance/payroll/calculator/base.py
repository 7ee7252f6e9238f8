from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Optional, Sequence

from ...attendance.model import AttendanceEvent
from ...common.time_window import TimeWindow


class PayrollCalculator(ABC):
    """Calculator interface (Strategy Pattern for payroll)."""

    @abstractmethod
    def break_minutes(self, events: Sequence[AttendanceEvent]) -> int:
        raise NotImplementedError

    @abstractmethod
    def worked_minutes(self, events: Sequence[AttendanceEvent]) -> int:
        raise NotImplementedError

    @abstractmethod
    def expected_minutes(self, window: Optional[TimeWindow], lunch: Optional[TimeWindow]) -> int:
        raise NotImplementedError
