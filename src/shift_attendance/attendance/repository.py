from __future__ import annotations

from datetime import date
from typing import Optional, Protocol, Sequence, Tuple

from .model import AttendanceEvent, Justification


class AttendanceRecordStore(Protocol):
    """Append-only store of attendance events."""

    def get_events_for_employee_day(self, employee_id: str, work_date: date) -> Sequence[AttendanceEvent]:
        """Events of the employee-day ordered by timestamp."""

        raise NotImplementedError

    def append(self, event: AttendanceEvent) -> AttendanceEvent:
        """Persist ``event`` and return it with its id.

        Must atomically reject a second CHECK_IN or CHECK_OUT for the same
        employee and work date by raising ``DuplicateEventError``.
        """

        raise NotImplementedError

    def get_by_id(self, event_id: int) -> Optional[AttendanceEvent]:
        raise NotImplementedError

    def save_justification(self, event_id: int, justification: Justification) -> bool:
        raise NotImplementedError

    def list_pending_justifications(self, employee_id: Optional[str] = None) -> Sequence[AttendanceEvent]:
        raise NotImplementedError

    def find_open_days(self, since: date) -> Sequence[Tuple[str, date]]:
        """(employee_id, work_date) pairs with a CHECK_IN and no CHECK_OUT."""

        raise NotImplementedError
