from __future__ import annotations

from dataclasses import dataclass, replace
from datetime import date, datetime
from typing import Optional, Sequence

from ..core.enums import AnomalyKind, AttendanceStatus, EventType, JustificationStatus


@dataclass(frozen=True)
class Justification:
    """Giải trình gắn với một lần chấm công."""

    text: str
    status: JustificationStatus
    submitted_at: datetime
    reviewed_by: Optional[str] = None
    reviewed_at: Optional[datetime] = None
    review_note: Optional[str] = None


@dataclass(frozen=True)
class AttendanceEvent:
    """Thực thể miền (domain): Một lần chấm công.

    ``work_date`` is the date on which the shift occurrence started, so an
    overnight check-out belongs to the previous calendar day.
    """

    employee_id: str
    event_type: EventType
    timestamp: datetime
    work_date: date
    status: AttendanceStatus
    event_id: Optional[int] = None
    shift_ref: Optional[str] = None
    notes: Optional[str] = None
    marked_by: Optional[str] = None
    auto_closed: bool = False
    justification: Optional[Justification] = None

    def with_id(self, event_id: int) -> "AttendanceEvent":
        return replace(self, event_id=event_id)


@dataclass(frozen=True)
class AnomalyResult:
    """Kết quả phát hiện bất thường (computed, never stored)."""

    has_anomaly: bool
    kind: Optional[AnomalyKind] = None
    expected_time: Optional[datetime] = None
    actual_time: Optional[datetime] = None
    deviation_minutes: Optional[int] = None
    shift_ref: Optional[str] = None
    work_date: Optional[date] = None


NO_ANOMALY = AnomalyResult(has_anomaly=False)


def first_event_of(events: Sequence[AttendanceEvent], event_type: EventType) -> Optional[AttendanceEvent]:
    for event in sorted(events, key=lambda e: e.timestamp):
        if event.event_type == event_type:
            return event
    return None
