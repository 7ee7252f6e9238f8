from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime
from typing import List, Optional

from ..attendance.anomaly import AnomalyDetector
from ..attendance.model import AttendanceEvent, first_event_of
from ..attendance.repository import AttendanceRecordStore
from ..core.enums import AnomalyKind, AttendanceStatus, EventType, JustificationStatus
from ..core.exceptions import ValidationError
from ..common.datetime_utils import iter_days
from ..schedules.model import FixedAssignment, assignment_name, occurrence_on
from ..schedules.repository import ScheduleCatalog
from ..schedules.resolver import ScheduleResolver
from .calculator.base import PayrollCalculator
from .calculator.standard_calculator import StandardPayrollCalculator


@dataclass(frozen=True)
class DailySummary:
    employee_id: str
    work_date: date
    schedule_name: Optional[str]
    check_in: Optional[datetime]
    check_out: Optional[datetime]
    break_minutes: int
    worked_minutes: int
    expected_minutes: int
    overtime_minutes: int
    late_minutes: int
    status: Optional[AttendanceStatus]

    @property
    def worked_hours(self) -> str:
        return f"{self.worked_minutes // 60:02d}:{self.worked_minutes % 60:02d}"


class DailySummaryService:
    """Per employee-day timesheet figures.

    Lateness comes from the anomaly detector; it is never recomputed here.
    ``status`` is None for a day without schedule and without punches.
    """

    def __init__(
        self,
        store: AttendanceRecordStore,
        resolver: ScheduleResolver,
        catalog: ScheduleCatalog,
        *,
        detector: Optional[AnomalyDetector] = None,
        calculator: Optional[PayrollCalculator] = None,
    ):
        self._store = store
        self._resolver = resolver
        self._catalog = catalog
        self._detector = detector or AnomalyDetector()
        self._calculator = calculator or StandardPayrollCalculator()

    def summarize(self, employee_id: str, work_date: date) -> DailySummary:
        resolved = self._resolver.resolve(employee_id)
        settings = self._catalog.get_settings()
        events = self._store.get_events_for_employee_day(employee_id, work_date)
        check_in = first_event_of(events, EventType.CHECK_IN)
        check_out = first_event_of(events, EventType.CHECK_OUT)

        assignment = resolved.find(check_in.shift_ref if check_in else None) or resolved.primary
        occurrence = occurrence_on(assignment, work_date)
        lunch = assignment.schedule.lunch if isinstance(assignment, FixedAssignment) else None
        expected = self._calculator.expected_minutes(occurrence.window if occurrence else None, lunch)
        worked = self._calculator.worked_minutes(events)

        late = 0
        if check_in is not None:
            anomaly = self._detector.detect(check_in, resolved, settings)
            if anomaly.kind == AnomalyKind.LATE_ARRIVAL:
                late = anomaly.deviation_minutes or 0

        return DailySummary(
            employee_id=employee_id,
            work_date=work_date,
            schedule_name=assignment_name(assignment) if occurrence else None,
            check_in=check_in.timestamp if check_in else None,
            check_out=check_out.timestamp if check_out else None,
            break_minutes=self._calculator.break_minutes(events),
            worked_minutes=worked,
            expected_minutes=expected,
            overtime_minutes=max(worked - expected, 0) if check_out else 0,
            late_minutes=late,
            status=_day_status(check_in, occurrence is not None),
        )

    def build_report(self, employee_id: str, start: date, end: date) -> List[DailySummary]:
        if end < start:
            raise ValidationError("Report end date must not be before its start date")
        return [self.summarize(employee_id, day) for day in iter_days(start, end)]


def _day_status(check_in: Optional[AttendanceEvent], scheduled: bool) -> Optional[AttendanceStatus]:
    if check_in is None:
        return AttendanceStatus.ABSENT if scheduled else None
    justification = check_in.justification
    if justification is not None and justification.status == JustificationStatus.JUSTIFIED:
        return AttendanceStatus.EXCUSED
    return check_in.status
