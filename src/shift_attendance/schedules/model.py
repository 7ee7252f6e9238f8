from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date, datetime
from typing import FrozenSet, Mapping, Optional, Tuple, Union

from ..common.time_window import ShiftOccurrence, TimeWindow
from ..core import constants
from ..core.enums import AssignmentSource, SupernumeraryMode
from ..shifts.model import RotatingShift

FIXED_SCHEDULE_REF = "FIXED"


@dataclass(frozen=True)
class FixedWeeklySchedule:
    """Lịch cố định theo tuần.

    ``days`` is keyed by ``date.weekday()`` (0 = Monday). A missing weekday means
    the day is not scheduled. Empty assignment lists make the schedule an
    agency-wide default.
    """

    days: Mapping[int, TimeWindow] = field(default_factory=dict)
    lunch: Optional[TimeWindow] = None
    assigned_areas: FrozenSet[str] = field(default_factory=frozenset)
    assigned_positions: FrozenSet[str] = field(default_factory=frozenset)
    name: str = "Fixed schedule"

    def window_for(self, day: date) -> Optional[TimeWindow]:
        return self.days.get(day.weekday())

    @property
    def is_empty(self) -> bool:
        return not self.days

    @property
    def declares_assignments(self) -> bool:
        return bool(self.assigned_areas or self.assigned_positions)

    def lists(self, *, area_id: Optional[str], position_id: Optional[str]) -> bool:
        if area_id and area_id in self.assigned_areas:
            return True
        return bool(position_id and position_id in self.assigned_positions)


@dataclass(frozen=True)
class SupernumeraryPolicy:
    mode: SupernumeraryMode
    allowed_shift_ids: FrozenSet[str] = field(default_factory=frozenset)
    fixed_schedule: Optional[FixedWeeklySchedule] = None


@dataclass(frozen=True)
class AttendanceSettings:
    """Global tolerances (minutes) applied around every schedule boundary."""

    tolerance_minutes: int = constants.DEFAULT_TOLERANCE_MINUTES
    early_check_in_margin_minutes: int = constants.DEFAULT_EARLY_CHECK_IN_MARGIN_MINUTES
    late_check_out_margin_minutes: int = constants.DEFAULT_LATE_CHECK_OUT_MARGIN_MINUTES
    early_departure_tolerance_minutes: int = constants.DEFAULT_EARLY_DEPARTURE_TOLERANCE_MINUTES
    enforce_action_windows: bool = False
    attendance_enabled_from: Optional[datetime] = None
    justification_window_days: int = constants.JUSTIFICATION_WINDOW_DAYS


@dataclass(frozen=True)
class FixedAssignment:
    schedule: FixedWeeklySchedule
    source: AssignmentSource = AssignmentSource.FIXED_SCHEDULE


@dataclass(frozen=True)
class RotatingAssignment:
    shift: RotatingShift
    source: AssignmentSource = AssignmentSource.AREA_POSITION


ScheduleAssignment = Union[FixedAssignment, RotatingAssignment]


def assignment_ref(assignment: ScheduleAssignment) -> str:
    if isinstance(assignment, RotatingAssignment):
        return assignment.shift.shift_id
    return FIXED_SCHEDULE_REF


def assignment_name(assignment: ScheduleAssignment) -> str:
    if isinstance(assignment, RotatingAssignment):
        return assignment.shift.shift_name
    return assignment.schedule.name


def occurrence_on(assignment: ScheduleAssignment, work_date: date) -> Optional[ShiftOccurrence]:
    """The occurrence of ``assignment`` that starts on ``work_date``, if scheduled."""
    if isinstance(assignment, RotatingAssignment):
        return ShiftOccurrence(work_date=work_date, window=assignment.shift.time_window)
    if isinstance(assignment, FixedAssignment):
        window = assignment.schedule.window_for(work_date)
        return ShiftOccurrence(work_date=work_date, window=window) if window else None
    raise TypeError(f"Unsupported schedule assignment: {type(assignment)!r}")


@dataclass(frozen=True)
class ResolvedSchedule:
    """Schedule(s) an employee may punch against at a given moment.

    ``candidates`` always contains ``primary`` first; further entries are the
    alternates of a multi-shift employee, sorted by start time.
    """

    employee_id: str
    primary: ScheduleAssignment
    candidates: Tuple[ScheduleAssignment, ...]

    @property
    def multiple_shifts(self) -> bool:
        return len(self.candidates) > 1

    @property
    def is_replacement(self) -> bool:
        return self.primary.source == AssignmentSource.SUPERNUMERARY_REPLACEMENT

    def find(self, ref: Optional[str]) -> Optional[ScheduleAssignment]:
        for candidate in self.candidates:
            if assignment_ref(candidate) == ref:
                return candidate
        return None
