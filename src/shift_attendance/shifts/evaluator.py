"""Shift status evaluation.

A reference moment is placed against the occurrences of a schedule that start
the day before, the same day, and the day after. Each occurrence spans
``[start - early margin, end + late check-out margin]`` and carries two
independent gates:

    check-in  = [start - early margin, start + tolerance]
    check-out = [end - early-departure tolerance, end + late check-out margin]

Comparisons are made at minute resolution.
"""

from __future__ import annotations

import math
from dataclasses import replace
from datetime import date, datetime, timedelta
from typing import Callable, List, Optional

from ..common.datetime_utils import as_local_naive, truncate_to_minute
from ..common.time_window import ShiftOccurrence, TimeWindow
from ..core.enums import ShiftStatus
from ..schedules.model import AttendanceSettings, ScheduleAssignment, assignment_name, assignment_ref, occurrence_on
from .model import ShiftStatusInfo

OccurrenceLookup = Callable[[date], Optional[ShiftOccurrence]]


def evaluate_window(window: TimeWindow, reference: datetime, settings: AttendanceSettings) -> ShiftStatusInfo:
    """Status of a daily-recurring window at ``reference``."""
    return _evaluate(lambda day: ShiftOccurrence(work_date=day, window=window), reference, settings)


def evaluate_assignment(
    assignment: ScheduleAssignment,
    reference: datetime,
    settings: AttendanceSettings,
) -> ShiftStatusInfo:
    return _evaluate(
        lambda day: occurrence_on(assignment, day),
        reference,
        settings,
        schedule_ref=assignment_ref(assignment),
        schedule_name=assignment_name(assignment),
    )


def occurrence_statuses(
    assignment: ScheduleAssignment,
    reference: datetime,
    settings: AttendanceSettings,
) -> List[ShiftStatusInfo]:
    """One status per occurrence starting the day before, the same day and the day after."""
    reference = truncate_to_minute(as_local_naive(reference))
    ref, name = assignment_ref(assignment), assignment_name(assignment)
    return [
        _classify(occurrence, reference, settings, schedule_ref=ref, schedule_name=name)
        for occurrence in _nearby(lambda day: occurrence_on(assignment, day), reference)
        if occurrence is not None
    ]


def occurrence_span(occurrence: ShiftOccurrence, settings: AttendanceSettings) -> tuple[datetime, datetime]:
    return (
        occurrence.start - timedelta(minutes=settings.early_check_in_margin_minutes),
        occurrence.end + timedelta(minutes=settings.late_check_out_margin_minutes),
    )


def check_in_window(occurrence: ShiftOccurrence, settings: AttendanceSettings) -> tuple[datetime, datetime]:
    return (
        occurrence.start - timedelta(minutes=settings.early_check_in_margin_minutes),
        occurrence.start + timedelta(minutes=settings.tolerance_minutes),
    )


def check_out_window(occurrence: ShiftOccurrence, settings: AttendanceSettings) -> tuple[datetime, datetime]:
    return (
        occurrence.end - timedelta(minutes=settings.early_departure_tolerance_minutes),
        occurrence.end + timedelta(minutes=settings.late_check_out_margin_minutes),
    )


def _evaluate(
    lookup: OccurrenceLookup,
    reference: datetime,
    settings: AttendanceSettings,
    *,
    schedule_ref: Optional[str] = None,
    schedule_name: Optional[str] = None,
) -> ShiftStatusInfo:
    """Summary status of a schedule at ``reference``.

    Adjacent occurrences may overlap (a night shift's check-out window and
    the next morning's check-in window). The summary describes the occurrence
    whose check-in window is open, else the one whose check-out window is
    open, else the one whose span contains ``reference``; ``can_check_in`` and
    ``can_check_out`` are true when any nearby occurrence allows the action.
    """
    reference = truncate_to_minute(as_local_naive(reference))
    previous, current, upcoming = _nearby(lookup, reference)
    statuses = [
        _classify(occurrence, reference, settings, schedule_ref=schedule_ref, schedule_name=schedule_name)
        for occurrence in (previous, current, upcoming)
        if occurrence is not None
    ]
    if not statuses:
        return ShiftStatusInfo(
            status=ShiftStatus.FINISHED,
            can_check_in=False,
            can_check_out=False,
            schedule_ref=schedule_ref,
            schedule_name=schedule_name,
        )

    chosen = next((s for s in statuses if s.can_check_in), None)
    if chosen is None:
        chosen = next((s for s in statuses if s.can_check_out), None)
    if chosen is None:
        chosen = next((s for s in statuses if s.status == ShiftStatus.IN_PROGRESS), None)
    if chosen is None:
        fallback = _fallback(previous, current, upcoming)
        chosen = next(s for s in statuses if s.work_date == fallback.work_date)

    return replace(
        chosen,
        can_check_in=any(s.can_check_in for s in statuses),
        can_check_out=any(s.can_check_out for s in statuses),
    )


def _nearby(lookup: OccurrenceLookup, reference: datetime) -> List[Optional[ShiftOccurrence]]:
    today = reference.date()
    return [lookup(today + timedelta(days=offset)) for offset in (-1, 0, 1)]


def _fallback(
    previous: Optional[ShiftOccurrence],
    current: Optional[ShiftOccurrence],
    upcoming: Optional[ShiftOccurrence],
) -> ShiftOccurrence:
    if previous is not None and previous.window.crosses_midnight:
        # Before tonight's lead-in an overnight schedule still belongs to last night.
        return previous
    return current or upcoming or previous


def _classify(
    occurrence: ShiftOccurrence,
    reference: datetime,
    settings: AttendanceSettings,
    *,
    schedule_ref: Optional[str],
    schedule_name: Optional[str],
) -> ShiftStatusInfo:
    in_opens, in_closes = check_in_window(occurrence, settings)
    out_opens, out_closes = check_out_window(occurrence, settings)

    starts_in = None
    if reference < in_opens:
        status = ShiftStatus.FUTURE
        starts_in = math.ceil((occurrence.start - reference).total_seconds() / 60)
    elif reference <= out_closes:
        status = ShiftStatus.IN_PROGRESS
    else:
        status = ShiftStatus.FINISHED

    in_progress = status == ShiftStatus.IN_PROGRESS
    return ShiftStatusInfo(
        status=status,
        can_check_in=in_progress and in_opens <= reference <= in_closes,
        can_check_out=in_progress and out_opens <= reference <= out_closes,
        starts_in_minutes=starts_in,
        work_date=occurrence.work_date,
        window=occurrence.window,
        schedule_ref=schedule_ref,
        schedule_name=schedule_name,
        check_in_window=(in_opens, in_closes),
        check_out_window=(out_opens, out_closes),
    )
