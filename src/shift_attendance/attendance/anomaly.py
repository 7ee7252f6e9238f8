from __future__ import annotations

import logging
from dataclasses import replace
from datetime import date, datetime
from typing import List, Optional, Sequence

from ..core.enums import AnomalyKind, EventType
from ..schedules.model import AttendanceSettings, ResolvedSchedule, ScheduleAssignment, assignment_ref, occurrence_on
from ..shifts.evaluator import occurrence_span
from .factory import AnomalyStrategyFactory
from .model import NO_ANOMALY, AnomalyResult, AttendanceEvent, first_event_of

logger = logging.getLogger(__name__)


class AnomalyDetector:
    """Compares recorded punches with the schedule they were recorded against.

    Detection is pure: results are returned to the caller and never stored.
    """

    def __init__(self, factory: Optional[AnomalyStrategyFactory] = None) -> None:
        self._factory = factory or AnomalyStrategyFactory()

    def detect(
        self,
        event: AttendanceEvent,
        resolved: ResolvedSchedule,
        settings: AttendanceSettings,
    ) -> AnomalyResult:
        if event.auto_closed or event.event_type not in (EventType.CHECK_IN, EventType.CHECK_OUT):
            return NO_ANOMALY

        assignment = _assignment_for(resolved, event.shift_ref)
        occurrence = occurrence_on(assignment, event.work_date)
        if occurrence is None:
            logger.debug("No occurrence of %s on %s", assignment_ref(assignment), event.work_date)
            return NO_ANOMALY

        if event.event_type == EventType.CHECK_IN:
            expected = occurrence.start
            strategy = self._factory.for_check_in(actual=event.timestamp, expected_start=expected, settings=settings)
        else:
            expected = occurrence.end
            strategy = self._factory.for_check_out(actual=event.timestamp, expected_end=expected, settings=settings)

        result = strategy.classify(expected=expected, actual=event.timestamp, settings=settings)
        if not result.has_anomaly:
            return result
        return replace(result, shift_ref=assignment_ref(assignment), work_date=event.work_date)

    def sweep_day(
        self,
        *,
        work_date: date,
        events: Sequence[AttendanceEvent],
        resolved: ResolvedSchedule,
        settings: AttendanceSettings,
        now: datetime,
    ) -> List[AnomalyResult]:
        """Day-level anomalies, available only once every check-out window of the day has closed.

        Returns at most one ABSENCE or one UNREGISTERED_EXIT.
        """
        occurrences = []
        for assignment in resolved.candidates:
            occurrence = occurrence_on(assignment, work_date)
            if occurrence is not None:
                occurrences.append((assignment, occurrence))
        if not occurrences:
            return []
        if any(now <= occurrence_span(occurrence, settings)[1] for _, occurrence in occurrences):
            return []

        check_in = first_event_of(events, EventType.CHECK_IN)
        check_out = first_event_of(events, EventType.CHECK_OUT)

        if check_in is None:
            assignment, occurrence = occurrences[0]
            return [
                AnomalyResult(
                    has_anomaly=True,
                    kind=AnomalyKind.ABSENCE,
                    expected_time=occurrence.start,
                    shift_ref=assignment_ref(assignment),
                    work_date=work_date,
                )
            ]

        if check_out is None or check_out.auto_closed:
            assignment = _assignment_for(resolved, check_in.shift_ref)
            occurrence = occurrence_on(assignment, work_date)
            return [
                AnomalyResult(
                    has_anomaly=True,
                    kind=AnomalyKind.UNREGISTERED_EXIT,
                    expected_time=occurrence.end if occurrence else None,
                    actual_time=check_out.timestamp if check_out else None,
                    shift_ref=assignment_ref(assignment),
                    work_date=work_date,
                )
            ]
        return []


def _assignment_for(resolved: ResolvedSchedule, shift_ref: Optional[str]) -> ScheduleAssignment:
    return resolved.find(shift_ref) or resolved.primary
