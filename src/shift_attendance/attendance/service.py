from __future__ import annotations

import logging
from dataclasses import replace
from datetime import date, datetime, timedelta
from typing import Dict, List, Optional, Sequence, Tuple

from ..common.datetime_utils import as_local_naive, now_local
from ..common.time_window import ShiftOccurrence
from ..core.enums import AnomalyKind, AttendanceStatus, DayState, EventType, ShiftStatus
from ..core.exceptions import AttendanceDisabledError, InvalidSequenceError, OutsideWindowError
from ..incidents.reporter import IncidentReporter, LoggingIncidentReporter
from ..schedules.model import AttendanceSettings, ResolvedSchedule, ScheduleAssignment, assignment_ref
from ..schedules.repository import ScheduleCatalog
from ..schedules.resolver import ScheduleResolver
from ..shifts.evaluator import evaluate_assignment, occurrence_statuses
from ..shifts.model import ShiftStatusInfo
from .anomaly import AnomalyDetector
from .model import AttendanceEvent, first_event_of
from .repository import AttendanceRecordStore
from .sequencer import EventSequencer

logger = logging.getLogger(__name__)

_GATED = (EventType.CHECK_IN, EventType.CHECK_OUT)

Candidate = Tuple[ScheduleAssignment, ShiftStatusInfo]


class AttendanceService:
    """Entry point for punches: resolve, gate, sequence, detect, persist, report."""

    def __init__(
        self,
        store: AttendanceRecordStore,
        resolver: ScheduleResolver,
        catalog: ScheduleCatalog,
        *,
        incidents: Optional[IncidentReporter] = None,
        detector: Optional[AnomalyDetector] = None,
        sequencer: Optional[EventSequencer] = None,
    ):
        self._store = store
        self._resolver = resolver
        self._catalog = catalog
        self._incidents = incidents or LoggingIncidentReporter()
        self._detector = detector or AnomalyDetector()
        self._sequencer = sequencer or EventSequencer()

    def resolve_schedule(self, employee_id: str, at: Optional[datetime] = None) -> ResolvedSchedule:
        return self._resolver.resolve(employee_id, at or now_local())

    def evaluate_shift_status(self, employee_id: str, at: Optional[datetime] = None) -> List[ShiftStatusInfo]:
        """One status per candidate schedule, primary first."""
        at = as_local_naive(at or now_local())
        resolved = self._resolver.resolve(employee_id, at)
        settings = self._catalog.get_settings()
        return [evaluate_assignment(candidate, at, settings) for candidate in resolved.candidates]

    def get_day_events(self, employee_id: str, work_date: date) -> Sequence[AttendanceEvent]:
        return self._store.get_events_for_employee_day(employee_id, work_date)

    def record_event(
        self,
        employee_id: str,
        event_type: EventType,
        at: Optional[datetime] = None,
        *,
        notes: Optional[str] = None,
        marked_by: Optional[str] = None,
    ) -> AttendanceEvent:
        event_type = EventType(event_type)
        at = as_local_naive(at or now_local())
        settings = self._catalog.get_settings()

        if settings.attendance_enabled_from and at < settings.attendance_enabled_from:
            raise AttendanceDisabledError(
                f"Attendance is enabled from {settings.attendance_enabled_from:%Y-%m-%d %H:%M}"
            )

        resolved = self._resolver.resolve(employee_id, at)
        # One candidate per nearby occurrence, since adjacent occurrences can both be open.
        candidates = [(c, s) for c in resolved.candidates for s in occurrence_statuses(c, at, settings)]
        day_cache: Dict[date, Sequence[AttendanceEvent]] = {}

        if event_type in _GATED:
            assignment, work_date = self._pick_gated(
                employee_id, event_type, at, candidates, resolved, settings, day_cache
            )
        else:
            assignment, work_date = self._pick_break(employee_id, event_type, at, candidates, resolved, day_cache)

        event = AttendanceEvent(
            employee_id=employee_id,
            event_type=event_type,
            timestamp=at,
            work_date=work_date,
            status=AttendanceStatus.PRESENT,
            shift_ref=assignment_ref(assignment),
            notes=notes,
            marked_by=marked_by,
        )
        return self._persist(event, resolved, settings)

    def record_system_event(
        self,
        employee_id: str,
        event_type: EventType,
        at: datetime,
        *,
        work_date: date,
        shift_ref: Optional[str],
        marked_by: str,
        notes: Optional[str] = None,
    ) -> AttendanceEvent:
        """Record a synthetic event for a known employee-day, bypassing window gates.

        Sequencing still applies. Used by batch jobs that have already decided
        which occurrence the event belongs to.
        """
        settings = self._catalog.get_settings()
        resolved = self._resolver.resolve(employee_id, at)
        self._sequencer.validate(self._store.get_events_for_employee_day(employee_id, work_date), event_type)
        event = AttendanceEvent(
            employee_id=employee_id,
            event_type=EventType(event_type),
            timestamp=at,
            work_date=work_date,
            status=AttendanceStatus.PRESENT,
            shift_ref=shift_ref,
            notes=notes,
            marked_by=marked_by,
            auto_closed=True,
        )
        return self._persist(event, resolved, settings)

    def _persist(self, event: AttendanceEvent, resolved: ResolvedSchedule, settings: AttendanceSettings) -> AttendanceEvent:
        anomaly = self._detector.detect(event, resolved, settings)
        if anomaly.kind == AnomalyKind.LATE_ARRIVAL:
            event = replace(event, status=AttendanceStatus.LATE)

        saved = self._store.append(event)
        logger.info(
            "Recorded %s for %s at %s (work date %s, shift %s, status %s)",
            saved.event_type.value,
            saved.employee_id,
            saved.timestamp,
            saved.work_date,
            saved.shift_ref,
            saved.status.value,
        )
        if anomaly.has_anomaly:
            self._incidents.on_anomaly_detected(anomaly, saved.employee_id, saved.event_id)
        return saved

    def _pick_gated(
        self,
        employee_id: str,
        event_type: EventType,
        at: datetime,
        candidates: List[Candidate],
        resolved: ResolvedSchedule,
        settings: AttendanceSettings,
        day_cache: Dict[date, Sequence[AttendanceEvent]],
    ) -> Tuple[ScheduleAssignment, date]:
        accepting = [(a, s) for a, s in candidates if _accepts(event_type, s, at, settings)]
        # Occurrences whose own window is open win over lenient matches.
        accepting.sort(key=lambda candidate: not _within_gate(event_type, candidate[1]))

        if not accepting:
            # Sequencing errors take precedence over window errors.
            in_progress = [s.work_date for _, s in candidates if s.status == ShiftStatus.IN_PROGRESS]
            if not in_progress:
                fallback = at.date()
            else:
                fallback = in_progress[-1] if event_type == EventType.CHECK_IN else in_progress[0]
            self._sequencer.validate(self._day(employee_id, fallback, day_cache), event_type)
            statuses = [evaluate_assignment(a, at, settings) for a in resolved.candidates]
            described = "; ".join(s.describe() for s in statuses)
            logger.info("Refused %s for %s at %s: outside every window", event_type.value, employee_id, at)
            raise OutsideWindowError(
                f"{event_type.value} at {at:%H:%M} is outside the allowed windows: {described}",
                event_type=event_type,
                candidates=statuses,
            )

        legal = [
            (a, s)
            for a, s in accepting
            if self._sequencer.allows(self._day(employee_id, s.work_date, day_cache), event_type)
        ]
        if not legal:
            first = accepting[0][1]
            logger.info("Refused %s for %s at %s: out of sequence", event_type.value, employee_id, at)
            self._sequencer.validate(self._day(employee_id, first.work_date, day_cache), event_type)

        if event_type == EventType.CHECK_OUT:
            for assignment, status in legal:
                check_in = first_event_of(self._day(employee_id, status.work_date, day_cache), EventType.CHECK_IN)
                if check_in is not None and check_in.shift_ref == assignment_ref(assignment):
                    return assignment, status.work_date

        assignment, status = legal[0]
        return assignment, status.work_date

    def _pick_break(
        self,
        employee_id: str,
        event_type: EventType,
        at: datetime,
        candidates: List[Candidate],
        resolved: ResolvedSchedule,
        day_cache: Dict[date, Sequence[AttendanceEvent]],
    ) -> Tuple[ScheduleAssignment, date]:
        """Breaks are not window-gated; they attach to the open employee-day."""
        dates: List[date] = []
        for _, status in candidates:
            if status.status == ShiftStatus.IN_PROGRESS and status.work_date not in dates:
                dates.append(status.work_date)
        for day in (at.date(), at.date() - timedelta(days=1)):
            if day not in dates:
                dates.append(day)

        for day in dates:
            events = self._day(employee_id, day, day_cache)
            if self._sequencer.state_of(events) in (DayState.CHECKED_IN, DayState.ON_BREAK):
                self._sequencer.validate(events, event_type)
                check_in = first_event_of(events, EventType.CHECK_IN)
                assignment = resolved.find(check_in.shift_ref if check_in else None) or resolved.primary
                return assignment, day

        logger.info("Refused %s for %s at %s: no open day", event_type.value, employee_id, at)
        self._sequencer.validate(self._day(employee_id, dates[0], day_cache), event_type)
        raise InvalidSequenceError(f"{event_type.value} refused: no open attendance day")

    def _day(
        self,
        employee_id: str,
        work_date: date,
        cache: Dict[date, Sequence[AttendanceEvent]],
    ) -> Sequence[AttendanceEvent]:
        if work_date not in cache:
            cache[work_date] = self._store.get_events_for_employee_day(employee_id, work_date)
        return cache[work_date]


def _within_gate(event_type: EventType, status: ShiftStatusInfo) -> bool:
    return status.can_check_in if event_type == EventType.CHECK_IN else status.can_check_out


def _accepts(event_type: EventType, status: ShiftStatusInfo, at: datetime, settings: AttendanceSettings) -> bool:
    """Strict mode needs the action's own window; lenient mode lets the detector classify.

    Lenient check-ins run until scheduled end + tolerance, lenient check-outs
    from scheduled start onward.
    """
    if settings.enforce_action_windows:
        return _within_gate(event_type, status)
    if status.status != ShiftStatus.IN_PROGRESS:
        return False
    occurrence = ShiftOccurrence(work_date=status.work_date, window=status.window)
    minute = at.replace(second=0, microsecond=0)
    if event_type == EventType.CHECK_IN:
        return minute <= occurrence.end + timedelta(minutes=settings.tolerance_minutes)
    return minute >= occurrence.start
