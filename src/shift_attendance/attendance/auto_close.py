"""Close employee-days whose CHECK_OUT was never punched.

Meant to be run periodically by an external scheduler. Each open day is closed
with a synthetic CHECK_OUT at ``scheduled end + late check-out margin +
tolerance`` once that moment has passed. Re-running is a no-op.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from datetime import datetime, timedelta
from typing import List, Optional

from ..common.datetime_utils import now_local
from ..core.constants import AUTO_CLOSE_LOOKBACK_DAYS, AUTO_CLOSE_MARKER
from ..core.enums import DayState, EventType
from ..core.exceptions import ConfigurationError, DomainError, DuplicateEventError
from ..schedules.model import occurrence_on
from ..schedules.repository import ScheduleCatalog
from ..schedules.resolver import ScheduleResolver
from .model import first_event_of
from .repository import AttendanceRecordStore
from .sequencer import EventSequencer
from .service import AttendanceService

logger = logging.getLogger(__name__)


@dataclass
class AutoCloseStats:
    closed: int = 0
    skipped: int = 0
    errors: int = 0
    details: List[str] = field(default_factory=list)


class AutoCloseJob:
    def __init__(
        self,
        store: AttendanceRecordStore,
        resolver: ScheduleResolver,
        catalog: ScheduleCatalog,
        service: AttendanceService,
        *,
        lookback_days: int = AUTO_CLOSE_LOOKBACK_DAYS,
        sequencer: Optional[EventSequencer] = None,
    ):
        self._store = store
        self._resolver = resolver
        self._catalog = catalog
        self._service = service
        self._lookback_days = int(lookback_days)
        self._sequencer = sequencer or EventSequencer()

    def run(self, now: Optional[datetime] = None) -> AutoCloseStats:
        now = now or now_local()
        settings = self._catalog.get_settings()
        since = now.date() - timedelta(days=self._lookback_days)
        stats = AutoCloseStats()

        for employee_id, work_date in self._store.find_open_days(since):
            try:
                closed_at = self._close_day(employee_id, work_date, now, settings)
            except DuplicateEventError:
                stats.skipped += 1
                stats.details.append(f"{employee_id} {work_date}: already closed")
                continue
            except DomainError as exc:
                stats.errors += 1
                stats.details.append(f"{employee_id} {work_date}: {exc}")
                logger.warning("Auto-close failed for %s on %s: %s", employee_id, work_date, exc)
                continue

            if closed_at is None:
                stats.skipped += 1
            else:
                stats.closed += 1
                stats.details.append(f"{employee_id} {work_date}: closed at {closed_at:%Y-%m-%d %H:%M}")

        logger.info(
            "Auto-close run at %s: %s closed, %s skipped, %s errors",
            now,
            stats.closed,
            stats.skipped,
            stats.errors,
        )
        return stats

    def _close_day(self, employee_id, work_date, now, settings) -> Optional[datetime]:
        events = self._store.get_events_for_employee_day(employee_id, work_date)
        state = self._sequencer.state_of(events)
        if state not in (DayState.CHECKED_IN, DayState.ON_BREAK):
            return None

        check_in = first_event_of(events, EventType.CHECK_IN)
        resolved = self._resolver.resolve(employee_id, check_in.timestamp)
        assignment = resolved.find(check_in.shift_ref) or resolved.primary
        occurrence = occurrence_on(assignment, work_date)
        if occurrence is None:
            raise ConfigurationError(f"Schedule {check_in.shift_ref} has no occurrence on {work_date}")
        threshold = occurrence.end + timedelta(
            minutes=settings.late_check_out_margin_minutes + settings.tolerance_minutes
        )
        if now < threshold:
            return None

        if state == DayState.ON_BREAK:
            self._service.record_system_event(
                employee_id,
                EventType.BREAK_END,
                threshold,
                work_date=work_date,
                shift_ref=check_in.shift_ref,
                marked_by=AUTO_CLOSE_MARKER,
                notes="Break closed automatically",
            )
        self._service.record_system_event(
            employee_id,
            EventType.CHECK_OUT,
            threshold,
            work_date=work_date,
            shift_ref=check_in.shift_ref,
            marked_by=AUTO_CLOSE_MARKER,
            notes="Check-out recorded automatically",
        )
        return threshold
