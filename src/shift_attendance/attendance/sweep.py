from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import date, datetime
from typing import List, Optional

from ..common.datetime_utils import now_local
from ..core.exceptions import DomainError
from ..employees.repository import EmployeeDirectory
from ..incidents.reporter import IncidentReporter, LoggingIncidentReporter
from ..schedules.repository import ScheduleCatalog
from ..schedules.resolver import ScheduleResolver
from .anomaly import AnomalyDetector
from .model import AnomalyResult
from .repository import AttendanceRecordStore

logger = logging.getLogger(__name__)


@dataclass
class SweepStats:
    reported: int = 0
    clean: int = 0
    errors: int = 0


class EndOfDaySweep:
    """Reports ABSENCE / UNREGISTERED_EXIT for finished employee-days.

    Classification is recomputed from the stored events on every run, so a
    CHECK_IN recorded between two runs removes the ABSENCE. Nothing is written.
    """

    def __init__(
        self,
        store: AttendanceRecordStore,
        resolver: ScheduleResolver,
        catalog: ScheduleCatalog,
        directory: EmployeeDirectory,
        *,
        incidents: Optional[IncidentReporter] = None,
        detector: Optional[AnomalyDetector] = None,
    ):
        self._store = store
        self._resolver = resolver
        self._catalog = catalog
        self._directory = directory
        self._incidents = incidents or LoggingIncidentReporter()
        self._detector = detector or AnomalyDetector()

    def classify_employee_day(
        self,
        employee_id: str,
        work_date: date,
        now: Optional[datetime] = None,
    ) -> List[AnomalyResult]:
        resolved = self._resolver.resolve(employee_id, now)
        return self._detector.sweep_day(
            work_date=work_date,
            events=self._store.get_events_for_employee_day(employee_id, work_date),
            resolved=resolved,
            settings=self._catalog.get_settings(),
            now=now or now_local(),
        )

    def run(self, work_date: date, now: Optional[datetime] = None) -> SweepStats:
        now = now or now_local()
        stats = SweepStats()
        for employee_id in self._directory.list_active_employee_ids():
            try:
                anomalies = self.classify_employee_day(employee_id, work_date, now)
            except DomainError as exc:
                stats.errors += 1
                logger.warning("Sweep failed for %s on %s: %s", employee_id, work_date, exc)
                continue

            if not anomalies:
                stats.clean += 1
                continue
            for anomaly in anomalies:
                self._incidents.on_anomaly_detected(anomaly, employee_id, None)
                stats.reported += 1

        logger.info(
            "End-of-day sweep for %s: %s reported, %s clean, %s errors",
            work_date,
            stats.reported,
            stats.clean,
            stats.errors,
        )
        return stats
