from __future__ import annotations

import logging
from datetime import date
from typing import Optional, Protocol, Set, Tuple

from ..attendance.model import AnomalyResult
from ..core.enums import AnomalyKind

logger = logging.getLogger(__name__)

IncidentKey = Tuple[str, Optional[date], Optional[AnomalyKind], Optional[int]]


def incident_key(result: AnomalyResult, employee_id: str, event_id: Optional[int]) -> IncidentKey:
    """Stable identity of a reported anomaly.

    Day-level anomalies (ABSENCE, UNREGISTERED_EXIT) have no event id and are
    reported again each time the sweep runs for the same day.
    """
    return (employee_id, result.work_date, result.kind, event_id)


class IncidentReporter(Protocol):
    """Collaborator that turns anomalies into memoranda/incidents.

    Implementations must treat repeated calls with the same ``incident_key``
    as one incident.
    """

    def on_anomaly_detected(self, result: AnomalyResult, employee_id: str, event_id: Optional[int]) -> None:
        raise NotImplementedError


class LoggingIncidentReporter:
    """Default reporter: records each anomaly once in the application log."""

    def __init__(self) -> None:
        self._seen: Set[IncidentKey] = set()

    def on_anomaly_detected(self, result: AnomalyResult, employee_id: str, event_id: Optional[int]) -> None:
        key = incident_key(result, employee_id, event_id)
        if key in self._seen:
            logger.debug("Anomaly %s already reported", key)
            return
        self._seen.add(key)
        logger.warning(
            "Anomaly %s for employee %s (event=%s, work_date=%s, deviation=%s min)",
            result.kind.value if result.kind else None,
            employee_id,
            event_id,
            result.work_date,
            result.deviation_minutes,
        )
