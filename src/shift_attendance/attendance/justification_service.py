from __future__ import annotations

import logging
from dataclasses import replace
from datetime import datetime, timedelta
from typing import Optional, Sequence

from ..common.datetime_utils import now_local
from ..common.validators import require_non_empty
from ..core.enums import JustificationStatus
from ..core.exceptions import JustificationError, ValidationError
from ..schedules.repository import ScheduleCatalog
from .model import AttendanceEvent, Justification
from .repository import AttendanceRecordStore

logger = logging.getLogger(__name__)

_REVIEW_OUTCOMES = (JustificationStatus.JUSTIFIED, JustificationStatus.REJECTED)


class JustificationService:
    """Giải trình: PENDING -> JUSTIFIED | REJECTED, attached once per event."""

    def __init__(self, store: AttendanceRecordStore, catalog: ScheduleCatalog):
        self._store = store
        self._catalog = catalog

    def justify_event(
        self,
        employee_id: str,
        event_id: int,
        text: str,
        *,
        now: Optional[datetime] = None,
    ) -> AttendanceEvent:
        now = now or now_local()
        try:
            text = require_non_empty(text, "Justification text")
        except ValidationError as exc:
            raise JustificationError(str(exc)) from exc

        event = self._store.get_by_id(event_id)
        if event is None or event.employee_id != employee_id:
            raise JustificationError("Attendance record not found")
        if event.justification is not None:
            raise JustificationError("This attendance record already has a justification")

        window_days = self._catalog.get_settings().justification_window_days
        if now - event.timestamp > timedelta(days=window_days):
            raise JustificationError(f"Justifications must be submitted within {window_days} days")

        justification = Justification(text=text, status=JustificationStatus.PENDING, submitted_at=now)
        self._save(event_id, justification)
        logger.info("Justification submitted for event %s by %s", event_id, employee_id)
        return replace(event, justification=justification)

    def review_justification(
        self,
        event_id: int,
        status: JustificationStatus,
        reviewer: str,
        *,
        note: Optional[str] = None,
        now: Optional[datetime] = None,
    ) -> AttendanceEvent:
        status = JustificationStatus(status)
        if status not in _REVIEW_OUTCOMES:
            raise JustificationError("A review must either justify or reject")

        event = self._store.get_by_id(event_id)
        if event is None or event.justification is None:
            raise JustificationError("No justification to review")
        if event.justification.status != JustificationStatus.PENDING:
            raise JustificationError("Justification has already been reviewed")

        reviewed = replace(
            event.justification,
            status=status,
            reviewed_by=require_non_empty(reviewer, "Reviewer"),
            reviewed_at=now or now_local(),
            review_note=note,
        )
        self._save(event_id, reviewed)
        logger.info("Justification for event %s marked %s by %s", event_id, status.value, reviewer)
        return replace(event, justification=reviewed)

    def list_pending_justifications(self, employee_id: Optional[str] = None) -> Sequence[AttendanceEvent]:
        return self._store.list_pending_justifications(employee_id)

    def _save(self, event_id: int, justification: Justification) -> None:
        if not self._store.save_justification(event_id, justification):
            raise JustificationError("Attendance record not found")
