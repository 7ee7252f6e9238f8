from __future__ import annotations

from datetime import date
from typing import Any, Dict, Optional, Sequence, Tuple

import mysql.connector

from ..core.enums import AttendanceStatus, EventType, JustificationStatus
from ..core.exceptions import DuplicateEventError
from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall, fetchone, is_duplicate_key
from .model import AttendanceEvent, Justification
from .repository import AttendanceRecordStore

_SELECT_EVENTS = """
    SELECT
        e.event_id, e.employee_id, e.event_type, e.event_ts, e.work_date, e.status,
        e.shift_ref, e.notes, e.marked_by, e.auto_closed,
        j.text AS j_text, j.status AS j_status, j.submitted_at AS j_submitted_at,
        j.reviewed_by AS j_reviewed_by, j.reviewed_at AS j_reviewed_at, j.review_note AS j_review_note
    FROM attendance_events e
    LEFT JOIN attendance_justifications j ON j.event_id = e.event_id
"""

_GUARDED = (EventType.CHECK_IN, EventType.CHECK_OUT)


def _to_event(r: Dict[str, Any]) -> AttendanceEvent:
    justification = None
    if r.get("j_status"):
        justification = Justification(
            text=r["j_text"],
            status=JustificationStatus(r["j_status"]),
            submitted_at=r["j_submitted_at"],
            reviewed_by=r.get("j_reviewed_by"),
            reviewed_at=r.get("j_reviewed_at"),
            review_note=r.get("j_review_note"),
        )
    return AttendanceEvent(
        employee_id=str(r["employee_id"]),
        event_type=EventType(r["event_type"]),
        timestamp=r["event_ts"],
        work_date=r["work_date"],
        status=AttendanceStatus(r["status"]),
        event_id=int(r["event_id"]),
        shift_ref=r.get("shift_ref"),
        notes=r.get("notes"),
        marked_by=r.get("marked_by"),
        auto_closed=bool(r.get("auto_closed")),
        justification=justification,
    )


class MySQLAttendanceRepository(AttendanceRecordStore):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def get_events_for_employee_day(self, employee_id: str, work_date: date) -> Sequence[AttendanceEvent]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                _SELECT_EVENTS
                + """
                WHERE e.employee_id=%s AND e.work_date=%s
                ORDER BY e.event_ts, e.event_id
                """,
                (employee_id, work_date),
            )
            return [_to_event(r) for r in fetchall(cur)]

    def append(self, event: AttendanceEvent) -> AttendanceEvent:
        guard = event.event_type.value if event.event_type in _GUARDED else None
        try:
            with db_cursor(self._conn_factory) as (_, cur):
                cur.execute(
                    """
                    INSERT INTO attendance_events(
                        employee_id, event_type, event_ts, work_date, status,
                        shift_ref, notes, marked_by, auto_closed, unique_guard
                    )
                    VALUES(%s,%s,%s,%s,%s,%s,%s,%s,%s,%s)
                    """,
                    (
                        event.employee_id,
                        event.event_type.value,
                        event.timestamp,
                        event.work_date,
                        event.status.value,
                        event.shift_ref,
                        event.notes,
                        event.marked_by,
                        1 if event.auto_closed else 0,
                        guard,
                    ),
                )
                event_id = int(cur.lastrowid)
        except mysql.connector.IntegrityError as exc:
            if is_duplicate_key(exc):
                raise DuplicateEventError(
                    f"{event.event_type.value} already recorded for {event.employee_id} on {event.work_date}"
                ) from exc
            raise
        return event.with_id(event_id)

    def get_by_id(self, event_id: int) -> Optional[AttendanceEvent]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(_SELECT_EVENTS + " WHERE e.event_id=%s", (int(event_id),))
            r = fetchone(cur)
            return _to_event(r) if r else None

    def save_justification(self, event_id: int, justification: Justification) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("SELECT event_id FROM attendance_events WHERE event_id=%s", (int(event_id),))
            if not fetchone(cur):
                return False
            cur.execute(
                """
                INSERT INTO attendance_justifications(
                    event_id, text, status, submitted_at, reviewed_by, reviewed_at, review_note
                )
                VALUES(%s,%s,%s,%s,%s,%s,%s)
                ON DUPLICATE KEY UPDATE
                    status=VALUES(status),
                    reviewed_by=VALUES(reviewed_by),
                    reviewed_at=VALUES(reviewed_at),
                    review_note=VALUES(review_note)
                """,
                (
                    int(event_id),
                    justification.text,
                    justification.status.value,
                    justification.submitted_at,
                    justification.reviewed_by,
                    justification.reviewed_at,
                    justification.review_note,
                ),
            )
            return True

    def list_pending_justifications(self, employee_id: Optional[str] = None) -> Sequence[AttendanceEvent]:
        clauses = ["j.status=%s"]
        params: list[object] = [JustificationStatus.PENDING.value]
        if employee_id is not None:
            clauses.append("e.employee_id=%s")
            params.append(employee_id)

        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                _SELECT_EVENTS + f" WHERE {' AND '.join(clauses)} ORDER BY j.submitted_at, e.event_id",
                tuple(params),
            )
            return [_to_event(r) for r in fetchall(cur)]

    def find_open_days(self, since: date) -> Sequence[Tuple[str, date]]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                SELECT ci.employee_id, ci.work_date
                FROM attendance_events ci
                LEFT JOIN attendance_events co
                    ON co.employee_id = ci.employee_id
                    AND co.work_date = ci.work_date
                    AND co.event_type = 'CHECK_OUT'
                WHERE ci.event_type = 'CHECK_IN'
                    AND ci.work_date >= %s
                    AND co.event_id IS NULL
                ORDER BY ci.work_date, ci.employee_id
                """,
                (since,),
            )
            return [(str(r["employee_id"]), r["work_date"]) for r in fetchall(cur)]
