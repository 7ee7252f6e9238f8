from datetime import date, datetime

import pytest

from fakes import InMemoryAttendanceStore, InMemoryCatalog, InMemoryDirectory, office_week
from shift_attendance.attendance.justification_service import JustificationService
from shift_attendance.attendance.service import AttendanceService
from shift_attendance.core.enums import AttendanceStatus, EventType, JustificationStatus
from shift_attendance.core.exceptions import ValidationError
from shift_attendance.payroll.service import DailySummaryService
from shift_attendance.schedules.model import AttendanceSettings
from shift_attendance.schedules.resolver import ScheduleResolver

MONDAY = date(2024, 3, 4)


def _setup():
    directory = InMemoryDirectory().add("e1", area_id="A1")
    catalog = InMemoryCatalog(fixed=office_week(), settings=AttendanceSettings(enforce_action_windows=False))
    store = InMemoryAttendanceStore()
    resolver = ScheduleResolver(catalog, directory)
    attendance = AttendanceService(store, resolver, catalog)
    return DailySummaryService(store, resolver, catalog), attendance, JustificationService(store, catalog)


def _work_monday(attendance):
    check_in = attendance.record_event("e1", EventType.CHECK_IN, datetime(2024, 3, 4, 8, 20))
    attendance.record_event("e1", EventType.BREAK_START, datetime(2024, 3, 4, 12, 0))
    attendance.record_event("e1", EventType.BREAK_END, datetime(2024, 3, 4, 12, 45))
    attendance.record_event("e1", EventType.CHECK_OUT, datetime(2024, 3, 4, 18, 0))
    return check_in


def test_summary_of_a_late_day_with_overtime():
    summaries, attendance, _ = _setup()
    _work_monday(attendance)

    summary = summaries.summarize("e1", MONDAY)

    assert summary.status == AttendanceStatus.LATE
    assert summary.late_minutes == 20
    assert summary.break_minutes == 45
    assert summary.worked_minutes == 535
    assert summary.worked_hours == "08:55"
    assert summary.expected_minutes == 480
    assert summary.overtime_minutes == 55
    assert summary.schedule_name == "Fixed schedule"


def test_justified_late_day_is_excused():
    summaries, attendance, justifications = _setup()
    check_in = _work_monday(attendance)
    justifications.justify_event("e1", check_in.event_id, "doctor", now=datetime(2024, 3, 4, 19, 0))
    justifications.review_justification(check_in.event_id, JustificationStatus.JUSTIFIED, "hr")

    summary = summaries.summarize("e1", MONDAY)

    assert summary.status == AttendanceStatus.EXCUSED
    assert summary.late_minutes == 20


def test_report_covers_every_day_in_range():
    summaries, attendance, _ = _setup()
    _work_monday(attendance)

    report = summaries.build_report("e1", MONDAY, date(2024, 3, 10))

    assert [s.work_date.day for s in report] == [4, 5, 6, 7, 8, 9, 10]
    assert report[1].status == AttendanceStatus.ABSENT
    assert report[1].expected_minutes == 480
    assert report[1].worked_minutes == 0
    assert report[5].status is None
    assert report[5].expected_minutes == 0


def test_report_rejects_reversed_range():
    summaries, _, _ = _setup()

    with pytest.raises(ValidationError):
        summaries.build_report("e1", date(2024, 3, 10), MONDAY)
