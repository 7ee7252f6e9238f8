from datetime import date, datetime

from shift_attendance.attendance.model import AttendanceEvent
from shift_attendance.common.time_window import TimeWindow
from shift_attendance.core.enums import AttendanceStatus, EventType
from shift_attendance.payroll.calculator.standard_calculator import StandardPayrollCalculator


def _event(event_type, hour, minute=0, day=4):
    return AttendanceEvent(
        employee_id="e1",
        event_type=event_type,
        timestamp=datetime(2024, 3, day, hour, minute),
        work_date=date(2024, 3, 4),
        status=AttendanceStatus.PRESENT,
    )


def test_worked_minutes_subtracts_paired_breaks():
    events = [
        _event(EventType.CHECK_IN, 8, 0),
        _event(EventType.BREAK_START, 12, 0),
        _event(EventType.BREAK_END, 12, 30),
        _event(EventType.BREAK_START, 15, 0),
        _event(EventType.BREAK_END, 15, 10),
        _event(EventType.CHECK_OUT, 17, 0),
    ]

    calc = StandardPayrollCalculator()

    assert calc.break_minutes(events) == 40
    assert calc.worked_minutes(events) == 9 * 60 - 40


def test_open_day_has_no_worked_minutes():
    assert StandardPayrollCalculator().worked_minutes([_event(EventType.CHECK_IN, 8)]) == 0


def test_overnight_worked_minutes():
    events = [_event(EventType.CHECK_IN, 22, 0), _event(EventType.CHECK_OUT, 6, 0, day=5)]

    assert StandardPayrollCalculator().worked_minutes(events) == 480


def test_expected_minutes_subtract_lunch_overlap():
    calc = StandardPayrollCalculator()

    assert calc.expected_minutes(TimeWindow.parse("08:00", "17:00"), TimeWindow.parse("12:00", "13:00")) == 480
    assert calc.expected_minutes(TimeWindow.parse("22:00", "06:00"), None) == 480
    assert calc.expected_minutes(None, None) == 0
