from datetime import date, datetime, time

import pytest

from shift_attendance.common.time_window import ShiftOccurrence, TimeWindow, ensure_reasonable_window
from shift_attendance.common.validators import parse_time_of_day, require_non_empty
from shift_attendance.core.exceptions import ConfigurationError, ValidationError


def test_overnight_window_crosses_midnight():
    window = TimeWindow.parse("22:00", "06:00")

    assert window.crosses_midnight
    assert window.duration_minutes == 8 * 60
    assert window.label() == "22:00-06:00"


def test_day_window_does_not_cross_midnight():
    window = TimeWindow.parse("06:00", "14:00")

    assert not window.crosses_midnight
    assert window.duration_minutes == 480


def test_occurrence_of_overnight_window_ends_next_day():
    occurrence = ShiftOccurrence(work_date=date(2024, 3, 4), window=TimeWindow.parse("22:00", "06:00"))

    assert occurrence.start == datetime(2024, 3, 4, 22, 0)
    assert occurrence.end == datetime(2024, 3, 5, 6, 0)


def test_overlap_with_lunch():
    office = TimeWindow.parse("08:00", "17:00")

    assert office.overlap_minutes(TimeWindow.parse("12:00", "13:00")) == 60
    assert office.overlap_minutes(TimeWindow.parse("16:30", "18:00")) == 30
    assert office.overlap_minutes(TimeWindow.parse("18:00", "19:00")) == 0


def test_overlap_across_midnight():
    night = TimeWindow.parse("22:00", "06:00")

    assert night.overlap_minutes(TimeWindow.parse("02:00", "03:00")) == 60
    assert night.overlap_minutes(TimeWindow.parse("23:30", "00:30")) == 60


def test_parse_time_of_day_rejects_invalid_values():
    assert parse_time_of_day("7:05") == time(7, 5)
    for bad in ("24:00", "12:60", "noon", ""):
        with pytest.raises(ValidationError):
            parse_time_of_day(bad)


def test_require_non_empty_strips():
    assert require_non_empty("  x ", "field") == "x"
    with pytest.raises(ValidationError):
        require_non_empty("   ", "field")


@pytest.mark.parametrize("start,end", [("08:00", "08:30"), ("06:00", "19:00"), ("08:00", "08:00")])
def test_unreasonable_windows_are_configuration_errors(start, end):
    with pytest.raises(ConfigurationError):
        ensure_reasonable_window(TimeWindow.parse(start, end), "Shift X")


def test_twelve_hour_overnight_window_is_accepted():
    window = TimeWindow.parse("19:00", "07:00")

    assert ensure_reasonable_window(window, "Shift X") is window
