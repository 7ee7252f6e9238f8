from datetime import date, datetime

import pytest

from fakes import AFTERNOON, MORNING, NIGHT, InMemoryAttendanceStore, InMemoryCatalog, InMemoryDirectory, RecordingIncidents
from shift_attendance.attendance.service import AttendanceService
from shift_attendance.core.enums import AnomalyKind, AttendanceStatus, EventType, ShiftStatus
from shift_attendance.core.exceptions import (
    AttendanceDisabledError,
    DuplicateEventError,
    InvalidSequenceError,
    OutsideWindowError,
)
from shift_attendance.schedules.model import AttendanceSettings, FixedWeeklySchedule
from shift_attendance.schedules.resolver import ScheduleResolver

D = date(2024, 3, 4)
STRICT = AttendanceSettings(enforce_action_windows=True)


def _service(*, bindings=("night",), settings=None, store=None):
    directory = InMemoryDirectory().add("e1", area_id="A1", bindings=bindings)
    catalog = InMemoryCatalog(shifts=[MORNING, AFTERNOON, NIGHT], settings=settings or AttendanceSettings())
    store = store or InMemoryAttendanceStore()
    incidents = RecordingIncidents()
    svc = AttendanceService(store, ScheduleResolver(catalog, directory), catalog, incidents=incidents)
    return svc, store, incidents


def test_overnight_round_trip_is_stored_under_start_date():
    svc, store, incidents = _service()

    check_in = svc.record_event("e1", EventType.CHECK_IN, datetime(2024, 3, 4, 21, 50))
    check_out = svc.record_event("e1", EventType.CHECK_OUT, datetime(2024, 3, 5, 6, 5))

    assert check_in.work_date == D
    assert check_out.work_date == D
    assert check_in.shift_ref == "night"
    assert check_in.status == AttendanceStatus.PRESENT
    assert [e.event_type for e in store.get_events_for_employee_day("e1", D)] == [EventType.CHECK_IN, EventType.CHECK_OUT]
    assert incidents.calls == []


def test_accepted_events_replay_to_the_gate_that_allowed_them():
    svc, _, _ = _service(settings=STRICT)
    check_in = svc.record_event("e1", EventType.CHECK_IN, datetime(2024, 3, 4, 22, 10))
    check_out = svc.record_event("e1", EventType.CHECK_OUT, datetime(2024, 3, 5, 7, 59))

    assert svc.evaluate_shift_status("e1", check_in.timestamp)[0].can_check_in
    assert svc.evaluate_shift_status("e1", check_out.timestamp)[0].can_check_out


def test_strict_mode_rejects_late_check_in_and_lists_candidates():
    svc, store, _ = _service(settings=STRICT)

    with pytest.raises(OutsideWindowError) as exc:
        svc.record_event("e1", EventType.CHECK_IN, datetime(2024, 3, 4, 22, 20))

    assert "Night 22:00-06:00 (check-in 21:30-22:15, check-out 05:50-08:00)" in str(exc.value)
    assert exc.value.event_type == EventType.CHECK_IN
    assert store.all() == []


def test_multi_shift_employee_sees_every_window_in_error():
    svc, _, _ = _service(bindings=("am", "pm"), settings=STRICT)

    with pytest.raises(OutsideWindowError) as exc:
        svc.record_event("e1", EventType.CHECK_IN, datetime(2024, 3, 4, 10, 0))

    message = str(exc.value)
    assert "Morning 06:00-14:00" in message
    assert "Afternoon 14:00-22:00" in message
    assert len(exc.value.candidates) == 2


def test_multi_shift_employee_checks_in_to_the_open_shift():
    svc, _, _ = _service(bindings=("am", "pm"))

    event = svc.record_event("e1", EventType.CHECK_IN, datetime(2024, 3, 4, 13, 45))

    assert event.shift_ref == "pm"
    statuses = svc.evaluate_shift_status("e1", datetime(2024, 3, 4, 13, 45))
    assert [s.schedule_ref for s in statuses] == ["am", "pm"]
    assert statuses[1].status == ShiftStatus.IN_PROGRESS


def test_second_check_in_is_a_sequence_error():
    svc, _, _ = _service()
    svc.record_event("e1", EventType.CHECK_IN, datetime(2024, 3, 4, 22, 0))

    with pytest.raises(InvalidSequenceError):
        svc.record_event("e1", EventType.CHECK_IN, datetime(2024, 3, 4, 22, 5))


def test_check_out_without_check_in_is_a_sequence_error():
    svc, _, _ = _service()

    with pytest.raises(InvalidSequenceError):
        svc.record_event("e1", EventType.CHECK_OUT, datetime(2024, 3, 5, 6, 0))


def test_check_in_after_check_out_outside_windows_is_a_sequence_error():
    svc, _, _ = _service(bindings=("am",))
    svc.record_event("e1", EventType.CHECK_IN, datetime(2024, 3, 4, 6, 0))
    svc.record_event("e1", EventType.CHECK_OUT, datetime(2024, 3, 4, 14, 0))

    with pytest.raises(InvalidSequenceError, match="already checked out"):
        svc.record_event("e1", EventType.CHECK_IN, datetime(2024, 3, 4, 18, 0))


class StaleReadStore(InMemoryAttendanceStore):
    """Simulates a concurrent request that has not seen the first insert."""

    def get_events_for_employee_day(self, employee_id, work_date):
        return []


def test_concurrent_duplicate_is_rejected_by_the_store():
    svc, store, _ = _service(store=StaleReadStore())
    svc.record_event("e1", EventType.CHECK_IN, datetime(2024, 3, 4, 22, 0))

    with pytest.raises(DuplicateEventError):
        svc.record_event("e1", EventType.CHECK_IN, datetime(2024, 3, 4, 22, 1))

    assert len(store.all()) == 1


def test_breaks_after_midnight_attach_to_the_overnight_day():
    svc, store, _ = _service()
    svc.record_event("e1", EventType.CHECK_IN, datetime(2024, 3, 4, 22, 0))

    start = svc.record_event("e1", EventType.BREAK_START, datetime(2024, 3, 5, 1, 0))
    end = svc.record_event("e1", EventType.BREAK_END, datetime(2024, 3, 5, 1, 30))
    svc.record_event("e1", EventType.CHECK_OUT, datetime(2024, 3, 5, 6, 0))

    assert start.work_date == D and end.work_date == D
    assert len(store.get_events_for_employee_day("e1", D)) == 4


def test_check_out_during_break_is_rejected():
    svc, _, _ = _service()
    svc.record_event("e1", EventType.CHECK_IN, datetime(2024, 3, 4, 22, 0))
    svc.record_event("e1", EventType.BREAK_START, datetime(2024, 3, 5, 5, 30))

    with pytest.raises(InvalidSequenceError, match="end the break"):
        svc.record_event("e1", EventType.CHECK_OUT, datetime(2024, 3, 5, 6, 0))


def test_break_without_open_day_is_rejected():
    svc, _, _ = _service()

    with pytest.raises(InvalidSequenceError):
        svc.record_event("e1", EventType.BREAK_START, datetime(2024, 3, 4, 23, 0))


def test_lenient_mode_records_late_arrival_and_early_departure():
    settings = AttendanceSettings(enforce_action_windows=False, early_departure_tolerance_minutes=15)
    svc, _, incidents = _service(settings=settings)

    check_in = svc.record_event("e1", EventType.CHECK_IN, datetime(2024, 3, 4, 22, 20))
    check_out = svc.record_event("e1", EventType.CHECK_OUT, datetime(2024, 3, 5, 5, 30))

    assert check_in.status == AttendanceStatus.LATE
    assert check_out.status == AttendanceStatus.PRESENT
    assert incidents.kinds() == [AnomalyKind.LATE_ARRIVAL, AnomalyKind.EARLY_DEPARTURE]
    assert [r.deviation_minutes for r, _, _ in incidents.calls] == [20, 15]
    assert [event_id for _, _, event_id in incidents.calls] == [check_in.event_id, check_out.event_id]


def test_lenient_mode_still_rejects_check_out_before_start():
    settings = AttendanceSettings(enforce_action_windows=False)
    svc, _, _ = _service(settings=settings)
    svc.record_event("e1", EventType.CHECK_IN, datetime(2024, 3, 4, 21, 40))

    with pytest.raises(OutsideWindowError):
        svc.record_event("e1", EventType.CHECK_OUT, datetime(2024, 3, 4, 21, 50))


def test_default_settings_record_late_check_in_as_late_arrival():
    svc, _, incidents = _service()

    event = svc.record_event("e1", EventType.CHECK_IN, datetime(2024, 3, 4, 22, 20))

    assert event.status == AttendanceStatus.LATE
    assert event.work_date == D
    assert incidents.kinds() == [AnomalyKind.LATE_ARRIVAL]
    assert incidents.calls[0][0].deviation_minutes == 20


def test_lenient_check_in_closes_at_scheduled_end_plus_tolerance():
    svc, _, _ = _service()
    event = svc.record_event("e1", EventType.CHECK_IN, datetime(2024, 3, 5, 6, 15))
    assert event.work_date == D

    svc, store, _ = _service()
    with pytest.raises(OutsideWindowError):
        svc.record_event("e1", EventType.CHECK_IN, datetime(2024, 3, 5, 6, 16))
    assert store.all() == []


@pytest.mark.parametrize("settings", [AttendanceSettings(), STRICT])
def test_fixed_night_shift_hands_over_to_next_morning(settings):
    schedule = FixedWeeklySchedule(days={6: NIGHT.time_window, 0: MORNING.time_window})
    directory = InMemoryDirectory().add("e1", area_id="A1")
    catalog = InMemoryCatalog(fixed=schedule, settings=settings)
    store = InMemoryAttendanceStore()
    svc = AttendanceService(store, ScheduleResolver(catalog, directory), catalog)

    svc.record_event("e1", EventType.CHECK_IN, datetime(2024, 3, 3, 22, 0))
    check_out = svc.record_event("e1", EventType.CHECK_OUT, datetime(2024, 3, 4, 6, 0))
    check_in = svc.record_event("e1", EventType.CHECK_IN, datetime(2024, 3, 4, 6, 5))

    assert check_out.work_date == date(2024, 3, 3)
    assert check_in.work_date == D
    assert check_in.status == AttendanceStatus.PRESENT
    assert [e.event_type for e in store.get_events_for_employee_day("e1", D)] == [EventType.CHECK_IN]


def test_attendance_disabled_before_enable_date():
    settings = AttendanceSettings(attendance_enabled_from=datetime(2024, 4, 1))
    svc, _, _ = _service(settings=settings)

    with pytest.raises(AttendanceDisabledError):
        svc.record_event("e1", EventType.CHECK_IN, datetime(2024, 3, 4, 22, 0))


def test_event_type_accepts_plain_strings():
    svc, _, _ = _service()

    event = svc.record_event("e1", "CHECK_IN", datetime(2024, 3, 4, 22, 0), notes="gate 2")

    assert event.event_type == EventType.CHECK_IN
    assert event.notes == "gate 2"
