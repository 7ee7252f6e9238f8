from datetime import date, datetime

from fakes import NIGHT, InMemoryAttendanceStore, InMemoryCatalog, InMemoryDirectory, RecordingIncidents
from shift_attendance.attendance.auto_close import AutoCloseJob
from shift_attendance.attendance.service import AttendanceService
from shift_attendance.attendance.sweep import EndOfDaySweep
from shift_attendance.core.enums import AnomalyKind, EventType
from shift_attendance.incidents.reporter import incident_key
from shift_attendance.schedules.model import AttendanceSettings
from shift_attendance.schedules.resolver import ScheduleResolver

D = date(2024, 3, 4)
AFTER = datetime(2024, 3, 5, 9, 0)


def _setup(*extra_employees):
    directory = InMemoryDirectory().add("e1", bindings=["night"]).add("e2", bindings=["night"])
    for employee_id in extra_employees:
        directory.add(employee_id)
    catalog = InMemoryCatalog(shifts=[NIGHT], settings=AttendanceSettings(enforce_action_windows=False))
    store = InMemoryAttendanceStore()
    resolver = ScheduleResolver(catalog, directory)
    service = AttendanceService(store, resolver, catalog)
    incidents = RecordingIncidents()
    sweep = EndOfDaySweep(store, resolver, catalog, directory, incidents=incidents)
    return sweep, service, store, incidents, AutoCloseJob(store, resolver, catalog, service)


def test_absence_reported_once_and_cleared_by_later_check_in():
    sweep, service, store, incidents, _ = _setup()
    service.record_event("e2", EventType.CHECK_IN, datetime(2024, 3, 4, 22, 0))
    service.record_event("e2", EventType.CHECK_OUT, datetime(2024, 3, 5, 6, 0))

    first = sweep.run(D, now=AFTER)
    assert first.reported == 1
    assert incidents.kinds() == [AnomalyKind.ABSENCE]
    assert incidents.calls[0][1] == "e1"

    # A delayed early-morning punch reaches the store between two sweeps.
    service.record_event("e1", EventType.CHECK_IN, datetime(2024, 3, 5, 5, 0))
    service.record_event("e1", EventType.CHECK_OUT, datetime(2024, 3, 5, 6, 0))

    assert sweep.classify_employee_day("e1", D, now=AFTER) == []
    second = sweep.run(D, now=AFTER)
    assert second.reported == 0
    assert incidents.kinds() == [AnomalyKind.ABSENCE]


def test_sweep_before_day_is_over_reports_nothing():
    sweep, _, _, incidents, _ = _setup()

    stats = sweep.run(D, now=datetime(2024, 3, 5, 7, 0))

    assert stats.reported == 0
    assert stats.clean == 2
    assert incidents.calls == []


def test_auto_closed_day_is_unregistered_exit():
    sweep, service, store, incidents, auto_close = _setup()
    service.record_event("e1", EventType.CHECK_IN, datetime(2024, 3, 4, 22, 0))
    service.record_event("e2", EventType.CHECK_IN, datetime(2024, 3, 4, 22, 0))
    service.record_event("e2", EventType.CHECK_OUT, datetime(2024, 3, 5, 6, 0))
    auto_close.run(now=AFTER)

    sweep.run(D, now=AFTER)

    assert incidents.kinds() == [AnomalyKind.UNREGISTERED_EXIT]
    result, employee_id, event_id = incidents.calls[0]
    assert employee_id == "e1"
    assert event_id is None
    assert result.actual_time == datetime(2024, 3, 5, 8, 15)


def test_sweep_never_writes():
    sweep, _, store, _, _ = _setup()

    sweep.run(D, now=AFTER)

    assert store.all() == []


def test_resolution_failures_are_counted():
    # e3 has no binding and nothing else matches
    sweep, _, _, incidents, _ = _setup("e3")

    stats = sweep.run(D, now=AFTER)

    assert stats.errors == 1
    assert stats.reported == 2


def test_rerun_reports_the_same_incident_key():
    sweep, _, _, incidents, _ = _setup()

    sweep.run(D, now=AFTER)
    sweep.run(D, now=datetime(2024, 3, 5, 10, 0))

    assert len(incidents.calls) == 4
    assert {incident_key(*call) for call in incidents.calls} == {
        ("e1", D, AnomalyKind.ABSENCE, None),
        ("e2", D, AnomalyKind.ABSENCE, None),
    }
