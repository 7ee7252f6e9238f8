import logging
from datetime import date, datetime

from shift_attendance.attendance.model import AnomalyResult
from shift_attendance.core.enums import AnomalyKind
from shift_attendance.incidents.reporter import LoggingIncidentReporter

ABSENCE = AnomalyResult(
    has_anomaly=True,
    kind=AnomalyKind.ABSENCE,
    expected_time=datetime(2024, 3, 4, 22, 0),
    work_date=date(2024, 3, 4),
)


def _warnings(caplog):
    return [r for r in caplog.records if r.levelno == logging.WARNING]


def test_same_day_level_anomaly_is_logged_once(caplog):
    reporter = LoggingIncidentReporter()

    with caplog.at_level(logging.DEBUG, logger="shift_attendance.incidents.reporter"):
        reporter.on_anomaly_detected(ABSENCE, "e1", None)
        reporter.on_anomaly_detected(ABSENCE, "e1", None)

    assert len(_warnings(caplog)) == 1
    assert "ABSENCE" in _warnings(caplog)[0].getMessage()


def test_other_employees_and_days_are_logged_separately(caplog):
    reporter = LoggingIncidentReporter()
    next_day = AnomalyResult(has_anomaly=True, kind=AnomalyKind.ABSENCE, work_date=date(2024, 3, 5))

    with caplog.at_level(logging.WARNING, logger="shift_attendance.incidents.reporter"):
        reporter.on_anomaly_detected(ABSENCE, "e1", None)
        reporter.on_anomaly_detected(ABSENCE, "e2", None)
        reporter.on_anomaly_detected(next_day, "e1", None)

    assert len(_warnings(caplog)) == 3
