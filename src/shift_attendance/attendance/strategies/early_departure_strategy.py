from __future__ import annotations

from datetime import datetime

from ...common.datetime_utils import minutes_between
from ...core.enums import AnomalyKind
from ...schedules.model import AttendanceSettings
from ..model import AnomalyResult
from .base import AnomalyStrategy


class EarlyDepartureStrategy(AnomalyStrategy):
    """Early check-out: minutes left before the early-departure tolerance boundary."""

    def classify(self, *, expected: datetime, actual: datetime, settings: AttendanceSettings) -> AnomalyResult:
        early = minutes_between(actual, expected)
        return AnomalyResult(
            has_anomaly=True,
            kind=AnomalyKind.EARLY_DEPARTURE,
            expected_time=expected,
            actual_time=actual,
            deviation_minutes=early - settings.early_departure_tolerance_minutes,
        )
