from __future__ import annotations

from datetime import datetime

from ...common.datetime_utils import minutes_between
from ...core.enums import AnomalyKind
from ...schedules.model import AttendanceSettings
from ..model import AnomalyResult
from .base import AnomalyStrategy


class LateArrivalStrategy(AnomalyStrategy):
    """Late check-in: the full delay since the scheduled start is reported."""

    def classify(self, *, expected: datetime, actual: datetime, settings: AttendanceSettings) -> AnomalyResult:
        return AnomalyResult(
            has_anomaly=True,
            kind=AnomalyKind.LATE_ARRIVAL,
            expected_time=expected,
            actual_time=actual,
            deviation_minutes=minutes_between(expected, actual),
        )
