from __future__ import annotations

from datetime import datetime

from ...schedules.model import AttendanceSettings
from ..model import NO_ANOMALY, AnomalyResult
from .base import AnomalyStrategy


class OnTimeStrategy(AnomalyStrategy):
    """Punch within tolerance of its boundary."""

    def classify(self, *, expected: datetime, actual: datetime, settings: AttendanceSettings) -> AnomalyResult:
        return NO_ANOMALY
