from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime

from ..common.datetime_utils import minutes_between
from ..schedules.model import AttendanceSettings
from .strategies.base import AnomalyStrategy
from .strategies.early_departure_strategy import EarlyDepartureStrategy
from .strategies.late_arrival_strategy import LateArrivalStrategy
from .strategies.on_time_strategy import OnTimeStrategy


@dataclass
class AnomalyStrategyFactory:
    """Factory Pattern: choose appropriate strategy based on rules."""

    def for_check_in(self, *, actual: datetime, expected_start: datetime, settings: AttendanceSettings) -> AnomalyStrategy:
        if minutes_between(expected_start, actual) > settings.tolerance_minutes:
            return LateArrivalStrategy()
        return OnTimeStrategy()

    def for_check_out(self, *, actual: datetime, expected_end: datetime, settings: AttendanceSettings) -> AnomalyStrategy:
        if minutes_between(actual, expected_end) > settings.early_departure_tolerance_minutes:
            return EarlyDepartureStrategy()
        return OnTimeStrategy()
