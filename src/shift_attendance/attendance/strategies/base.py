from __future__ import annotations

from abc import ABC, abstractmethod
from datetime import datetime

from ...schedules.model import AttendanceSettings
from ..model import AnomalyResult


class AnomalyStrategy(ABC):
    """Strategy Pattern: encapsulate how a boundary deviation is classified."""

    @abstractmethod
    def classify(self, *, expected: datetime, actual: datetime, settings: AttendanceSettings) -> AnomalyResult:
        raise NotImplementedError
