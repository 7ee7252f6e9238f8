from __future__ import annotations

from typing import Optional, Protocol, Sequence

from ..shifts.model import RotatingShift
from .model import AttendanceSettings, FixedWeeklySchedule, SupernumeraryPolicy


class ScheduleCatalog(Protocol):
    """Read-only source of schedule definitions.

    Lưu ý (DIP): resolver/service phụ thuộc vào interface này, không phụ thuộc DB cụ thể.
    """

    def get_fixed_schedule(self) -> Optional[FixedWeeklySchedule]:
        raise NotImplementedError

    def get_active_rotating_shifts(self) -> Sequence[RotatingShift]:
        raise NotImplementedError

    def get_supernumerary_policy(self) -> Optional[SupernumeraryPolicy]:
        raise NotImplementedError

    def get_settings(self) -> AttendanceSettings:
        raise NotImplementedError
