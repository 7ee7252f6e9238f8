from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date, datetime
from typing import FrozenSet, Optional, Tuple

from ..common.time_window import TimeWindow
from ..core.enums import ShiftStatus


@dataclass(frozen=True)
class RotatingShift:
    """Thực thể miền (domain): Ca làm việc xoay vòng (rotating shift)."""

    shift_id: str
    shift_name: str
    time_window: TimeWindow
    active: bool = True
    assigned_areas: FrozenSet[str] = field(default_factory=frozenset)
    assigned_positions: FrozenSet[str] = field(default_factory=frozenset)

    def matches(self, *, area_id: Optional[str], position_id: Optional[str]) -> bool:
        """True when the shift is assigned to the employee's area or position."""
        if area_id and area_id in self.assigned_areas:
            return True
        return bool(position_id and position_id in self.assigned_positions)


@dataclass(frozen=True)
class ShiftStatusInfo:
    """Computed status of one schedule at a reference moment (never stored)."""

    status: ShiftStatus
    can_check_in: bool
    can_check_out: bool
    starts_in_minutes: Optional[int] = None
    work_date: Optional[date] = None
    window: Optional[TimeWindow] = None
    schedule_ref: Optional[str] = None
    schedule_name: Optional[str] = None
    check_in_window: Optional[Tuple[datetime, datetime]] = None
    check_out_window: Optional[Tuple[datetime, datetime]] = None

    def describe(self) -> str:
        name = self.schedule_name or "Shift"
        if not self.window:
            return f"{name} (not scheduled)"
        parts = [f"{name} {self.window.label()}"]
        if self.check_in_window:
            parts.append(f"check-in {_hhmm(self.check_in_window[0])}-{_hhmm(self.check_in_window[1])}")
        if self.check_out_window:
            parts.append(f"check-out {_hhmm(self.check_out_window[0])}-{_hhmm(self.check_out_window[1])}")
        return f"{parts[0]} ({', '.join(parts[1:])})" if len(parts) > 1 else parts[0]


def _hhmm(value: datetime) -> str:
    return value.strftime("%H:%M")
