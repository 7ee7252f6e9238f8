from __future__ import annotations

from enum import Enum


class EventType(str, Enum):
    """Loại chấm công (một lần bấm = một sự kiện)."""

    CHECK_IN = "CHECK_IN"
    CHECK_OUT = "CHECK_OUT"
    BREAK_START = "BREAK_START"
    BREAK_END = "BREAK_END"


class AttendanceStatus(str, Enum):
    """Trạng thái chấm công chuẩn hoá lưu trong CSDL."""

    PRESENT = "PRESENT"
    LATE = "LATE"
    ABSENT = "ABSENT"
    EXCUSED = "EXCUSED"


class ShiftStatus(str, Enum):
    FUTURE = "FUTURE"
    IN_PROGRESS = "IN_PROGRESS"
    FINISHED = "FINISHED"


class DayState(str, Enum):
    """Trạng thái trong ngày của một nhân viên (máy trạng thái)."""

    NONE = "NONE"
    CHECKED_IN = "CHECKED_IN"
    ON_BREAK = "ON_BREAK"
    CHECKED_OUT = "CHECKED_OUT"


class AnomalyKind(str, Enum):
    LATE_ARRIVAL = "LATE_ARRIVAL"
    EARLY_DEPARTURE = "EARLY_DEPARTURE"
    UNREGISTERED_EXIT = "UNREGISTERED_EXIT"
    ABSENCE = "ABSENCE"


class JustificationStatus(str, Enum):
    """Trạng thái luồng duyệt giải trình."""

    PENDING = "PENDING"
    JUSTIFIED = "JUSTIFIED"
    REJECTED = "REJECTED"


class SupernumeraryMode(str, Enum):
    REPLACEMENT = "REPLACEMENT"
    FIXED_SCHEDULE = "FIXED_SCHEDULE"


class AssignmentSource(str, Enum):
    """Tier of the resolver that produced an assignment."""

    SUPERNUMERARY_FIXED = "SUPERNUMERARY_FIXED"
    SUPERNUMERARY_REPLACEMENT = "SUPERNUMERARY_REPLACEMENT"
    DIRECT_BINDING = "DIRECT_BINDING"
    AREA_POSITION = "AREA_POSITION"
    FIXED_SCHEDULE = "FIXED_SCHEDULE"
