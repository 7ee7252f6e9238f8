"""Ví dụ: dùng service layer trực tiếp (không qua HTTP).

Prints the shift status of one employee and records a check-in.
"""

import sys

from shift_attendance.core.enums import EventType
from shift_attendance.core.exceptions import DomainError
from shift_attendance.main import create_engine


def main(employee_id: str) -> None:
    container = create_engine()
    service = container.attendance_service

    for info in service.evaluate_shift_status(employee_id):
        print(info.status.value, info.describe())

    try:
        event = service.record_event(employee_id, EventType.CHECK_IN)
    except DomainError as exc:
        print(f"Refused: {exc}")
        return
    print(f"Recorded {event.event_type.value} #{event.event_id} ({event.status.value})")


if __name__ == "__main__":
    main(sys.argv[1] if len(sys.argv) > 1 else "E001")
