from __future__ import annotations

from typing import Optional, Protocol, Sequence

from .model import EmployeePlacement


class EmployeeDirectory(Protocol):
    """Giao diện repository cho nhân viên và ràng buộc ca trực tiếp."""

    def get_area_and_position(self, employee_id: str) -> Optional[EmployeePlacement]:
        raise NotImplementedError

    def get_direct_shift_bindings(self, employee_id: str) -> Sequence[str]:
        """Shift ids the employee is explicitly bound to (not area-wide matches)."""

        raise NotImplementedError

    def is_supernumerary(self, position_id: Optional[str]) -> bool:
        raise NotImplementedError

    def list_active_employee_ids(self) -> Sequence[str]:
        raise NotImplementedError
