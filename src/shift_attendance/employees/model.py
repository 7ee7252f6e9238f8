from __future__ import annotations

from dataclasses import dataclass
from typing import Optional


@dataclass(frozen=True)
class EmployeePlacement:
    """Vị trí của nhân viên trong tổ chức (khu vực + chức danh)."""

    employee_id: str
    area_id: Optional[str]
    position_id: Optional[str]
