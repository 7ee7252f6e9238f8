from __future__ import annotations

from typing import Optional, Sequence

from ..core.constants import SUPERNUMERARY_POSITION_CODES
from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall, fetchone
from .model import EmployeePlacement
from .repository import EmployeeDirectory


class MySQLEmployeeDirectory(EmployeeDirectory):
    def __init__(self, conn_factory: DatabaseConnection, *, supernumerary_codes: Sequence[str] = SUPERNUMERARY_POSITION_CODES):
        self._conn_factory = conn_factory
        self._supernumerary_codes = frozenset(supernumerary_codes)

    def get_area_and_position(self, employee_id: str) -> Optional[EmployeePlacement]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                SELECT employee_id, area_id, position_id
                FROM employees
                WHERE employee_id=%s AND is_active=1
                """,
                (employee_id,),
            )
            r = fetchone(cur)
            if not r:
                return None
            return EmployeePlacement(
                employee_id=str(r["employee_id"]),
                area_id=r.get("area_id"),
                position_id=r.get("position_id"),
            )

    def get_direct_shift_bindings(self, employee_id: str) -> Sequence[str]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                "SELECT shift_id FROM employee_shift_bindings WHERE employee_id=%s ORDER BY shift_id",
                (employee_id,),
            )
            return [str(r["shift_id"]) for r in fetchall(cur)]

    def is_supernumerary(self, position_id: Optional[str]) -> bool:
        if not position_id:
            return False
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("SELECT position_code FROM positions WHERE position_id=%s", (position_id,))
            r = fetchone(cur)
        return bool(r) and str(r["position_code"]).upper() in self._supernumerary_codes

    def list_active_employee_ids(self) -> Sequence[str]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("SELECT employee_id FROM employees WHERE is_active=1 ORDER BY employee_id")
            return [str(r["employee_id"]) for r in fetchall(cur)]
