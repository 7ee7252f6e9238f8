from __future__ import annotations

from typing import Dict, Optional, Sequence

from ..common.time_window import TimeWindow, ensure_reasonable_window
from ..core.enums import SupernumeraryMode
from ..core.exceptions import ConfigurationError
from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall, fetchone, normalize_mysql_time
from ..shifts.model import RotatingShift
from .model import AttendanceSettings, FixedWeeklySchedule, SupernumeraryPolicy
from .repository import ScheduleCatalog


class MySQLScheduleCatalog(ScheduleCatalog):
    """Schedule catalog backed by MySQL.

    Rows are validated on load: a malformed window raises ``ConfigurationError``.
    """

    def __init__(self, conn_factory: DatabaseConnection, *, defaults: Optional[AttendanceSettings] = None):
        self._conn_factory = conn_factory
        self._defaults = defaults or AttendanceSettings()

    def get_settings(self) -> AttendanceSettings:
        row = self._config_row()
        if not row:
            return self._defaults
        d = self._defaults

        def pick(column: str, fallback):
            value = row.get(column)
            return fallback if value is None else value

        return AttendanceSettings(
            tolerance_minutes=int(pick("tolerance_minutes", d.tolerance_minutes)),
            early_check_in_margin_minutes=int(pick("early_check_in_margin_minutes", d.early_check_in_margin_minutes)),
            late_check_out_margin_minutes=int(pick("late_check_out_margin_minutes", d.late_check_out_margin_minutes)),
            early_departure_tolerance_minutes=int(
                pick("early_departure_tolerance_minutes", d.early_departure_tolerance_minutes)
            ),
            enforce_action_windows=bool(pick("enforce_action_windows", d.enforce_action_windows)),
            attendance_enabled_from=pick("attendance_enabled_from", d.attendance_enabled_from),
            justification_window_days=d.justification_window_days,
        )

    def get_fixed_schedule(self) -> Optional[FixedWeeklySchedule]:
        days = self._load_days("fixed_schedule_days")
        if not days:
            return None
        row = self._config_row() or {}
        lunch = None
        if row.get("lunch_start") is not None and row.get("lunch_end") is not None:
            lunch = TimeWindow(
                start=normalize_mysql_time(row["lunch_start"]),
                end=normalize_mysql_time(row["lunch_end"]),
            )

        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("SELECT kind, ref_id FROM fixed_schedule_assignments")
            rows = fetchall(cur)
        areas = frozenset(str(r["ref_id"]) for r in rows if r["kind"] == "AREA")
        positions = frozenset(str(r["ref_id"]) for r in rows if r["kind"] == "POSITION")

        return FixedWeeklySchedule(
            days=days,
            lunch=lunch,
            assigned_areas=areas,
            assigned_positions=positions,
            name=row.get("fixed_schedule_name") or "Fixed schedule",
        )

    def get_active_rotating_shifts(self) -> Sequence[RotatingShift]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                SELECT shift_id, shift_name, start_time, end_time, is_active
                FROM rotating_shifts
                WHERE is_active=1
                ORDER BY start_time, shift_id
                """
            )
            rows = fetchall(cur)
            cur.execute("SELECT shift_id, area_id FROM shift_areas")
            area_rows = fetchall(cur)
            cur.execute("SELECT shift_id, position_id FROM shift_positions")
            position_rows = fetchall(cur)

        areas: Dict[str, set] = {}
        for r in area_rows:
            areas.setdefault(str(r["shift_id"]), set()).add(str(r["area_id"]))
        positions: Dict[str, set] = {}
        for r in position_rows:
            positions.setdefault(str(r["shift_id"]), set()).add(str(r["position_id"]))

        shifts = []
        for r in rows:
            shift_id = str(r["shift_id"])
            window = self._window(r, f"Shift {shift_id}")
            shifts.append(
                RotatingShift(
                    shift_id=shift_id,
                    shift_name=r["shift_name"],
                    time_window=window,
                    active=bool(r["is_active"]),
                    assigned_areas=frozenset(areas.get(shift_id, ())),
                    assigned_positions=frozenset(positions.get(shift_id, ())),
                )
            )
        return shifts

    def get_supernumerary_policy(self) -> Optional[SupernumeraryPolicy]:
        row = self._config_row() or {}
        mode = row.get("supernumerary_mode")
        if not mode:
            return None
        try:
            mode = SupernumeraryMode(mode)
        except ValueError as exc:
            raise ConfigurationError(f"Unknown supernumerary mode {mode!r}") from exc

        if mode == SupernumeraryMode.FIXED_SCHEDULE:
            days = self._load_days("supernumerary_fixed_days")
            schedule = FixedWeeklySchedule(days=days, name="Supernumerary schedule") if days else None
            return SupernumeraryPolicy(mode=mode, fixed_schedule=schedule)

        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("SELECT shift_id FROM supernumerary_allowed_shifts")
            allowed = frozenset(str(r["shift_id"]) for r in fetchall(cur))
        return SupernumeraryPolicy(mode=mode, allowed_shift_ids=allowed)

    def _config_row(self):
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("SELECT * FROM attendance_config WHERE config_id=1")
            return fetchone(cur)

    def _load_days(self, table: str) -> Dict[int, TimeWindow]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT weekday, start_time, end_time FROM {table} ORDER BY weekday")
            rows = fetchall(cur)
        days = {}
        for r in rows:
            weekday = int(r["weekday"])
            if not 0 <= weekday <= 6:
                raise ConfigurationError(f"{table}: weekday {weekday} is out of range 0-6")
            days[weekday] = self._window(r, f"{table} weekday {weekday}")
        return days

    @staticmethod
    def _window(row, context: str) -> TimeWindow:
        try:
            window = TimeWindow(start=normalize_mysql_time(row["start_time"]), end=normalize_mysql_time(row["end_time"]))
        except (TypeError, ValueError) as exc:
            raise ConfigurationError(f"{context}: invalid time ({exc})") from exc
        return ensure_reasonable_window(window, context)
