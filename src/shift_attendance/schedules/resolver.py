"""Resolve which schedule(s) apply to an employee.

Tiers, first match wins:

1. supernumerary policy (fixed schedule or replacement shift set);
2. direct shift bindings from the assignment directory;
3. active shifts assigned to the employee's area or position;
4. the fixed weekly schedule, when it lists the area/position or lists nothing;
5. otherwise ``NoScheduleAssignedError``.

Tiers 1-3 may yield several shifts; they are merged and sorted by start time.
"""

from __future__ import annotations

import logging
from datetime import datetime
from typing import Iterable, Optional, Sequence

from ..core.enums import AssignmentSource, SupernumeraryMode
from ..core.exceptions import ConfigurationError, NoScheduleAssignedError, ValidationError
from ..employees.repository import EmployeeDirectory
from ..shifts.model import RotatingShift
from .model import FixedAssignment, ResolvedSchedule, RotatingAssignment, SupernumeraryPolicy
from .repository import ScheduleCatalog

logger = logging.getLogger(__name__)


class ScheduleResolver:
    def __init__(self, catalog: ScheduleCatalog, directory: EmployeeDirectory):
        self._catalog = catalog
        self._directory = directory

    def resolve(self, employee_id: str, at: Optional[datetime] = None) -> ResolvedSchedule:
        placement = self._directory.get_area_and_position(employee_id)
        if placement is None:
            raise ValidationError(f"Employee {employee_id} does not exist")

        if self._directory.is_supernumerary(placement.position_id):
            policy = self._catalog.get_supernumerary_policy()
            if policy is not None:
                return self._resolve_supernumerary(employee_id, policy)
            logger.warning("Employee %s is supernumerary but no supernumerary policy is configured", employee_id)

        active = [s for s in self._catalog.get_active_rotating_shifts() if s.active]

        bindings = _unique(self._directory.get_direct_shift_bindings(employee_id))
        if bindings:
            by_id = {s.shift_id: s for s in active}
            bound = [by_id[shift_id] for shift_id in bindings if shift_id in by_id]
            missing = [shift_id for shift_id in bindings if shift_id not in by_id]
            if missing:
                logger.warning("Employee %s is bound to unknown or inactive shifts %s", employee_id, missing)
            if not bound:
                raise ConfigurationError(
                    f"Employee {employee_id} is bound to shifts {bindings} but none of them is active"
                )
            return self._from_shifts(employee_id, bound, AssignmentSource.DIRECT_BINDING, at)

        matched = [s for s in active if s.matches(area_id=placement.area_id, position_id=placement.position_id)]
        if matched:
            return self._from_shifts(employee_id, matched, AssignmentSource.AREA_POSITION, at)

        fixed = self._catalog.get_fixed_schedule()
        if fixed is not None and not fixed.is_empty:
            listed = fixed.lists(area_id=placement.area_id, position_id=placement.position_id)
            if listed or not fixed.declares_assignments:
                logger.debug("Employee %s resolved to the fixed schedule at %s", employee_id, at)
                assignment = FixedAssignment(schedule=fixed, source=AssignmentSource.FIXED_SCHEDULE)
                return ResolvedSchedule(employee_id=employee_id, primary=assignment, candidates=(assignment,))

        raise NoScheduleAssignedError(
            f"No schedule is assigned to employee {employee_id} "
            f"(area={placement.area_id}, position={placement.position_id})"
        )

    def _resolve_supernumerary(self, employee_id: str, policy: SupernumeraryPolicy) -> ResolvedSchedule:
        if policy.mode == SupernumeraryMode.FIXED_SCHEDULE:
            if policy.fixed_schedule is None or policy.fixed_schedule.is_empty:
                raise ConfigurationError("Supernumerary policy FIXED_SCHEDULE has no schedule configured")
            assignment = FixedAssignment(schedule=policy.fixed_schedule, source=AssignmentSource.SUPERNUMERARY_FIXED)
            return ResolvedSchedule(employee_id=employee_id, primary=assignment, candidates=(assignment,))

        allowed = [
            s
            for s in self._catalog.get_active_rotating_shifts()
            if s.active and s.shift_id in policy.allowed_shift_ids
        ]
        if not allowed:
            raise ConfigurationError("Supernumerary policy REPLACEMENT has no active shifts to cover")
        return self._from_shifts(employee_id, allowed, AssignmentSource.SUPERNUMERARY_REPLACEMENT, None)

    @staticmethod
    def _from_shifts(
        employee_id: str,
        shifts: Sequence[RotatingShift],
        source: AssignmentSource,
        at: Optional[datetime],
    ) -> ResolvedSchedule:
        ordered = sorted(shifts, key=lambda s: (s.time_window.start_minute, s.shift_id))
        candidates = tuple(RotatingAssignment(shift=s, source=source) for s in ordered)
        logger.debug(
            "Employee %s resolved via %s to %s at %s",
            employee_id,
            source.value,
            [s.shift_id for s in ordered],
            at,
        )
        return ResolvedSchedule(employee_id=employee_id, primary=candidates[0], candidates=candidates)


def _unique(values: Iterable[str]) -> list[str]:
    seen: list[str] = []
    for value in values:
        if value not in seen:
            seen.append(value)
    return seen
