from __future__ import annotations

import logging
from typing import FrozenSet, Iterable, Optional, Sequence

from ..core.enums import MANAGER_ROLES, Role
from ..core.exceptions import AuthorizationError, NotFoundError, ValidationError
from .model import Employee
from .repository import EmployeeRepository

logger = logging.getLogger(__name__)

MAX_BREAK_TIME_HOURS = 24


def _clean_name(value: Optional[str], field_name: str) -> Optional[str]:
    if value is None:
        return None
    value = str(value).strip()
    if not value:
        raise ValidationError(f"{field_name} must not be empty")
    return value


def _clean_working_days(days: Optional[Iterable[int]]) -> Optional[FrozenSet[int]]:
    if days is None:
        return None
    try:
        cleaned = frozenset(int(d) for d in days)
    except (TypeError, ValueError):
        raise ValidationError("Working days must be weekday numbers (Monday=0 ... Sunday=6)")
    if not cleaned:
        raise ValidationError("Working days must not be empty")
    if any(d < 0 or d > 6 for d in cleaned):
        raise ValidationError("Working days must be weekday numbers (Monday=0 ... Sunday=6)")
    return cleaned


def _clean_break_time(hours: Optional[float]) -> Optional[float]:
    if hours is None:
        return None
    try:
        value = float(hours)
    except (TypeError, ValueError):
        raise ValidationError("Break time must be a number of hours")
    if value < 0 or value > MAX_BREAK_TIME_HOURS:
        raise ValidationError(f"Break time must be between 0 and {MAX_BREAK_TIME_HOURS} hours")
    return value


class EmployeeService:
    """Use case: view employees and manage their work policy (admin/HR)."""

    def __init__(self, employees: EmployeeRepository):
        self._employees = employees

    @staticmethod
    def _require_manager(current_role: Role) -> None:
        if current_role not in MANAGER_ROLES:
            raise AuthorizationError("Access denied. Admin or HR role required.")

    def list_employees(self, *, current_role: Role, current_user_id: int) -> Sequence[Employee]:
        # Admin/HR see everyone; an employee sees only themselves
        if current_role in MANAGER_ROLES:
            return self._employees.list_all()
        me = self._employees.get_by_user_id(int(current_user_id))
        return [me] if me else []

    def get_employee(self, *, current_role: Role, current_user_id: int, employee_id: int) -> Employee:
        employee = self._employees.get_by_id(int(employee_id))
        if not employee:
            raise NotFoundError("Employee not found")
        if current_role not in MANAGER_ROLES and employee.user_id != int(current_user_id):
            raise AuthorizationError("Access denied")
        return employee

    def update_employee(
        self,
        *,
        current_role: Role,
        employee_id: int,
        first_name: Optional[str] = None,
        last_name: Optional[str] = None,
        break_time_hours: Optional[float] = None,
        working_days: Optional[Iterable[int]] = None,
    ) -> Employee:
        self._require_manager(current_role)

        ok = self._employees.update(
            int(employee_id),
            first_name=_clean_name(first_name, "First name"),
            last_name=_clean_name(last_name, "Last name"),
            break_time_hours=_clean_break_time(break_time_hours),
            working_days=_clean_working_days(working_days),
        )
        if not ok:
            raise NotFoundError("Employee not found")

        employee = self._employees.get_by_id(int(employee_id))
        if not employee:
            raise NotFoundError("Employee not found")
        logger.info(
            "Employee %s updated: working_days=%s break_time_hours=%s",
            employee.employee_id,
            sorted(employee.working_days),
            employee.break_time_hours,
        )
        return employee
