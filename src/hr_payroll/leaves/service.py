from __future__ import annotations

import logging
from datetime import date
from typing import Optional, Sequence

from ..common.datetime_utils import inclusive_day_count, now_local
from ..common.validators import require_non_negative
from ..core.constants import DEFAULT_LIST_LIMIT
from ..core.enums import MANAGER_ROLES, LeaveStatus, LeaveType, Role
from ..core.exceptions import (
    AuthorizationError,
    InsufficientBalanceError,
    NoAllocationError,
    NotFoundError,
    ValidationError,
)
from ..employees.model import Employee
from ..employees.repository import EmployeeRepository
from .model import ApprovalResult, Leave, LeaveAllocation
from .reconciler import LeaveApprovalReconciler
from .repository import LeaveAllocationRepository, LeaveRepository

logger = logging.getLogger(__name__)


class LeaveService:
    """Use cases: request, decide and inspect leaves and allocations."""

    def __init__(
        self,
        leaves: LeaveRepository,
        allocations: LeaveAllocationRepository,
        employees: EmployeeRepository,
        reconciler: LeaveApprovalReconciler,
    ):
        self._leaves = leaves
        self._allocations = allocations
        self._employees = employees
        self._reconciler = reconciler

    def _employee_for_user(self, user_id: int) -> Employee:
        employee = self._employees.get_by_user_id(int(user_id))
        if not employee:
            raise NotFoundError("Employee not found")
        return employee

    @staticmethod
    def _require_manager(current_role: Role) -> None:
        if current_role not in MANAGER_ROLES:
            raise AuthorizationError("Access denied")

    def request_leave(
        self,
        *,
        user_id: int,
        leave_type: LeaveType,
        start_date: date,
        end_date: date,
        remarks: Optional[str] = None,
    ) -> Leave:
        """Admit a leave request against the remaining balance.

        Nothing is charged yet: the allocation is only incremented when the
        leave is approved.
        """
        employee = self._employee_for_user(user_id)
        return self.request_leave_for_employee(
            employee_id=employee.employee_id,
            leave_type=leave_type,
            start_date=start_date,
            end_date=end_date,
            remarks=remarks,
        )

    def request_leave_for_employee(
        self,
        *,
        employee_id: int,
        leave_type: LeaveType,
        start_date: date,
        end_date: date,
        remarks: Optional[str] = None,
    ) -> Leave:
        if end_date < start_date:
            raise ValidationError("End date must be on or after start date")

        days = inclusive_day_count(start_date, end_date)
        year = start_date.year
        allocation = self._allocations.get(employee_id=int(employee_id), leave_type=leave_type, year=year)
        if not allocation:
            raise NoAllocationError(f"No leave allocation found for {leave_type.value} in {year}")
        if days > allocation.remaining_days:
            raise InsufficientBalanceError(requested=days, available=allocation.remaining_days)

        leave_id = self._leaves.create(
            employee_id=int(employee_id),
            leave_type=leave_type,
            start_date=start_date,
            end_date=end_date,
            remarks=(remarks or "").strip() or None,
        )
        logger.info("Employee %s requested %s day(s) of %s leave", employee_id, days, leave_type.value)
        leave = self._leaves.get_by_id(leave_id)
        if not leave:
            raise NotFoundError("Leave request not found")
        return leave

    def approve_leave(self, *, current_role: Role, approver_id: int, leave_id: int) -> ApprovalResult:
        self._require_manager(current_role)
        return self._reconciler.approve(int(leave_id), int(approver_id))

    def reject_leave(self, *, current_role: Role, approver_id: int, leave_id: int) -> Leave:
        self._require_manager(current_role)
        return self._reconciler.reject(int(leave_id), int(approver_id))

    def list_leaves(
        self,
        *,
        current_role: Role,
        current_user_id: int,
        employee_id: Optional[int] = None,
        status: Optional[LeaveStatus] = None,
    ) -> Sequence[Leave]:
        if current_role in MANAGER_ROLES:
            target = int(employee_id) if employee_id is not None else None
        else:
            target = self._employee_for_user(current_user_id).employee_id
        return self._leaves.list_leaves(employee_id=target, status=status, limit=DEFAULT_LIST_LIMIT)

    def get_allocations(
        self,
        *,
        current_role: Role,
        current_user_id: int,
        employee_id: Optional[int] = None,
        year: Optional[int] = None,
    ) -> Sequence[LeaveAllocation]:
        if current_role in MANAGER_ROLES and employee_id is not None:
            target = int(employee_id)
        else:
            target = self._employee_for_user(current_user_id).employee_id
        return self._allocations.list_for_employee(employee_id=target, year=int(year or now_local().year))

    def create_allocation(
        self,
        *,
        current_role: Role,
        employee_id: int,
        leave_type: LeaveType,
        allocated_days: int,
        year: Optional[int] = None,
    ) -> LeaveAllocation:
        self._require_manager(current_role)
        require_non_negative(allocated_days, "Allocated days")

        if not self._employees.get_by_id(int(employee_id)):
            raise NotFoundError("Employee not found")

        year = int(year or now_local().year)
        if self._allocations.get(employee_id=int(employee_id), leave_type=leave_type, year=year):
            raise ValidationError("Leave allocation already exists for this type and year")

        allocation_id = self._allocations.create(
            employee_id=int(employee_id),
            leave_type=leave_type,
            year=year,
            allocated_days=int(allocated_days),
        )
        logger.info("Allocated %s %s day(s) to employee %s for %s", allocated_days, leave_type.value, employee_id, year)
        return LeaveAllocation(
            allocation_id=allocation_id,
            employee_id=int(employee_id),
            leave_type=leave_type,
            year=year,
            allocated_days=int(allocated_days),
        )
