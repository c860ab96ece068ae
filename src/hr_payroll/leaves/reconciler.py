"""Leave approval reconciliation.

Approving a leave touches three records: the leave itself, the yearly
allocation it is charged against, and one attendance row per day of the
range. All of it runs in a single transaction so a failure at any step leaves
no partial state behind.
"""

from __future__ import annotations

import logging
from dataclasses import replace
from datetime import datetime
from typing import Callable, Optional

from ..attendance.repository import AttendanceRepository
from ..common.datetime_utils import iter_days, now_local
from ..core.enums import AttendanceStatus, LeaveStatus
from ..core.exceptions import (
    InsufficientBalanceError,
    InvalidStateError,
    NoAllocationError,
    NotFoundError,
)
from ..database.connection import TransactionManager
from .model import ApprovalResult, Leave, OverwrittenAttendance
from .repository import LeaveAllocationRepository, LeaveRepository

logger = logging.getLogger(__name__)

_WORKED_STATUSES = frozenset({AttendanceStatus.PRESENT, AttendanceStatus.HALF_DAY})


class LeaveApprovalReconciler:
    def __init__(
        self,
        leaves: LeaveRepository,
        allocations: LeaveAllocationRepository,
        attendance: AttendanceRepository,
        transactions: TransactionManager,
        *,
        clock: Callable[[], datetime] = now_local,
    ):
        self._leaves = leaves
        self._allocations = allocations
        self._attendance = attendance
        self._tx = transactions
        self._clock = clock

    def _load_pending(self, leave_id: int) -> Leave:
        leave = self._leaves.get_by_id(int(leave_id), for_update=True)
        if not leave:
            raise NotFoundError("Leave request not found")
        if leave.status != LeaveStatus.PENDING:
            raise InvalidStateError("Leave request already processed")
        return leave

    def approve(self, leave_id: int, approver_id: int, *, now: Optional[datetime] = None) -> ApprovalResult:
        """Approve a PENDING leave, charge the allocation and mark its days as LEAVE.

        The balance is re-checked under row locks: `used_days + days` must not
        exceed `allocated_days` at approval time. Existing PRESENT/HALF_DAY
        rows in the range are overwritten and reported back in
        `ApprovalResult.overwritten`.
        """
        approved_at = now or self._clock()

        with self._tx.transaction():
            leave = self._load_pending(leave_id)
            days = leave.days

            allocation = self._allocations.get(
                employee_id=leave.employee_id,
                leave_type=leave.leave_type,
                year=leave.start_date.year,
                for_update=True,
            )
            if not allocation:
                raise NoAllocationError(
                    f"No leave allocation found for {leave.leave_type.value} in {leave.start_date.year}"
                )
            if allocation.used_days + days > allocation.allocated_days:
                raise InsufficientBalanceError(requested=days, available=allocation.remaining_days)

            if not self._leaves.set_decision(
                leave_id=leave.leave_id,
                status=LeaveStatus.APPROVED,
                decided_by=int(approver_id),
                decided_at=approved_at,
            ):
                raise InvalidStateError("Leave request already processed")

            if not self._allocations.increment_used(allocation_id=allocation.allocation_id, days=days):
                raise NotFoundError("Leave allocation not found")

            overwritten: list[OverwrittenAttendance] = []
            for day in iter_days(leave.start_date, leave.end_date):
                existing = self._attendance.get_for_employee_and_date(leave.employee_id, day)
                if existing and existing.status in _WORKED_STATUSES:
                    overwritten.append(OverwrittenAttendance(work_date=day, previous_status=existing.status))
                self._attendance.upsert_status(
                    employee_id=leave.employee_id,
                    work_date=day,
                    status=AttendanceStatus.LEAVE,
                )

        logger.info(
            "Leave %s approved by %s: %s day(s) of %s for employee %s",
            leave.leave_id, approver_id, days, leave.leave_type.value, leave.employee_id,
        )
        if overwritten:
            logger.warning(
                "Leave %s overwrote attendance for employee %s on %s",
                leave.leave_id,
                leave.employee_id,
                ", ".join(f"{o.work_date.isoformat()} ({o.previous_status.value})" for o in overwritten),
            )

        return ApprovalResult(
            leave=replace(
                leave,
                status=LeaveStatus.APPROVED,
                approved_by=int(approver_id),
                approved_at=approved_at,
            ),
            days=days,
            allocation=replace(allocation, used_days=allocation.used_days + days),
            overwritten=overwritten,
        )

    def reject(self, leave_id: int, approver_id: int, *, now: Optional[datetime] = None) -> Leave:
        decided_at = now or self._clock()

        with self._tx.transaction():
            leave = self._load_pending(leave_id)
            if not self._leaves.set_decision(
                leave_id=leave.leave_id,
                status=LeaveStatus.REJECTED,
                decided_by=int(approver_id),
                decided_at=decided_at,
            ):
                raise InvalidStateError("Leave request already processed")

        logger.info("Leave %s rejected by %s", leave.leave_id, approver_id)
        return replace(leave, status=LeaveStatus.REJECTED, approved_by=int(approver_id), approved_at=decided_at)
