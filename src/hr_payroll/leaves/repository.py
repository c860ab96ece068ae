from __future__ import annotations

from datetime import date, datetime
from typing import Optional, Protocol, Sequence

from ..core.enums import LeaveStatus, LeaveType
from .model import Leave, LeaveAllocation


class LeaveRepository(Protocol):
    def get_by_id(self, leave_id: int, *, for_update: bool = False) -> Optional[Leave]:
        """`for_update` locks the row until the surrounding transaction ends."""

        raise NotImplementedError

    def create(
        self,
        *,
        employee_id: int,
        leave_type: LeaveType,
        start_date: date,
        end_date: date,
        remarks: Optional[str] = None,
    ) -> int:
        raise NotImplementedError

    def list_leaves(
        self,
        *,
        employee_id: Optional[int] = None,
        status: Optional[LeaveStatus] = None,
        limit: int = 200,
    ) -> Sequence[Leave]:
        raise NotImplementedError

    def list_approved_overlapping(self, *, employee_id: int, start_date: date, end_date: date) -> Sequence[Leave]:
        raise NotImplementedError

    def set_decision(
        self,
        *,
        leave_id: int,
        status: LeaveStatus,
        decided_by: int,
        decided_at: datetime,
    ) -> bool:
        """Move a PENDING leave to `status`. Returns False if it was not PENDING."""

        raise NotImplementedError


class LeaveAllocationRepository(Protocol):
    def get(
        self,
        *,
        employee_id: int,
        leave_type: LeaveType,
        year: int,
        for_update: bool = False,
    ) -> Optional[LeaveAllocation]:
        raise NotImplementedError

    def list_for_employee(self, *, employee_id: int, year: int) -> Sequence[LeaveAllocation]:
        raise NotImplementedError

    def create(self, *, employee_id: int, leave_type: LeaveType, year: int, allocated_days: int) -> int:
        raise NotImplementedError

    def increment_used(self, *, allocation_id: int, days: int) -> bool:
        raise NotImplementedError
