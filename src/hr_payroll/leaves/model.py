from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date, datetime
from typing import Optional

from ..common.datetime_utils import as_date, inclusive_day_count
from ..core.enums import AttendanceStatus, LeaveStatus, LeaveType


@dataclass(frozen=True)
class Leave:
    leave_id: int
    employee_id: int
    leave_type: LeaveType
    start_date: date
    end_date: date
    status: LeaveStatus
    created_at: datetime
    remarks: Optional[str] = None
    approved_by: Optional[int] = None
    approved_at: Optional[datetime] = None

    @property
    def days(self) -> int:
        return inclusive_day_count(self.start_date, self.end_date)

    def covers(self, day: date) -> bool:
        """Inclusive range check on dates only."""
        return as_date(self.start_date) <= as_date(day) <= as_date(self.end_date)


@dataclass(frozen=True)
class LeaveAllocation:
    """Yearly entitlement per leave type. Usage is tracked separately."""

    allocation_id: int
    employee_id: int
    leave_type: LeaveType
    year: int
    allocated_days: int
    used_days: int = 0

    @property
    def remaining_days(self) -> int:
        return self.allocated_days - self.used_days


@dataclass(frozen=True)
class OverwrittenAttendance:
    work_date: date
    previous_status: AttendanceStatus


@dataclass(frozen=True)
class ApprovalResult:
    leave: Leave
    days: int
    allocation: LeaveAllocation
    overwritten: list[OverwrittenAttendance] = field(default_factory=list)
