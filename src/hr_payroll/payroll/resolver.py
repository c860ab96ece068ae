"""Payable-days resolution.

Turns a month of attendance rows and approved leaves into the number of days
the employee is paid for. Each calendar day contributes 1, 0.5 or 0:

    PRESENT             -> 1
    HALF_DAY            -> 0.5
    ABSENT              -> 0
    LEAVE               -> 1 if an approved PAID/SICK leave covers the day, else 0
    no row, rest day    -> 1 (weekday outside the employee's working days)
    no row, working day -> 0 (implicit absence)
"""

from __future__ import annotations

from datetime import date
from decimal import Decimal
from typing import AbstractSet, Iterable, Mapping

from ..attendance.model import AttendanceRecord
from ..attendance.repository import AttendanceRepository
from ..common.datetime_utils import as_date, days_in_month, iter_days, month_bounds
from ..core.constants import DEFAULT_WORKING_DAYS
from ..core.enums import PAID_LEAVE_TYPES, AttendanceStatus, LeaveStatus
from ..core.exceptions import NotFoundError
from ..employees.repository import EmployeeRepository
from ..leaves.model import Leave
from ..leaves.repository import LeaveRepository
from .model import PayableDays

FULL_DAY = Decimal("1")
HALF_DAY = Decimal("0.5")
NO_PAY = Decimal("0")


def _is_paid_leave_day(day: date, leaves: Iterable[Leave]) -> bool:
    return any(
        leave.status == LeaveStatus.APPROVED and leave.leave_type in PAID_LEAVE_TYPES and leave.covers(day)
        for leave in leaves
    )


def day_credit(
    day: date,
    record: AttendanceRecord | None,
    approved_leaves: Iterable[Leave],
    working_days: AbstractSet[int],
) -> Decimal:
    if record is None:
        return NO_PAY if day.weekday() in working_days else FULL_DAY

    if record.status == AttendanceStatus.PRESENT:
        return FULL_DAY
    if record.status == AttendanceStatus.HALF_DAY:
        return HALF_DAY
    if record.status == AttendanceStatus.LEAVE:
        return FULL_DAY if _is_paid_leave_day(day, approved_leaves) else NO_PAY
    return NO_PAY


def count_payable_days(
    year: int,
    month: int,
    attendance: Iterable[AttendanceRecord],
    approved_leaves: Iterable[Leave],
    working_days: AbstractSet[int] = DEFAULT_WORKING_DAYS,
) -> PayableDays:
    start, end = month_bounds(year, month)
    by_day: Mapping[date, AttendanceRecord] = {as_date(r.work_date): r for r in attendance}
    leaves = list(approved_leaves)

    total = sum(
        (day_credit(day, by_day.get(day), leaves, working_days) for day in iter_days(start, end)),
        NO_PAY,
    )
    return PayableDays(payable_days=total, total_days_in_month=days_in_month(year, month))


class PayableDaysResolver:
    def __init__(
        self,
        employees: EmployeeRepository,
        attendance: AttendanceRepository,
        leaves: LeaveRepository,
    ):
        self._employees = employees
        self._attendance = attendance
        self._leaves = leaves

    def resolve(self, employee_id: int, year: int, month: int) -> PayableDays:
        employee = self._employees.get_by_id(int(employee_id))
        if not employee:
            raise NotFoundError("Employee not found")

        start, end = month_bounds(year, month)
        rows = self._attendance.list_between(employee.employee_id, start, end)
        leaves = self._leaves.list_approved_overlapping(
            employee_id=employee.employee_id,
            start_date=start,
            end_date=end,
        )
        return count_payable_days(year, month, rows, leaves, employee.working_days)
