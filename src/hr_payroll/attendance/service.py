from __future__ import annotations

import logging
from datetime import date, datetime
from typing import Optional, Sequence

from ..common.datetime_utils import month_bounds, now_local
from ..core.enums import MANAGER_ROLES, AttendanceStatus, Role
from ..core.exceptions import NotFoundError, ValidationError
from ..employees.model import Employee
from ..employees.repository import EmployeeRepository
from .model import AttendanceRecord, AttendanceStats
from .repository import AttendanceRepository
from .work_hours import WorkHoursCalculator

logger = logging.getLogger(__name__)


class AttendanceService:
    def __init__(
        self,
        attendance: AttendanceRepository,
        employees: EmployeeRepository,
        *,
        hours_calculator: Optional[WorkHoursCalculator] = None,
    ):
        self._attendance = attendance
        self._employees = employees
        self._hours = hours_calculator or WorkHoursCalculator()

    def _employee_for_user(self, user_id: int) -> Employee:
        employee = self._employees.get_by_user_id(int(user_id))
        if not employee:
            raise NotFoundError("Employee not found")
        return employee

    def check_in(self, user_id: int, *, now: Optional[datetime] = None) -> AttendanceRecord:
        now = now or now_local()
        today = now.date()
        employee = self._employee_for_user(user_id)

        existing = self._attendance.get_for_employee_and_date(employee.employee_id, today)
        if existing and existing.check_in:
            raise ValidationError("Already checked in today")
        if existing and existing.status == AttendanceStatus.LEAVE:
            raise ValidationError("Today is an approved leave day")

        if existing:
            self._attendance.mark_checkin(
                attendance_id=existing.attendance_id,
                check_in=now,
                status=AttendanceStatus.PRESENT,
            )
        else:
            self._attendance.create_checkin(
                employee_id=employee.employee_id,
                work_date=today,
                check_in=now,
                status=AttendanceStatus.PRESENT,
            )
        logger.info("Employee %s checked in at %s", employee.employee_id, now.isoformat())
        return self._attendance.get_for_employee_and_date(employee.employee_id, today)

    def check_out(self, user_id: int, *, now: Optional[datetime] = None) -> AttendanceRecord:
        now = now or now_local()
        today = now.date()
        employee = self._employee_for_user(user_id)

        record = self._attendance.get_for_employee_and_date(employee.employee_id, today)
        if not record:
            raise ValidationError("No check-in found for today")
        if record.check_out is not None:
            raise ValidationError("Already checked out today")
        if record.check_in is None:
            raise ValidationError("Please check in first")
        if now < record.check_in:
            raise ValidationError("Check-out time cannot be before check-in time")

        worked = self._hours.compute(
            check_in=record.check_in,
            check_out=now,
            break_time_hours=employee.break_time_hours,
        )
        self._attendance.update_checkout(
            attendance_id=record.attendance_id,
            check_out=now,
            work_hours=worked.work_hours,
            extra_hours=worked.extra_hours,
        )
        logger.info("Employee %s checked out (%.2fh worked)", employee.employee_id, worked.work_hours)
        return self._attendance.get_for_employee_and_date(employee.employee_id, today)

    def get_today_record(self, user_id: int, today: Optional[date] = None) -> Optional[AttendanceRecord]:
        employee = self._employee_for_user(user_id)
        return self._attendance.get_for_employee_and_date(employee.employee_id, today or now_local().date())

    def list_month(
        self,
        *,
        current_role: Role,
        current_user_id: int,
        year: int,
        month: int,
        employee_id: Optional[int] = None,
    ) -> Sequence[AttendanceRecord]:
        """Admin/HR may look at anyone; employees only see their own rows."""
        if current_role in MANAGER_ROLES and employee_id is not None:
            target = int(employee_id)
        else:
            target = self._employee_for_user(current_user_id).employee_id

        start, end = month_bounds(year, month)
        return self._attendance.list_between(target, start, end)

    def monthly_stats(self, user_id: int, *, year: int, month: int) -> AttendanceStats:
        employee = self._employee_for_user(user_id)
        start, end = month_bounds(year, month)
        rows = self._attendance.list_between(employee.employee_id, start, end)

        def count(status: AttendanceStatus) -> int:
            return sum(1 for r in rows if r.status == status)

        return AttendanceStats(
            total_days=len(rows),
            present_days=count(AttendanceStatus.PRESENT),
            absent_days=count(AttendanceStatus.ABSENT),
            half_days=count(AttendanceStatus.HALF_DAY),
            leave_days=count(AttendanceStatus.LEAVE),
            total_work_hours=round(sum(float(r.work_hours or 0) for r in rows), 2),
            total_extra_hours=round(sum(float(r.extra_hours or 0) for r in rows), 2),
        )
