from __future__ import annotations

from datetime import date, datetime
from typing import Optional, Protocol, Sequence

from ..core.enums import AttendanceStatus
from .model import AttendanceRecord


class AttendanceRepository(Protocol):
    def get_for_employee_and_date(self, employee_id: int, work_date: date) -> Optional[AttendanceRecord]:
        raise NotImplementedError

    def list_between(self, employee_id: int, start_date: date, end_date: date) -> Sequence[AttendanceRecord]:
        """Rows with start_date <= work_date <= end_date, newest first."""

        raise NotImplementedError

    def create_checkin(
        self,
        *,
        employee_id: int,
        work_date: date,
        check_in: datetime,
        status: AttendanceStatus,
    ) -> int:
        raise NotImplementedError

    def mark_checkin(self, *, attendance_id: int, check_in: datetime, status: AttendanceStatus) -> bool:
        """Fill check-in on a row that already exists for the day (e.g. ABSENT)."""

        raise NotImplementedError

    def update_checkout(
        self,
        *,
        attendance_id: int,
        check_out: datetime,
        work_hours: float,
        extra_hours: float,
    ) -> bool:
        raise NotImplementedError

    def upsert_status(self, *, employee_id: int, work_date: date, status: AttendanceStatus) -> int:
        """Create the row for (employee, day) or overwrite its status. Returns the row id."""

        raise NotImplementedError
