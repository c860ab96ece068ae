from __future__ import annotations

import itertools
from contextlib import contextmanager
from dataclasses import replace
from datetime import date, datetime
from typing import Optional

import pytest

from hr_payroll.attendance.model import AttendanceRecord
from hr_payroll.container import wire
from hr_payroll.core.constants import DEFAULT_WORKING_DAYS
from hr_payroll.core.enums import AttendanceStatus, LeaveStatus, LeaveType
from hr_payroll.employees.model import Employee
from hr_payroll.leaves.model import Leave, LeaveAllocation
from hr_payroll.payroll.model import SalaryInfo


class InMemoryStore:
    """Shared state for the fake repositories, with snapshot/restore transactions."""

    def __init__(self):
        self.employees: dict[int, Employee] = {}
        self.attendance: dict[tuple[int, date], AttendanceRecord] = {}
        self.leaves: dict[int, Leave] = {}
        self.allocations: dict[int, LeaveAllocation] = {}
        self.salaries: dict[int, SalaryInfo] = {}
        self._ids = itertools.count(1)
        self._depth = 0
        self.commits = 0
        self.rollbacks = 0

    def next_id(self) -> int:
        return next(self._ids)

    def _snapshot(self):
        return (
            dict(self.employees),
            dict(self.attendance),
            dict(self.leaves),
            dict(self.allocations),
            dict(self.salaries),
        )

    def _restore(self, snap) -> None:
        self.employees, self.attendance, self.leaves, self.allocations, self.salaries = (dict(s) for s in snap)

    @contextmanager
    def transaction(self):
        if self._depth:
            yield self
            return
        snap = self._snapshot()
        self._depth += 1
        try:
            yield self
            self.commits += 1
        except Exception:
            self._restore(snap)
            self.rollbacks += 1
            raise
        finally:
            self._depth -= 1

    # seeding helpers
    def add_employee(self, *, user_id: int, working_days=DEFAULT_WORKING_DAYS, break_time_hours: float = 1.0) -> Employee:
        emp = Employee(
            employee_id=self.next_id(),
            user_id=user_id,
            first_name="Test",
            last_name=f"User{user_id}",
            break_time_hours=break_time_hours,
            working_days=frozenset(working_days),
        )
        self.employees[emp.employee_id] = emp
        return emp

    def add_allocation(self, employee_id: int, leave_type: LeaveType, year: int, allocated: int, used: int = 0) -> LeaveAllocation:
        alloc = LeaveAllocation(
            allocation_id=self.next_id(),
            employee_id=employee_id,
            leave_type=leave_type,
            year=year,
            allocated_days=allocated,
            used_days=used,
        )
        self.allocations[alloc.allocation_id] = alloc
        return alloc

    def add_leave(
        self,
        employee_id: int,
        leave_type: LeaveType,
        start: date,
        end: date,
        status: LeaveStatus = LeaveStatus.PENDING,
    ) -> Leave:
        leave = Leave(
            leave_id=self.next_id(),
            employee_id=employee_id,
            leave_type=leave_type,
            start_date=start,
            end_date=end,
            status=status,
            created_at=datetime(start.year, 1, 1, 9, 0),
        )
        self.leaves[leave.leave_id] = leave
        return leave

    def add_attendance(self, employee_id: int, day: date, status: AttendanceStatus, **kw) -> AttendanceRecord:
        rec = AttendanceRecord(
            attendance_id=self.next_id(),
            employee_id=employee_id,
            work_date=day,
            check_in=kw.get("check_in"),
            check_out=kw.get("check_out"),
            status=status,
        )
        self.attendance[(employee_id, day)] = rec
        return rec

    def allocation_for(self, employee_id: int, leave_type: LeaveType, year: int) -> Optional[LeaveAllocation]:
        for a in self.allocations.values():
            if (a.employee_id, a.leave_type, a.year) == (employee_id, leave_type, year):
                return a
        return None


class InMemoryEmployees:
    def __init__(self, store: InMemoryStore):
        self._s = store

    def get_by_id(self, employee_id):
        return self._s.employees.get(int(employee_id))

    def get_by_user_id(self, user_id):
        return next((e for e in self._s.employees.values() if e.user_id == int(user_id)), None)

    def list_all(self):
        return sorted(self._s.employees.values(), key=lambda e: e.employee_id, reverse=True)

    def update(self, employee_id, *, first_name=None, last_name=None, break_time_hours=None, working_days=None):
        emp = self._s.employees.get(int(employee_id))
        if not emp:
            return False
        changes = {
            "first_name": first_name,
            "last_name": last_name,
            "break_time_hours": break_time_hours,
            "working_days": frozenset(working_days) if working_days is not None else None,
        }
        self._s.employees[emp.employee_id] = replace(emp, **{k: v for k, v in changes.items() if v is not None})
        return True


class InMemoryAttendance:
    def __init__(self, store: InMemoryStore):
        self._s = store
        self.fail_on: Optional[date] = None

    def get_for_employee_and_date(self, employee_id, work_date):
        return self._s.attendance.get((int(employee_id), work_date))

    def list_between(self, employee_id, start_date, end_date):
        rows = [
            r for (eid, d), r in self._s.attendance.items()
            if eid == int(employee_id) and start_date <= d <= end_date
        ]
        return sorted(rows, key=lambda r: r.work_date, reverse=True)

    def create_checkin(self, *, employee_id, work_date, check_in, status):
        rec = AttendanceRecord(
            attendance_id=self._s.next_id(),
            employee_id=int(employee_id),
            work_date=work_date,
            check_in=check_in,
            check_out=None,
            status=status,
        )
        self._s.attendance[(int(employee_id), work_date)] = rec
        return rec.attendance_id

    def _by_id(self, attendance_id):
        return next((k for k, r in self._s.attendance.items() if r.attendance_id == int(attendance_id)), None)

    def mark_checkin(self, *, attendance_id, check_in, status):
        key = self._by_id(attendance_id)
        if key is None:
            return False
        self._s.attendance[key] = replace(self._s.attendance[key], check_in=check_in, status=status)
        return True

    def update_checkout(self, *, attendance_id, check_out, work_hours, extra_hours):
        key = self._by_id(attendance_id)
        if key is None:
            return False
        self._s.attendance[key] = replace(
            self._s.attendance[key], check_out=check_out, work_hours=work_hours, extra_hours=extra_hours
        )
        return True

    def upsert_status(self, *, employee_id, work_date, status):
        if self.fail_on == work_date:
            raise RuntimeError(f"attendance upsert conflict on {work_date}")
        key = (int(employee_id), work_date)
        existing = self._s.attendance.get(key)
        if existing:
            self._s.attendance[key] = replace(existing, status=status)
            return existing.attendance_id
        rec = AttendanceRecord(
            attendance_id=self._s.next_id(),
            employee_id=int(employee_id),
            work_date=work_date,
            check_in=None,
            check_out=None,
            status=status,
        )
        self._s.attendance[key] = rec
        return rec.attendance_id


class InMemoryLeaves:
    def __init__(self, store: InMemoryStore):
        self._s = store

    def get_by_id(self, leave_id, *, for_update=False):
        return self._s.leaves.get(int(leave_id))

    def create(self, *, employee_id, leave_type, start_date, end_date, remarks=None):
        leave = Leave(
            leave_id=self._s.next_id(),
            employee_id=int(employee_id),
            leave_type=leave_type,
            start_date=start_date,
            end_date=end_date,
            status=LeaveStatus.PENDING,
            created_at=datetime(2026, 1, 1, 9, 0),
            remarks=remarks,
        )
        self._s.leaves[leave.leave_id] = leave
        return leave.leave_id

    def list_leaves(self, *, employee_id=None, status=None, limit=200):
        rows = [
            lv for lv in self._s.leaves.values()
            if (employee_id is None or lv.employee_id == employee_id) and (status is None or lv.status == status)
        ]
        return rows[:limit]

    def list_approved_overlapping(self, *, employee_id, start_date, end_date):
        return [
            lv for lv in self._s.leaves.values()
            if lv.employee_id == int(employee_id)
            and lv.status == LeaveStatus.APPROVED
            and lv.start_date <= end_date
            and lv.end_date >= start_date
        ]

    def set_decision(self, *, leave_id, status, decided_by, decided_at):
        leave = self._s.leaves.get(int(leave_id))
        if not leave or leave.status != LeaveStatus.PENDING:
            return False
        self._s.leaves[leave.leave_id] = replace(leave, status=status, approved_by=decided_by, approved_at=decided_at)
        return True


class InMemoryAllocations:
    def __init__(self, store: InMemoryStore):
        self._s = store

    def get(self, *, employee_id, leave_type, year, for_update=False):
        return self._s.allocation_for(int(employee_id), leave_type, int(year))

    def list_for_employee(self, *, employee_id, year):
        return [a for a in self._s.allocations.values() if a.employee_id == int(employee_id) and a.year == int(year)]

    def create(self, *, employee_id, leave_type, year, allocated_days):
        return self._s.add_allocation(int(employee_id), leave_type, int(year), int(allocated_days)).allocation_id

    def increment_used(self, *, allocation_id, days):
        alloc = self._s.allocations.get(int(allocation_id))
        if not alloc:
            return False
        self._s.allocations[alloc.allocation_id] = replace(alloc, used_days=alloc.used_days + int(days))
        return True


class InMemorySalaries:
    def __init__(self, store: InMemoryStore):
        self._s = store

    def get_by_employee(self, employee_id):
        return self._s.salaries.get(int(employee_id))

    def upsert(self, *, employee_id, components):
        info = SalaryInfo(employee_id=int(employee_id), components=components)
        self._s.salaries[int(employee_id)] = info
        return info


@pytest.fixture
def store() -> InMemoryStore:
    return InMemoryStore()


@pytest.fixture
def attendance_repo(store) -> InMemoryAttendance:
    return InMemoryAttendance(store)


@pytest.fixture
def container(store, attendance_repo):
    return wire(
        transactions=store,
        employees=InMemoryEmployees(store),
        attendance=attendance_repo,
        leaves=InMemoryLeaves(store),
        allocations=InMemoryAllocations(store),
        salaries=InMemorySalaries(store),
    )
