from __future__ import annotations

from datetime import date, datetime

import pytest

from hr_payroll.core.enums import AttendanceStatus, LeaveStatus, LeaveType
from hr_payroll.core.exceptions import (
    InsufficientBalanceError,
    InvalidStateError,
    NoAllocationError,
    NotFoundError,
)

APPROVER = 99
NOW = datetime(2026, 1, 28, 14, 0)


@pytest.fixture
def employee(store):
    emp = store.add_employee(user_id=7)
    store.add_allocation(emp.employee_id, LeaveType.PAID, 2026, allocated=24)
    return emp


def test_approving_three_day_leave_charges_balance_and_backfills_attendance(store, container, employee):
    leave = store.add_leave(employee.employee_id, LeaveType.PAID, date(2026, 2, 2), date(2026, 2, 4))

    result = container.leave_reconciler.approve(leave.leave_id, APPROVER, now=NOW)

    assert result.days == 3
    assert result.leave.status == LeaveStatus.APPROVED
    assert store.leaves[leave.leave_id].status == LeaveStatus.APPROVED
    assert store.leaves[leave.leave_id].approved_by == APPROVER
    assert store.leaves[leave.leave_id].approved_at == NOW
    assert store.allocation_for(employee.employee_id, LeaveType.PAID, 2026).used_days == 3
    for d in (2, 3, 4):
        assert store.attendance[(employee.employee_id, date(2026, 2, d))].status == AttendanceStatus.LEAVE
    assert result.overwritten == []


def test_second_approval_is_rejected_without_mutation(store, container, employee):
    leave = store.add_leave(employee.employee_id, LeaveType.PAID, date(2026, 2, 2), date(2026, 2, 4))
    container.leave_reconciler.approve(leave.leave_id, APPROVER, now=NOW)
    attendance_before = dict(store.attendance)

    with pytest.raises(InvalidStateError):
        container.leave_reconciler.approve(leave.leave_id, APPROVER, now=NOW)

    assert store.allocation_for(employee.employee_id, LeaveType.PAID, 2026).used_days == 3
    assert store.attendance == attendance_before


def test_rejected_leave_cannot_be_approved(store, container, employee):
    leave = store.add_leave(employee.employee_id, LeaveType.PAID, date(2026, 2, 2), date(2026, 2, 2))

    rejected = container.leave_reconciler.reject(leave.leave_id, APPROVER, now=NOW)

    assert rejected.status == LeaveStatus.REJECTED
    assert store.leaves[leave.leave_id].approved_by == APPROVER
    with pytest.raises(InvalidStateError):
        container.leave_reconciler.approve(leave.leave_id, APPROVER, now=NOW)
    with pytest.raises(InvalidStateError):
        container.leave_reconciler.reject(leave.leave_id, APPROVER, now=NOW)
    assert store.allocation_for(employee.employee_id, LeaveType.PAID, 2026).used_days == 0


def test_failure_midway_rolls_back_every_step(store, container, attendance_repo, employee):
    leave = store.add_leave(employee.employee_id, LeaveType.PAID, date(2026, 2, 2), date(2026, 2, 4))
    attendance_repo.fail_on = date(2026, 2, 3)

    with pytest.raises(RuntimeError):
        container.leave_reconciler.approve(leave.leave_id, APPROVER, now=NOW)

    assert store.leaves[leave.leave_id].status == LeaveStatus.PENDING
    assert store.allocation_for(employee.employee_id, LeaveType.PAID, 2026).used_days == 0
    assert (employee.employee_id, date(2026, 2, 2)) not in store.attendance
    assert store.rollbacks == 1


def test_balance_is_rechecked_at_approval_time(store, container):
    emp = store.add_employee(user_id=8)
    store.add_allocation(emp.employee_id, LeaveType.SICK, 2026, allocated=24, used=21)
    first = container.leave_service.request_leave(
        user_id=8, leave_type=LeaveType.SICK, start_date=date(2026, 3, 2), end_date=date(2026, 3, 3)
    )
    second = container.leave_service.request_leave(
        user_id=8, leave_type=LeaveType.SICK, start_date=date(2026, 3, 9), end_date=date(2026, 3, 10)
    )

    container.leave_reconciler.approve(first.leave_id, APPROVER, now=NOW)
    with pytest.raises(InsufficientBalanceError) as exc:
        container.leave_reconciler.approve(second.leave_id, APPROVER, now=NOW)

    assert exc.value.available == 1
    assert store.leaves[second.leave_id].status == LeaveStatus.PENDING
    assert store.allocation_for(emp.employee_id, LeaveType.SICK, 2026).used_days == 23


def test_existing_worked_days_are_overwritten_and_reported(store, container, employee):
    store.add_attendance(employee.employee_id, date(2026, 2, 2), AttendanceStatus.PRESENT)
    store.add_attendance(employee.employee_id, date(2026, 2, 3), AttendanceStatus.ABSENT)
    leave = store.add_leave(employee.employee_id, LeaveType.PAID, date(2026, 2, 2), date(2026, 2, 3))

    result = container.leave_reconciler.approve(leave.leave_id, APPROVER, now=NOW)

    assert [(o.work_date, o.previous_status) for o in result.overwritten] == [
        (date(2026, 2, 2), AttendanceStatus.PRESENT)
    ]
    assert store.attendance[(employee.employee_id, date(2026, 2, 2))].status == AttendanceStatus.LEAVE
    assert store.attendance[(employee.employee_id, date(2026, 2, 3))].status == AttendanceStatus.LEAVE


def test_missing_allocation_blocks_approval(store, container, employee):
    leave = store.add_leave(employee.employee_id, LeaveType.UNPAID, date(2026, 2, 2), date(2026, 2, 2))

    with pytest.raises(NoAllocationError):
        container.leave_reconciler.approve(leave.leave_id, APPROVER, now=NOW)

    assert store.leaves[leave.leave_id].status == LeaveStatus.PENDING


def test_unknown_leave(container):
    with pytest.raises(NotFoundError):
        container.leave_reconciler.approve(12345, APPROVER)


def test_approved_paid_leave_is_payable(store, container, employee):
    leave = store.add_leave(employee.employee_id, LeaveType.PAID, date(2026, 2, 2), date(2026, 2, 6))
    container.leave_reconciler.approve(leave.leave_id, APPROVER, now=NOW)

    result = container.payable_days_resolver.resolve(employee.employee_id, 2026, 2)

    # 8 weekend days + 5 paid leave days
    assert result.payable_days == 13
