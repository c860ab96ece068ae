from __future__ import annotations

from dataclasses import dataclass

from .attendance.mysql_attendance_repository import MySQLAttendanceRepository
from .attendance.repository import AttendanceRepository
from .attendance.service import AttendanceService
from .database.connection import DatabaseConnection, DBConfig, TransactionManager
from .employees.mysql_employee_repository import MySQLEmployeeRepository
from .employees.repository import EmployeeRepository
from .employees.service import EmployeeService
from .leaves.mysql_leave_repository import MySQLLeaveAllocationRepository, MySQLLeaveRepository
from .leaves.reconciler import LeaveApprovalReconciler
from .leaves.repository import LeaveAllocationRepository, LeaveRepository
from .leaves.service import LeaveService
from .payroll.mysql_salary_repository import MySQLSalaryRepository
from .payroll.repository import SalaryRepository
from .payroll.resolver import PayableDaysResolver
from .payroll.service import PayrollService


@dataclass(frozen=True)
class Container:
    transactions: TransactionManager

    employees_repo: EmployeeRepository
    attendance_repo: AttendanceRepository
    leaves_repo: LeaveRepository
    allocations_repo: LeaveAllocationRepository
    salaries_repo: SalaryRepository

    employee_service: EmployeeService
    attendance_service: AttendanceService
    leave_reconciler: LeaveApprovalReconciler
    leave_service: LeaveService
    payable_days_resolver: PayableDaysResolver
    payroll_service: PayrollService


def wire(
    *,
    transactions: TransactionManager,
    employees: EmployeeRepository,
    attendance: AttendanceRepository,
    leaves: LeaveRepository,
    allocations: LeaveAllocationRepository,
    salaries: SalaryRepository,
) -> Container:
    """Build services on top of any set of repositories (MySQL or in-memory)."""

    reconciler = LeaveApprovalReconciler(leaves, allocations, attendance, transactions)
    resolver = PayableDaysResolver(employees, attendance, leaves)

    return Container(
        transactions=transactions,
        employees_repo=employees,
        attendance_repo=attendance,
        leaves_repo=leaves,
        allocations_repo=allocations,
        salaries_repo=salaries,
        employee_service=EmployeeService(employees),
        attendance_service=AttendanceService(attendance, employees),
        leave_reconciler=reconciler,
        leave_service=LeaveService(leaves, allocations, employees, reconciler),
        payable_days_resolver=resolver,
        payroll_service=PayrollService(salaries, employees, resolver),
    )


def build_container(*, db_config: dict) -> Container:
    conn = DatabaseConnection(DBConfig.from_dict(db_config))

    return wire(
        transactions=conn,
        employees=MySQLEmployeeRepository(conn),
        attendance=MySQLAttendanceRepository(conn),
        leaves=MySQLLeaveRepository(conn),
        allocations=MySQLLeaveAllocationRepository(conn),
        salaries=MySQLSalaryRepository(conn),
    )
