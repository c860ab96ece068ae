from __future__ import annotations

import logging
from typing import Optional

from ..common.money import Number
from ..core.enums import MANAGER_ROLES, Role
from ..core.exceptions import AuthorizationError, NotFoundError
from ..employees.repository import EmployeeRepository
from .calculator.base import SalaryCalculator
from .calculator.standard_calculator import StandardSalaryCalculator
from .model import SalaryComponents, SalaryInfo, SalarySlip
from .repository import SalaryRepository
from .resolver import PayableDaysResolver

logger = logging.getLogger(__name__)


class PayrollService:
    def __init__(
        self,
        salaries: SalaryRepository,
        employees: EmployeeRepository,
        resolver: PayableDaysResolver,
        *,
        calculator: Optional[SalaryCalculator] = None,
    ):
        self._salaries = salaries
        self._employees = employees
        self._resolver = resolver
        self._calculator = calculator or StandardSalaryCalculator()

    @staticmethod
    def _require_manager(current_role: Role) -> None:
        if current_role not in MANAGER_ROLES:
            raise AuthorizationError("Access denied. Admin or HR role required.")

    def calculate(self, *, current_role: Role, monthly_wage: Number) -> SalaryComponents:
        """Preview a breakdown without storing it."""
        self._require_manager(current_role)
        return self._calculator.calculate(monthly_wage)

    def update_salary_info(self, *, current_role: Role, employee_id: int, monthly_wage: Number) -> SalaryInfo:
        self._require_manager(current_role)
        if not self._employees.get_by_id(int(employee_id)):
            raise NotFoundError("Employee not found")

        components = self._calculator.calculate(monthly_wage)
        info = self._salaries.upsert(employee_id=int(employee_id), components=components)
        logger.info("Salary for employee %s set to %s/month", employee_id, components.monthly_wage)
        return info

    def get_salary_info(self, *, current_role: Role, current_user_id: int, employee_id: int) -> SalaryInfo:
        employee = self._employees.get_by_id(int(employee_id))
        if not employee:
            raise NotFoundError("Employee not found")

        # Employees can only view their own salary
        if current_role == Role.EMPLOYEE and employee.user_id != int(current_user_id):
            raise AuthorizationError("Access denied")

        info = self._salaries.get_by_employee(employee.employee_id)
        if not info:
            raise NotFoundError("Salary information not found")
        return info

    def build_salary_slip(
        self,
        *,
        current_role: Role,
        current_user_id: int,
        employee_id: int,
        year: int,
        month: int,
    ) -> SalarySlip:
        info = self.get_salary_info(
            current_role=current_role,
            current_user_id=current_user_id,
            employee_id=employee_id,
        )
        payable = self._resolver.resolve(info.employee_id, int(year), int(month))
        components = self._calculator.calculate(
            info.monthly_wage,
            payable.payable_days,
            payable.total_days_in_month,
        )
        return SalarySlip(
            employee_id=info.employee_id,
            year=int(year),
            month=int(month),
            payable=payable,
            components=components,
        )
