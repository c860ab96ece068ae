from __future__ import annotations

from decimal import Decimal
from typing import Optional

from ...common.money import Number, round2, to_decimal
from ...common.validators import require_positive_amount
from ...core import constants as c
from ...core.exceptions import ValidationError
from ..model import SalaryComponents
from .base import SalaryCalculator


class StandardSalaryCalculator(SalaryCalculator):
    """Standard structure.

    - Basic: 50% of the applicable wage; HRA: 50% of basic
    - Standard allowance: fixed 4167 (pro-rated with the wage)
    - Performance bonus and LTA: 8.33% of the applicable wage each
    - Fixed allowance: whatever is left of the applicable wage
    - PF (employee and employer): 12% of basic
    - Professional tax: fixed 200, never pro-rated

    The applicable wage is the monthly wage scaled by payable/total days when
    both are given, otherwise the monthly wage itself.
    """

    def _proration(
        self, payable_days: Optional[Number], total_days_in_month: Optional[int]
    ) -> Optional[tuple[Decimal, int]]:
        if payable_days is None and total_days_in_month is None:
            return None
        if payable_days is None or total_days_in_month is None:
            raise ValidationError("Payable days and total days in month must be given together")

        total = int(total_days_in_month)
        payable = to_decimal(payable_days)
        if total <= 0:
            raise ValidationError("Total days in month must be greater than 0")
        if payable < 0 or payable > total:
            raise ValidationError(f"Payable days must be between 0 and {total}")
        return payable, total

    def calculate(
        self,
        monthly_wage: Number,
        payable_days: Optional[Number] = None,
        total_days_in_month: Optional[int] = None,
    ) -> SalaryComponents:
        wage = require_positive_amount(monthly_wage, "Monthly wage")
        proration = self._proration(payable_days, total_days_in_month)

        if proration:
            payable, total = proration
            applicable = wage * payable / total
            standard_allowance = round2(c.STANDARD_ALLOWANCE * payable / total)
        else:
            payable, total = None, None
            applicable = wage
            standard_allowance = round2(c.STANDARD_ALLOWANCE)

        basic_salary = round2(applicable * c.BASIC_RATE)
        hra = round2(basic_salary * c.HRA_RATE)
        performance_bonus = round2(applicable * c.BONUS_RATE)
        lta = round2(applicable * c.LTA_RATE)
        pf = round2(basic_salary * c.PF_RATE)
        allocated = basic_salary + hra + standard_allowance + performance_bonus + lta
        fixed_allowance = round2(applicable - allocated)
        if proration and -c.PRORATION_ROUNDING_SLACK <= fixed_allowance < 0:
            fixed_allowance = round2(0)

        components = SalaryComponents(
            monthly_wage=round2(wage),
            yearly_wage=round2(wage * 12),
            applicable_wage=round2(applicable),
            basic_salary=basic_salary,
            hra=hra,
            standard_allowance=standard_allowance,
            performance_bonus=performance_bonus,
            lta=lta,
            fixed_allowance=fixed_allowance,
            pf_employee=pf,
            pf_employer=pf,
            professional_tax=round2(c.PROFESSIONAL_TAX),
            payable_days=payable,
            total_days_in_month=total,
        )
        self.validate(components)
        return components

    @staticmethod
    def validate(components: SalaryComponents) -> None:
        total = components.earnings_total
        if abs(total - components.applicable_wage) > c.ROUNDING_TOLERANCE:
            raise ValidationError(
                f"Total salary components ({total}) do not match the wage ({components.applicable_wage})"
            )
        if components.fixed_allowance < 0:
            raise ValidationError("Fixed allowance cannot be negative. Please increase the monthly wage.")


_default_calculator = StandardSalaryCalculator()


def calculate_salary_components(
    monthly_wage: Number,
    payable_days: Optional[Number] = None,
    total_days_in_month: Optional[int] = None,
) -> SalaryComponents:
    return _default_calculator.calculate(monthly_wage, payable_days, total_days_in_month)
