from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from decimal import Decimal
from typing import Optional


@dataclass(frozen=True)
class SalaryComponents:
    """Monthly salary breakdown. All amounts are rounded to cents."""

    monthly_wage: Decimal
    yearly_wage: Decimal
    applicable_wage: Decimal
    basic_salary: Decimal
    hra: Decimal
    standard_allowance: Decimal
    performance_bonus: Decimal
    lta: Decimal
    fixed_allowance: Decimal
    pf_employee: Decimal
    pf_employer: Decimal
    professional_tax: Decimal
    payable_days: Optional[Decimal] = None
    total_days_in_month: Optional[int] = None

    @property
    def is_prorated(self) -> bool:
        return self.payable_days is not None

    @property
    def earnings_total(self) -> Decimal:
        return (
            self.basic_salary
            + self.hra
            + self.standard_allowance
            + self.performance_bonus
            + self.lta
            + self.fixed_allowance
        )

    @property
    def deductions_total(self) -> Decimal:
        return self.pf_employee + self.professional_tax

    @property
    def net_pay(self) -> Decimal:
        return self.earnings_total - self.deductions_total


@dataclass(frozen=True)
class SalaryInfo:
    """Stored salary structure, one per employee (admin-owned)."""

    employee_id: int
    components: SalaryComponents
    updated_at: Optional[datetime] = None

    @property
    def monthly_wage(self) -> Decimal:
        return self.components.monthly_wage


@dataclass(frozen=True)
class PayableDays:
    payable_days: Decimal
    total_days_in_month: int


@dataclass(frozen=True)
class SalarySlip:
    employee_id: int
    year: int
    month: int
    payable: PayableDays
    components: SalaryComponents
