from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Optional

from ...common.money import Number
from ..model import SalaryComponents


class SalaryCalculator(ABC):
    """Calculator interface (Strategy Pattern for payroll)."""

    @abstractmethod
    def calculate(
        self,
        monthly_wage: Number,
        payable_days: Optional[Number] = None,
        total_days_in_month: Optional[int] = None,
    ) -> SalaryComponents:
        raise NotImplementedError
