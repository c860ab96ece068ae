from __future__ import annotations

from typing import Optional, Protocol

from .model import SalaryComponents, SalaryInfo


class SalaryRepository(Protocol):
    def get_by_employee(self, employee_id: int) -> Optional[SalaryInfo]:
        raise NotImplementedError

    def upsert(self, *, employee_id: int, components: SalaryComponents) -> SalaryInfo:
        raise NotImplementedError
