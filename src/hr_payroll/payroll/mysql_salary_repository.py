from __future__ import annotations

from typing import Any, Dict, Optional

from ..core.constants import PROFESSIONAL_TAX
from ..database.connection import DatabaseConnection
from ..database.mysql_base import as_decimal, db_cursor, fetchone
from .model import SalaryComponents, SalaryInfo
from .repository import SalaryRepository

_AMOUNT_COLUMNS = (
    "monthly_wage",
    "yearly_wage",
    "basic_salary",
    "hra",
    "standard_allowance",
    "performance_bonus",
    "lta",
    "fixed_allowance",
    "pf_employee",
    "pf_employer",
    "professional_tax",
)


def _to_salary_info(r: Dict[str, Any]) -> SalaryInfo:
    amounts = {col: as_decimal(r.get(col)) for col in _AMOUNT_COLUMNS}
    if r.get("professional_tax") is None:
        amounts["professional_tax"] = PROFESSIONAL_TAX
    return SalaryInfo(
        employee_id=int(r["employee_id"]),
        components=SalaryComponents(applicable_wage=amounts["monthly_wage"], **amounts),
        updated_at=r.get("updated_at"),
    )


class MySQLSalaryRepository(SalaryRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def get_by_employee(self, employee_id: int) -> Optional[SalaryInfo]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"SELECT employee_id, {', '.join(_AMOUNT_COLUMNS)}, updated_at FROM salary_info WHERE employee_id=%s",
                (int(employee_id),),
            )
            r = fetchone(cur)
            return _to_salary_info(r) if r else None

    def upsert(self, *, employee_id: int, components: SalaryComponents) -> SalaryInfo:
        values = [getattr(components, col) for col in _AMOUNT_COLUMNS]
        placeholders = ",".join(["%s"] * (len(_AMOUNT_COLUMNS) + 1))
        updates = ", ".join(f"{col}=VALUES({col})" for col in _AMOUNT_COLUMNS)

        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                INSERT INTO salary_info(employee_id, {', '.join(_AMOUNT_COLUMNS)})
                VALUES({placeholders})
                ON DUPLICATE KEY UPDATE {updates}
                """,
                (int(employee_id), *values),
            )
        info = self.get_by_employee(employee_id)
        if info is None:
            raise RuntimeError(f"salary_info row for employee {employee_id} vanished after upsert")
        return info
