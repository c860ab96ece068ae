from __future__ import annotations

from typing import Any, Dict, FrozenSet, Optional, Sequence

from ..core.constants import DEFAULT_LIST_LIMIT
from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall, fetchone
from .model import Employee, format_working_days, parse_working_days
from .repository import EmployeeRepository

_COLUMNS = "employee_id, user_id, first_name, last_name, break_time_hours, working_days"


def _to_employee(r: Dict[str, Any]) -> Employee:
    return Employee(
        employee_id=int(r["employee_id"]),
        user_id=int(r["user_id"]),
        first_name=r["first_name"],
        last_name=r["last_name"],
        break_time_hours=float(r.get("break_time_hours") or 0),
        working_days=parse_working_days(r.get("working_days")),
    )


class MySQLEmployeeRepository(EmployeeRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def get_by_id(self, employee_id: int) -> Optional[Employee]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT {_COLUMNS} FROM employees WHERE employee_id=%s", (int(employee_id),))
            r = fetchone(cur)
            return _to_employee(r) if r else None

    def get_by_user_id(self, user_id: int) -> Optional[Employee]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT {_COLUMNS} FROM employees WHERE user_id=%s", (int(user_id),))
            r = fetchone(cur)
            return _to_employee(r) if r else None

    def list_all(self) -> Sequence[Employee]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"SELECT {_COLUMNS} FROM employees ORDER BY created_at DESC, employee_id DESC LIMIT %s",
                (DEFAULT_LIST_LIMIT,),
            )
            return [_to_employee(r) for r in fetchall(cur)]

    def update(
        self,
        employee_id: int,
        *,
        first_name: Optional[str] = None,
        last_name: Optional[str] = None,
        break_time_hours: Optional[float] = None,
        working_days: Optional[FrozenSet[int]] = None,
    ) -> bool:
        assignments = []
        params: list[Any] = []
        if first_name is not None:
            assignments.append("first_name=%s")
            params.append(first_name)
        if last_name is not None:
            assignments.append("last_name=%s")
            params.append(last_name)
        if break_time_hours is not None:
            assignments.append("break_time_hours=%s")
            params.append(float(break_time_hours))
        if working_days is not None:
            assignments.append("working_days=%s")
            params.append(format_working_days(working_days))

        with db_cursor(self._conn_factory) as (_, cur):
            if not assignments:
                cur.execute("SELECT 1 AS found FROM employees WHERE employee_id=%s", (int(employee_id),))
                return fetchone(cur) is not None

            params.append(int(employee_id))
            cur.execute(f"UPDATE employees SET {', '.join(assignments)} WHERE employee_id=%s", tuple(params))
            # rowcount is 0 for an unchanged row too; fall back to an existence check
            if cur.rowcount > 0:
                return True
            cur.execute("SELECT 1 AS found FROM employees WHERE employee_id=%s", (int(employee_id),))
            return fetchone(cur) is not None
