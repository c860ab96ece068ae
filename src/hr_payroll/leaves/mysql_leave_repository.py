from __future__ import annotations

from datetime import date, datetime
from typing import Any, Dict, Optional, Sequence

from ..core.enums import LeaveStatus, LeaveType
from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall, fetchone
from .model import Leave, LeaveAllocation
from .repository import LeaveAllocationRepository, LeaveRepository

_LEAVE_COLUMNS = (
    "leave_id, employee_id, leave_type, start_date, end_date, status, "
    "remarks, approved_by, approved_at, created_at"
)
_ALLOCATION_COLUMNS = "allocation_id, employee_id, leave_type, `year`, allocated_days, used_days"


def _to_leave(r: Dict[str, Any]) -> Leave:
    return Leave(
        leave_id=int(r["leave_id"]),
        employee_id=int(r["employee_id"]),
        leave_type=LeaveType(r["leave_type"]),
        start_date=r["start_date"],
        end_date=r["end_date"],
        status=LeaveStatus(r["status"]),
        created_at=r["created_at"],
        remarks=r.get("remarks"),
        approved_by=r.get("approved_by"),
        approved_at=r.get("approved_at"),
    )


def _to_allocation(r: Dict[str, Any]) -> LeaveAllocation:
    return LeaveAllocation(
        allocation_id=int(r["allocation_id"]),
        employee_id=int(r["employee_id"]),
        leave_type=LeaveType(r["leave_type"]),
        year=int(r["year"]),
        allocated_days=int(r["allocated_days"]),
        used_days=int(r.get("used_days") or 0),
    )


class MySQLLeaveRepository(LeaveRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def get_by_id(self, leave_id: int, *, for_update: bool = False) -> Optional[Leave]:
        lock = " FOR UPDATE" if for_update else ""
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT {_LEAVE_COLUMNS} FROM leaves WHERE leave_id=%s{lock}", (int(leave_id),))
            r = fetchone(cur)
            return _to_leave(r) if r else None

    def create(
        self,
        *,
        employee_id: int,
        leave_type: LeaveType,
        start_date: date,
        end_date: date,
        remarks: Optional[str] = None,
    ) -> int:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                INSERT INTO leaves(employee_id, leave_type, start_date, end_date, remarks, status)
                VALUES(%s,%s,%s,%s,%s,%s)
                """,
                (int(employee_id), leave_type.value, start_date, end_date, remarks, LeaveStatus.PENDING.value),
            )
            return int(cur.lastrowid)

    def list_leaves(
        self,
        *,
        employee_id: Optional[int] = None,
        status: Optional[LeaveStatus] = None,
        limit: int = 200,
    ) -> Sequence[Leave]:
        clauses: list[str] = []
        params: list[object] = []
        if employee_id is not None:
            clauses.append("employee_id=%s")
            params.append(int(employee_id))
        if status is not None:
            clauses.append("status=%s")
            params.append(status.value)

        where = f"WHERE {' AND '.join(clauses)}" if clauses else ""
        params.append(int(limit))

        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                SELECT {_LEAVE_COLUMNS}
                FROM leaves
                {where}
                ORDER BY created_at DESC
                LIMIT %s
                """,
                tuple(params),
            )
            return [_to_leave(r) for r in fetchall(cur)]

    def list_approved_overlapping(self, *, employee_id: int, start_date: date, end_date: date) -> Sequence[Leave]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                SELECT {_LEAVE_COLUMNS}
                FROM leaves
                WHERE employee_id=%s AND status=%s AND start_date<=%s AND end_date>=%s
                ORDER BY start_date
                """,
                (int(employee_id), LeaveStatus.APPROVED.value, end_date, start_date),
            )
            return [_to_leave(r) for r in fetchall(cur)]

    def set_decision(
        self,
        *,
        leave_id: int,
        status: LeaveStatus,
        decided_by: int,
        decided_at: datetime,
    ) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                UPDATE leaves
                SET status=%s, approved_by=%s, approved_at=%s
                WHERE leave_id=%s AND status=%s
                """,
                (status.value, int(decided_by), decided_at, int(leave_id), LeaveStatus.PENDING.value),
            )
            return cur.rowcount > 0


class MySQLLeaveAllocationRepository(LeaveAllocationRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def get(
        self,
        *,
        employee_id: int,
        leave_type: LeaveType,
        year: int,
        for_update: bool = False,
    ) -> Optional[LeaveAllocation]:
        lock = " FOR UPDATE" if for_update else ""
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                SELECT {_ALLOCATION_COLUMNS}
                FROM leave_allocations
                WHERE employee_id=%s AND leave_type=%s AND `year`=%s{lock}
                """,
                (int(employee_id), leave_type.value, int(year)),
            )
            r = fetchone(cur)
            return _to_allocation(r) if r else None

    def list_for_employee(self, *, employee_id: int, year: int) -> Sequence[LeaveAllocation]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                SELECT {_ALLOCATION_COLUMNS}
                FROM leave_allocations
                WHERE employee_id=%s AND `year`=%s
                ORDER BY leave_type
                """,
                (int(employee_id), int(year)),
            )
            return [_to_allocation(r) for r in fetchall(cur)]

    def create(self, *, employee_id: int, leave_type: LeaveType, year: int, allocated_days: int) -> int:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                INSERT INTO leave_allocations(employee_id, leave_type, `year`, allocated_days, used_days)
                VALUES(%s,%s,%s,%s,0)
                """,
                (int(employee_id), leave_type.value, int(year), int(allocated_days)),
            )
            return int(cur.lastrowid)

    def increment_used(self, *, allocation_id: int, days: int) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                "UPDATE leave_allocations SET used_days=used_days+%s WHERE allocation_id=%s",
                (int(days), int(allocation_id)),
            )
            return cur.rowcount > 0
