from __future__ import annotations

from dataclasses import dataclass, field
from typing import FrozenSet

from ..core.constants import DEFAULT_BREAK_TIME_HOURS, DEFAULT_WORKING_DAYS


@dataclass(frozen=True)
class Employee:
    """Domain entity: Employee.

    Note: plain data object (no DB access code). `working_days` holds the
    weekdays (Monday=0) the employee is expected to work; any other weekday
    without an attendance row is a paid rest day.
    """

    employee_id: int
    user_id: int
    first_name: str
    last_name: str
    break_time_hours: float = DEFAULT_BREAK_TIME_HOURS
    working_days: FrozenSet[int] = field(default=DEFAULT_WORKING_DAYS)

    @property
    def full_name(self) -> str:
        return f"{self.first_name} {self.last_name}".strip()


def parse_working_days(value: str | None) -> FrozenSet[int]:
    """Parse the stored "0,1,2,3,4" form; empty means the default policy."""
    if not value:
        return DEFAULT_WORKING_DAYS
    days = frozenset(int(p) for p in value.split(",") if p.strip())
    if any(d < 0 or d > 6 for d in days):
        raise ValueError(f"Invalid working days: {value!r}")
    return days


def format_working_days(days: FrozenSet[int]) -> str:
    return ",".join(str(d) for d in sorted(days))
