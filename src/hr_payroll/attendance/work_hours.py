from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime

from ..core.constants import STANDARD_WORK_HOURS


@dataclass(frozen=True)
class WorkedHours:
    work_hours: float
    extra_hours: float


class WorkHoursCalculator:
    """Standard rule: (out - in) - break, not below 0; extra is anything over the standard day."""

    def __init__(self, *, standard_hours: float = STANDARD_WORK_HOURS):
        self._standard_hours = float(standard_hours)

    def worked_minutes(self, *, check_in: datetime, check_out: datetime, break_time_hours: float) -> int:
        minutes = int((check_out - check_in).total_seconds() // 60)
        minutes -= int(round(float(break_time_hours or 0) * 60))
        return max(minutes, 0)

    def compute(self, *, check_in: datetime, check_out: datetime, break_time_hours: float) -> WorkedHours:
        minutes = self.worked_minutes(check_in=check_in, check_out=check_out, break_time_hours=break_time_hours)
        work_hours = round(minutes / 60, 2)
        extra_hours = max(0.0, round(work_hours - self._standard_hours, 2))
        return WorkedHours(work_hours=work_hours, extra_hours=extra_hours)
