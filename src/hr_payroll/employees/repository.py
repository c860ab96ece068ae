from __future__ import annotations

from typing import FrozenSet, Optional, Protocol, Sequence

from .model import Employee


class EmployeeRepository(Protocol):
    """Repository interface for Employee.

    Note (DIP): services depend on this interface, not on a concrete DB.
    """

    def get_by_id(self, employee_id: int) -> Optional[Employee]:
        raise NotImplementedError

    def get_by_user_id(self, user_id: int) -> Optional[Employee]:
        raise NotImplementedError

    def list_all(self) -> Sequence[Employee]:
        raise NotImplementedError

    def update(
        self,
        employee_id: int,
        *,
        first_name: Optional[str] = None,
        last_name: Optional[str] = None,
        break_time_hours: Optional[float] = None,
        working_days: Optional[FrozenSet[int]] = None,
    ) -> bool:
        """Update only the fields that are not None. Returns False when the employee is missing."""
        raise NotImplementedError
