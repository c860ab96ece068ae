from __future__ import annotations

from enum import Enum


class Role(str, Enum):
    """Caller role used for authorization checks."""

    ADMIN = "ADMIN"
    HR = "HR"
    EMPLOYEE = "EMPLOYEE"


class AttendanceStatus(str, Enum):
    """Per-day attendance status stored in the database."""

    PRESENT = "PRESENT"
    ABSENT = "ABSENT"
    HALF_DAY = "HALF_DAY"
    LEAVE = "LEAVE"


class LeaveType(str, Enum):
    PAID = "PAID"
    SICK = "SICK"
    UNPAID = "UNPAID"


class LeaveStatus(str, Enum):
    """Leave approval workflow. APPROVED and REJECTED are terminal."""

    PENDING = "PENDING"
    APPROVED = "APPROVED"
    REJECTED = "REJECTED"


MANAGER_ROLES = frozenset({Role.ADMIN, Role.HR})
PAID_LEAVE_TYPES = frozenset({LeaveType.PAID, LeaveType.SICK})
