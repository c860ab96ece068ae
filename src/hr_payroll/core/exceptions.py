from __future__ import annotations


class DomainError(Exception):
    """Base exception for business rule violations."""


class ValidationError(DomainError):
    """Raised when input data is invalid or violates domain rules."""


class NotFoundError(DomainError):
    """Raised when a referenced employee/leave/allocation/salary record is absent."""


class AuthorizationError(DomainError):
    """Raised when a user lacks permission for an action."""


class InvalidStateError(DomainError):
    """Raised when a leave is decided twice (status is no longer PENDING)."""


class NoAllocationError(DomainError):
    """Raised when no allocation row exists for the leave type and year."""


class InsufficientBalanceError(DomainError):
    """Raised when the requested days exceed the remaining allocation."""

    def __init__(self, *, requested: int, available: int):
        super().__init__(
            f"Insufficient leave balance. Requested: {requested} days, Available: {available} days"
        )
        self.requested = requested
        self.available = available
