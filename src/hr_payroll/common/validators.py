from __future__ import annotations

from decimal import Decimal

from ..core.exceptions import ValidationError
from .money import Number, to_decimal


def require_positive_amount(value: Number, field_name: str) -> Decimal:
    try:
        amount = to_decimal(value)
    except ValueError:
        raise ValidationError(f"{field_name} must be a number")
    if not amount.is_finite() or amount <= 0:
        raise ValidationError(f"{field_name} must be greater than 0")
    return amount


def require_non_negative(value: float, field_name: str) -> float:
    if value is None or value < 0:
        raise ValidationError(f"{field_name} must not be negative")
    return value
