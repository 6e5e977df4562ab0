"""Input coercion and validation shared by the calculator and importers."""

from __future__ import annotations

from datetime import date
from decimal import Decimal, InvalidOperation
from typing import Any

from payroll_console.errors import ValidationError

ZERO = Decimal("0")
ONE = Decimal("1")


def to_decimal(value: Any, field: str) -> Decimal:
    """Coerce a numeric input to Decimal.

    Floats go through ``str()`` so 0.05 stays 0.05. Booleans, NaN, infinities
    and unparseable strings are rejected.
    """
    if value is None or isinstance(value, bool):
        raise ValidationError(f"{field} must be a number", field=field)

    if isinstance(value, Decimal):
        result = value
    elif isinstance(value, (int, float)):
        result = Decimal(str(value))
    elif isinstance(value, str):
        text = value.strip()
        if not text:
            raise ValidationError(f"{field} is required", field=field)
        try:
            result = Decimal(text)
        except InvalidOperation:
            raise ValidationError(f"{field} must be a number, got {value!r}", field=field)
    else:
        raise ValidationError(f"{field} must be a number", field=field)

    if not result.is_finite():
        raise ValidationError(f"{field} must be finite", field=field)
    return result


def require_non_negative(value: Any, field: str) -> Decimal:
    """Coerce and check ``value >= 0``."""
    amount = to_decimal(value, field)
    if amount < ZERO:
        raise ValidationError(f"{field} cannot be negative", field=field)
    return amount


def require_fraction(value: Any, field: str) -> Decimal:
    """Coerce and check ``0 <= value <= 1``."""
    amount = to_decimal(value, field)
    if amount < ZERO or amount > ONE:
        raise ValidationError(f"{field} must be between 0 and 1", field=field)
    return amount


def parse_date(value: Any, field: str) -> date:
    """Parse an ISO date (YYYY-MM-DD) or pass a date through."""
    if isinstance(value, date):
        return value
    if not isinstance(value, str) or not value.strip():
        raise ValidationError(f"{field} is required", field=field)
    try:
        return date.fromisoformat(value.strip())
    except ValueError:
        raise ValidationError(f"{field} must be a date (YYYY-MM-DD), got {value!r}", field=field)


def require_date_order(start: date, end: date) -> None:
    """Pay periods must not end before they start."""
    if start > end:
        raise ValidationError(
            f"pay_period_start {start} is after pay_period_end {end}",
            field="pay_period_start",
        )
