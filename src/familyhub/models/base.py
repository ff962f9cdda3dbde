"""Conversion helpers shared by the row-backed models."""

from datetime import datetime
from decimal import ROUND_HALF_UP, Decimal, InvalidOperation

# Money is kept in whole cents
CENT = Decimal("0.01")


def parse_datetime(value: str | datetime | None) -> datetime | None:
    """Parse an ISO-8601 timestamp as stored by the tabular store."""
    if value is None or value == "":
        return None
    if isinstance(value, datetime):
        return value
    return datetime.fromisoformat(value)


def to_cents(value: Decimal) -> Decimal:
    """Round a finite amount to cents, half up."""
    return value.quantize(CENT, rounding=ROUND_HALF_UP)


def to_decimal(value, default: Decimal | None = Decimal("0")) -> Decimal | None:
    """Convert a stored money value to a Decimal in cents.

    Floats go through ``str`` so 12.5 stays ``Decimal("12.50")``.
    """
    if value is None or value == "":
        return default
    try:
        amount = value if isinstance(value, Decimal) else Decimal(str(value))
        if not amount.is_finite():
            return default
        return to_cents(amount)
    except (InvalidOperation, ValueError):
        return default


def decimal_to_store(value: Decimal | None) -> float | None:
    """Money goes to the store as REAL, rounded to cents.

    A two-decimal float reads back through ``to_decimal`` unchanged.
    """
    if value is None:
        return None
    return float(to_cents(value))
