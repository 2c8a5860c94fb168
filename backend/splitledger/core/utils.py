"""
Utility functions for the application.
"""
from typing import Any, Dict, Optional
from datetime import date, datetime, time, timezone
from decimal import Decimal, ROUND_HALF_UP

CENTS = Decimal("0.01")
MAX_AMOUNT = Decimal("9999999999.99")  # Numeric(12, 2)


def utcnow() -> datetime:
    """Current time as a naive UTC datetime (the storage convention)."""
    return datetime.now(timezone.utc).replace(tzinfo=None)


def as_naive_utc(value: Optional[datetime]) -> Optional[datetime]:
    """Normalize an aware datetime to naive UTC; naive values pass through."""
    if value is None or value.tzinfo is None:
        return value
    return value.astimezone(timezone.utc).replace(tzinfo=None)


def parse_date_param(value: Optional[str], end_of_day: bool = False) -> Optional[datetime]:
    """
    Parse a query-string date boundary.

    Accepts plain dates ("2024-03-01") and ISO timestamps, including a
    trailing "Z". A plain date used as an upper bound covers the whole day.
    """
    if value is None or not value.strip():
        return None
    raw = value.strip()
    if raw.endswith("Z"):
        raw = raw[:-1] + "+00:00"
    if len(raw) == 10:
        day = date.fromisoformat(raw)
        return datetime.combine(day, time.max if end_of_day else time.min)
    return as_naive_utc(datetime.fromisoformat(raw))


def to_money(value: Any) -> Decimal:
    """Coerce a stored or summed amount to a 2-place Decimal."""
    if value is None:
        return Decimal("0.00")
    if not isinstance(value, Decimal):
        value = Decimal(str(value))
    return value.quantize(CENTS, rounding=ROUND_HALF_UP)


def money_str(value: Any) -> str:
    """Format an amount as a fixed 2-place decimal string."""
    return f"{to_money(value):.2f}"


def format_error(message: str, details: Any = None) -> Dict[str, Any]:
    """Format error response."""
    response = {"error": message}
    if details:
        response["details"] = details
    return response
