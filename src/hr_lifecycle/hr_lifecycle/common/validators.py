from __future__ import annotations

from datetime import date
from typing import Optional

from ..core.exceptions import InvalidRangeError, ValidationError


def require_non_empty(value: Optional[str], field_name: str, *, error=ValidationError) -> str:
    if not value or not value.strip():
        raise error(f"{field_name} is required")
    return value.strip()


def require_date_range(start_date: date, end_date: date) -> None:
    if end_date < start_date:
        raise InvalidRangeError("End date must be on or after start date")


def require_int_in_range(value: object, field_name: str, *, low: int, high: int, error=ValidationError) -> int:
    if isinstance(value, bool) or not isinstance(value, int):
        raise error(f"{field_name} must be an integer")
    if value < low or value > high:
        raise error(f"{field_name} must be between {low} and {high}")
    return value
