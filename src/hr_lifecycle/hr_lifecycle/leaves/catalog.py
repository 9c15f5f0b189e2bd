"""Static leave type catalog.

Services read leave types from here only. database/seed.sql inserts the same
rows into `leave_types` so requests and balances have a foreign-key target.
"""

from __future__ import annotations

from typing import Sequence

from ..core.exceptions import NotFoundError, ValidationError
from .model import LeaveType

LEAVE_TYPES: dict[str, LeaveType] = {
    lt.leave_type_id: lt
    for lt in (
        LeaveType("annual", "Paid Time Off", max_days_per_year=12),
        LeaveType("sick", "Sick Leave", max_days_per_year=5),
        LeaveType("wfh", "Work From Home", max_days_per_year=5),
        LeaveType("unpaid", "Unpaid Leave", max_days_per_year=None, is_active=False),
    )
}


def get_leave_type(leave_type_id: str) -> LeaveType:
    leave_type = LEAVE_TYPES.get((leave_type_id or "").strip())
    if not leave_type:
        raise NotFoundError(f"Unknown leave type: {leave_type_id!r}")
    return leave_type


def require_active_leave_type(leave_type_id: str) -> LeaveType:
    leave_type = get_leave_type(leave_type_id)
    if not leave_type.is_active:
        raise ValidationError(f"{leave_type.name} is not available")
    return leave_type


def allocatable_leave_types() -> Sequence[LeaveType]:
    """Active types that carry a yearly quota, i.e. the ones with a ledger row."""
    return [lt for lt in LEAVE_TYPES.values() if lt.is_active and lt.max_days_per_year is not None]
