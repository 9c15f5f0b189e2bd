from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime
from decimal import Decimal
from enum import Enum
from typing import Optional

from ..common.datetime_utils import format_date_range
from ..core.enums import DayType, LeaveStatus


@dataclass(frozen=True)
class LeaveType:
    """Catalog entry: a kind of leave and its yearly quota (None = no quota)."""

    leave_type_id: str
    name: str
    max_days_per_year: Optional[int]
    is_active: bool = True


@dataclass(frozen=True)
class LeaveBalance:
    """Ledger row for (user, leave type, year). Invariant: balance == allocated - used >= 0."""

    user_id: int
    leave_type_id: str
    year: int
    allocated: Decimal = Decimal(0)
    used: Decimal = Decimal(0)
    balance: Decimal = Decimal(0)

    @classmethod
    def empty(cls, *, user_id: int, leave_type_id: str, year: int) -> "LeaveBalance":
        return cls(user_id=user_id, leave_type_id=leave_type_id, year=year)


@dataclass(frozen=True)
class LeaveRequest:
    request_id: int
    user_id: int
    leave_type_id: str
    start_date: date
    end_date: date
    day_type: DayType
    total_days: Decimal
    reason: str
    status: LeaveStatus
    created_at: datetime
    approved_by: Optional[int] = None
    approved_at: Optional[datetime] = None
    rejection_reason: Optional[str] = None

    @property
    def date_range(self) -> str:
        return format_date_range(self.start_date, self.end_date)

    @property
    def benefit_year(self) -> int:
        """The ledger year a request draws from: the year it starts in."""
        return self.start_date.year


class DebitOutcome(str, Enum):
    APPLIED = "applied"
    DUPLICATE = "duplicate"
    INSUFFICIENT = "insufficient"
