from __future__ import annotations

from datetime import date, datetime
from decimal import Decimal
from typing import Optional, Protocol, Sequence

from ..core.enums import DayType, LeaveStatus
from .model import DebitOutcome, LeaveBalance, LeaveRequest


class LeaveBalanceRepository(Protocol):
    def get(self, *, user_id: int, leave_type_id: str, year: int) -> Optional[LeaveBalance]:
        raise NotImplementedError

    def list_for_user(self, *, user_id: int, year: int) -> Sequence[LeaveBalance]:
        raise NotImplementedError

    def allocate(self, *, user_id: int, leave_type_id: str, year: int, allocated: Decimal) -> bool:
        """Create the row if missing; False when it already existed (left untouched)."""

        raise NotImplementedError

    def apply_debit(
        self,
        *,
        leave_request_id: int,
        user_id: int,
        leave_type_id: str,
        year: int,
        days: Decimal,
    ) -> DebitOutcome:
        """Debit at most once per leave_request_id, never below zero."""

        raise NotImplementedError


class LeaveRequestRepository(Protocol):
    def create(
        self,
        *,
        user_id: int,
        leave_type_id: str,
        start_date: date,
        end_date: date,
        day_type: DayType,
        total_days: Decimal,
        reason: str,
        active_on: date,
    ) -> Optional[int]:
        """Insert a pending request unless the user already holds an active one.

        Active = pending or approved with end_date >= active_on. Returns None
        when the insert was refused.
        """

        raise NotImplementedError

    def get(self, *, request_id: int) -> Optional[LeaveRequest]:
        raise NotImplementedError

    def transition(
        self,
        *,
        request_id: int,
        to_status: LeaveStatus,
        processed_by: Optional[int],
        processed_at: Optional[datetime],
        rejection_reason: Optional[str] = None,
        requester_id: Optional[int] = None,
    ) -> bool:
        """Move a request out of PENDING; False if it was no longer pending."""

        raise NotImplementedError

    def list_for_user(self, *, user_id: int, limit: int = 200) -> Sequence[LeaveRequest]:
        raise NotImplementedError

    def list_by_status(self, *, status: LeaveStatus, limit: int = 200) -> Sequence[LeaveRequest]:
        raise NotImplementedError
