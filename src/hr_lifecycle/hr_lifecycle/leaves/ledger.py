from __future__ import annotations

import logging
from decimal import Decimal
from typing import Sequence

from ..core.exceptions import InsufficientBalanceError, ValidationError
from .catalog import allocatable_leave_types, get_leave_type
from .model import DebitOutcome, LeaveBalance
from .repository import LeaveBalanceRepository

logger = logging.getLogger(__name__)


class LeaveBalanceLedger:
    """Allocated / used / remaining leave per user, leave type and year.

    A missing row reads as a zero balance (lazy allocation); rows are created
    by `allocate_year` at the start of a benefit year. The only mutation after
    that is `debit`, called by the leave request workflow on approval.
    """

    def __init__(self, balances: LeaveBalanceRepository):
        self._balances = balances

    def get_balance(self, user_id: int, leave_type_id: str, year: int) -> LeaveBalance:
        leave_type = get_leave_type(leave_type_id)
        row = self._balances.get(user_id=int(user_id), leave_type_id=leave_type.leave_type_id, year=int(year))
        if row is None:
            return LeaveBalance.empty(user_id=int(user_id), leave_type_id=leave_type.leave_type_id, year=int(year))
        return row

    def list_balances(self, user_id: int, year: int) -> Sequence[LeaveBalance]:
        rows = {b.leave_type_id: b for b in self._balances.list_for_user(user_id=int(user_id), year=int(year))}
        return [
            rows.get(lt.leave_type_id)
            or LeaveBalance.empty(user_id=int(user_id), leave_type_id=lt.leave_type_id, year=int(year))
            for lt in allocatable_leave_types()
        ]

    def allocate_year(self, user_id: int, year: int) -> int:
        """Create this year's rows from the catalog quotas; returns how many were new."""

        created = 0
        for leave_type in allocatable_leave_types():
            if self._balances.allocate(
                user_id=int(user_id),
                leave_type_id=leave_type.leave_type_id,
                year=int(year),
                allocated=Decimal(leave_type.max_days_per_year),
            ):
                created += 1
        if created:
            logger.info("Allocated %d leave balance rows for user_id=%s year=%s", created, user_id, year)
        return created

    def debit(
        self,
        user_id: int,
        leave_type_id: str,
        year: int,
        days: Decimal,
        *,
        leave_request_id: int,
    ) -> LeaveBalance:
        """Take `days` off the balance, once per leave request.

        Raises InsufficientBalanceError (ledger unchanged) when days > balance.
        A replay for an already-debited request changes nothing.
        """

        days = Decimal(days)
        if days <= 0:
            raise ValidationError("Days to debit must be positive")

        leave_type = get_leave_type(leave_type_id)
        outcome = self._balances.apply_debit(
            leave_request_id=int(leave_request_id),
            user_id=int(user_id),
            leave_type_id=leave_type.leave_type_id,
            year=int(year),
            days=days,
        )

        if outcome == DebitOutcome.INSUFFICIENT:
            available = self.get_balance(user_id, leave_type.leave_type_id, year).balance
            raise InsufficientBalanceError(
                f"Insufficient {leave_type.name} balance: requested {days}, available {available}",
                requested=days,
                available=available,
            )
        if outcome == DebitOutcome.DUPLICATE:
            logger.info("Ledger debit for leave_request_id=%s already applied", leave_request_id)
        else:
            logger.info(
                "Debited %s day(s) of %s for user_id=%s year=%s (leave_request_id=%s)",
                days,
                leave_type.leave_type_id,
                user_id,
                year,
                leave_request_id,
            )
        return self.get_balance(user_id, leave_type.leave_type_id, year)
