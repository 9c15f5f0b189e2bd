from __future__ import annotations

import logging
from dataclasses import replace
from datetime import date, datetime, timezone
from decimal import Decimal
from typing import Callable, ContextManager, Optional, Sequence

from ..common.datetime_utils import now_in, to_org_time
from ..common.validators import require_date_range, require_non_empty
from ..core.constants import DEFAULT_LIST_LIMIT, MAX_LEAVE_REQUEST_DAYS
from ..core.enums import DayType, LeaveStatus
from ..core.exceptions import (
    ActiveLeaveRequestExistsError,
    AlreadyProcessedError,
    EmptyReasonError,
    InsufficientBalanceError,
    InvalidRangeError,
    NotFoundError,
    NotOwnerError,
    ValidationError,
)
from ..notifications.events import leave_approved_event, leave_rejected_event
from ..notifications.sink import NotificationEmitter
from .catalog import require_active_leave_type
from .ledger import LeaveBalanceLedger
from .model import LeaveRequest
from .repository import LeaveRequestRepository

logger = logging.getLogger(__name__)

HALF_DAY = Decimal("0.5")


def compute_total_days(start_date: date, end_date: date, day_type: DayType) -> Decimal:
    """Inclusive calendar days; a half day must be a single date and counts 0.5."""

    require_date_range(start_date, end_date)
    if day_type == DayType.HALF:
        if start_date != end_date:
            raise InvalidRangeError("A half-day leave must start and end on the same date")
        return HALF_DAY
    days = (end_date - start_date).days + 1
    if days > MAX_LEAVE_REQUEST_DAYS:
        raise InvalidRangeError(f"A leave request cannot span more than {MAX_LEAVE_REQUEST_DAYS} days")
    return Decimal(days)


def _coerce_day_type(value) -> DayType:
    try:
        return DayType(value)
    except ValueError:
        raise ValidationError(f"Invalid day type: {value!r}")


class LeaveRequestService:
    """Leave Request State Machine.

    pending -> approved | rejected (HR) ; pending -> cancelled (requester).
    Every transition is a conditional update on status = pending, so exactly
    one caller wins and the others get AlreadyProcessedError. Approval and its
    ledger debit share one transaction; the notification goes out afterwards.
    """

    def __init__(
        self,
        requests: LeaveRequestRepository,
        ledger: LeaveBalanceLedger,
        notifier: NotificationEmitter,
        *,
        tz: timezone,
        transaction: Callable[[], ContextManager],
    ):
        self._requests = requests
        self._ledger = ledger
        self._notifier = notifier
        self._tz = tz
        self._transaction = transaction

    def _now(self, now: Optional[datetime]) -> datetime:
        return to_org_time(now, self._tz) if now is not None else now_in(self._tz)

    def _require(self, request_id: int) -> LeaveRequest:
        request = self._requests.get(request_id=int(request_id))
        if not request:
            raise NotFoundError("Leave request not found")
        return request

    @staticmethod
    def _require_pending(request: LeaveRequest) -> None:
        if request.status.is_terminal:
            raise AlreadyProcessedError(f"Leave request is already {request.status.value}")

    def submit(
        self,
        user_id: int,
        leave_type_id: str,
        start_date: date,
        end_date: date,
        day_type: DayType | str,
        reason: str | None = None,
        *,
        now: datetime | None = None,
    ) -> LeaveRequest:
        leave_type = require_active_leave_type(leave_type_id)
        day_type = _coerce_day_type(day_type)
        total_days = compute_total_days(start_date, end_date, day_type)
        today = self._now(now).date()

        request_id = self._requests.create(
            user_id=int(user_id),
            leave_type_id=leave_type.leave_type_id,
            start_date=start_date,
            end_date=end_date,
            day_type=day_type,
            total_days=total_days,
            reason=(reason or "").strip(),
            active_on=today,
        )
        if request_id is None:
            raise ActiveLeaveRequestExistsError(
                "You already have an active leave request. Wait for it to be processed or cancel it first."
            )

        logger.info(
            "Leave request %s submitted by user_id=%s type=%s days=%s",
            request_id,
            user_id,
            leave_type.leave_type_id,
            total_days,
        )
        return self._require(request_id)

    def approve(self, request_id: int, approver_id: int, *, now: datetime | None = None) -> LeaveRequest:
        request = self._require(request_id)
        self._require_pending(request)

        year = request.benefit_year
        balance = self._ledger.get_balance(request.user_id, request.leave_type_id, year)
        if request.total_days > balance.balance:
            raise InsufficientBalanceError(
                f"Insufficient balance: requested {request.total_days}, available {balance.balance}",
                requested=request.total_days,
                available=balance.balance,
            )

        now = self._now(now)
        with self._transaction():
            if not self._requests.transition(
                request_id=request.request_id,
                to_status=LeaveStatus.APPROVED,
                processed_by=int(approver_id),
                processed_at=now,
            ):
                raise AlreadyProcessedError("Leave request has already been processed")
            self._ledger.debit(
                request.user_id,
                request.leave_type_id,
                year,
                request.total_days,
                leave_request_id=request.request_id,
            )

        approved = replace(request, status=LeaveStatus.APPROVED, approved_by=int(approver_id), approved_at=now)
        logger.info("Leave request %s approved by user_id=%s", approved.request_id, approver_id)
        self._notifier.emit(leave_approved_event(approved))
        return approved

    def reject(
        self,
        request_id: int,
        approver_id: int,
        reason: str | None,
        *,
        now: datetime | None = None,
    ) -> LeaveRequest:
        reason = require_non_empty(reason, "Rejection reason", error=EmptyReasonError)
        request = self._require(request_id)
        self._require_pending(request)

        now = self._now(now)
        if not self._requests.transition(
            request_id=request.request_id,
            to_status=LeaveStatus.REJECTED,
            processed_by=int(approver_id),
            processed_at=now,
            rejection_reason=reason,
        ):
            raise AlreadyProcessedError("Leave request has already been processed")

        rejected = replace(
            request,
            status=LeaveStatus.REJECTED,
            approved_by=int(approver_id),
            approved_at=now,
            rejection_reason=reason,
        )
        logger.info("Leave request %s rejected by user_id=%s", rejected.request_id, approver_id)
        self._notifier.emit(leave_rejected_event(rejected))
        return rejected

    def cancel(self, request_id: int, requester_id: int) -> LeaveRequest:
        request = self._require(request_id)
        if request.user_id != int(requester_id):
            raise NotOwnerError("Only the requester can cancel this leave request")
        self._require_pending(request)

        if not self._requests.transition(
            request_id=request.request_id,
            to_status=LeaveStatus.CANCELLED,
            processed_by=None,
            processed_at=None,
            requester_id=int(requester_id),
        ):
            raise AlreadyProcessedError("Leave request has already been processed")

        logger.info("Leave request %s cancelled by requester", request.request_id)
        return replace(request, status=LeaveStatus.CANCELLED)

    def list_my_requests(self, user_id: int, *, limit: int = DEFAULT_LIST_LIMIT) -> Sequence[LeaveRequest]:
        return self._requests.list_for_user(user_id=int(user_id), limit=int(limit))

    def list_pending(self, *, limit: int = DEFAULT_LIST_LIMIT) -> Sequence[LeaveRequest]:
        return self._requests.list_by_status(status=LeaveStatus.PENDING, limit=int(limit))
