from __future__ import annotations

import logging
from dataclasses import replace
from datetime import datetime, timedelta
from decimal import ROUND_HALF_UP, Decimal
from typing import Optional, Sequence

from ..common.datetime_utils import now_in, to_org_time
from ..core.constants import DEFAULT_AUTO_CHECKOUT_AFTER_HOURS, DEFAULT_HISTORY_LIMIT
from ..core.exceptions import (
    AlreadyCheckedInError,
    AlreadyCheckedOutError,
    InvalidShiftError,
    NotCheckedInError,
    NotFoundError,
    ValidationError,
)
from ..shifts.model import ShiftWindow
from ..shifts.resolver import ShiftWindowResolver
from ..users.model import User
from ..users.repository import UserRepository
from .factory import AttendanceStrategyFactory
from .model import AttendanceRecord, AutoCheckoutResult
from .repository import AttendanceRepository

logger = logging.getLogger(__name__)

_HOURS_QUANTUM = Decimal("0.01")
_SECONDS_PER_HOUR = Decimal(3600)


def _hours(delta: timedelta) -> Decimal:
    return Decimal(str(delta.total_seconds())) / _SECONDS_PER_HOUR


def worked_hours(check_in: datetime, check_out: datetime, window: ShiftWindow) -> tuple[Decimal, Decimal]:
    """(total_hours, overtime_hours), straight wall-clock with no break deduction.

    Overtime is whatever exceeds the shift length, never negative.
    """

    total = _hours(check_out - check_in)
    overtime = max(Decimal(0), total - _hours(window.length))
    return (
        total.quantize(_HOURS_QUANTUM, rounding=ROUND_HALF_UP),
        overtime.quantize(_HOURS_QUANTUM, rounding=ROUND_HALF_UP),
    )


class AttendanceService:
    """Attendance Record Manager: at most one record per user per org-local day."""

    def __init__(
        self,
        attendance: AttendanceRepository,
        users: UserRepository,
        shifts: ShiftWindowResolver,
        *,
        strategy_factory: AttendanceStrategyFactory | None = None,
        auto_checkout_after: timedelta = timedelta(hours=DEFAULT_AUTO_CHECKOUT_AFTER_HOURS),
    ):
        self._attendance = attendance
        self._users = users
        self._shifts = shifts
        self._factory = strategy_factory or AttendanceStrategyFactory()
        self._auto_checkout_after = auto_checkout_after

    def _now(self, now: Optional[datetime]) -> datetime:
        if now is None:
            return now_in(self._shifts.tz)
        return to_org_time(now, self._shifts.tz)

    def _require_user(self, user_id: int) -> User:
        user = self._users.get_by_id(int(user_id))
        if not user:
            raise NotFoundError("User not found")
        return user

    def check_in(self, user_id: int, *, now: datetime | None = None) -> AttendanceRecord:
        now = self._now(now)
        user = self._require_user(user_id)
        window = self._shifts.for_user(user, now)
        today = window.work_date

        existing = self._attendance.get_for_user_and_date(user.user_id, today)
        if existing and existing.is_checked_in:
            raise AlreadyCheckedInError("Already checked in today")

        decision = self._factory.decide_checkin(now=now, window=window)
        attendance_id = self._attendance.create_checkin(
            user_id=user.user_id,
            work_date=today,
            check_in_time=now,
            check_in_status=decision.status,
        )
        if attendance_id is None:
            logger.warning("Concurrent check-in lost for user_id=%s date=%s", user.user_id, today)
            raise AlreadyCheckedInError("Already checked in today")

        logger.info(
            "Check-in user_id=%s date=%s status=%s offset=%s",
            user.user_id,
            today,
            decision.status.value,
            decision.offset,
        )
        return AttendanceRecord(
            attendance_id=attendance_id,
            user_id=user.user_id,
            work_date=today,
            check_in_time=now,
            check_in_status=decision.status,
        )

    def check_out(self, user_id: int, *, now: datetime | None = None) -> AttendanceRecord:
        now = self._now(now)
        user = self._require_user(user_id)
        window = self._shifts.for_user(user, now)

        record = self._attendance.get_for_user_and_date(user.user_id, window.work_date)
        if not record or not record.is_checked_in:
            raise NotCheckedInError("No check-in record found for today")
        if record.is_checked_out:
            raise AlreadyCheckedOutError("Already checked out today")

        return self._close(record, check_out_time=now, window=window)

    def _close(self, record: AttendanceRecord, *, check_out_time: datetime, window: ShiftWindow) -> AttendanceRecord:
        if check_out_time <= record.check_in_time:
            raise ValidationError("Check-out time must be after check-in time")

        decision = self._factory.decide_checkout(now=check_out_time, window=window)
        total_hours, overtime_hours = worked_hours(record.check_in_time, check_out_time, window)

        ok = self._attendance.update_checkout(
            attendance_id=record.attendance_id,
            check_out_time=check_out_time,
            check_out_status=decision.status,
            total_hours=total_hours,
            overtime_hours=overtime_hours,
        )
        if not ok:
            logger.warning("Concurrent check-out lost for attendance_id=%s", record.attendance_id)
            raise AlreadyCheckedOutError("Already checked out today")

        logger.info(
            "Check-out user_id=%s date=%s status=%s total_hours=%s overtime_hours=%s",
            record.user_id,
            record.work_date,
            decision.status.value,
            total_hours,
            overtime_hours,
        )
        return replace(
            record,
            check_out_time=check_out_time,
            check_out_status=decision.status,
            total_hours=total_hours,
            overtime_hours=overtime_hours,
        )

    def auto_checkout(self, *, now: datetime | None = None) -> AutoCheckoutResult:
        """Close today's forgotten records once shift end + grace has passed.

        The check-out instant is shift end + `auto_checkout_after`, not `now`.
        """

        now = self._now(now)
        processed: list[int] = []
        skipped: list[int] = []
        failed: list[int] = []

        for record in self._attendance.list_open_for_date(now.date()):
            user = self._users.get_by_id(record.user_id)
            if not user or not user.is_active:
                skipped.append(record.user_id)
                continue

            try:
                window = self._shifts.for_user(user, now)
            except InvalidShiftError as exc:
                logger.warning("Auto check-out skipped user_id=%s: %s", user.user_id, exc)
                skipped.append(user.user_id)
                continue

            checkout_at = window.end + self._auto_checkout_after
            if now < checkout_at:
                continue
            if checkout_at <= record.check_in_time:
                # Checked in after the auto check-out instant; leave it to the user.
                skipped.append(user.user_id)
                continue

            try:
                self._close(record, check_out_time=checkout_at, window=window)
            except AlreadyCheckedOutError:
                skipped.append(user.user_id)
                continue
            except Exception:
                # One bad record must not leave the rest of the day open.
                logger.exception(
                    "Auto check-out failed for attendance_id=%s user_id=%s", record.attendance_id, user.user_id
                )
                failed.append(user.user_id)
                continue
            processed.append(user.user_id)

        logger.info(
            "Auto check-out processed=%d skipped=%d errors=%d", len(processed), len(skipped), len(failed)
        )
        return AutoCheckoutResult(
            processed_user_ids=tuple(processed),
            skipped_user_ids=tuple(skipped),
            error_user_ids=tuple(failed),
        )

    def get_today_record(self, user_id: int, *, now: datetime | None = None) -> Optional[AttendanceRecord]:
        today = self._now(now).date()
        return self._attendance.get_for_user_and_date(int(user_id), today)

    def get_history(self, user_id: int, *, limit: int = DEFAULT_HISTORY_LIMIT) -> Sequence[AttendanceRecord]:
        return self._attendance.get_recent_for_user(int(user_id), int(limit))
