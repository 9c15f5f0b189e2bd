from __future__ import annotations

from datetime import date, datetime
from decimal import Decimal
from typing import Optional, Protocol, Sequence

from ..core.enums import CheckInStatus, CheckOutStatus
from .model import AttendanceRecord


class AttendanceRepository(Protocol):
    def get_recent_for_user(self, user_id: int, limit: int) -> Sequence[AttendanceRecord]:
        raise NotImplementedError

    def get_for_user_and_date(self, user_id: int, work_date: date) -> Optional[AttendanceRecord]:
        raise NotImplementedError

    def list_open_for_date(self, work_date: date) -> Sequence[AttendanceRecord]:
        """Records of `work_date` with a check-in and no check-out."""

        raise NotImplementedError

    def create_checkin(
        self,
        *,
        user_id: int,
        work_date: date,
        check_in_time: datetime,
        check_in_status: CheckInStatus,
    ) -> Optional[int]:
        """Insert the day's record; None when (user_id, work_date) already exists."""

        raise NotImplementedError

    def update_checkout(
        self,
        *,
        attendance_id: int,
        check_out_time: datetime,
        check_out_status: CheckOutStatus,
        total_hours: Decimal,
        overtime_hours: Decimal,
    ) -> bool:
        """Set the check-out only while it is still NULL; False if someone got there first."""

        raise NotImplementedError
