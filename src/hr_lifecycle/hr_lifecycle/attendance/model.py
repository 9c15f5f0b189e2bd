from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime
from decimal import Decimal
from typing import Optional

from ..core.enums import CheckInStatus, CheckOutStatus


@dataclass(frozen=True)
class AttendanceRecord:
    """Domain entity: one user's attendance for one org-local day.

    Statuses are stored at write time and never re-derived from the
    timestamps afterwards.
    """

    attendance_id: int
    user_id: int
    work_date: date
    check_in_time: Optional[datetime]
    check_out_time: Optional[datetime] = None
    check_in_status: Optional[CheckInStatus] = None
    check_out_status: Optional[CheckOutStatus] = None
    total_hours: Optional[Decimal] = None
    overtime_hours: Optional[Decimal] = None

    @property
    def is_checked_in(self) -> bool:
        return self.check_in_time is not None

    @property
    def is_checked_out(self) -> bool:
        return self.check_out_time is not None


@dataclass(frozen=True)
class AutoCheckoutResult:
    processed_user_ids: tuple[int, ...] = ()
    skipped_user_ids: tuple[int, ...] = ()
    error_user_ids: tuple[int, ...] = ()

    @property
    def processed_count(self) -> int:
        return len(self.processed_user_ids)

    @property
    def error_count(self) -> int:
        return len(self.error_user_ids)
