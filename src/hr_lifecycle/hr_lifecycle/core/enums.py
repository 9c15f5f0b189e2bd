from __future__ import annotations

from enum import Enum


class Role(str, Enum):
    """User roles used for authorization."""

    EMPLOYEE = "employee"
    HR_ADMIN = "hr_admin"


class CheckInStatus(str, Enum):
    ON_TIME = "ontime"
    LATE = "late"


class CheckOutStatus(str, Enum):
    ON_TIME = "ontime"
    OVERTIME = "overtime"
    LEFT_EARLY = "leftearly"


class DayType(str, Enum):
    FULL = "full"
    HALF = "half"


class LeaveStatus(str, Enum):
    """Leave request workflow states."""

    PENDING = "pending"
    APPROVED = "approved"
    REJECTED = "rejected"
    CANCELLED = "cancelled"

    @property
    def is_terminal(self) -> bool:
        return self is not LeaveStatus.PENDING


class NotificationType(str, Enum):
    LEAVE_APPROVED = "leave_approved"
    LEAVE_REJECTED = "leave_rejected"
