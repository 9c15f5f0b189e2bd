from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime, timedelta

from ..core.constants import DEFAULT_CHECKOUT_TOLERANCE_SECONDS
from ..shifts.model import ShiftWindow
from .strategies.base import CheckInStrategy, CheckOutStrategy, StatusDecision
from .strategies.early_strategy import EarlyLeaveStrategy
from .strategies.late_strategy import LateStrategy
from .strategies.normal_strategy import NormalStrategy
from .strategies.overtime_strategy import OvertimeStrategy


@dataclass
class AttendanceStrategyFactory:
    """Factory Pattern: choose the status strategy for an instant.

    Check-in is on time up to and including the shift start. Check-out is
    early strictly before the shift end, overtime strictly after
    end + tolerance, on time in between.
    """

    checkout_tolerance: timedelta = field(
        default_factory=lambda: timedelta(seconds=DEFAULT_CHECKOUT_TOLERANCE_SECONDS)
    )

    def for_checkin(self, *, now: datetime, window: ShiftWindow) -> CheckInStrategy:
        if now <= window.start:
            return NormalStrategy()
        return LateStrategy()

    def for_checkout(self, *, now: datetime, window: ShiftWindow) -> CheckOutStrategy:
        if now < window.end:
            return EarlyLeaveStrategy()
        if now > window.end + self.checkout_tolerance:
            return OvertimeStrategy()
        return NormalStrategy()

    def decide_checkin(self, *, now: datetime, window: ShiftWindow) -> StatusDecision:
        return self.for_checkin(now=now, window=window).decide_checkin(now=now, window=window)

    def decide_checkout(self, *, now: datetime, window: ShiftWindow) -> StatusDecision:
        return self.for_checkout(now=now, window=window).decide_checkout(now=now, window=window)
