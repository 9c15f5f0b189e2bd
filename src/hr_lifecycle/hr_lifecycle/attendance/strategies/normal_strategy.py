from __future__ import annotations

from datetime import datetime

from ...core.enums import CheckInStatus, CheckOutStatus
from ...shifts.model import ShiftWindow
from .base import CheckInStrategy, CheckOutStrategy, StatusDecision


class NormalStrategy(CheckInStrategy, CheckOutStrategy):
    """On-time check-in, on-time check-out."""

    def decide_checkin(self, *, now: datetime, window: ShiftWindow) -> StatusDecision:
        return StatusDecision(status=CheckInStatus.ON_TIME, offset=now - window.start)

    def decide_checkout(self, *, now: datetime, window: ShiftWindow) -> StatusDecision:
        return StatusDecision(status=CheckOutStatus.ON_TIME, offset=now - window.end)
