from __future__ import annotations

from datetime import datetime

from ...core.enums import CheckOutStatus
from ...shifts.model import ShiftWindow
from .base import CheckOutStrategy, StatusDecision


class OvertimeStrategy(CheckOutStrategy):
    """Check-out past the shift end plus tolerance."""

    def decide_checkout(self, *, now: datetime, window: ShiftWindow) -> StatusDecision:
        return StatusDecision(status=CheckOutStatus.OVERTIME, offset=now - window.end)
