from __future__ import annotations

from datetime import datetime

from ...core.enums import CheckOutStatus
from ...shifts.model import ShiftWindow
from .base import CheckOutStrategy, StatusDecision


class EarlyLeaveStrategy(CheckOutStrategy):
    """Check-out before the shift ended."""

    def decide_checkout(self, *, now: datetime, window: ShiftWindow) -> StatusDecision:
        return StatusDecision(status=CheckOutStatus.LEFT_EARLY, offset=now - window.end)
