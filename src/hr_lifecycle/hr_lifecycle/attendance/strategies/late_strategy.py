from __future__ import annotations

from datetime import datetime

from ...core.enums import CheckInStatus
from ...shifts.model import ShiftWindow
from .base import CheckInStrategy, StatusDecision


class LateStrategy(CheckInStrategy):
    """Late check-in."""

    def decide_checkin(self, *, now: datetime, window: ShiftWindow) -> StatusDecision:
        return StatusDecision(status=CheckInStatus.LATE, offset=now - window.start)
