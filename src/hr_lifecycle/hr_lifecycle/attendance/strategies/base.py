from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass
from datetime import datetime, timedelta

from ...core.enums import CheckInStatus, CheckOutStatus
from ...shifts.model import ShiftWindow


@dataclass(frozen=True)
class StatusDecision:
    status: CheckInStatus | CheckOutStatus
    # Signed distance from the relevant shift boundary (positive = after it).
    offset: timedelta = timedelta(0)


class CheckInStrategy(ABC):
    """Strategy Pattern: how a check-in instant maps to a status."""

    @abstractmethod
    def decide_checkin(self, *, now: datetime, window: ShiftWindow) -> StatusDecision:
        raise NotImplementedError


class CheckOutStrategy(ABC):
    """Strategy Pattern: how a check-out instant maps to a status."""

    @abstractmethod
    def decide_checkout(self, *, now: datetime, window: ShiftWindow) -> StatusDecision:
        raise NotImplementedError
