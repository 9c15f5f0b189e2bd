from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime, timedelta


@dataclass(frozen=True)
class ShiftWindow:
    """Domain value: one day's shift boundaries, timezone-aware."""

    start: datetime
    end: datetime

    @property
    def work_date(self) -> date:
        return self.start.date()

    @property
    def length(self) -> timedelta:
        return self.end - self.start
