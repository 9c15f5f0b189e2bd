from __future__ import annotations

from datetime import datetime, time, timezone

from ..common.datetime_utils import to_org_time
from ..common.validators import require_int_in_range
from ..core.exceptions import InvalidShiftError
from ..users.model import User
from .model import ShiftWindow


def validate_shift_hours(start_hour: int, end_hour: int) -> None:
    """Shifts live inside one calendar day: 0 <= start < end <= 23."""

    require_int_in_range(start_hour, "Shift start hour", low=0, high=23, error=InvalidShiftError)
    require_int_in_range(end_hour, "Shift end hour", low=0, high=23, error=InvalidShiftError)
    if start_hour >= end_hour:
        raise InvalidShiftError("Shift start hour must be before shift end hour")


def resolve_shift_window(
    *,
    shift_start_hour: int,
    shift_end_hour: int,
    reference: datetime,
    tz: timezone,
) -> ShiftWindow:
    """Shift boundaries on the org-local day containing `reference`.

    Pure: no I/O, and equal inputs give equal windows.
    """

    validate_shift_hours(shift_start_hour, shift_end_hour)
    day = to_org_time(reference, tz).date()
    return ShiftWindow(
        start=datetime.combine(day, time(hour=shift_start_hour), tzinfo=tz),
        end=datetime.combine(day, time(hour=shift_end_hour), tzinfo=tz),
    )


class ShiftWindowResolver:
    def __init__(self, tz: timezone):
        self._tz = tz

    @property
    def tz(self) -> timezone:
        return self._tz

    def for_hours(self, *, shift_start_hour: int, shift_end_hour: int, reference: datetime) -> ShiftWindow:
        return resolve_shift_window(
            shift_start_hour=shift_start_hour,
            shift_end_hour=shift_end_hour,
            reference=reference,
            tz=self._tz,
        )

    def for_user(self, user: User, reference: datetime) -> ShiftWindow:
        return self.for_hours(
            shift_start_hour=user.shift_start_hour,
            shift_end_hour=user.shift_end_hour,
            reference=reference,
        )
