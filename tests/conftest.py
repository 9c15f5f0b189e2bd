from __future__ import annotations

import threading
from dataclasses import replace
from datetime import datetime, timedelta, timezone
from decimal import Decimal

import pytest

from src.hr_lifecycle.hr_lifecycle.attendance.model import AttendanceRecord
from src.hr_lifecycle.hr_lifecycle.core.enums import LeaveStatus, Role
from src.hr_lifecycle.hr_lifecycle.leaves.model import DebitOutcome, LeaveBalance, LeaveRequest
from src.hr_lifecycle.hr_lifecycle.users.model import User

ORG_TZ = timezone(timedelta(hours=7))


class FakeUsersRepo:
    def __init__(self, users=()):
        self._users = {u.user_id: u for u in users}

    def add(self, user: User) -> User:
        self._users[user.user_id] = user
        return user

    def get_by_id(self, user_id):
        return self._users.get(int(user_id))

    def list_active_employees(self):
        return [u for u in self._users.values() if u.is_active and u.role == Role.EMPLOYEE]


class FakeAttendanceRepo:
    def __init__(self):
        self._lock = threading.Lock()
        self._next_id = 1
        self.records: dict[int, AttendanceRecord] = {}

    def get_recent_for_user(self, user_id, limit):
        rows = [r for r in self.records.values() if r.user_id == int(user_id)]
        rows.sort(key=lambda r: r.work_date, reverse=True)
        return rows[: int(limit)]

    def get_for_user_and_date(self, user_id, work_date):
        for r in self.records.values():
            if r.user_id == int(user_id) and r.work_date == work_date:
                return r
        return None

    def list_open_for_date(self, work_date):
        return [
            r for r in self.records.values()
            if r.work_date == work_date and r.check_in_time is not None and r.check_out_time is None
        ]

    def create_checkin(self, *, user_id, work_date, check_in_time, check_in_status):
        with self._lock:
            if self.get_for_user_and_date(user_id, work_date):
                return None
            rid = self._next_id
            self._next_id += 1
            self.records[rid] = AttendanceRecord(
                attendance_id=rid,
                user_id=int(user_id),
                work_date=work_date,
                check_in_time=check_in_time,
                check_in_status=check_in_status,
            )
            return rid

    def update_checkout(self, *, attendance_id, check_out_time, check_out_status, total_hours, overtime_hours):
        with self._lock:
            r = self.records.get(int(attendance_id))
            if not r or r.check_out_time is not None:
                return False
            self.records[r.attendance_id] = replace(
                r,
                check_out_time=check_out_time,
                check_out_status=check_out_status,
                total_hours=total_hours,
                overtime_hours=overtime_hours,
            )
            return True


class FakeLeaveBalanceRepo:
    def __init__(self):
        self._lock = threading.Lock()
        self.rows: dict[tuple[int, str, int], LeaveBalance] = {}
        self.entries: dict[int, Decimal] = {}

    def set(self, *, user_id, leave_type_id, year, allocated, used=Decimal(0)):
        allocated = Decimal(allocated)
        used = Decimal(used)
        self.rows[(user_id, leave_type_id, year)] = LeaveBalance(
            user_id=user_id,
            leave_type_id=leave_type_id,
            year=year,
            allocated=allocated,
            used=used,
            balance=allocated - used,
        )

    def get(self, *, user_id, leave_type_id, year):
        return self.rows.get((int(user_id), leave_type_id, int(year)))

    def list_for_user(self, *, user_id, year):
        return [b for (u, _, y), b in sorted(self.rows.items()) if u == int(user_id) and y == int(year)]

    def allocate(self, *, user_id, leave_type_id, year, allocated):
        with self._lock:
            key = (int(user_id), leave_type_id, int(year))
            if key in self.rows:
                return False
            self.set(user_id=int(user_id), leave_type_id=leave_type_id, year=int(year), allocated=allocated)
            return True

    def apply_debit(self, *, leave_request_id, user_id, leave_type_id, year, days):
        with self._lock:
            if int(leave_request_id) in self.entries:
                return DebitOutcome.DUPLICATE
            row = self.rows.get((int(user_id), leave_type_id, int(year)))
            if row is None or row.balance < days:
                return DebitOutcome.INSUFFICIENT
            self.entries[int(leave_request_id)] = Decimal(days)
            self.rows[(row.user_id, row.leave_type_id, row.year)] = replace(
                row, used=row.used + days, balance=row.balance - days
            )
            return DebitOutcome.APPLIED


class FakeLeaveRequestRepo:
    def __init__(self):
        self._lock = threading.Lock()
        self._next_id = 1
        self.requests: dict[int, LeaveRequest] = {}

    def _has_active(self, user_id, active_on):
        for r in self.requests.values():
            if r.user_id != user_id:
                continue
            if r.status in (LeaveStatus.PENDING, LeaveStatus.APPROVED) and r.end_date >= active_on:
                return True
        return False

    def create(self, *, user_id, leave_type_id, start_date, end_date, day_type, total_days, reason, active_on):
        with self._lock:
            if self._has_active(int(user_id), active_on):
                return None
            rid = self._next_id
            self._next_id += 1
            self.requests[rid] = LeaveRequest(
                request_id=rid,
                user_id=int(user_id),
                leave_type_id=leave_type_id,
                start_date=start_date,
                end_date=end_date,
                day_type=day_type,
                total_days=total_days,
                reason=reason,
                status=LeaveStatus.PENDING,
                created_at=datetime(2026, 3, 1, 9, 0, tzinfo=timezone.utc) + timedelta(seconds=rid),
            )
            return rid

    def get(self, *, request_id):
        return self.requests.get(int(request_id))

    def transition(
        self,
        *,
        request_id,
        to_status,
        processed_by,
        processed_at,
        rejection_reason=None,
        requester_id=None,
    ):
        with self._lock:
            r = self.requests.get(int(request_id))
            if not r or r.status != LeaveStatus.PENDING:
                return False
            if requester_id is not None and r.user_id != int(requester_id):
                return False
            self.requests[r.request_id] = replace(
                r,
                status=to_status,
                approved_by=processed_by,
                approved_at=processed_at,
                rejection_reason=rejection_reason,
            )
            return True

    def list_for_user(self, *, user_id, limit=200):
        rows = [r for r in self.requests.values() if r.user_id == int(user_id)]
        rows.sort(key=lambda r: r.created_at, reverse=True)
        return rows[: int(limit)]

    def list_by_status(self, *, status, limit=200):
        rows = [r for r in self.requests.values() if r.status == status]
        rows.sort(key=lambda r: r.created_at)
        return rows[: int(limit)]


class RecordingSink:
    def __init__(self):
        self.events = []

    def emit(self, event):
        self.events.append(event)


class FailingSink:
    def __init__(self):
        self.calls = 0

    def emit(self, event):
        self.calls += 1
        raise RuntimeError("notification backend down")


@pytest.fixture
def tz():
    return ORG_TZ


@pytest.fixture
def fixed_now():
    """A Tuesday at 10:00 org-local time."""
    return datetime(2026, 3, 3, 10, 0, 0, tzinfo=ORG_TZ)


@pytest.fixture
def employee():
    return User(user_id=1, full_name="Jane Employee", role=Role.EMPLOYEE, shift_start_hour=11, shift_end_hour=19)


@pytest.fixture
def hr_admin():
    return User(user_id=99, full_name="Harriet HR", role=Role.HR_ADMIN, shift_start_hour=9, shift_end_hour=17)


@pytest.fixture
def users_repo(employee, hr_admin):
    return FakeUsersRepo([employee, hr_admin])


@pytest.fixture
def attendance_repo():
    return FakeAttendanceRepo()


@pytest.fixture
def balances_repo():
    return FakeLeaveBalanceRepo()


@pytest.fixture
def requests_repo():
    return FakeLeaveRequestRepo()


@pytest.fixture
def sink():
    return RecordingSink()


@pytest.fixture
def failing_sink():
    return FailingSink()
