from __future__ import annotations

import logging
import threading
from datetime import datetime, timedelta
from decimal import Decimal

import pytest

from src.hr_lifecycle.hr_lifecycle.attendance.service import AttendanceService, worked_hours
from src.hr_lifecycle.hr_lifecycle.core.enums import CheckInStatus, CheckOutStatus, Role
from src.hr_lifecycle.hr_lifecycle.core.exceptions import (
    AlreadyCheckedInError,
    AlreadyCheckedOutError,
    NotCheckedInError,
    NotFoundError,
    ValidationError,
)
from src.hr_lifecycle.hr_lifecycle.shifts.model import ShiftWindow
from src.hr_lifecycle.hr_lifecycle.shifts.resolver import ShiftWindowResolver
from src.hr_lifecycle.hr_lifecycle.users.model import User


@pytest.fixture
def service(attendance_repo, users_repo, tz):
    return AttendanceService(attendance_repo, users_repo, ShiftWindowResolver(tz))


def on_day(tz, hour, minute=0, second=0):
    return datetime(2026, 3, 3, hour, minute, second, tzinfo=tz)


def test_check_in_before_shift_start_is_on_time(service, attendance_repo, employee, tz):
    record = service.check_in(employee.user_id, now=on_day(tz, 10, 55))

    assert record.check_in_status == CheckInStatus.ON_TIME
    assert record.work_date.isoformat() == "2026-03-03"
    assert attendance_repo.get_for_user_and_date(employee.user_id, record.work_date) is not None


def test_check_in_after_shift_start_is_late(service, employee, tz):
    record = service.check_in(employee.user_id, now=on_day(tz, 11, 1))

    assert record.check_in_status == CheckInStatus.LATE


def test_second_check_in_same_day_fails(service, employee, tz):
    service.check_in(employee.user_id, now=on_day(tz, 10, 55))

    with pytest.raises(AlreadyCheckedInError):
        service.check_in(employee.user_id, now=on_day(tz, 12, 0))


def test_check_in_lost_race_reports_already_checked_in(service, attendance_repo, employee, tz, monkeypatch):
    monkeypatch.setattr(attendance_repo, "create_checkin", lambda **kwargs: None)

    with pytest.raises(AlreadyCheckedInError):
        service.check_in(employee.user_id, now=on_day(tz, 10, 55))


def test_concurrent_check_ins_create_exactly_one_record(service, attendance_repo, employee, tz):
    barrier = threading.Barrier(8)
    outcomes = []
    lock = threading.Lock()

    def worker():
        barrier.wait()
        try:
            service.check_in(employee.user_id, now=on_day(tz, 10, 55))
            result = "ok"
        except AlreadyCheckedInError:
            result = "conflict"
        with lock:
            outcomes.append(result)

    threads = [threading.Thread(target=worker) for _ in range(8)]
    for t in threads:
        t.start()
    for t in threads:
        t.join()

    assert outcomes.count("ok") == 1
    assert outcomes.count("conflict") == 7
    assert len(attendance_repo.records) == 1


def test_check_in_unknown_user(service, tz):
    with pytest.raises(NotFoundError):
        service.check_in(12345, now=on_day(tz, 10, 0))


def test_check_out_without_check_in(service, employee, tz):
    with pytest.raises(NotCheckedInError):
        service.check_out(employee.user_id, now=on_day(tz, 19, 0))


def test_check_out_records_hours_and_overtime(service, employee, tz):
    service.check_in(employee.user_id, now=on_day(tz, 10, 55))
    record = service.check_out(employee.user_id, now=on_day(tz, 19, 30))

    assert record.check_out_status == CheckOutStatus.OVERTIME
    assert record.total_hours == Decimal("8.58")
    assert record.overtime_hours == Decimal("0.58")


def test_early_check_out_has_no_overtime(service, employee, tz):
    service.check_in(employee.user_id, now=on_day(tz, 11, 30))
    record = service.check_out(employee.user_id, now=on_day(tz, 15, 0))

    assert record.check_out_status == CheckOutStatus.LEFT_EARLY
    assert record.total_hours == Decimal("3.50")
    assert record.overtime_hours == Decimal("0.00")


def test_second_check_out_fails(service, employee, tz):
    service.check_in(employee.user_id, now=on_day(tz, 10, 55))
    service.check_out(employee.user_id, now=on_day(tz, 19, 0))

    with pytest.raises(AlreadyCheckedOutError):
        service.check_out(employee.user_id, now=on_day(tz, 19, 5))


def test_check_out_lost_race(service, attendance_repo, employee, tz, monkeypatch):
    service.check_in(employee.user_id, now=on_day(tz, 10, 55))
    monkeypatch.setattr(attendance_repo, "update_checkout", lambda **kwargs: False)

    with pytest.raises(AlreadyCheckedOutError):
        service.check_out(employee.user_id, now=on_day(tz, 19, 0))


def test_check_out_before_check_in_is_rejected(service, employee, tz):
    service.check_in(employee.user_id, now=on_day(tz, 12, 0))

    with pytest.raises(ValidationError):
        service.check_out(employee.user_id, now=on_day(tz, 11, 59))


def test_stored_status_survives_shift_change(service, attendance_repo, users_repo, employee, tz):
    service.check_in(employee.user_id, now=on_day(tz, 10, 55))
    users_repo.add(User(user_id=employee.user_id, full_name=employee.full_name, role=Role.EMPLOYEE,
                        shift_start_hour=8, shift_end_hour=16))

    record = service.get_today_record(employee.user_id, now=on_day(tz, 12, 0))

    assert record.check_in_status == CheckInStatus.ON_TIME


def test_worked_hours_never_negative_overtime(tz):
    window = ShiftWindow(start=on_day(tz, 11), end=on_day(tz, 19))

    total, overtime = worked_hours(on_day(tz, 11), on_day(tz, 13, 20), window)

    assert total == Decimal("2.33")
    assert overtime == Decimal("0.00")


def test_auto_checkout_closes_records_at_shift_end_plus_grace(service, attendance_repo, employee, tz):
    service.check_in(employee.user_id, now=on_day(tz, 10, 55))

    result = service.auto_checkout(now=on_day(tz, 20, 30))

    record = attendance_repo.get_for_user_and_date(employee.user_id, on_day(tz, 0).date())
    assert result.processed_user_ids == (employee.user_id,)
    assert record.check_out_time == on_day(tz, 20, 0)
    assert record.check_out_status == CheckOutStatus.OVERTIME
    assert record.total_hours == Decimal("9.08")
    assert record.overtime_hours == Decimal("1.08")


def test_auto_checkout_waits_until_due(service, employee, tz):
    service.check_in(employee.user_id, now=on_day(tz, 10, 55))

    result = service.auto_checkout(now=on_day(tz, 19, 30))

    assert result.processed_count == 0
    assert result.skipped_user_ids == ()


def test_auto_checkout_ignores_closed_records_and_skips_inactive_users(service, users_repo, employee, tz):
    inactive = users_repo.add(
        User(user_id=7, full_name="Gone Away", role=Role.EMPLOYEE, shift_start_hour=11, shift_end_hour=19)
    )
    service.check_in(employee.user_id, now=on_day(tz, 10, 55))
    service.check_out(employee.user_id, now=on_day(tz, 19, 0))
    service.check_in(inactive.user_id, now=on_day(tz, 11, 0))
    users_repo.add(
        User(user_id=7, full_name="Gone Away", role=Role.EMPLOYEE, shift_start_hour=11, shift_end_hour=19,
             is_active=False)
    )

    result = service.auto_checkout(now=on_day(tz, 21, 0))

    assert result.processed_user_ids == ()
    assert result.skipped_user_ids == (inactive.user_id,)


def test_auto_checkout_keeps_going_after_a_failed_record(
    service, attendance_repo, users_repo, employee, tz, monkeypatch, caplog
):
    colleague = users_repo.add(
        User(user_id=2, full_name="Omar Other", role=Role.EMPLOYEE, shift_start_hour=11, shift_end_hour=19)
    )
    first = service.check_in(employee.user_id, now=on_day(tz, 10, 55))
    service.check_in(colleague.user_id, now=on_day(tz, 11, 0))

    update_checkout = attendance_repo.update_checkout

    def flaky_update(**kwargs):
        if kwargs["attendance_id"] == first.attendance_id:
            raise ConnectionError("transient db error")
        return update_checkout(**kwargs)

    monkeypatch.setattr(attendance_repo, "update_checkout", flaky_update)

    with caplog.at_level(logging.ERROR):
        result = service.auto_checkout(now=on_day(tz, 20, 30))

    assert result.processed_user_ids == (colleague.user_id,)
    assert result.error_user_ids == (employee.user_id,)
    assert result.error_count == 1
    assert attendance_repo.get_for_user_and_date(colleague.user_id, on_day(tz, 0).date()).is_checked_out
    assert not attendance_repo.get_for_user_and_date(employee.user_id, on_day(tz, 0).date()).is_checked_out
    assert "Auto check-out failed" in caplog.text


def test_history_is_most_recent_first(service, employee, tz):
    for day in (1, 2, 3):
        service.check_in(employee.user_id, now=datetime(2026, 3, day, 10, 0, tzinfo=tz))

    history = service.get_history(employee.user_id, limit=2)

    assert [r.work_date.day for r in history] == [3, 2]


def test_custom_grace_period(attendance_repo, users_repo, employee, tz):
    service = AttendanceService(
        attendance_repo,
        users_repo,
        ShiftWindowResolver(tz),
        auto_checkout_after=timedelta(hours=2),
    )
    service.check_in(employee.user_id, now=on_day(tz, 10, 55))

    assert service.auto_checkout(now=on_day(tz, 20, 30)).processed_count == 0
    assert service.auto_checkout(now=on_day(tz, 21, 0)).processed_count == 1
