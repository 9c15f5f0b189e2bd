from __future__ import annotations

from dataclasses import dataclass
from datetime import timedelta, timezone
from functools import partial
from typing import Any, Callable, ContextManager, Optional

from .attendance.factory import AttendanceStrategyFactory
from .attendance.mysql_attendance_repository import MySQLAttendanceRepository
from .attendance.repository import AttendanceRepository
from .attendance.service import AttendanceService
from .common.datetime_utils import org_timezone
from .core.constants import (
    DEFAULT_AUTO_CHECKOUT_AFTER_HOURS,
    DEFAULT_CHECKOUT_TOLERANCE_SECONDS,
    DEFAULT_ORG_UTC_OFFSET_HOURS,
)
from .database.connection import DBConfig, DatabaseConnection
from .database.mysql_base import db_transaction
from .leaves.ledger import LeaveBalanceLedger
from .leaves.mysql_leave_balance_repository import MySQLLeaveBalanceRepository
from .leaves.mysql_leave_request_repository import MySQLLeaveRequestRepository
from .leaves.repository import LeaveBalanceRepository, LeaveRequestRepository
from .leaves.service import LeaveRequestService
from .notifications.sink import MySQLNotificationSink, NotificationEmitter, NotificationSink
from .shifts.resolver import ShiftWindowResolver
from .users.identity import SessionIdentity
from .users.mysql_user_repository import MySQLUserRepository
from .users.repository import UserRepository


@dataclass(frozen=True)
class Container:
    conn: Optional[DatabaseConnection]
    tz: timezone

    users_repo: UserRepository
    attendance_repo: AttendanceRepository
    leave_balances_repo: LeaveBalanceRepository
    leave_requests_repo: LeaveRequestRepository
    notification_sink: NotificationSink

    identity: SessionIdentity
    attendance_service: AttendanceService
    leave_ledger: LeaveBalanceLedger
    leave_request_service: LeaveRequestService


def assemble(
    *,
    conn: Optional[DatabaseConnection],
    users_repo: UserRepository,
    attendance_repo: AttendanceRepository,
    leave_balances_repo: LeaveBalanceRepository,
    leave_requests_repo: LeaveRequestRepository,
    notification_sink: NotificationSink,
    transaction: Callable[[], ContextManager],
    org_utc_offset_hours: int = DEFAULT_ORG_UTC_OFFSET_HOURS,
    checkout_tolerance_seconds: int = DEFAULT_CHECKOUT_TOLERANCE_SECONDS,
    auto_checkout_after_hours: int = DEFAULT_AUTO_CHECKOUT_AFTER_HOURS,
) -> Container:
    """Wire services over already-built repositories."""

    tz = org_timezone(org_utc_offset_hours)
    identity = SessionIdentity(users_repo)
    attendance_service = AttendanceService(
        attendance_repo,
        users_repo,
        ShiftWindowResolver(tz),
        strategy_factory=AttendanceStrategyFactory(
            checkout_tolerance=timedelta(seconds=int(checkout_tolerance_seconds)),
        ),
        auto_checkout_after=timedelta(hours=int(auto_checkout_after_hours)),
    )
    leave_ledger = LeaveBalanceLedger(leave_balances_repo)
    leave_request_service = LeaveRequestService(
        leave_requests_repo,
        leave_ledger,
        NotificationEmitter(notification_sink),
        tz=tz,
        transaction=transaction,
    )

    return Container(
        conn=conn,
        tz=tz,
        users_repo=users_repo,
        attendance_repo=attendance_repo,
        leave_balances_repo=leave_balances_repo,
        leave_requests_repo=leave_requests_repo,
        notification_sink=notification_sink,
        identity=identity,
        attendance_service=attendance_service,
        leave_ledger=leave_ledger,
        leave_request_service=leave_request_service,
    )


def build_container(*, db_config: dict, settings: Any = None) -> Container:
    conn = DatabaseConnection.get_instance(DBConfig.from_dict(db_config))

    return assemble(
        conn=conn,
        users_repo=MySQLUserRepository(conn),
        attendance_repo=MySQLAttendanceRepository(conn),
        leave_balances_repo=MySQLLeaveBalanceRepository(conn),
        leave_requests_repo=MySQLLeaveRequestRepository(conn),
        notification_sink=MySQLNotificationSink(conn),
        org_utc_offset_hours=int(getattr(settings, "ORG_UTC_OFFSET_HOURS", DEFAULT_ORG_UTC_OFFSET_HOURS)),
        checkout_tolerance_seconds=int(
            getattr(settings, "CHECKOUT_TOLERANCE_SECONDS", DEFAULT_CHECKOUT_TOLERANCE_SECONDS)
        ),
        auto_checkout_after_hours=int(
            getattr(settings, "AUTO_CHECKOUT_AFTER_HOURS", DEFAULT_AUTO_CHECKOUT_AFTER_HOURS)
        ),
        transaction=partial(db_transaction, conn),
    )
