from __future__ import annotations

from datetime import date, datetime
from decimal import Decimal
from typing import Optional, Sequence

from mysql.connector.errors import IntegrityError

from ..common.datetime_utils import from_utc_naive, to_utc_naive
from ..core.enums import CheckInStatus, CheckOutStatus
from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall, fetchone, is_duplicate_key
from .model import AttendanceRecord
from .repository import AttendanceRepository

_COLUMNS = """
    attendance_id, user_id, work_date, check_in_time, check_out_time,
    check_in_status, check_out_status, total_hours, overtime_hours
"""


def _to_record(r: dict) -> AttendanceRecord:
    return AttendanceRecord(
        attendance_id=int(r["attendance_id"]),
        user_id=int(r["user_id"]),
        work_date=r["work_date"],
        check_in_time=from_utc_naive(r.get("check_in_time")),
        check_out_time=from_utc_naive(r.get("check_out_time")),
        check_in_status=CheckInStatus(r["check_in_status"]) if r.get("check_in_status") else None,
        check_out_status=CheckOutStatus(r["check_out_status"]) if r.get("check_out_status") else None,
        total_hours=r.get("total_hours"),
        overtime_hours=r.get("overtime_hours"),
    )


class MySQLAttendanceRepository(AttendanceRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def get_recent_for_user(self, user_id: int, limit: int) -> Sequence[AttendanceRecord]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                SELECT {_COLUMNS}
                FROM attendance_records
                WHERE user_id=%s
                ORDER BY work_date DESC
                LIMIT %s
                """,
                (int(user_id), int(limit)),
            )
            return [_to_record(r) for r in fetchall(cur)]

    def get_for_user_and_date(self, user_id: int, work_date: date) -> Optional[AttendanceRecord]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                SELECT {_COLUMNS}
                FROM attendance_records
                WHERE user_id=%s AND work_date=%s
                """,
                (int(user_id), work_date),
            )
            r = fetchone(cur)
            return _to_record(r) if r else None

    def list_open_for_date(self, work_date: date) -> Sequence[AttendanceRecord]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                SELECT {_COLUMNS}
                FROM attendance_records
                WHERE work_date=%s
                  AND check_in_time IS NOT NULL
                  AND check_out_time IS NULL
                ORDER BY check_in_time
                """,
                (work_date,),
            )
            return [_to_record(r) for r in fetchall(cur)]

    def create_checkin(
        self,
        *,
        user_id: int,
        work_date: date,
        check_in_time: datetime,
        check_in_status: CheckInStatus,
    ) -> Optional[int]:
        try:
            with db_cursor(self._conn_factory) as (_, cur):
                cur.execute(
                    """
                    INSERT INTO attendance_records(user_id, work_date, check_in_time, check_in_status)
                    VALUES(%s,%s,%s,%s)
                    """,
                    (int(user_id), work_date, to_utc_naive(check_in_time), check_in_status.value),
                )
                return int(cur.lastrowid)
        except IntegrityError as exc:
            # uq_attendance_user_date: another request created today's row.
            if is_duplicate_key(exc):
                return None
            raise

    def update_checkout(
        self,
        *,
        attendance_id: int,
        check_out_time: datetime,
        check_out_status: CheckOutStatus,
        total_hours: Decimal,
        overtime_hours: Decimal,
    ) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                UPDATE attendance_records
                SET check_out_time=%s, check_out_status=%s, total_hours=%s, overtime_hours=%s
                WHERE attendance_id=%s AND check_out_time IS NULL
                """,
                (
                    to_utc_naive(check_out_time),
                    check_out_status.value,
                    total_hours,
                    overtime_hours,
                    int(attendance_id),
                ),
            )
            return cur.rowcount > 0
