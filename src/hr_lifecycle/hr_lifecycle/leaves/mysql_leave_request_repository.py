from __future__ import annotations

from datetime import date, datetime
from decimal import Decimal
from typing import Optional, Sequence

from ..common.datetime_utils import from_utc_naive, to_utc_naive
from ..core.enums import DayType, LeaveStatus
from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall, fetchone
from .model import LeaveRequest
from .repository import LeaveRequestRepository

_COLUMNS = """
    request_id, user_id, leave_type_id, start_date, end_date, day_type,
    total_days, reason, status, created_at, approved_by, approved_at,
    rejection_reason
"""


def _to_request(r: dict) -> LeaveRequest:
    return LeaveRequest(
        request_id=int(r["request_id"]),
        user_id=int(r["user_id"]),
        leave_type_id=r["leave_type_id"],
        start_date=r["start_date"],
        end_date=r["end_date"],
        day_type=DayType(r["day_type"]),
        total_days=Decimal(r["total_days"]),
        reason=r.get("reason") or "",
        status=LeaveStatus(r["status"]),
        created_at=from_utc_naive(r["created_at"]),
        approved_by=int(r["approved_by"]) if r.get("approved_by") is not None else None,
        approved_at=from_utc_naive(r.get("approved_at")),
        rejection_reason=r.get("rejection_reason"),
    )


class MySQLLeaveRequestRepository(LeaveRequestRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def create(
        self,
        *,
        user_id: int,
        leave_type_id: str,
        start_date: date,
        end_date: date,
        day_type: DayType,
        total_days: Decimal,
        reason: str,
        active_on: date,
    ) -> Optional[int]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                INSERT INTO leave_requests(
                    user_id, leave_type_id, start_date, end_date, day_type,
                    total_days, reason, status, created_at
                )
                SELECT %s,%s,%s,%s,%s,%s,%s,%s,UTC_TIMESTAMP()
                FROM DUAL
                WHERE NOT EXISTS (
                    SELECT 1 FROM (
                        SELECT request_id FROM leave_requests
                        WHERE user_id=%s
                          AND status IN (%s,%s)
                          AND end_date >= %s
                    ) AS active_requests
                )
                """,
                (
                    int(user_id),
                    leave_type_id,
                    start_date,
                    end_date,
                    day_type.value,
                    total_days,
                    reason,
                    LeaveStatus.PENDING.value,
                    int(user_id),
                    LeaveStatus.PENDING.value,
                    LeaveStatus.APPROVED.value,
                    active_on,
                ),
            )
            if cur.rowcount == 0:
                return None
            return int(cur.lastrowid)

    def get(self, *, request_id: int) -> Optional[LeaveRequest]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"SELECT {_COLUMNS} FROM leave_requests WHERE request_id=%s",
                (int(request_id),),
            )
            r = fetchone(cur)
            return _to_request(r) if r else None

    def transition(
        self,
        *,
        request_id: int,
        to_status: LeaveStatus,
        processed_by: Optional[int],
        processed_at: Optional[datetime],
        rejection_reason: Optional[str] = None,
        requester_id: Optional[int] = None,
    ) -> bool:
        clauses = ["request_id=%s", "status=%s"]
        params: list[object] = [
            to_status.value,
            processed_by,
            to_utc_naive(processed_at),
            rejection_reason,
            int(request_id),
            LeaveStatus.PENDING.value,
        ]
        if requester_id is not None:
            clauses.append("user_id=%s")
            params.append(int(requester_id))

        where = " AND ".join(clauses)

        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                UPDATE leave_requests
                SET status=%s, approved_by=%s, approved_at=%s, rejection_reason=%s
                WHERE {where}
                """,
                tuple(params),
            )
            return cur.rowcount > 0

    def list_for_user(self, *, user_id: int, limit: int = 200) -> Sequence[LeaveRequest]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                SELECT {_COLUMNS}
                FROM leave_requests
                WHERE user_id=%s
                ORDER BY created_at DESC
                LIMIT %s
                """,
                (int(user_id), int(limit)),
            )
            return [_to_request(r) for r in fetchall(cur)]

    def list_by_status(self, *, status: LeaveStatus, limit: int = 200) -> Sequence[LeaveRequest]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                SELECT {_COLUMNS}
                FROM leave_requests
                WHERE status=%s
                ORDER BY created_at ASC
                LIMIT %s
                """,
                (status.value, int(limit)),
            )
            return [_to_request(r) for r in fetchall(cur)]
