from __future__ import annotations

from decimal import Decimal
from typing import Optional, Sequence

from mysql.connector.errors import IntegrityError

from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall, fetchone, is_duplicate_key
from .model import DebitOutcome, LeaveBalance
from .repository import LeaveBalanceRepository


def _to_balance(r: dict) -> LeaveBalance:
    return LeaveBalance(
        user_id=int(r["user_id"]),
        leave_type_id=r["leave_type_id"],
        year=int(r["year"]),
        allocated=Decimal(r["allocated"]),
        used=Decimal(r["used"]),
        balance=Decimal(r["balance"]),
    )


class MySQLLeaveBalanceRepository(LeaveBalanceRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def get(self, *, user_id: int, leave_type_id: str, year: int) -> Optional[LeaveBalance]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                SELECT user_id, leave_type_id, year, allocated, used, balance
                FROM leave_balances
                WHERE user_id=%s AND leave_type_id=%s AND year=%s
                """,
                (int(user_id), leave_type_id, int(year)),
            )
            r = fetchone(cur)
            return _to_balance(r) if r else None

    def list_for_user(self, *, user_id: int, year: int) -> Sequence[LeaveBalance]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                SELECT user_id, leave_type_id, year, allocated, used, balance
                FROM leave_balances
                WHERE user_id=%s AND year=%s
                ORDER BY leave_type_id
                """,
                (int(user_id), int(year)),
            )
            return [_to_balance(r) for r in fetchall(cur)]

    def allocate(self, *, user_id: int, leave_type_id: str, year: int, allocated: Decimal) -> bool:
        try:
            with db_cursor(self._conn_factory) as (_, cur):
                cur.execute(
                    """
                    INSERT INTO leave_balances(user_id, leave_type_id, year, allocated, used, balance)
                    VALUES(%s,%s,%s,%s,0,%s)
                    """,
                    (int(user_id), leave_type_id, int(year), allocated, allocated),
                )
                return True
        except IntegrityError as exc:
            if is_duplicate_key(exc):
                return False
            raise

    def apply_debit(
        self,
        *,
        leave_request_id: int,
        user_id: int,
        leave_type_id: str,
        year: int,
        days: Decimal,
    ) -> DebitOutcome:
        # The ledger entry goes in first: its unique leave_request_id is the
        # idempotency key. If the balance cannot cover the debit the entry is
        # removed again within the same transaction.
        try:
            with db_cursor(self._conn_factory) as (_, cur):
                cur.execute(
                    """
                    INSERT INTO leave_ledger_entries(leave_request_id, user_id, leave_type_id, year, days)
                    VALUES(%s,%s,%s,%s,%s)
                    """,
                    (int(leave_request_id), int(user_id), leave_type_id, int(year), days),
                )
                cur.execute(
                    """
                    UPDATE leave_balances
                    SET used = used + %s, balance = balance - %s
                    WHERE user_id=%s AND leave_type_id=%s AND year=%s AND balance >= %s
                    """,
                    (days, days, int(user_id), leave_type_id, int(year), days),
                )
                if cur.rowcount == 0:
                    cur.execute(
                        "DELETE FROM leave_ledger_entries WHERE leave_request_id=%s",
                        (int(leave_request_id),),
                    )
                    return DebitOutcome.INSUFFICIENT
                return DebitOutcome.APPLIED
        except IntegrityError as exc:
            if is_duplicate_key(exc):
                return DebitOutcome.DUPLICATE
            raise
