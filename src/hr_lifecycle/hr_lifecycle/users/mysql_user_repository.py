from __future__ import annotations

from typing import Optional, Sequence

from ..core.enums import Role
from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall, fetchone
from .model import User
from .repository import UserRepository

_COLUMNS = "user_id, full_name, role, shift_start_hour, shift_end_hour, is_active"


def _to_user(r: dict) -> User:
    return User(
        user_id=int(r["user_id"]),
        full_name=r["full_name"],
        role=Role(r["role"]),
        shift_start_hour=int(r["shift_start_hour"]),
        shift_end_hour=int(r["shift_end_hour"]),
        is_active=bool(r["is_active"]),
    )


class MySQLUserRepository(UserRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def get_by_id(self, user_id: int) -> Optional[User]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT {_COLUMNS} FROM users WHERE user_id=%s", (int(user_id),))
            r = fetchone(cur)
            return _to_user(r) if r else None

    def list_active_employees(self) -> Sequence[User]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                SELECT {_COLUMNS}
                FROM users
                WHERE is_active=1 AND role=%s
                ORDER BY user_id
                """,
                (Role.EMPLOYEE.value,),
            )
            return [_to_user(r) for r in fetchall(cur)]
