from __future__ import annotations

from contextlib import contextmanager
from contextvars import ContextVar
from typing import Any, Dict, List, Optional, Tuple

from mysql.connector import errorcode
from mysql.connector.errors import IntegrityError

from .connection import DatabaseConnection

# (conn, cursor) of the transaction opened by db_transaction, if any.
_active: ContextVar[Optional[Tuple[Any, Any]]] = ContextVar("hr_lifecycle_active_tx", default=None)


@contextmanager
def db_transaction(conn_factory: DatabaseConnection):
    """Open one connection shared by every db_cursor() inside the block.

    Commits once on exit; any exception rolls back all statements issued
    through the nested cursors.
    """

    if _active.get() is not None:
        yield _active.get()
        return

    conn = conn_factory.connect()
    try:
        cur = conn.cursor(dictionary=True)
        token = _active.set((conn, cur))
        try:
            yield conn, cur
            conn.commit()
        finally:
            _active.reset(token)
            cur.close()
    except Exception:
        conn.rollback()
        raise
    finally:
        conn.close()


@contextmanager
def db_cursor(conn_factory: DatabaseConnection, *, dictionary: bool = True):
    active = _active.get()
    if active is not None:
        # Commit/rollback belong to the enclosing db_transaction.
        yield active
        return

    conn = conn_factory.connect()
    try:
        cur = conn.cursor(dictionary=dictionary)
        try:
            yield conn, cur
            conn.commit()
        finally:
            cur.close()
    except Exception:
        conn.rollback()
        raise
    finally:
        conn.close()


def fetchone(cur) -> Optional[Dict[str, Any]]:
    row = cur.fetchone()
    return row if row else None


def fetchall(cur) -> List[Dict[str, Any]]:
    rows = cur.fetchall()
    return list(rows or [])


def is_duplicate_key(exc: IntegrityError) -> bool:
    return getattr(exc, "errno", None) == errorcode.ER_DUP_ENTRY
