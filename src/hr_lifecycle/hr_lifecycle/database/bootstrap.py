from __future__ import annotations

import logging
import re
from pathlib import Path
from typing import Iterable, Iterator

import mysql.connector

from .connection import DBConfig

logger = logging.getLogger(__name__)

_CREATE_DB = re.compile(r"(?im)^\s*CREATE\s+DATABASE\b.*?;\s*$")
_USE_DB = re.compile(r"(?im)^\s*USE\b.*?;\s*$")


def _connect(target: DBConfig, *, with_database: bool = True):
    kwargs = dict(
        host=target.host,
        port=target.port,
        user=target.user,
        password=target.password,
        use_pure=True,
    )
    if with_database:
        kwargs["database"] = target.database
    return mysql.connector.connect(**kwargs)


def _strip_create_db_and_use(sql: str) -> str:
    # schema.sql must work whatever DB_NAME is configured.
    return _USE_DB.sub("", _CREATE_DB.sub("", sql))


def iter_sql_statements(sql: str) -> Iterator[str]:
    """Split a script on ';' outside of quoted strings."""

    buf: list[str] = []
    quote: str | None = None
    escaped = False

    for ch in sql:
        if escaped:
            escaped = False
        elif ch == "\\":
            escaped = True
        elif quote:
            if ch == quote:
                quote = None
        elif ch in ("'", '"'):
            quote = ch
        elif ch == ";":
            stmt = "".join(buf).strip()
            buf.clear()
            if stmt:
                yield stmt
            continue
        buf.append(ch)

    tail = "".join(buf).strip()
    if tail:
        yield tail


def _run_script(target: DBConfig, statements: Iterable[str]) -> int:
    conn = _connect(target)
    count = 0
    try:
        cur = conn.cursor()
        for stmt in statements:
            cur.execute(stmt)
            count += 1
        conn.commit()
    finally:
        conn.close()
    return count


def ensure_database_exists(db_config: dict) -> None:
    target = DBConfig.from_dict(db_config)
    conn = _connect(target, with_database=False)
    try:
        cur = conn.cursor()
        cur.execute(
            f"CREATE DATABASE IF NOT EXISTS `{target.database}` CHARACTER SET utf8mb4 COLLATE utf8mb4_unicode_ci;"
        )
        conn.commit()
    finally:
        conn.close()


def apply_schema(db_config: dict, *, schema_path: str | Path) -> None:
    ensure_database_exists(db_config)
    sql = _strip_create_db_and_use(Path(schema_path).read_text(encoding="utf-8"))
    count = _run_script(DBConfig.from_dict(db_config), iter_sql_statements(sql))
    logger.info("Applied schema %s (%d statements)", schema_path, count)


def apply_seed_sql(db_config: dict, *, seed_path: str | Path) -> None:
    sql = _strip_create_db_and_use(Path(seed_path).read_text(encoding="utf-8"))
    count = _run_script(DBConfig.from_dict(db_config), iter_sql_statements(sql))
    logger.info("Applied seed %s (%d statements)", seed_path, count)


def list_tables(db_config: dict) -> list[str]:
    conn = _connect(DBConfig.from_dict(db_config))
    try:
        cur = conn.cursor()
        cur.execute("SHOW TABLES")
        return [row[0] for row in cur.fetchall()]
    finally:
        conn.close()
