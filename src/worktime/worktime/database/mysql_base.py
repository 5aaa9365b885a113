from __future__ import annotations

from contextlib import contextmanager
from datetime import time, timedelta
from typing import Any, Dict, List, Optional, Sequence, Tuple

from .connection import DatabaseConnection


@contextmanager
def db_cursor(conn_factory: DatabaseConnection, *, dictionary: bool = True):
    """Yield (conn, cursor) on a short-lived connection; commit on success, roll back on error."""
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
    return cur.fetchone() or None


def fetchall(cur) -> List[Dict[str, Any]]:
    return list(cur.fetchall() or [])


def where_clause(conditions: Sequence[Tuple[str, Any]]) -> Tuple[str, List[Any]]:
    """Build "WHERE a AND b" from (sql_fragment, value) pairs, skipping None values."""
    parts: list[str] = []
    params: list[Any] = []
    for fragment, value in conditions:
        if value is None:
            continue
        parts.append(fragment)
        params.append(value)
    if not parts:
        return "", params
    return "WHERE " + " AND ".join(parts), params


def normalize_mysql_time(value: Any) -> Optional[time]:
    """Normalize a TIME column value.

    mysql-connector hands TIME back as datetime.time, datetime.timedelta or
    a 'HH:MM[:SS]' string depending on the connector build.
    """

    if value is None or isinstance(value, time):
        return value

    if isinstance(value, timedelta):
        seconds = int(value.total_seconds()) % 86400
        return time(seconds // 3600, (seconds % 3600) // 60, seconds % 60)

    if isinstance(value, str):
        parts = [int(p) for p in value.strip().split(":") if p]
        if len(parts) < 2:
            raise ValueError(f"Invalid time string: {value!r}")
        return time(*parts[:3])

    raise TypeError(f"Unsupported MySQL TIME value type: {type(value)!r}")
