from __future__ import annotations

from contextlib import contextmanager
from datetime import time, timedelta
from typing import Any, Dict, List, Optional

from mysql.connector import errorcode
from mysql.connector.errors import IntegrityError

from .connection import DatabaseConnection


@contextmanager
def db_cursor(conn_factory: DatabaseConnection, *, dictionary: bool = True):
    """Open a connection and cursor; commit on success, roll back on error."""
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


def is_duplicate_key(err: IntegrityError) -> bool:
    return getattr(err, "errno", None) == errorcode.ER_DUP_ENTRY


def is_row_referenced(err: IntegrityError) -> bool:
    return getattr(err, "errno", None) in (errorcode.ER_ROW_IS_REFERENCED_2, errorcode.ER_ROW_IS_REFERENCED)


def opt_float(value: Any) -> Optional[float]:
    # DECIMAL/DOUBLE columns may come back as Decimal, float or None.
    return None if value is None else float(value)


def normalize_mysql_time(value: Any) -> Optional[time]:
    """Coerce a TIME column (time, timedelta or 'HH:MM[:SS]') into datetime.time."""
    if value is None or isinstance(value, time):
        return value

    if isinstance(value, timedelta):
        minutes, seconds = divmod(int(value.total_seconds()) % 86400, 60)
        hours, minutes = divmod(minutes, 60)
        return time(hours, minutes, seconds)

    if isinstance(value, str):
        try:
            parts = [int(p) for p in value.strip().split(":")]
        except ValueError:
            raise ValueError(f"Invalid time string: {value!r}") from None
        if len(parts) not in (2, 3):
            raise ValueError(f"Invalid time string: {value!r}")
        return time(*parts)

    raise TypeError(f"Unsupported MySQL TIME value type: {type(value)!r}")
