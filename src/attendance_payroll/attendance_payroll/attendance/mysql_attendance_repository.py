from __future__ import annotations

from datetime import date, datetime
from typing import Any, Dict, Optional, Sequence

from mysql.connector.errors import IntegrityError

from ..core.exceptions import DuplicateSessionError
from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall, fetchone, is_duplicate_key, opt_float
from .model import AttendanceGalleryRow, AttendanceLog
from .repository import AttendanceRepository

_COLUMNS = (
    "al.log_id, al.user_id, al.work_date, al.clock_in_time, al.clock_in_photo_ref, "
    "al.clock_out_time, al.clock_out_photo_ref, al.total_hours, al.created_at"
)


def _to_log(r: Dict[str, Any]) -> AttendanceLog:
    return AttendanceLog(
        log_id=int(r["log_id"]),
        user_id=int(r["user_id"]),
        work_date=r["work_date"],
        clock_in_time=r.get("clock_in_time"),
        clock_in_photo_ref=r.get("clock_in_photo_ref"),
        clock_out_time=r.get("clock_out_time"),
        clock_out_photo_ref=r.get("clock_out_photo_ref"),
        total_hours=opt_float(r.get("total_hours")),
        created_at=r.get("created_at"),
    )


class MySQLAttendanceRepository(AttendanceRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def get_by_id(self, log_id: int) -> Optional[AttendanceLog]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT {_COLUMNS} FROM attendance_logs al WHERE al.log_id=%s", (int(log_id),))
            r = fetchone(cur)
            return _to_log(r) if r else None

    def get_for_user_and_date(self, user_id: int, work_date: date) -> Optional[AttendanceLog]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"SELECT {_COLUMNS} FROM attendance_logs al WHERE al.user_id=%s AND al.work_date=%s",
                (int(user_id), work_date),
            )
            r = fetchone(cur)
            return _to_log(r) if r else None

    def get_recent_for_user(self, user_id: int, limit: int) -> Sequence[AttendanceLog]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                SELECT {_COLUMNS}
                FROM attendance_logs al
                WHERE al.user_id=%s
                ORDER BY al.work_date DESC
                LIMIT %s
                """,
                (int(user_id), int(limit)),
            )
            return [_to_log(r) for r in fetchall(cur)]

    def create_clock_in(
        self,
        *,
        user_id: int,
        work_date: date,
        clock_in_time: datetime,
        photo_ref: Optional[str],
    ) -> int:
        try:
            with db_cursor(self._conn_factory) as (_, cur):
                cur.execute(
                    """
                    INSERT INTO attendance_logs(user_id, work_date, clock_in_time, clock_in_photo_ref)
                    VALUES(%s,%s,%s,%s)
                    """,
                    (int(user_id), work_date, clock_in_time, photo_ref),
                )
                return int(cur.lastrowid)
        except IntegrityError as e:
            if is_duplicate_key(e):
                raise DuplicateSessionError(f"User {user_id} already clocked in on {work_date.isoformat()}") from e
            raise

    def close_session(
        self,
        *,
        log_id: int,
        clock_out_time: datetime,
        photo_ref: Optional[str],
        total_hours: float,
    ) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                UPDATE attendance_logs
                SET clock_out_time=%s, clock_out_photo_ref=%s, total_hours=%s
                WHERE log_id=%s AND clock_out_time IS NULL
                """,
                (clock_out_time, photo_ref, float(total_hours), int(log_id)),
            )
            return cur.rowcount > 0

    def list_between(
        self,
        *,
        start_date: date,
        end_date: date,
        user_id: Optional[int] = None,
    ) -> Sequence[AttendanceLog]:
        clauses = ["al.work_date BETWEEN %s AND %s"]
        params: list[object] = [start_date, end_date]
        if user_id is not None:
            clauses.append("al.user_id=%s")
            params.append(int(user_id))

        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                SELECT {_COLUMNS}
                FROM attendance_logs al
                WHERE {" AND ".join(clauses)}
                ORDER BY al.work_date ASC, al.log_id ASC
                """,
                tuple(params),
            )
            return [_to_log(r) for r in fetchall(cur)]

    def list_gallery(self, *, work_date: Optional[date] = None) -> Sequence[AttendanceGalleryRow]:
        where = "WHERE al.work_date=%s" if work_date is not None else ""
        params = (work_date,) if work_date is not None else ()

        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                SELECT {_COLUMNS}, u.full_name, u.email
                FROM attendance_logs al
                JOIN users u ON u.user_id = al.user_id
                {where}
                ORDER BY al.work_date DESC, al.clock_in_time DESC
                """,
                params,
            )
            return [
                AttendanceGalleryRow(
                    log=_to_log(r),
                    user_name=r.get("full_name") or r["email"].split("@")[0],
                    user_email=r["email"],
                )
                for r in fetchall(cur)
            ]
