from __future__ import annotations

from typing import Any, Dict, Optional, Sequence

from ..core.enums import PayrollStatus
from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall, fetchone
from .model import PayrollLine, PayrollRecord, PayrollRow
from .repository import PayrollRepository

_COLUMNS = (
    "pr.record_id, pr.user_id, pr.month, pr.total_hours, pr.regular_hours, pr.regular_pay, "
    "pr.overtime_hours, pr.overtime_pay, pr.gross_pay, pr.status, pr.created_at"
)


def _to_record(r: Dict[str, Any]) -> PayrollRecord:
    return PayrollRecord(
        record_id=int(r["record_id"]),
        user_id=int(r["user_id"]),
        month=r["month"],
        total_hours=float(r["total_hours"]),
        regular_hours=float(r["regular_hours"]),
        regular_pay=float(r["regular_pay"]),
        overtime_hours=float(r["overtime_hours"]),
        overtime_pay=float(r["overtime_pay"]),
        gross_pay=float(r["gross_pay"]),
        status=PayrollStatus(r["status"]),
        created_at=r.get("created_at"),
    )


class MySQLPayrollRepository(PayrollRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def get_by_id(self, record_id: int) -> Optional[PayrollRecord]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT {_COLUMNS} FROM payroll_records pr WHERE pr.record_id=%s", (int(record_id),))
            r = fetchone(cur)
            return _to_record(r) if r else None

    def list_for_month(self, month: str) -> Sequence[PayrollRow]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                SELECT {_COLUMNS}, u.full_name, u.email
                FROM payroll_records pr
                JOIN users u ON u.user_id = pr.user_id
                WHERE pr.month=%s
                ORDER BY pr.record_id ASC
                """,
                (month,),
            )
            return [
                PayrollRow(
                    record=_to_record(r),
                    employee_name=r.get("full_name") or r["email"].split("@")[0],
                    employee_email=r["email"],
                )
                for r in fetchall(cur)
            ]

    def replace_month(self, month: str, lines: Sequence[PayrollLine]) -> Sequence[PayrollRecord]:
        # Delete and inserts share one transaction: a failure rolls back the delete too.
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("DELETE FROM payroll_records WHERE month=%s", (month,))
            for line in lines:
                cur.execute(
                    """
                    INSERT INTO payroll_records(
                        user_id, month, total_hours, regular_hours, regular_pay,
                        overtime_hours, overtime_pay, gross_pay, status
                    )
                    VALUES(%s,%s,%s,%s,%s,%s,%s,%s,%s)
                    """,
                    (
                        line.user_id,
                        month,
                        line.total_hours,
                        line.regular_hours,
                        line.regular_pay,
                        line.overtime_hours,
                        line.overtime_pay,
                        line.gross_pay,
                        PayrollStatus.GENERATED.value,
                    ),
                )
            cur.execute(
                f"SELECT {_COLUMNS} FROM payroll_records pr WHERE pr.month=%s ORDER BY pr.record_id ASC",
                (month,),
            )
            return [_to_record(r) for r in fetchall(cur)]

    def mark_paid(self, record_id: int) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                "UPDATE payroll_records SET status=%s WHERE record_id=%s AND status=%s",
                (PayrollStatus.PAID.value, int(record_id), PayrollStatus.GENERATED.value),
            )
            return cur.rowcount > 0
