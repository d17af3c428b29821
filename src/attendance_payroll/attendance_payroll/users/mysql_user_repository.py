from __future__ import annotations

from typing import Any, Dict, Optional, Sequence

from mysql.connector.errors import IntegrityError

from ..core.enums import Role
from ..core.exceptions import ValidationError
from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall, fetchone, is_duplicate_key, is_row_referenced
from .model import User
from .repository import UserRepository

_COLUMNS = "user_id, full_name, email, password_hash, role, hourly_rate, avatar_url, created_at"


def _to_user(r: Dict[str, Any]) -> User:
    return User(
        user_id=int(r["user_id"]),
        full_name=r.get("full_name"),
        email=r["email"],
        password_hash=r["password_hash"],
        role=Role(r["role"]),
        hourly_rate=float(r.get("hourly_rate") or 0),
        avatar_url=r.get("avatar_url"),
        created_at=r.get("created_at"),
    )


class MySQLUserRepository(UserRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def get_by_id(self, user_id: int) -> Optional[User]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT {_COLUMNS} FROM users WHERE user_id=%s", (int(user_id),))
            row = fetchone(cur)
            return _to_user(row) if row else None

    def get_by_email(self, email: str) -> Optional[User]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT {_COLUMNS} FROM users WHERE email=%s", (email,))
            row = fetchone(cur)
            return _to_user(row) if row else None

    def list_by_role(self, role: Role) -> Sequence[User]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"SELECT {_COLUMNS} FROM users WHERE role=%s ORDER BY created_at DESC, user_id DESC",
                (role.value,),
            )
            return [_to_user(r) for r in fetchall(cur)]

    def create_user(
        self,
        *,
        full_name: Optional[str],
        email: str,
        password_hash: str,
        role: Role,
        hourly_rate: float,
    ) -> int:
        try:
            with db_cursor(self._conn_factory) as (_, cur):
                cur.execute(
                    """
                    INSERT INTO users(full_name, email, password_hash, role, hourly_rate)
                    VALUES(%s,%s,%s,%s,%s)
                    """,
                    (full_name, email, password_hash, role.value, float(hourly_rate)),
                )
                return int(cur.lastrowid)
        except IntegrityError as e:
            if is_duplicate_key(e):
                raise ValidationError("Email is already registered") from e
            raise

    def update_profile(
        self,
        user_id: int,
        *,
        full_name: Optional[str] = None,
        hourly_rate: Optional[float] = None,
    ) -> bool:
        sets: list[str] = []
        params: list[object] = []
        if full_name is not None:
            sets.append("full_name=%s")
            params.append(full_name)
        if hourly_rate is not None:
            sets.append("hourly_rate=%s")
            params.append(float(hourly_rate))
        if not sets:
            return self.get_by_id(user_id) is not None

        params.append(int(user_id))
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"UPDATE users SET {', '.join(sets)} WHERE user_id=%s", tuple(params))
            # rowcount is 0 when values are unchanged; fall back to an existence check.
            if cur.rowcount > 0:
                return True
            cur.execute("SELECT 1 AS ok FROM users WHERE user_id=%s", (int(user_id),))
            return fetchone(cur) is not None

    def delete_by_id(self, user_id: int) -> bool:
        try:
            with db_cursor(self._conn_factory) as (_, cur):
                cur.execute("DELETE FROM users WHERE user_id=%s", (int(user_id),))
                return cur.rowcount > 0
        except IntegrityError as e:
            # Attendance and payroll rows reference the user (ON DELETE RESTRICT).
            if is_row_referenced(e):
                raise ValidationError(
                    f"User {user_id} has attendance or payroll records and cannot be deleted"
                ) from e
            raise
