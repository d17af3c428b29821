from __future__ import annotations

import logging
import re
from pathlib import Path
from typing import Iterable, Mapping

from werkzeug.security import generate_password_hash

from ..core.enums import Role
from .connection import DatabaseConnection, DBConfig
from .mysql_base import db_cursor, fetchone

logger = logging.getLogger(__name__)

DEMO_ACCOUNTS = (
    # (full_name, email, password, role, hourly_rate)
    ("Admin Demo", "admin@company.com", "admin123", Role.ADMIN, 0.0),
    ("John Smith", "john@company.com", "employee123", Role.EMPLOYEE, 25.0),
)


def _strip_create_db_and_use(sql: str) -> str:
    # Keep schema.sql usable regardless of the configured DB name.
    sql = re.sub(r"(?im)^\s*CREATE\s+DATABASE\b.*?;\s*$", "", sql)
    sql = re.sub(r"(?im)^\s*USE\b.*?;\s*$", "", sql)
    return sql


def iter_sql_statements(sql: str) -> Iterable[str]:
    """Split a SQL script on ';' outside quotes, dropping '--' comment lines."""
    lines = [ln for ln in sql.splitlines() if not ln.lstrip().startswith("--")]
    buf: list[str] = []
    quote = ""
    escaped = False
    for ch in "\n".join(lines):
        if quote:
            if escaped:
                escaped = False
            elif ch == "\\":
                escaped = True
            elif ch == quote:
                quote = ""
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


def _run_script(conn_factory: DatabaseConnection, path: str | Path) -> int:
    sql = _strip_create_db_and_use(Path(path).read_text(encoding="utf-8"))
    count = 0
    with db_cursor(conn_factory, dictionary=False) as (_, cur):
        for stmt in iter_sql_statements(sql):
            cur.execute(stmt)
            count += 1
    return count


def ensure_database_exists(db_config: Mapping) -> None:
    config = DBConfig.from_mapping(db_config)
    conn = DatabaseConnection(config).connect(with_database=False)
    try:
        cur = conn.cursor()
        cur.execute(
            f"CREATE DATABASE IF NOT EXISTS `{config.database}` CHARACTER SET utf8mb4 COLLATE utf8mb4_unicode_ci"
        )
        conn.commit()
    finally:
        conn.close()


def apply_schema(db_config: Mapping, *, schema_path: str | Path) -> None:
    ensure_database_exists(db_config)
    n = _run_script(DatabaseConnection(DBConfig.from_mapping(db_config)), schema_path)
    logger.info("Applied %s (%d statements)", Path(schema_path).name, n)


def apply_seed_sql(db_config: Mapping, *, seed_path: str | Path) -> None:
    n = _run_script(DatabaseConnection(DBConfig.from_mapping(db_config)), seed_path)
    logger.info("Applied %s (%d statements)", Path(seed_path).name, n)


def ensure_demo_users(db_config: Mapping) -> None:
    """Create or refresh the demo admin/employee accounts."""
    conn_factory = DatabaseConnection(DBConfig.from_mapping(db_config))
    with db_cursor(conn_factory) as (_, cur):
        for full_name, email, password, role, hourly_rate in DEMO_ACCOUNTS:
            password_hash = generate_password_hash(password)
            cur.execute("SELECT user_id FROM users WHERE email=%s", (email,))
            if fetchone(cur):
                cur.execute(
                    """
                    UPDATE users
                    SET full_name=%s, password_hash=%s, role=%s, hourly_rate=%s
                    WHERE email=%s
                    """,
                    (full_name, password_hash, role.value, hourly_rate, email),
                )
            else:
                cur.execute(
                    """
                    INSERT INTO users (full_name, email, password_hash, role, hourly_rate)
                    VALUES (%s, %s, %s, %s, %s)
                    """,
                    (full_name, email, password_hash, role.value, hourly_rate),
                )
    logger.info("Demo accounts ready: %s", ", ".join(acc[1] for acc in DEMO_ACCOUNTS))


def list_tables(db_config: Mapping) -> list[str]:
    conn_factory = DatabaseConnection(DBConfig.from_mapping(db_config))
    with db_cursor(conn_factory, dictionary=False) as (_, cur):
        cur.execute("SHOW TABLES")
        return [row[0] for row in cur.fetchall()]
