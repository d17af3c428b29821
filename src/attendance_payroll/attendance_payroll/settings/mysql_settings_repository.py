from __future__ import annotations

from typing import Optional

from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchone, normalize_mysql_time
from .model import CompanySettings
from .repository import SettingsRepository

SETTINGS_ROW_ID = 1


class MySQLSettingsRepository(SettingsRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def get(self) -> Optional[CompanySettings]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                SELECT company_name, working_hours_start, working_hours_end, overtime_rate,
                       auto_checkout, auto_checkout_time, notifications_enabled, require_photo, updated_at
                FROM app_settings
                WHERE settings_id=%s
                """,
                (SETTINGS_ROW_ID,),
            )
            r = fetchone(cur)
            if not r:
                return None
            return CompanySettings(
                company_name=r["company_name"],
                working_hours_start=normalize_mysql_time(r["working_hours_start"]),
                working_hours_end=normalize_mysql_time(r["working_hours_end"]),
                overtime_rate=float(r["overtime_rate"]),
                auto_checkout=bool(r["auto_checkout"]),
                auto_checkout_time=normalize_mysql_time(r["auto_checkout_time"]),
                notifications_enabled=bool(r["notifications_enabled"]),
                require_photo=bool(r["require_photo"]),
                updated_at=r.get("updated_at"),
            )

    def save(self, settings: CompanySettings) -> CompanySettings:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                INSERT INTO app_settings(
                    settings_id, company_name, working_hours_start, working_hours_end, overtime_rate,
                    auto_checkout, auto_checkout_time, notifications_enabled, require_photo
                )
                VALUES(%s,%s,%s,%s,%s,%s,%s,%s,%s)
                ON DUPLICATE KEY UPDATE
                    company_name=VALUES(company_name),
                    working_hours_start=VALUES(working_hours_start),
                    working_hours_end=VALUES(working_hours_end),
                    overtime_rate=VALUES(overtime_rate),
                    auto_checkout=VALUES(auto_checkout),
                    auto_checkout_time=VALUES(auto_checkout_time),
                    notifications_enabled=VALUES(notifications_enabled),
                    require_photo=VALUES(require_photo)
                """,
                (
                    SETTINGS_ROW_ID,
                    settings.company_name,
                    settings.working_hours_start,
                    settings.working_hours_end,
                    float(settings.overtime_rate),
                    int(settings.auto_checkout),
                    settings.auto_checkout_time,
                    int(settings.notifications_enabled),
                    int(settings.require_photo),
                ),
            )
        return self.get() or settings
