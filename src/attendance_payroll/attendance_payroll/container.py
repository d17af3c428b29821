from __future__ import annotations

from dataclasses import dataclass
from typing import Mapping, Optional

from .attendance.mysql_attendance_repository import MySQLAttendanceRepository
from .attendance.repository import AttendanceRepository
from .attendance.service import AttendanceService
from .common.datetime_utils import Clock, now_utc
from .dashboard.service import DashboardService
from .database.connection import DatabaseConnection, DBConfig
from .payroll.mysql_payroll_repository import MySQLPayrollRepository
from .payroll.repository import PayrollRepository
from .payroll.service import PayrollService
from .settings.mysql_settings_repository import MySQLSettingsRepository
from .settings.repository import SettingsRepository
from .settings.service import SettingsService
from .users.mysql_user_repository import MySQLUserRepository
from .users.repository import UserRepository
from .users.service import AuthService, EmployeeService


@dataclass(frozen=True)
class Container:
    users_repo: UserRepository
    attendance_repo: AttendanceRepository
    payroll_repo: PayrollRepository
    settings_repo: SettingsRepository

    auth_service: AuthService
    employee_service: EmployeeService
    settings_service: SettingsService
    attendance_service: AttendanceService
    payroll_service: PayrollService
    dashboard_service: DashboardService

    conn: Optional[DatabaseConnection] = None


def wire(
    *,
    users_repo: UserRepository,
    attendance_repo: AttendanceRepository,
    payroll_repo: PayrollRepository,
    settings_repo: SettingsRepository,
    clock: Clock | None = None,
    conn: Optional[DatabaseConnection] = None,
) -> Container:
    """Build services on top of any repository implementations."""
    clock = clock or now_utc

    auth_service = AuthService(users_repo)
    employee_service = EmployeeService(users_repo)
    settings_service = SettingsService(settings_repo)
    attendance_service = AttendanceService(attendance_repo, users_repo, settings_service, clock=clock)
    payroll_service = PayrollService(payroll_repo, attendance_repo, employee_service, settings_service)
    dashboard_service = DashboardService(attendance_repo, employee_service, clock=clock)

    return Container(
        users_repo=users_repo,
        attendance_repo=attendance_repo,
        payroll_repo=payroll_repo,
        settings_repo=settings_repo,
        auth_service=auth_service,
        employee_service=employee_service,
        settings_service=settings_service,
        attendance_service=attendance_service,
        payroll_service=payroll_service,
        dashboard_service=dashboard_service,
        conn=conn,
    )


def build_container(*, db_config: Mapping) -> Container:
    conn = DatabaseConnection.get_instance(DBConfig.from_mapping(db_config))
    return wire(
        users_repo=MySQLUserRepository(conn),
        attendance_repo=MySQLAttendanceRepository(conn),
        payroll_repo=MySQLPayrollRepository(conn),
        settings_repo=MySQLSettingsRepository(conn),
        conn=conn,
    )
