from __future__ import annotations

from dataclasses import dataclass
from datetime import date
from typing import Optional

from ..attendance.repository import AttendanceRepository
from ..common.datetime_utils import Clock, now_utc
from ..users.service import EmployeeService


@dataclass(frozen=True)
class DashboardStats:
    work_date: date
    total_employees: int
    present_today: int
    absent_today: int
    average_hours: float


class DashboardService:
    """Headline numbers for the admin dashboard."""

    def __init__(self, attendance: AttendanceRepository, employees: EmployeeService, *, clock: Clock | None = None):
        self._attendance = attendance
        self._employees = employees
        self._clock = clock or now_utc

    def get_stats(self, work_date: Optional[date] = None) -> DashboardStats:
        work_date = work_date or self._clock().date()
        employee_ids = {e.user_id for e in self._employees.list_employees()}
        logs = [
            log
            for log in self._attendance.list_between(start_date=work_date, end_date=work_date)
            if log.user_id in employee_ids
        ]

        present = {log.user_id for log in logs if log.clock_in_time is not None}
        closed_hours = [float(log.total_hours) for log in logs if log.total_hours is not None]
        average = round(sum(closed_hours) / len(closed_hours), 2) if closed_hours else 0.0

        return DashboardStats(
            work_date=work_date,
            total_employees=len(employee_ids),
            present_today=len(present),
            absent_today=len(employee_ids) - len(present),
            average_hours=average,
        )
