from __future__ import annotations

from typing import Iterable

from ...attendance.model import AttendanceLog
from ...core.constants import REGULAR_HOURS_PER_DAY
from ...users.model import EmployeeRate
from ..model import PayrollLine
from .base import PayrollCalculator


class DailyOvertimeCalculator(PayrollCalculator):
    """Per-day rule: up to 8h/day is regular, anything beyond is overtime.

    The cap applies to each day on its own, never to the month as a whole.
    Open sessions (no total hours yet) are ignored.
    """

    def __init__(self, regular_hours_per_day: float = REGULAR_HOURS_PER_DAY):
        self._cap = float(regular_hours_per_day)

    def calculate(
        self,
        *,
        month: str,
        employee: EmployeeRate,
        logs: Iterable[AttendanceLog],
        overtime_multiplier: float,
    ) -> PayrollLine:
        regular_hours = 0.0
        overtime_hours = 0.0
        total_hours = 0.0

        for log in sorted(logs, key=lambda lg: (lg.work_date, lg.log_id)):
            if log.total_hours is None:
                continue
            hours = float(log.total_hours)
            total_hours += hours
            regular_hours += min(hours, self._cap)
            overtime_hours += max(hours - self._cap, 0.0)

        rate = float(employee.hourly_rate or 0)
        regular_pay = regular_hours * rate
        overtime_pay = overtime_hours * rate * float(overtime_multiplier)

        return PayrollLine(
            user_id=employee.user_id,
            month=month,
            total_hours=total_hours,
            regular_hours=regular_hours,
            regular_pay=regular_pay,
            overtime_hours=overtime_hours,
            overtime_pay=overtime_pay,
            gross_pay=regular_pay + overtime_pay,
        )
