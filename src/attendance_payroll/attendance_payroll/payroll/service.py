from __future__ import annotations

import logging
from collections import defaultdict
from typing import Iterable, Optional, Sequence

from ..attendance.model import AttendanceLog
from ..attendance.repository import AttendanceRepository
from ..common.datetime_utils import month_bounds
from ..common.validators import require_non_negative, require_positive
from ..core.constants import DEFAULT_OVERTIME_RATE
from ..core.enums import PayrollStatus
from ..core.exceptions import AlreadyPaidError, NotFoundError, ValidationError
from ..settings.service import SettingsService
from ..users.model import EmployeeRate
from ..users.service import EmployeeService
from .calculator.base import PayrollCalculator
from .calculator.daily_overtime_calculator import DailyOvertimeCalculator
from .model import PayrollRecord, PayrollRow, PayrollSummary
from .repository import PayrollRepository

logger = logging.getLogger(__name__)


class PayrollService:
    """Turns a month of attendance logs into payroll records.

    Generation is replace-not-upsert: all records of the month are swapped for
    the newly computed set, so rerunning with unchanged inputs yields the same
    values.
    """

    def __init__(
        self,
        payroll: PayrollRepository,
        attendance: AttendanceRepository,
        employees: EmployeeService,
        settings: SettingsService | None = None,
        *,
        calculator: Optional[PayrollCalculator] = None,
    ):
        self._payroll = payroll
        self._attendance = attendance
        self._employees = employees
        self._settings = settings
        self._calculator = calculator or DailyOvertimeCalculator()

    def _default_multiplier(self) -> float:
        if self._settings:
            return self._settings.overtime_multiplier()
        return DEFAULT_OVERTIME_RATE

    def generate_payroll(
        self,
        month: str,
        *,
        employees: Optional[Iterable[EmployeeRate]] = None,
        overtime_multiplier: Optional[float] = None,
    ) -> list[PayrollRecord]:
        start, end = month_bounds(month)

        multiplier = require_positive(
            self._default_multiplier() if overtime_multiplier is None else overtime_multiplier,
            "Overtime multiplier",
        )
        staff = list(self._employees.employee_rates() if employees is None else employees)
        seen: set[int] = set()
        for emp in staff:
            require_non_negative(emp.hourly_rate, "Hourly rate")
            if emp.user_id in seen:
                raise ValidationError(f"Employee {emp.user_id} listed twice")
            seen.add(emp.user_id)
            if employees is not None:
                self._employees.get_user(emp.user_id)

        logs_by_user: dict[int, list[AttendanceLog]] = defaultdict(list)
        for log in self._attendance.list_between(start_date=start, end_date=end):
            logs_by_user[log.user_id].append(log)

        lines = [
            self._calculator.calculate(
                month=month,
                employee=emp,
                logs=logs_by_user.get(emp.user_id, ()),
                overtime_multiplier=multiplier,
            )
            for emp in staff
        ]

        records = list(self._payroll.replace_month(month, lines))
        logger.info(
            "Generated payroll for %s: %d employees, gross total %.2f (overtime x%s)",
            month,
            len(records),
            sum(r.gross_pay for r in records),
            multiplier,
        )
        return records

    def list_for_month(self, month: str) -> Sequence[PayrollRow]:
        month_bounds(month)
        return self._payroll.list_for_month(month)

    def mark_as_paid(self, record_id: int) -> PayrollRecord:
        if not self._payroll.mark_paid(int(record_id)):
            record = self._payroll.get_by_id(int(record_id))
            if not record:
                raise NotFoundError(f"Payroll record {record_id} not found")
            logger.warning("Payroll record %s is already paid", record_id)
            raise AlreadyPaidError(f"Payroll record {record_id} is already paid")

        record = self._payroll.get_by_id(int(record_id))
        if not record:
            raise NotFoundError(f"Payroll record {record_id} not found")
        logger.info("Payroll record %s (user_id=%s, %s) marked as paid", record_id, record.user_id, record.month)
        return record

    @staticmethod
    def summarize(records: Iterable[PayrollRecord]) -> PayrollSummary:
        records = list(records)
        return PayrollSummary(
            employees=len(records),
            total_hours=sum(r.total_hours for r in records),
            overtime_hours=sum(r.overtime_hours for r in records),
            gross_pay=sum(r.gross_pay for r in records),
            paid=sum(1 for r in records if r.status == PayrollStatus.PAID),
            pending=sum(1 for r in records if r.status == PayrollStatus.GENERATED),
        )
