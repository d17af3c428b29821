from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Iterable

from ...attendance.model import AttendanceLog
from ...users.model import EmployeeRate
from ..model import PayrollLine


class PayrollCalculator(ABC):
    """Calculator interface (Strategy Pattern for payroll)."""

    @abstractmethod
    def calculate(
        self,
        *,
        month: str,
        employee: EmployeeRate,
        logs: Iterable[AttendanceLog],
        overtime_multiplier: float,
    ) -> PayrollLine:
        raise NotImplementedError
