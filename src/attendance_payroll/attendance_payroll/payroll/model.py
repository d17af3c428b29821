from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Optional

from ..core.enums import PayrollStatus


@dataclass(frozen=True)
class PayrollLine:
    """Computed pay for one employee and one month, before persistence."""

    user_id: int
    month: str
    total_hours: float
    regular_hours: float
    regular_pay: float
    overtime_hours: float
    overtime_pay: float
    gross_pay: float


@dataclass(frozen=True)
class PayrollRecord:
    """Domain entity: a stored payroll row for (user, month)."""

    record_id: int
    user_id: int
    month: str
    total_hours: float
    regular_hours: float
    regular_pay: float
    overtime_hours: float
    overtime_pay: float
    gross_pay: float
    status: PayrollStatus = PayrollStatus.GENERATED
    created_at: Optional[datetime] = None

    def values(self) -> tuple:
        """Identity-free view used to compare regenerated payroll sets."""
        return (
            self.user_id,
            self.month,
            self.total_hours,
            self.regular_hours,
            self.regular_pay,
            self.overtime_hours,
            self.overtime_pay,
            self.gross_pay,
            self.status,
        )


@dataclass(frozen=True)
class PayrollRow:
    """Read-model for the admin payroll table (record joined with employee)."""

    record: PayrollRecord
    employee_name: str
    employee_email: str


@dataclass(frozen=True)
class PayrollSummary:
    employees: int
    total_hours: float
    overtime_hours: float
    gross_pay: float
    paid: int
    pending: int
