from __future__ import annotations

from enum import Enum


class Role(str, Enum):
    """User role used for authorization."""

    ADMIN = "admin"
    EMPLOYEE = "employee"


class PayrollStatus(str, Enum):
    """Lifecycle of a payroll record: computed, then disbursed."""

    GENERATED = "generated"
    PAID = "paid"
