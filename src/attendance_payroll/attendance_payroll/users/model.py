from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Optional

from ..core.enums import Role


@dataclass(frozen=True)
class User:
    """Domain entity: a directory entry (admin or employee).

    Note: Plain data object, no DB access code here.
    """

    user_id: int
    full_name: Optional[str]
    email: str
    password_hash: str
    role: Role
    hourly_rate: float = 0.0
    avatar_url: Optional[str] = None
    created_at: Optional[datetime] = None

    @property
    def display_name(self) -> str:
        if self.full_name:
            return self.full_name
        return self.email.split("@")[0] or "Unknown"


@dataclass(frozen=True)
class EmployeeRate:
    """Payroll input: who gets paid and at what hourly rate."""

    user_id: int
    hourly_rate: float
