from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime, time
from typing import Optional

from ..core.constants import DEFAULT_OVERTIME_RATE


@dataclass(frozen=True)
class CompanySettings:
    """Company-wide configuration edited from the admin settings page."""

    company_name: str
    working_hours_start: time
    working_hours_end: time
    overtime_rate: float = DEFAULT_OVERTIME_RATE
    auto_checkout: bool = True
    auto_checkout_time: time = time(23, 0)
    notifications_enabled: bool = True
    require_photo: bool = True
    updated_at: Optional[datetime] = None
