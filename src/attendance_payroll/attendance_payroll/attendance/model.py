from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime
from typing import Optional


@dataclass(frozen=True)
class AttendanceLog:
    """Domain entity: one user's attendance for one calendar date.

    Lifecycle: created on clock-in (clock-out fields empty), closed exactly
    once on clock-out, never changed afterwards.
    """

    log_id: int
    user_id: int
    work_date: date
    clock_in_time: Optional[datetime]
    clock_in_photo_ref: Optional[str] = None
    clock_out_time: Optional[datetime] = None
    clock_out_photo_ref: Optional[str] = None
    total_hours: Optional[float] = None
    created_at: Optional[datetime] = None

    @property
    def is_open(self) -> bool:
        return self.clock_in_time is not None and self.clock_out_time is None

    @property
    def is_closed(self) -> bool:
        return self.clock_out_time is not None


@dataclass(frozen=True)
class AttendanceGalleryRow:
    """Read-model for the admin attendance gallery (log joined with user)."""

    log: AttendanceLog
    user_name: str
    user_email: str


@dataclass(frozen=True)
class AttendanceStatusView:
    """Today's clock state as shown on the employee dashboard."""

    is_clocked_in: bool
    clock_in_time: Optional[datetime]
    clock_out_time: Optional[datetime]
    total_hours_today: Optional[float]
    log_id: Optional[int] = None
