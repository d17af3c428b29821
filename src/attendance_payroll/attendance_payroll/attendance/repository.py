from __future__ import annotations

from datetime import date, datetime
from typing import Optional, Protocol, Sequence

from .model import AttendanceGalleryRow, AttendanceLog


class AttendanceRepository(Protocol):
    def get_by_id(self, log_id: int) -> Optional[AttendanceLog]:
        raise NotImplementedError

    def get_for_user_and_date(self, user_id: int, work_date: date) -> Optional[AttendanceLog]:
        raise NotImplementedError

    def get_recent_for_user(self, user_id: int, limit: int) -> Sequence[AttendanceLog]:
        raise NotImplementedError

    def create_clock_in(
        self,
        *,
        user_id: int,
        work_date: date,
        clock_in_time: datetime,
        photo_ref: Optional[str],
    ) -> int:
        """Insert a new open log.

        Must raise DuplicateSessionError when a log for (user_id, work_date)
        already exists; implementations rely on a uniqueness constraint, not on
        a prior read.
        """
        raise NotImplementedError

    def close_session(
        self,
        *,
        log_id: int,
        clock_out_time: datetime,
        photo_ref: Optional[str],
        total_hours: float,
    ) -> bool:
        """Conditionally close an open log.

        Returns False if no open log matched (missing or already closed).
        """
        raise NotImplementedError

    def list_between(
        self,
        *,
        start_date: date,
        end_date: date,
        user_id: Optional[int] = None,
    ) -> Sequence[AttendanceLog]:
        """Logs with start_date <= work_date <= end_date, ordered by (work_date, log_id)."""
        raise NotImplementedError

    def list_gallery(self, *, work_date: Optional[date] = None) -> Sequence[AttendanceGalleryRow]:
        raise NotImplementedError
