from __future__ import annotations

import logging
from datetime import date, datetime
from typing import Optional, Sequence

from ..common.datetime_utils import Clock, hours_between, now_utc
from ..core.constants import DEFAULT_HISTORY_LIMIT
from ..core.exceptions import (
    AlreadyClosedError,
    ClockSkewError,
    DuplicateSessionError,
    NotFoundError,
    ValidationError,
)
from ..settings.service import SettingsService
from ..users.repository import UserRepository
from .model import AttendanceGalleryRow, AttendanceLog, AttendanceStatusView
from .repository import AttendanceRepository

logger = logging.getLogger(__name__)


class AttendanceService:
    """Daily clock-in/clock-out lifecycle for one user.

    Per (user, date): NoSession -> Open (clock-in) -> Closed (clock-out, terminal).
    """

    def __init__(
        self,
        attendance: AttendanceRepository,
        users: UserRepository,
        settings: SettingsService | None = None,
        *,
        clock: Clock | None = None,
    ):
        self._attendance = attendance
        self._users = users
        self._settings = settings
        self._clock = clock or now_utc

    def today(self) -> date:
        return self._clock().date()

    def _now(self) -> datetime:
        return self._clock().replace(microsecond=0)

    def _require_photo(self, photo_ref: Optional[str]) -> Optional[str]:
        photo_ref = (photo_ref or "").strip() or None
        if photo_ref is None and self._settings and self._settings.get_settings().require_photo:
            raise ValidationError("A photo is required to clock in or out")
        return photo_ref

    def clock_in(self, user_id: int, photo_ref: Optional[str], *, work_date: date | None = None) -> AttendanceLog:
        now = self._now()
        work_date = work_date or now.date()

        if not self._users.get_by_id(user_id):
            raise NotFoundError(f"User {user_id} not found")
        photo_ref = self._require_photo(photo_ref)

        # Fast path only; the repository's uniqueness constraint is authoritative.
        if self._attendance.get_for_user_and_date(user_id, work_date):
            logger.warning("Duplicate clock-in rejected for user_id=%s on %s", user_id, work_date)
            raise DuplicateSessionError("You have already clocked in for today")

        try:
            log_id = self._attendance.create_clock_in(
                user_id=user_id,
                work_date=work_date,
                clock_in_time=now,
                photo_ref=photo_ref,
            )
        except DuplicateSessionError:
            logger.warning("Concurrent clock-in rejected for user_id=%s on %s", user_id, work_date)
            raise

        logger.info("Clock-in user_id=%s log_id=%s at %s", user_id, log_id, now.isoformat())
        return self._get_log(log_id)

    def clock_out(self, log_id: int, photo_ref: Optional[str]) -> AttendanceLog:
        now = self._now()

        log = self._get_log(log_id)
        if log.is_closed:
            raise AlreadyClosedError("You have already clocked out for this session")
        if log.clock_in_time is None:
            raise ValidationError("This session has no clock-in time")
        photo_ref = self._require_photo(photo_ref)

        total_hours = hours_between(log.clock_in_time, now)
        if total_hours < 0:
            logger.warning("Clock skew on log_id=%s: clock-in %s is after now %s", log_id, log.clock_in_time, now)
            raise ClockSkewError("Clock-out time precedes the recorded clock-in time")

        closed = self._attendance.close_session(
            log_id=log.log_id,
            clock_out_time=now,
            photo_ref=photo_ref,
            total_hours=total_hours,
        )
        if not closed:
            # Someone closed it between our read and the conditional update.
            raise AlreadyClosedError("You have already clocked out for this session")

        logger.info("Clock-out user_id=%s log_id=%s hours=%.4f", log.user_id, log.log_id, total_hours)
        return self._get_log(log.log_id)

    def get_open_session(self, user_id: int, *, work_date: date | None = None) -> Optional[AttendanceLog]:
        log = self._attendance.get_for_user_and_date(user_id, work_date or self.today())
        return log if log and log.is_open else None

    def get_log(self, log_id: int) -> AttendanceLog:
        return self._get_log(log_id)

    def get_today_status(self, user_id: int) -> AttendanceStatusView:
        log = self._attendance.get_for_user_and_date(user_id, self.today())
        if not log:
            return AttendanceStatusView(
                is_clocked_in=False,
                clock_in_time=None,
                clock_out_time=None,
                total_hours_today=None,
            )
        return AttendanceStatusView(
            is_clocked_in=log.is_open,
            clock_in_time=log.clock_in_time,
            clock_out_time=log.clock_out_time,
            total_hours_today=log.total_hours,
            log_id=log.log_id,
        )

    def get_history(self, user_id: int, *, limit: int = DEFAULT_HISTORY_LIMIT) -> Sequence[AttendanceLog]:
        if limit <= 0:
            raise ValidationError("limit must be positive")
        return self._attendance.get_recent_for_user(user_id, limit)

    def list_logs(self, *, work_date: date | None = None) -> Sequence[AttendanceGalleryRow]:
        return self._attendance.list_gallery(work_date=work_date)

    def _get_log(self, log_id: int) -> AttendanceLog:
        log = self._attendance.get_by_id(int(log_id))
        if not log:
            raise NotFoundError(f"Attendance log {log_id} not found")
        return log
