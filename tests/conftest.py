from __future__ import annotations

from dataclasses import replace
from datetime import date, datetime, timedelta
from typing import Optional

import pytest
from werkzeug.security import generate_password_hash

from src.attendance_payroll.attendance_payroll.attendance.model import AttendanceGalleryRow, AttendanceLog
from src.attendance_payroll.attendance_payroll.container import wire
from src.attendance_payroll.attendance_payroll.core.enums import PayrollStatus, Role
from src.attendance_payroll.attendance_payroll.core.exceptions import DuplicateSessionError, ValidationError
from src.attendance_payroll.attendance_payroll.payroll.model import PayrollRecord, PayrollRow
from src.attendance_payroll.attendance_payroll.settings.model import CompanySettings
from src.attendance_payroll.attendance_payroll.users.model import User

ADMIN_ID = 1
ALICE_ID = 2
BOB_ID = 3


class FakeClock:
    def __init__(self, now: datetime):
        self.now = now

    def __call__(self) -> datetime:
        return self.now

    def advance(self, **kwargs) -> None:
        self.now = self.now + timedelta(**kwargs)


class InMemoryUsers:
    def __init__(self, users: list[User] | None = None):
        self._by_id: dict[int, User] = {u.user_id: u for u in users or []}
        self._id = max(self._by_id, default=0)
        # Repos holding rows that point at a user (FK ON DELETE RESTRICT).
        self.referenced_by: list = []

    def get_by_id(self, user_id: int) -> Optional[User]:
        return self._by_id.get(int(user_id))

    def get_by_email(self, email: str) -> Optional[User]:
        return next((u for u in self._by_id.values() if u.email == email), None)

    def list_by_role(self, role: Role):
        return sorted((u for u in self._by_id.values() if u.role == role), key=lambda u: u.user_id, reverse=True)

    def create_user(self, *, full_name, email, password_hash, role, hourly_rate) -> int:
        self._id += 1
        self._by_id[self._id] = User(
            user_id=self._id,
            full_name=full_name,
            email=email,
            password_hash=password_hash,
            role=role,
            hourly_rate=hourly_rate,
        )
        return self._id

    def update_profile(self, user_id, *, full_name=None, hourly_rate=None) -> bool:
        user = self._by_id.get(int(user_id))
        if not user:
            return False
        changes = {}
        if full_name is not None:
            changes["full_name"] = full_name
        if hourly_rate is not None:
            changes["hourly_rate"] = hourly_rate
        self._by_id[user.user_id] = replace(user, **changes)
        return True

    def delete_by_id(self, user_id) -> bool:
        if any(repo.references_user(int(user_id)) for repo in self.referenced_by):
            raise ValidationError(f"User {user_id} has attendance or payroll records and cannot be deleted")
        return self._by_id.pop(int(user_id), None) is not None


class InMemoryAttendance:
    """Mirrors the UNIQUE (user_id, work_date) key and the conditional close."""

    def __init__(self, users: InMemoryUsers | None = None):
        self._by_id: dict[int, AttendanceLog] = {}
        self._users = users
        self._id = 0

    def references_user(self, user_id: int) -> bool:
        return any(lg.user_id == user_id for lg in self._by_id.values())

    def add_closed(self, user_id: int, work_date: date, hours: float) -> AttendanceLog:
        start = datetime.combine(work_date, datetime.min.time()).replace(hour=8)
        self._id += 1
        log = AttendanceLog(
            log_id=self._id,
            user_id=user_id,
            work_date=work_date,
            clock_in_time=start,
            clock_out_time=start + timedelta(hours=hours),
            total_hours=hours,
        )
        self._by_id[log.log_id] = log
        return log

    def get_by_id(self, log_id: int) -> Optional[AttendanceLog]:
        return self._by_id.get(int(log_id))

    def get_for_user_and_date(self, user_id: int, work_date: date) -> Optional[AttendanceLog]:
        return next((lg for lg in self._by_id.values() if lg.user_id == user_id and lg.work_date == work_date), None)

    def get_recent_for_user(self, user_id: int, limit: int):
        items = [lg for lg in self._by_id.values() if lg.user_id == user_id]
        items.sort(key=lambda lg: lg.work_date, reverse=True)
        return items[:limit]

    def create_clock_in(self, *, user_id, work_date, clock_in_time, photo_ref) -> int:
        if any(lg.user_id == user_id and lg.work_date == work_date for lg in self._by_id.values()):
            raise DuplicateSessionError("duplicate key (user_id, work_date)")
        self._id += 1
        self._by_id[self._id] = AttendanceLog(
            log_id=self._id,
            user_id=user_id,
            work_date=work_date,
            clock_in_time=clock_in_time,
            clock_in_photo_ref=photo_ref,
        )
        return self._id

    def close_session(self, *, log_id, clock_out_time, photo_ref, total_hours) -> bool:
        log = self._by_id.get(int(log_id))
        if not log or log.clock_out_time is not None:
            return False
        self._by_id[log.log_id] = replace(
            log,
            clock_out_time=clock_out_time,
            clock_out_photo_ref=photo_ref,
            total_hours=total_hours,
        )
        return True

    def list_between(self, *, start_date, end_date, user_id=None):
        items = [
            lg
            for lg in self._by_id.values()
            if start_date <= lg.work_date <= end_date and (user_id is None or lg.user_id == user_id)
        ]
        return sorted(items, key=lambda lg: (lg.work_date, lg.log_id))

    def list_gallery(self, *, work_date=None):
        rows = []
        for lg in sorted(self._by_id.values(), key=lambda lg: (lg.work_date, lg.log_id), reverse=True):
            if work_date is not None and lg.work_date != work_date:
                continue
            user = self._users.get_by_id(lg.user_id) if self._users else None
            rows.append(
                AttendanceGalleryRow(
                    log=lg,
                    user_name=user.display_name if user else "?",
                    user_email=user.email if user else "",
                )
            )
        return rows


class InMemoryPayroll:
    """Replace is all-or-nothing, like the single-transaction MySQL version."""

    def __init__(self, users: InMemoryUsers | None = None):
        self._by_id: dict[int, PayrollRecord] = {}
        self._users = users
        self._id = 0
        self.fail_on_insert = False

    def references_user(self, user_id: int) -> bool:
        return any(r.user_id == user_id for r in self._by_id.values())

    def get_by_id(self, record_id):
        return self._by_id.get(int(record_id))

    def list_for_month(self, month):
        rows = []
        for r in sorted(self._by_id.values(), key=lambda r: r.record_id):
            if r.month != month:
                continue
            user = self._users.get_by_id(r.user_id) if self._users else None
            rows.append(
                PayrollRow(
                    record=r,
                    employee_name=user.display_name if user else "?",
                    employee_email=user.email if user else "",
                )
            )
        return rows

    def replace_month(self, month, lines):
        staged = dict(self._by_id)
        for rid in [rid for rid, r in staged.items() if r.month == month]:
            del staged[rid]
        if self.fail_on_insert:
            raise RuntimeError("insert failed")
        next_id = self._id
        created = []
        for line in lines:
            next_id += 1
            rec = PayrollRecord(
                record_id=next_id,
                user_id=line.user_id,
                month=month,
                total_hours=line.total_hours,
                regular_hours=line.regular_hours,
                regular_pay=line.regular_pay,
                overtime_hours=line.overtime_hours,
                overtime_pay=line.overtime_pay,
                gross_pay=line.gross_pay,
                status=PayrollStatus.GENERATED,
            )
            staged[rec.record_id] = rec
            created.append(rec)
        self._by_id = staged
        self._id = next_id
        return created

    def mark_paid(self, record_id) -> bool:
        rec = self._by_id.get(int(record_id))
        if not rec or rec.status != PayrollStatus.GENERATED:
            return False
        self._by_id[rec.record_id] = replace(rec, status=PayrollStatus.PAID)
        return True


class InMemorySettings:
    def __init__(self, settings: CompanySettings | None = None):
        self.settings = settings

    def get(self):
        return self.settings

    def save(self, settings):
        self.settings = settings
        return settings


def make_user(user_id: int, email: str, *, name: str | None = None, role=Role.EMPLOYEE, rate=0.0, password="secret123"):
    return User(
        user_id=user_id,
        full_name=name,
        email=email,
        password_hash=generate_password_hash(password),
        role=role,
        hourly_rate=rate,
    )


@pytest.fixture
def clock():
    return FakeClock(datetime(2026, 2, 10, 8, 0, 0))


@pytest.fixture
def users_repo():
    return InMemoryUsers(
        [
            make_user(ADMIN_ID, "admin@company.com", name="Admin", role=Role.ADMIN, password="admin123"),
            make_user(ALICE_ID, "alice@company.com", name="Alice", rate=25.0),
            make_user(BOB_ID, "bob@company.com", name="Bob", rate=30.0),
        ]
    )


@pytest.fixture
def attendance_repo(users_repo):
    repo = InMemoryAttendance(users_repo)
    users_repo.referenced_by.append(repo)
    return repo


@pytest.fixture
def payroll_repo(users_repo):
    repo = InMemoryPayroll(users_repo)
    users_repo.referenced_by.append(repo)
    return repo


@pytest.fixture
def settings_repo():
    return InMemorySettings()


@pytest.fixture
def container(users_repo, attendance_repo, payroll_repo, settings_repo, clock):
    return wire(
        users_repo=users_repo,
        attendance_repo=attendance_repo,
        payroll_repo=payroll_repo,
        settings_repo=settings_repo,
        clock=clock,
    )


@pytest.fixture
def app(container, monkeypatch):
    from src.attendance_payroll.attendance_payroll.main import create_app

    monkeypatch.setenv("APP_ENV", "testing")
    return create_app(container=container)


@pytest.fixture
def client(app):
    return app.test_client()
