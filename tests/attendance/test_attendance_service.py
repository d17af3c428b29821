from __future__ import annotations

from datetime import date, datetime

import pytest

from src.attendance_payroll.attendance_payroll.core.exceptions import (
    AlreadyClosedError,
    ClockSkewError,
    DuplicateSessionError,
    NotFoundError,
    ValidationError,
)

from conftest import ALICE_ID, BOB_ID


def test_clock_in_creates_open_log(container, clock):
    log = container.attendance_service.clock_in(ALICE_ID, "photos/alice-in.jpg")

    assert log.user_id == ALICE_ID
    assert log.work_date == date(2026, 2, 10)
    assert log.clock_in_time == clock.now
    assert log.clock_in_photo_ref == "photos/alice-in.jpg"
    assert log.clock_out_time is None
    assert log.total_hours is None
    assert log.is_open


def test_second_clock_in_same_day_is_rejected_while_open(container):
    svc = container.attendance_service
    svc.clock_in(ALICE_ID, "in.jpg")

    with pytest.raises(DuplicateSessionError):
        svc.clock_in(ALICE_ID, "again.jpg")


def test_second_clock_in_same_day_is_rejected_after_close(container, clock):
    svc = container.attendance_service
    log = svc.clock_in(ALICE_ID, "in.jpg")
    clock.advance(hours=4)
    svc.clock_out(log.log_id, "out.jpg")
    clock.advance(hours=1)

    with pytest.raises(DuplicateSessionError):
        svc.clock_in(ALICE_ID, "again.jpg")


def test_storage_uniqueness_is_enforced_even_when_precheck_misses(container, attendance_repo, monkeypatch):
    container.attendance_service.clock_in(ALICE_ID, "in.jpg")
    # Simulate a concurrent request that read "no session" before the first insert landed.
    monkeypatch.setattr(attendance_repo, "get_for_user_and_date", lambda user_id, work_date: None)

    with pytest.raises(DuplicateSessionError):
        container.attendance_service.clock_in(ALICE_ID, "in.jpg")


def test_clock_in_for_next_day_is_allowed(container, clock):
    svc = container.attendance_service
    first = svc.clock_in(ALICE_ID, "in.jpg")
    clock.advance(days=1)
    second = svc.clock_in(ALICE_ID, "in.jpg")

    assert first.log_id != second.log_id
    assert second.work_date == date(2026, 2, 11)


def test_clock_in_unknown_user(container):
    with pytest.raises(NotFoundError):
        container.attendance_service.clock_in(999, "in.jpg")


def test_clock_in_requires_photo_when_configured(container):
    with pytest.raises(ValidationError):
        container.attendance_service.clock_in(ALICE_ID, "  ")


def test_clock_in_without_photo_when_not_required(container):
    container.settings_service.update_settings({"require_photo": False})

    log = container.attendance_service.clock_in(ALICE_ID, None)

    assert log.clock_in_photo_ref is None


def test_clock_out_computes_fractional_hours(container, clock):
    svc = container.attendance_service
    log = svc.clock_in(BOB_ID, "in.jpg")
    clock.advance(hours=7, minutes=45)

    closed = svc.clock_out(log.log_id, "out.jpg")

    assert closed.clock_out_time == datetime(2026, 2, 10, 15, 45)
    assert closed.clock_out_photo_ref == "out.jpg"
    assert closed.total_hours == pytest.approx(7.75)
    assert closed.total_hours == (closed.clock_out_time - closed.clock_in_time).total_seconds() / 3600
    assert not closed.is_open


def test_second_clock_out_fails_and_keeps_hours(container, clock, attendance_repo):
    svc = container.attendance_service
    log = svc.clock_in(BOB_ID, "in.jpg")
    clock.advance(hours=2)
    svc.clock_out(log.log_id, "out.jpg")
    clock.advance(hours=3)

    with pytest.raises(AlreadyClosedError):
        svc.clock_out(log.log_id, "out-again.jpg")

    stored = attendance_repo.get_by_id(log.log_id)
    assert stored.total_hours == pytest.approx(2.0)
    assert stored.clock_out_photo_ref == "out.jpg"


def test_clock_out_lost_race_is_reported_as_closed(container, clock, attendance_repo, monkeypatch):
    svc = container.attendance_service
    log = svc.clock_in(BOB_ID, "in.jpg")
    clock.advance(hours=1)
    monkeypatch.setattr(attendance_repo, "close_session", lambda **kwargs: False)

    with pytest.raises(AlreadyClosedError):
        svc.clock_out(log.log_id, "out.jpg")


def test_clock_out_unknown_log(container):
    with pytest.raises(NotFoundError):
        container.attendance_service.clock_out(12345, "out.jpg")


def test_clock_out_before_clock_in_is_clock_skew(container, clock, attendance_repo):
    svc = container.attendance_service
    log = svc.clock_in(ALICE_ID, "in.jpg")
    clock.advance(minutes=-5)

    with pytest.raises(ClockSkewError):
        svc.clock_out(log.log_id, "out.jpg")
    assert attendance_repo.get_by_id(log.log_id).is_open


def test_clock_out_at_same_instant_gives_zero_hours(container):
    svc = container.attendance_service
    log = svc.clock_in(ALICE_ID, "in.jpg")

    assert svc.clock_out(log.log_id, "out.jpg").total_hours == 0


def test_get_open_session_tracks_state(container, clock):
    svc = container.attendance_service
    assert svc.get_open_session(ALICE_ID) is None

    log = svc.clock_in(ALICE_ID, "in.jpg")
    assert svc.get_open_session(ALICE_ID).log_id == log.log_id

    clock.advance(hours=1)
    svc.clock_out(log.log_id, "out.jpg")
    assert svc.get_open_session(ALICE_ID) is None


def test_today_status(container, clock):
    svc = container.attendance_service
    assert svc.get_today_status(ALICE_ID).is_clocked_in is False

    log = svc.clock_in(ALICE_ID, "in.jpg")
    status = svc.get_today_status(ALICE_ID)
    assert status.is_clocked_in is True
    assert status.log_id == log.log_id

    clock.advance(hours=3)
    svc.clock_out(log.log_id, "out.jpg")
    status = svc.get_today_status(ALICE_ID)
    assert status.is_clocked_in is False
    assert status.total_hours_today == pytest.approx(3.0)


def test_history_newest_first(container, attendance_repo):
    attendance_repo.add_closed(ALICE_ID, date(2026, 2, 1), 8)
    attendance_repo.add_closed(ALICE_ID, date(2026, 2, 3), 6)
    attendance_repo.add_closed(BOB_ID, date(2026, 2, 2), 5)

    history = container.attendance_service.get_history(ALICE_ID, limit=10)

    assert [lg.work_date for lg in history] == [date(2026, 2, 3), date(2026, 2, 1)]


def test_list_logs_filters_by_date(container, attendance_repo):
    attendance_repo.add_closed(ALICE_ID, date(2026, 2, 1), 8)
    attendance_repo.add_closed(BOB_ID, date(2026, 2, 1), 5)
    attendance_repo.add_closed(BOB_ID, date(2026, 2, 2), 5)

    rows = container.attendance_service.list_logs(work_date=date(2026, 2, 1))

    assert {r.user_name for r in rows} == {"Alice", "Bob"}


def test_stored_times_are_whole_seconds_and_match_total_hours(container, clock):
    svc = container.attendance_service
    clock.now = datetime(2026, 2, 10, 8, 0, 0, 700000)
    log = svc.clock_in(ALICE_ID, "in.jpg")

    clock.now = datetime(2026, 2, 10, 17, 0, 0, 200000)
    closed = svc.clock_out(log.log_id, "out.jpg")

    assert closed.clock_in_time == datetime(2026, 2, 10, 8, 0, 0)
    assert closed.clock_out_time == datetime(2026, 2, 10, 17, 0, 0)
    assert closed.total_hours == (closed.clock_out_time - closed.clock_in_time).total_seconds() / 3600


def test_clock_out_within_the_same_second_is_zero_hours(container, clock):
    svc = container.attendance_service
    clock.now = datetime(2026, 2, 10, 8, 0, 0, 900000)
    log = svc.clock_in(ALICE_ID, "in.jpg")

    clock.now = datetime(2026, 2, 10, 8, 0, 0, 950000)
    closed = svc.clock_out(log.log_id, "out.jpg")

    assert closed.total_hours == 0
