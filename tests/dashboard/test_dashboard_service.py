from datetime import date

from conftest import ADMIN_ID, ALICE_ID, BOB_ID


def test_stats_for_today(container, clock):
    svc = container.attendance_service
    alice_log = svc.clock_in(ALICE_ID, "in.jpg")
    svc.clock_in(ADMIN_ID, "in.jpg")
    clock.advance(hours=6, minutes=30)
    svc.clock_out(alice_log.log_id, "out.jpg")

    stats = container.dashboard_service.get_stats()

    assert stats.work_date == date(2026, 2, 10)
    assert stats.total_employees == 2
    assert stats.present_today == 1
    assert stats.absent_today == 1
    assert stats.average_hours == 6.5


def test_stats_for_other_day(container, attendance_repo):
    attendance_repo.add_closed(ALICE_ID, date(2026, 2, 1), 8)
    attendance_repo.add_closed(BOB_ID, date(2026, 2, 1), 5)

    stats = container.dashboard_service.get_stats(date(2026, 2, 1))

    assert (stats.present_today, stats.absent_today) == (2, 0)
    assert stats.average_hours == 6.5


def test_stats_with_no_activity(container):
    stats = container.dashboard_service.get_stats()

    assert stats.present_today == 0
    assert stats.average_hours == 0.0
