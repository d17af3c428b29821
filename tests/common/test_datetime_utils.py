from datetime import date, datetime

import pytest

from src.attendance_payroll.attendance_payroll.common.datetime_utils import (
    hours_between,
    month_bounds,
    now_utc,
    parse_iso_date,
)
from src.attendance_payroll.attendance_payroll.core.exceptions import ValidationError


@pytest.mark.parametrize(
    "month,expected",
    [
        ("2026-01", (date(2026, 1, 1), date(2026, 1, 31))),
        ("2026-02", (date(2026, 2, 1), date(2026, 2, 28))),
        ("2028-02", (date(2028, 2, 1), date(2028, 2, 29))),
        ("2100-02", (date(2100, 2, 1), date(2100, 2, 28))),
        ("2026-04", (date(2026, 4, 1), date(2026, 4, 30))),
    ],
)
def test_month_bounds(month, expected):
    assert month_bounds(month) == expected


def test_hours_between_is_fractional():
    assert hours_between(datetime(2026, 1, 1, 9, 0), datetime(2026, 1, 1, 17, 20)) == pytest.approx(8 + 1 / 3)


def test_parse_iso_date_rejects_garbage():
    with pytest.raises(ValidationError):
        parse_iso_date("10/02/2026")


def test_now_utc_is_naive_whole_seconds():
    now = now_utc()

    assert now.tzinfo is None
    assert now.microsecond == 0
