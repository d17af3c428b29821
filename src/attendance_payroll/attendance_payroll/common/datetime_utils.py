from __future__ import annotations

import calendar
import re
from datetime import date, datetime, time, timezone
from typing import Callable

from ..core.exceptions import ValidationError

Clock = Callable[[], datetime]

_MONTH_RE = re.compile(r"^(\d{4})-(\d{2})$")


def parse_iso_date(value: str) -> date:
    """Parse YYYY-MM-DD string into date."""
    try:
        return datetime.strptime(value, "%Y-%m-%d").date()
    except (TypeError, ValueError):
        raise ValidationError(f"Invalid date (expected YYYY-MM-DD): {value!r}")


def parse_hhmm(value: str) -> time:
    try:
        return datetime.strptime(value.strip(), "%H:%M").time()
    except (AttributeError, ValueError):
        raise ValidationError(f"Invalid time (expected HH:MM): {value!r}")


def month_bounds(month: str) -> tuple[date, date]:
    """Return the first and last calendar day of a YYYY-MM month."""
    m = _MONTH_RE.match(month or "")
    if not m:
        raise ValidationError(f"Invalid month (expected YYYY-MM): {month!r}")
    year, mon = int(m.group(1)), int(m.group(2))
    if not 1 <= mon <= 12:
        raise ValidationError(f"Invalid month (expected YYYY-MM): {month!r}")
    last_day = calendar.monthrange(year, mon)[1]
    return date(year, mon, 1), date(year, mon, last_day)


def hours_between(start: datetime, end: datetime) -> float:
    return (end - start).total_seconds() / 3600


def now_utc() -> datetime:
    """Current UTC time as a naive datetime (DATETIME columns carry no zone).

    Whole seconds only, matching the DATETIME (fsp 0) columns.
    """
    return datetime.now(timezone.utc).replace(tzinfo=None, microsecond=0)
