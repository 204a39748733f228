"""Calendar-day helpers.

Every date in the client is a plain ``datetime.date`` in the viewer's local
calendar. ISO strings are produced by :func:`to_iso` only, so entry keys and
calendar cells always share one format.
"""

from __future__ import annotations

import calendar
import re
from datetime import date, datetime, timedelta
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

ISO_DATE_PATTERN = re.compile(r"^\d{4}-\d{2}-\d{2}$")


def local_today(tz_name: str | None = None) -> date:
    if tz_name:
        try:
            return datetime.now(ZoneInfo(tz_name)).date()
        except (ZoneInfoNotFoundError, ValueError):
            pass
    return date.today()


def today_iso(tz_name: str | None = None) -> str:
    return to_iso(local_today(tz_name))


def to_iso(day: date) -> str:
    return f"{day.year:04d}-{day.month:02d}-{day.day:02d}"


def parse_iso(value) -> date:
    """Parse a zero-padded ``YYYY-MM-DD`` string; raise ``ValueError`` otherwise."""
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    text = str(value or "").strip()
    if not ISO_DATE_PATTERN.match(text):
        raise ValueError(f"Invalid ISO date: {value!r}")
    return date.fromisoformat(text)


def month_start(anchor: date) -> date:
    return anchor.replace(day=1)


def month_end(anchor: date) -> date:
    return anchor.replace(day=calendar.monthrange(anchor.year, anchor.month)[1])


def shift_month(anchor: date, delta: int) -> date:
    index = anchor.year * 12 + (anchor.month - 1) + delta
    return date(index // 12, index % 12 + 1, 1)


def month_label(anchor: date) -> str:
    return f"{calendar.month_name[anchor.month]} {anchor.year}"


class MonthDays:
    """Every day of the month containing ``anchor``, ascending.

    Iteration is lazy and can be repeated; each ``iter()`` starts again at the 1st.
    """

    def __init__(self, anchor: date):
        self.start = month_start(anchor)
        self.end = month_end(anchor)

    def __iter__(self):
        current = self.start
        while current <= self.end:
            yield current
            current = current + timedelta(days=1)

    def __len__(self):
        return self.end.day

    def __contains__(self, day):
        return isinstance(day, date) and self.start <= day <= self.end

    def __repr__(self):
        return f"MonthDays({to_iso(self.start)}..{to_iso(self.end)})"


def days_in_month(anchor: date) -> MonthDays:
    return MonthDays(anchor)
