"""Per-day completion status for a displayed month.

A day after today is always ``future``. Any other day is ``done`` when the
entry map has its ISO key and ``missed`` otherwise, today included; whether
today's form was already submitted is tracked separately by the controller.
"""

from __future__ import annotations

from collections import Counter
from dataclasses import dataclass
from datetime import date
from enum import Enum
from typing import Optional, Tuple

from dashboard.dates import days_in_month, month_start, parse_iso, shift_month, to_iso


class DayStatus(str, Enum):
    FUTURE = "future"
    DONE = "done"
    MISSED = "missed"


STATUS_MARKERS = {
    DayStatus.DONE: "🔥",
    DayStatus.MISSED: "😔",
    DayStatus.FUTURE: "",
}


@dataclass(frozen=True)
class DayCell:
    day: date
    iso: str
    status: DayStatus
    is_today: bool = False
    is_selected: bool = False
    has_entry: bool = False

    @property
    def marker(self) -> str:
        return STATUS_MARKERS[self.status]


def classify_day(day: date, today: date, entry_dates) -> DayStatus:
    if day > today:
        return DayStatus.FUTURE
    if to_iso(day) in entry_dates:
        return DayStatus.DONE
    return DayStatus.MISSED


def reconcile_month(anchor: date, today: date, entry_dates, selected_iso: Optional[str] = None) -> Tuple[DayCell, ...]:
    """Classify every day in the month containing ``anchor``.

    ``entry_dates`` is anything supporting ``in`` with ISO keys: an
    :class:`~dashboard.entry_map.EntryMap`, a set of strings, or a dict.
    """
    cells = []
    for day in days_in_month(anchor):
        iso = to_iso(day)
        cells.append(
            DayCell(
                day=day,
                iso=iso,
                status=classify_day(day, today, entry_dates),
                is_today=day == today,
                is_selected=iso == selected_iso,
                has_entry=iso in entry_dates,
            )
        )
    return tuple(cells)


def dates_with_status(cells, status: DayStatus) -> frozenset:
    return frozenset(cell.iso for cell in cells if cell.status is status)


def done_dates(cells) -> frozenset:
    return dates_with_status(cells, DayStatus.DONE)


def missed_dates(cells) -> frozenset:
    return dates_with_status(cells, DayStatus.MISSED)


def status_counts(cells) -> dict:
    counts = Counter(cell.status for cell in cells)
    return {status.value: counts.get(status, 0) for status in DayStatus}


def month_weeks(cells):
    """Lay cells out Monday-first; padding slots are ``None``."""
    if not cells:
        return []
    weeks = []
    row = [None] * cells[0].day.weekday()
    for cell in cells:
        row.append(cell)
        if len(row) == 7:
            weeks.append(row)
            row = []
    if row:
        row.extend([None] * (7 - len(row)))
        weeks.append(row)
    return weeks


class CalendarState:
    """Displayed month plus the single selected date."""

    def __init__(self, today: date):
        self.today = today
        self.selected_iso_date = to_iso(today)
        self.displayed_month = month_start(today)

    def select_date(self, iso_date) -> str:
        day = parse_iso(iso_date)
        self.selected_iso_date = to_iso(day)
        return self.selected_iso_date

    def show_month(self, anchor) -> date:
        self.displayed_month = month_start(parse_iso(anchor))
        return self.displayed_month

    def previous_month(self) -> date:
        self.displayed_month = shift_month(self.displayed_month, -1)
        return self.displayed_month

    def next_month(self) -> date:
        self.displayed_month = shift_month(self.displayed_month, 1)
        return self.displayed_month

    def show_today(self) -> None:
        self.displayed_month = month_start(self.today)
        self.selected_iso_date = to_iso(self.today)

    def set_today(self, today: date) -> None:
        self.today = today

    def cells(self, entry_dates) -> Tuple[DayCell, ...]:
        return reconcile_month(self.displayed_month, self.today, entry_dates, self.selected_iso_date)

    def selected_status(self, entry_dates) -> DayStatus:
        return classify_day(parse_iso(self.selected_iso_date), self.today, entry_dates)

    def selected_entry(self, entry_map):
        return entry_map.get(self.selected_iso_date)
