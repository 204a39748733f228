import calendar as pycalendar
import unittest
from datetime import date

from dashboard.calendar_status import (
    CalendarState,
    DayStatus,
    classify_day,
    done_dates,
    missed_dates,
    month_weeks,
    reconcile_month,
    status_counts,
)
from dashboard.entry_map import EntryMap


class TestReconcileMonth(unittest.TestCase):
    def test_march_2024_scenario(self):
        today = date(2024, 3, 15)
        entries = EntryMap([{"entry_date": "2024-03-13", "reflection": "x"}])
        cells = reconcile_month(date(2024, 3, 1), today, entries)
        by_day = {cell.day.day: cell.status for cell in cells}

        for day in list(range(1, 13)) + [14, 15]:
            self.assertIs(by_day[day], DayStatus.MISSED, day)
        self.assertIs(by_day[13], DayStatus.DONE)
        for day in range(16, 32):
            self.assertIs(by_day[day], DayStatus.FUTURE, day)

        today_cell = next(cell for cell in cells if cell.is_today)
        self.assertEqual(today_cell.iso, "2024-03-15")
        self.assertIs(today_cell.status, DayStatus.MISSED)

    def test_every_month_is_fully_partitioned(self):
        today = date(2024, 6, 10)
        entries = {"2024-06-01", "2024-06-10", "2024-06-20", "2023-02-28"}
        for year in (2023, 2024):
            for month in range(1, 13):
                cells = reconcile_month(date(year, month, 1), today, entries)
                expected = pycalendar.monthrange(year, month)[1]
                self.assertEqual(len(cells), expected)
                self.assertEqual(len({cell.iso for cell in cells}), expected)
                counts = status_counts(cells)
                self.assertEqual(sum(counts.values()), expected)
                self.assertEqual([cell.day for cell in cells], sorted(cell.day for cell in cells))

    def test_future_days_ignore_entries(self):
        today = date(2024, 6, 10)
        entries = {"2024-06-20"}
        self.assertIs(classify_day(date(2024, 6, 20), today, entries), DayStatus.FUTURE)
        cells = reconcile_month(date(2024, 6, 1), today, entries)
        skewed = next(cell for cell in cells if cell.iso == "2024-06-20")
        self.assertIs(skewed.status, DayStatus.FUTURE)
        self.assertTrue(skewed.has_entry)

    def test_past_days_done_iff_entry(self):
        today = date(2024, 6, 10)
        entries = {"2024-05-31", "2024-06-01"}
        self.assertIs(classify_day(date(2024, 5, 31), today, entries), DayStatus.DONE)
        self.assertIs(classify_day(date(2024, 5, 30), today, entries), DayStatus.MISSED)
        self.assertIs(classify_day(date(2024, 6, 10), today, {"2024-06-10"}), DayStatus.DONE)

    def test_whole_month_in_future_or_past(self):
        today = date(2024, 6, 10)
        future = reconcile_month(date(2024, 7, 1), today, set())
        self.assertEqual(status_counts(future), {"future": 31, "done": 0, "missed": 0})
        past = reconcile_month(date(2024, 5, 1), today, {"2024-05-01"})
        self.assertEqual(status_counts(past), {"future": 0, "done": 1, "missed": 30})

    def test_year_boundary_months(self):
        today = date(2025, 1, 1)
        december = reconcile_month(date(2024, 12, 31), today, {"2024-12-31"})
        self.assertEqual(december[-1].iso, "2024-12-31")
        self.assertIs(december[-1].status, DayStatus.DONE)
        january = reconcile_month(date(2025, 1, 1), today, set())
        self.assertIs(january[0].status, DayStatus.MISSED)
        self.assertIs(january[1].status, DayStatus.FUTURE)

    def test_done_and_missed_views_are_disjoint(self):
        today = date(2024, 3, 15)
        cells = reconcile_month(today, today, {"2024-03-13", "2024-03-01"})
        self.assertEqual(done_dates(cells), frozenset({"2024-03-13", "2024-03-01"}))
        self.assertEqual(len(missed_dates(cells)), 13)
        self.assertFalse(done_dates(cells) & missed_dates(cells))

    def test_month_weeks_pads_to_monday_first_rows(self):
        # 2024-03-01 is a Friday.
        cells = reconcile_month(date(2024, 3, 1), date(2024, 3, 15), set())
        weeks = month_weeks(cells)
        self.assertTrue(all(len(week) == 7 for week in weeks))
        self.assertEqual(weeks[0][:4], [None, None, None, None])
        self.assertEqual(weeks[0][4].iso, "2024-03-01")
        flat = [cell for week in weeks for cell in week if cell is not None]
        self.assertEqual(len(flat), 31)
        self.assertEqual(month_weeks(()), [])


class TestCalendarState(unittest.TestCase):
    def test_defaults_to_today(self):
        state = CalendarState(date(2024, 3, 15))
        self.assertEqual(state.selected_iso_date, "2024-03-15")
        self.assertEqual(state.displayed_month, date(2024, 3, 1))

    def test_select_any_valid_date(self):
        state = CalendarState(date(2024, 3, 15))
        self.assertEqual(state.select_date("2024-04-30"), "2024-04-30")
        self.assertEqual(state.select_date(date(2023, 1, 2)), "2023-01-02")
        with self.assertRaises(ValueError):
            state.select_date("2024-02-31")
        self.assertEqual(state.selected_iso_date, "2023-01-02")

    def test_selection_without_entry_is_empty_view(self):
        entries = EntryMap([{"entry_date": "2024-03-13", "reflection": "x"}])
        state = CalendarState(date(2024, 3, 15))
        state.select_date("2024-03-14")
        self.assertIsNone(state.selected_entry(entries))
        self.assertIs(state.selected_status(entries), DayStatus.MISSED)
        state.select_date("2024-03-20")
        self.assertIs(state.selected_status(entries), DayStatus.FUTURE)
        state.select_date("2024-03-13")
        self.assertEqual(state.selected_entry(entries).reflection, "x")

    def test_month_navigation(self):
        state = CalendarState(date(2024, 1, 15))
        self.assertEqual(state.previous_month(), date(2023, 12, 1))
        self.assertEqual(state.next_month(), date(2024, 1, 1))
        self.assertEqual(state.next_month(), date(2024, 2, 1))
        state.select_date("2024-02-02")
        cells = state.cells(set())
        self.assertEqual(len(cells), 29)
        self.assertEqual([cell.iso for cell in cells if cell.is_selected], ["2024-02-02"])
        state.show_today()
        self.assertEqual(state.displayed_month, date(2024, 1, 1))
        self.assertEqual(state.selected_iso_date, "2024-01-15")


if __name__ == "__main__":
    unittest.main()
