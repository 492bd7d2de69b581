"""Unit tests for day bucketing and the calendar grids."""
from datetime import date

from camp_events.services.calendar_views import (
    GRID_CELLS, bucket_by_day, days_between, month_view, shift, sunday_on_or_before, week_view, year_view,
)


class TestBucketByDay:

    def test_event_occupies_each_day_inclusive(self, event_factory):
        event = event_factory("w1", "2025-09-19", "2025-09-21")
        buckets = bucket_by_day([event], date(2025, 9, 1), date(2025, 9, 30))

        occupied = [day for day, events in buckets.items() if events]
        assert occupied == [date(2025, 9, 19), date(2025, 9, 20), date(2025, 9, 21)]

    def test_every_day_in_window_has_a_bucket(self, event_factory):
        buckets = bucket_by_day([], date(2025, 2, 1), date(2025, 2, 28))
        assert len(buckets) == 28
        assert all(events == [] for events in buckets.values())

    def test_event_clipped_to_window(self, event_factory):
        event = event_factory("x", "2025-08-30", "2025-09-02")
        buckets = bucket_by_day([event], date(2025, 9, 1), date(2025, 9, 30))
        assert buckets[date(2025, 9, 1)] == [event]
        assert buckets[date(2025, 9, 2)] == [event]
        assert buckets[date(2025, 9, 3)] == []

    def test_many_events_share_a_day_in_input_order(self, event_factory):
        first = event_factory("1", "2025-11-06", "2025-11-08")
        second = event_factory("2", "2025-11-07", "2025-11-09")
        buckets = bucket_by_day([first, second], date(2025, 11, 1), date(2025, 11, 30))
        assert buckets[date(2025, 11, 7)] == [first, second]
        assert buckets[date(2025, 11, 6)] == [first]
        assert buckets[date(2025, 11, 9)] == [second]


class TestMonthView:

    def test_grid_starts_on_sunday_and_has_42_cells(self):
        view = month_view(2025, 11, [], max_per_day=2)
        assert len(view.days) == GRID_CELLS
        assert view.days[0].day == date(2025, 10, 26)
        assert view.days[0].is_current_month is False
        assert view.days[6].day == date(2025, 11, 1)
        assert view.days[6].is_current_month is True

    def test_overflow_reports_more_count(self, event_factory):
        events = [event_factory(str(i), "2025-09-20", "2025-09-20") for i in range(3)]
        view = month_view(2025, 9, events, max_per_day=2)
        day = next(d for d in view.days if d.day == date(2025, 9, 20))
        assert [e.id for e in day.events] == ["0", "1"]
        assert day.more_count == 1

    def test_sunday_on_or_before(self):
        assert sunday_on_or_before(date(2025, 9, 20)) == date(2025, 9, 14)
        assert sunday_on_or_before(date(2025, 9, 14)) == date(2025, 9, 14)


class TestWeekView:

    def test_week_runs_sunday_to_saturday(self, event_factory):
        event = event_factory("w1", "2025-09-19", "2025-09-21")
        view = week_view(date(2025, 9, 17), [event])
        assert view.start == date(2025, 9, 14)
        assert view.end == date(2025, 9, 20)
        assert [d.day for d in view.days if d.events] == [date(2025, 9, 19), date(2025, 9, 20)]
        assert view.days[0].weekday == "Sunday"


class TestYearView:

    def test_counts_distinct_events_per_month(self, event_factory):
        events = [
            event_factory("a", "2025-10-03", "2025-10-05"),
            event_factory("b", "2025-10-09", "2025-10-11"),
            event_factory("c", "2025-10-31", "2025-11-02"),
        ]
        view = year_view(2025, events)
        assert len(view.months) == 12
        october = view.months[9]
        assert october.name == "October"
        assert october.event_count == 3
        assert view.months[10].event_count == 1
        assert len(october.days) == 7
        assert view.months[0].days == []


class TestCalendarBounds:

    def test_first_month_grid_is_clamped_to_date_min(self):
        view = month_view(1, 1, [], max_per_day=2)
        assert view.days[0].day == date.min
        assert view.days[0].is_current_month is True
        assert len(view.days) == GRID_CELLS

    def test_last_year_is_clamped_to_date_max(self):
        view = year_view(9999, [])
        assert len(view.months) == 12
        assert view.months[11].name == "December"

        december = month_view(9999, 12, [], max_per_day=2)
        assert december.days[-1].day == date.max

    def test_last_week_ends_at_date_max(self):
        view = week_view(date.max, [])
        assert view.start == date(9999, 12, 26)
        assert view.end == date.max
        assert view.days[-1].day == date.max

    def test_days_between_stops_at_end(self):
        assert list(days_between(date.max, date.max)) == [date.max]
        assert list(days_between(date(2025, 9, 1), date(2025, 9, 3))) == [
            date(2025, 9, 1), date(2025, 9, 2), date(2025, 9, 3),
        ]

    def test_shift_clamps(self):
        assert shift(date(1, 1, 3), -10) == date.min
        assert shift(date(9999, 12, 30), 5) == date.max
        assert shift(date(2025, 9, 14), 6) == date(2025, 9, 20)
