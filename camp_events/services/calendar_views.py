import calendar
from collections import OrderedDict
from datetime import date, timedelta
from typing import Dict, List

from camp_events.db.schemas import DayEvents, Event, MonthView, WeekView, YearMonth, YearView

GRID_CELLS = 42  # 6 rows x 7 days
YEAR_VIEW_MAX_PER_DAY = 3


def days_between(start: date, end: date):
    day = start
    while day <= end:
        yield day
        if day == end:
            break
        day += timedelta(days=1)


def shift(day: date, days: int) -> date:
    """Move day by the given number of days, clamped to the representable range."""
    if days < 0 and (day - date.min).days < -days:
        return date.min
    if days > 0 and (date.max - day).days < days:
        return date.max
    return day + timedelta(days=days)


def bucket_by_day(events: List[Event], start: date, end: date) -> Dict[date, List[Event]]:
    """
    Map every day in [start, end] to the events running on it.

    An event occupies each day from its start date to its end date inclusive.
    Event order inside a bucket follows the input order.
    """
    buckets = OrderedDict((day, []) for day in days_between(start, end))
    for event in events:
        first = max(event.start_date, start)
        last = min(event.end_date, end)
        for day in days_between(first, last):
            buckets[day].append(event)
    return buckets


def day_entry(day: date, events: List[Event], limit: int = None, is_current_month: bool = True) -> DayEvents:
    visible = events if limit is None else events[:limit]
    return DayEvents(
        date=day,
        weekday=day.strftime("%A"),
        is_current_month=is_current_month,
        events=visible,
        more_count=len(events) - len(visible),
    )


def sunday_on_or_before(day: date) -> date:
    # date.weekday() is Monday=0 .. Sunday=6
    return shift(day, -((day.weekday() + 1) % 7))


def month_view(year: int, month: int, events: List[Event], max_per_day: int) -> MonthView:
    grid_start = sunday_on_or_before(date(year, month, 1))
    grid_end = shift(grid_start, GRID_CELLS - 1)
    buckets = bucket_by_day(events, grid_start, grid_end)
    days = [
        day_entry(day, day_events, limit=max_per_day, is_current_month=(day.month == month))
        for day, day_events in buckets.items()
    ]
    return MonthView(year=year, month=month, days=days)


def week_view(anchor: date, events: List[Event]) -> WeekView:
    start = sunday_on_or_before(anchor)
    end = shift(start, 6)
    buckets = bucket_by_day(events, start, end)
    return WeekView(start=start, end=end, days=[day_entry(day, evs) for day, evs in buckets.items()])


def year_view(year: int, events: List[Event]) -> YearView:
    months = []
    for month in range(1, 13):
        _, num_days = calendar.monthrange(year, month)
        buckets = bucket_by_day(events, date(year, month, 1), date(year, month, num_days))
        seen = {event.id for day_events in buckets.values() for event in day_events}
        months.append(YearMonth(
            month=month,
            name=calendar.month_name[month],
            event_count=len(seen),
            days=[
                day_entry(day, day_events, limit=YEAR_VIEW_MAX_PER_DAY)
                for day, day_events in buckets.items() if day_events
            ],
        ))
    return YearView(year=year, months=months)
