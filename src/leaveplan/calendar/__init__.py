"""
leaveplan.calendar
~~~~~~~~~~~~~~~~~~

Pure local-date arithmetic: ISO strings, month and week boundaries, ISO-8601
week identifiers and inclusive day ranges.  Weeks start on Monday
(weekday index 0).

Basic usage::

    import datetime as dt
    from leaveplan.calendar import add_months, iso_week_id, enumerate_days

    add_months(dt.date(2025, 1, 31), 1)          # → 2025-03-03 (rolls over)
    iso_week_id(dt.date(2021, 1, 1))             # → "2020-W53"
    list(enumerate_days(dt.date(2025, 1, 1), dt.date(2025, 1, 3)))

Public API
----------
to_iso / from_iso        ISO ``YYYY-MM-DD`` (de)serialization.
add_months               Month arithmetic with day-of-month rollover.
start_of_month, end_of_month, start_of_week_monday, is_weekend, iso_week_id
enumerate_days, DayRange Restartable inclusive day ranges.
"""

from __future__ import annotations

from leaveplan.calendar.dates import (
    DayRange,
    add_months,
    end_of_month,
    enumerate_days,
    from_iso,
    is_iso_date,
    is_weekend,
    iso_range,
    iso_week_id,
    month_grid_range,
    start_of_month,
    start_of_week_monday,
    to_iso,
    weekday_index,
)

__all__ = [
    "DayRange",
    "add_months",
    "end_of_month",
    "enumerate_days",
    "from_iso",
    "is_iso_date",
    "is_weekend",
    "iso_range",
    "iso_week_id",
    "month_grid_range",
    "start_of_month",
    "start_of_week_monday",
    "to_iso",
    "weekday_index",
]
