from __future__ import annotations

import datetime as dt
import math
import re
from typing import Iterator

import numpy as np

from leaveplan.domain._exceptions import InvalidDateError

_ISO_RE = re.compile(r"^(\d{4})-(\d{2})-(\d{2})$")
_ONE_DAY = np.timedelta64(1, "D")


# ── ISO (de)serialization ─────────────────────────────────────────────────

def to_iso(d: dt.date) -> str:
    return f"{d.year:04d}-{d.month:02d}-{d.day:02d}"


def from_iso(iso: str) -> dt.date:
    """Parse an exact, zero-padded ``YYYY-MM-DD`` string."""
    m = _ISO_RE.match(iso) if isinstance(iso, str) else None
    if m is None:
        raise InvalidDateError(f"Expected YYYY-MM-DD; got {iso!r}.")
    try:
        return dt.date(int(m[1]), int(m[2]), int(m[3]))
    except ValueError as exc:
        raise InvalidDateError(f"Not a calendar date: {iso!r}.") from exc


def is_iso_date(value: object) -> bool:
    try:
        from_iso(value)  # type: ignore[arg-type]
    except InvalidDateError:
        return False
    return True


# ── month / week arithmetic ───────────────────────────────────────────────

def add_months(d: dt.date, n: int) -> dt.date:
    """
    Move `d` by `n` calendar months, keeping the day-of-month.

    A day-of-month past the end of the target month rolls over into the
    following month instead of clamping: 2025-01-31 + 1 month → 2025-03-03.
    """
    y, m0 = divmod(d.year * 12 + (d.month - 1) + n, 12)
    return dt.date(y, m0 + 1, 1) + dt.timedelta(days=d.day - 1)


def start_of_month(d: dt.date) -> dt.date:
    return d.replace(day=1)


def end_of_month(d: dt.date) -> dt.date:
    return add_months(start_of_month(d), 1) - dt.timedelta(days=1)


def weekday_index(d: dt.date) -> int:
    """Monday = 0 … Sunday = 6."""
    return d.weekday()


def start_of_week_monday(d: dt.date) -> dt.date:
    return d - dt.timedelta(days=weekday_index(d))


def is_weekend(d: dt.date) -> bool:
    return weekday_index(d) >= 5


def iso_week_id(d: dt.date) -> str:
    """
    ISO-8601 week identifier ``YYYY-Www``.

    The date is shifted to the Thursday of its (Monday-start) week; that
    Thursday's year is the week-year, and the week number counts 7-day
    blocks from January 1st of that year.
    """
    thursday = d + dt.timedelta(days=3 - weekday_index(d))
    year_start = dt.date(thursday.year, 1, 1)
    week = math.ceil(((thursday - year_start).days + 1) / 7)
    return f"{thursday.year:04d}-W{week:02d}"


# ── day ranges ────────────────────────────────────────────────────────────

class DayRange:
    """
    Inclusive, ascending range of calendar days.

    Iterating twice yields the same days.  ``start > end`` gives an empty
    range.
    """

    __slots__ = ("_start", "_end")

    def __init__(self, start: dt.date, end: dt.date) -> None:
        self._start = start
        self._end = end

    def as_array(self) -> np.ndarray:
        lo = np.datetime64(self._start, "D")
        hi = np.datetime64(self._end, "D") + _ONE_DAY
        if hi <= lo:
            return np.empty(0, dtype="datetime64[D]")
        return np.arange(lo, hi, dtype="datetime64[D]")

    def __iter__(self) -> Iterator[dt.date]:
        for day in self.as_array():
            yield day.item()

    def __len__(self) -> int:
        return max((self._end - self._start).days + 1, 0)

    def __contains__(self, d: object) -> bool:
        return isinstance(d, dt.date) and self._start <= d <= self._end

    @property
    def start(self) -> dt.date:
        return self._start

    @property
    def end(self) -> dt.date:
        return self._end

    def __repr__(self) -> str:
        return f"DayRange(start={to_iso(self._start)}, end={to_iso(self._end)}, days={len(self)})"


def enumerate_days(start: dt.date, end: dt.date) -> DayRange:
    return DayRange(start, end)


def iso_range(a_iso: str, b_iso: str) -> list[str]:
    """All ISO dates between two ISO dates, inclusive, in either order."""
    a, b = from_iso(a_iso), from_iso(b_iso)
    lo, hi = (a, b) if a <= b else (b, a)
    return [to_iso(d) for d in enumerate_days(lo, hi)]


def month_grid_range(cursor: dt.date) -> DayRange:
    """Monday-start weeks fully covering the month of `cursor`."""
    first = start_of_week_monday(start_of_month(cursor))
    last = start_of_week_monday(end_of_month(cursor)) + dt.timedelta(days=6)
    return DayRange(first, last)
