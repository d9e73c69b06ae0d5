from __future__ import annotations

import datetime as dt
from dataclasses import dataclass, replace
from typing import Iterable

import numpy as np

from leaveplan.calendar.dates import from_iso, iso_week_id
from leaveplan.domain.caps import (
    CAPS,
    CHRONOLOGY_SBL_THRESHOLD,
    WEEKLY_COVERAGE_THRESHOLD,
    Caps,
)
from leaveplan.domain.model import DayEntry, DayType, ParentEntry, to_fraction


@dataclass(frozen=True, slots=True)
class Totals:
    a_sbl: float = 0.0
    a_min: float = 0.0
    b_sbl: float = 0.0
    b_min: float = 0.0
    reserved_a: float = 0.0
    reserved_b: float = 0.0
    post4: float = 0.0
    double_days_a: int = 0
    double_days_b: int = 0

    @property
    def total_sbl(self) -> float:
        return self.a_sbl + self.b_sbl

    @property
    def total_min(self) -> float:
        return self.a_min + self.b_min


@dataclass(frozen=True, slots=True)
class CapViolation:
    rule: str
    cap: float
    value: float
    message: str


class _Columns:
    """Column view of a batch of entries, sorted by date."""

    def __init__(self, entries: Iterable[DayEntry]) -> None:
        rows = sorted(entries, key=lambda e: e.date_iso)
        self.entries: list[DayEntry] = rows
        self.dates: list[dt.date] = [from_iso(e.date_iso) for e in rows]
        self.ordinals = np.fromiter((d.toordinal() for d in self.dates), dtype=np.int64, count=len(rows))
        self.double = np.fromiter((e.double_day for e in rows), dtype=bool, count=len(rows))
        self.a = _ParentColumns([e.a for e in rows])
        self.b = _ParentColumns([e.b for e in rows])

    def __len__(self) -> int:
        return len(self.entries)


class _ParentColumns:

    def __init__(self, parents: list[ParentEntry]) -> None:
        n = len(parents)
        self.fraction = np.fromiter((p.fraction for p in parents), dtype=np.float64, count=n)
        self.sbl = np.fromiter((p.type is DayType.SBL for p in parents), dtype=bool, count=n)
        self.min = np.fromiter((p.type is DayType.MIN for p in parents), dtype=bool, count=n)
        self.reserved = np.fromiter((p.reserved for p in parents), dtype=bool, count=n)
        self.used = (self.sbl | self.min) & (self.fraction > 0.0)

    def sbl_usage(self) -> np.ndarray:
        return np.where(self.sbl, self.fraction, 0.0)

    def min_usage(self) -> np.ndarray:
        return np.where(self.min, self.fraction, 0.0)


# ── aggregates ───────────────────────────────────────────────────────────────

def compute_totals(entries: Iterable[DayEntry], post4_boundary: dt.date) -> Totals:
    """
    Per-parent SBL/MIN sums, reserved sums, double-day counts and post-4 usage.

    OFF claims contribute to nothing, reserved or not.  A reserved claim
    counts both in its type bucket and in the parent's reserved sum.  Double
    days are counted per participating parent in whole days.
    """
    cols = _Columns(entries)
    if not len(cols):
        return Totals()

    post4_mask = cols.ordinals >= post4_boundary.toordinal()
    a, b = cols.a, cols.b
    return Totals(
        a_sbl=float(a.sbl_usage().sum()),
        a_min=float(a.min_usage().sum()),
        b_sbl=float(b.sbl_usage().sum()),
        b_min=float(b.min_usage().sum()),
        reserved_a=float(a.fraction[a.used & a.reserved].sum()),
        reserved_b=float(b.fraction[b.used & b.reserved].sum()),
        post4=float(a.fraction[a.used & post4_mask].sum() + b.fraction[b.used & post4_mask].sum()),
        double_days_a=int(np.count_nonzero(cols.double & a.used)),
        double_days_b=int(np.count_nonzero(cols.double & b.used)),
    )


def find_chronology_violations(
    entries: Iterable[DayEntry],
    threshold: float = CHRONOLOGY_SBL_THRESHOLD,
) -> set[str]:
    """
    Dates where MIN is used before `threshold` SBL fractions were consumed.

    Only SBL from strictly earlier dates counts; same-day SBL is added after
    the check.
    """
    cols = _Columns(entries)
    if not len(cols):
        return set()

    sbl_per_day = cols.a.sbl_usage() + cols.b.sbl_usage()
    sbl_before = np.concatenate(([0.0], np.cumsum(sbl_per_day)[:-1]))
    min_used = (cols.a.min & (cols.a.fraction > 0.0)) | (cols.b.min & (cols.b.fraction > 0.0))
    flagged = np.flatnonzero(min_used & (sbl_before < threshold))
    return {cols.entries[i].date_iso for i in flagged}


def weeks_below_coverage_threshold(
    entries: Iterable[DayEntry],
    after_one_year_boundary: dt.date,
    threshold: int = WEEKLY_COVERAGE_THRESHOLD,
) -> list[str]:
    """
    ISO weeks, on or after the boundary, with fewer than `threshold` used
    weekdays.  Weeks are listed in order of first appearance.
    """
    cols = _Columns(entries)
    if not len(cols):
        return []

    weekday = (cols.ordinals - 1) % 7 < 5   # date.fromordinal(1) is a Monday
    eligible = (cols.ordinals >= after_one_year_boundary.toordinal()) & weekday
    used = eligible & (cols.a.used | cols.b.used)
    counts: dict[str, int] = {}
    for i in np.flatnonzero(used):
        wk = iso_week_id(cols.dates[i])
        counts[wk] = counts.get(wk, 0) + 1
    return [wk for wk, n in counts.items() if n < threshold]


def check_caps(totals: Totals, caps: Caps = CAPS) -> list[CapViolation]:
    """Cap violations in fixed reporting order; reports only, never blocks."""
    checks = (
        ("total_sbl", totals.total_sbl, caps.total_sbl,
         f"Total SBL exceeds {caps.total_sbl:g}."),
        ("total_min", totals.total_min, caps.total_min,
         f"Total MIN exceeds {caps.total_min:g}."),
        ("reserved_a", totals.reserved_a, caps.reserved_per_parent,
         f"Parent A reserved exceeds {caps.reserved_per_parent:g}."),
        ("reserved_b", totals.reserved_b, caps.reserved_per_parent,
         f"Parent B reserved exceeds {caps.reserved_per_parent:g}."),
        ("double_days_a", totals.double_days_a, caps.double_days_per_parent,
         f"Parent A double days exceed {caps.double_days_per_parent:g}."),
        ("double_days_b", totals.double_days_b, caps.double_days_per_parent,
         f"Parent B double days exceed {caps.double_days_per_parent:g}."),
        ("post4", totals.post4, caps.post4,
         f"Saved days after age 4 exceed {caps.post4:g}."),
    )
    return [
        CapViolation(rule=rule, cap=float(cap), value=float(value), message=msg)
        for rule, value, cap, msg in checks
        if value > cap
    ]


# ── double-day synchronization ───────────────────────────────────────────────

def synchronize_double_day(entry: DayEntry, fraction: float, day_type: DayType) -> DayEntry:
    """
    Return `entry` as a double day: both parents at `fraction` and
    `day_type`, neither reserved.  The only way a double day is built.
    """
    fraction = to_fraction(fraction)
    day_type = DayType.parse(day_type)
    if day_type is DayType.OFF or fraction == 0.0:
        raise ValueError("A double day needs a positive fraction and a non-OFF type.")
    side = ParentEntry(fraction=fraction, type=day_type, reserved=False)
    return replace(entry, a=side, b=side, double_day=True)
