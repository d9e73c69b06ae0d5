from __future__ import annotations

import datetime as dt
from dataclasses import dataclass

from leaveplan.calendar.dates import add_months, from_iso, is_weekend, month_grid_range, to_iso
from leaveplan.domain.caps import (
    AFTER_ONE_YEAR_MONTHS,
    CAPS,
    DOUBLE_DAY_LIMIT_MONTHS,
    POST4_MONTHS,
    WEEKLY_COVERAGE_THRESHOLD,
)
from leaveplan.domain.model import DayEntry
from leaveplan.rules.engine import (
    CapViolation,
    Totals,
    check_caps,
    compute_totals,
    find_chronology_violations,
    weeks_below_coverage_threshold,
)

from .state import PlannerState


@dataclass(frozen=True, slots=True)
class GridCell:
    date: dt.date
    iso: str
    in_month: bool
    is_weekend: bool
    is_dob: bool
    selected: bool
    entry: DayEntry
    beyond_double_limit: bool
    chronology_violation: bool

    @property
    def owner(self) -> str | None:
        return self.entry.owner


@dataclass(frozen=True, slots=True)
class Derived:
    child_dob_date: dt.date
    fifteen_months_boundary: dt.date
    four_year_boundary: dt.date
    after_one_year_boundary: dt.date
    sorted_entries: list[DayEntry]
    totals: Totals
    soft_sbl_per_parent: float
    cap_violations: list[CapViolation]
    chronology_violations: set[str]
    weeks_below_coverage: list[str]
    warnings: list[str]
    visible_month_grid: list[GridCell]


def coverage_warning(weeks: list[str], threshold: int = WEEKLY_COVERAGE_THRESHOLD) -> str:
    return f"SGI risk: weeks with <{threshold} weekdays covered: {', '.join(weeks)}"


def compute_derived(state: PlannerState) -> Derived:
    """Everything a view needs, recomputed from `state` on every call."""
    dob = from_iso(state.config.child_dob)
    fifteen_months = add_months(dob, DOUBLE_DAY_LIMIT_MONTHS)
    four_years = add_months(dob, POST4_MONTHS)
    after_one_year = add_months(dob, AFTER_ONE_YEAR_MONTHS)

    entries = sorted(state.entries.values(), key=lambda e: e.date_iso)
    totals = compute_totals(entries, four_years)
    violations = check_caps(totals)
    chronology = find_chronology_violations(entries)
    weeks = weeks_below_coverage_threshold(entries, after_one_year)

    warnings = [v.message for v in violations]
    if weeks:
        warnings.append(coverage_warning(weeks))

    grid = []
    for d in month_grid_range(state.month_cursor):
        iso = to_iso(d)
        entry = state.entry(iso)
        grid.append(GridCell(
            date=d,
            iso=iso,
            in_month=(d.year, d.month) == (state.month_cursor.year, state.month_cursor.month),
            is_weekend=is_weekend(d),
            is_dob=d == dob,
            selected=iso in state.selection,
            entry=entry,
            beyond_double_limit=entry.double_day and d > fifteen_months,
            chronology_violation=iso in chronology,
        ))

    return Derived(
        child_dob_date=dob,
        fifteen_months_boundary=fifteen_months,
        four_year_boundary=four_years,
        after_one_year_boundary=after_one_year,
        sorted_entries=entries,
        totals=totals,
        soft_sbl_per_parent=CAPS.soft_sbl_per_parent,
        cap_violations=violations,
        chronology_violations=chronology,
        weeks_below_coverage=weeks,
        warnings=warnings,
        visible_month_grid=grid,
    )
