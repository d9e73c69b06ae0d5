"""
leaveplan.rules
~~~~~~~~~~~~~~~

Stateless checks over a batch of DayEntry values.  Nothing here mutates its
input; every function returns a fresh value.

Basic usage::

    import datetime as dt
    from leaveplan.rules import compute_totals, check_caps

    totals = compute_totals(entries, post4_boundary=dt.date(2029, 12, 20))
    for violation in check_caps(totals):
        print(violation.message)

Public API
----------
compute_totals                   Per-parent sums and counts → Totals.
find_chronology_violations       MIN used before 180 SBL days.
weeks_below_coverage_threshold   ISO weeks with too few covered weekdays.
check_caps                       Ordered CapViolation list.
synchronize_double_day           Build a valid double-day entry.
"""

from __future__ import annotations

from leaveplan.rules.engine import (
    CapViolation,
    Totals,
    check_caps,
    compute_totals,
    find_chronology_violations,
    synchronize_double_day,
    weeks_below_coverage_threshold,
)

__all__ = [
    "CapViolation",
    "Totals",
    "check_caps",
    "compute_totals",
    "find_chronology_violations",
    "synchronize_double_day",
    "weeks_below_coverage_threshold",
]
