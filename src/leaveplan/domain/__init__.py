"""
leaveplan.domain
~~~~~~~~~~~~~~~~

Value types for a two-parent leave plan and the fixed policy caps.

A plan is a sparse mapping of ISO dates to DayEntry values.  Each DayEntry
holds one ParentEntry per parent (``a`` and ``b``) and a double-day flag.
All types are immutable; edits produce new values with ``dataclasses.replace``.

Basic usage::

    from leaveplan.domain import DayEntry, DayType, ParentEntry

    e = DayEntry("2025-03-03", a=ParentEntry(0.5, DayType.SBL))
    e.a.is_used                       # → True
    ParentEntry(0.3, DayType.SBL)     # raises InvalidFractionError

Public API
----------
DayEntry, ParentEntry, DayType, Config   Value types.
default_entry                            Implicit entry of an unset date.
FRACTIONS, to_fraction, is_fraction      The allowed day fractions.
CAPS                                     Policy caps.
LeavePlanError                           Base exception.
"""

from __future__ import annotations

from leaveplan.domain._exceptions import (
    InvalidDateError,
    InvalidDayTypeError,
    InvalidFractionError,
    LeavePlanError,
    PlanImportError,
)
from leaveplan.domain.caps import (
    AFTER_ONE_YEAR_MONTHS,
    CAPS,
    CHRONOLOGY_SBL_THRESHOLD,
    DOUBLE_DAY_LIMIT_MONTHS,
    POST4_MONTHS,
    WEEKLY_COVERAGE_THRESHOLD,
    Caps,
)
from leaveplan.domain.model import (
    FRACTIONS,
    PARENTS,
    ZERO,
    Config,
    DayEntry,
    DayType,
    ParentEntry,
    ParentKey,
    default_entry,
    is_fraction,
    other_parent,
    to_fraction,
)

__all__ = [
    "AFTER_ONE_YEAR_MONTHS",
    "CAPS",
    "CHRONOLOGY_SBL_THRESHOLD",
    "Caps",
    "Config",
    "DOUBLE_DAY_LIMIT_MONTHS",
    "DayEntry",
    "DayType",
    "FRACTIONS",
    "InvalidDateError",
    "InvalidDayTypeError",
    "InvalidFractionError",
    "LeavePlanError",
    "PARENTS",
    "POST4_MONTHS",
    "ParentEntry",
    "ParentKey",
    "PlanImportError",
    "WEEKLY_COVERAGE_THRESHOLD",
    "ZERO",
    "default_entry",
    "is_fraction",
    "other_parent",
    "to_fraction",
]
