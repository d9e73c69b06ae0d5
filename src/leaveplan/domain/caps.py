from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True, slots=True)
class Caps:
    total_sbl: float = 390.0
    total_min: float = 90.0
    reserved_per_parent: float = 90.0
    double_days_per_parent: int = 60
    post4: float = 96.0
    # Shown next to each parent's SBL total; never reported as a violation.
    soft_sbl_per_parent: float = 195.0


CAPS = Caps()

# The first 180 compensated days must be taken at the SBL level.
CHRONOLOGY_SBL_THRESHOLD: float = 180.0

# Weekdays per ISO week that must show usage after the first year.
WEEKLY_COVERAGE_THRESHOLD: int = 5

# Boundary offsets from the child's date of birth, in calendar months.
DOUBLE_DAY_LIMIT_MONTHS: int = 15
AFTER_ONE_YEAR_MONTHS: int = 12
POST4_MONTHS: int = 48
