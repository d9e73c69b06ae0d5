from __future__ import annotations

import datetime as dt
from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Mapping

from leaveplan.calendar.dates import add_months, from_iso, start_of_month
from leaveplan.domain.caps import DOUBLE_DAY_LIMIT_MONTHS
from leaveplan.domain.model import Config, DayEntry, default_entry


def freeze_entries(entries: Mapping[str, DayEntry]) -> Mapping[str, DayEntry]:
    return MappingProxyType(dict(entries))


@dataclass(frozen=True, slots=True)
class PlannerState:
    config: Config
    month_cursor: dt.date
    entries: Mapping[str, DayEntry] = field(default_factory=lambda: freeze_entries({}))
    selection: frozenset[str] = frozenset()
    anchor: str | None = None

    def entry(self, iso: str) -> DayEntry:
        return self.entries.get(iso) or default_entry(iso)

    @property
    def double_day_limit(self) -> dt.date:
        return add_months(from_iso(self.config.child_dob), DOUBLE_DAY_LIMIT_MONTHS)


def initial_state(config: Config | None = None,
                  entries: Mapping[str, DayEntry] | None = None,
                  today: dt.date | None = None) -> PlannerState:
    today = today or dt.date.today()
    return PlannerState(
        config=config or Config(),
        month_cursor=start_of_month(today),
        entries=freeze_entries(entries or {}),
    )
