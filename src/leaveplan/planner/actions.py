from __future__ import annotations

import datetime as dt
from dataclasses import dataclass, field
from typing import Any, Literal, Mapping, Union

from leaveplan.calendar.dates import from_iso
from leaveplan.domain.model import Config, DayEntry, DayType, ParentKey, to_fraction

ParentField = Literal["fraction", "type", "reserved"]


def _check_iso(iso: str) -> None:
    from_iso(iso)


def _check_parent(parent: str) -> None:
    if parent not in ("a", "b"):
        raise ValueError(f"parent must be 'a' or 'b'; got {parent!r}.")


@dataclass(frozen=True, slots=True)
class SetDob:
    dob: str

    def __post_init__(self) -> None:
        _check_iso(self.dob)


@dataclass(frozen=True, slots=True)
class SetMonth:
    date: dt.date


@dataclass(frozen=True, slots=True)
class ShiftMonth:
    months: int


@dataclass(frozen=True, slots=True)
class JumpToDob:
    pass


@dataclass(frozen=True, slots=True)
class GoToToday:
    today: dt.date


@dataclass(frozen=True, slots=True)
class SelectSingle:
    iso: str

    def __post_init__(self) -> None:
        _check_iso(self.iso)


@dataclass(frozen=True, slots=True)
class ToggleMulti:
    iso: str

    def __post_init__(self) -> None:
        _check_iso(self.iso)


@dataclass(frozen=True, slots=True)
class RangeSelect:
    iso: str

    def __post_init__(self) -> None:
        _check_iso(self.iso)


@dataclass(frozen=True, slots=True)
class SelectVisibleMonth:
    pass


@dataclass(frozen=True, slots=True)
class ClearSelection:
    pass


@dataclass(frozen=True, slots=True)
class UpdateDay:
    """Set one field of one parent's claim on one date."""

    iso: str
    parent: ParentKey
    field: ParentField
    value: Any

    def __post_init__(self) -> None:
        _check_iso(self.iso)
        _check_parent(self.parent)
        if self.field == "fraction":
            object.__setattr__(self, "value", to_fraction(self.value))
        elif self.field == "type":
            object.__setattr__(self, "value", DayType.parse(self.value))
        elif self.field == "reserved":
            if not isinstance(self.value, bool):
                raise ValueError(f"reserved must be a bool; got {self.value!r}.")
        else:
            raise ValueError(f"Unknown parent field {self.field!r}.")


@dataclass(frozen=True, slots=True)
class ToggleDouble:
    iso: str
    enable: bool

    def __post_init__(self) -> None:
        _check_iso(self.iso)


@dataclass(frozen=True, slots=True)
class BulkApplyParent:
    """Apply one claim to `parent` on every selected date."""

    parent: ParentKey
    fraction: float
    day_type: DayType
    reserved: bool = False
    make_double_if_allowed: bool = False

    def __post_init__(self) -> None:
        _check_parent(self.parent)
        object.__setattr__(self, "fraction", to_fraction(self.fraction))
        object.__setattr__(self, "day_type", DayType.parse(self.day_type))


@dataclass(frozen=True, slots=True)
class BulkApplyDouble:
    fraction: float
    day_type: DayType

    def __post_init__(self) -> None:
        fraction = to_fraction(self.fraction)
        day_type = DayType.parse(self.day_type)
        if fraction == 0.0 or day_type is DayType.OFF:
            raise ValueError("Double days need a positive fraction and a non-OFF type.")
        object.__setattr__(self, "fraction", fraction)
        object.__setattr__(self, "day_type", day_type)


@dataclass(frozen=True, slots=True)
class ClearDay:
    iso: str

    def __post_init__(self) -> None:
        _check_iso(self.iso)


@dataclass(frozen=True, slots=True)
class ReplaceAll:
    config: Config
    entries: Mapping[str, DayEntry] = field(default_factory=dict)


@dataclass(frozen=True, slots=True)
class Reset:
    today: dt.date | None = None


Action = Union[
    SetDob,
    SetMonth,
    ShiftMonth,
    JumpToDob,
    GoToToday,
    SelectSingle,
    ToggleMulti,
    RangeSelect,
    SelectVisibleMonth,
    ClearSelection,
    UpdateDay,
    ToggleDouble,
    BulkApplyParent,
    BulkApplyDouble,
    ClearDay,
    ReplaceAll,
    Reset,
]
