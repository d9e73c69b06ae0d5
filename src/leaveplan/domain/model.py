from __future__ import annotations

from dataclasses import dataclass, field, replace
from enum import Enum
from typing import Any, Literal

from ._exceptions import InvalidDayTypeError, InvalidFractionError

FRACTIONS: tuple[float, ...] = (1.0, 0.75, 0.5, 0.25, 0.125, 0.0)

ParentKey = Literal["a", "b"]
PARENTS: tuple[ParentKey, ParentKey] = ("a", "b")


def other_parent(parent: ParentKey) -> ParentKey:
    return "b" if parent == "a" else "a"


def is_fraction(value: Any) -> bool:
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        return False
    return float(value) in FRACTIONS


def to_fraction(value: Any) -> float:
    """Return `value` as one of FRACTIONS; anything else raises."""
    if not is_fraction(value):
        raise InvalidFractionError(f"Invalid fraction: {value!r}")
    return float(value)


class DayType(str, Enum):
    SBL = "SBL"
    MIN = "MIN"
    OFF = "OFF"

    @classmethod
    def parse(cls, value: Any) -> "DayType":
        if isinstance(value, cls):
            return value
        try:
            return cls(value)
        except ValueError:
            raise InvalidDayTypeError(f"Invalid day type: {value!r}") from None


@dataclass(frozen=True, slots=True)
class ParentEntry:
    fraction: float = 0.0
    type: DayType = DayType.OFF
    reserved: bool = False

    def __post_init__(self) -> None:
        object.__setattr__(self, "fraction", to_fraction(self.fraction))
        object.__setattr__(self, "type", DayType.parse(self.type))

    @property
    def is_used(self) -> bool:
        """True if this claim counts towards any aggregate."""
        return self.fraction > 0 and self.type is not DayType.OFF


ZERO = ParentEntry()


@dataclass(frozen=True, slots=True)
class DayEntry:
    date_iso: str
    a: ParentEntry = field(default=ZERO)
    b: ParentEntry = field(default=ZERO)
    double_day: bool = False

    def parent(self, key: ParentKey) -> ParentEntry:
        return self.a if key == "a" else self.b

    def with_parent(self, key: ParentKey, entry: ParentEntry) -> "DayEntry":
        return replace(self, **{key: entry})

    @property
    def is_default(self) -> bool:
        return self.a == ZERO and self.b == ZERO and not self.double_day

    @property
    def owner(self) -> str | None:
        if self.double_day:
            return "double"
        a_used, b_used = self.a.is_used, self.b.is_used
        if a_used and not b_used:
            return "a"
        if b_used and not a_used:
            return "b"
        return None


def default_entry(date_iso: str) -> DayEntry:
    """The implicit value of a date that has no stored entry."""
    return DayEntry(date_iso=date_iso)


DEFAULT_CHILD_DOB = "2024-12-20"
DEFAULT_YEARS = 5


@dataclass(frozen=True, slots=True)
class Config:
    child_dob: str = DEFAULT_CHILD_DOB
    years: int = DEFAULT_YEARS
