from __future__ import annotations

import json
from typing import Any, Dict, Literal, Mapping

from pydantic import (
    BaseModel,
    ConfigDict,
    Field,
    RootModel,
    StrictBool,
    StrictInt,
    StrictStr,
    ValidationError,
    field_validator,
    model_validator,
)

from leaveplan.calendar.dates import from_iso
from leaveplan.domain._exceptions import PlanImportError
from leaveplan.domain.model import Config, DayEntry, DayType, ParentEntry


# ── wire models ──────────────────────────────────────────────────────────────

WireFraction = Literal[1, 0.75, 0.5, 0.25, 0.125, 0]


def _number(f: float) -> int | float:
    # 1 and 0 are written as integers, matching the exported shape.
    return int(f) if float(f).is_integer() else f


def check_invariants(e: DayEntry) -> str | None:
    """Describe the first broken entry invariant, or None."""
    if e.double_day:
        if e.a.fraction != e.b.fraction or e.a.fraction == 0.0:
            return "double day fractions must be equal and positive"
        if DayType.OFF in (e.a.type, e.b.type):
            return "double day parents cannot be OFF"
        if e.a.reserved or e.b.reserved:
            return "double day parents cannot be reserved"
    elif e.a.fraction > 0.0 and e.b.fraction > 0.0:
        return "only one parent may claim a non-double day"
    return None


class ConfigWire(BaseModel):
    child_dob: StrictStr = Field(alias="childDob")
    years: StrictInt

    model_config = ConfigDict(populate_by_name=True, frozen=True)

    @field_validator("child_dob")
    @classmethod
    def check_iso_date(cls, v: str) -> str:
        from_iso(v)
        return v

    @classmethod
    def from_config(cls, c: Config) -> "ConfigWire":
        return cls(child_dob=c.child_dob, years=c.years)

    def to_config(self) -> Config:
        return Config(child_dob=self.child_dob, years=self.years)


class ParentWire(BaseModel):
    fraction: WireFraction
    type: DayType
    reserved: StrictBool

    model_config = ConfigDict(frozen=True)

    @field_validator("fraction", mode="before")
    @classmethod
    def check_numeric(cls, v: Any) -> Any:
        # Literal matching alone would let True stand in for 1.
        if isinstance(v, bool) or not isinstance(v, (int, float)):
            raise ValueError(f"fraction must be a number; got {v!r}")
        return v

    @classmethod
    def from_parent(cls, p: ParentEntry) -> "ParentWire":
        return cls(fraction=_number(p.fraction), type=p.type, reserved=p.reserved)

    def to_parent(self) -> ParentEntry:
        return ParentEntry(fraction=self.fraction, type=self.type, reserved=self.reserved)


class EntryWire(BaseModel):
    date_iso: StrictStr = Field(alias="dateISO")
    a: ParentWire
    b: ParentWire
    double_day: StrictBool = Field(alias="doubleDay")

    model_config = ConfigDict(populate_by_name=True, frozen=True)

    @field_validator("date_iso")
    @classmethod
    def check_iso_date(cls, v: str) -> str:
        from_iso(v)
        return v

    @model_validator(mode="after")
    def check_entry_invariants(self) -> "EntryWire":
        problem = check_invariants(self.to_entry())
        if problem is not None:
            raise ValueError(problem)
        return self

    @classmethod
    def from_entry(cls, e: DayEntry) -> "EntryWire":
        return cls(
            date_iso=e.date_iso,
            a=ParentWire.from_parent(e.a),
            b=ParentWire.from_parent(e.b),
            double_day=e.double_day,
        )

    def to_entry(self) -> DayEntry:
        return DayEntry(
            date_iso=self.date_iso,
            a=self.a.to_parent(),
            b=self.b.to_parent(),
            double_day=self.double_day,
        )


class EntriesWire(RootModel[Dict[str, EntryWire]]):
    """Entries keyed by their own ``dateISO``."""

    @model_validator(mode="after")
    def check_keys(self) -> "EntriesWire":
        for iso, e in self.root.items():
            if e.date_iso != iso:
                raise ValueError(f"entry {iso!r} has dateISO {e.date_iso!r}")
        return self

    def to_entries(self) -> dict[str, DayEntry]:
        entries = (e.to_entry() for e in self.root.values())
        return {e.date_iso: e for e in entries if not e.is_default}


class PlanWire(BaseModel):
    config: ConfigWire
    entries: EntriesWire


# ── encode ───────────────────────────────────────────────────────────────────

def parent_to_dict(p: ParentEntry) -> dict[str, Any]:
    return ParentWire.from_parent(p).model_dump(mode="json")


def entry_to_dict(e: DayEntry) -> dict[str, Any]:
    return EntryWire.from_entry(e).model_dump(mode="json", by_alias=True)


def config_to_dict(c: Config) -> dict[str, Any]:
    return ConfigWire.from_config(c).model_dump(mode="json", by_alias=True)


def entries_to_dict(entries: Mapping[str, DayEntry]) -> dict[str, Any]:
    return {iso: entry_to_dict(entries[iso]) for iso in sorted(entries)}


def dump_plan(config: Config, entries: Mapping[str, DayEntry]) -> str:
    return json.dumps(
        {"config": config_to_dict(config), "entries": entries_to_dict(entries)},
        indent=2,
    )


# ── decode ───────────────────────────────────────────────────────────────────

def _import_error(exc: ValidationError, what: str) -> PlanImportError:
    err = exc.errors()[0]
    where = ".".join(str(p) for p in (what, *err["loc"]) if p != "")
    # JSON syntax errors carry an empty loc and an "Invalid JSON: ..." message.
    if err["type"] == "json_invalid":
        return PlanImportError(err["msg"])
    return PlanImportError(f"{where}: {err['msg']}")


def config_from_dict(data: Any) -> Config:
    try:
        return ConfigWire.model_validate(data).to_config()
    except ValidationError as exc:
        raise _import_error(exc, "config") from exc


def parent_from_dict(data: Any, what: str) -> ParentEntry:
    try:
        return ParentWire.model_validate(data).to_parent()
    except ValidationError as exc:
        raise _import_error(exc, what) from exc


def entry_from_dict(iso: str, data: Any) -> DayEntry:
    try:
        wire = EntriesWire.model_validate({iso: data})
    except ValidationError as exc:
        raise _import_error(exc, "entries") from exc
    return wire.root[iso].to_entry()


def entries_from_dict(data: Any) -> dict[str, DayEntry]:
    """Validated entries with default (empty) days dropped."""
    try:
        return EntriesWire.model_validate(data).to_entries()
    except ValidationError as exc:
        raise _import_error(exc, "entries") from exc


def config_from_json(text: str | bytes) -> Config:
    try:
        return ConfigWire.model_validate_json(text).to_config()
    except ValidationError as exc:
        raise _import_error(exc, "config") from exc


def entries_from_json(text: str | bytes) -> dict[str, DayEntry]:
    try:
        return EntriesWire.model_validate_json(text).to_entries()
    except ValidationError as exc:
        raise _import_error(exc, "entries") from exc


def load_plan(text: str | bytes) -> tuple[Config, dict[str, DayEntry]]:
    """
    Parse an exported plan.  Raises PlanImportError on anything that is not
    a complete, valid plan; never returns a partial result.
    """
    try:
        plan = PlanWire.model_validate_json(text)
    except ValidationError as exc:
        raise _import_error(exc, "plan") from exc
    return plan.config.to_config(), plan.entries.to_entries()
