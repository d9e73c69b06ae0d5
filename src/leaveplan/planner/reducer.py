from __future__ import annotations

import datetime as dt
from dataclasses import replace
from typing import Callable, Mapping

from leaveplan.calendar.dates import (
    add_months,
    end_of_month,
    enumerate_days,
    from_iso,
    iso_range,
    start_of_month,
    to_iso,
)
from leaveplan.domain.model import (
    ZERO,
    DayEntry,
    DayType,
    ParentEntry,
    ParentKey,
    other_parent,
)
from leaveplan.rules.engine import synchronize_double_day

from .actions import (
    Action,
    BulkApplyDouble,
    BulkApplyParent,
    ClearDay,
    ClearSelection,
    GoToToday,
    JumpToDob,
    RangeSelect,
    ReplaceAll,
    Reset,
    SelectSingle,
    SelectVisibleMonth,
    SetDob,
    SetMonth,
    ShiftMonth,
    ToggleDouble,
    ToggleMulti,
    UpdateDay,
)
from .state import PlannerState, freeze_entries, initial_state

# Smallest fraction a day gets when it is switched to a double day.
MIN_DOUBLE_FRACTION = 0.25


# ── single-entry mutations ───────────────────────────────────────────────────
#
# Every path that edits a DayEntry goes through the functions below.  Each one
# returns a new entry satisfying the double-day, reserved and single-owner
# invariants, or None when the edit is rejected.

def _sync_double_fractions(entry: DayEntry, acting: ParentKey) -> DayEntry:
    fraction = entry.parent(acting).fraction
    if fraction == 0.0:
        # Acting parent dropped out; the other keeps a single-parent claim.
        return replace(entry.with_parent(acting, ZERO), double_day=False)

    def _side(p: ParentEntry) -> ParentEntry:
        day_type = DayType.SBL if p.type is DayType.OFF else p.type
        return ParentEntry(fraction=fraction, type=day_type, reserved=False)

    return replace(entry, a=_side(entry.a), b=_side(entry.b))


def _drop_other_on_overlap(entry: DayEntry, acting: ParentKey) -> DayEntry:
    if entry.a.fraction > 0.0 and entry.b.fraction > 0.0:
        return entry.with_parent(other_parent(acting), ZERO)
    return entry


def set_parent_field(entry: DayEntry, parent: ParentKey, field: str, value: object) -> DayEntry | None:
    if field == "reserved" and value is True and entry.double_day:
        return None
    e = entry.with_parent(parent, replace(entry.parent(parent), **{field: value}))
    if e.double_day:
        return _sync_double_fractions(e, parent)
    return _drop_other_on_overlap(e, parent)


def _double_day_type(entry: DayEntry) -> DayType:
    if entry.a.type is entry.b.type and entry.a.type is not DayType.OFF:
        return entry.a.type
    return DayType.SBL


def enable_double(entry: DayEntry, limit: dt.date) -> DayEntry | None:
    if from_iso(entry.date_iso) > limit:
        return None
    fraction = max(entry.a.fraction, entry.b.fraction, MIN_DOUBLE_FRACTION)
    return synchronize_double_day(entry, fraction, _double_day_type(entry))


def disable_double(entry: DayEntry) -> DayEntry:
    if not entry.double_day:
        return entry
    # Parent A keeps the day.
    return _drop_other_on_overlap(replace(entry, double_day=False), "a")


def apply_to_parent(
    entry: DayEntry,
    parent: ParentKey,
    side: ParentEntry,
    *,
    make_double: bool,
    double_allowed: bool,
) -> DayEntry:
    e = replace(entry.with_parent(parent, side), double_day=False)
    other = e.parent(other_parent(parent))
    if side.fraction > 0.0 and other.fraction > 0.0:
        if make_double and double_allowed:
            day_type = DayType.SBL if side.type is DayType.OFF else side.type
            return synchronize_double_day(e, max(side.fraction, other.fraction), day_type)
        return e.with_parent(other_parent(parent), ZERO)
    return e


def apply_double(entry: DayEntry, fraction: float, day_type: DayType, *, double_allowed: bool) -> DayEntry:
    if double_allowed:
        return synchronize_double_day(entry, fraction, day_type)
    return DayEntry(
        date_iso=entry.date_iso,
        a=ParentEntry(fraction=fraction, type=day_type, reserved=False),
        b=ZERO,
        double_day=False,
    )


def _put(entries: dict[str, DayEntry], entry: DayEntry) -> None:
    if entry.is_default:
        entries.pop(entry.date_iso, None)
    else:
        entries[entry.date_iso] = entry


def _with_entry(state: PlannerState, entry: DayEntry | None) -> PlannerState:
    if entry is None or entry == state.entry(entry.date_iso):
        return state
    entries = dict(state.entries)
    _put(entries, entry)
    return replace(state, entries=freeze_entries(entries))


# ── action handlers ──────────────────────────────────────────────────────────

def _set_dob(state: PlannerState, action: SetDob) -> PlannerState:
    return replace(state, config=replace(state.config, child_dob=action.dob))


def _set_month(state: PlannerState, action: SetMonth) -> PlannerState:
    return replace(state, month_cursor=start_of_month(action.date))


def _shift_month(state: PlannerState, action: ShiftMonth) -> PlannerState:
    return replace(state, month_cursor=add_months(state.month_cursor, action.months))


def _jump_to_dob(state: PlannerState, action: JumpToDob) -> PlannerState:
    return replace(state, month_cursor=start_of_month(from_iso(state.config.child_dob)))


def _go_to_today(state: PlannerState, action: GoToToday) -> PlannerState:
    return replace(state, month_cursor=start_of_month(action.today))


def _select_single(state: PlannerState, action: SelectSingle) -> PlannerState:
    return replace(state, selection=frozenset({action.iso}), anchor=action.iso)


def _toggle_multi(state: PlannerState, action: ToggleMulti) -> PlannerState:
    return replace(state, selection=state.selection ^ {action.iso}, anchor=action.iso)


def _range_select(state: PlannerState, action: RangeSelect) -> PlannerState:
    if state.anchor is None:
        return state
    return replace(state, selection=state.selection | frozenset(iso_range(state.anchor, action.iso)))


def _select_visible_month(state: PlannerState, action: SelectVisibleMonth) -> PlannerState:
    days = enumerate_days(start_of_month(state.month_cursor), end_of_month(state.month_cursor))
    return replace(state, selection=frozenset(to_iso(d) for d in days), anchor=None)


def _clear_selection(state: PlannerState, action: ClearSelection) -> PlannerState:
    return replace(state, selection=frozenset(), anchor=None)


def _update_day(state: PlannerState, action: UpdateDay) -> PlannerState:
    entry = set_parent_field(state.entry(action.iso), action.parent, action.field, action.value)
    return _with_entry(state, entry)


def _toggle_double(state: PlannerState, action: ToggleDouble) -> PlannerState:
    entry = state.entry(action.iso)
    if action.enable:
        return _with_entry(state, enable_double(entry, state.double_day_limit))
    return _with_entry(state, disable_double(entry))


def _bulk_apply_parent(state: PlannerState, action: BulkApplyParent) -> PlannerState:
    limit = state.double_day_limit
    side = ParentEntry(fraction=action.fraction, type=action.day_type, reserved=action.reserved)
    entries = dict(state.entries)
    for iso in sorted(state.selection):
        _put(entries, apply_to_parent(
            state.entry(iso),
            action.parent,
            side,
            make_double=action.make_double_if_allowed,
            double_allowed=from_iso(iso) <= limit,
        ))
    return replace(state, entries=freeze_entries(entries))


def _bulk_apply_double(state: PlannerState, action: BulkApplyDouble) -> PlannerState:
    limit = state.double_day_limit
    entries = dict(state.entries)
    for iso in sorted(state.selection):
        _put(entries, apply_double(
            state.entry(iso),
            action.fraction,
            action.day_type,
            double_allowed=from_iso(iso) <= limit,
        ))
    return replace(state, entries=freeze_entries(entries))


def _clear_day(state: PlannerState, action: ClearDay) -> PlannerState:
    if action.iso not in state.entries:
        return state
    entries = dict(state.entries)
    del entries[action.iso]
    return replace(state, entries=freeze_entries(entries))


def _replace_all(state: PlannerState, action: ReplaceAll) -> PlannerState:
    return replace(state, config=action.config, entries=freeze_entries(action.entries))


def _reset(state: PlannerState, action: Reset) -> PlannerState:
    return initial_state(today=action.today)


_HANDLERS: Mapping[type, Callable[[PlannerState, Action], PlannerState]] = {
    SetDob: _set_dob,
    SetMonth: _set_month,
    ShiftMonth: _shift_month,
    JumpToDob: _jump_to_dob,
    GoToToday: _go_to_today,
    SelectSingle: _select_single,
    ToggleMulti: _toggle_multi,
    RangeSelect: _range_select,
    SelectVisibleMonth: _select_visible_month,
    ClearSelection: _clear_selection,
    UpdateDay: _update_day,
    ToggleDouble: _toggle_double,
    BulkApplyParent: _bulk_apply_parent,
    BulkApplyDouble: _bulk_apply_double,
    ClearDay: _clear_day,
    ReplaceAll: _replace_all,
    Reset: _reset,
}


def reduce(state: PlannerState, action: Action) -> PlannerState:
    """
    Apply one action.  Rejected actions return `state` itself, so callers
    can detect a no-op with ``is``.
    """
    try:
        handler = _HANDLERS[type(action)]
    except KeyError:
        raise TypeError(f"Unknown planner action: {action!r}") from None
    return handler(state, action)
