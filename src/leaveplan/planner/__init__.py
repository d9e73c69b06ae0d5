"""
leaveplan.planner
~~~~~~~~~~~~~~~~~

The mutable side of a leave plan.  A Planner owns one PlannerState and
changes it only through dispatch(action); every action yields one complete
next state, or the unchanged state when the action is rejected.

Basic usage::

    from leaveplan.planner import Planner, SelectSingle, RangeSelect, BulkApplyParent
    from leaveplan.storage import MemoryStore, PlanStorage

    planner = Planner(PlanStorage(MemoryStore()))
    planner.dispatch(SelectSingle("2025-03-03"))
    planner.dispatch(RangeSelect("2025-03-07"))
    planner.dispatch(BulkApplyParent("a", fraction=1, day_type="SBL"))
    planner.derived.totals.a_sbl           # → 5.0

Public API
----------
Planner, ImportResult       The store.
PlannerState, initial_state Immutable state.
reduce                      Pure (state, action) → state.
Derived, GridCell           Views recomputed on each read.
coverage_warning            Text of the weekly coverage warning.
SetDob, SetMonth, ShiftMonth, JumpToDob, GoToToday, SelectSingle,
ToggleMulti, RangeSelect, SelectVisibleMonth, ClearSelection, UpdateDay,
ToggleDouble, BulkApplyParent, BulkApplyDouble, ClearDay, ReplaceAll, Reset
                            Actions.
"""

from __future__ import annotations

from leaveplan.planner.actions import (
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
from leaveplan.planner.derived import Derived, GridCell, compute_derived, coverage_warning
from leaveplan.planner.reducer import reduce
from leaveplan.planner.state import PlannerState, initial_state
from leaveplan.planner.store import ImportResult, Planner

__all__ = [
    "Action",
    "BulkApplyDouble",
    "BulkApplyParent",
    "ClearDay",
    "ClearSelection",
    "Derived",
    "GoToToday",
    "GridCell",
    "ImportResult",
    "JumpToDob",
    "Planner",
    "PlannerState",
    "RangeSelect",
    "ReplaceAll",
    "Reset",
    "SelectSingle",
    "SelectVisibleMonth",
    "SetDob",
    "SetMonth",
    "ShiftMonth",
    "ToggleDouble",
    "ToggleMulti",
    "UpdateDay",
    "compute_derived",
    "coverage_warning",
    "initial_state",
    "reduce",
]
