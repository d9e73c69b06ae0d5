from __future__ import annotations

import datetime as dt
import logging
from dataclasses import dataclass

from leaveplan.domain._exceptions import PlanImportError
from leaveplan.storage.adapter import PlanStorage
from leaveplan.storage.codec import dump_plan, load_plan

from .actions import Action, GoToToday, ReplaceAll, Reset
from .derived import Derived, compute_derived
from .reducer import reduce
from .state import PlannerState, initial_state

logger = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class ImportResult:
    ok: bool
    error: str | None = None


class Planner:
    """
    The single owner of a plan.

    All changes go through dispatch().  Config and entries are written
    through to `storage` whenever they change; derived views are recomputed
    on every read of `derived`.
    """

    def __init__(self, storage: PlanStorage | None = None, today: dt.date | None = None) -> None:
        self._storage = storage
        self._today = today or dt.date.today()
        config = storage.load_config() if storage is not None else None
        entries = storage.load_entries() if storage is not None else {}
        self._state: PlannerState = initial_state(config, entries, self._today)

    # ── dispatch ─────────────────────────────────────────────────────────────

    def dispatch(self, action: Action) -> PlannerState:
        if isinstance(action, Reset) and action.today is None:
            action = Reset(today=self._today)
        prev = self._state
        nxt = reduce(prev, action)
        if nxt is prev:
            logger.debug("No change from %s", type(action).__name__)
            return prev

        self._state = nxt
        logger.debug("Applied %s", type(action).__name__)
        self._persist(prev, nxt)
        return nxt

    def _persist(self, prev: PlannerState, nxt: PlannerState) -> None:
        if self._storage is None:
            return
        if nxt.config != prev.config:
            self._storage.save_config(nxt.config)
        if nxt.entries is not prev.entries:
            self._storage.save_entries(nxt.entries)

    def go_to_today(self) -> PlannerState:
        return self.dispatch(GoToToday(today=self._today))

    # ── import / export ──────────────────────────────────────────────────────

    def export_json(self) -> str:
        return dump_plan(self._state.config, self._state.entries)

    def import_json(self, text: str | bytes) -> ImportResult:
        """Replace config and entries with an exported plan, all or nothing."""
        try:
            config, entries = load_plan(text)
        except PlanImportError as exc:
            logger.warning("Rejected plan import: %s", exc)
            return ImportResult(ok=False, error=str(exc))
        self.dispatch(ReplaceAll(config=config, entries=entries))
        return ImportResult(ok=True)

    # ── views ────────────────────────────────────────────────────────────────

    @property
    def state(self) -> PlannerState:
        return self._state

    @property
    def derived(self) -> Derived:
        return compute_derived(self._state)

    @property
    def storage(self) -> PlanStorage | None:
        return self._storage

    def __repr__(self) -> str:
        return (
            f"Planner(child_dob={self._state.config.child_dob!r}, "
            f"entries={len(self._state.entries)}, "
            f"selected={len(self._state.selection)}, "
            f"storage={self._storage is not None})"
        )
