from __future__ import annotations

import json
import logging
from typing import Mapping

from leaveplan.domain.model import Config, DayEntry

from .codec import config_from_json, config_to_dict, entries_from_json, entries_to_dict
from .stores import KeyValueStore, MemoryStore

logger = logging.getLogger(__name__)

ENTRIES_KEY = "plp_v1_entries"
CONFIG_KEY = "plp_v1_config"


class PlanStorage:
    """
    Best-effort persistence of a plan's config and entries.

    Loads fall back to "absent" and saves are dropped on any error raised by
    the store or the codec; nothing is raised to the caller and the in-memory
    plan stays authoritative.
    """

    def __init__(self, store: KeyValueStore | None = None) -> None:
        self._store: KeyValueStore = store if store is not None else MemoryStore()

    def load_config(self) -> Config | None:
        try:
            raw = self._store.get(CONFIG_KEY)
            return None if raw is None else config_from_json(raw)
        except Exception as exc:
            logger.warning("Could not load config: %s", exc)
            return None

    def save_config(self, config: Config) -> None:
        try:
            self._store.set(CONFIG_KEY, json.dumps(config_to_dict(config)))
        except Exception as exc:
            logger.warning("Could not save config: %s", exc)

    def load_entries(self) -> dict[str, DayEntry]:
        try:
            raw = self._store.get(ENTRIES_KEY)
            return {} if raw is None else entries_from_json(raw)
        except Exception as exc:
            logger.warning("Could not load entries: %s", exc)
            return {}

    def save_entries(self, entries: Mapping[str, DayEntry]) -> None:
        try:
            self._store.set(ENTRIES_KEY, json.dumps(entries_to_dict(entries)))
        except Exception as exc:
            logger.warning("Could not save entries: %s", exc)

    @property
    def store(self) -> KeyValueStore:
        return self._store

    def __repr__(self) -> str:
        return f"PlanStorage(store={self._store!r})"
