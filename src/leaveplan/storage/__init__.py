"""
leaveplan.storage
~~~~~~~~~~~~~~~~~

JSON wire format for plans and best-effort persistence to a key-value store.

Exported shape::

    {"config": {"childDob": "YYYY-MM-DD", "years": 5},
     "entries": {"YYYY-MM-DD": {"dateISO": ..., "a": {...}, "b": {...},
                                "doubleDay": false}}}

Basic usage::

    from leaveplan.storage import JsonFileStore, PlanStorage

    storage = PlanStorage(JsonFileStore("~/.leaveplan"))
    storage.save_config(config)          # never raises
    entries = storage.load_entries()     # {} when missing or unreadable

Public API
----------
dump_plan / load_plan            Export and validated import.
ConfigWire, EntryWire, PlanWire  pydantic models of the wire format.
PlanStorage                      Persistence adapter.
MemoryStore, JsonFileStore       KeyValueStore implementations.
"""

from __future__ import annotations

from leaveplan.storage.adapter import CONFIG_KEY, ENTRIES_KEY, PlanStorage
from leaveplan.storage.codec import (
    ConfigWire,
    EntryWire,
    PlanWire,
    check_invariants,
    config_from_dict,
    config_from_json,
    config_to_dict,
    dump_plan,
    entries_from_dict,
    entries_from_json,
    entries_to_dict,
    entry_from_dict,
    entry_to_dict,
    load_plan,
)
from leaveplan.storage.stores import JsonFileStore, KeyValueStore, MemoryStore

__all__ = [
    "CONFIG_KEY",
    "ConfigWire",
    "ENTRIES_KEY",
    "EntryWire",
    "JsonFileStore",
    "KeyValueStore",
    "MemoryStore",
    "PlanStorage",
    "PlanWire",
    "check_invariants",
    "config_from_dict",
    "config_from_json",
    "config_to_dict",
    "dump_plan",
    "entries_from_dict",
    "entries_from_json",
    "entries_to_dict",
    "entry_from_dict",
    "entry_to_dict",
    "load_plan",
]
