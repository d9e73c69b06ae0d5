"""
tests/storage/test_adapter.py

Covers:
  - MemoryStore and JsonFileStore basics
  - PlanStorage load / save round trips
  - Best-effort behaviour on any storage or decoding error
"""

import json
import logging

import pytest

from leaveplan.domain import Config, DayEntry, DayType, ParentEntry
from leaveplan.storage import CONFIG_KEY, ENTRIES_KEY, JsonFileStore, MemoryStore, PlanStorage


class FailingStore(MemoryStore):

    def set(self, key, value):
        raise PermissionError("read-only")


class DownStore(MemoryStore):

    def get(self, key):
        raise RuntimeError("backend down")

    def set(self, key, value):
        raise RuntimeError("backend down")


# ── Fixtures ──────────────────────────────────────────────────────────────────

@pytest.fixture
def entries():
    return {
        "2025-01-01": DayEntry("2025-01-01", a=ParentEntry(1, DayType.SBL, True)),
        "2025-01-02": DayEntry(
            "2025-01-02",
            a=ParentEntry(0.5, DayType.MIN),
            b=ParentEntry(0.5, DayType.MIN),
            double_day=True,
        ),
    }


@pytest.fixture(params=["memory", "file"])
def store(request, tmp_path):
    if request.param == "memory":
        return MemoryStore()
    return JsonFileStore(tmp_path / "plans")


# ── Stores ────────────────────────────────────────────────────────────────────

class TestStores:

    def test_get_missing(self, store):
        assert store.get("nothing") is None

    def test_set_get_delete(self, store):
        store.set("k", "v")
        assert store.get("k") == "v"
        store.delete("k")
        assert store.get("k") is None

    def test_delete_missing_is_noop(self, store):
        store.delete("never-set")

    def test_file_store_layout(self, tmp_path):
        s = JsonFileStore(tmp_path)
        s.set(CONFIG_KEY, "{}")
        assert (tmp_path / f"{CONFIG_KEY}.json").read_text(encoding="utf-8") == "{}"
        assert s.root == tmp_path

    def test_file_store_rejects_path_keys(self, tmp_path):
        with pytest.raises(ValueError):
            JsonFileStore(tmp_path).get("../escape")


# ── PlanStorage ───────────────────────────────────────────────────────────────

class TestPlanStorage:

    def test_empty(self, store):
        ps = PlanStorage(store)
        assert ps.load_config() is None
        assert ps.load_entries() == {}

    def test_config_round_trip(self, store):
        ps = PlanStorage(store)
        ps.save_config(Config("2023-03-03", 4))
        assert ps.load_config() == Config("2023-03-03", 4)

    def test_entries_round_trip(self, store, entries):
        ps = PlanStorage(store)
        ps.save_entries(entries)
        assert ps.load_entries() == entries

    def test_stored_shape(self, entries):
        store = MemoryStore()
        PlanStorage(store).save_entries(entries)
        data = json.loads(store.get(ENTRIES_KEY))
        assert data["2025-01-02"]["doubleDay"] is True
        assert data["2025-01-01"]["a"] == {"fraction": 1, "type": "SBL", "reserved": True}

    def test_default_store(self):
        assert isinstance(PlanStorage().store, MemoryStore)

    def test_save_failure_swallowed(self, entries, caplog):
        ps = PlanStorage(FailingStore())
        with caplog.at_level(logging.WARNING, logger="leaveplan.storage.adapter"):
            ps.save_config(Config())
            ps.save_entries(entries)
        assert len(caplog.records) == 2
        assert ps.load_config() is None

    def test_invalid_stored_entries(self):
        store = MemoryStore({ENTRIES_KEY: json.dumps({"2025-01-01": {"dateISO": "2025-01-01"}})})
        assert PlanStorage(store).load_entries() == {}

    def test_invalid_stored_config(self):
        store = MemoryStore({CONFIG_KEY: json.dumps({"childDob": "yesterday", "years": 5})})
        assert PlanStorage(store).load_config() is None

    def test_unreadable_file(self, tmp_path):
        root = tmp_path / "plans"
        root.mkdir()
        (root / f"{ENTRIES_KEY}.json").mkdir()      # a directory where a file should be
        assert PlanStorage(JsonFileStore(root)).load_entries() == {}

    def test_any_store_error_swallowed(self, entries, caplog):
        ps = PlanStorage(DownStore())
        with caplog.at_level(logging.WARNING, logger="leaveplan.storage.adapter"):
            assert ps.load_config() is None
            assert ps.load_entries() == {}
            ps.save_config(Config())
            ps.save_entries(entries)
        assert [r.levelno for r in caplog.records] == [logging.WARNING] * 4

    def test_deeply_nested_stored_json(self):
        nested = "[" * 200_000 + "]" * 200_000
        ps = PlanStorage(MemoryStore({CONFIG_KEY: nested, ENTRIES_KEY: nested}))
        assert ps.load_config() is None
        assert ps.load_entries() == {}
