"""Tests for snapshot stores and engine persistence."""
from __future__ import annotations

import json
import logging

import pytest

from tick_pet import (
    JsonFileStore,
    LifeStage,
    ManualClock,
    MemoryStore,
    PetEngine,
    SnapshotError,
    SnapshotStore,
)


def test_stores_satisfy_protocol(tmp_path):
    assert isinstance(MemoryStore(), SnapshotStore)
    assert isinstance(JsonFileStore(tmp_path / "pet.json"), SnapshotStore)


class TestMemoryStore:
    def test_empty(self):
        assert MemoryStore().load() is None

    def test_copies_on_save_and_load(self):
        """Callers can mutate what they saved or loaded without touching the store."""
        store = MemoryStore()
        data = {"hunger": 50.0}
        store.save(data)
        data["hunger"] = 1.0
        loaded = store.load()
        loaded["hunger"] = 2.0
        assert store.load() == {"hunger": 50.0}

    def test_clear(self):
        store = MemoryStore({"age": 3})
        store.clear()
        assert store.load() is None


class TestJsonFileStore:
    def test_missing_file(self, tmp_path):
        assert JsonFileStore(tmp_path / "nope.json").load() is None

    def test_round_trip(self, tmp_path):
        """Parent directories are created and no temp file is left behind."""
        store = JsonFileStore(tmp_path / "sub" / "pet.json")
        store.save({"age": 12, "life_stage": "baby"})
        assert store.load() == {"age": 12, "life_stage": "baby"}
        assert [p.name for p in (tmp_path / "sub").iterdir()] == ["pet.json"]

    def test_overwrite(self, tmp_path):
        store = JsonFileStore(tmp_path / "pet.json")
        store.save({"age": 1})
        store.save({"age": 2})
        assert store.load() == {"age": 2}

    def test_corrupt_file(self, tmp_path):
        path = tmp_path / "pet.json"
        path.write_text("{not json", encoding="utf-8")
        with pytest.raises(SnapshotError):
            JsonFileStore(path).load()

    def test_invalid_utf8(self, tmp_path):
        """Bytes that are not UTF-8 are a corrupt snapshot, not a crash."""
        path = tmp_path / "pet.json"
        path.write_bytes(b'{"hunger": 50, "name": "\xff\xfe"}')
        with pytest.raises(SnapshotError):
            JsonFileStore(path).load()

    def test_wrong_shape(self, tmp_path):
        path = tmp_path / "pet.json"
        path.write_text(json.dumps([1, 2, 3]), encoding="utf-8")
        with pytest.raises(SnapshotError):
            JsonFileStore(path).load()

    def test_clear(self, tmp_path):
        store = JsonFileStore(tmp_path / "pet.json")
        store.save({"age": 1})
        store.clear()
        store.clear()
        assert store.load() is None


class TestEnginePersistence:
    def test_save_then_load(self, tmp_path):
        store = JsonFileStore(tmp_path / "pet.json")
        engine = PetEngine(clock=ManualClock(1_000), seed=3, store=store)
        engine.run(35)
        engine.save()

        again = PetEngine(clock=ManualClock(1_000), seed=3, store=store)
        assert again.load() is True
        assert again.state == engine.state
        assert again.state.life_stage is LifeStage.BABY

    def test_corrupt_snapshot_starts_fresh(self, tmp_path, caplog):
        path = tmp_path / "pet.json"
        path.write_text("\x00\x01garbage", encoding="utf-8")
        engine = PetEngine(clock=ManualClock(1_000), seed=3, store=JsonFileStore(path))
        with caplog.at_level(logging.WARNING, logger="tick_pet.engine"):
            assert engine.load() is False
        assert engine.state.age == 0
        assert "unreadable snapshot" in caplog.text

    def test_start_survives_undecodable_file(self, tmp_path, caplog):
        path = tmp_path / "pet.json"
        path.write_bytes(b'{"hunger": 50, "x": "\xff"}')
        engine = PetEngine(clock=ManualClock(1_000), seed=3, store=JsonFileStore(path))
        with caplog.at_level(logging.WARNING, logger="tick_pet.engine"):
            assert engine.start() == 0
        assert engine.state.hunger == 100.0
        assert engine.state.last_active == 1_000
        assert "unreadable snapshot" in caplog.text

    def test_partially_valid_snapshot(self):
        """Usable fields survive next to unusable ones."""
        store = MemoryStore({"age": 50, "life_stage": "baby", "hunger": "??"})
        engine = PetEngine(clock=ManualClock(1_000), seed=3, store=store)
        assert engine.load() is True
        assert engine.state.age == 50
        assert engine.state.hunger == 100.0
