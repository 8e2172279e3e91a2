"""Unit tests for the persistence gateway and key-value stores."""

import json
import unittest
from datetime import timedelta
from pathlib import Path
from unittest.mock import MagicMock

import pytest
from fakes import NOW

from lockup.systems.custody.base import (
    ClothingLayer,
    CustodyData,
    InventorySnapshot,
    SpecialHandling,
    StoredItem,
)
from lockup.systems.custody.persistence import InMemoryKeyValueStore, JsonFileKeyValueStore, PersistenceGateway

SAVE_KEY = "BehindBars_PlayerData"


def sample_data() -> CustodyData:
    pistol = StoredItem(
        item_id="pistol_9mm",
        item_name="9mm Pistol",
        stack_count=1,
        is_contraband=False,
        item_type="WeaponItemInstance",
        confiscation_time=NOW,
        special_handling=SpecialHandling.EMPTY_WEAPON,
    )
    knife = StoredItem(
        item_id="switchblade",
        item_name="Switchblade",
        stack_count=1,
        is_contraband=True,
        item_type="ItemInstance",
        confiscation_time=NOW,
    )
    snapshot = InventorySnapshot(
        player_id="76561198000000001",
        player_name="Kyle",
        arrest_id="3f1c2b1e-0000-4000-8000-000000000001",
        items=[pistol, knife],
        original_clothing=[ClothingLayer("Avatar/Layers/Top/Hoodie", (0.2, 0.3, 0.4, 1.0))],
        last_position=(12.5, 0.0, -3.0),
        arrest_time=NOW,
        crime_data='{"charges": ["possession"]}',
    )
    return CustodyData(snapshots=[snapshot], exit_positions={"Kyle": (10.0, 0.0, 5.0)})


class TestPersistenceGateway(unittest.TestCase):
    """Test saving, loading and autosave ticks."""

    def setUp(self) -> None:
        """Create a gateway over an in-memory store with a fixed clock."""
        self.now = [NOW]
        self.store = InMemoryKeyValueStore()
        self.gateway = PersistenceGateway(self.store, SAVE_KEY, clock=lambda: self.now[0])

    def test_save_then_load_restores_everything(self) -> None:
        """Test that every field survives a save and a fresh load."""
        data = sample_data()

        assert self.gateway.save(data) is True
        loaded = PersistenceGateway(self.store, SAVE_KEY, clock=lambda: NOW).load()

        assert loaded == data
        assert loaded.last_save_time == NOW

    def test_save_writes_camel_case_payload(self) -> None:
        """Test the persisted key names."""
        self.gateway.save(sample_data())

        payload = json.loads(self.store.flushed[SAVE_KEY])

        assert set(payload) == {"playerSnapshots", "storedExitPositions", "lastSaveTime", "version"}
        entry = payload["playerSnapshots"][0]
        assert entry["playerId"] == "76561198000000001"
        assert entry["isActive"] is True
        assert entry["items"][0]["specialHandling"] == "empty_weapon"
        assert entry["items"][1]["specialHandling"] == ""
        assert entry["originalClothing"][0]["colorRGBA"] == [0.2, 0.3, 0.4, 1.0]
        assert payload["storedExitPositions"] == {"Kyle": [10.0, 0.0, 5.0]}

    def test_save_is_indented(self) -> None:
        """Test that the payload is human-readable JSON."""
        self.gateway.save(CustodyData())
        assert "\n  " in self.store.values[SAVE_KEY]

    def test_save_flushes(self) -> None:
        """Test that saving makes the write durable."""
        self.gateway.save(CustodyData())
        assert self.store.flush_count == 1
        assert SAVE_KEY in self.store.flushed

    def test_failed_flush_returns_false(self) -> None:
        """Test that store errors are reported, not raised."""
        store = MagicMock()
        store.flush.side_effect = OSError("disk full")
        gateway = PersistenceGateway(store, SAVE_KEY, clock=lambda: NOW)

        assert gateway.save(CustodyData()) is False

    def test_unserializable_data_leaves_slot_untouched(self) -> None:
        """Test that a serialization error neither writes nor stamps the data."""
        self.gateway.save(CustodyData())
        before = dict(self.store.values)
        data = CustodyData(
            snapshots=[InventorySnapshot(player_id="P1", player_name="P1", arrest_id="a", crime_data=object())]
        )

        assert self.gateway.save(data) is False
        assert self.store.values == before
        assert data.last_save_time is None

    def test_load_missing_slot_returns_empty_data(self) -> None:
        """Test a first run with nothing saved."""
        assert self.gateway.load() == CustodyData()

    def test_load_blank_slot_returns_empty_data(self) -> None:
        """Test that whitespace-only payloads are treated as empty."""
        self.store.set_string(SAVE_KEY, "   ")
        assert self.gateway.load() == CustodyData()

    def test_load_corrupt_json_returns_empty_data(self) -> None:
        """Test that unparseable payloads are discarded."""
        self.store.set_string(SAVE_KEY, "{not json")
        assert self.gateway.load() == CustodyData()

    def test_load_malformed_payload_returns_empty_data(self) -> None:
        """Test that structurally wrong payloads are discarded."""
        for payload in (
            "[]",
            '{"playerSnapshots": [{"playerName": "no id"}]}',
            '{"playerSnapshots": [{"playerId": "P1", "arrestId": "a", "arrestTime": "yesterday"}]}',
            '{"storedExitPositions": {"P1": [1, 2]}}',
        ):
            self.store.set_string(SAVE_KEY, payload)
            assert self.gateway.load() == CustodyData(), payload

    def test_load_out_of_range_numbers_returns_empty_data(self) -> None:
        """Test that infinite numbers in the payload are treated as corruption."""
        item = {"itemId": "x", "confiscationTime": NOW.isoformat(), "stackCount": 1e999}
        snapshot = {"playerId": "P1", "arrestId": "a", "arrestTime": NOW.isoformat(), "items": [item]}
        for payload in ({"version": 1e999}, {"playerSnapshots": [snapshot]}):
            self.store.set_string(SAVE_KEY, json.dumps(payload))
            assert self.gateway.load() == CustodyData(), payload

    def test_load_deeply_nested_payload_returns_empty_data(self) -> None:
        """Test that JSON too deep to decode is treated as corruption."""
        self.store.set_string(SAVE_KEY, "[" * 100_000 + "]" * 100_000)
        assert self.gateway.load() == CustodyData()

    def test_load_clamps_stack_count(self) -> None:
        """Test that stored stack counts below one are read back as one."""
        items = [
            {"itemId": "a", "confiscationTime": NOW.isoformat(), "stackCount": 0},
            {"itemId": "b", "confiscationTime": NOW.isoformat(), "stackCount": -4},
            {"itemId": "c", "confiscationTime": NOW.isoformat(), "stackCount": 3},
        ]
        payload = {
            "playerSnapshots": [{"playerId": "P1", "arrestId": "a", "arrestTime": NOW.isoformat(), "items": items}]
        }
        self.store.set_string(SAVE_KEY, json.dumps(payload))

        loaded = self.gateway.load()

        assert [i.stack_count for i in loaded.snapshots[0].items] == [1, 1, 3]

    def test_load_read_error_returns_empty_data(self) -> None:
        """Test that a failing store read still starts the game."""
        store = MagicMock()
        store.get_string.side_effect = OSError("permission denied")

        assert PersistenceGateway(store, SAVE_KEY).load() == CustodyData()

    def test_load_sweeps_expired_snapshots_and_saves(self) -> None:
        """Test that old arrests are purged on load and the purge is persisted."""
        self.gateway.save(sample_data())
        flushes = self.store.flush_count

        self.now[0] = NOW + timedelta(days=8)
        loaded = self.gateway.load()

        assert loaded.snapshots == []
        assert loaded.exit_positions == {"Kyle": (10.0, 0.0, 5.0)}
        assert self.store.flush_count == flushes + 1
        assert json.loads(self.store.flushed[SAVE_KEY])["playerSnapshots"] == []

    def test_load_without_expired_snapshots_does_not_save(self) -> None:
        """Test that a clean load does not write."""
        self.gateway.save(sample_data())
        flushes = self.store.flush_count

        self.gateway.load()

        assert self.store.flush_count == flushes

    def test_load_accepts_naive_timestamps_as_utc(self) -> None:
        """Test that timestamps without offset are read as UTC."""
        payload = {
            "playerSnapshots": [
                {"playerId": "P1", "arrestId": "a", "arrestTime": "2026-10-19T11:00:00", "isActive": True}
            ]
        }
        self.store.set_string(SAVE_KEY, json.dumps(payload))

        loaded = self.gateway.load()

        assert loaded.snapshots[0].arrest_time == NOW - timedelta(hours=1)

    def test_tick_saves_only_after_interval(self) -> None:
        """Test the autosave cadence."""
        data = CustodyData()

        assert self.gateway.tick(10.0, data) is False
        assert self.gateway.tick(30.0, data) is False
        assert self.gateway.tick(31.0, data) is True
        assert self.gateway.tick(50.0, data) is False
        assert self.gateway.tick(61.5, data) is True
        assert self.store.flush_count == 2

    def test_tick_stamps_last_save_time(self) -> None:
        """Test that autosaves record when they happened."""
        data = CustodyData()
        self.gateway.tick(45.0, data)
        assert data.last_save_time == NOW


class TestJsonFileKeyValueStore:
    """Test the on-disk key-value store."""

    def test_flush_and_reopen(self, tmp_path: Path) -> None:
        """Test that flushed values are read back by a new store."""
        path = tmp_path / "saves" / "custody.json"
        store = JsonFileKeyValueStore(path)
        store.set_string(SAVE_KEY, '{"version": 1}')
        store.flush()

        assert JsonFileKeyValueStore(path).get_string(SAVE_KEY) == '{"version": 1}'

    def test_unflushed_values_are_not_written(self, tmp_path: Path) -> None:
        """Test that set_string alone does not touch the disk."""
        path = tmp_path / "custody.json"
        JsonFileKeyValueStore(path).set_string(SAVE_KEY, "x")

        assert not path.exists()

    def test_missing_file_is_empty(self, tmp_path: Path) -> None:
        """Test a fresh store."""
        assert JsonFileKeyValueStore(tmp_path / "nope.json").get_string(SAVE_KEY) is None

    @pytest.mark.parametrize("content", ["{broken", "[1, 2, 3]"])
    def test_unreadable_file_is_empty(self, tmp_path: Path, content: str) -> None:
        """Test that corrupt or non-object files start empty."""
        path = tmp_path / "custody.json"
        path.write_text(content, encoding="utf-8")

        assert JsonFileKeyValueStore(path).get_string(SAVE_KEY) is None

    @pytest.mark.parametrize(
        "content", [b"\xff\xfe garbage", b"[" * 100_000 + b"]" * 100_000], ids=["invalid-utf8", "too-deep"]
    )
    def test_undecodable_file_is_empty(self, tmp_path: Path, content: bytes) -> None:
        """Test that invalid UTF-8 or overly nested files start empty."""
        path = tmp_path / "custody.json"
        path.write_bytes(content)

        assert JsonFileKeyValueStore(path).get_string(SAVE_KEY) is None

    def test_gateway_over_file_store(self, tmp_path: Path) -> None:
        """Test a full save and load through the file store."""
        path = tmp_path / "custody.json"
        PersistenceGateway(JsonFileKeyValueStore(path), SAVE_KEY, clock=lambda: NOW).save(sample_data())

        loaded = PersistenceGateway(JsonFileKeyValueStore(path), SAVE_KEY, clock=lambda: NOW).load()

        assert loaded.snapshots == sample_data().snapshots
        assert loaded.exit_positions == {"Kyle": (10.0, 0.0, 5.0)}
