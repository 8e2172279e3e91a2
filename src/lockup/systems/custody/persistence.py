"""Durable storage for custody data.

All custody state lives in a single string slot of a key-value store, the way
PlayerPrefs-style stores work. The gateway writes the whole schema root as
indented JSON on every mutation and on a periodic autosave tick, and reads
it back once at startup.

Two stores are provided:
- JsonFileKeyValueStore: a JSON object on disk, one entry per key
- InMemoryKeyValueStore: for tests and headless hosts

Loading never fails: a missing, empty or corrupt slot yields an empty
CustodyData so the game can always continue. Saving never raises either; a
failed save is logged and leaves the previously flushed data in place.

Example usage:
    store = JsonFileKeyValueStore(Path.cwd() / "saves" / "custody.json")
    gateway = PersistenceGateway(store, save_key="BehindBars_PlayerData")
    data = gateway.load()
    ...
    gateway.save(data)
"""

from __future__ import annotations

import json
import logging
from datetime import UTC, datetime, timedelta
from typing import TYPE_CHECKING

from lockup.systems.custody.base import CustodyData, CustodyDataError
from lockup.systems.custody.retention import DEFAULT_RETENTION, sweep_expired

if TYPE_CHECKING:
    from collections.abc import Callable
    from pathlib import Path

    from lockup.systems.custody.interfaces import KeyValueStore

logger = logging.getLogger(__name__)


class JsonFileKeyValueStore:
    """Key-value store persisted as one JSON object in a file.

    Values are staged in memory by set_string() and written out by flush().
    The file is rewritten in place; a crash in the middle of flush() can leave
    it truncated, in which case the next load starts from empty data.

    Attributes:
        path: Location of the JSON file.
    """

    def __init__(self, path: Path) -> None:
        """Open the store, reading the file if it exists.

        Args:
            path: JSON file location. Parent directories are created on flush.
        """
        self.path = path
        self._values: dict[str, str] = {}

        if not self.path.exists():
            return

        try:
            with self.path.open(encoding="utf-8") as f:
                raw = json.load(f)
        except (OSError, RecursionError, ValueError):
            logger.exception("Could not read key-value file %s, starting empty", self.path)
            return

        if isinstance(raw, dict):
            self._values = {str(key): value for key, value in raw.items() if isinstance(value, str)}
        else:
            logger.warning("Key-value file %s does not hold an object, starting empty", self.path)

    def set_string(self, key: str, value: str) -> None:
        self._values[key] = value

    def get_string(self, key: str) -> str | None:
        return self._values.get(key)

    def flush(self) -> None:
        """Write all values to disk."""
        self.path.parent.mkdir(parents=True, exist_ok=True)
        with self.path.open("w", encoding="utf-8") as f:
            json.dump(self._values, f, indent=2)


class InMemoryKeyValueStore:
    """Key-value store that keeps values in a dict.

    Attributes:
        values: Staged values.
        flushed: Values as of the last flush().
        flush_count: Number of flush() calls.
    """

    def __init__(self, values: dict[str, str] | None = None) -> None:
        self.values: dict[str, str] = dict(values or {})
        self.flushed: dict[str, str] = dict(self.values)
        self.flush_count = 0

    def set_string(self, key: str, value: str) -> None:
        self.values[key] = value

    def get_string(self, key: str) -> str | None:
        return self.values.get(key)

    def flush(self) -> None:
        self.flushed = dict(self.values)
        self.flush_count += 1


class PersistenceGateway:
    """Reads and writes the custody schema root to a key-value store.

    Attributes:
        store: Durable key-value store.
        save_key: Key of the slot holding the serialized data.
        retention: Snapshots older than this are purged on load.
        autosave_interval: Seconds between autosaves driven by tick().
        last_autosave: Elapsed time of the last autosave.
    """

    def __init__(
        self,
        store: KeyValueStore,
        save_key: str,
        retention: timedelta = DEFAULT_RETENTION,
        autosave_interval: float = 30.0,
        clock: Callable[[], datetime] | None = None,
    ) -> None:
        """Initialize the gateway.

        Args:
            store: Where the data is persisted.
            save_key: Key of the durable slot.
            retention: Retention window applied by load().
            autosave_interval: Minimum elapsed seconds between autosaves.
            clock: Returns the current UTC time. Defaults to datetime.now(UTC).
        """
        self.store = store
        self.save_key = save_key
        self.retention = retention
        self.autosave_interval = autosave_interval
        self.clock = clock or (lambda: datetime.now(UTC))
        self.last_autosave = 0.0

    def save(self, data: CustodyData) -> bool:
        """Stamp and write data to the durable slot.

        The payload is fully serialized before the store is touched, so a
        serialization error leaves the slot exactly as it was.

        Args:
            data: Schema root to persist.

        Returns:
            True if the data was written and flushed, False if any error occurred.
        """
        previous_save_time = data.last_save_time
        data.last_save_time = self.clock()
        try:
            payload = json.dumps(data.to_dict(), indent=2)
        except (TypeError, ValueError):
            data.last_save_time = previous_save_time
            logger.exception("Failed to serialize custody data")
            return False

        try:
            self.store.set_string(self.save_key, payload)
            self.store.flush()
        except Exception:
            logger.exception("Failed to save custody data")
            return False
        else:
            logger.debug("Custody data saved (%d snapshots)", len(data.snapshots))
            return True

    def load(self) -> CustodyData:
        """Read the schema root, falling back to empty data on any problem.

        Expired snapshots are swept right after a successful load; if any were
        removed, the trimmed data is saved immediately.

        Returns:
            The loaded data, or a fresh empty CustodyData.
        """
        try:
            payload = self.store.get_string(self.save_key)
        except Exception:
            logger.exception("Failed to read custody data")
            return CustodyData()

        if payload is None:
            logger.info("No existing custody data found - starting fresh")
            return CustodyData()
        if not payload.strip():
            logger.warning("Custody data slot is empty - starting fresh")
            return CustodyData()

        try:
            data = CustodyData.from_dict(json.loads(payload))
        except (json.JSONDecodeError, RecursionError, CustodyDataError):
            logger.exception("Custody data is corrupt - starting fresh")
            return CustodyData()

        logger.info(
            "Loaded custody data - %d snapshots, %d positions",
            len(data.snapshots),
            len(data.exit_positions),
        )

        if sweep_expired(data, self.clock(), self.retention):
            self.save(data)
        return data

    def tick(self, elapsed_time: float, data: CustodyData) -> bool:
        """Autosave if more than autosave_interval passed since the last autosave.

        Args:
            elapsed_time: Total game time in seconds, as tracked by the host.
            data: Schema root to persist.

        Returns:
            True if a save was attempted on this tick.
        """
        if elapsed_time - self.last_autosave <= self.autosave_interval:
            return False
        self.save(data)
        self.last_autosave = elapsed_time
        return True
