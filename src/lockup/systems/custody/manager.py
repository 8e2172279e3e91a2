"""Custody system: seize belongings at arrest, hand them back at release.

This module provides the CustodyManager, the system a host game talks to
when a player is arrested, booked and released. It ties together:

- InventoryCollector: reads the player's slots and classifies every item
- ClothingVault: copies the civilian outfit before prison attire goes on
- SnapshotStore: keeps one active snapshot per player plus exit positions
- PersistenceGateway: writes everything to a durable key-value slot

What gets recorded per arrest:
- Every storable item with its contraband flag (cash and ammunition are not
  recorded; weapons are recorded for an unloaded return)
- The player's clothing layers, position and serialized crime data
- Arrest time and a unique arrest id

Every change is saved immediately. In addition, update() drives a periodic
autosave from the game loop, and F5 forces a save for debugging. No public
method raises: failures, including errors raised by event subscribers, are
logged and a safe default is returned.

Example usage:
    custody = CustodyManager()
    custody.setup(context)

    # Booking
    arrest_id = custody.create_inventory_snapshot(player)

    # Release
    for item in custody.get_legal_items_for_player(player):
        give_back(item)
    custody.restore_player_clothing(player)
    custody.clear_player_snapshot(player)
"""

from __future__ import annotations

import dataclasses
import json
import logging
from typing import TYPE_CHECKING, Any, ClassVar

import arcade

from lockup.events import (
    ClothingRestoredEvent,
    CustodyDataClearedEvent,
    InventorySnapshotClearedEvent,
    InventorySnapshotCreatedEvent,
)
from lockup.systems.custody.base import CustodyBaseManager
from lockup.systems.custody.clothing import ClothingVault
from lockup.systems.custody.collector import InventoryCollector
from lockup.systems.custody.config import CustodyConfig
from lockup.systems.custody.interfaces import resolve_player_id
from lockup.systems.custody.persistence import JsonFileKeyValueStore, PersistenceGateway
from lockup.systems.custody.store import SnapshotStore

if TYPE_CHECKING:
    from collections.abc import Callable
    from datetime import datetime

    from arcade.types import Point3

    from lockup.events import Event
    from lockup.systems.custody.base import InventorySnapshot, Position, StoredItem
    from lockup.systems.custody.interfaces import InventorySource, KeyValueStore, PlayerHandle
    from lockup.systems.game_context import GameContext

logger = logging.getLogger(__name__)


def serialize_crime_data(crime_data: Any) -> str | None:  # noqa: ANN401
    """Serialize the host's crime data to JSON text, or None if there is none or it fails."""
    if crime_data is None:
        return None
    try:
        if dataclasses.is_dataclass(crime_data) and not isinstance(crime_data, type):
            crime_data = dataclasses.asdict(crime_data)
        elif hasattr(crime_data, "to_dict"):
            crime_data = crime_data.to_dict()
        return json.dumps(crime_data, default=str)
    except (TypeError, ValueError) as e:
        logger.debug("Error serializing crime data: %s", e)
        return None


class CustodyManager(CustodyBaseManager):
    """Manages arrest snapshots for every player.

    The manager is an ordinary object: create it, register it with the game
    context and keep a reference. Custody data is loaded (and expired
    snapshots purged) when it is constructed.

    Attributes:
        config: Frozen custody configuration.
        gateway: Persistence gateway for the custody data.
        snapshots: Snapshot store holding the schema root.
        collector: Item collector used at booking.
        vault: Clothing capture and restore.
        elapsed_time: Game time accumulated by update(), drives autosave.
    """

    name: ClassVar[str] = "custody"

    def __init__(
        self,
        store: KeyValueStore | None = None,
        config: CustodyConfig | None = None,
        clock: Callable[[], datetime] | None = None,
    ) -> None:
        """Initialize the custody manager and load persisted data.

        Args:
            store: Durable key-value store. If None, a JSON file at
                config.save_path is used.
            config: Custody configuration. If None, it is read from settings.
            clock: Returns the current UTC time. Defaults to datetime.now(UTC).
        """
        self.config = config or CustodyConfig.from_settings()
        if store is None:
            store = JsonFileKeyValueStore(self.config.save_path)

        self.gateway = PersistenceGateway(
            store,
            save_key=self.config.save_key,
            retention=self.config.retention,
            autosave_interval=self.config.autosave_interval,
            clock=clock,
        )
        self.snapshots = SnapshotStore(self.gateway)
        self.collector = InventoryCollector()
        self.vault = ClothingVault()

        self.context: GameContext | None = None
        self.elapsed_time = 0.0
        self._arrests_in_progress: set[str] = set()

    def setup(self, context: GameContext) -> None:
        """Keep the context for publishing custody events."""
        self.context = context
        logger.debug("CustodyManager setup complete (%s)", self.get_data_stats())

    def update(self, delta_time: float, context: GameContext) -> None:
        """Advance game time and autosave when the interval has passed."""
        self.elapsed_time += delta_time
        self.auto_save(self.elapsed_time)

    def cleanup(self) -> None:
        """Save on shutdown."""
        self.force_save()
        self.context = None

    def on_key_press(self, symbol: int, modifiers: int, context: GameContext) -> bool:
        """Force a save on F5."""
        if symbol == arcade.key.F5 and self.config.force_save_hotkey_enabled:
            if self.force_save():
                logger.info("Custody data force-saved")
            return True
        return False

    def _publish(self, event: Event) -> None:
        """Publish event; subscriber errors are logged so the custody change still completes."""
        if self.context is None:
            return
        try:
            self.context.event_bus.publish(event)
        except Exception:
            logger.exception("Error in %s subscriber", type(event).__name__)

    def _player_id(self, player: PlayerHandle | str | None) -> str | None:
        if player is None:
            return None
        if isinstance(player, str):
            return player or None
        return resolve_player_id(player)

    def _recent_vehicle_storage(self, player: PlayerHandle) -> InventorySource | None:
        storage = player.last_vehicle_storage
        if storage is None or player.time_since_vehicle_exit >= self.config.vehicle_exit_window:
            return None
        return storage

    def create_inventory_snapshot(self, player: PlayerHandle | None) -> str | None:
        """Seize the player's belongings and outfit and record them.

        Any earlier active snapshot of the same player is deactivated. A
        second call for a player whose booking is still running (for example
        from an event handler reacting to the first) is refused.

        Args:
            player: The arrested player.

        Returns:
            The new arrest id, or None if nothing was recorded.
        """
        if player is None:
            logger.error("Cannot create inventory snapshot for null player")
            return None

        try:
            player_id = resolve_player_id(player)
        except Exception:
            logger.exception("Could not resolve player identity")
            return None

        if player_id in self._arrests_in_progress:
            logger.warning("Snapshot for %s is already being created, ignoring concurrent request", player_id)
            return None

        self._arrests_in_progress.add(player_id)
        try:
            inventory = player.inventory
            if inventory is None:
                logger.warning("Could not find inventory to capture for %s", player.name)
                items = []
            else:
                items = self.collector.collect(inventory, self._recent_vehicle_storage(player))

            clothing = self.vault.capture(player.appearance)
            arrest_id = self.snapshots.create_snapshot(
                player_id,
                player.name,
                items,
                clothing,
                player.position,
                crime_data=serialize_crime_data(player.crime_data),
            )
        except Exception:
            logger.exception("Error creating inventory snapshot")
            return None
        finally:
            self._arrests_in_progress.discard(player_id)

        self._publish(InventorySnapshotCreatedEvent(player_id, player.name, arrest_id, len(items)))
        return arrest_id

    def get_active_snapshot(self, player: PlayerHandle | str | None) -> InventorySnapshot | None:
        """Active snapshot of player, if any."""
        player_id = self._player_id(player)
        if player_id is None:
            return None
        return self.snapshots.active_snapshot_for(player_id)

    def get_snapshot_history(self, player: PlayerHandle | str | None) -> list[InventorySnapshot]:
        """Every snapshot still on record for player, oldest first."""
        player_id = self._player_id(player)
        if player_id is None:
            return []
        return self.snapshots.snapshots_for(player_id)

    def get_legal_items_for_player(self, player: PlayerHandle | str | None) -> list[StoredItem]:
        """Items of the active snapshot that are handed back on release."""
        player_id = self._player_id(player)
        if player_id is None:
            return []
        try:
            items = self.snapshots.legal_items_for(player_id)
        except Exception:
            logger.exception("Error getting legal items for player")
            return []
        logger.info("Retrieved %d legal items for %s", len(items), player_id)
        return items

    def get_contraband_items_for_player(self, player: PlayerHandle | str | None) -> list[StoredItem]:
        """Items of the active snapshot that are kept as evidence."""
        player_id = self._player_id(player)
        if player_id is None:
            return []
        try:
            items = self.snapshots.contraband_items_for(player_id)
        except Exception:
            logger.exception("Error getting contraband items for player")
            return []
        logger.info("Retrieved %d contraband items for %s", len(items), player_id)
        return items

    def clear_player_snapshot(self, player: PlayerHandle | str | None) -> None:
        """Release the player's active snapshot. Does nothing if there is none."""
        player_id = self._player_id(player)
        if player_id is None:
            return
        try:
            released = self.snapshots.clear_snapshot(player_id)
        except Exception:
            logger.exception("Error clearing player snapshot")
            return
        if released is not None:
            self._publish(InventorySnapshotClearedEvent(player_id, released.arrest_id))

    def restore_player_clothing(self, player: PlayerHandle | None) -> bool:
        """Put the outfit captured at booking back on the player.

        Returns:
            True if clothing was restored.
        """
        if player is None:
            logger.error("Cannot restore clothing for null player")
            return False
        try:
            player_id = resolve_player_id(player)
            snapshot = self.snapshots.active_snapshot_for(player_id)
            restored = self.vault.restore(snapshot, player.appearance)
        except Exception:
            logger.exception("Error restoring player clothing")
            return False
        if restored and snapshot is not None:
            self._publish(ClothingRestoredEvent(player_id, len(snapshot.original_clothing)))
        return restored

    def store_player_exit_position(self, player_name: str, position: Point3) -> None:
        """Remember where player_name should reappear; overwrites any earlier position."""
        if not player_name:
            logger.warning("Cannot store exit position without a player name")
            return
        try:
            self.snapshots.store_exit_position(player_name, position)
        except Exception:
            logger.exception("Error storing exit position")

    def get_player_exit_position(self, player_name: str) -> Position | None:
        if not player_name:
            return None
        return self.snapshots.exit_position_for(player_name)

    def auto_save(self, elapsed_time: float) -> bool:
        """Save if the autosave interval has passed since the last autosave.

        Args:
            elapsed_time: Total game time in seconds.

        Returns:
            True if a save was attempted.
        """
        return self.gateway.tick(elapsed_time, self.snapshots.data)

    def force_save(self) -> bool:
        return self.snapshots.save()

    def clear_all_data(self) -> None:
        """Wipe every snapshot and exit position."""
        self.snapshots.clear_all()
        self._publish(CustodyDataClearedEvent())

    def get_data_stats(self) -> str:
        """Summary like "Active snapshots: 1, Stored positions: 2"."""
        return self.snapshots.stats()
