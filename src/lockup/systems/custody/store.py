"""In-memory snapshot table with write-through persistence."""

from __future__ import annotations

import logging
import uuid
from typing import TYPE_CHECKING

from lockup.systems.custody.base import CustodyData, InventorySnapshot, to_position

if TYPE_CHECKING:
    from collections.abc import Callable
    from datetime import datetime

    from arcade.types import Point3

    from lockup.systems.custody.base import ClothingLayer, Position, StoredItem
    from lockup.systems.custody.persistence import PersistenceGateway

logger = logging.getLogger(__name__)


class SnapshotStore:
    """Owns the custody schema root and every change made to it.

    The data is loaded through the gateway when the store is created and
    written back through it after every mutation. A player has at most one
    active snapshot: creating a new one deactivates the previous ones, which
    stay on record until the retention sweep removes them.

    Attributes:
        gateway: Persistence gateway used for loading and saving.
        data: The schema root.
    """

    def __init__(self, gateway: PersistenceGateway, clock: Callable[[], datetime] | None = None) -> None:
        """Load custody data through the gateway.

        Args:
            gateway: Persistence gateway to load from and save to.
            clock: Returns the current UTC time. Defaults to the gateway's clock.
        """
        self.gateway = gateway
        self.clock = clock or gateway.clock
        self.data = gateway.load()

    def save(self) -> bool:
        return self.gateway.save(self.data)

    def create_snapshot(
        self,
        player_id: str,
        player_name: str,
        items: list[StoredItem],
        clothing: list[ClothingLayer],
        position: Point3,
        crime_data: str | None = None,
    ) -> str:
        """Record a new active snapshot for player_id and save.

        Returns:
            The new arrest id.
        """
        arrest_id = str(uuid.uuid4())
        snapshot = InventorySnapshot(
            player_id=player_id,
            player_name=player_name,
            arrest_id=arrest_id,
            items=list(items),
            original_clothing=list(clothing),
            last_position=to_position(position),
            arrest_time=self.clock(),
            crime_data=crime_data,
        )

        for previous in self.data.snapshots:
            if previous.player_id == player_id and previous.is_active:
                previous.is_active = False
                logger.info("Deactivated previous snapshot %s for %s", previous.arrest_id, player_name)

        self.data.snapshots.append(snapshot)
        logger.info("Created inventory snapshot for %s with %d items (ID: %s)", player_name, len(items), arrest_id)
        self.save()
        return arrest_id

    def active_snapshot_for(self, player_id: str) -> InventorySnapshot | None:
        return next((s for s in self.data.snapshots if s.player_id == player_id and s.is_active), None)

    def snapshots_for(self, player_id: str) -> list[InventorySnapshot]:
        """All snapshots for player_id, oldest first, released ones included."""
        return [s for s in self.data.snapshots if s.player_id == player_id]

    def legal_items_for(self, player_id: str) -> list[StoredItem]:
        snapshot = self.active_snapshot_for(player_id)
        if snapshot is None:
            return []
        return [item for item in snapshot.items if not item.is_contraband]

    def contraband_items_for(self, player_id: str) -> list[StoredItem]:
        snapshot = self.active_snapshot_for(player_id)
        if snapshot is None:
            return []
        return [item for item in snapshot.items if item.is_contraband]

    def clear_snapshot(self, player_id: str) -> InventorySnapshot | None:
        """Deactivate the active snapshot for player_id and save.

        Returns:
            The snapshot that was released, or None if there was none.
        """
        snapshot = self.active_snapshot_for(player_id)
        if snapshot is None:
            logger.debug("No active snapshot to clear for %s", player_id)
            return None

        snapshot.is_active = False
        logger.info("Cleared inventory snapshot for %s", snapshot.player_name)
        self.save()
        return snapshot

    def store_exit_position(self, player_name: str, position: Point3) -> None:
        self.data.exit_positions[player_name] = to_position(position)
        logger.info("Stored exit position for %s: %s", player_name, self.data.exit_positions[player_name])
        self.save()

    def exit_position_for(self, player_name: str) -> Position | None:
        return self.data.exit_positions.get(player_name)

    def clear_all(self) -> None:
        """Drop every snapshot and position and save the empty data."""
        self.data = CustodyData()
        self.save()
        logger.info("All persistent custody data cleared")

    def stats(self) -> str:
        active = sum(1 for s in self.data.snapshots if s.is_active)
        return f"Active snapshots: {active}, Stored positions: {len(self.data.exit_positions)}"
