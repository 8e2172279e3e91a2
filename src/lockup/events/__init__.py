"""Module for events."""

from lockup.events.base import (
    ClothingRestoredEvent,
    CustodyDataClearedEvent,
    Event,
    EventBus,
    InventorySnapshotClearedEvent,
    InventorySnapshotCreatedEvent,
)

__all__ = [
    "ClothingRestoredEvent",
    "CustodyDataClearedEvent",
    "Event",
    "EventBus",
    "InventorySnapshotClearedEvent",
    "InventorySnapshotCreatedEvent",
]
