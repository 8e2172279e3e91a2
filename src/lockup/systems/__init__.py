"""Game systems for managing different aspects of custody."""

from lockup.systems.base import BaseSystem
from lockup.systems.custody import (
    ClothingLayer,
    CustodyConfig,
    CustodyData,
    CustodyManager,
    InventorySnapshot,
    SpecialHandling,
    StoredItem,
)
from lockup.systems.game_context import GameContext

__all__ = [
    "BaseSystem",
    "ClothingLayer",
    "CustodyConfig",
    "CustodyData",
    "CustodyManager",
    "GameContext",
    "InventorySnapshot",
    "SpecialHandling",
    "StoredItem",
]
